import sys

from PySide6.QtCore import QCoreApplication, QTimer
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from manchuapp import __version__
from manchuapp.config import Preferences
from manchuapp.db import init_db

from .main_window import MainWindow

#: Name shown in window titles and the macOS menu bar.
APP_NAME = "Manchu Reader"


def create_application() -> tuple[QApplication, MainWindow]:
    """
    Create the application and its main window.

    The corpus database is opened at the location stored in the preferences,
    or at the platform default.

    Returns:
        Tuple of (application, main window)

    """
    QCoreApplication.setOrganizationName(APP_NAME)
    QCoreApplication.setApplicationName(APP_NAME)

    app = QApplication(sys.argv)
    app.setApplicationVersion(__version__)

    # Set display name for macOS menu bar
    QGuiApplication.setApplicationDisplayName(APP_NAME)

    preferences = Preferences()
    session_factory = init_db(preferences.database_path())

    window = MainWindow(session_factory, preferences)
    window.show()

    # Load the corpus once the event loop is running
    QTimer.singleShot(0, window.load_corpus)
    return app, window
