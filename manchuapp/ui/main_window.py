"""Main application window."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QTabWidget,
)

from manchuapp.config import Preferences
from manchuapp.exc import AlreadyExists
from manchuapp.services.export_csv import CSVExporter
from manchuapp.services.results import ResultSetManager
from manchuapp.services.storage import CorpusImporter, CorpusStore
from manchuapp.services.translation import TranslationClient, TranslationService
from manchuapp.ui.gallery_panel import GalleryPanel
from manchuapp.ui.menus import MainMenu
from manchuapp.ui.search_panel import SearchPanel
from manchuapp.ui.translate_panel import TranslatePanel
from manchuapp.ui.workers import RequestRunner

if TYPE_CHECKING:
    from PySide6.QtGui import QCloseEvent
    from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Main application window.

    Args:
        session_factory: SQLAlchemy session factory for the corpus database

    Keyword Args:
        preferences: Application preferences; read from QSettings if omitted

    """

    #: Main window geometry
    MAIN_WINDOW_GEOMETRY: Final[tuple[int, int, int, int]] = (100, 100, 1200, 800)

    def __init__(
        self, session_factory: sessionmaker, preferences: Preferences | None = None
    ) -> None:
        super().__init__()
        #: SQLAlchemy session factory
        self.session_factory = session_factory
        #: Preferences
        self.preferences = preferences or Preferences()
        #: Corpus store
        self.store = CorpusStore(session_factory)
        #: Search results
        self.results = ResultSetManager(self.store)
        #: Translation flow
        self.translation = TranslationService(
            TranslationClient(self.preferences.translation_config())
        )
        #: Background request runner
        self.runner = RequestRunner(self)
        #: Main window actions
        self.action_service = MainWindowActions(self)

        # Build the main window
        self.build()

    def _setup_main_window(self) -> None:
        """
        Set up the main window.
        """
        self.setWindowTitle("Manchu Reader")
        app = QApplication.instance()
        if isinstance(app, QApplication) and not app.windowIcon().isNull():
            self.setWindowIcon(app.windowIcon())
        self.setGeometry(*self.MAIN_WINDOW_GEOMETRY)

        self.tabs = QTabWidget(self)
        self.search_panel = SearchPanel(self.results, self.runner)
        self.gallery_panel = GalleryPanel(self.store, self.runner)
        self.translate_panel = TranslatePanel(self.translation, self.runner)
        self.tabs.addTab(self.search_panel, "Search")
        self.tabs.addTab(self.gallery_panel, "Gallery")
        self.tabs.addTab(self.translate_panel, "Translate")
        self.setCentralWidget(self.tabs)

        for panel in (self.search_panel, self.gallery_panel, self.translate_panel):
            panel.message.connect(self.show_message)
            panel.failed.connect(
                lambda title, message: self.show_error(message, title=title)
            )
        self.translate_panel.warned.connect(
            lambda title, message: self.show_warning(message, title=title)
        )

        self.show_message("Ready")

    def _setup_main_menu(self) -> None:
        """Set up the main menu."""
        menu = MainMenu(self)
        menu.build()

    def build(self) -> None:
        """
        Build the main window.

        - Setup the main window.
        - Setup the main menu.

        """
        self._setup_main_window()
        self._setup_main_menu()

    def load_corpus(self) -> None:
        """Fill the gallery and show every entry in the Search tab."""
        self.gallery_panel.refresh()
        self.search_panel.submit()

    def apply_preferences(self) -> None:
        """Rebuild the translation client from the current preferences."""
        self.translation.client = TranslationClient(
            self.preferences.translation_config()
        )
        self.show_message("Preferences saved")

    def show_message(self, message: str, duration: int = 2000) -> None:
        """
        Show a message in the status bar.

        Args:
            message: Message to show

        Keyword Args:
            duration: Duration of the message in milliseconds (default: 2000)

        """
        self.statusBar().showMessage(message, duration)

    def show_warning(self, message: str, title: str = "Warning") -> None:
        """
        Show a warning message.

        Args:
            message: Message to show

        Keyword Args:
            title: Title of the message (default: "Warning")

        """
        QMessageBox.warning(self, title, message)

    def show_error(self, message: str, title: str = "Error") -> None:
        """
        Show an error message.

        The status bar gets the message too, so it stays visible after the
        box is closed.

        Args:
            message: Message to show

        Keyword Args:
            title: Title of the message (default: "Error")

        """
        self.show_message(f"{title}: {message}", duration=5000)
        QMessageBox.warning(self, title, message)

    def show_information(self, message: str, title: str = "Information") -> None:
        """
        Show an information message.

        Args:
            message: Message to show

        Keyword Args:
            title: Title of the message (default: "Information")

        """
        QMessageBox.information(self, title, message)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        """Let running requests finish before the window goes away."""
        self.runner.wait_all()
        super().closeEvent(event)


class MainWindowActions:
    """
    Menu actions of the main window.

    Args:
        main_window: Main window instance

    """

    def __init__(self, main_window: MainWindow) -> None:
        #: Main window instance
        self.main_window = main_window

    def import_corpus(self) -> None:
        """
        Import corpus entries from a JSON file.

        If some entry IDs already exist, the user is asked whether to replace
        them.
        """
        file_path, _ = QFileDialog.getOpenFileName(
            self.main_window,
            "Import Corpus",
            "",
            "JSON Files (*.json);;All Files (*)",
        )

        # If the user cancels the dialog, do nothing
        if not file_path:
            return

        with self.main_window.session_factory() as session:
            importer = CorpusImporter(session)
            try:
                counts = importer.import_json(file_path)
            except AlreadyExists as e:
                reply = QMessageBox.question(
                    self.main_window,
                    "Replace Entries?",
                    f"{e!s}.\n\nReplace existing entries with the imported ones?",
                )
                if reply != QMessageBox.StandardButton.Yes:
                    return
                try:
                    counts = importer.import_json(file_path, replace=True)
                except ValueError as e:
                    self.main_window.show_error(str(e), title="Import Error")
                    return
            except ValueError as e:
                self.main_window.show_error(str(e), title="Import Error")
                return

        translated, untranslated = counts
        self.main_window.show_information(
            f"Imported {translated} translated and {untranslated} "
            f"untranslated entries.",
            title="Import Successful",
        )
        self.main_window.load_corpus()

    def export_results_csv(self) -> bool:
        """
        Export the current search results to a CSV file.

        Returns:
            True if a file was written

        """
        results = self.main_window.results
        if not results.records:
            self.main_window.show_warning("There are no results to export.")
            return False

        exporter = CSVExporter()
        file_path, _ = QFileDialog.getSaveFileName(
            self.main_window,
            "Export Results",
            exporter.filename(results.query),
            "CSV Files (*.csv);;All Files (*)",
        )

        # If the user cancels the dialog, do nothing
        if not file_path:
            return False

        path = Path(file_path)
        if path.suffix.lower() != ".csv":
            path = path.with_suffix(".csv")
        try:
            exporter.export(results.records, path)
        except OSError as e:
            logger.exception(f"CSV export to {path} failed")
            self.main_window.show_error(str(e), title="Export Error")
            return False

        self.main_window.show_message(f"Exported {len(results.records)} rows", 3000)
        return True
