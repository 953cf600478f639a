from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QMenu

from manchuapp.ui.dialogs import SettingsDialog

if TYPE_CHECKING:
    from manchuapp.ui.main_window import MainWindow


class MainMenu:
    """Main application menu."""

    def __init__(self, main_window: MainWindow) -> None:
        """
        Initialize main menu.

        Args:
            main_window: Main window instance

        """
        #: Main window instance
        self.main_window = main_window
        #: Menu bar
        self.menu = self.main_window.menuBar()

    def add_menu(self, menu: str) -> QMenu:
        """
        Add a menu to the main menu bar.

        Args:
            menu: title of the menu

        Returns:
            The added menu instance

        """
        return self.menu.addMenu(menu)

    def build(self) -> None:
        """Build the main menu."""
        self.file_menu = FileMenu(self, self.main_window).file_menu


class FileMenu:
    """
    A "File" menu to be added to the main menu bar with the following actions:

    - Import Corpus...
    - Export Results as CSV...
    - Preferences...
    - Quit

    On macOS, Qt moves Preferences and Quit into the application menu.

    Args:
        main_menu: Main menu instance
        main_window: Main window instance

    """

    def __init__(self, main_menu: MainMenu, main_window: MainWindow) -> None:
        #: Main window instance
        self.main_window = main_window
        #: Main menu instance
        self.main_menu = main_menu
        self.populate()

    def populate(self) -> None:
        """
        Add the "File" menu to the main menu bar and fill it.
        """
        self.file_menu = self.main_menu.add_menu("&File")

        import_action = QAction("&Import Corpus...", self.file_menu)
        import_action.setShortcut(QKeySequence("Ctrl+I"))
        import_action.triggered.connect(self.main_window.action_service.import_corpus)
        self.file_menu.addAction(import_action)

        export_action = QAction("&Export Results as CSV...", self.file_menu)
        export_action.setShortcut(QKeySequence("Ctrl+E"))
        export_action.triggered.connect(
            self.main_window.action_service.export_results_csv
        )
        self.file_menu.addAction(export_action)

        self.file_menu.addSeparator()

        preferences_action = QAction("&Preferences...", self.file_menu)
        preferences_action.setShortcut(QKeySequence("Ctrl+,"))
        preferences_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        preferences_action.triggered.connect(
            lambda: SettingsDialog(self.main_window).execute()
        )
        self.file_menu.addAction(preferences_action)

        quit_action = QAction("&Quit", self.file_menu)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.triggered.connect(self.main_window.close)
        self.file_menu.addAction(quit_action)
