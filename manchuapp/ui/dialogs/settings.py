from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QSpinBox,
    QVBoxLayout,
)

from manchuapp.config import API_KEY_ENV, TranslationConfig

if TYPE_CHECKING:
    from manchuapp.ui.main_window import MainWindow


class SettingsDialog:
    """
    Preferences dialog for the translation service and the corpus database.
    """

    #: Dialog width
    DIALOG_WIDTH: Final[int] = 500
    #: Dialog height
    DIALOG_HEIGHT: Final[int] = 260

    def __init__(self, main_window: MainWindow) -> None:
        """
        Initialize settings dialog.
        """
        self.main_window = main_window
        self.preferences = main_window.preferences

    def build(self) -> None:
        """
        Build the settings dialog.
        """
        config = self.preferences.translation_config()
        self.dialog = QDialog(self.main_window)
        self.dialog.setWindowTitle("Preferences")
        self.dialog.setMinimumSize(self.DIALOG_WIDTH, self.DIALOG_HEIGHT)
        self.layout = QVBoxLayout(self.dialog)
        form = QFormLayout()

        self.endpoint_edit = QLineEdit(config.endpoint, self.dialog)
        form.addRow("Endpoint:", self.endpoint_edit)

        self.model_edit = QLineEdit(config.model, self.dialog)
        form.addRow("Model:", self.model_edit)

        self.api_key_edit = QLineEdit(self.dialog)
        self.api_key_edit.setEchoMode(QLineEdit.EchoMode.Password)
        self.api_key_edit.setText(config.api_key or "")
        form.addRow("API key:", self.api_key_edit)

        self.timeout_spin = QSpinBox(self.dialog)
        self.timeout_spin.setMinimum(1)
        self.timeout_spin.setMaximum(600)
        self.timeout_spin.setSuffix(" s")
        self.timeout_spin.setValue(config.timeout_seconds)
        form.addRow("Timeout:", self.timeout_spin)

        db_path = self.preferences.database_path()
        self.database_edit = QLineEdit(str(db_path) if db_path else "", self.dialog)
        self.database_edit.setPlaceholderText("Default location")
        form.addRow("Corpus database:", self.database_edit)
        self.layout.addLayout(form)

        note = QLabel(
            f"The {API_KEY_ENV} environment variable overrides the stored key. "
            "A new database location takes effect on restart."
        )
        note.setWordWrap(True)
        note.setStyleSheet("color: #666;")
        self.layout.addWidget(note)

        # Button box
        self.button_box = QDialogButtonBox(self.dialog)
        self.button_box.addButton(QDialogButtonBox.StandardButton.Ok)
        self.button_box.addButton(QDialogButtonBox.StandardButton.Cancel)
        self.button_box.accepted.connect(self.save_settings)
        self.button_box.rejected.connect(self.dialog.reject)
        self.layout.addWidget(self.button_box)

    def save_settings(self) -> None:
        """Save settings to QSettings and apply them to the running app."""
        config = TranslationConfig(
            endpoint=self.endpoint_edit.text().strip(),
            model=self.model_edit.text().strip(),
            api_key=self.api_key_edit.text().strip() or None,
            timeout_seconds=self.timeout_spin.value(),
        )
        self.preferences.save_translation_config(config)
        database = self.database_edit.text().strip()
        self.preferences.set_database_path(Path(database) if database else None)
        self.main_window.apply_preferences()
        self.dialog.accept()

    def execute(self) -> None:
        """
        Execute the settings dialog.
        """
        self.build()
        self.dialog.exec()
