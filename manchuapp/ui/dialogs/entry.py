from __future__ import annotations

from typing import TYPE_CHECKING, Final

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QVBoxLayout,
    QWidget,
)

if TYPE_CHECKING:
    from manchuapp.models.entry import Entry


class EntryDialog:
    """
    Read-only detail view of a translated corpus entry.

    Args:
        parent: Parent widget
        entry: The entry to show

    """

    #: Dialog width
    DIALOG_WIDTH: Final[int] = 600
    #: Dialog height
    DIALOG_HEIGHT: Final[int] = 400

    def __init__(self, parent: QWidget, entry: Entry) -> None:
        self.parent = parent
        self.entry = entry

    def _value_label(self, text: str | None) -> QLabel:
        label = QLabel(text or "—", self.dialog)
        label.setWordWrap(True)
        label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
        return label

    def build(self) -> None:
        """
        Build the entry dialog.
        """
        self.dialog = QDialog(self.parent)
        self.dialog.setWindowTitle(f"Entry {self.entry.id}")
        self.dialog.setMinimumSize(self.DIALOG_WIDTH, self.DIALOG_HEIGHT)
        self.layout = QVBoxLayout(self.dialog)

        form = QFormLayout()
        form.addRow("Manchu:", self._value_label(self.entry.manchu_text))
        form.addRow("Latin:", self._value_label(self.entry.latin_text))
        form.addRow("English:", self._value_label(self.entry.english_text))
        if self.entry.image_url:
            image_link = QLabel(
                f'<a href="{self.entry.image_url}">{self.entry.image_url}</a>',
                self.dialog,
            )
            image_link.setOpenExternalLinks(True)
            form.addRow("Image:", image_link)
        if self.entry.source:
            source_link = QLabel(
                f'<a href="{self.entry.source}">{self.entry.source}</a>', self.dialog
            )
            source_link.setOpenExternalLinks(True)
            form.addRow("Source:", source_link)
        self.layout.addLayout(form)

        self.button_box = QDialogButtonBox(self.dialog)
        self.button_box.addButton(QDialogButtonBox.StandardButton.Close)
        self.button_box.rejected.connect(self.dialog.reject)
        self.layout.addWidget(self.button_box)

    def execute(self) -> None:
        """
        Execute the entry dialog.
        """
        self.build()
        self.dialog.exec()
