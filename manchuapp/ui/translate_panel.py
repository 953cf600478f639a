"""Translate tab."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from manchuapp.exc import EmptyInput, MalformedReply
from manchuapp.services.translation import Direction, TranslationOutput

if TYPE_CHECKING:
    from manchuapp.services.translation import TranslationService
    from manchuapp.ui.workers import RequestRunner

logger = logging.getLogger(__name__)


class TranslatePanel(QWidget):
    """
    The Translate tab: pick a direction, enter text, get the two output
    fields of that direction back.

    Args:
        service: The translation service
        runner: Runs translation requests off the UI thread

    Keyword Args:
        parent: Parent widget

    """

    #: Emitted with a status bar message.
    message = Signal(str)
    #: Emitted with (title, message) for input the user must fix.
    warned = Signal(str, str)
    #: Emitted with (title, message) when a translation fails.
    failed = Signal(str, str)

    def __init__(
        self,
        service: TranslationService,
        runner: RequestRunner,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.service = service
        self.runner = runner
        #: Output labels by :class:`TranslationOutput` field.
        self.output_labels: dict[str, QLabel] = {}
        self.build()
        self.show_output(service.output)

    def build(self) -> None:
        """Build the panel."""
        layout = QVBoxLayout(self)

        direction_layout = QHBoxLayout()
        direction_layout.addWidget(QLabel("Direction:"))
        self.direction_combo = QComboBox(self)
        for direction in Direction:
            self.direction_combo.addItem(direction.title, direction)
        self.direction_combo.setCurrentIndex(
            self.direction_combo.findData(self.service.direction)
        )
        self.direction_combo.currentIndexChanged.connect(self._on_direction_changed)
        direction_layout.addWidget(self.direction_combo)
        direction_layout.addStretch()
        layout.addLayout(direction_layout)

        self.input_edit = QPlainTextEdit(self)
        self.input_edit.setPlaceholderText("Enter text to translate…")
        layout.addWidget(self.input_edit, stretch=1)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        self.translate_button = QPushButton("Translate", self)
        self.translate_button.clicked.connect(self.submit)
        button_layout.addWidget(self.translate_button)
        layout.addLayout(button_layout)

        self.output_form = QFormLayout()
        for field in ("manchu", "latin", "english"):
            label = QLabel("", self)
            label.setWordWrap(True)
            label.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            self.output_labels[field] = label
            self.output_form.addRow(f"{field.capitalize()}:", label)
        layout.addLayout(self.output_form)

    @property
    def is_loading(self) -> bool:
        """Whether a translation is in flight."""
        return not self.translate_button.isEnabled()

    def set_loading(self, loading: bool) -> None:  # noqa: FBT001
        """Toggle the loading state of the Translate button."""
        self.translate_button.setEnabled(not loading)
        self.translate_button.setText("Translating…" if loading else "Translate")

    def _on_direction_changed(self, _index: int) -> None:
        direction = self.direction_combo.currentData()
        self.service.set_direction(direction)
        self.input_edit.clear()
        self.show_output(self.service.output)
        self.set_loading(False)
        logger.debug(f"Translation direction set to {direction.value}")

    def show_output(self, output: TranslationOutput) -> None:
        """Fill the output labels; only this direction's fields are shown."""
        fields = self.service.direction.fields
        for field, label in self.output_labels.items():
            label.setText(getattr(output, field))
            self.output_form.setRowVisible(label, field in fields)

    def submit(self) -> None:
        """Start a translation of the input text."""
        try:
            seq, prompt, direction = self.service.prepare(
                self.input_edit.toPlainText()
            )
        except EmptyInput as e:
            self.warned.emit("Translate", str(e))
            return
        self.set_loading(True)
        logger.info(f"Translating ({direction.value}, #{seq})")
        client = self.service.client
        self.runner.start(
            seq,
            lambda: client.complete(prompt),
            self._on_translation_finished,
            self._on_translation_failed,
        )

    def _on_translation_finished(self, seq: int, raw: str) -> None:
        try:
            output = self.service.complete(seq, raw)
        except MalformedReply as e:
            logger.error(f"{e!s}; reply was {e.raw!r}")  # noqa: TRY400
            self.set_loading(False)
            self.failed.emit("Translation Error", str(e))
            return
        if output is None:
            return
        self.set_loading(False)
        self.show_output(output)
        self.message.emit("Translation complete")

    def _on_translation_failed(self, seq: int, error: Exception) -> None:
        if not self.service.fail(seq, error):
            return
        self.set_loading(False)
        self.failed.emit("Translation Error", str(error))
