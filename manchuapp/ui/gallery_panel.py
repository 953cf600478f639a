"""Gallery tab: browse the whole corpus."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QRadioButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from manchuapp.exc import DoesNotExist, StorageFailed
from manchuapp.services.sequence import RequestSequencer
from manchuapp.services.storage import group_by_source
from manchuapp.ui.dialogs import EntryDialog

if TYPE_CHECKING:
    from manchuapp.models.entry import Entry
    from manchuapp.models.untranslated import UntranslatedEntry
    from manchuapp.services.storage import CorpusStore
    from manchuapp.ui.workers import RequestRunner

logger = logging.getLogger(__name__)


def _preview(text: str | None, width: int = 60) -> str:
    text = (text or "").strip()
    return text if len(text) <= width else text[: width - 1] + "…"


class GalleryPanel(QWidget):
    """
    The Gallery tab.

    Shows either the translated or the untranslated entries.  Translated
    entries open a detail dialog on double click, and entries cut from the
    same source page are listed in groups below.

    Args:
        store: The corpus store
        runner: Runs the listing queries off the UI thread

    Keyword Args:
        parent: Parent widget

    """

    #: Emitted with a status bar message.
    message = Signal(str)
    #: Emitted with (title, message) when loading fails.
    failed = Signal(str, str)

    def __init__(
        self,
        store: CorpusStore,
        runner: RequestRunner,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.store = store
        self.runner = runner
        self._sequencer = RequestSequencer()
        self.build()

    def build(self) -> None:
        """Build the panel."""
        layout = QVBoxLayout(self)

        toggle_layout = QHBoxLayout()
        self.translated_radio = QRadioButton("Translated", self)
        self.untranslated_radio = QRadioButton("Untranslated", self)
        self.translated_radio.setChecked(True)
        self.toggle_group = QButtonGroup(self)
        self.toggle_group.addButton(self.translated_radio, 0)
        self.toggle_group.addButton(self.untranslated_radio, 1)
        self.toggle_group.idToggled.connect(self._on_toggled)
        toggle_layout.addWidget(self.translated_radio)
        toggle_layout.addWidget(self.untranslated_radio)
        toggle_layout.addStretch()
        self.refresh_button = QPushButton("Refresh", self)
        self.refresh_button.clicked.connect(self.refresh)
        toggle_layout.addWidget(self.refresh_button)
        layout.addLayout(toggle_layout)

        self.stack = QStackedWidget(self)

        translated_page = QWidget()
        translated_layout = QVBoxLayout(translated_page)
        translated_layout.setContentsMargins(0, 0, 0, 0)
        self.translated_list = QListWidget(translated_page)
        self.translated_list.itemDoubleClicked.connect(self._on_entry_activated)
        translated_layout.addWidget(self.translated_list, stretch=3)
        groups_label = QLabel("Shared sources", translated_page)
        groups_label.setStyleSheet("font-weight: bold;")
        translated_layout.addWidget(groups_label)
        self.groups_list = QListWidget(translated_page)
        self.groups_list.itemDoubleClicked.connect(self._on_entry_activated)
        translated_layout.addWidget(self.groups_list, stretch=1)
        self.stack.addWidget(translated_page)

        self.untranslated_list = QListWidget()
        self.stack.addWidget(self.untranslated_list)
        layout.addWidget(self.stack, stretch=1)

    def _on_toggled(self, button_id: int, checked: bool) -> None:  # noqa: FBT001
        if checked:
            self.stack.setCurrentIndex(button_id)

    def refresh(self) -> None:
        """Reload both lists from the store in the background."""
        seq = self._sequencer.issue()
        self.refresh_button.setEnabled(False)
        store = self.store
        self.runner.start(
            seq,
            lambda: (store.list_translated(), store.list_untranslated()),
            self._on_refresh_finished,
            self._on_refresh_failed,
        )

    def _on_refresh_finished(
        self,
        seq: int,
        lists: tuple[list[Entry], list[UntranslatedEntry]],
    ) -> None:
        if not self._sequencer.is_current(seq):
            return
        self.refresh_button.setEnabled(True)
        translated, untranslated = lists
        self.show_translated(translated)
        self.show_untranslated(untranslated)
        self.message.emit(
            f"{len(translated)} translated, {len(untranslated)} untranslated"
        )

    def _on_refresh_failed(self, seq: int, error: Exception) -> None:
        if not self._sequencer.is_current(seq):
            return
        self.refresh_button.setEnabled(True)
        logger.error(f"Gallery refresh failed: {error!s}")
        self.failed.emit("Gallery Error", str(error))

    def show_translated(self, entries: list[Entry]) -> None:
        """Fill the translated list and the shared-source groups."""
        self.translated_list.clear()
        for entry in entries:
            item = QListWidgetItem(
                f"{entry.id}. {_preview(entry.latin_text)}  "
                f"{_preview(entry.english_text)}"
            )
            item.setData(Qt.ItemDataRole.UserRole, entry.id)
            self.translated_list.addItem(item)

        self.groups_list.clear()
        for source, group in group_by_source(entries).items():
            header = QListWidgetItem(f"{source} ({len(group)} entries)")
            header.setFlags(Qt.ItemFlag.NoItemFlags)
            self.groups_list.addItem(header)
            for entry in group:
                item = QListWidgetItem(f"    {entry.id}. {_preview(entry.latin_text)}")
                item.setData(Qt.ItemDataRole.UserRole, entry.id)
                self.groups_list.addItem(item)

    def show_untranslated(self, entries: list[UntranslatedEntry]) -> None:
        """Fill the untranslated list."""
        self.untranslated_list.clear()
        for entry in entries:
            label = entry.description or entry.image_url
            item = QListWidgetItem(f"{entry.id}. {_preview(label)}")
            item.setToolTip(entry.source_link or entry.image_url)
            self.untranslated_list.addItem(item)

    def _on_entry_activated(self, item: QListWidgetItem) -> None:
        entry_id = item.data(Qt.ItemDataRole.UserRole)
        if entry_id is None:
            return
        try:
            entry = self.store.get(entry_id)
        except (DoesNotExist, StorageFailed) as e:
            self.failed.emit("Gallery Error", str(e))
            return
        EntryDialog(self, entry).execute()
