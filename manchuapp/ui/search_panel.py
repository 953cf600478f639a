"""Search tab: query field, result rows and aligned-token navigation."""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING, Final

from PySide6.QtCore import QEasingCurve, QPoint, QPropertyAnimation, Qt, Signal
from PySide6.QtGui import QFont, QKeySequence, QShortcut, QTextDocument
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from manchuapp.services.alignment import Script
from manchuapp.services.navigation import NavigationController
from manchuapp.services.tokenizer import TokenId

if TYPE_CHECKING:
    from collections.abc import Sequence

    from manchuapp.models.record import Record
    from manchuapp.services.alignment import AlignmentIndex
    from manchuapp.services.results import ResultSetManager
    from manchuapp.ui.workers import RequestRunner

logger = logging.getLogger(__name__)


class ScriptLabel(QLabel):
    """
    One script of a record, with every word rendered as a clickable anchor
    whose href is the word's :class:`TokenId`.
    """

    #: Style of the active word.
    ACTIVE_STYLE: Final[str] = "background-color: #ffe08a; color: #000;"
    #: Style of the other words.
    WORD_STYLE: Final[str] = "color: #1a1a1a; text-decoration: none;"

    #: Emitted with the TokenId of a clicked word.
    token_clicked = Signal(object)

    def __init__(self, script: Script, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.script = script
        self.setTextFormat(Qt.TextFormat.RichText)
        self.setTextInteractionFlags(Qt.TextInteractionFlag.LinksAccessibleByMouse)
        self.setWordWrap(True)
        #: Offset of each word in the label's plain text, by TokenId.
        self._offsets: dict[TokenId, int] = {}
        self.linkActivated.connect(self._on_link_activated)

    def set_tokens(
        self, index: AlignmentIndex, record_id: int, active: TokenId | None
    ) -> None:
        """
        Render the words of ``record_id`` in this label's script.

        Args:
            index: Alignment index of the result set
            record_id: Record to render
            active: The active token; highlighted if it belongs to the record

        """
        words = []
        self._offsets = {}
        offset = 0
        for token in index.tokens(record_id, self.script):
            self._offsets[token.token_id] = offset
            offset += len(token.text) + 1
            style = self.ACTIVE_STYLE if token.token_id == active else self.WORD_STYLE
            words.append(
                f'<a href="{token.token_id}" style="text-decoration: none;">'
                f'<span style="{style}">{html.escape(token.text)}</span></a>'
            )
        self.setText(" ".join(words))

    def token_center(self, token_id: TokenId) -> int | None:
        """
        Get the vertical centre of the line holding ``token_id``, in this
        label's coordinates.

        Returns:
            The y coordinate, or None if the label does not show the token

        """
        offset = self._offsets.get(token_id)
        if offset is None:
            return None
        contents = self.contentsRect()
        document = QTextDocument()
        document.setDefaultFont(self.font())
        document.setDocumentMargin(0)
        document.setHtml(self.text())
        document.setTextWidth(contents.width())
        block = document.findBlock(offset)
        block_top = document.documentLayout().blockBoundingRect(block).top()
        line = block.layout().lineForTextPosition(offset - block.position())
        if not line.isValid():
            return None
        return contents.top() + int(block_top + line.y() + line.height() / 2)

    def _on_link_activated(self, href: str) -> None:
        try:
            token_id = TokenId.parse(href)
        except ValueError:
            logger.warning(f"Ignoring unknown anchor {href!r}")
            return
        self.token_clicked.emit(token_id)


class ResultRow(QFrame):
    """
    One result: the Manchu and Latin renderings with their anchors, and the
    English translation as plain text.

    Args:
        record: The record shown in this row

    Keyword Args:
        parent: Parent widget

    """

    def __init__(self, record: Record, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.record = record
        self.setFrameShape(QFrame.Shape.StyledPanel)
        layout = QVBoxLayout(self)
        layout.setSpacing(4)

        self.manchu_label = ScriptLabel(Script.MANCHU, self)
        self.manchu_label.setFont(QFont("Noto Sans Mongolian", 16))
        layout.addWidget(self.manchu_label)

        self.latin_label = ScriptLabel(Script.LATIN, self)
        layout.addWidget(self.latin_label)

        self.english_label = QLabel(record.english_text or "", self)
        self.english_label.setWordWrap(True)
        self.english_label.setStyleSheet("color: #555; font-style: italic;")
        layout.addWidget(self.english_label)

    @property
    def script_labels(self) -> tuple[ScriptLabel, ScriptLabel]:
        """The Manchu and Latin labels."""
        return (self.manchu_label, self.latin_label)

    def set_tokens(self, index: AlignmentIndex, active: TokenId | None) -> None:
        """Render both scripts, highlighting ``active`` in each."""
        for label in self.script_labels:
            label.set_tokens(index, self.record.id, active)

    def token_center(self, index: AlignmentIndex, token_id: TokenId) -> int:
        """
        Get the vertical centre of ``token_id`` in this row's coordinates.

        The Manchu line is used when the Manchu text has a word at the
        token's position, the Latin line otherwise.  Falls back to the
        middle of the row.
        """
        for label in self.script_labels:
            if index.counterpart(token_id, label.script) is None:
                continue
            center = label.token_center(token_id)
            if center is not None:
                return label.mapTo(self, QPoint(0, center)).y()
        return self.height() // 2


class SearchPanel(QWidget):
    """
    The Search tab.

    Args:
        results: Result set manager owning the records, index and selection
        runner: Runs store queries off the UI thread

    Keyword Args:
        parent: Parent widget

    """

    #: Scroll animation duration in milliseconds.
    SCROLL_DURATION_MS: Final[int] = 300

    #: Emitted with a status bar message.
    message = Signal(str)
    #: Emitted with (title, message) when a search fails.
    failed = Signal(str, str)

    def __init__(
        self,
        results: ResultSetManager,
        runner: RequestRunner,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.results = results
        self.runner = runner
        #: Rows by record ID.
        self.rows: dict[int, ResultRow] = {}
        #: Row holding each token anchor, keyed by TokenId string.
        self.anchors: dict[str, ResultRow] = {}
        #: The running scroll animation.
        self._scroll_animation: QPropertyAnimation | None = None
        #: Navigation over the active token.
        self.navigation = NavigationController(
            results.selection,
            lambda: self.results.index,
            scroll_to=self.scroll_to_token,
        )
        results.selection.subscribe(self._on_selection_changed)
        self.build()
        self._setup_shortcuts()

    def build(self) -> None:
        """Build the panel."""
        layout = QVBoxLayout(self)

        query_layout = QHBoxLayout()
        self.query_edit = QLineEdit(self)
        self.query_edit.setPlaceholderText("Search Manchu, Latin or English…")
        self.query_edit.returnPressed.connect(self.submit)
        query_layout.addWidget(self.query_edit, stretch=1)
        self.search_button = QPushButton("Search", self)
        self.search_button.clicked.connect(self.submit)
        query_layout.addWidget(self.search_button)
        layout.addLayout(query_layout)

        self.loading_label = QLabel("Searching…", self)
        self.loading_label.setStyleSheet("color: #666; font-style: italic;")
        self.loading_label.setVisible(False)
        layout.addWidget(self.loading_label)

        self.count_label = QLabel("", self)
        layout.addWidget(self.count_label)

        self.scroll_area = QScrollArea(self)
        self.scroll_area.setWidgetResizable(True)
        self.scroll_area.setVerticalScrollBarPolicy(
            Qt.ScrollBarPolicy.ScrollBarAsNeeded
        )
        self.content = QWidget()
        self.content_layout = QVBoxLayout(self.content)
        self.content_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self.scroll_area.setWidget(self.content)
        layout.addWidget(self.scroll_area, stretch=1)

    def _setup_shortcuts(self) -> None:
        """
        Set up keyboard shortcuts.

        The arrow keys move the active token while the results have focus,
        so they still move the cursor in the query field.
        """
        next_token_shortcut = QShortcut(QKeySequence("Right"), self.scroll_area)
        next_token_shortcut.setContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)
        next_token_shortcut.activated.connect(self.navigation.next)
        prev_token_shortcut = QShortcut(QKeySequence("Left"), self.scroll_area)
        prev_token_shortcut.setContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)
        prev_token_shortcut.activated.connect(self.navigation.previous)

    @property
    def is_loading(self) -> bool:
        """Whether a search is in flight."""
        return not self.loading_label.isHidden()

    def submit(self) -> None:
        """Start a search for the query field's text."""
        query = self.query_edit.text()
        seq = self.results.begin(query)
        self.loading_label.setVisible(True)
        logger.info(f"Searching for {query!r} (#{seq})")
        store = self.results.store
        self.runner.start(
            seq,
            lambda: store.search(query),
            self._on_search_finished,
            self._on_search_failed,
        )

    def _on_search_finished(self, seq: int, records: Sequence[Record]) -> None:
        if not self.results.complete(seq, records):
            return
        self.loading_label.setVisible(False)
        logger.info(f"Search {self.results.query!r} matched {len(records)} entries")
        self.show_records()
        self.message.emit(f"{len(self.results.records)} results")

    def _on_search_failed(self, seq: int, error: Exception) -> None:
        if not self.results.fail(seq, error):
            return
        self.loading_label.setVisible(False)
        self.failed.emit("Search Error", str(error))

    def show_records(self) -> None:
        """Rebuild the result rows from the result set."""
        self._clear_rows()
        index = self.results.index
        for record in self.results.records:
            row = ResultRow(record, self.content)
            for label in row.script_labels:
                label.token_clicked.connect(self.navigation.activate)
            row.set_tokens(index, self.results.selection.active)
            self.content_layout.addWidget(row)
            self.rows[record.id] = row
            for token_id in index.siblings(record.id):
                self.anchors[str(token_id)] = row
        query = self.results.query
        self.count_label.setText(
            f"{len(self.results.records)} results for {query!r}"
            if query
            else f"{len(self.results.records)} results"
        )

    def _clear_rows(self) -> None:
        while self.content_layout.count():
            item = self.content_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self.rows.clear()
        self.anchors.clear()

    def _on_selection_changed(
        self, previous: TokenId | None, current: TokenId | None
    ) -> None:
        index = self.results.index
        record_ids = {t.record_id for t in (previous, current) if t is not None}
        for record_id in record_ids:
            row = self.rows.get(record_id)
            if row is not None:
                row.set_tokens(index, current)
        if current is not None:
            # Keep the arrow keys routed to the results
            self.scroll_area.setFocus()

    def scroll_to_token(self, token_id: TokenId) -> None:
        """
        Smoothly scroll the line holding ``token_id`` to the centre of the
        viewport.  Does nothing if the token has no anchor.
        """
        row = self.anchors.get(str(token_id))
        if row is None:
            return
        bar = self.scroll_area.verticalScrollBar()
        row_top = row.mapTo(self.content, QPoint(0, 0)).y()
        viewport_height = self.scroll_area.viewport().height()
        token_center = row.token_center(self.results.index, token_id)
        target = row_top + token_center - viewport_height // 2
        target = max(bar.minimum(), min(bar.maximum(), target))
        if self._scroll_animation is not None:
            self._scroll_animation.stop()
        animation = QPropertyAnimation(bar, b"value", self)
        animation.setDuration(self.SCROLL_DURATION_MS)
        animation.setStartValue(bar.value())
        animation.setEndValue(target)
        animation.setEasingCurve(QEasingCurve.Type.InOutQuad)
        animation.start()
        self._scroll_animation = animation
