"""Translation through a remote chat-completion service."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from manchuapp.exc import EmptyInput, MalformedReply, TranslationFailed
from manchuapp.services.sequence import RequestSequencer

if TYPE_CHECKING:
    from manchuapp.config import TranslationConfig

logger = logging.getLogger(__name__)

#: A reply line: a known label, a colon, and the value.
REPLY_LINE: Final[re.Pattern[str]] = re.compile(
    r"^(Latin|English|Manchu):\s*(.*)$", re.IGNORECASE
)


class Direction(Enum):
    """Which way a translation goes."""

    MANCHU_TO_ENGLISH = "manchu-to-english"
    ENGLISH_TO_MANCHU = "english-to-manchu"

    @property
    def labels(self) -> tuple[str, str]:
        """The two reply labels, in the order the model must emit them."""
        if self is Direction.MANCHU_TO_ENGLISH:
            return ("Latin", "English")
        return ("Manchu", "Latin")

    @property
    def fields(self) -> tuple[str, str]:
        """The :class:`TranslationOutput` fields filled for this direction."""
        return tuple(label.lower() for label in self.labels)  # type: ignore[return-value]

    @property
    def title(self) -> str:
        """Human-readable name."""
        if self is Direction.MANCHU_TO_ENGLISH:
            return "Manchu → English + Latin"
        return "English → Manchu + Latin"

    def toggled(self) -> Direction:
        """The opposite direction."""
        if self is Direction.MANCHU_TO_ENGLISH:
            return Direction.ENGLISH_TO_MANCHU
        return Direction.MANCHU_TO_ENGLISH


@dataclass(frozen=True)
class TranslationOutput:
    """
    Result of one translation.  Only the two fields of the request's
    direction are filled; the third is always empty.
    """

    latin: str = ""
    english: str = ""
    manchu: str = ""


_PREAMBLE: Final[str] = """\
You are a bilingual expert translator specialized in the Manchu language (ᠮᠠᠨᠵᡠ ᡤᡳᠰᡠᠨ),
trained in both the Möllendorff Latin transliteration system and English gloss translation.
"""  # noqa: E501

_TASKS: Final[dict[Direction, str]] = {
    Direction.MANCHU_TO_ENGLISH: """\
Your task:
1. Transliterate the given Manchu text into Latin script (Möllendorff style), preserving spacing and diacritics.
2. Translate it into natural, grammatical English while retaining historical tone and meaning.

Output format must always be exactly two lines:
Latin: <latin transliteration>
English: <english translation>

Do not add commentary or explanations.

Text:
""",  # noqa: E501
    Direction.ENGLISH_TO_MANCHU: """\
Your task:
1. Translate the given English text into classical Manchu script (ᠮᠠᠨᠵᡠ ᡤᡳᠰᡠᠨ).
2. Transliterate the Manchu translation into Möllendorff-style Latin.

Output format must always be exactly two lines:
Manchu: <manchu script>
Latin: <latin transliteration>

Do not include English again or commentary.

English Text:
""",
}


def build_prompt(text: str, direction: Direction) -> str:
    """
    Build the prompt for a translation request.

    Args:
        text: Text to translate
        direction: Translation direction

    Returns:
        The prompt

    """
    return _PREAMBLE + "\n" + _TASKS[direction] + text


def parse_reply(raw: str, direction: Direction) -> TranslationOutput:
    """
    Parse the model's reply into a :class:`TranslationOutput`.

    The reply must consist of labelled lines (``Latin: ...``, ``English: ...``
    or ``Manchu: ...``, label case ignored).  Values are matched by label, not
    by line position, so a reply with its lines swapped still parses.

    Args:
        raw: The reply text
        direction: Direction of the request

    Raises:
        MalformedReply: If a line is not labelled, a label does not belong to
            ``direction``, a label is repeated, or an expected label is missing

    Returns:
        The parsed output

    """
    expected = set(direction.fields)
    values: dict[str, str] = {}
    for line in raw.strip().splitlines():
        if not line.strip():
            continue
        match = REPLY_LINE.match(line.strip())
        if match is None:
            raise MalformedReply(raw, f"unlabelled line {line.strip()!r}")
        label = match.group(1).lower()
        if label not in expected:
            raise MalformedReply(raw, f"unexpected label {match.group(1)!r}")
        if label in values:
            raise MalformedReply(raw, f"label {match.group(1)!r} appears twice")
        values[label] = match.group(2).strip()
    missing = [field for field in direction.fields if field not in values]
    if missing:
        raise MalformedReply(raw, f"missing {', '.join(missing)}")
    return TranslationOutput(**values)


class ChatMessage(BaseModel):
    """Message of a chat-completion choice."""

    model_config = ConfigDict(extra="ignore")

    content: str


class ChatChoice(BaseModel):
    """One chat-completion choice."""

    model_config = ConfigDict(extra="ignore")

    message: ChatMessage


class ChatCompletion(BaseModel):
    """The part of a chat-completion response body that we read."""

    model_config = ConfigDict(extra="ignore")

    choices: list[ChatChoice] = Field(..., min_length=1)


class TranslationClient:
    """
    Client for an OpenAI-compatible chat-completion endpoint.

    Args:
        config: Endpoint, model, credential and timeout

    Keyword Args:
        session: HTTP session to use; a new one is created if omitted

    """

    def __init__(
        self, config: TranslationConfig, session: requests.Session | None = None
    ) -> None:
        self.config = config
        self.session = session or requests.Session()

    def complete(self, prompt: str) -> str:
        """
        Send a single-prompt completion request.

        Args:
            prompt: The prompt

        Raises:
            TranslationFailed: If no credential is configured, the request
                fails, or the response body is not a valid completion

        Returns:
            The text of the first choice

        """
        if not self.config.api_key:
            msg = "no API key configured (set DEEPSEEK_API_KEY or Preferences)"
            raise TranslationFailed(msg)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        payload = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        try:
            response = self.session.post(
                self.config.endpoint,
                headers=headers,
                json=payload,
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            raise TranslationFailed(str(e)) from e
        if response.status_code != 200:  # noqa: PLR2004
            raise TranslationFailed(response.text, status_code=response.status_code)
        try:
            completion = ChatCompletion.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            msg = f"unexpected response body: {e!s}"
            raise TranslationFailed(msg) from e
        return completion.choices[0].message.content


class TranslationService:
    """
    The translate flow: direction, the last output, and request sequencing.

    Args:
        client: The translation client

    Keyword Args:
        direction: Initial direction

    """

    def __init__(
        self,
        client: TranslationClient,
        direction: Direction = Direction.MANCHU_TO_ENGLISH,
    ) -> None:
        self.client = client
        #: The active direction.
        self.direction = direction
        #: The last applied output.
        self.output = TranslationOutput()
        self._sequencer = RequestSequencer()
        self._pending: dict[int, Direction] = {}

    def set_direction(self, direction: Direction) -> None:
        """
        Switch direction.  Clears the output and makes any in-flight request
        stale.
        """
        self.direction = direction
        self.output = TranslationOutput()
        self._sequencer.invalidate()
        self._pending.clear()

    def toggle_direction(self) -> Direction:
        """
        Switch to the opposite direction.

        Returns:
            The new direction

        """
        self.set_direction(self.direction.toggled())
        return self.direction

    def prepare(self, text: str) -> tuple[int, str, Direction]:
        """
        Validate input and start a request.

        Args:
            text: Text to translate

        Raises:
            EmptyInput: If ``text`` is blank; no request is started

        Returns:
            Tuple of (sequence number, prompt, direction)

        """
        if not text.strip():
            raise EmptyInput
        seq = self._sequencer.issue()
        self._pending = {seq: self.direction}
        return seq, build_prompt(text, self.direction), self.direction

    def complete(self, seq: int, raw: str) -> TranslationOutput | None:
        """
        Deliver the raw reply of a request.

        Raises:
            MalformedReply: If the reply of the latest request cannot be
                parsed; the previous output is kept

        Returns:
            The new output, or None if the reply was stale

        """
        direction = self._pending.pop(seq, None)
        if direction is None or not self._sequencer.is_current(seq):
            logger.debug(f"Discarding stale translation reply #{seq}")
            return None
        output = parse_reply(raw, direction)
        self.output = output
        return output

    def fail(self, seq: int, error: Exception | str) -> bool:
        """
        Deliver the failure of a request.  The previous output is kept.

        Returns:
            True if the failure belongs to the latest request

        """
        self._pending.pop(seq, None)
        current = self._sequencer.is_current(seq)
        if current:
            logger.error(f"Translation #{seq} failed: {error!s}")
        return current

    def translate(
        self, text: str, direction: Direction | None = None
    ) -> TranslationOutput:
        """
        Translate synchronously.

        Args:
            text: Text to translate

        Keyword Args:
            direction: Switch to this direction first; the active direction
                is used if omitted

        Raises:
            EmptyInput: If ``text`` is blank
            TranslationFailed: If the service call fails
            MalformedReply: If the reply cannot be parsed

        Returns:
            The output

        """
        if direction is not None and direction is not self.direction:
            self.set_direction(direction)
        seq, prompt, _ = self.prepare(text)
        try:
            raw = self.client.complete(prompt)
        except TranslationFailed as e:
            self.fail(seq, e)
            raise
        output = self.complete(seq, raw)
        return output if output is not None else self.output
