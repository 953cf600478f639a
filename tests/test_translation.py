"""Unit tests for the translation flow."""

from unittest.mock import Mock

import pytest
import requests

from manchuapp.config import TranslationConfig
from manchuapp.exc import EmptyInput, MalformedReply, TranslationFailed
from manchuapp.services.translation import (
    Direction,
    TranslationClient,
    TranslationOutput,
    TranslationService,
    build_prompt,
    parse_reply,
)


def make_response(status_code=200, body=None, text=""):
    """
    Helper to build a mocked ``requests.Response``.

    Args:
        status_code: HTTP status
        body: JSON body, or an exception instance raised by ``json()``
        text: Response text

    Returns:
        The mock response
    """
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def completion(content):
    """Helper to build a chat-completion body."""
    return {"id": "x", "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}  # noqa: E501


@pytest.fixture
def config():
    """Translation config with a credential."""
    return TranslationConfig(
        endpoint="https://translate.example/v1/chat/completions",
        model="test-model",
        api_key="secret",
        timeout_seconds=5,
    )


class TestDirection:
    """Test cases for Direction."""

    def test_labels(self):
        """Test each direction has its two labels in order."""
        assert Direction.MANCHU_TO_ENGLISH.labels == ("Latin", "English")
        assert Direction.ENGLISH_TO_MANCHU.labels == ("Manchu", "Latin")

    def test_toggled(self):
        """Test toggled() returns the opposite direction."""
        assert Direction.MANCHU_TO_ENGLISH.toggled() is Direction.ENGLISH_TO_MANCHU
        assert Direction.ENGLISH_TO_MANCHU.toggled() is Direction.MANCHU_TO_ENGLISH


class TestBuildPrompt:
    """Test cases for build_prompt()."""

    def test_manchu_to_english(self):
        """Test the prompt asks for Latin and English and ends with the text."""
        prompt = build_prompt("ᠠᠮᠪᠠ", Direction.MANCHU_TO_ENGLISH)
        assert "Latin: <latin transliteration>" in prompt
        assert "English: <english translation>" in prompt
        assert prompt.endswith("ᠠᠮᠪᠠ")

    def test_english_to_manchu(self):
        """Test the prompt asks for Manchu and Latin."""
        prompt = build_prompt("great", Direction.ENGLISH_TO_MANCHU)
        assert "Manchu: <manchu script>" in prompt
        assert "Latin: <latin transliteration>" in prompt
        assert prompt.endswith("English Text:\ngreat")


class TestParseReply:
    """Test cases for parse_reply()."""

    def test_manchu_to_english(self):
        """Test a well-formed Manchu to English reply."""
        output = parse_reply(
            "Latin: amba baita\nEnglish: a great matter", Direction.MANCHU_TO_ENGLISH
        )
        assert output == TranslationOutput(
            latin="amba baita", english="a great matter", manchu=""
        )

    def test_english_to_manchu(self):
        """Test a well-formed English to Manchu reply."""
        output = parse_reply(
            "Manchu: ᠠᠮᠪᠠ\nLatin: amba", Direction.ENGLISH_TO_MANCHU
        )
        assert output == TranslationOutput(manchu="ᠠᠮᠪᠠ", latin="amba", english="")

    def test_labels_ignore_case_and_whitespace(self):
        """Test labels match case-insensitively and values are stripped."""
        output = parse_reply(
            "  latin:   amba  \n\nENGLISH:great\n", Direction.MANCHU_TO_ENGLISH
        )
        assert output.latin == "amba"
        assert output.english == "great"

    def test_swapped_lines_assign_by_label(self):
        """Test values are matched by label, not by line position."""
        output = parse_reply(
            "English: great\nLatin: amba", Direction.MANCHU_TO_ENGLISH
        )
        assert output.latin == "amba"
        assert output.english == "great"

    def test_empty_value_is_allowed(self):
        """Test a label with an empty value parses to an empty field."""
        output = parse_reply("Latin:\nEnglish: great", Direction.MANCHU_TO_ENGLISH)
        assert output.latin == ""

    @pytest.mark.parametrize(
        ("raw", "reason"),
        [
            ("Latin: amba", "missing english"),
            ("", "missing latin, english"),
            ("amba\nEnglish: great", "unlabelled line"),
            ("Manchu: ᠠᠮᠪᠠ\nEnglish: great", "unexpected label"),
            ("Latin: a\nLatin: b\nEnglish: c", "appears twice"),
            ("Latin: a\nEnglish: b\nHere is a note", "unlabelled line"),
        ],
    )
    def test_malformed(self, raw, reason):
        """Test replies that do not have the two expected labels are rejected."""
        with pytest.raises(MalformedReply, match=reason) as excinfo:
            parse_reply(raw, Direction.MANCHU_TO_ENGLISH)
        assert excinfo.value.raw == raw

    def test_english_label_rejected_for_english_to_manchu(self):
        """Test a reply that echoes English is rejected for English to Manchu."""
        with pytest.raises(MalformedReply, match="unexpected label"):
            parse_reply("English: great\nLatin: amba", Direction.ENGLISH_TO_MANCHU)


class TestTranslationClient:
    """Test cases for TranslationClient."""

    def test_posts_prompt(self, config):
        """Test complete() posts the prompt and returns the first choice."""
        session = Mock()
        session.post.return_value = make_response(body=completion("Latin: a\nEnglish: b"))
        client = TranslationClient(config, session=session)

        assert client.complete("prompt text") == "Latin: a\nEnglish: b"

        session.post.assert_called_once_with(
            "https://translate.example/v1/chat/completions",
            headers={
                "Content-Type": "application/json",
                "Authorization": "Bearer secret",
            },
            json={
                "model": "test-model",
                "messages": [{"role": "user", "content": "prompt text"}],
            },
            timeout=5,
        )

    def test_missing_api_key(self, config):
        """Test no request is made without a credential."""
        session = Mock()
        client = TranslationClient(
            TranslationConfig(endpoint=config.endpoint), session=session
        )
        with pytest.raises(TranslationFailed, match="no API key"):
            client.complete("prompt")
        session.post.assert_not_called()

    def test_network_error(self, config):
        """Test transport errors become TranslationFailed."""
        session = Mock()
        session.post.side_effect = requests.Timeout("read timed out")
        with pytest.raises(TranslationFailed, match="read timed out"):
            TranslationClient(config, session=session).complete("prompt")

    def test_http_error(self, config):
        """Test a non-200 status becomes TranslationFailed with the status."""
        session = Mock()
        session.post.return_value = make_response(401, text="Unauthorized")
        with pytest.raises(TranslationFailed) as excinfo:
            TranslationClient(config, session=session).complete("prompt")
        assert excinfo.value.status_code == 401
        assert excinfo.value.reason == "Unauthorized"

    def test_body_not_json(self, config):
        """Test an undecodable body becomes TranslationFailed."""
        session = Mock()
        session.post.return_value = make_response(body=ValueError("not JSON"))
        with pytest.raises(TranslationFailed, match="unexpected response body"):
            TranslationClient(config, session=session).complete("prompt")

    @pytest.mark.parametrize(
        "body", [{}, {"choices": []}, {"choices": [{"message": {}}]}]
    )
    def test_body_wrong_shape(self, config, body):
        """Test a body without a first choice's content becomes TranslationFailed."""
        session = Mock()
        session.post.return_value = make_response(body=body)
        with pytest.raises(TranslationFailed, match="unexpected response body"):
            TranslationClient(config, session=session).complete("prompt")


class TestTranslationService:
    """Test cases for TranslationService."""

    def test_empty_input(self):
        """Test blank text is rejected before any request."""
        client = Mock()
        service = TranslationService(client)
        with pytest.raises(EmptyInput):
            service.translate("   ")
        client.complete.assert_not_called()

    def test_translate(self):
        """Test a synchronous translation fills the direction's fields."""
        client = Mock()
        client.complete.return_value = "Latin: amba\nEnglish: great"
        service = TranslationService(client)
        output = service.translate("ᠠᠮᠪᠠ")
        assert output == TranslationOutput(latin="amba", english="great")
        assert service.output == output

    def test_translate_failure_keeps_output(self):
        """Test a failed call re-raises and keeps the previous output."""
        client = Mock()
        client.complete.return_value = "Latin: amba\nEnglish: great"
        service = TranslationService(client)
        previous = service.translate("ᠠᠮᠪᠠ")
        client.complete.side_effect = TranslationFailed("offline")
        with pytest.raises(TranslationFailed):
            service.translate("ᠪᠠᡳᡨᠠ")
        assert service.output == previous

    def test_malformed_reply_keeps_output(self):
        """Test a malformed reply raises and keeps the previous output."""
        service = TranslationService(Mock())
        seq, _, _ = service.prepare("ᠠᠮᠪᠠ")
        with pytest.raises(MalformedReply):
            service.complete(seq, "I cannot help with that.")
        assert service.output == TranslationOutput()

    def test_stale_reply_is_discarded(self):
        """Test only the latest request's reply is applied."""
        service = TranslationService(Mock())
        first, _, _ = service.prepare("one")
        second, _, _ = service.prepare("two")
        assert service.complete(second, "Latin: b\nEnglish: two").english == "two"
        assert service.complete(first, "Latin: a\nEnglish: one") is None
        assert service.output.english == "two"

    def test_direction_change_invalidates_request(self):
        """Test a reply for the old direction is dropped after switching."""
        service = TranslationService(Mock())
        seq, _, direction = service.prepare("ᠠᠮᠪᠠ")
        assert direction is Direction.MANCHU_TO_ENGLISH
        service.toggle_direction()
        assert service.complete(seq, "Latin: amba\nEnglish: great") is None
        assert service.output == TranslationOutput()

    def test_set_direction_clears_output(self):
        """Test switching direction clears the output."""
        client = Mock()
        client.complete.return_value = "Latin: amba\nEnglish: great"
        service = TranslationService(client)
        service.translate("ᠠᠮᠪᠠ")
        service.set_direction(Direction.ENGLISH_TO_MANCHU)
        assert service.direction is Direction.ENGLISH_TO_MANCHU
        assert service.output == TranslationOutput()

    def test_translate_with_direction(self):
        """Test translate() can switch direction for the call."""
        client = Mock()
        client.complete.return_value = "Manchu: ᠠᠮᠠ\nLatin: ama"
        service = TranslationService(client)
        output = service.translate("father", Direction.ENGLISH_TO_MANCHU)
        assert output == TranslationOutput(manchu="ᠠᠮᠠ", latin="ama")
        assert service.direction is Direction.ENGLISH_TO_MANCHU

    def test_english_to_manchu_prompt(self):
        """Test prepare() builds the prompt of the active direction."""
        service = TranslationService(Mock(), direction=Direction.ENGLISH_TO_MANCHU)
        _, prompt, direction = service.prepare("great")
        assert direction is Direction.ENGLISH_TO_MANCHU
        assert prompt == build_prompt("great", Direction.ENGLISH_TO_MANCHU)

    def test_fail(self):
        """Test fail() reports whether the failure is current."""
        service = TranslationService(Mock())
        first, _, _ = service.prepare("one")
        second, _, _ = service.prepare("two")
        assert service.fail(first, "late") is False
        assert service.fail(second, "boom") is True
