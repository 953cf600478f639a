"""Services package initialization."""

from manchuapp.services.alignment import AlignmentIndex, Script
from manchuapp.services.export_csv import CSVExporter
from manchuapp.services.navigation import Direction, NavigationController
from manchuapp.services.results import ResultSetManager
from manchuapp.services.selection import Selection
from manchuapp.services.sequence import RequestSequencer
from manchuapp.services.storage import CorpusImporter, CorpusStore, group_by_source
from manchuapp.services.tokenizer import Token, TokenId, tokenize
from manchuapp.services.translation import (
    Direction as TranslationDirection,
)
from manchuapp.services.translation import (
    TranslationClient,
    TranslationOutput,
    TranslationService,
    build_prompt,
    parse_reply,
)

__all__ = [
    "AlignmentIndex",
    "CSVExporter",
    "CorpusImporter",
    "CorpusStore",
    "Direction",
    "NavigationController",
    "RequestSequencer",
    "ResultSetManager",
    "Script",
    "Selection",
    "Token",
    "TokenId",
    "TranslationClient",
    "TranslationDirection",
    "TranslationOutput",
    "TranslationService",
    "build_prompt",
    "group_by_source",
    "parse_reply",
    "tokenize",
]
