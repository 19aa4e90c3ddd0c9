"""HTML content extraction — Turns concatenated attribute values into indexable text."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from directories_solr.indexers.base.exceptions import ContentParsingError

logger = logging.getLogger(__name__)

PARSING_ERROR_MESSAGE = "Error during document parsing."

# Elements whose text is never part of the document body
_NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]


def concatenate_values(values: Iterable[str | None]) -> str:
    """Join attribute values, each preceded by a single space.

    Empty values and the literal ``"null"`` are skipped.
    """
    parts: list[str] = []
    for value in values:
        if value and value != "null":
            parts.append(" ")
            parts.append(value)
    return "".join(parts)


class HtmlContentExtractor:
    """Extracts the plain-text body of an HTML fragment.

    Args:
        max_chars: Hard cap on the extracted text length. ``None`` means
            unbounded.
        parser: BeautifulSoup tree builder to use.
    """

    def __init__(self, max_chars: int | None = None, parser: str = "html.parser") -> None:
        self.max_chars = max_chars
        self._parser = parser

    def extract(self, raw: str, entity_id: int | str = "") -> str:
        """Parse ``raw`` as HTML and return its visible text.

        Args:
            raw: HTML (or plain) text.
            entity_id: Entity the text belongs to, reported on failure.

        Returns:
            Whitespace-normalised text, truncated to ``max_chars``.

        Raises:
            ContentParsingError: If the markup is rejected by the parser.
        """
        if not raw.strip():
            return ""

        try:
            soup = BeautifulSoup(raw.encode("utf-8"), self._parser, from_encoding="utf-8")
        except (ParserRejectedMarkup, LookupError, ValueError) as e:
            logger.debug("HTML parser rejected content of entity %s: %s", entity_id, e)
            raise ContentParsingError(entity_id, PARSING_ERROR_MESSAGE) from e

        for element in soup(_NON_CONTENT_TAGS):
            element.decompose()

        return self._collect(soup.stripped_strings)

    def _collect(self, chunks: Iterable[str]) -> str:
        """Join text chunks with single spaces, stopping at ``max_chars``."""
        out: list[str] = []
        length = 0
        for chunk in chunks:
            words = " ".join(chunk.split())
            if not words:
                continue
            piece = f" {words}" if out else words
            if self.max_chars is not None and length + len(piece) >= self.max_chars:
                out.append(piece[: self.max_chars - length])
                break
            out.append(piece)
            length += len(piece)
        return "".join(out)
