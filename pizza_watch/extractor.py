"""
Embedded State Extractor

Finds the online-ordering state blob (``window.__OO_STATE__ = {...};``) in a
rendered page and turns it into a typed EmbeddedState.

The blob is captured by brace-depth scanning that steps over quoted strings
and comments, so braces inside menu descriptions cannot end the capture
early. The captured text is parsed structurally (see ``literal.py``) and is
never executed.
"""

import logging
import re
from typing import Any

from bs4 import BeautifulSoup

from .exceptions import ExtractionError, LiteralParseError
from .literal import parse_literal
from .models import EmbeddedState, GroupRecord, ItemRecord, MenuRecord, Node, OtherNode

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "window.__OO_STATE__"
MENU_KEY_PREFIX = "Menu:"
MENU_TYPENAME = "Menu"

_SCAN_RE = re.compile(r"[{}\"'`]|//|/\*")
_QUOTED_RES = {
    '"': re.compile(r'"(?:[^"\\]|\\[\s\S])*"'),
    "'": re.compile(r"'(?:[^'\\]|\\[\s\S])*'"),
    "`": re.compile(r"`(?:[^`\\]|\\[\s\S])*`"),
}


def capture_object_literal(text: str, start: int) -> str:
    """
    Return the balanced ``{...}`` literal beginning at or after ``start``.

    Only whitespace may precede the opening brace.
    """
    pos = start
    while pos < len(text) and text[pos].isspace():
        pos += 1
    if pos >= len(text) or text[pos] != "{":
        raise ExtractionError(
            ExtractionError.UNBALANCED_BRACES, "no object literal after marker"
        )

    begin = pos
    depth = 0
    while True:
        match = _SCAN_RE.search(text, pos)
        if not match:
            raise ExtractionError(
                ExtractionError.UNBALANCED_BRACES, f"depth {depth} at end of input"
            )
        token = match.group(0)

        if token == "{":
            depth += 1
            pos = match.end()
        elif token == "}":
            depth -= 1
            pos = match.end()
            if depth == 0:
                return text[begin:pos]
        elif token == "//":
            newline = text.find("\n", match.end())
            if newline < 0:
                raise ExtractionError(
                    ExtractionError.UNBALANCED_BRACES, "comment runs to end of input"
                )
            pos = newline + 1
        elif token == "/*":
            end = text.find("*/", match.end())
            if end < 0:
                raise ExtractionError(
                    ExtractionError.UNBALANCED_BRACES, "unterminated block comment"
                )
            pos = end + 2
        else:
            quoted = _QUOTED_RES[token].match(text, match.start())
            if not quoted:
                raise ExtractionError(
                    ExtractionError.UNBALANCED_BRACES,
                    f"unterminated string at offset {match.start()}",
                )
            pos = quoted.end()


class StateExtractor:
    """Extracts and classifies the embedded ordering state from page HTML."""

    def __init__(self, marker: str = DEFAULT_MARKER):
        self.marker = marker
        self._marker_re = re.compile(re.escape(marker) + r"\s*=(?!=)")

    def extract(self, html: str) -> EmbeddedState:
        """Parse the state blob out of ``html``."""
        logger.info("Extracting embedded state from HTML...")
        literal = self._find_literal(html)
        logger.debug(f"Captured {len(literal)} characters of state literal")

        try:
            raw = parse_literal(literal)
        except (LiteralParseError, ValueError, RecursionError) as e:
            raise ExtractionError(ExtractionError.PARSE_FAILED, str(e)) from e

        if not isinstance(raw, dict):
            raise ExtractionError(
                ExtractionError.PARSE_FAILED,
                f"expected an object, got {type(raw).__name__}",
            )

        state = classify_state(raw)
        logger.debug(f"Embedded state holds {len(state.records)} records, {len(state.menus)} menu(s)")
        return state

    def _find_literal(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for script in soup.find_all("script"):
            body = script.string or ""
            match = self._marker_re.search(body)
            if match:
                return capture_object_literal(body, match.end())

        # Markup that html.parser could not split into script tags
        match = self._marker_re.search(html)
        if match:
            logger.debug(f"{self.marker} found outside a <script> tag")
            return capture_object_literal(html, match.end())

        raise ExtractionError(ExtractionError.MARKER_NOT_FOUND, self.marker)


def classify_state(raw: dict[str, Any]) -> EmbeddedState:
    """Build the typed node view of a parsed state mapping."""
    records: dict[str, Node] = {}
    for key, value in raw.items():
        if (
            key.startswith(MENU_KEY_PREFIX)
            and isinstance(value, dict)
            and value.get("__typename") == MENU_TYPENAME
        ):
            groups = _resolve(value.get("groups"), raw)
            records[key] = MenuRecord(
                key=key,
                groups=[_classify_group(g, raw) for g in _as_list(groups)],
            )
        else:
            records[key] = OtherNode(value)
    return EmbeddedState(records=records)


def _classify_group(value: Any, raw: dict) -> Node:
    value = _resolve(value, raw)
    if not isinstance(value, dict) or not isinstance(value.get("name"), str):
        return OtherNode(value)
    items = _resolve(value.get("items"), raw)
    return GroupRecord(
        name=value["name"],
        items=[_classify_item(i, raw) for i in _as_list(items)],
    )


def _classify_item(value: Any, raw: dict) -> Node:
    value = _resolve(value, raw)
    if not isinstance(value, dict) or "name" not in value:
        return OtherNode(value)
    image_urls = _resolve(value.get("imageUrls"), raw)
    return ItemRecord(
        name=value["name"],
        description=value.get("description"),
        image_urls=image_urls if isinstance(image_urls, dict) else {},
    )


def _resolve(value: Any, raw: dict) -> Any:
    """Follow a normalized-cache ``{"__ref": key}`` pointer one hop."""
    if isinstance(value, dict) and set(value) == {"__ref"} and isinstance(value["__ref"], str):
        return raw.get(value["__ref"])
    return value


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []
