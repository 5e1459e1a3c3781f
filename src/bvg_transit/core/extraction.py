"""Two-level pattern extraction for BVG mobile pages.

Pages are never parsed into a document tree. A coarse grammar cuts the page
into one fragment per repeating item (a connection, a departure row) and a
fine grammar pulls the fields out of each fragment. A fragment that does not
fully match its fine grammar means the page layout changed, so it raises
``ParseError`` instead of being skipped.
"""

import html
import logging
import re
from collections.abc import Iterator

from .exceptions import ParseError

logger = logging.getLogger(__name__)

Fields = tuple[str | None, ...]


def resolve_entities(text: str | None) -> str | None:
    """Resolve numeric and named HTML character entities."""
    if text is None:
        return None
    return html.unescape(text)


def _compile(pattern: str | re.Pattern[str], flags: int) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, flags)


class ItemSplitter:
    """Coarse grammar: locates the fragment of each repeating item."""

    def __init__(self, pattern: str | re.Pattern[str], flags: int = re.DOTALL):
        self.pattern = _compile(pattern, flags)

    def split(self, page: str) -> Iterator[str]:
        """Yield the interior (group 1) of every match, in page order."""
        for match in self.pattern.finditer(page):
            yield match.group(1)


class FieldExtractor:
    """Fine grammar: extracts the fields of one fragment.

    The grammar has to match the whole fragment. Absent optional groups come
    back as ``None``; present groups are entity-resolved.
    """

    def __init__(self, pattern: str | re.Pattern[str], flags: int = re.DOTALL):
        self.pattern = _compile(pattern, flags)

    def extract(self, fragment: str) -> Fields | None:
        match = self.pattern.fullmatch(fragment)
        if match is None:
            return None
        return tuple(resolve_entities(group) for group in match.groups())


def extract_items(
    page: str, splitter: ItemSplitter, extractor: FieldExtractor, url: str
) -> list[Fields]:
    """Run both grammars over a page.

    Args:
        page: Page text
        splitter: Coarse grammar
        extractor: Fine grammar
        url: URL the page was fetched from, for diagnosis

    Returns:
        One field tuple per item, in page order

    Raises:
        ParseError: If any fragment does not match the fine grammar
    """
    items: list[Fields] = []
    for fragment in splitter.split(page):
        fields = extractor.extract(fragment)
        if fields is None:
            logger.warning(f"Item on {url} does not match its grammar")
            raise ParseError(
                f"cannot parse '{fragment}' on {url}", fragment=fragment, url=url
            )
        items.append(fields)
    return items


def match_page(pattern: re.Pattern[str], page: str, url: str) -> Fields:
    """Full-match a page-level header grammar; groups are entity-resolved.

    Raises:
        ParseError: If the page does not match
    """
    match = pattern.fullmatch(page)
    if match is None:
        logger.warning(f"Page {url} does not match its header grammar")
        raise ParseError(f"cannot parse page on {url}", fragment=page, url=url)
    return tuple(resolve_entities(group) for group in match.groups())
