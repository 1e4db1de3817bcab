"""Link extraction from Markdown page content."""

import re
from typing import List

from docsync.models.link import (
    MAILTO_PREFIX,
    XREF_PREFIX,
    BaseLink,
    MailtoLink,
    UrlLink,
    XrefLink,
)
from docsync.services.fences import fenced_lines

# [text](target) and ![alt](target), with an optional "title" after the target
_INLINE_LINK_RE = re.compile(
    r"!?\[[^\]]*\]\(\s*<?(?P<href>[^)\s>]+)>?(?:\s+[\"'][^\"']*[\"'])?\s*\)"
)

# Bare or <autolinked> URLs
_BARE_URL_RE = re.compile(r"https?://[^\s<>()\[\]\"'`]+")

# `code` and ``code`` spans
_CODE_SPAN_RE = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)")

# Characters that end a sentence rather than a bare URL
_TRAILING_PUNCTUATION = ".,;:!?*_"

_URL_PREFIXES = ("http://", "https://")


def _blank_code_spans(line: str) -> str:
    """Replace inline code spans with spaces, keeping column offsets."""
    return _CODE_SPAN_RE.sub(lambda match: " " * len(match.group()), line)


def _classify(href: str, line_number: int, source: str) -> BaseLink | None:
    """Return the link object matching *href*, or *None* for links we do not check."""
    lowered = href.lower()
    if lowered.startswith(XREF_PREFIX):
        return XrefLink(href=href, line_number=line_number, source=source)
    if lowered.startswith(MAILTO_PREFIX):
        return MailtoLink(href=href, line_number=line_number, source=source)
    if lowered.startswith(_URL_PREFIXES):
        return UrlLink(href=href, line_number=line_number, source=source)
    # Relative paths, anchors, tel:, javascript: …
    return None


def extract_links(content: str, source: str = "") -> List[BaseLink]:
    """Return every checkable link in *content*, in document order.

    Fenced code blocks and inline code spans are skipped.  *source* is
    recorded on each link so that failures can be reported against the page.
    """
    lines = content.split("\n")
    skipped = fenced_lines(lines)
    links: List[BaseLink] = []

    for index, line in enumerate(lines):
        if index in skipped:
            continue
        line_number = index + 1
        line = _blank_code_spans(line)

        inline_spans = []
        for match in _INLINE_LINK_RE.finditer(line):
            inline_spans.append(match.span())
            link = _classify(match.group("href"), line_number, source)
            if link is not None:
                links.append(link)

        for match in _BARE_URL_RE.finditer(line):
            start = match.start()
            if any(span_start <= start < span_end for span_start, span_end in inline_spans):
                continue
            url = match.group().rstrip(_TRAILING_PUNCTUATION)
            links.append(UrlLink(href=url, line_number=line_number, source=source))

    return links
