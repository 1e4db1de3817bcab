"""Rewrite readme.io widget blocks into standard Markdown.

A widget block looks like::

    [block:callout]
    {
      "type": "info",
      "title": "Heads up",
      "body": "Some text."
    }
    [/block]

Each supported widget type has a converter turning the decoded JSON payload
into plain Markdown.  Converted output never contains widget syntax, so
running the transform again leaves it unchanged.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from bs4 import BeautifulSoup
from markdownify import markdownify

from docsync.models.config import MarkdownizeOptions
from docsync.models.page import Page
from docsync.services.fences import fenced_lines, line_number_at

logger = logging.getLogger(__name__)

_WIDGET_RE = re.compile(
    r"^\[block:(?P<type>[\w-]+)\][ \t]*\r?\n(?P<body>.*?)\r?\n\[/block\][ \t]*$",
    re.MULTILINE | re.DOTALL,
)

_CALLOUT_MARKERS = {
    "info": "📘",
    "success": "👍",
    "warning": "🚧",
    "danger": "❗️",
    "error": "❗️",
}
_DEFAULT_CALLOUT_MARKER = _CALLOUT_MARKERS["info"]

# Tags and attributes markdownify can express without losing information
_MARKDOWN_TAGS = {
    "a", "b", "blockquote", "br", "code", "em", "h1", "h2", "h3", "h4", "h5",
    "h6", "hr", "i", "img", "li", "ol", "p", "pre", "strong", "ul",
}
_MARKDOWN_ATTRS = {"href", "src", "alt", "title"}
_DOCUMENT_TAGS = {"html", "head", "body"}


def _fence_for(code: str) -> str:
    """Return a backtick fence longer than any backtick run inside *code*."""
    longest = max((len(run) for run in re.findall(r"`+", code)), default=0)
    return "`" * max(3, longest + 1)


def _text(value: Any) -> str:
    """Return *value* as text; ``None`` and containers count as empty."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def _convert_code(data: Dict[str, Any]) -> Optional[str]:
    codes = data.get("codes")
    if not isinstance(codes, list):
        return None

    blocks: List[str] = []
    for entry in codes:
        if not isinstance(entry, dict):
            continue
        code = _text(entry.get("code"))
        language = _text(entry.get("language"))
        name = _text(entry.get("name"))
        if name and not language:
            language = "text"
        info = f"{language} {name}".strip()
        fence = _fence_for(code)
        blocks.append(f"{fence}{info}\n{code}\n{fence}")
    if not blocks:
        return None
    return "\n\n".join(blocks)


def _quote(text: str) -> List[str]:
    return [f"> {line}" if line else ">" for line in text.split("\n")]


def _convert_callout(data: Dict[str, Any]) -> Optional[str]:
    title = _text(data.get("title")).strip()
    body = _text(data.get("body")).strip()
    if not title and not body:
        return None

    marker = _CALLOUT_MARKERS.get(_text(data.get("type")).lower(), _DEFAULT_CALLOUT_MARKER)
    lines = [f"> {marker} {title}".rstrip()]
    if body:
        lines.append(">")
        lines.extend(_quote(body))
    return "\n".join(lines)


def _convert_image(data: Dict[str, Any]) -> Optional[str]:
    images = data.get("images")
    if not isinstance(images, list):
        return None

    rendered: List[str] = []
    for entry in images:
        if not isinstance(entry, dict):
            continue
        image = entry.get("image")
        # [url, file name, width, height, ...]
        if not isinstance(image, list) or not image:
            continue
        url = _text(image[0]).strip()
        if not url:
            continue
        name = _text(image[1]) if len(image) > 1 else ""
        alt = (_text(entry.get("caption")) or name).strip()
        rendered.append(f"![{alt}]({url})")
    if not rendered:
        return None
    return "\n\n".join(rendered)


def _is_markdown_expressible(html: str) -> bool:
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(True):
        if tag.name in _DOCUMENT_TAGS:
            continue
        if tag.name not in _MARKDOWN_TAGS:
            return False
        if set(tag.attrs) - _MARKDOWN_ATTRS:
            return False
    return True


def _convert_html(data: Dict[str, Any]) -> Optional[str]:
    html = data.get("html")
    if not isinstance(html, str):
        return None

    html = html.strip()
    if html and _is_markdown_expressible(html):
        return markdownify(html, heading_style="ATX").strip()
    # Standard Markdown allows raw HTML, keep it as is
    return html


_CONVERTERS: Dict[str, Callable[[Dict[str, Any]], Optional[str]]] = {
    "code": _convert_code,
    "callout": _convert_callout,
    "image": _convert_image,
    "html": _convert_html,
}

WIDGET_TYPES = tuple(_CONVERTERS)


def markdownize(
    page: Page,
    widgets: Iterable[str] = WIDGET_TYPES,
    options: Optional[MarkdownizeOptions] = None,
) -> str:
    """Return *page*'s content with the enabled *widgets* converted to Markdown.

    The page itself is not modified.  Blocks inside fenced code, blocks of
    other widget types, and blocks whose payload cannot be decoded are left
    untouched.

    Raises:
        ValueError: if *widgets* names an unsupported widget type.
    """
    options = options or MarkdownizeOptions()
    enabled = set(widgets)
    unknown = enabled - set(WIDGET_TYPES)
    if unknown:
        raise ValueError(
            f"Unsupported widget(s): {', '.join(sorted(unknown))}. "
            f"Supported: {', '.join(WIDGET_TYPES)}."
        )

    content = page.content
    skipped = fenced_lines(content.split("\n"))
    log = logger.info if options.verbose else logger.debug

    def replace(match: re.Match) -> str:
        widget = match.group("type")
        if widget not in enabled:
            return match.group(0)

        line_number = line_number_at(content, match.start())
        if line_number - 1 in skipped:
            return match.group(0)

        try:
            data = json.loads(match.group("body"))
        except json.JSONDecodeError as exc:
            logger.warning(
                "Markdownize: %s:%d [block:%s] has invalid JSON – %s",
                page.path, line_number, widget, exc,
            )
            return match.group(0)

        converted = _CONVERTERS[widget](data) if isinstance(data, dict) else None
        if converted is None:
            logger.warning(
                "Markdownize: %s:%d [block:%s] has no usable content, left unchanged",
                page.path, line_number, widget,
            )
            return match.group(0)

        log("Markdownize: %s:%d [block:%s] replaced with:\n%s", page.path, line_number, widget, converted)
        return converted

    return _WIDGET_RE.sub(replace, content)
