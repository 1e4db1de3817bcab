"""Front matter utilities: split a content file into headers and body, and back."""

import re
from typing import Any, Dict, Tuple

import yaml

from docsync.exceptions import PageParseError

# Leading "---" line, the YAML block, then the closing "---" line
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<yaml>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.MULTILINE | re.DOTALL,
)

_DELIMITER = "---\n"


def parse_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split *text* into ``(headers, body)``.

    Text without a leading front matter block yields empty headers and the
    whole text as body.

    Raises:
        PageParseError: if the block is not valid YAML, is not a mapping,
            or has non-string keys.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text

    try:
        headers = yaml.safe_load(match.group("yaml"))
    except yaml.YAMLError as exc:
        raise PageParseError(f"Malformed front matter: {exc}") from exc

    if headers is None:
        headers = {}
    if not isinstance(headers, dict):
        raise PageParseError(
            f"Front matter must be a mapping, got {type(headers).__name__}."
        )
    bad_keys = [key for key in headers if not isinstance(key, str)]
    if bad_keys:
        raise PageParseError(
            f"Front matter keys must be strings, got {', '.join(repr(key) for key in bad_keys)}."
        )

    return headers, text[match.end():]


def render_frontmatter(headers: Dict[str, Any]) -> str:
    """Return the front matter block for *headers*, delimiters included.

    Key order is preserved so that files stay stable across fetches.
    """
    if not headers:
        return _DELIMITER + _DELIMITER
    block = yaml.safe_dump(
        dict(headers),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"{_DELIMITER}{block}{_DELIMITER}"


def render_document(headers: Dict[str, Any], content: str) -> str:
    """Return a full Markdown document: front matter followed by *content*."""
    return render_frontmatter(headers) + content
