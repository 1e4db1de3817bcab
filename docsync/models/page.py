import hashlib
import json
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError

from docsync.exceptions import PageParseError
from docsync.models.link import BaseLink
from docsync.services.frontmatter import parse_frontmatter, render_document
from docsync.services.links import extract_links

CONTENT_SUFFIX = ".md"

# Headers kept when a page is built from an API document
REMOTE_HEADERS = ("title", "excerpt", "hidden")


class Page(BaseModel):
    """Unified internal model representing one documentation page."""

    category: Optional[str] = None
    parent_slug: Optional[str] = None
    slug: str
    content: str = ""  # body content (markdown, without frontmatter)
    headers: Dict[str, Any] = Field(default_factory=dict)

    @property
    def path(self) -> str:
        """POSIX path of the page file, relative to the docs directory."""
        parts = [part for part in (self.category, self.parent_slug) if part]
        return str(PurePosixPath(*parts, self.slug + CONTENT_SUFFIX))

    @property
    def ref(self) -> str:
        """Short human-readable reference used in command output."""
        parts = [part for part in (self.category, self.parent_slug) if part]
        return "/".join(parts + [self.slug])

    @property
    def hash(self) -> str:
        """Digest of headers and content.

        Header keys are sorted and ``None`` values dropped before hashing, so
        the digest does not depend on front matter key order.
        """
        canonical = json.dumps(
            {
                "headers": {key: value for key, value in self.headers.items() if value is not None},
                "content": self.content,
            },
            sort_keys=True,
            ensure_ascii=False,
            separators=(",", ":"),
            default=str,
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    @property
    def links(self) -> List[BaseLink]:
        return extract_links(self.content, self.path)

    def same_as(self, other: "Page") -> bool:
        return self.hash == other.hash

    @classmethod
    def from_file(cls, path: Path, base_dir: Path) -> "Page":
        """Load the page stored at *path* below *base_dir*.

        The file location gives the hierarchy: ``category/slug.md`` or
        ``category/parent/slug.md``.

        Raises:
            PageParseError: on unreadable files, malformed front matter, or a
                location that does not fit the hierarchy.
        """
        path = Path(path)
        try:
            relative = path.resolve().relative_to(Path(base_dir).resolve())
        except ValueError as exc:
            raise PageParseError(f"{path} is not inside {base_dir}") from exc

        parts = relative.parts
        if path.suffix != CONTENT_SUFFIX or len(parts) not in (2, 3):
            raise PageParseError(
                f"{relative.as_posix()} is not laid out as category/slug{CONTENT_SUFFIX} "
                f"or category/parent/slug{CONTENT_SUFFIX}"
            )

        try:
            # newline="" keeps CRLF bodies byte for byte
            with open(path, encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise PageParseError(f"Cannot read {path}: {exc}") from exc

        try:
            headers, content = parse_frontmatter(text)
        except PageParseError as exc:
            raise PageParseError(f"{relative.as_posix()}: {exc}") from exc

        try:
            return cls(
                category=parts[0],
                parent_slug=parts[1] if len(parts) == 3 else None,
                slug=path.stem,
                content=content,
                headers=headers,
            )
        except ValidationError as exc:
            raise PageParseError(f"{relative.as_posix()}: {exc}") from exc

    @classmethod
    def from_remote(
        cls,
        data: Dict[str, Any],
        category: Optional[str] = None,
        parent_slug: Optional[str] = None,
    ) -> "Page":
        """Convert a document returned by the readme.io API to a :class:`Page`."""
        headers = {key: data[key] for key in REMOTE_HEADERS if key in data}
        return cls(
            category=category,
            parent_slug=parent_slug,
            slug=data["slug"],
            content=data.get("body") or "",
            headers=headers,
        )

    def write_to(self, base_dir: Path) -> Path:
        """Write the page below *base_dir* and return the written path."""
        if not self.category:
            raise ValueError(f"Page [{self.slug}] has no category and cannot be written.")
        output = Path(base_dir) / self.path
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(render_document(self.headers, self.content))
        return output
