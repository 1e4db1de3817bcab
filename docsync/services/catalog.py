"""Catalog: every page loaded from a docs directory tree."""

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Tuple

from docsync.exceptions import CatalogError, PageParseError
from docsync.models.page import CONTENT_SUFFIX, Page

logger = logging.getLogger(__name__)


def _normalise_path(path: str) -> str:
    """Return *path* as a POSIX path without a leading ``./``."""
    return str(PurePosixPath(str(path).replace("\\", "/")))


class Catalog:
    """Immutable, ordered collection of the pages found under *root*.

    Page objects themselves stay mutable so that commands can rewrite their
    content before writing them back.
    """

    def __init__(self, root: Path, pages: Iterable[Page]):
        self.root = Path(root)
        self._pages: Tuple[Page, ...] = tuple(pages)

    @classmethod
    def build(cls, root_dir: Path, strict: bool = False) -> "Catalog":
        """Load every ``*.md`` file below *root_dir*.

        Files that cannot be parsed are logged and skipped, unless *strict*
        is set, in which case the first :class:`PageParseError` propagates.

        Raises:
            CatalogError: if *root_dir* is not a directory.
        """
        root = Path(root_dir)
        if not root.is_dir():
            raise CatalogError(f"Docs directory [{root}] does not exist.")

        pages: List[Page] = []
        for file in sorted(root.rglob(f"*{CONTENT_SUFFIX}"), key=lambda p: p.as_posix()):
            if not file.is_file():
                continue
            try:
                pages.append(Page.from_file(file, root))
            except PageParseError as exc:
                if strict:
                    raise
                logger.warning("Catalog: skipping %s – %s", file, exc)

        logger.debug("Catalog: loaded %d pages from %s", len(pages), root)
        return cls(root, pages)

    @property
    def pages(self) -> Tuple[Page, ...]:
        return self._pages

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self):
        return iter(self._pages)

    def find_page_by_path(self, path: str) -> List[Page]:
        """Return the pages stored at *path* (relative to the docs directory)."""
        wanted = _normalise_path(path)
        return [page for page in self._pages if page.path == wanted]

    def find_page_by_slug(self, slug: str) -> Optional[Page]:
        for page in self._pages:
            if page.slug == slug:
                return page
        return None

    def find_pages_in_categories(self, categories: Iterable[str]) -> List[Page]:
        """Return the pages whose category is in *categories*, in catalog order."""
        wanted = set(categories)
        return [page for page in self._pages if page.category in wanted]
