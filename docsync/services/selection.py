"""Choose the pages a command acts upon."""

from pathlib import Path
from typing import Iterable, List, Optional, Set

from docsync.models.page import Page
from docsync.services.catalog import Catalog


def select_pages(
    catalog: Catalog,
    categories: Iterable[str] = (),
    file: Optional[str] = None,
    staged: Optional[Set[Path]] = None,
) -> List[Page]:
    """Return the page at *file* when given, else the pages in *categories*.

    When *staged* (absolute paths from the Git index) is given, only pages
    whose file is staged are kept.
    """
    if file:
        pages = catalog.find_page_by_path(file)
    else:
        pages = catalog.find_pages_in_categories(categories)

    if staged is not None:
        root = catalog.root.resolve()
        pages = [page for page in pages if (root / page.path).resolve() in staged]
    return pages
