"""Options and page loading shared by the commands."""

from pathlib import Path
from typing import List, Optional, Tuple

import click

from docsync.models.config import DEFAULT_DOCS_DIR, SyncConfig, resolve_categories
from docsync.models.page import Page
from docsync.services.catalog import Catalog
from docsync.services.git import staged_files
from docsync.services.selection import select_pages

category_slugs_argument = click.argument("category_slugs", required=False)

dir_option = click.option(
    "-d",
    "--dir",
    "docs_dir",
    default=DEFAULT_DOCS_DIR,
    show_default=True,
    type=click.Path(file_okay=False),
    help="Directory holding the Markdown content files.",
)

file_option = click.option(
    "-f",
    "--file",
    "file",
    default=None,
    help="Single file to process, relative to the directory given with -d/--dir.",
)

staged_only_option = click.option(
    "--staged-only",
    is_flag=True,
    help="Only process files staged with 'git add'.",
)

dry_run_option = click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without changing anything.",
)


def split_list(value: Optional[str]) -> List[str]:
    """Split a comma-delimited option value, dropping blanks."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def with_docs_dir(config: SyncConfig, docs_dir: str) -> SyncConfig:
    return config.model_copy(update={"docs_dir": Path(docs_dir)})


def load_pages(
    config: SyncConfig,
    category_slugs: Optional[str],
    file: Optional[str] = None,
    staged_only: bool = False,
) -> Tuple[Catalog, List[Page]]:
    """Build the catalog of ``config.docs_dir`` and select the pages to act upon."""
    catalog = Catalog.build(config.docs_dir, strict=config.strict)
    categories = [] if file else resolve_categories(category_slugs, config)
    staged = staged_files() if staged_only else None
    return catalog, select_pages(catalog, categories, file=file, staged=staged)
