import asyncio
import logging
from pathlib import Path
from typing import List

import click

from docsync.commands.common import category_slugs_argument, dir_option, with_docs_dir
from docsync.exceptions import GitError
from docsync.models.config import SyncConfig, resolve_categories
from docsync.services.git import staged_files
from docsync.services.readme_api import ReadmeClient
from docsync.services.sync import fetch_categories

logger = logging.getLogger(__name__)


def _staged_under(docs_dir: Path) -> List[str]:
    """Return the staged files inside *docs_dir*; empty outside a Git work tree."""
    try:
        staged = staged_files()
    except GitError as exc:
        logger.debug("Fetch: cannot list staged files – %s", exc)
        return []
    root = docs_dir.resolve()
    return sorted(str(path) for path in staged if root in path.parents)


async def _fetch(config: SyncConfig, categories: List[str]) -> List[Path]:
    async with ReadmeClient(config) as client:
        return await fetch_categories(client, categories, config.docs_dir)


@click.command()
@category_slugs_argument
@dir_option
@click.option("-y", "--yes", is_flag=True, help="Do not ask before overwriting staged files.")
@click.pass_obj
def fetch(config: SyncConfig, category_slugs, docs_dir, yes):
    """Fetch up-to-date Markdown content files from readme.io, overwriting local files.

    When called with a comma-delimited list of category slugs, only those
    categories are fetched.
    """
    config = with_docs_dir(config, docs_dir)
    config.require_remote()
    categories = resolve_categories(category_slugs, config)

    if not yes:
        modified = _staged_under(config.docs_dir)
        if modified:
            click.secho("\n".join(modified), fg="yellow")
            if not click.confirm(
                "The above files have staged changes that could be overwritten. "
                "Are you sure you want to proceed?"
            ):
                return

    written = asyncio.run(_fetch(config, categories))
    click.secho(f"Fetched {len(written)} docs into [{config.docs_dir}]", fg="green")
