import asyncio
from typing import Dict, List

import click

from docsync.commands.common import (
    category_slugs_argument,
    dir_option,
    dry_run_option,
    file_option,
    load_pages,
    staged_only_option,
    with_docs_dir,
)
from docsync.models.config import SyncConfig
from docsync.models.page import Page
from docsync.services.readme_api import ReadmeClient
from docsync.services.sync import PushOutcome, push_page

_MESSAGES: Dict[str, tuple] = {
    "unchanged": ("Contents of page [{slug}] was not pushed because contents are the same.", {"fg": "cyan"}),
    "dry_run": ("DRY RUN: Would push contents of [{ref}] to readme.io", {"dim": True}),
    "pushed": ("Pushed contents of [{ref}] to readme.io", {"fg": "green"}),
    "conflict": ("Contents of [{ref}] were changed on readme.io in the meantime, not pushed.", {"fg": "yellow"}),
    "failed": ("Failed to push contents of [{ref}]", {"fg": "red"}),
}


async def _push(config: SyncConfig, pages: List[Page], dry_run: bool) -> List[PushOutcome]:
    outcomes: List[PushOutcome] = []
    async with ReadmeClient(config) as client:
        for page in pages:
            outcome = await push_page(client, page, dry_run=dry_run)
            message, style = _MESSAGES[outcome]
            click.secho(message.format(slug=page.slug, ref=page.ref), **style)
            outcomes.append(outcome)
    return outcomes


@click.command()
@category_slugs_argument
@dir_option
@file_option
@staged_only_option
@dry_run_option
@click.pass_obj
def push(config: SyncConfig, category_slugs, docs_dir, file, staged_only, dry_run):
    """Push local Markdown content files to readme.io.

    When called with a comma-delimited list of category slugs, only those
    categories are pushed.
    """
    config = with_docs_dir(config, docs_dir)
    config.require_remote()
    _catalog, pages = load_pages(config, category_slugs, file=file, staged_only=staged_only)
    if not pages:
        click.secho("No files found to push.", fg="yellow", err=True)
        return

    outcomes = asyncio.run(_push(config, pages, dry_run))
    if any(outcome in ("conflict", "failed") for outcome in outcomes):
        raise click.exceptions.Exit(1)
