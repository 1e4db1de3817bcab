import asyncio
import logging
from contextlib import AsyncExitStack
from typing import List

import click

from docsync.commands.common import (
    category_slugs_argument,
    dir_option,
    file_option,
    load_pages,
    split_list,
    staged_only_option,
    with_docs_dir,
)
from docsync.models.config import SyncConfig
from docsync.models.link import BaseLink, LinkResult
from docsync.models.page import Page
from docsync.services.catalog import Catalog
from docsync.services.prober import UrlProber
from docsync.services.validator import VALIDATIONS, validate_links

logger = logging.getLogger(__name__)

_LABELS = {
    "xref": "Cross reference",
    "mailto": "Link to email",
    "url": "URL",
}


def _report(link: BaseLink, reason: str) -> None:
    click.echo(f"{link.source}:{link.line_number} {_LABELS[link.kind]} [{link.href}] seems broken: {reason}")


async def _validate(config: SyncConfig, catalog: Catalog, pages: List[Page], kinds: List[str]) -> List[LinkResult]:
    async with AsyncExitStack() as stack:
        prober = None
        if "url" in kinds:
            prober = await stack.enter_async_context(UrlProber(timeout=config.timeout))
        return await validate_links(catalog, pages, kinds, report=_report, prober=prober)


@click.command(
    help="""Validate Markdown content files.

\b
The following validations are available:
 - url:     URLs resolve; an HTTP HEAD request is performed for each URL.
 - xref:    internal cross references point to known content.
 - mailto:  links to email addresses are correctly formed.

All validations are performed unless --validations is given.
"""
)
@category_slugs_argument
@dir_option
@file_option
@staged_only_option
@click.option(
    "--validations",
    default=None,
    help="Comma-delimited list of validations to perform.",
)
@click.pass_obj
def validate(config: SyncConfig, category_slugs, docs_dir, file, staged_only, validations):
    config = with_docs_dir(config, docs_dir)
    kinds = split_list(validations) or list(VALIDATIONS)
    unknown = sorted(set(kinds) - set(VALIDATIONS))
    if unknown:
        raise click.BadParameter(f"unknown validation(s): {', '.join(unknown)}", param_hint="--validations")

    catalog, pages = load_pages(config, category_slugs, file=file, staged_only=staged_only)
    if not pages:
        click.secho("No files found to validate.", fg="yellow", err=True)
        return

    results = asyncio.run(_validate(config, catalog, pages, kinds))
    broken = [result for result in results if not result.ok]
    logger.info("Validate: %d links checked, %d broken", len(results), len(broken))
    if broken:
        raise click.exceptions.Exit(1)
