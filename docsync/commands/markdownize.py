import logging

import click

from docsync.commands.common import (
    category_slugs_argument,
    dir_option,
    dry_run_option,
    file_option,
    load_pages,
    split_list,
    staged_only_option,
    with_docs_dir,
)
from docsync.models.config import MarkdownizeOptions, SyncConfig
from docsync.services.markdownize import WIDGET_TYPES, markdownize

logger = logging.getLogger(__name__)


@click.command("markdownize")
@category_slugs_argument
@dir_option
@file_option
@click.option(
    "-w",
    "--widgets",
    default=None,
    help=f"Comma-separated list of readme.io widgets to replace. Supported: {', '.join(WIDGET_TYPES)}.",
)
@click.option("-v", "--verbose", is_flag=True, help="Output details about the replacements being made.")
@staged_only_option
@dry_run_option
@click.pass_obj
def markdownize_command(config: SyncConfig, category_slugs, docs_dir, file, widgets, verbose, staged_only, dry_run):
    """Convert proprietary readme.io widgets to standard Markdown."""
    config = with_docs_dir(config, docs_dir)
    widget_types = split_list(widgets) or list(WIDGET_TYPES)
    unknown = sorted(set(widget_types) - set(WIDGET_TYPES))
    if unknown:
        raise click.BadParameter(f"unsupported widget(s): {', '.join(unknown)}", param_hint="--widgets")

    _catalog, pages = load_pages(config, category_slugs, file=file, staged_only=staged_only)
    if not pages:
        click.secho("No files found to markdownize.", fg="yellow", err=True)
        return

    options = MarkdownizeOptions(verbose=verbose or dry_run)
    updated_count = 0
    for page in pages:
        updated = markdownize(page, widget_types, options)
        if updated == page.content:
            continue
        updated_count += 1
        if dry_run:
            click.secho(f"DRY RUN: Would write updated Markdown to [{page.path}]", dim=True)
            continue
        page.content = updated
        output = page.write_to(config.docs_dir)
        click.secho(f"Writing updated Markdown to [{output}]", fg="green")

    logger.info("Markdownize: %d of %d pages changed", updated_count, len(pages))
