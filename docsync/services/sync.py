"""Two-way sync between the docs directory and readme.io."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Literal, Optional

import httpx

from docsync.models.page import Page
from docsync.services.readme_api import ReadmeClient

logger = logging.getLogger(__name__)

PushOutcome = Literal["unchanged", "dry_run", "pushed", "conflict", "failed"]

_CONFLICT_STATUS = 409


async def _save_doc(
    client: ReadmeClient,
    summary: Dict[str, Any],
    category: str,
    parent: Optional[Page],
    base_dir: Path,
    written: List[Path],
) -> None:
    """Fetch the doc described by *summary*, write it, then recurse into its children."""
    slug = summary.get("slug")
    try:
        details = await client.get_doc(slug)
        page = Page.from_remote(details, category, parent.slug if parent else None)
        output = page.write_to(base_dir)
    except (httpx.HTTPError, KeyError, ValueError, OSError) as exc:
        logger.warning("Fetch: skipping doc [%s] – %s", slug, exc)
        return

    logger.info("Fetch: wrote contents of doc [%s] to file [%s]", page.ref, output)
    written.append(output)

    for child in summary.get("children") or []:
        await _save_doc(client, child, category, page, base_dir, written)


async def fetch_categories(
    client: ReadmeClient,
    categories: Iterable[str],
    base_dir: Path,
) -> List[Path]:
    """Write every doc of *categories* below *base_dir*, overwriting local files.

    Returns:
        The paths written, in fetch order.
    """
    written: List[Path] = []
    for category in categories:
        try:
            summaries = await client.list_category_docs(category)
        except httpx.HTTPError as exc:
            logger.warning("Fetch: cannot list category [%s] – %s", category, exc)
            continue

        for summary in summaries:
            await _save_doc(client, summary, category, None, Path(base_dir), written)
    return written


def build_push_payload(remote: Dict[str, Any], page: Page) -> Dict[str, Any]:
    """Return the remote document updated with the local body and headers.

    Header values YAML loads as dates or timestamps are sent as strings.
    """
    payload = {
        **remote,
        "body": page.content,
        **page.headers,
        "lastUpdatedHash": page.hash,
    }
    return json.loads(json.dumps(payload, default=str))


async def push_page(client: ReadmeClient, page: Page, dry_run: bool = False) -> PushOutcome:
    """Push *page* to readme.io unless the remote copy already has the same hash.

    The hash comparison is an optimistic check: a concurrent remote edit made
    after it is overwritten (last write wins), unless the API itself reports a
    conflict.
    """
    try:
        remote = await client.get_doc(page.slug)
        remote_page = Page.from_remote(remote)
    except (httpx.HTTPError, KeyError, ValueError) as exc:
        logger.error("Push: cannot load remote doc [%s] – %s", page.slug, exc)
        return "failed"

    if remote_page.hash == page.hash:
        logger.debug("Push: [%s] unchanged", page.slug)
        return "unchanged"

    if dry_run:
        return "dry_run"

    try:
        payload = build_push_payload(remote, page)
    except (TypeError, ValueError) as exc:
        logger.error("Push: cannot encode [%s] – %s", page.slug, exc)
        return "failed"

    try:
        await client.update_doc(page.slug, payload)
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code == _CONFLICT_STATUS:
            logger.warning("Push: remote doc [%s] was modified concurrently", page.slug)
            return "conflict"
        logger.error("Push: failed to update [%s] – %s", page.slug, exc)
        return "failed"
    except httpx.HTTPError as exc:
        logger.error("Push: failed to update [%s] – %s", page.slug, exc)
        return "failed"

    return "pushed"
