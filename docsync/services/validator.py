"""Link validation pass over a selection of pages."""

import asyncio
import logging
from typing import Callable, Iterable, List, Optional

from docsync.exceptions import LinkResolutionError
from docsync.models.link import LINK_TYPES, BaseLink, LinkResult, Prober
from docsync.models.page import Page
from docsync.services.catalog import Catalog

logger = logging.getLogger(__name__)

VALIDATIONS = tuple(LINK_TYPES)

# Called once for every link that fails to resolve
Reporter = Callable[[BaseLink, str], None]


async def _resolve_one(
    link: BaseLink,
    catalog: Catalog,
    prober: Optional[Prober],
    report: Optional[Reporter],
) -> LinkResult:
    try:
        await link.resolve(catalog, prober)
    except LinkResolutionError as exc:
        reason = str(exc)
        logger.debug("Validator: %s:%d %s failed – %s", link.source, link.line_number, link.href, reason)
        if report is not None:
            report(link, reason)
        return LinkResult(link=link, status="failed", reason=reason)
    return LinkResult(link=link, status="resolved")


async def validate_links(
    catalog: Catalog,
    pages: Iterable[Page],
    kinds: Iterable[str] = VALIDATIONS,
    report: Optional[Reporter] = None,
    prober: Optional[Prober] = None,
) -> List[LinkResult]:
    """Resolve every link of the requested *kinds* found in *pages*.

    All resolutions run concurrently.  A failure never stops the pass: it is
    passed to *report* (in completion order) and recorded in the returned
    results, which follow document order.

    Raises:
        ValueError: if *kinds* names an unknown validation.
    """
    kinds = set(kinds)
    unknown = kinds - set(VALIDATIONS)
    if unknown:
        raise ValueError(
            f"Unknown validation(s): {', '.join(sorted(unknown))}. "
            f"Supported: {', '.join(VALIDATIONS)}."
        )

    links = [link for page in pages for link in page.links if link.kind in kinds]
    logger.info("Validator: checking %d links", len(links))

    return list(
        await asyncio.gather(*(_resolve_one(link, catalog, prober, report) for link in links))
    )
