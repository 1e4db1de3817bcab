"""Links found inside page content, with their resolution contract.

Three kinds of link are recognised:

``xref``
    Cross reference to another documentation page, written ``doc:slug``
    (optionally followed by ``#anchor``).  Resolves against the catalog.

``url``
    Absolute ``http``/``https`` URL.  Resolves through a network probe.

``mailto``
    ``mailto:`` link.  Resolves when the address is well formed; no I/O.

Each link either resolves silently or raises
:class:`~docsync.exceptions.LinkResolutionError` carrying the reason.
"""

import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Annotated, Awaitable, Callable, List, Literal, Optional, Union
from urllib.parse import unquote

from pydantic import BaseModel, Field

from docsync.exceptions import LinkResolutionError
from docsync.services.prober import UrlProber

if TYPE_CHECKING:
    from docsync.services.catalog import Catalog

LinkKind = Literal["xref", "url", "mailto"]
LinkStatus = Literal["resolved", "failed"]

# Async callable raising LinkResolutionError when *url* is unreachable
Prober = Callable[[str], Awaitable[None]]

XREF_PREFIX = "doc:"
MAILTO_PREFIX = "mailto:"

_EMAIL_RE = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"
)


def _strip_prefix(href: str, prefix: str) -> str:
    if href[:len(prefix)].lower() == prefix:
        return href[len(prefix):]
    return href


class BaseLink(BaseModel, ABC):
    href: str
    line_number: int
    source: str  # path of the page the link was found in

    @abstractmethod
    async def resolve(self, catalog: "Catalog", prober: Optional[Prober] = None) -> None:
        """Return when the link resolves, raise LinkResolutionError otherwise."""


class XrefLink(BaseLink):
    kind: Literal["xref"] = "xref"

    @property
    def target(self) -> str:
        """Slug of the referenced page, without prefix or anchor."""
        target = _strip_prefix(self.href, XREF_PREFIX)
        return target.split("#", 1)[0].strip()

    async def resolve(self, catalog: "Catalog", prober: Optional[Prober] = None) -> None:
        if catalog.find_page_by_slug(self.target) is None:
            raise LinkResolutionError(f"target [{self.target}] not found")


class UrlLink(BaseLink):
    kind: Literal["url"] = "url"

    async def resolve(self, catalog: "Catalog", prober: Optional[Prober] = None) -> None:
        if prober is not None:
            await prober(self.href)
            return

        async with UrlProber() as default_prober:
            await default_prober(self.href)


class MailtoLink(BaseLink):
    kind: Literal["mailto"] = "mailto"

    @property
    def addresses(self) -> List[str]:
        """Addresses listed before the optional ``?query`` part."""
        target = _strip_prefix(self.href, MAILTO_PREFIX)
        target = unquote(target.split("?", 1)[0])
        return [address.strip() for address in target.split(",")]

    async def resolve(self, catalog: "Catalog", prober: Optional[Prober] = None) -> None:
        for address in self.addresses:
            if not _EMAIL_RE.match(address):
                raise LinkResolutionError(f"malformed address [{address}]")


Link = Annotated[Union[XrefLink, UrlLink, MailtoLink], Field(discriminator="kind")]

LINK_TYPES = {
    "xref": XrefLink,
    "url": UrlLink,
    "mailto": MailtoLink,
}


class LinkResult(BaseModel):
    """Outcome of one resolution attempt."""

    link: Link
    status: LinkStatus
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == "resolved"
