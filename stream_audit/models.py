"""Data records exchanged between the transport, the crawler and the sink."""

from dataclasses import dataclass, astuple
from typing import Any


@dataclass(frozen=True)
class Site:
    id: str
    name: str | None
    web_url: str

    @classmethod
    def from_json(cls, item: dict[str, Any]) -> "Site":
        return cls(
            id=item.get("id", ""),
            name=item.get("name") or None,
            web_url=item.get("webUrl", ""),
        )


@dataclass(frozen=True)
class Page:
    id: str
    name: str

    @classmethod
    def from_json(cls, item: dict[str, Any]) -> "Page":
        return cls(id=item.get("id", ""), name=item.get("name") or item.get("title") or "")


@dataclass(frozen=True)
class Component:
    """A page web part. Only the fields the classification needs are kept."""

    title: str | None
    embed_code: str | None

    @classmethod
    def from_json(cls, item: dict[str, Any]) -> "Component":
        """
        Build a Component from a Graph ``webPart`` resource.

        Standard web parts keep their settings under ``data``; the embed web
        part stores its HTML in ``data.properties.embedCode``.  Text web parts
        have no ``data`` at all and yield an empty component.
        """
        data = item.get("data") or {}
        properties = data.get("properties") or {}
        return cls(
            title=data.get("title") or item.get("title"),
            embed_code=properties.get("embedCode") or item.get("embedCode"),
        )


@dataclass(frozen=True)
class MatchRecord:
    """One reporting row. Field order is the CSV column order."""

    site_name: str
    site_url: str
    site_id: str
    site_owner: str
    page_name: str
    page_id: str
    webpart_title: str
    embed_code: str

    HEADER = (
        "SiteName",
        "SiteUrl",
        "SiteId",
        "SiteOwner",
        "PageName",
        "PageId",
        "WebpartTitle",
        "EmbedCode",
    )

    @classmethod
    def build(cls, site: Site, owner: str, page: Page, component: Component) -> "MatchRecord":
        return cls(
            site_name=site.name or "",
            site_url=site.web_url,
            site_id=site.id,
            site_owner=owner,
            page_name=page.name,
            page_id=page.id,
            webpart_title=component.title or "",
            embed_code=component.embed_code or "",
        )

    def as_row(self) -> tuple[str, ...]:
        return astuple(self)


def _principal_label(principal: Any) -> str:
    if isinstance(principal, str):
        return principal.strip()
    if not isinstance(principal, dict):
        return ""
    for key in ("email", "userPrincipalName", "displayName", "id"):
        value = principal.get(key)
        if value:
            return str(value).strip()
    return ""


def serialize_owner(owner: Any) -> str:
    """
    Flatten a Graph ``owner`` value into one CSV-safe string.

    *owner* may be an identity set (``{"user": {...}, "group": {...}}``), a
    list of principals or identity sets, or a single principal.  Each principal
    is reduced to its e-mail, display name or id; the labels are joined with
    ``", "``.  An absent or empty owner serializes to ``""``.
    """
    if not owner:
        return ""
    if isinstance(owner, list):
        parts = [serialize_owner(item) for item in owner]
    elif isinstance(owner, dict) and not _principal_label(owner):
        # identity set: user / group / application / device facets
        parts = [_principal_label(value) for value in owner.values()]
    else:
        parts = [_principal_label(owner)]
    labels = []
    for part in parts:
        if part and part not in labels:
            labels.append(part)
    return ", ".join(labels)
