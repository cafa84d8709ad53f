"""Relative Graph paths for the resources the crawler reads."""

import urllib.parse

SITE_FIELDS = "id,name,webUrl,isPersonalSite"


def _query(params: dict[str, str]) -> str:
    return urllib.parse.urlencode(params, safe="$,", quote_via=urllib.parse.quote)


def sites_path(page_size: int, site_id: str | None = None) -> str:
    """
    First request of the sites listing.

    With *site_id* the single site is requested directly; the response is a
    bare object which the transport normalizes into a one-item collection.
    """
    if site_id:
        return f"sites/{site_id}?" + _query({"$select": SITE_FIELDS})
    return "sites/getAllSites?" + _query({
        "$select": SITE_FIELDS,
        "$filter": "isPersonalSite eq false",
        "$orderby": "name",
        "$top": str(page_size),
    })


def pages_path(site_id: str) -> str:
    return f"sites/{site_id}/pages/microsoft.graph.sitePage?" + _query({"$select": "id,name,title"})


def webparts_path(site_id: str, page_id: str) -> str:
    return f"sites/{site_id}/pages/{page_id}/microsoft.graph.sitePage/webParts"


def owner_path(site_id: str) -> str:
    return f"sites/{site_id}/drive?" + _query({"$select": "owner"})
