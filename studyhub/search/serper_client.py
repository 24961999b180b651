from __future__ import annotations

import logging

import httpx

from .config import DEFAULT_SEARCH_CONFIG, SearchConfig

logger = logging.getLogger(__name__)


async def find_external_resource(
    query: str,
    config: SearchConfig = DEFAULT_SEARCH_CONFIG,
    client: httpx.AsyncClient | None = None,
) -> dict[str, str]:
    """
    Look up ``query`` and return ``{"url", "thumbnail_url"}`` for the top hit.

    Returns an empty dict when search is disabled, nothing matched, or the
    request failed.
    """
    if not config.enabled or not config.api_key or not query.strip():
        return {}

    payload = {"q": f"{query} {config.query_suffix}".strip(), "num": config.num_results}
    headers = {"X-API-KEY": config.api_key, "Content-Type": "application/json"}

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=config.timeout) as owned:
                resp = await owned.post(config.endpoint, json=payload, headers=headers)
        else:
            resp = await client.post(config.endpoint, json=payload, headers=headers)
        resp.raise_for_status()
        organic = resp.json().get("organic") or []
    except (httpx.HTTPError, ValueError):
        logger.warning("Serper search failed for %r", query, exc_info=True)
        return {}

    if not organic:
        return {}

    top = organic[0]
    result: dict[str, str] = {}
    if top.get("link"):
        result["url"] = top["link"]
    thumbnail = top.get("thumbnail") or top.get("imageUrl")
    if thumbnail:
        result["thumbnail_url"] = thumbnail
    return result
