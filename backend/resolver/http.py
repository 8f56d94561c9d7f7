"""HTTP client helpers shared by the metadata client and the catalog scrapers."""
from __future__ import annotations

from typing import Mapping

import httpx

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) "
    "Gecko/20100101 Firefox/121.0"
)


class CatalogRequestError(RuntimeError):
    """Raised when a catalog page cannot be fetched or understood."""


def create_client(
    base_url: str = "",
    *,
    timeout: float = 10.0,
    user_agent: str = DEFAULT_USER_AGENT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Instantiate an HTTPX client with a per-call timeout and browser-like headers."""

    return httpx.Client(
        base_url=base_url,
        timeout=timeout,
        transport=transport,
        headers={"User-Agent": user_agent},
        follow_redirects=True,
    )


def fetch_text(client: httpx.Client, url: str, *, headers: Mapping[str, str] | None = None) -> str:
    """GET ``url`` and return the body, mapping every transport failure to CatalogRequestError."""

    try:
        response = client.get(url, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise CatalogRequestError(
            f"Catalog responded with HTTP {exc.response.status_code} for {url}"
        ) from exc
    except httpx.HTTPError as exc:
        raise CatalogRequestError(f"Failed to contact catalog at {url}: {exc}") from exc
    return response.text
