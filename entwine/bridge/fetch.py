"""HTTP fetch collaborator.

A single blocking GET per call, no retries: transient failures surface to
the caller immediately as :class:`NetworkError`.  Timeouts are imposed
here rather than in the core.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import httpx

from entwine.core.errors import NetworkError

logger = logging.getLogger(__name__)

USER_AGENT = "entwine-mod-manager"


@runtime_checkable
class Fetcher(Protocol):
    """Anything that can turn a URL into bytes."""

    def fetch(self, url: str) -> bytes:
        """Download *url*.  Raises :class:`NetworkError` on failure."""
        ...

    def fetch_text(self, url: str) -> str:
        """Download *url* and decode it as text."""
        ...


class HttpFetcher:
    """:class:`Fetcher` backed by :mod:`httpx`.

    Parameters
    ----------
    timeout_seconds:
        Total timeout applied to each request.
    transport:
        Optional custom transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        timeout_seconds: float = 60.0,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    def _get(self, url: str) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            with httpx.Client(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                response.read()
                return response
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"Failed to download {url}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Failed to download {url}: {exc}") from exc

    def fetch(self, url: str) -> bytes:
        return self._get(url).content

    def fetch_text(self, url: str) -> str:
        return self._get(url).text
