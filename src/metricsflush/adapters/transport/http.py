"""HTTP transport adapter.

Posts each batch of records to an ingestion endpoint using httpx. The
payload is rendered by a FormatterPort (NDJSON by default).
"""

import os
from collections.abc import Mapping, Sequence

import httpx

from metricsflush.core.encoding.ndjson import NdjsonFormatter
from metricsflush.core.exceptions import TransportError
from metricsflush.core.models import Record
from metricsflush.core.ports import FormatterPort

API_KEY_ENV_VAR = "METRICSFLUSH_API_KEY"
NAMESPACE_HEADER = "X-Metrics-Namespace"
DEFAULT_TIMEOUT = 10.0


def resolve_headers(
    profile: str | None,
    profiles: Mapping[str, Mapping[str, str]] | None = None,
) -> dict[str, str]:
    """Resolve authentication headers for a credential profile.

    Falls back to the ambient API key in ``METRICSFLUSH_API_KEY`` when the
    profile is absent or not found, and to no auth headers at all when that
    variable is unset too.

    Args:
        profile: Named credential profile, or None.
        profiles: Known profiles mapped to their headers.

    Returns:
        Headers to send with every request.
    """
    if profile is not None and profiles and profile in profiles:
        return dict(profiles[profile])
    api_key = os.getenv(API_KEY_ENV_VAR)
    if api_key:
        return {"X-API-Key": api_key}
    return {}


class HttpTransport:
    """HTTP implementation of TransportPort.

    Args:
        endpoint: URL the batches are posted to.
        headers: Extra headers (typically authentication) for every request.
        timeout: Request timeout in seconds.
        formatter: Payload renderer (default: NDJSON).
        client: Pre-built AsyncClient, left open by close(); the transport
                creates and owns its own if omitted.
    """

    def __init__(
        self,
        endpoint: str,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        formatter: FormatterPort | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._formatter = formatter or NdjsonFormatter()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = dict(headers or {})

    @classmethod
    def from_profile(
        cls,
        endpoint: str,
        profile: str | None,
        profiles: Mapping[str, Mapping[str, str]] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> "HttpTransport":
        """Create a transport authenticated with a named credential profile."""
        return cls(
            endpoint,
            headers=resolve_headers(profile, profiles),
            timeout=timeout,
            client=client,
        )

    async def put_records(self, namespace: str, records: Sequence[Record]) -> None:
        """Post one batch of records.

        Raises:
            TransportError: On network failure, timeout or a non-2xx response.
        """
        headers = {
            **self._headers,
            "Content-Type": self._formatter.media_type,
            NAMESPACE_HEADER: namespace,
        }
        body = self._formatter.encode(records)
        try:
            response = await self._client.post(
                self._endpoint, content=body, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to send {len(records)} records: {exc}") from exc

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()
