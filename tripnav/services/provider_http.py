"""
Shared HTTP plumbing for the external provider clients.

Maps transport failures and HTTP status codes onto the provider error
taxonomy and records latency/failure metrics per provider.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from tripnav.core.exceptions import ProviderUnavailableError, RateLimitedError
from tripnav.core.metrics import record_provider_failure, record_provider_latency

logger = logging.getLogger(__name__)


def _retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


async def get_json(
    client: httpx.AsyncClient,
    provider: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    allowed_statuses: tuple = (200,),
) -> Any:
    """
    GET ``url`` and decode the JSON body.

    Raises:
        RateLimitedError: HTTP 429
        ProviderUnavailableError: timeouts, transport errors, unexpected status
            codes and undecodable bodies
    """
    try:
        with record_provider_latency(provider):
            response = await client.get(url, params=params)
    except httpx.TimeoutException as e:
        logger.warning(f"Timeout calling {provider}: {e}")
        record_provider_failure(provider, "timeout")
        raise ProviderUnavailableError(provider, details={"reason": "timeout"}) from e
    except httpx.HTTPError as e:
        logger.warning(f"Transport error calling {provider}: {e}")
        record_provider_failure(provider, "transport")
        raise ProviderUnavailableError(provider, details={"reason": str(e)}) from e

    if response.status_code == 429:
        logger.warning(f"{provider} rate limit exceeded")
        record_provider_failure(provider, "rate_limited")
        raise RateLimitedError(provider, retry_after_seconds=_retry_after(response))

    if response.status_code not in allowed_statuses:
        logger.warning(f"{provider} returned {response.status_code} for {url}")
        record_provider_failure(provider, f"http_{response.status_code}")
        raise ProviderUnavailableError(provider, details={"status_code": response.status_code})

    try:
        return response.json()
    except ValueError as e:
        record_provider_failure(provider, "invalid_body")
        raise ProviderUnavailableError(provider, details={"reason": "invalid JSON body"}) from e
