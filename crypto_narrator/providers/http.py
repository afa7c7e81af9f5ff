"""Thin JSON-over-HTTP helpers shared by every provider.

No retries and no explicit timeouts: callers that need resilience wrap these.
"""

from typing import Any, Dict, Optional

import requests

from crypto_narrator.core.errors import DecodeError, NetworkError
from crypto_narrator.core.logger import logger


def _decode(resp: requests.Response, url: str) -> Any:
    if not 200 <= resp.status_code < 300:
        logger.error(f"HTTP {resp.status_code} from {url}: {resp.text[:200]}")
        raise NetworkError(f"HTTP {resp.status_code} from {url}", status_code=resp.status_code, url=url)
    try:
        return resp.json()
    except ValueError as exc:
        logger.error(f"Invalid JSON from {url}: {exc}")
        raise DecodeError(f"Invalid JSON from {url}: {exc}") from exc


def fetch_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    session: Optional[requests.Session] = None,
) -> Any:
    """
    GET ``url`` and return the decoded JSON body.

    Args:
        url (str): Endpoint URL.
        params (dict): Query parameters.
        session (requests.Session): Optional session; module-level ``requests`` otherwise.

    Returns:
        Any: The decoded JSON structure.

    Raises:
        NetworkError: Transport failure or non-2xx status.
        DecodeError: Body is not valid JSON.
    """
    client = session or requests
    logger.info(f"GET {url} params={params or {}}")
    try:
        resp = client.get(url, params=params)
    except requests.RequestException as exc:
        logger.error(f"Transport failure for {url}: {exc}")
        raise NetworkError(f"Transport failure for {url}: {exc}", url=url) from exc
    return _decode(resp, url)


def post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    session: Optional[requests.Session] = None,
) -> Any:
    """POST ``payload`` as JSON and return the decoded body. Same error contract as :func:`fetch_json`."""
    client = session or requests
    logger.info(f"POST {url}")
    try:
        resp = client.post(url, json=payload, headers=headers)
    except requests.RequestException as exc:
        logger.error(f"Transport failure for {url}: {exc}")
        raise NetworkError(f"Transport failure for {url}: {exc}", url=url) from exc
    return _decode(resp, url)
