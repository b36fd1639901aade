"""
Shared HTTP plumbing for the remote providers.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from permitscout.config import HTTP_TIMEOUT_SEC, USER_AGENT
from permitscout.errors import ProviderUnavailable

logger = logging.getLogger(__name__)

RETRY_STATUSES = (429, 502, 503, 504)


def default_headers() -> Dict[str, str]:
    # Nominatim's usage policy requires an identifying User-Agent
    return {"User-Agent": USER_AGENT}


def get_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    session=None,
    timeout: float = HTTP_TIMEOUT_SEC,
) -> Any:
    http = session or requests
    try:
        resp = http.get(url, params=params, headers=default_headers(), timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise ProviderUnavailable(f"failed to fetch {url}: {exc}") from exc
    try:
        return resp.json()
    except ValueError as exc:
        raise ProviderUnavailable(f"failed to parse JSON from {url}: {exc}") from exc


def post_with_backoff(
    url: str,
    data: Dict[str, Any],
    session=None,
    max_attempts: int = 3,
    timeout: float = HTTP_TIMEOUT_SEC,
    sleep=time.sleep,
) -> Optional[requests.Response]:
    """
    POST with exponential backoff on throttling/gateway errors.

    Returns None once attempts are exhausted or on a non-retryable status.
    """
    http = session or requests
    wait = 1.5
    for attempt in range(1, max_attempts + 1):
        try:
            resp = http.post(url, data=data, headers=default_headers(), timeout=timeout)
            if resp.status_code == 200:
                return resp
            if resp.status_code in RETRY_STATUSES:
                logger.info(f"{url} returned {resp.status_code}; retrying in {wait:.1f}s (attempt {attempt}/{max_attempts})")
            else:
                logger.warning(f"{url} error {resp.status_code}: {resp.text[:120]}")
                return None
        except requests.RequestException as exc:
            logger.info(f"request error: {exc}; retrying in {wait:.1f}s (attempt {attempt}/{max_attempts})")
        if attempt < max_attempts:
            sleep(wait)
            wait = min(wait * 1.8, 20.0)
    return None
