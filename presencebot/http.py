from __future__ import annotations

import asyncio
from typing import Any, Dict

import aiohttp

from .config import logger


class ApiError(Exception):
    """A failed or unusable API call. Pollers skip the cycle and try again."""

    def __init__(self, url: str, reason: str, status: int | None = None) -> None:
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason
        self.status = status


class ApiAuthError(ApiError):
    """401/403: retrying will not help until the key is fixed."""


def build_headers() -> Dict[str, str]:
    return {
        "accept": "application/json",
        "user-agent": "presencebot/1.0 (+aiohttp)",
        "cache-control": "no-cache",
    }


def make_session(timeout_secs: float = 25) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout_secs),
        headers=build_headers(),
        raise_for_status=False,
        trust_env=True,
    )


async def fetch_json(session: aiohttp.ClientSession, url: str, params: Dict[str, str] | None = None) -> Any:
    """GET ``url`` and decode JSON, turning every transport failure into ``ApiError``."""
    logger.debug(f"GET {url}")
    try:
        async with session.get(url, params=params) as r:
            if r.status in (401, 403):
                raise ApiAuthError(url, f"HTTP {r.status}, check the API key", r.status)
            if r.status == 429:
                raise ApiError(url, "rate limited", r.status)
            if r.status != 200:
                body = (await r.text())[:200]
                raise ApiError(url, f"HTTP {r.status}: {body}", r.status)
            return await r.json(content_type=None)
    except ApiError:
        raise
    except asyncio.TimeoutError:
        raise ApiError(url, "timed out") from None
    except (aiohttp.ClientError, ValueError) as e:
        # ValueError covers undecodable JSON bodies
        raise ApiError(url, f"{type(e).__name__}: {e}") from e
