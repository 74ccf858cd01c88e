# backend/stores/client.py

"""Credential resolution and HTTP client construction for the storage backend."""

from __future__ import annotations

from typing import Optional, Tuple

import httpx

import config
from exceptions import ConfigurationError


def resolve_credentials(
    url: Optional[str] = None,
    service_key: Optional[str] = None,
    anon_key: Optional[str] = None,
) -> Tuple[str, str]:
    """
    Return ``(base_url, key)``, preferring the service-role key over the anon key.

    Raises:
        ConfigurationError: URL or both keys are missing. The message lists
            which of the three settings were found.
    """
    url = url if url is not None else config.SUPABASE_URL
    service_key = service_key if service_key is not None else config.SUPABASE_SERVICE_ROLE_KEY
    anon_key = anon_key if anon_key is not None else config.SUPABASE_ANON_KEY

    key = service_key or anon_key
    if not url or not key:
        hint = (
            f"URL: {'ok' if url else 'MISSING'}, "
            f"service_role: {'ok' if service_key else 'MISSING'}, "
            f"anon: {'ok' if anon_key else 'MISSING'}. "
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) in .env."
        )
        raise ConfigurationError(f"Missing storage credentials. {hint}")
    return url.rstrip("/"), key


def build_http_client(
    base_url: str,
    key: str,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    return httpx.Client(
        base_url=base_url,
        headers={"apikey": key, "Authorization": f"Bearer {key}"},
        timeout=config.STORAGE_TIMEOUT_SECONDS,
        transport=transport,
    )


def error_message(response: httpx.Response) -> str:
    """Best-effort extraction of the upstream error text."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for field in ("message", "error_description", "error", "msg"):
            if payload.get(field):
                return str(payload[field])
    return response.text or f"HTTP {response.status_code}"
