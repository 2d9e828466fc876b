"""HTTP fetcher with linear-backoff retries."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse

import httpx

from phonespecs.config import settings
from phonespecs.errors import FetchError
from phonespecs.scraper.cancel import StopSignal
from phonespecs.scraper.models import Page


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def _is_absolute_http_url(url: str) -> bool:
    """Return ``True`` if *url* is an absolute ``http``/``https`` URL."""
    try:
        parts = urlparse(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def _get(client: httpx.Client, url: str) -> Page:
    response = client.get(url)
    response.raise_for_status()
    return Page.from_html(
        str(response.url),
        response.text,
        status_code=response.status_code,
    )


def fetch_page(
    url: str,
    *,
    client: Optional[httpx.Client] = None,
    stop: Optional[StopSignal] = None,
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    timeout: Optional[float] = None,
) -> Page:
    """Fetch *url* and return it as a parsed :class:`Page`.

    Transport failures (timeouts, refused or reset connections) and 4xx/5xx
    responses are retried up to ``max_attempts`` times.  After failed
    attempt *n* the fetcher waits ``base_delay * n`` seconds through *stop*
    before trying again.  Every attempt is printed.

    Args:
        url: Absolute ``http``/``https`` URL.
        client: Reuse an existing ``httpx.Client``.  A short-lived client is
            opened (and closed) for this call when omitted.
        stop: Signal observed during backoff waits.
        max_attempts: Defaults to ``settings.fetch_max_attempts``.
        base_delay: Seconds; defaults to ``settings.fetch_retry_base_delay``.
        timeout: Per-attempt timeout; defaults to ``settings.request_timeout``.

    Raises:
        FetchError: The URL is malformed or every attempt failed.
        Interrupted: *stop* fired during a backoff wait.
    """
    if not _is_absolute_http_url(url):
        raise FetchError(url, "malformed URL", attempts=0)

    attempts = max_attempts or settings.fetch_max_attempts
    delay = settings.fetch_retry_base_delay if base_delay is None else base_delay
    stop = stop or StopSignal()

    if client is None:
        with httpx.Client(
            headers=_default_headers(),
            timeout=timeout or settings.request_timeout,
            follow_redirects=True,
        ) as own_client:
            return _fetch_with_retries(own_client, url, attempts, delay, stop)
    return _fetch_with_retries(client, url, attempts, delay, stop)


def _fetch_with_retries(
    client: httpx.Client,
    url: str,
    attempts: int,
    delay: float,
    stop: StopSignal,
) -> Page:
    last_exc: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        print(f"[FETCH] {url} (attempt {attempt}/{attempts})")
        try:
            page = _get(client, url)
        except httpx.HTTPError as exc:
            last_exc = exc
            print(f"[FETCH] ✗ {url} (attempt {attempt}/{attempts}): {exc}")
            if attempt < attempts:
                stop.sleep(delay * attempt)
            continue
        page.attempts = attempt
        return page

    raise FetchError(url, f"gave up after {attempts} attempt(s): {last_exc}", attempts=attempts)
