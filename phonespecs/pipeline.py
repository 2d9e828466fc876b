"""Catalog crawl pipeline.

``run_pipeline`` walks the catalog depth-first and streams one record per
product into a sink:

    catalog → manufacturer listing → phone detail → PhoneRecord → sink

Failure policy:

* catalog page unreachable → :class:`~phonespecs.errors.FetchError` is
  raised and the run aborts;
* manufacturer listing unreachable or without phone links → skipped;
* phone page unreachable or without any specs → skipped;
* sink rejects a record → logged, crawl continues;
* stop signal → :class:`~phonespecs.errors.Interrupted` is raised, nothing
  else is fetched or stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from phonespecs.config import settings
from phonespecs.db.records import RecordSink
from phonespecs.errors import FetchError, PersistenceError
from phonespecs.scraper.cancel import StopSignal
from phonespecs.scraper.details import extract_details
from phonespecs.scraper.fetcher import fetch_page
from phonespecs.scraper.links import MAKERS_PROFILE, PHONES_PROFILE, extract_links
from phonespecs.scraper.models import LinkRef, Page, PhoneRecord

Fetch = Callable[[str], Page]


@dataclass
class RunStats:
    """Counters reported at the end of a run."""

    manufacturers: int = 0
    manufacturers_skipped: int = 0
    phones: int = 0
    phones_skipped: int = 0
    saved: int = 0
    persist_failures: int = 0


class _Crawl:
    """State for one run: the fetch function, stop signal and counters."""

    def __init__(
        self,
        sink: RecordSink,
        fetch: Fetch,
        stop: StopSignal,
        pacing_delay: float,
    ) -> None:
        self.sink = sink
        self.fetch = fetch
        self.stop = stop
        self.pacing_delay = pacing_delay
        self.stats = RunStats()
        self._fetched_phone = False

    def _get(self, url: str) -> Page:
        self.stop.check()
        return self.fetch(url)

    def run(self, catalog_url: str) -> RunStats:
        print(f"[CATALOG] {catalog_url}")
        catalog = self._get(catalog_url)
        makers = extract_links(catalog, MAKERS_PROFILE)
        if not makers:
            print(f"[SKIP] No manufacturer links found on {catalog_url}")
            return self.stats

        print(f"[CATALOG] {len(makers)} manufacturer(s) found.")
        for maker in makers:
            self.stats.manufacturers += 1
            self._crawl_manufacturer(maker)
        return self.stats

    def _crawl_manufacturer(self, maker: LinkRef) -> None:
        print(f"\n[MAKER] {maker.label} ({maker.target_url})")
        phones: list[LinkRef] = []
        try:
            phones = extract_links(self._get(maker.target_url), PHONES_PROFILE)
        except FetchError as exc:
            print(f"[MAKER] ✗ {exc}")
        if not phones:
            self.stats.manufacturers_skipped += 1
            print(f"[SKIP] Skipping manufacturer {maker.label} due to link retrieval error.")
            return

        for phone in phones:
            self.stats.phones += 1
            self._crawl_phone(maker, phone)

    def _crawl_phone(self, maker: LinkRef, phone: LinkRef) -> None:
        if self._fetched_phone:
            self.stop.sleep(self.pacing_delay)
        self._fetched_phone = True

        print(f"  [PHONE] {phone.label} ({phone.target_url})")
        try:
            specs = extract_details(self._get(phone.target_url))
        except FetchError as exc:
            self.stats.phones_skipped += 1
            print(f"  [SKIP] Failed to fetch details for {phone.label}: {exc}")
            return
        if not specs:
            self.stats.phones_skipped += 1
            print(f"  [SKIP] No specifications found for {phone.label}")
            return

        self.stop.check()
        record = PhoneRecord(
            manufacturer=maker.label,
            product=phone.label,
            source_url=phone.target_url,
            specs=specs,
        )
        try:
            self.sink.put(record)
        except PersistenceError as exc:
            self.stats.persist_failures += 1
            print(f"  [SAVE] ✗ {exc}")
            return
        self.stats.saved += 1
        print(f"  [SAVE] ✓ {phone.label} ({len(specs)} spec(s))")


def run_pipeline(
    sink: RecordSink,
    catalog_url: Optional[str] = None,
    *,
    fetch: Optional[Fetch] = None,
    stop: Optional[StopSignal] = None,
    pacing_delay: Optional[float] = None,
) -> RunStats:
    """Crawl the catalog at *catalog_url* and hand every phone to *sink*.

    Args:
        sink: Receives one :class:`PhoneRecord` per extracted phone.
        catalog_url: Manufacturer list page.  Defaults to
            ``settings.catalog_url``.
        fetch: ``url -> Page`` callable.  Defaults to
            :func:`~phonespecs.scraper.fetcher.fetch_page` over a single
            ``httpx.Client`` kept open for the whole run.
        stop: Observed before every fetch and during every wait.
        pacing_delay: Seconds between phone page fetches.  Defaults to
            ``settings.pacing_delay``.

    Returns:
        The run's :class:`RunStats`.

    Raises:
        FetchError: The catalog page itself could not be fetched.
        Interrupted: *stop* fired.
    """
    url = catalog_url or settings.catalog_url
    stop = stop or StopSignal()
    delay = settings.pacing_delay if pacing_delay is None else pacing_delay

    if fetch is not None:
        stats = _Crawl(sink, fetch, stop, delay).run(url)
    else:
        with httpx.Client(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            stats = _Crawl(
                sink,
                lambda u: fetch_page(u, client=client, stop=stop),
                stop,
                delay,
            ).run(url)

    print(
        f"\n[DONE] {stats.saved} phone(s) saved, {stats.phones_skipped} skipped, "
        f"{stats.manufacturers_skipped}/{stats.manufacturers} manufacturer(s) skipped."
    )
    return stats
