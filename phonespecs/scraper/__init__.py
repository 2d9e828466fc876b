"""Scraper package — page fetch, link discovery & spec extraction."""

from phonespecs.scraper.cancel import StopSignal
from phonespecs.scraper.details import extract_details
from phonespecs.scraper.fetcher import fetch_page
from phonespecs.scraper.links import MAKERS_PROFILE, PHONES_PROFILE, SelectorProfile, extract_links
from phonespecs.scraper.models import LinkRef, Page, PhoneRecord, SpecMap

__all__ = [
    "fetch_page",
    "extract_links",
    "extract_details",
    "StopSignal",
    "SelectorProfile",
    "MAKERS_PROFILE",
    "PHONES_PROFILE",
    "Page",
    "LinkRef",
    "PhoneRecord",
    "SpecMap",
]
