"""Specification extraction from a phone detail page.

The detail page carries two sources of key/value data:

* the *spotlight* block — a short list of headline specs, each item a
  ``<strong>`` label followed by a ``<span>`` value;
* the specification tables — rows grouped visually under a ``<th>``
  category header (``Display``, ``Battery`` …), each data row holding a
  ``td.nfo`` label and a ``td.vcenter`` value.

Both are folded into one flat :data:`~phonespecs.scraper.models.SpecMap`.
Table keys are prefixed with their category, so ``Type`` under ``Display``
becomes ``display_type``.  Insertion order is title, spotlight, tables; a
repeated key keeps the value written last.
"""

from __future__ import annotations

from phonespecs.scraper.models import Page, SpecMap, element_text

TITLE_SELECTOR = "h1.specs-phone-name"
SPOTLIGHT_ITEM_SELECTOR = "div#specs-list div.specs-spotlight ul li"
SPEC_TABLE_SELECTOR = "div#specs-list table"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def normalize_key(text: str) -> str:
    """Lowercase *text* and replace spaces with underscores."""
    return text.strip().lower().replace(" ", "_")


def _put(specs: SpecMap, key: str, value: str) -> None:
    if key:
        specs[key] = value


def _extract_spotlight(page: Page, specs: SpecMap) -> None:
    for item in page.select(SPOTLIGHT_ITEM_SELECTOR):
        label_el = item.select_one("strong")
        if label_el is None:
            continue
        label = element_text(label_el).rstrip(":").strip()
        if not label:
            continue
        value = element_text(item.select_one("span"))
        _put(specs, normalize_key(label), value)


def _extract_tables(page: Page, specs: SpecMap) -> None:
    for table in page.select(SPEC_TABLE_SELECTOR):
        category = ""
        for row in table.select("tr"):
            header = row.select_one("th")
            if header is not None:
                category = element_text(header)
                continue

            label_el = row.select_one("td.nfo")
            value_el = row.select_one("td.vcenter")
            if label_el is None or value_el is None:
                continue

            label = normalize_key(element_text(label_el))
            if not label:
                continue
            prefix = f"{normalize_key(category)}_" if category else ""
            _put(specs, prefix + label, element_text(value_el))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_details(page: Page) -> SpecMap:
    """Flatten the detail *page* into a normalized key → value mapping.

    Returns an empty mapping (never raises) when the page has no title,
    spotlight or specification tables.
    """
    specs: SpecMap = {}

    title = page.select_one(TITLE_SELECTOR)
    if title is not None:
        _put(specs, "phone_name", element_text(title))

    _extract_spotlight(page, specs)
    _extract_tables(page, specs)
    return specs
