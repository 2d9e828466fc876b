"""Link discovery on catalog pages (manufacturer list, per-maker listing)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List
from urllib.parse import urljoin

from phonespecs.scraper.models import LinkRef, Page, element_text


@dataclass(frozen=True)
class SelectorProfile:
    """Structural path to the anchors of one kind of catalog page.

    The four parts are joined into a CSS descendant selector, e.g.
    ``div.makers ul li a``.
    """

    name: str
    container: str
    list: str = "ul"
    item: str = "li"
    anchor: str = "a"

    @property
    def css(self) -> str:
        return " ".join(
            part for part in (self.container, self.list, self.item, self.anchor) if part
        )


# Top-level catalog: one link per manufacturer.
MAKERS_PROFILE = SelectorProfile(name="makers", container="div.makers")

# Manufacturer listing: one link per phone model.
PHONES_PROFILE = SelectorProfile(name="phones", container="div.section-body")


def extract_links(page: Page, profile: SelectorProfile) -> List[LinkRef]:
    """Return the labelled links under *profile*, in document order.

    Relative ``href`` values are resolved against ``page.url``.  Anchors
    without an ``href`` are skipped.  A page that does not match the
    profile yields ``[]``.
    """
    links: List[LinkRef] = []
    for anchor in page.select(profile.css):
        href = (anchor.get("href") or "").strip()
        if not href:
            continue
        links.append(
            LinkRef(label=element_text(anchor), target_url=urljoin(page.url, href))
        )
    return links
