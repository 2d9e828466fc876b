"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

# Normalized key -> trimmed value, filled by sequential insertion so a
# repeated key keeps the value written last.
SpecMap = Dict[str, str]


# Tags whose boundaries separate words in rendered text; inline tags such
# as <sup> or <b> join their text to the neighbouring text.
_BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
        "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li",
        "main", "nav", "ol", "p", "section", "table", "tbody", "td", "tfoot",
        "th", "thead", "tr", "ul",
    }
)
_SKIPPED_TAGS = frozenset({"script", "style", "template"})


def _collect_text(element: Tag, parts: List[str]) -> None:
    for child in element.children:
        if isinstance(child, Tag):
            if child.name == "br":
                parts.append(" ")
            elif child.name in _SKIPPED_TAGS:
                continue
            elif child.name in _BLOCK_TAGS:
                parts.append(" ")
                _collect_text(child, parts)
                parts.append(" ")
            else:
                _collect_text(child, parts)
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            parts.append(str(child))


def element_text(element: Optional[Tag]) -> str:
    """Return the visible text of *element* with whitespace collapsed.

    ``<br>`` and block elements separate words (``<a>Samsung<br><span>1300
    devices</span></a>`` → ``"Samsung 1300 devices"``); inline markup does
    not (``94.1 cm<sup>2</sup>`` → ``"94.1 cm2"``).  ``None`` yields ``""``.
    """
    if element is None:
        return ""
    parts: List[str] = []
    _collect_text(element, parts)
    return " ".join("".join(parts).split())


@dataclass
class Page:
    """A fetched and parsed HTML document.

    ``url`` is the final absolute URL after redirects; relative links on the
    page are resolved against it.
    """

    url: str
    soup: BeautifulSoup
    status_code: int = 200
    attempts: int = 1

    @classmethod
    def from_html(cls, url: str, html: str, **kwargs: Any) -> "Page":
        return cls(url=url, soup=BeautifulSoup(html, "html.parser"), **kwargs)

    def select_one(self, css: str) -> Optional[Tag]:
        """Return the first element matching *css*, or ``None``."""
        return self.soup.select_one(css)

    def select(self, css: str) -> List[Tag]:
        """Return every element matching *css* in document order."""
        return list(self.soup.select(css))


@dataclass(frozen=True)
class LinkRef:
    """A labelled link discovered on a catalog page."""

    label: str
    target_url: str


@dataclass(frozen=True)
class PhoneRecord:
    """One product's flattened specifications, ready for the sink."""

    manufacturer: str
    product: str
    source_url: str
    specs: SpecMap = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Detach from the caller's dict so the record stays immutable in effect.
        object.__setattr__(self, "specs", dict(self.specs))

    def to_document(self) -> dict[str, Any]:
        """Return the persisted document shape."""
        return {
            "manufacturer": self.manufacturer,
            "model": self.product,
            "url": self.source_url,
            "specifications": dict(self.specs),
        }
