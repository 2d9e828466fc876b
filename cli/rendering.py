"""Utilities for rendering scraped specifications in the CLI."""

from __future__ import annotations

from typing import Mapping


def render_specs(specs: Mapping[str, str]) -> str:
    """Render *specs* as two aligned columns, one key per line.

    Multi-line values are flattened so every key stays on a single row.
    """
    if not specs:
        return "(no specifications)"
    width = max(len(k) for k in specs)
    lines = []
    for key, value in specs.items():
        flat = " ".join(value.split())
        lines.append(f"{key.ljust(width)}  {flat}")
    return "\n".join(lines)
