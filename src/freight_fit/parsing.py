"""Free-form shipment dimension text -> cargo groups.

Accepted entry shapes (inches, pounds), one per line or comma separated:

    40 x 73 x 63 @ 364lbs     dimensions @ weight, one piece
    3@48 x 48 x 52            quantity @ dimensions
    (2)48x48x45               parenthesized quantity
    2-48x52x23                dash-joined quantity
    48x48x48 / 48-48-48       dimensions only, one piece

Anything else is dropped without raising.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterable

from freight_fit.metrics import format_number
from freight_fit.models import CargoGroup

logger = logging.getLogger(__name__)

_NUM = r"([\d.]+)"
_SEP = r"\s*[xX×-]\s*"
_SEP_NO_DASH = r"\s*[xX×]\s*"

# A comma followed by a thousands group that closes a weight ("1,200lbs",
# "2,928#") is part of the number, every other comma separates entries.
_ENTRY_SPLIT = re.compile(r"\n|(?<!\d),|,(?!\d{3}\s*(?:lbs?\b|#|\n|$))", re.IGNORECASE)

_HEADER_WORDS = re.compile(r"skids?|pallets?|total|#$", re.IGNORECASE)
_DIMENSION_TRIPLE = re.compile(r"[xX×-]\s*\d+\s*[xX×-]")


def _dims(m: re.Match[str], first: int) -> dict[str, Any]:
    return {
        "length": float(m.group(first)),
        "width": float(m.group(first + 1)),
        "height": float(m.group(first + 2)),
    }


def _weight(raw: str) -> float | None:
    """Pounds from a captured weight; zero or unreadable weights count as unknown."""
    try:
        weight = float(raw.replace(",", ""))
    except ValueError:
        return None
    return weight if weight > 0 else None


def _dims_with_weight(m: re.Match[str]) -> dict[str, Any]:
    return {"quantity": 1, **_dims(m, 1), "weight": _weight(m.group(4))}


def _quantity_then_dims(m: re.Match[str]) -> dict[str, Any]:
    return {"quantity": int(m.group(1)), **_dims(m, 2)}


def _dims_only(m: re.Match[str]) -> dict[str, Any]:
    return {"quantity": 1, **_dims(m, 1)}


# Order matters: a dash can be either a dimension separator or a quantity
# prefix, so the first matcher that accepts an entry wins.
MATCHERS: list[tuple[str, re.Pattern[str], Callable[[re.Match[str]], dict[str, Any]]]] = [
    (
        "dims_at_weight",
        re.compile(rf"^{_NUM}{_SEP_NO_DASH}{_NUM}{_SEP_NO_DASH}{_NUM}\s*@\s*([\d,.]+)\s*(lbs?|#)?", re.IGNORECASE),
        _dims_with_weight,
    ),
    (
        "qty_at_dims",
        re.compile(rf"^(\d+)\s*@\s*{_NUM}{_SEP}{_NUM}{_SEP}{_NUM}", re.IGNORECASE),
        _quantity_then_dims,
    ),
    (
        "paren_qty",
        re.compile(rf"^\((\d+)\)\s*{_NUM}{_SEP}{_NUM}{_SEP}{_NUM}", re.IGNORECASE),
        _quantity_then_dims,
    ),
    (
        "dash_qty",
        re.compile(rf"^(\d+)-{_NUM}{_SEP_NO_DASH}{_NUM}{_SEP_NO_DASH}{_NUM}", re.IGNORECASE),
        _quantity_then_dims,
    ),
    (
        "dims_only",
        re.compile(rf"^{_NUM}{_SEP}{_NUM}{_SEP}{_NUM}", re.IGNORECASE),
        _dims_only,
    ),
]


def split_entries(text: str) -> list[str]:
    """Split raw text into trimmed, non-empty entries."""
    return [e.strip() for e in _ENTRY_SPLIT.split(text) if e and e.strip()]


def is_header_line(entry: str) -> bool:
    """True for summary lines such as '10 skids / 2,928#' that carry no dimensions."""
    return bool(_HEADER_WORDS.search(entry)) and not _DIMENSION_TRIPLE.search(entry)


def parse_entry(entry: str) -> CargoGroup | None:
    for name, pattern, build in MATCHERS:
        m = pattern.match(entry)
        if not m:
            continue
        try:
            return CargoGroup(**build(m))
        except ValueError as e:
            # "1.2.3", "." or zero dimensions: the entry is dropped.
            logger.debug(f"Dropping entry {entry!r} matched by {name}: {e}")
            return None
    return None


def parse_dimensions(text: str) -> list[CargoGroup]:
    """Parse a block of dimension text into cargo groups, in input order."""
    if not text:
        return []

    groups: list[CargoGroup] = []
    for entry in split_entries(text):
        if is_header_line(entry):
            logger.debug(f"Skipping header line {entry!r}")
            continue

        group = parse_entry(entry)
        if group is None:
            logger.debug(f"No dimension pattern matched {entry!r}")
            continue
        groups.append(group)

    return groups


def format_groups(groups: Iterable[CargoGroup]) -> str:
    """
    Render groups back into parser input.

    Weighted groups become one 'L x W x H @ Wlbs' line per piece, since a
    weight attached to a line always means a single piece; everything else
    becomes 'Q@L x W x H'.
    """
    lines: list[str] = []
    for g in groups:
        dims = f"{format_number(g.length)} x {format_number(g.width)} x {format_number(g.height)}"
        if g.weight is not None:
            lines.extend([f"{dims} @ {format_number(g.weight)}lbs"] * g.quantity)
        else:
            lines.append(f"{g.quantity}@{dims}")
    return "\n".join(lines)
