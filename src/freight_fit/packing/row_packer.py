# src/freight_fit/packing/row_packer.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from freight_fit.models import CargoUnit, PackingPlan, Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Packable:
    """A unit with both floor orientations precomputed."""
    length: float
    width: float
    alt_length: float
    alt_width: float
    height: float

    @classmethod
    def from_unit(cls, unit: CargoUnit) -> "Packable":
        long_side = max(float(unit.length), float(unit.width))
        short_side = min(float(unit.length), float(unit.width))
        return cls(
            length=long_side,
            width=short_side,
            alt_length=short_side,
            alt_width=long_side,
            height=float(unit.height),
        )

    def orientations(self) -> list[tuple[str, float, float]]:
        """(name, length, width), primary first."""
        return [
            ("primary", self.length, self.width),
            ("alternate", self.alt_length, self.alt_width),
        ]


@dataclass
class RowCandidate:
    orientation: str
    length: float
    width: float
    side_indices: list[int] = field(default_factory=list)
    stacked_indices: list[int] = field(default_factory=list)


def sort_for_packing(units: list[Packable], allow_stacking: bool) -> list[Packable]:
    """
    Stable sort of the working list.
    - stacking: tallest first, then widest (tall rows leave room on top of short ones)
    - no stacking: widest first
    """
    if allow_stacking:
        return sorted(units, key=lambda u: (-u.height, -u.width))
    return sorted(units, key=lambda u: -u.width)


def fill_row(
    anchor: Packable,
    anchor_length: float,
    anchor_width: float,
    orientation: str,
    rest: list[Packable],
    interior_width: float,
    interior_height: float,
    allow_stacking: bool,
) -> RowCandidate:
    """
    Build one candidate row around an anchor placed in a given orientation.

    Side-by-side: scan `rest` in order, taking each unit whose primary width
    (else alternate width) still fits across the vehicle. The row is as long
    as its longest member.

    Stacking (single tier): the clearance above the row is bounded by its
    shortest member; any unused unit that fits under that clearance and whose
    narrower side fits within the committed row width rides on top.
    """
    row = RowCandidate(orientation=orientation, length=anchor_length, width=anchor_width)
    placed_heights = [anchor.height]

    for i, cand in enumerate(rest):
        if row.width + cand.width <= interior_width:
            row.width += cand.width
            row.length = max(row.length, cand.length)
        elif row.width + cand.alt_width <= interior_width:
            row.width += cand.alt_width
            row.length = max(row.length, cand.alt_length)
        else:
            continue
        row.side_indices.append(i)
        placed_heights.append(cand.height)

    if allow_stacking:
        clearance = interior_height - min(placed_heights)
        used = set(row.side_indices)
        for i, cand in enumerate(rest):
            if i in used:
                continue
            if cand.height <= clearance and min(cand.width, cand.alt_width) <= row.width:
                row.stacked_indices.append(i)

    return row


def plan_rows(
    units: Iterable[CargoUnit],
    interior_width: float,
    interior_height: float,
    allow_stacking: bool = False,
) -> PackingPlan:
    """
    Greedy transverse-row packer.

    Deterministic, order-dependent feasibility heuristic (not an optimizer):
    - normalize every unit to primary (long side as length) + alternate orientation
    - sort (see sort_for_packing)
    - repeatedly take the first remaining unit as a row anchor, try its primary
      then alternate orientation, keep the strictly shorter row (primary wins ties)
    - consumed units (side-by-side and stacked) leave the working list
    - an anchor too wide in both orientations is charged its shorter side and
      left for the evaluator to flag
    """
    interior_width = float(interior_width)
    interior_height = float(interior_height)

    remaining = sort_for_packing([Packable.from_unit(u) for u in units], allow_stacking)
    rows: list[Row] = []
    length_needed = 0.0

    while remaining:
        anchor, rest = remaining[0], remaining[1:]

        best: Optional[RowCandidate] = None
        for orientation, anchor_length, anchor_width in anchor.orientations():
            if anchor_width > interior_width:
                continue
            candidate = fill_row(
                anchor,
                anchor_length,
                anchor_width,
                orientation,
                rest,
                interior_width,
                interior_height,
                allow_stacking,
            )
            if best is None or candidate.length < best.length:
                best = candidate

        if best is None:
            fallback_length = min(anchor.length, anchor.alt_length)
            length_needed += fallback_length
            rows.append(Row(
                length=fallback_length,
                width=anchor.width,
                side_by_side=1,
                orientation="none",
                fallback=True,
            ))
            logger.debug(f"Anchor {anchor.length}x{anchor.width} wider than {interior_width}, charged {fallback_length}")
            remaining = rest
            continue

        length_needed += best.length
        rows.append(Row(
            length=best.length,
            width=best.width,
            side_by_side=1 + len(best.side_indices),
            stacked=len(best.stacked_indices),
            orientation=best.orientation,
        ))

        consumed = [False] * len(rest)
        for i in best.side_indices + best.stacked_indices:
            consumed[i] = True
        remaining = [u for i, u in enumerate(rest) if not consumed[i]]

    return PackingPlan(rows=rows, length_required=length_needed)


def pack_units(
    units: Iterable[CargoUnit],
    interior_width: float,
    interior_height: float,
    allow_stacking: bool = False,
) -> float:
    """Linear length (inches) the units need along the vehicle."""
    return plan_rows(units, interior_width, interior_height, allow_stacking).length_required
