"""Expansion of part specifications into individual unit rectangles."""

from __future__ import annotations

import logging
from typing import Sequence

from cutlist.domain.value_objects import ExpandedPart, PartSpec

logger = logging.getLogger(__name__)


def expand_parts(parts: Sequence[PartSpec]) -> list[ExpandedPart]:
    """Expand parts with quantity > 1 into individual units.

    Each part with quantity N becomes N units with ids ``<id>#1`` to
    ``<id>#N``, in input order. A part with quantity 0 produces no units.

    Args:
        parts: Part specifications to expand.

    Returns:
        Flat list of units, each referencing its originating spec.

    Raises:
        ValueError: If two specs share an id.
    """
    units: list[ExpandedPart] = []
    seen: set[str] = set()
    for spec in parts:
        if spec.id in seen:
            raise ValueError(f"Duplicate part id '{spec.id}': part ids must be unique")
        seen.add(spec.id)
        for i in range(spec.qty):
            units.append(ExpandedPart(uid=f"{spec.id}#{i + 1}", spec=spec, index=i))

    logger.debug("Expanded %d part specs into %d units", len(parts), len(units))
    return units
