"""Pytest configuration and shared fixtures for cutlist tests."""

from __future__ import annotations

import pytest

from cutlist.domain.value_objects import (
    BandEdges,
    GrainOrientation,
    LayoutResult,
    PartSpec,
    StockSheetSpec,
)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Layout invariant helpers
# =============================================================================

EPS = 1e-6


def assert_layout_valid(result: LayoutResult) -> None:
    """Assert bounds and kerf-separated non-overlap on every sheet."""
    for sheet in result.sheets:
        for p in sheet.placements:
            assert p.x >= -EPS and p.y >= -EPS, f"{p.label} outside sheet"
            assert p.right_edge <= sheet.width + EPS, f"{p.label} past sheet width"
            assert p.bottom_edge <= sheet.length + EPS, f"{p.label} past sheet length"

        placements = sheet.placements
        kerf = sheet.kerf
        for i, a in enumerate(placements):
            for b in placements[i + 1 :]:
                separated = (
                    a.right_edge + kerf <= b.x + EPS
                    or b.right_edge + kerf <= a.x + EPS
                    or a.bottom_edge + kerf <= b.y + EPS
                    or b.bottom_edge + kerf <= a.y + EPS
                )
                assert separated, f"{a.label} overlaps {b.label} on {sheet.sheet_id}"


def assert_quantities_conserved(result: LayoutResult, parts: list[PartSpec]) -> None:
    """Placed plus unplaced units equals requested units."""
    requested = sum(part.qty for part in parts)
    assert result.placed_count + result.unplaced_count == requested


def assert_grain_respected(result: LayoutResult, parts: list[PartSpec]) -> None:
    """Grain-locked parts keep their mandated rotation."""
    grains = {part.id: part.grain for part in parts}
    for sheet in result.sheets:
        for p in sheet.placements:
            if grains[p.part_id] == GrainOrientation.LENGTH:
                assert int(p.rotation) == 0, f"{p.label} rotated against grain"
            elif grains[p.part_id] == GrainOrientation.WIDTH:
                assert int(p.rotation) == 90, f"{p.label} not turned for width grain"


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def board() -> StockSheetSpec:
    """A 2750x1830 board with no kerf and plenty of stock."""
    return StockSheetSpec(id="board", length_mm=2750, width_mm=1830, qty=20)


@pytest.fixture
def kerfed_board() -> StockSheetSpec:
    """A 2750x1830 board cut with a 3mm blade."""
    return StockSheetSpec(id="board", length_mm=2750, width_mm=1830, qty=20, kerf_mm=3)


@pytest.fixture
def cabinet_parts() -> list[PartSpec]:
    """A mixed set of carcass parts with grain constraints and banding."""
    return [
        PartSpec(
            id="side",
            length_mm=720,
            width_mm=560,
            qty=4,
            grain=GrainOrientation.LENGTH,
            band_edges=BandEdges(top=True),
        ),
        PartSpec(id="shelf", length_mm=560, width_mm=300, qty=6, band_edges=BandEdges(top=True)),
        PartSpec(
            id="top",
            length_mm=1200,
            width_mm=600,
            qty=2,
            grain=GrainOrientation.WIDTH,
            band_edges=BandEdges.all(),
        ),
        PartSpec(id="back", length_mm=720, width_mm=1164, qty=2),
        PartSpec(id="door", length_mm=716, width_mm=396, qty=4, band_edges=BandEdges.all()),
    ]
