"""Simulated annealing refinement over a single stock sheet type.

The search state is a unit order plus an optional rotation preference per
unit. Each iteration applies one random move, re-packs with the
guillotine packer and scores the result with ``score_v2``. Better or
equal neighbours are always accepted; worse ones with the Metropolis
probability ``exp(-(current - neighbour) / temperature)``. The best state
seen is tracked separately, so the result never scores below the
multi-strategy baseline it starts from.

Clock and random source are injectable, which makes runs reproducible
under test.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, replace
from typing import Callable, Sequence

from cutlist.domain.value_objects import (
    ExpandedPart,
    GrainOrientation,
    LayoutResult,
    PackingAlgorithm,
    PackOptions,
    PartSpec,
    Rotation,
    StockSheetSpec,
)
from cutlist.infrastructure.guillotine_packer import pack_guillotine
from cutlist.infrastructure.scoring import score_v2
from cutlist.infrastructure.strategies import best_ordering

logger = logging.getLogger(__name__)

_MIN_SEGMENT = 2
_MAX_SEGMENT = 8
_MIN_BLOCK = 2
_MAX_BLOCK = 4


@dataclass(frozen=True)
class AnnealingSchedule:
    """Temperature schedule and reporting cadence.

    Attributes:
        t_start: Temperature at the start of the budget.
        t_end: Temperature when the budget is exhausted.
        progress_interval_ms: Minimum wall-clock gap between progress events.
        seed: Seed for the default random source.
    """

    t_start: float = 500.0
    t_end: float = 0.1
    progress_interval_ms: float = 500.0
    seed: int | None = 0

    def __post_init__(self) -> None:
        if self.t_end <= 0:
            raise ValueError("End temperature must be positive")
        if self.t_start < self.t_end:
            raise ValueError("Start temperature must not be below end temperature")
        if self.progress_interval_ms <= 0:
            raise ValueError("Progress interval must be positive")

    def temperature(self, fraction: float) -> float:
        """Geometric cooling over the elapsed fraction of the budget."""
        fraction = min(max(fraction, 0.0), 1.0)
        return self.t_start * (self.t_end / self.t_start) ** fraction


@dataclass(frozen=True)
class MoveOptions:
    """Relative weights of the neighbourhood moves.

    Attributes:
        swap: Swap two units.
        insert: Move one unit to another position.
        reverse: Reverse a segment of 2 to 8 units.
        rotate: Flip the rotation preference of a grain-free unit.
        block_swap: Swap two adjacent blocks of 2 to 4 units.
        promote: Move a grain-locked unit earlier.
    """

    swap: float = 0.4
    insert: float = 0.2
    reverse: float = 0.2
    rotate: float = 0.2
    block_swap: float = 0.15
    promote: float = 0.1

    def __post_init__(self) -> None:
        weights = (
            self.swap,
            self.insert,
            self.reverse,
            self.rotate,
            self.block_swap,
            self.promote,
        )
        if min(weights) < 0:
            raise ValueError("Move weights must be non-negative")


@dataclass(frozen=True)
class AnnealingProgress:
    """Snapshot passed to the progress callback.

    Attributes:
        iteration: Iterations completed so far.
        best_score: Best score found so far.
        baseline_score: Score of the starting layout.
        temperature: Current temperature.
        elapsed_ms: Wall-clock time since the search started.
        improvements: Times the best score was beaten.
        best_result: Best layout found so far.
        final: True for the event emitted when the search stops.
    """

    iteration: int
    best_score: float
    baseline_score: float
    temperature: float
    elapsed_ms: float
    improvements: int
    best_result: LayoutResult
    final: bool = False


@dataclass(frozen=True)
class _State:
    order: tuple[ExpandedPart, ...]
    preferences: dict[str, Rotation]


def _can_rotate(unit: ExpandedPart, allow_rotation: bool) -> bool:
    return (
        allow_rotation
        and unit.grain == GrainOrientation.ANY
        and unit.length_mm != unit.width_mm
    )


def swap_move(order: list[ExpandedPart], rng: random.Random) -> None:
    """Swap two distinct units in place."""
    i, j = rng.sample(range(len(order)), 2)
    order[i], order[j] = order[j], order[i]


def insert_move(order: list[ExpandedPart], rng: random.Random) -> None:
    """Remove one unit and re-insert it at a random position."""
    unit = order.pop(rng.randrange(len(order)))
    order.insert(rng.randrange(len(order) + 1), unit)


def reverse_move(order: list[ExpandedPart], rng: random.Random) -> None:
    """Reverse a segment of 2 to 8 units."""
    length = rng.randint(_MIN_SEGMENT, min(_MAX_SEGMENT, len(order)))
    start = rng.randrange(len(order) - length + 1)
    order[start : start + length] = reversed(order[start : start + length])


def block_swap_move(order: list[ExpandedPart], rng: random.Random) -> None:
    """Swap two adjacent, equal-sized blocks of 2 to 4 units.

    Lists shorter than two blocks fall back to a plain swap.
    """
    n = len(order)
    if n < 2 * _MIN_BLOCK:
        swap_move(order, rng)
        return
    size = rng.randint(_MIN_BLOCK, min(_MAX_BLOCK, n // 2))
    first = rng.randrange(n - 2 * size + 1)
    second = first + size
    order[first:second], order[second : second + size] = (
        order[second : second + size],
        order[first:second],
    )


def promote_move(order: list[ExpandedPart], rng: random.Random) -> None:
    """Move a grain-locked unit to an earlier position.

    Falls back to an insert move when no grain-locked unit sits after the
    first position.
    """
    locked = [i for i in range(1, len(order)) if order[i].grain != GrainOrientation.ANY]
    if not locked:
        insert_move(order, rng)
        return
    source = rng.choice(locked)
    unit = order.pop(source)
    order.insert(rng.randrange(source), unit)


_ORDER_MOVES: dict[str, Callable[[list[ExpandedPart], random.Random], None]] = {
    "swap": swap_move,
    "insert": insert_move,
    "reverse": reverse_move,
    "block_swap": block_swap_move,
    "promote": promote_move,
}


class _Neighbourhood:
    """Generates random neighbours of a search state."""

    def __init__(
        self,
        moves: MoveOptions,
        rotatable: Sequence[str],
        size: int,
        rng: random.Random,
    ) -> None:
        self.rng = rng
        self.rotatable = list(rotatable)
        reorders = size >= 2
        weights = [
            ("swap", moves.swap if reorders else 0.0),
            ("insert", moves.insert if reorders else 0.0),
            ("reverse", moves.reverse if reorders else 0.0),
            ("block_swap", moves.block_swap if reorders else 0.0),
            ("promote", moves.promote if reorders else 0.0),
            ("rotate", moves.rotate if self.rotatable else 0.0),
        ]
        self.weights = [(name, weight) for name, weight in weights if weight > 0]
        self.total = sum(weight for _, weight in self.weights)

    @property
    def empty(self) -> bool:
        return self.total <= 0

    def _pick(self) -> str:
        threshold = self.rng.random() * self.total
        for name, weight in self.weights:
            threshold -= weight
            if threshold < 0:
                return name
        return self.weights[-1][0]

    def neighbour(self, state: _State) -> _State:
        move = self._pick()
        if move != "rotate":
            order = list(state.order)
            _ORDER_MOVES[move](order, self.rng)
            return _State(order=tuple(order), preferences=state.preferences)

        uid = self.rng.choice(self.rotatable)
        preferences = dict(state.preferences)
        if preferences.get(uid) == Rotation.DEG_90:
            preferences[uid] = Rotation.DEG_0
        else:
            preferences[uid] = Rotation.DEG_90
        return _State(order=state.order, preferences=preferences)


def pack_annealed(
    parts: Sequence[PartSpec],
    sheet: StockSheetSpec,
    time_budget_ms: float,
    schedule: AnnealingSchedule | None = None,
    moves: MoveOptions | None = None,
    on_progress: Callable[[AnnealingProgress], None] | None = None,
    should_cancel: Callable[[], bool] | None = None,
    *,
    options: PackOptions | None = None,
    clock: Callable[[], float] | None = None,
    rng: random.Random | None = None,
) -> LayoutResult:
    """Refine the multi-strategy layout with simulated annealing.

    Args:
        parts: Part specifications.
        sheet: The single stock sheet type to pack onto.
        time_budget_ms: Wall-clock budget for the search.
        schedule: Temperature schedule; defaults to AnnealingSchedule().
        moves: Move weights; defaults to MoveOptions().
        on_progress: Called every ``schedule.progress_interval_ms`` and once
            more when the search stops.
        should_cancel: Polled once per iteration; returning True stops the
            search with the best layout so far.
        options: Packing options. The guillotine packer is always used.
        clock: Monotonic clock in seconds; defaults to time.perf_counter.
        rng: Random source; defaults to random.Random(schedule.seed).

    Returns:
        The best layout found, never scoring below the baseline, with
        ``strategy_used`` summarising the search.

    Raises:
        ValueError: If the budget is negative or the sheet has zero quantity.
    """
    if time_budget_ms < 0:
        raise ValueError("Time budget must be non-negative")

    schedule = schedule or AnnealingSchedule()
    moves = moves or MoveOptions()
    options = replace(options or PackOptions(), algorithm=PackingAlgorithm.GUILLOTINE)
    clock = clock or time.perf_counter
    rng = rng or random.Random(schedule.seed)
    stock = [sheet]
    sheet_area = sheet.area

    baseline, order = best_ordering(parts, stock, options)
    baseline_score = score_v2(baseline, sheet_area)
    baseline_unplaced = baseline.unplaced_count

    rotatable = [u.uid for u in order if _can_rotate(u, options.allow_rotation)]
    # Preferences start at the rotations the baseline placed each unit in.
    rotatable_ids = set(rotatable)
    preferences = {
        p.label: p.rotation
        for layout in baseline.sheets
        for p in layout.placements
        if p.label in rotatable_ids
    }

    current = _State(order=tuple(order), preferences=preferences)
    current_score = baseline_score
    best = baseline
    best_score = baseline_score

    neighbourhood = _Neighbourhood(moves, rotatable, len(order), rng)

    budget_s = time_budget_ms / 1000.0
    start = clock()
    last_progress = start
    elapsed = 0.0
    temperature = schedule.t_start
    iterations = 0
    improvements = 0

    logger.info(
        "Annealing %d units for %.0f ms from baseline score %.2f (%s)",
        len(order),
        time_budget_ms,
        baseline_score,
        baseline.strategy_used,
    )

    if neighbourhood.empty:
        logger.debug("No moves available, keeping the baseline layout")

    while not neighbourhood.empty:
        now = clock()
        elapsed = now - start
        if elapsed >= budget_s:
            break
        if should_cancel is not None and should_cancel():
            logger.debug("Annealing cancelled after %d iterations", iterations)
            break

        temperature = schedule.temperature(elapsed / budget_s)
        candidate = neighbourhood.neighbour(current)
        result = pack_guillotine(
            candidate.order, stock, options, preferences=candidate.preferences
        )
        iterations += 1

        if result.unplaced_count == baseline_unplaced:
            candidate_score = score_v2(result, sheet_area)
            if candidate_score >= current_score or rng.random() < math.exp(
                -(current_score - candidate_score) / temperature
            ):
                current = candidate
                current_score = candidate_score

            if candidate_score > best_score:
                best = result
                best_score = candidate_score
                improvements += 1
                logger.debug(
                    "Iteration %d: new best score %.2f (%d sheets)",
                    iterations,
                    best_score,
                    best.sheet_count,
                )

        due = (now - last_progress) * 1000.0 >= schedule.progress_interval_ms
        if on_progress is not None and due:
            last_progress = now
            on_progress(
                AnnealingProgress(
                    iteration=iterations,
                    best_score=best_score,
                    baseline_score=baseline_score,
                    temperature=temperature,
                    elapsed_ms=elapsed * 1000.0,
                    improvements=improvements,
                    best_result=best,
                )
            )

    if on_progress is not None:
        on_progress(
            AnnealingProgress(
                iteration=iterations,
                best_score=best_score,
                baseline_score=baseline_score,
                temperature=temperature,
                elapsed_ms=elapsed * 1000.0,
                improvements=improvements,
                best_result=best,
                final=True,
            )
        )

    logger.info(
        "Annealing finished: %d iterations, %d improvements, score %.2f -> %.2f",
        iterations,
        improvements,
        baseline_score,
        best_score,
    )
    return replace(
        best,
        strategy_used=f"annealed ({iterations} iterations, {improvements} improvements)",
    )
