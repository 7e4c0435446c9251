from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from reprotrack.domain.models.species_profile import SpeciesProfile
from reprotrack.domain.value_objects.reproduction import CycleLengthSource

# Only the most recent gaps feed the estimate
MAX_GAPS_USED = 3

# Weight given to observed history by number of gaps; the rest goes to the
# species default. Three or more gaps are trusted fully.
_HISTORY_WEIGHTS: dict[int, Decimal] = {
    1: Decimal("0.5"),
    2: Decimal("0.67"),
    3: Decimal("1"),
}

DEFAULT_CONFLICT_RATIO = 0.20


@dataclass(slots=True)
class CycleLengthEstimate:
    cycle_length_days: int
    source: CycleLengthSource
    gaps_used_days: list[int] = field(default_factory=list)
    warning_conflict: bool = False


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def recent_gaps(cycle_starts: Sequence[date], limit: int = MAX_GAPS_USED) -> list[int]:
    """Consecutive day gaps across the history, keeping the ``limit`` most recent."""
    gaps = [(later - earlier).days for earlier, later in zip(cycle_starts, cycle_starts[1:])]
    return gaps[-limit:] if limit else gaps


def blend_history(gaps: Sequence[int], species_default: int) -> int:
    """Blend observed gaps with the species default.

    1 gap: 50/50, 2 gaps: 67/33 on their mean, 3 gaps: plain mean.
    """
    observed_mean = Decimal(sum(gaps)) / Decimal(len(gaps))
    weight = _HISTORY_WEIGHTS[min(len(gaps), MAX_GAPS_USED)]
    blended = observed_mean * weight + Decimal(species_default) * (Decimal("1") - weight)
    return round_half_up(blended)


def _conflicts(override: int, gaps: Sequence[int], ratio: float) -> bool:
    if not gaps:
        return False
    observed_mean = Decimal(sum(gaps)) / Decimal(len(gaps))
    if observed_mean <= 0:
        return False
    difference = abs(Decimal(override) - observed_mean) / observed_mean
    return difference > Decimal(str(ratio))


def estimate_cycle_length(
    profile: SpeciesProfile,
    cycle_starts: Sequence[date],
    override_days: int | None = None,
    *,
    conflict_ratio: float = DEFAULT_CONFLICT_RATIO,
) -> CycleLengthEstimate:
    """Effective cycle length by priority OVERRIDE > HISTORY > BIOLOGY.

    ``cycle_starts`` must be chronological and distinct; zero or negative gaps
    are not corrected here.
    """
    gaps = recent_gaps(cycle_starts)

    if override_days is not None and override_days > 0:
        return CycleLengthEstimate(
            cycle_length_days=override_days,
            source=CycleLengthSource.OVERRIDE,
            gaps_used_days=gaps,
            warning_conflict=_conflicts(override_days, gaps, conflict_ratio),
        )

    if not gaps:
        return CycleLengthEstimate(
            cycle_length_days=profile.default_cycle_length_days,
            source=CycleLengthSource.BIOLOGY,
            gaps_used_days=[],
        )

    return CycleLengthEstimate(
        cycle_length_days=blend_history(gaps, profile.default_cycle_length_days),
        source=CycleLengthSource.HISTORY,
        gaps_used_days=gaps,
    )
