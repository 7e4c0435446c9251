from __future__ import annotations

from dataclasses import dataclass

from reprotrack.domain.value_objects.reproduction import AnchorMode


@dataclass(frozen=True, slots=True)
class SpeciesProfile:
    code: str
    default_cycle_length_days: int
    # Days from cycle start to expected ovulation; 0 for induced ovulators
    ovulation_offset_days: int
    gestation_days: int
    gestation_min_days: int
    gestation_max_days: int
    care_duration_weeks: int
    placement_start_weeks_default: int
    placement_extended_weeks: int
    is_induced_ovulator: bool
    testing_available: bool
    supports_anchor_upgrade: bool
    available_anchor_modes: frozenset[AnchorMode]
    juvenile_first_cycle_min_days: int
    juvenile_first_cycle_likely_days: int
    juvenile_first_cycle_max_days: int

    def supports(self, mode: AnchorMode) -> bool:
        return mode in self.available_anchor_modes
