from __future__ import annotations

from typing import Iterable, Mapping

from reprotrack.application.errors import UnknownSpecies
from reprotrack.domain.models.species_profile import SpeciesProfile
from reprotrack.domain.value_objects.reproduction import AnchorMode

_CYCLE_AND_OVULATION = frozenset({AnchorMode.CYCLE_START, AnchorMode.OVULATION})
_CYCLE_ONLY = frozenset({AnchorMode.CYCLE_START})
_BREEDING_ONLY = frozenset({AnchorMode.BREEDING_DATE})

# Veterinary / breed-registry reference values (AKC, TICA/CFA, AQHA, ADGA, ARBA)
DEFAULT_PROFILES: tuple[SpeciesProfile, ...] = (
    SpeciesProfile(
        code="DOG",
        default_cycle_length_days=180,
        ovulation_offset_days=12,
        gestation_days=63,
        gestation_min_days=58,
        gestation_max_days=68,
        care_duration_weeks=6,
        placement_start_weeks_default=8,
        placement_extended_weeks=4,
        is_induced_ovulator=False,
        testing_available=True,
        supports_anchor_upgrade=True,
        available_anchor_modes=_CYCLE_AND_OVULATION,
        juvenile_first_cycle_min_days=180,
        juvenile_first_cycle_likely_days=270,
        juvenile_first_cycle_max_days=420,
    ),
    SpeciesProfile(
        code="CAT",
        default_cycle_length_days=21,
        ovulation_offset_days=0,
        gestation_days=63,
        gestation_min_days=58,
        gestation_max_days=70,
        care_duration_weeks=8,
        placement_start_weeks_default=12,
        placement_extended_weeks=4,
        is_induced_ovulator=True,
        testing_available=False,
        supports_anchor_upgrade=False,
        available_anchor_modes=_BREEDING_ONLY,
        juvenile_first_cycle_min_days=150,
        juvenile_first_cycle_likely_days=210,
        juvenile_first_cycle_max_days=300,
    ),
    SpeciesProfile(
        code="HORSE",
        default_cycle_length_days=21,
        ovulation_offset_days=5,
        gestation_days=340,
        gestation_min_days=320,
        gestation_max_days=370,
        care_duration_weeks=20,
        placement_start_weeks_default=24,
        placement_extended_weeks=26,
        is_induced_ovulator=False,
        testing_available=True,
        supports_anchor_upgrade=True,
        available_anchor_modes=_CYCLE_AND_OVULATION,
        juvenile_first_cycle_min_days=365,
        juvenile_first_cycle_likely_days=450,
        juvenile_first_cycle_max_days=540,
    ),
    SpeciesProfile(
        code="GOAT",
        default_cycle_length_days=21,
        ovulation_offset_days=2,
        gestation_days=150,
        gestation_min_days=145,
        gestation_max_days=157,
        care_duration_weeks=9,
        placement_start_weeks_default=10,
        placement_extended_weeks=4,
        is_induced_ovulator=False,
        testing_available=False,
        supports_anchor_upgrade=False,
        available_anchor_modes=_CYCLE_ONLY,
        juvenile_first_cycle_min_days=150,
        juvenile_first_cycle_likely_days=210,
        juvenile_first_cycle_max_days=300,
    ),
    SpeciesProfile(
        code="RABBIT",
        default_cycle_length_days=15,
        ovulation_offset_days=0,
        gestation_days=31,
        gestation_min_days=28,
        gestation_max_days=35,
        care_duration_weeks=6,
        placement_start_weeks_default=8,
        placement_extended_weeks=2,
        is_induced_ovulator=True,
        testing_available=False,
        supports_anchor_upgrade=False,
        available_anchor_modes=_BREEDING_ONLY,
        juvenile_first_cycle_min_days=120,
        juvenile_first_cycle_likely_days=150,
        juvenile_first_cycle_max_days=180,
    ),
    SpeciesProfile(
        code="SHEEP",
        default_cycle_length_days=17,
        ovulation_offset_days=2,
        gestation_days=147,
        gestation_min_days=142,
        gestation_max_days=155,
        care_duration_weeks=8,
        placement_start_weeks_default=10,
        placement_extended_weeks=4,
        is_induced_ovulator=False,
        testing_available=False,
        supports_anchor_upgrade=False,
        available_anchor_modes=_CYCLE_ONLY,
        juvenile_first_cycle_min_days=180,
        juvenile_first_cycle_likely_days=270,
        juvenile_first_cycle_max_days=365,
    ),
)


class SpeciesBiologyTable:
    """Read-only lookup of per-species reproduction defaults.

    Injected wherever biology is needed so tests can substitute a fixture
    table instead of relying on module-level state.
    """

    def __init__(self, profiles: Iterable[SpeciesProfile] = DEFAULT_PROFILES) -> None:
        self._profiles: Mapping[str, SpeciesProfile] = {p.code: p for p in profiles}
        for profile in self._profiles.values():
            if profile.is_induced_ovulator and profile.ovulation_offset_days != 0:
                raise ValueError(f"Induced ovulator {profile.code} must have a zero ovulation offset")
            if not profile.available_anchor_modes:
                raise ValueError(f"Species {profile.code} has no anchor modes")

    def get(self, species: str | None) -> SpeciesProfile:
        code = (species or "").strip().upper()
        profile = self._profiles.get(code)
        if profile is None:
            raise UnknownSpecies(f"Unknown species: {species}", field="species")
        return profile

    def codes(self) -> list[str]:
        return sorted(self._profiles)

    def __contains__(self, species: object) -> bool:
        return isinstance(species, str) and species.strip().upper() in self._profiles


default_biology_table = SpeciesBiologyTable()
