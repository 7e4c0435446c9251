from __future__ import annotations

from enum import Enum


class AnchorMode(str, Enum):
    CYCLE_START = "CYCLE_START"
    OVULATION = "OVULATION"
    BREEDING_DATE = "BREEDING_DATE"


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class OvulationMethod(str, Enum):
    PROGESTERONE_TEST = "PROGESTERONE_TEST"
    LH_TEST = "LH_TEST"
    VAGINAL_CYTOLOGY = "VAGINAL_CYTOLOGY"
    ULTRASOUND = "ULTRASOUND"
    PALPATION = "PALPATION"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


class CycleLengthSource(str, Enum):
    OVERRIDE = "OVERRIDE"
    HISTORY = "HISTORY"
    BIOLOGY = "BIOLOGY"


class ProjectionSource(str, Enum):
    HISTORY = "HISTORY"
    BIOLOGY = "BIOLOGY"
    JUVENILE = "JUVENILE"


class Sex(str, Enum):
    FEMALE = "FEMALE"
    MALE = "MALE"
