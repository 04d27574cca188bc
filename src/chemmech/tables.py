"""Tablas estáticas del motor heurístico de mecanismos.

Cada dimensión de las condiciones de reacción es una enumeración cerrada. Las
tablas se exponen como mapeos de solo lectura: el motor las consume, nunca las
modifica.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Type, TypeVar

from chemcore.errors import UnknownCondition


class Mechanism(str, Enum):
    SN1 = "SN1"
    SN2 = "SN2"
    E1 = "E1"
    E2 = "E2"

    @property
    def is_substitution(self) -> bool:
        return self in (Mechanism.SN1, Mechanism.SN2)

    @property
    def is_unimolecular(self) -> bool:
        return self in (Mechanism.SN1, Mechanism.E1)


class SubstrateClass(str, Enum):
    METHYL = "methyl"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    VINYL = "vinyl"
    ALLYLIC = "allylic"
    BENZYLIC = "benzylic"


class Nucleophile(str, Enum):
    STRONG_SMALL = "strong_small"
    STRONG_NORMAL = "strong_normal"
    STRONG_BULKY = "strong_bulky"
    WEAK = "weak"
    NONE = "none"


class LeavingGroup(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


class Solvent(str, Enum):
    POLAR_APROTIC = "polar_aprotic"
    POLAR_PROTIC = "polar_protic"
    NONPOLAR = "nonpolar"


class Temperature(str, Enum):
    LOW = "low"
    ROOM = "room"
    ELEVATED = "elevated"
    HIGH = "high"


_E = TypeVar("_E", bound=Enum)


def coerce_condition(enum_type: Type[_E], value: object) -> _E:
    """Convierte un valor textual a la enumeración de su dimensión.

    Raises:
        UnknownCondition: Si el valor no pertenece a la enumeración.
    """
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise UnknownCondition(
            f"Unknown {enum_type.__name__} {value!r}; expected one of: {allowed}"
        ) from exc


@dataclass(frozen=True)
class ReactionConditions:
    """Vector de condiciones; acepta miembros de enumeración o sus valores."""

    substrate: SubstrateClass
    nucleophile: Nucleophile
    leaving_group: LeavingGroup
    solvent: Solvent
    temperature: Temperature = Temperature.ROOM

    def __post_init__(self) -> None:
        object.__setattr__(self, "substrate", coerce_condition(SubstrateClass, self.substrate))
        object.__setattr__(self, "nucleophile", coerce_condition(Nucleophile, self.nucleophile))
        object.__setattr__(self, "leaving_group", coerce_condition(LeavingGroup, self.leaving_group))
        object.__setattr__(self, "solvent", coerce_condition(Solvent, self.solvent))
        object.__setattr__(self, "temperature", coerce_condition(Temperature, self.temperature))

    def value_of(self, dimension: str) -> Enum:
        return getattr(self, dimension)


def _deltas(sn2: float, sn1: float, e2: float, e1: float) -> Mapping[Mechanism, float]:
    return MappingProxyType({Mechanism.SN1: sn1, Mechanism.SN2: sn2, Mechanism.E1: e1, Mechanism.E2: e2})


# Deltas aditivos por dimensión y valor.
CONDITION_ADJUSTMENTS: Mapping[str, Mapping[Enum, Mapping[Mechanism, float]]] = MappingProxyType({
    "substrate": MappingProxyType({
        SubstrateClass.METHYL: _deltas(sn2=5, sn1=0, e2=1, e1=0),
        SubstrateClass.PRIMARY: _deltas(sn2=4, sn1=1, e2=2, e1=0),
        SubstrateClass.SECONDARY: _deltas(sn2=2, sn1=2, e2=3, e1=2),
        SubstrateClass.TERTIARY: _deltas(sn2=0, sn1=4, e2=4, e1=4),
        SubstrateClass.VINYL: _deltas(sn2=0, sn1=0, e2=0, e1=0),
        SubstrateClass.ALLYLIC: _deltas(sn2=3, sn1=4, e2=2, e1=3),
        SubstrateClass.BENZYLIC: _deltas(sn2=3, sn1=4, e2=2, e1=3),
    }),
    "nucleophile": MappingProxyType({
        Nucleophile.STRONG_SMALL: _deltas(sn2=4, sn1=0, e2=1, e1=0),
        Nucleophile.STRONG_NORMAL: _deltas(sn2=3, sn1=0, e2=3, e1=0),
        Nucleophile.STRONG_BULKY: _deltas(sn2=0, sn1=0, e2=5, e1=0),
        Nucleophile.WEAK: _deltas(sn2=1, sn1=3, e2=0, e1=2),
        Nucleophile.NONE: _deltas(sn2=0, sn1=2, e2=0, e1=3),
    }),
    "solvent": MappingProxyType({
        Solvent.POLAR_APROTIC: _deltas(sn2=3, sn1=-1, e2=2, e1=-1),
        Solvent.POLAR_PROTIC: _deltas(sn2=-1, sn1=3, e2=0, e1=2),
        Solvent.NONPOLAR: _deltas(sn2=0, sn1=-2, e2=1, e1=-2),
    }),
    "temperature": MappingProxyType({
        Temperature.LOW: _deltas(sn2=1, sn1=-1, e2=-1, e1=-2),
        Temperature.ROOM: _deltas(sn2=0, sn1=0, e2=0, e1=0),
        Temperature.ELEVATED: _deltas(sn2=-1, sn1=1, e2=2, e1=2),
        Temperature.HIGH: _deltas(sn2=-2, sn1=1, e2=3, e1=3),
    }),
})

# Factor multiplicativo del grupo saliente.
LEAVING_GROUP_FACTORS: Mapping[LeavingGroup, float] = MappingProxyType({
    LeavingGroup.EXCELLENT: 1.3,
    LeavingGroup.GOOD: 1.0,
    LeavingGroup.MODERATE: 0.6,
    LeavingGroup.POOR: 0.1,
})

CONDITION_LABELS: Mapping[Enum, str] = MappingProxyType({
    SubstrateClass.METHYL: "Methyl (CH3-X)",
    SubstrateClass.PRIMARY: "1° Primary",
    SubstrateClass.SECONDARY: "2° Secondary",
    SubstrateClass.TERTIARY: "3° Tertiary",
    SubstrateClass.VINYL: "Vinyl/Aryl",
    SubstrateClass.ALLYLIC: "Allylic",
    SubstrateClass.BENZYLIC: "Benzylic",
    Nucleophile.STRONG_SMALL: "Strong, small (CN-, I-, RS-)",
    Nucleophile.STRONG_NORMAL: "Strong (OH-, RO-)",
    Nucleophile.STRONG_BULKY: "Strong, bulky (tBuO-, LDA)",
    Nucleophile.WEAK: "Weak (H2O, ROH)",
    Nucleophile.NONE: "None / Very weak",
    LeavingGroup.EXCELLENT: "Excellent (OTs, OMs, I-)",
    LeavingGroup.GOOD: "Good (Br-, Cl-)",
    LeavingGroup.MODERATE: "Moderate (F-, OAc)",
    LeavingGroup.POOR: "Poor (OH, OR, NH2)",
    Solvent.POLAR_APROTIC: "Polar aprotic (DMSO, DMF, acetone)",
    Solvent.POLAR_PROTIC: "Polar protic (H2O, MeOH, EtOH)",
    Solvent.NONPOLAR: "Nonpolar (hexane, toluene)",
    Temperature.LOW: "Low (< 0°C)",
    Temperature.ROOM: "Room temp (20-25°C)",
    Temperature.ELEVATED: "Elevated (50-80°C)",
    Temperature.HIGH: "High (> 100°C)",
})

# Calidad del grupo saliente por elemento unido al carbono.
LEAVING_GROUP_BY_ELEMENT: Mapping[str, LeavingGroup] = MappingProxyType({
    "I": LeavingGroup.EXCELLENT,
    "Br": LeavingGroup.GOOD,
    "Cl": LeavingGroup.GOOD,
    "F": LeavingGroup.MODERATE,
    "O": LeavingGroup.POOR,
    "N": LeavingGroup.POOR,
})
