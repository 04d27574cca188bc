"""Resultado estereoquímico de SN1/SN2/E1/E2 sobre un centro R/S.

SN2 invierte la configuración (inversión de Walden), SN1 la racemiza a
través del carbocatión plano y las eliminaciones destruyen el centro.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple, Union

from chemstereo.descriptors import StereoLabel

from .tables import Mechanism, coerce_condition

RACEMIC = "racemic"
DESTROYED = "destroyed"


class StereoOutcome(str, Enum):
    INVERSION = "inversion"
    RACEMIZATION = "racemization"
    ELIMINATION = "elimination"
    NO_STEREOCENTER = "no_stereocenter"


@dataclass(frozen=True)
class ProductConfiguration:
    label: StereoLabel
    percentage: float


@dataclass(frozen=True)
class OutcomeResult:
    """Productos esperados y actividad óptica tras un mecanismo.

    Attributes:
        mechanism: Mecanismo aplicado.
        outcome: Tipo de resultado estereoquímico.
        start_label: Configuración del material de partida.
        products: Configuraciones del producto con su porcentaje.
        optically_active: True si el producto conserva actividad óptica.
        description: Resumen legible.
    """
    mechanism: Mechanism
    outcome: StereoOutcome
    start_label: StereoLabel
    products: Tuple[ProductConfiguration, ...]
    optically_active: bool
    description: str

    @property
    def labels(self) -> Tuple[StereoLabel, ...]:
        return tuple(product.label for product in self.products)


@dataclass(frozen=True)
class SequenceStep:
    mechanism: Mechanism
    outcome: str
    before: str
    after: str


def invert_label(label: StereoLabel) -> StereoLabel:
    if label is StereoLabel.R:
        return StereoLabel.S
    if label is StereoLabel.S:
        return StereoLabel.R
    return label


def stereochemical_outcome(
    mechanism: Union[Mechanism, str],
    label: Union[StereoLabel, str],
) -> OutcomeResult:
    """Aplica un mecanismo a un centro con configuración `label`.

    Args:
        mechanism: SN1, SN2, E1 o E2 (miembro o valor textual).
        label: Configuración inicial; `StereoLabel.NONE` si no hay centro.

    Returns:
        `OutcomeResult` con las configuraciones del producto.

    Raises:
        UnknownCondition: Si el mecanismo no es uno de los cuatro conocidos.
    """
    mechanism = coerce_condition(Mechanism, mechanism)
    label = StereoLabel(label)

    if label is StereoLabel.NONE:
        return OutcomeResult(
            mechanism,
            StereoOutcome.NO_STEREOCENTER,
            label,
            (ProductConfiguration(StereoLabel.NONE, 100.0),),
            False,
            "No stereocenter at the reacting carbon",
        )
    if mechanism is Mechanism.SN2:
        inverted = invert_label(label)
        return OutcomeResult(
            mechanism,
            StereoOutcome.INVERSION,
            label,
            (ProductConfiguration(inverted, 100.0),),
            True,
            f"Complete inversion - {label.value} -> {inverted.value}",
        )
    if mechanism is Mechanism.SN1:
        return OutcomeResult(
            mechanism,
            StereoOutcome.RACEMIZATION,
            label,
            (
                ProductConfiguration(label, 50.0),
                ProductConfiguration(invert_label(label), 50.0),
            ),
            False,
            "Racemization - 50% retention, 50% inversion",
        )
    return OutcomeResult(
        mechanism,
        StereoOutcome.ELIMINATION,
        label,
        (ProductConfiguration(StereoLabel.NONE, 100.0),),
        False,
        "Elimination - stereocenter destroyed",
    )


def track_sequence(
    initial: Union[StereoLabel, str],
    mechanisms: Iterable[Union[Mechanism, str]],
) -> List[SequenceStep]:
    """Sigue la configuración de un centro a lo largo de varias reacciones.

    Una vez racémico, SN1 y SN2 dejan la mezcla racémica; tras una
    eliminación ya no hay centro que seguir.
    """
    current = StereoLabel(initial).value
    if current == StereoLabel.NONE.value:
        current = DESTROYED
    steps: List[SequenceStep] = []
    for item in mechanisms:
        mechanism = coerce_condition(Mechanism, item)
        before = current
        if current == DESTROYED:
            outcome = "No stereocenter present"
        elif not mechanism.is_substitution:
            current = DESTROYED
            outcome = "Elimination - stereocenter destroyed"
        elif current == RACEMIC:
            outcome = "Racemic mixture stays racemic"
        elif mechanism is Mechanism.SN2:
            current = invert_label(StereoLabel(current)).value
            outcome = "Walden inversion"
        else:
            current = RACEMIC
            outcome = "Racemization"
        steps.append(SequenceStep(mechanism, outcome, before, current))
    return steps
