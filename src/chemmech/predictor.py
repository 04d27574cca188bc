"""Predicción SN1/SN2/E1/E2 a partir del vector de condiciones.

Cada mecanismo parte de la misma puntuación base; se suman los deltas de
sustrato, nucleófilo/base, disolvente y temperatura, se multiplica por el
factor del grupo saliente y se aplican las reglas especiales. Las
puntuaciones negativas se recortan a cero antes de normalizar a 100 %.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from chemcore.errors import MechanismError

from .tables import (
    CONDITION_ADJUSTMENTS,
    CONDITION_LABELS,
    LEAVING_GROUP_FACTORS,
    LeavingGroup,
    Mechanism,
    Nucleophile,
    ReactionConditions,
    Solvent,
    SubstrateClass,
    Temperature,
)

logger = logging.getLogger(__name__)

BASE_SCORE = 1.0
MAX_RATIONALE_TAGS = 2
NO_PATHWAY_TAG = "no_pathway_favoured"
MECHANISM_ORDER: Tuple[Mechanism, ...] = (Mechanism.SN1, Mechanism.SN2, Mechanism.E1, Mechanism.E2)


@dataclass(frozen=True)
class MechanismPrediction:
    mechanism: Mechanism
    percentage: float
    score: float
    rationale: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PredictionExplanation:
    primary: Mechanism
    percentage: float
    reasons: Tuple[str, ...]
    competing: Optional[MechanismPrediction] = None


@dataclass(frozen=True)
class EnergyProfile:
    """Parámetros de diagrama de energía (kcal/mol) de un mecanismo."""
    name: str
    steps: int
    start_energy: float
    transition_states: Tuple[float, ...]
    intermediates: Tuple[float, ...]
    product_energy: float
    description: str


def score_mechanisms(conditions: ReactionConditions) -> Tuple[Dict[Mechanism, float], Dict[Mechanism, List[str]]]:
    """Calcula las puntuaciones recortadas y las etiquetas de cada mecanismo.

    Returns:
        (puntuaciones >= 0, etiquetas de justificación por mecanismo).
    """
    scores: Dict[Mechanism, float] = {}
    rationale: Dict[Mechanism, List[str]] = {}
    factor = LEAVING_GROUP_FACTORS[conditions.leaving_group]
    for mechanism in MECHANISM_ORDER:
        contributions: Dict[str, float] = {}
        running = BASE_SCORE
        for dimension, table in CONDITION_ADJUSTMENTS.items():
            value = conditions.value_of(dimension)
            delta = table[value][mechanism]
            contributions[f"{dimension}:{value.value}"] = delta
            running += delta
        scaled = running * factor
        contributions[f"leaving_group:{conditions.leaving_group.value}"] = scaled - running
        scores[mechanism] = scaled
        ranked = sorted(
            (tag for tag, amount in contributions.items() if amount > 0),
            key=lambda tag: contributions[tag],
            reverse=True,
        )
        rationale[mechanism] = ranked[:MAX_RATIONALE_TAGS]

    if conditions.substrate is SubstrateClass.VINYL:
        for mechanism in (Mechanism.SN1, Mechanism.SN2):
            scores[mechanism] = -10.0
            rationale[mechanism] = ["vinyl_blocks_substitution"]
    if conditions.substrate is SubstrateClass.METHYL:
        scores[Mechanism.E1] = -10.0
        scores[Mechanism.E2] = -5.0
        rationale[Mechanism.E1] = ["methyl_blocks_elimination"]
        rationale[Mechanism.E2] = ["methyl_blocks_elimination"]
    if conditions.leaving_group is LeavingGroup.POOR:
        for mechanism in MECHANISM_ORDER:
            scores[mechanism] = min(scores[mechanism], 0.0)
            rationale[mechanism] = rationale[mechanism] + ["poor_leaving_group"]

    clamped = {mechanism: max(score, 0.0) for mechanism, score in scores.items()}
    return clamped, rationale


def predict_from_conditions(conditions: ReactionConditions) -> List[MechanismPrediction]:
    """Devuelve los cuatro mecanismos ordenados por porcentaje descendente.

    Args:
        conditions: Vector de condiciones (enumeraciones cerradas).

    Returns:
        Lista de `MechanismPrediction` cuyos porcentajes suman 100. Si ninguna
        vía tiene puntuación positiva, los cuatro reciben 25 % con la etiqueta
        `no_pathway_favoured`.
    """
    scores, rationale = score_mechanisms(conditions)
    total = sum(scores.values())
    predictions: List[MechanismPrediction] = []
    for mechanism in MECHANISM_ORDER:
        if total > 0:
            percentage = scores[mechanism] / total * 100.0
            tags = tuple(rationale[mechanism])
        else:
            percentage = 100.0 / len(MECHANISM_ORDER)
            tags = tuple(rationale[mechanism]) + (NO_PATHWAY_TAG,)
        predictions.append(MechanismPrediction(mechanism, percentage, scores[mechanism], tags))
    predictions.sort(key=lambda p: (-p.percentage, MECHANISM_ORDER.index(p.mechanism)))
    logger.debug(
        "Prediction for %s: %s",
        conditions,
        ", ".join(f"{p.mechanism.value}={p.percentage:.1f}" for p in predictions),
    )
    return predictions


def explain_prediction(
    conditions: ReactionConditions,
    predictions: Optional[List[MechanismPrediction]] = None,
) -> PredictionExplanation:
    """Genera razones legibles para el mecanismo principal."""
    if predictions is None:
        predictions = predict_from_conditions(conditions)
    primary = predictions[0]
    secondary = predictions[1] if len(predictions) > 1 and predictions[1].percentage > 15 else None
    top = primary.mechanism
    reasons: List[str] = []

    substrate = conditions.substrate
    if substrate is SubstrateClass.TERTIARY:
        if top.is_unimolecular:
            reasons.append("Tertiary substrate stabilizes carbocation intermediate")
        if top is Mechanism.E2:
            reasons.append("Tertiary substrate blocks SN2, favors elimination")
        reasons.append("SN2 is blocked due to steric hindrance")
    elif substrate in (SubstrateClass.METHYL, SubstrateClass.PRIMARY):
        if top is Mechanism.SN2:
            reasons.append(f"{CONDITION_LABELS[substrate]} substrate allows backside attack")
        reasons.append("Carbocation would be too unstable for SN1/E1")
    elif substrate is SubstrateClass.SECONDARY:
        reasons.append("Secondary substrate: multiple mechanisms possible")
    elif substrate is SubstrateClass.VINYL:
        reasons.append("Vinyl/aryl carbon cannot undergo substitution")
    else:
        reasons.append(f"{CONDITION_LABELS[substrate]} substrate gives a resonance-stabilized carbocation")

    nucleophile = conditions.nucleophile
    if nucleophile is Nucleophile.STRONG_BULKY:
        reasons.append("Bulky base favors elimination (E2) over substitution")
    elif nucleophile in (Nucleophile.STRONG_SMALL, Nucleophile.STRONG_NORMAL):
        if top is Mechanism.SN2:
            reasons.append("Strong nucleophile drives SN2 mechanism")
    else:
        reasons.append("Weak/no nucleophile favors unimolecular mechanisms (SN1/E1)")

    if conditions.solvent is Solvent.POLAR_APROTIC:
        reasons.append("Polar aprotic solvent enhances nucleophilicity")
    elif conditions.solvent is Solvent.POLAR_PROTIC:
        if top.is_unimolecular:
            reasons.append("Polar protic solvent stabilizes carbocation")
        else:
            reasons.append("Polar protic solvent solvates nucleophile (reduces SN2 rate)")

    if conditions.temperature in (Temperature.ELEVATED, Temperature.HIGH) and not top.is_substitution:
        reasons.append("High temperature favors elimination (positive entropy change)")

    if conditions.leaving_group is LeavingGroup.EXCELLENT:
        reasons.append("Excellent leaving group accelerates all mechanisms")
    elif conditions.leaving_group is LeavingGroup.POOR:
        reasons.append("Poor leaving group: reaction may require activation")

    if secondary is not None and secondary.percentage > 25:
        reasons.append(
            f"{secondary.mechanism.value} is a competing pathway ({secondary.percentage:.0f}%)"
        )
    return PredictionExplanation(top, primary.percentage, tuple(reasons), secondary)


_BASE_PROFILES: Dict[Mechanism, Dict[str, object]] = {
    Mechanism.SN2: {"steps": 1, "ea": (18.0,), "intermediate": (), "delta_h": -5.0,
                    "description": "Concerted backside attack"},
    Mechanism.SN1: {"steps": 2, "ea": (22.0, 5.0), "intermediate": (15.0,), "delta_h": -5.0,
                    "description": "Carbocation intermediate"},
    Mechanism.E2: {"steps": 1, "ea": (20.0,), "intermediate": (), "delta_h": 2.0,
                   "description": "Concerted anti-periplanar elimination"},
    Mechanism.E1: {"steps": 2, "ea": (22.0, 8.0), "intermediate": (15.0,), "delta_h": 2.0,
                   "description": "Carbocation intermediate then elimination"},
}

_SN2_EA_ADJUST = {
    SubstrateClass.METHYL: -3.0,
    SubstrateClass.SECONDARY: 5.0,
    SubstrateClass.TERTIARY: 15.0,
}

_CATION_ADJUST = {
    SubstrateClass.TERTIARY: -5.0,
    SubstrateClass.BENZYLIC: -4.0,
    SubstrateClass.ALLYLIC: -4.0,
    SubstrateClass.PRIMARY: 8.0,
}


def mechanism_energy_profile(mechanism: Mechanism, conditions: ReactionConditions) -> EnergyProfile:
    """Parámetros de diagrama de energía ajustados al sustrato y al grupo saliente.

    Raises:
        MechanismError: Si el mecanismo no tiene perfil tabulado.
    """
    base = _BASE_PROFILES.get(mechanism)
    if base is None:
        raise MechanismError(f"No energy profile for mechanism {mechanism!r}")
    lg_adjust = (1.0 - LEAVING_GROUP_FACTORS[conditions.leaving_group]) * 5.0
    ea = base["ea"]
    if base["steps"] == 1:
        ea_adjust = _SN2_EA_ADJUST.get(conditions.substrate, 0.0) if mechanism is Mechanism.SN2 else 0.0
        transition_states: Tuple[float, ...] = (ea[0] + ea_adjust + lg_adjust,)
        intermediates: Tuple[float, ...] = ()
    else:
        transition_states = (ea[0] + lg_adjust, ea[1])
        intermediates = (base["intermediate"][0] + _CATION_ADJUST.get(conditions.substrate, 0.0),)
    return EnergyProfile(
        name=mechanism.value,
        steps=base["steps"],
        start_energy=0.0,
        transition_states=tuple(round(value, 2) for value in transition_states),
        intermediates=intermediates,
        product_energy=base["delta_h"],
        description=base["description"],
    )


def competing_mechanisms(
    conditions: ReactionConditions,
    threshold: float = 10.0,
) -> List[Tuple[MechanismPrediction, EnergyProfile]]:
    """Mecanismos con porcentaje >= `threshold` junto con su perfil energético."""
    return [
        (prediction, mechanism_energy_profile(prediction.mechanism, conditions))
        for prediction in predict_from_conditions(conditions)
        if prediction.percentage >= threshold
    ]
