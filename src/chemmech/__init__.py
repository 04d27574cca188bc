"""Motor heurístico de mecanismos SN1/SN2/E1/E2 y análisis por diferencia de grafos."""

from .bond_energies import BOND_ENERGIES, DEFAULT_BOND_ENERGY, bond_energy, bond_key
from .e2 import E2Analysis, analyze_e2, analyze_e2_record
from .graph_diff import ReactionAnalysis, ReactionType, bond_multiset, predict_from_graphs
from .outcomes import (
    OutcomeResult,
    ProductConfiguration,
    SequenceStep,
    StereoOutcome,
    stereochemical_outcome,
    track_sequence,
)
from .predictor import (
    EnergyProfile,
    MechanismPrediction,
    PredictionExplanation,
    competing_mechanisms,
    explain_prediction,
    mechanism_energy_profile,
    predict_from_conditions,
    score_mechanisms,
)
from .substrate import (
    EliminationProduct,
    SubstrateProfile,
    elimination_products,
    infer_conditions_from_graph,
    major_elimination_product,
)
from .tables import (
    CONDITION_ADJUSTMENTS,
    LEAVING_GROUP_FACTORS,
    LeavingGroup,
    Mechanism,
    Nucleophile,
    ReactionConditions,
    Solvent,
    SubstrateClass,
    Temperature,
)

__all__ = [
    "BOND_ENERGIES",
    "DEFAULT_BOND_ENERGY",
    "bond_energy",
    "bond_key",
    "E2Analysis",
    "analyze_e2",
    "analyze_e2_record",
    "ReactionAnalysis",
    "ReactionType",
    "bond_multiset",
    "predict_from_graphs",
    "OutcomeResult",
    "ProductConfiguration",
    "SequenceStep",
    "StereoOutcome",
    "stereochemical_outcome",
    "track_sequence",
    "EnergyProfile",
    "MechanismPrediction",
    "PredictionExplanation",
    "competing_mechanisms",
    "explain_prediction",
    "mechanism_energy_profile",
    "predict_from_conditions",
    "score_mechanisms",
    "EliminationProduct",
    "SubstrateProfile",
    "elimination_products",
    "infer_conditions_from_graph",
    "major_elimination_product",
    "CONDITION_ADJUSTMENTS",
    "LEAVING_GROUP_FACTORS",
    "LeavingGroup",
    "Mechanism",
    "Nucleophile",
    "ReactionConditions",
    "Solvent",
    "SubstrateClass",
    "Temperature",
]
