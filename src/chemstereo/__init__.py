"""Clasificación de prioridades y asignación de descriptores R/S y E/Z."""

from .descriptors import (
    DoubleBondLabel,
    DoubleBondStereo,
    StereoAssignment,
    StereoCenter,
    StereoLabel,
    assign_center,
    assign_double_bond,
    assign_stereo,
    find_potential_stereocenters,
)
from .priority import PriorityRanking, rank_substituents, sphere_key, substituents_of
from .relations import StereoRelationship, is_meso, stereoisomer_relationship

__all__ = [
    "DoubleBondLabel",
    "DoubleBondStereo",
    "StereoAssignment",
    "StereoCenter",
    "StereoLabel",
    "assign_center",
    "assign_double_bond",
    "assign_stereo",
    "find_potential_stereocenters",
    "PriorityRanking",
    "rank_substituents",
    "sphere_key",
    "substituents_of",
    "StereoRelationship",
    "is_meso",
    "stereoisomer_relationship",
]
