"""Pruebas unitarias para el análisis por diferencia de grafos y el resultado estereoquímico."""

import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from chemconf import ConformationalState, map_geometry
from chemcore.errors import UnknownCondition
from chemmech import (
    Mechanism,
    ReactionType,
    StereoOutcome,
    SubstrateClass,
    analyze_e2,
    analyze_e2_record,
    bond_key,
    elimination_products,
    infer_conditions_from_graph,
    major_elimination_product,
    predict_from_graphs,
    stereochemical_outcome,
    track_sequence,
)
from chemmech.e2 import EQUATORIAL_LEAVING_GROUP, NO_AXIAL_HYDROGEN
from chemmech.graph_diff import BASE_ACTIVATION
from chemmech.substrate import find_leaving_group
from chemparse import parse_molecule
from chemstereo import StereoLabel


def analyze(reactant, product):
    return predict_from_graphs(parse_molecule(reactant), parse_molecule(product))


class GraphDiffTest(unittest.TestCase):
    """Casos de prueba para GraphDiffTest."""

    def test_bond_key_order(self):
        self.assertEqual(bond_key("Br", "C"), "C-Br")
        self.assertEqual(bond_key("H", "O"), "O-H")
        self.assertEqual(bond_key("Br", "H"), "H-Br")

    def test_base_activation_is_read_only(self):
        with self.assertRaises(TypeError):
            BASE_ACTIVATION["SN2"] = 1.0
        self.assertEqual(BASE_ACTIVATION["SN2"], 18.0)

    def test_substitution_on_primary_carbon(self):
        """Verifica CCBr -> CCO: se rompe C-Br y se forma C-O.

        Returns:
            None.

        """
        analysis = analyze("CCBr", "CCO")
        self.assertEqual(analysis.reaction_type, ReactionType.SUBSTITUTION)
        self.assertEqual(analysis.sub_type, "SN2")
        self.assertEqual(analysis.bonds_broken, ("C-Br",))
        self.assertEqual(analysis.bonds_formed, ("C-O",))
        self.assertEqual(analysis.estimated_delta_h, -18.0)
        self.assertEqual(analysis.estimated_ea, 18.0)
        self.assertEqual(analysis.confidence, "medium")
        self.assertEqual(analysis.formula_change, {"Br": -1, "O": 1, "H": 1})
        self.assertEqual(analysis.substrate.substrate, SubstrateClass.PRIMARY)

    def test_elimination_forms_pi_bond(self):
        analysis = analyze("CC(Br)C", "CC=C")
        self.assertEqual(analysis.reaction_type, ReactionType.ELIMINATION)
        self.assertEqual(analysis.sub_type, "E2")
        self.assertEqual(analysis.bonds_broken, ("C-Br", "C-C", "C-H"))
        self.assertEqual(analysis.bonds_formed, ("C=C", "H-Br"))
        self.assertEqual(analysis.estimated_delta_h, 17.0)
        self.assertEqual(analysis.estimated_ea, 25.0)

    def test_tertiary_elimination_is_e1(self):
        analysis = analyze("CC(C)(C)Br", "CC(C)=C")
        self.assertEqual(analysis.reaction_type, ReactionType.ELIMINATION)
        self.assertEqual(analysis.sub_type, "E1")

    def test_hydrogenation(self):
        """Verifica la adición de H2 a but-2-eno.

        Returns:
            None.

        """
        analysis = analyze("CC=CC", "CCCC")
        self.assertEqual(analysis.reaction_type, ReactionType.ADDITION)
        self.assertEqual(analysis.sub_type, "hydrogenation")
        self.assertEqual(analysis.bonds_broken, ("C=C", "H-H"))
        self.assertEqual(analysis.bonds_formed, ("C-C", "C-H", "C-H"))
        self.assertEqual(analysis.estimated_delta_h, -31.0)
        self.assertEqual(analysis.estimated_ea, 9.0)
        self.assertIsNone(analysis.substrate)

    def test_hydrohalogenation(self):
        analysis = analyze("C=C", "CCBr")
        self.assertEqual(analysis.sub_type, "hydrohalogenation")
        self.assertEqual(analysis.bonds_broken, ("C=C", "H-Br"))
        self.assertEqual(analysis.bonds_formed, ("C-Br", "C-C", "C-H"))
        self.assertEqual(analysis.estimated_delta_h, -17.0)
        self.assertEqual(analysis.estimated_ea, 15.0)

    def test_hydration(self):
        analysis = analyze("C=C", "CCO")
        self.assertEqual(analysis.reaction_type, ReactionType.ADDITION)
        self.assertEqual(analysis.sub_type, "hydration")

    def test_unchanged_graph_is_unknown(self):
        analysis = analyze("CC", "CC")
        self.assertEqual(analysis.reaction_type, ReactionType.UNKNOWN)
        self.assertEqual(analysis.confidence, "low")
        self.assertEqual(analysis.bonds_changed, ((), ()))
        self.assertEqual(analysis.estimated_delta_h, 0.0)


class SubstrateInferenceTest(unittest.TestCase):
    def test_substrate_classes(self):
        cases = {
            "CBr": SubstrateClass.METHYL,
            "CCBr": SubstrateClass.PRIMARY,
            "CC(C)Br": SubstrateClass.SECONDARY,
            "CC(C)(C)Br": SubstrateClass.TERTIARY,
            "C=CBr": SubstrateClass.VINYL,
            "C=CCBr": SubstrateClass.ALLYLIC,
            "BrCc1ccccc1": SubstrateClass.BENZYLIC,
        }
        for notation, expected in cases.items():
            profile = infer_conditions_from_graph(parse_molecule(notation))
            self.assertEqual(profile.substrate, expected, notation)

    def test_best_leaving_group_wins(self):
        self.assertEqual(find_leaving_group(parse_molecule("OCCBr")), (2, 3))
        profile = infer_conditions_from_graph(parse_molecule("CCI"))
        self.assertEqual(profile.leaving_group.value, "excellent")

    def test_no_leaving_group(self):
        self.assertIsNone(infer_conditions_from_graph(parse_molecule("CCCC")))
        self.assertEqual(elimination_products(parse_molecule("CCCC")), [])

    def test_zaitsev_and_hofmann_products(self):
        """Verifica el alqueno más sustituido y el menos sustituido de 2-bromobutano.

        Returns:
            None.

        """
        graph = parse_molecule("CC(Br)CC")
        products = elimination_products(graph)
        self.assertEqual([(p.beta, p.substitution, p.is_zaitsev) for p in products], [(3, 2, True), (0, 1, False)])
        self.assertEqual(major_elimination_product(graph).beta, 3)
        self.assertEqual(major_elimination_product(graph, bulky_base=True).beta, 0)


class E2GeometryTest(unittest.TestCase):
    """Casos de prueba para la eliminación E2 sobre 1-bromo-2-metilciclohexano."""

    def setUp(self):
        self.graph = parse_molecule("BrC1CCCCC1C")

    def test_equatorial_leaving_group_blocks_ring_betas(self):
        """Verifica que un Br ecuatorial no tenga H antiperiplanar en el anillo.

        Returns:
            None.

        """
        analysis = analyze_e2(self.graph, ConformationalState())
        self.assertFalse(analysis.leaving_group_axial)
        self.assertTrue(analysis.requires_ring_flip)
        self.assertEqual(analysis.allowed_betas, ())
        self.assertEqual([beta for beta, _ in analysis.blocked_betas], [2, 6])
        self.assertEqual(analysis.blocked_reason(6), EQUATORIAL_LEAVING_GROUP)
        self.assertEqual(analysis.products, ())
        self.assertIsNone(analysis.major)

    def test_axial_leaving_group_allows_zaitsev(self):
        state = ConformationalState()
        state.place(0, "axial")
        analysis = analyze_e2(self.graph, state)
        self.assertTrue(analysis.leaving_group_axial)
        self.assertEqual(sorted(analysis.allowed_betas), [2, 6])
        self.assertEqual(analysis.blocked_betas, ())
        self.assertEqual([p.beta for p in analysis.products], [6, 2])
        self.assertEqual(analysis.major.beta, 6)
        self.assertTrue(analysis.major.is_zaitsev)
        self.assertEqual(analyze_e2(self.graph, state, bulky_base=True).major.beta, 2)

    def test_axial_methyl_leaves_only_hofmann_beta(self):
        """Verifica que el metilo axial bloquee el único H del carbono más sustituido.

        Returns:
            None.

        """
        state = ConformationalState()
        state.place(0, "axial")
        state.place(5, "axial")
        analysis = analyze_e2(self.graph, state)
        self.assertEqual(analysis.allowed_betas, (2,))
        self.assertEqual(analysis.blocked_reason(6), NO_AXIAL_HYDROGEN)
        self.assertIsNone(analysis.blocked_reason(2))
        self.assertEqual(analysis.major.beta, 2)
        self.assertFalse(analysis.major.is_zaitsev)

    def test_ring_flip_makes_leaving_group_axial(self):
        state = ConformationalState()
        state.flip()
        analysis = analyze_e2(self.graph, state)
        self.assertTrue(analysis.leaving_group_axial)
        self.assertFalse(analysis.requires_ring_flip)
        self.assertEqual(analysis.allowed_betas, (2,))
        self.assertEqual(analysis.major.beta, 2)

    def test_precomputed_record(self):
        state = ConformationalState()
        state.place(0, "axial")
        record = map_geometry(self.graph, state, requested_bond_index=0)
        profile = infer_conditions_from_graph(self.graph)
        analysis = analyze_e2_record(self.graph, record, profile)
        self.assertEqual(analysis, analyze_e2(self.graph, state))
        pairs = [(f.kind, f.atom_index, b.kind, b.label) for f, b in record.newman.anti_periplanar]
        self.assertIn(("axial", 0, "axial", "H"), pairs)

    def test_without_chair_every_beta_is_allowed(self):
        analysis = analyze_e2(self.graph)
        self.assertIsNone(analysis.leaving_group_axial)
        self.assertEqual(sorted(analysis.allowed_betas), [2, 6])
        self.assertEqual(analysis.major.beta, 6)

    def test_exocyclic_leaving_group_is_unconstrained(self):
        graph = parse_molecule("CC(Br)C1CCCCC1")
        analysis = analyze_e2(graph, ConformationalState())
        self.assertIsNone(analysis.leaving_group_axial)
        self.assertEqual(sorted(analysis.allowed_betas), [0, 3])
        self.assertEqual(analysis.blocked_betas, ())

    def test_no_leaving_group(self):
        self.assertIsNone(analyze_e2(parse_molecule("CC1CCCCC1"), ConformationalState()))

    def test_allowed_betas_filter(self):
        graph = parse_molecule("CC(Br)CC")
        self.assertEqual(major_elimination_product(graph, allowed_betas=[0]).beta, 0)
        self.assertIsNone(major_elimination_product(graph, allowed_betas=[]))


class StereoOutcomeTest(unittest.TestCase):
    """Casos de prueba para StereoOutcomeTest."""

    def test_sn2_inverts(self):
        result = stereochemical_outcome("SN2", "R")
        self.assertEqual(result.outcome, StereoOutcome.INVERSION)
        self.assertEqual(result.labels, (StereoLabel.S,))
        self.assertTrue(result.optically_active)
        self.assertEqual(result.description, "Complete inversion - R -> S")

    def test_sn1_racemizes(self):
        result = stereochemical_outcome(Mechanism.SN1, StereoLabel.S)
        self.assertEqual(result.outcome, StereoOutcome.RACEMIZATION)
        self.assertEqual(result.labels, (StereoLabel.S, StereoLabel.R))
        self.assertEqual([p.percentage for p in result.products], [50.0, 50.0])
        self.assertFalse(result.optically_active)

    def test_elimination_destroys_center(self):
        for mechanism in ("E1", "E2"):
            result = stereochemical_outcome(mechanism, "R")
            self.assertEqual(result.outcome, StereoOutcome.ELIMINATION)
            self.assertEqual(result.labels, (StereoLabel.NONE,))

    def test_no_stereocenter(self):
        result = stereochemical_outcome("SN2", StereoLabel.NONE)
        self.assertEqual(result.outcome, StereoOutcome.NO_STEREOCENTER)
        self.assertFalse(result.optically_active)

    def test_unknown_mechanism(self):
        with self.assertRaises(UnknownCondition):
            stereochemical_outcome("SN3", "R")

    def test_track_sequence(self):
        """Verifica la configuración a lo largo de una secuencia de reacciones.

        Returns:
            None.

        """
        steps = track_sequence("R", ["SN2", "SN2", "SN1", "SN2", "E2", "SN1"])
        self.assertEqual(
            [step.after for step in steps],
            ["S", "R", "racemic", "racemic", "destroyed", "destroyed"],
        )
        self.assertEqual(steps[0].before, "R")
        self.assertEqual(steps[0].outcome, "Walden inversion")
        self.assertEqual(steps[3].outcome, "Racemic mixture stays racemic")
        self.assertEqual(steps[5].outcome, "No stereocenter present")

    def test_track_sequence_without_center(self):
        steps = track_sequence(StereoLabel.NONE, ["SN2"])
        self.assertEqual(steps[0].before, "destroyed")
        self.assertEqual(steps[0].after, "destroyed")


if __name__ == "__main__":
    unittest.main()
