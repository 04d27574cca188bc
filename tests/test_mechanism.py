"""Pruebas unitarias para el motor heurístico SN1/SN2/E1/E2."""

import itertools
import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from chemcore.errors import UnknownCondition
from chemmech import (
    LeavingGroup,
    Mechanism,
    Nucleophile,
    ReactionConditions,
    Solvent,
    SubstrateClass,
    Temperature,
    competing_mechanisms,
    explain_prediction,
    mechanism_energy_profile,
    predict_from_conditions,
)
from chemmech.predictor import NO_PATHWAY_TAG


def by_mechanism(predictions):
    return {p.mechanism: p for p in predictions}


class PredictFromConditionsTest(unittest.TestCase):
    """Casos de prueba para PredictFromConditionsTest."""

    def test_percentages_always_sum_to_100(self):
        """Verifica la normalización sobre todas las combinaciones de condiciones.

        Returns:
            None.

        """
        for combo in itertools.product(SubstrateClass, Nucleophile, LeavingGroup, Solvent, Temperature):
            predictions = predict_from_conditions(ReactionConditions(*combo))
            self.assertEqual(len(predictions), 4)
            self.assertAlmostEqual(sum(p.percentage for p in predictions), 100.0, places=6)
            self.assertTrue(all(p.percentage >= 0 for p in predictions))
            percentages = [p.percentage for p in predictions]
            self.assertEqual(percentages, sorted(percentages, reverse=True))

    def test_methyl_halide_with_strong_nucleophile(self):
        conditions = ReactionConditions("methyl", "strong_small", "good", "polar_aprotic", "room")
        predictions = predict_from_conditions(conditions)
        self.assertEqual(predictions[0].mechanism, Mechanism.SN2)
        self.assertAlmostEqual(predictions[0].percentage, 100.0)
        self.assertEqual(predictions[0].rationale, ("substrate:methyl", "nucleophile:strong_small"))
        scores = by_mechanism(predictions)
        self.assertEqual(scores[Mechanism.E1].score, 0.0)
        self.assertEqual(scores[Mechanism.E2].rationale, ("methyl_blocks_elimination",))

    def test_tertiary_with_bulky_base_favours_e2(self):
        conditions = ReactionConditions(
            SubstrateClass.TERTIARY,
            Nucleophile.STRONG_BULKY,
            LeavingGroup.GOOD,
            Solvent.POLAR_APROTIC,
            Temperature.HIGH,
        )
        predictions = by_mechanism(predict_from_conditions(conditions))
        self.assertEqual(predictions[Mechanism.SN2].score, 2.0)
        self.assertEqual(predictions[Mechanism.SN1].score, 5.0)
        self.assertEqual(predictions[Mechanism.E2].score, 15.0)
        self.assertEqual(predictions[Mechanism.E1].score, 7.0)
        self.assertAlmostEqual(predictions[Mechanism.E2].percentage, 15.0 / 29.0 * 100.0)

    def test_vinyl_blocks_substitution(self):
        conditions = ReactionConditions("vinyl", "weak", "good", "polar_protic", "room")
        predictions = predict_from_conditions(conditions)
        scores = by_mechanism(predictions)
        self.assertEqual(scores[Mechanism.SN1].percentage, 0.0)
        self.assertEqual(scores[Mechanism.SN2].percentage, 0.0)
        self.assertEqual(predictions[0].mechanism, Mechanism.E1)
        self.assertAlmostEqual(predictions[0].percentage, 500.0 / 6.0)

    def test_poor_leaving_group_falls_back_to_uniform(self):
        """Verifica el reparto uniforme cuando ninguna vía queda favorecida.

        Returns:
            None.

        """
        conditions = ReactionConditions("primary", "strong_normal", "poor", "polar_aprotic", "room")
        predictions = predict_from_conditions(conditions)
        self.assertEqual([p.percentage for p in predictions], [25.0] * 4)
        self.assertEqual(
            [p.mechanism for p in predictions],
            [Mechanism.SN1, Mechanism.SN2, Mechanism.E1, Mechanism.E2],
        )
        for prediction in predictions:
            self.assertIn(NO_PATHWAY_TAG, prediction.rationale)
            self.assertIn("poor_leaving_group", prediction.rationale)

    def test_excellent_leaving_group_scales_scores(self):
        good = by_mechanism(predict_from_conditions(
            ReactionConditions("primary", "strong_small", "good", "polar_aprotic", "room")
        ))
        excellent = by_mechanism(predict_from_conditions(
            ReactionConditions("primary", "strong_small", "excellent", "polar_aprotic", "room")
        ))
        self.assertAlmostEqual(excellent[Mechanism.SN2].score, good[Mechanism.SN2].score * 1.3)

    def test_unknown_condition_value(self):
        with self.assertRaises(UnknownCondition) as ctx:
            ReactionConditions("quaternary", "weak", "good", "polar_protic")
        self.assertIn("quaternary", ctx.exception.message)
        with self.assertRaises(UnknownCondition):
            ReactionConditions("primary", "weak", "good", "supercritical")

    def test_default_temperature(self):
        conditions = ReactionConditions("secondary", "weak", "good", "polar_protic")
        self.assertIs(conditions.temperature, Temperature.ROOM)


class ExplanationTest(unittest.TestCase):
    def test_sn2_explanation(self):
        conditions = ReactionConditions("methyl", "strong_small", "good", "polar_aprotic", "room")
        explanation = explain_prediction(conditions)
        self.assertEqual(explanation.primary, Mechanism.SN2)
        self.assertIsNone(explanation.competing)
        self.assertIn("Methyl (CH3-X) substrate allows backside attack", explanation.reasons)
        self.assertIn("Strong nucleophile drives SN2 mechanism", explanation.reasons)
        self.assertIn("Polar aprotic solvent enhances nucleophilicity", explanation.reasons)

    def test_e2_explanation_mentions_competition(self):
        conditions = ReactionConditions("tertiary", "strong_bulky", "good", "polar_aprotic", "high")
        explanation = explain_prediction(conditions)
        self.assertEqual(explanation.primary, Mechanism.E2)
        self.assertEqual(explanation.competing.mechanism, Mechanism.E1)
        self.assertIn("Bulky base favors elimination (E2) over substitution", explanation.reasons)
        self.assertIn("High temperature favors elimination (positive entropy change)", explanation.reasons)


class EnergyProfileTest(unittest.TestCase):
    def test_one_step_profile(self):
        conditions = ReactionConditions("methyl", "strong_small", "good", "polar_aprotic")
        profile = mechanism_energy_profile(Mechanism.SN2, conditions)
        self.assertEqual(profile.steps, 1)
        self.assertEqual(profile.transition_states, (15.0,))
        self.assertEqual(profile.intermediates, ())

    def test_two_step_profile(self):
        conditions = ReactionConditions("tertiary", "weak", "good", "polar_protic")
        profile = mechanism_energy_profile(Mechanism.SN1, conditions)
        self.assertEqual(profile.steps, 2)
        self.assertEqual(profile.transition_states, (22.0, 5.0))
        self.assertEqual(profile.intermediates, (10.0,))

    def test_moderate_leaving_group_raises_barrier(self):
        conditions = ReactionConditions("primary", "strong_small", "moderate", "polar_aprotic")
        profile = mechanism_energy_profile(Mechanism.SN2, conditions)
        self.assertEqual(profile.transition_states, (20.0,))

    def test_competing_mechanisms(self):
        conditions = ReactionConditions("tertiary", "strong_bulky", "good", "polar_aprotic", "high")
        competing = competing_mechanisms(conditions)
        self.assertEqual(
            [prediction.mechanism for prediction, _ in competing],
            [Mechanism.E2, Mechanism.E1, Mechanism.SN1],
        )
        self.assertEqual(competing[0][1].name, "E2")


if __name__ == "__main__":
    unittest.main()
