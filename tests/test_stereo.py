"""Pruebas unitarias para prioridades y descriptores R/S y E/Z."""

import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from chemcore.errors import AmbiguousStereocenter
from chemcore.model import IMPLICIT_H
from chemcore.options import PriorityOptions, StereoOptions
from chemparse import parse_molecule
from chemstereo import (
    DoubleBondLabel,
    StereoLabel,
    StereoRelationship,
    assign_stereo,
    find_potential_stereocenters,
    is_meso,
    rank_substituents,
    stereoisomer_relationship,
)


def center_label(notation, atom_index, options=None):
    graph = parse_molecule(notation)
    return assign_stereo(graph, options).label_of(atom_index)


def double_bond_label(notation, bond_index):
    graph = parse_molecule(notation)
    return assign_stereo(graph).double_bond(bond_index).label


class PriorityTest(unittest.TestCase):
    """Casos de prueba para PriorityTest."""

    def test_atomic_number_first_sphere(self):
        """Verifica el orden Br > etilo > metilo > H en 2-bromobutano.

        Returns:
            None.

        """
        graph = parse_molecule("CC[C@@H](Br)C")
        ranking = rank_substituents(graph, 2)
        self.assertEqual(ranking.order, (3, 1, 4, IMPLICIT_H))
        self.assertTrue(ranking.is_total)
        self.assertEqual(ranking.rank_of(IMPLICIT_H), 3)

    def test_phantom_atoms_break_tie(self):
        """Verifica que el vinilo supere al isopropilo por el átomo fantasma.

        Returns:
            None.

        """
        graph = parse_molecule("C[C@H](C=C)C(C)C")
        ranking = rank_substituents(graph, 1)
        self.assertEqual(ranking.order, (2, 4, 0, IMPLICIT_H))

    def test_carboxyl_beats_hydroxymethyl(self):
        graph = parse_molecule("OCC(N)C(=O)O")
        ranking = rank_substituents(graph, 2)
        self.assertEqual(ranking.order[:3], (3, 4, 1))

    def test_identical_groups_tie(self):
        graph = parse_molecule("CCC(CC)Br")
        ranking = rank_substituents(graph, 2)
        self.assertFalse(ranking.is_total)
        self.assertEqual(ranking.tied_groups(), [(1, 3)])

    def test_shallow_depth_leaves_tie(self):
        graph = parse_molecule("CCCC(CCO)Br")
        deep = rank_substituents(graph, 3)
        shallow = rank_substituents(graph, 3, options=PriorityOptions(max_spheres=2))
        self.assertTrue(deep.is_total)
        self.assertFalse(shallow.is_total)


class TetrahedralCenterTest(unittest.TestCase):
    """Casos de prueba para TetrahedralCenterTest."""

    def test_reference_bromobutane(self):
        """Verifica CC[C@@H](Br)C -> R y CC[C@H](Br)C -> S.

        Returns:
            None.

        """
        self.assertEqual(center_label("CC[C@@H](Br)C", 2), StereoLabel.R)
        self.assertEqual(center_label("CC[C@H](Br)C", 2), StereoLabel.S)

    def test_daylight_reading_mirrors_labels(self):
        options = StereoOptions(daylight_chirality=True)
        self.assertEqual(center_label("CC[C@@H](Br)C", 2, options), StereoLabel.S)
        self.assertEqual(center_label("CC[C@H](Br)C", 2, options), StereoLabel.R)

    def test_rewritten_order_keeps_label(self):
        self.assertEqual(center_label("C[C@H](Br)CC", 1), StereoLabel.R)
        self.assertEqual(center_label("C[C@@H](Br)CC", 1), StereoLabel.S)

    def test_lactic_acid_and_alanine_are_mirror_labels(self):
        lactic = center_label("C[C@@H](O)C(=O)O", 1)
        alanine = center_label("C[C@H](N)C(=O)O", 1)
        self.assertEqual(lactic, StereoLabel.S)
        self.assertEqual(alanine, StereoLabel.R)

    def test_tie_demotes_center(self):
        """Verifica que dos etilos impidan asignar R/S.

        Returns:
            None.

        """
        graph = parse_molecule("CC[C@H](CC)Br")
        assignment = assign_stereo(graph)
        center = assignment.center(2)
        self.assertEqual(center.label, StereoLabel.NONE)
        self.assertFalse(center.is_stereocenter)
        self.assertIn("identical priority", center.reason)
        self.assertEqual(len(assignment.warnings), 1)
        self.assertIsInstance(assignment.warnings[0], AmbiguousStereocenter)
        self.assertEqual(assignment.warnings[0].atom_index, 2)
        self.assertEqual(assignment.labels, [])

    def test_two_hydrogens_demote_center(self):
        center = assign_stereo(parse_molecule("C[C@H2]C")).center(1)
        self.assertEqual(center.label, StereoLabel.NONE)
        self.assertEqual(center.reason, "more than one hydrogen")

    def test_unmarked_molecule_has_no_centers(self):
        assignment = assign_stereo(parse_molecule("CCC(Br)C"))
        self.assertEqual(assignment.centers, ())
        self.assertEqual(assignment.warnings, ())

    def test_potential_stereocenters(self):
        self.assertEqual(find_potential_stereocenters(parse_molecule("CCC(Br)C")), [2])
        self.assertEqual(find_potential_stereocenters(parse_molecule("CC(C)C")), [])
        self.assertEqual(find_potential_stereocenters(parse_molecule("CC=CC")), [])


class DoubleBondTest(unittest.TestCase):
    """Casos de prueba para DoubleBondTest."""

    def test_but_2_ene(self):
        self.assertEqual(double_bond_label("C/C=C/C", 1), DoubleBondLabel.E)
        self.assertEqual(double_bond_label("C/C=C\\C", 1), DoubleBondLabel.Z)

    def test_difluoroethene(self):
        self.assertEqual(double_bond_label("F/C=C/F", 1), DoubleBondLabel.E)
        self.assertEqual(double_bond_label("C(/F)=C/F", 1), DoubleBondLabel.Z)

    def test_priority_decides_side(self):
        """Verifica que el marcador sobre el sustituyente menor invierta el lado.

        Returns:
            None.

        """
        self.assertEqual(double_bond_label("C/C(Br)=C/C", 2), DoubleBondLabel.Z)

    def test_missing_markers_are_indeterminate(self):
        graph = parse_molecule("CC=CC")
        record = assign_stereo(graph).double_bond(1)
        self.assertEqual(record.label, DoubleBondLabel.INDETERMINATE)
        self.assertEqual(record.reason, "no directional marker")

    def test_identical_substituents_are_indeterminate(self):
        record = assign_stereo(parse_molecule("C/C=C(C)C")).double_bond(1)
        self.assertEqual(record.label, DoubleBondLabel.INDETERMINATE)

    def test_terminal_alkene_is_not_candidate(self):
        assignment = assign_stereo(parse_molecule("C=O"))
        self.assertEqual(assignment.double_bonds, ())

    def test_labels_list(self):
        assignment = assign_stereo(parse_molecule("C/C=C/[C@@H](Br)C"))
        self.assertEqual(sorted(assignment.labels), ["E", "R"])


class StereoisomerRelationshipTest(unittest.TestCase):
    def relationship(self, first, second):
        return stereoisomer_relationship(parse_molecule(first), parse_molecule(second))

    def test_enantiomers(self):
        self.assertEqual(
            self.relationship("CC[C@@H](Br)C", "CC[C@H](Br)C"),
            StereoRelationship.ENANTIOMERS,
        )

    def test_identical_written_differently(self):
        self.assertEqual(
            self.relationship("C[C@H](Br)CC", "CC[C@@H](Br)C"),
            StereoRelationship.IDENTICAL,
        )

    def test_enantiomers_written_differently(self):
        self.assertEqual(
            self.relationship("C[C@@H](Br)CC", "CC[C@@H](Br)C"),
            StereoRelationship.ENANTIOMERS,
        )

    def test_geometric_isomers_are_diastereomers(self):
        self.assertEqual(
            self.relationship("C/C=C/C", "C/C=C\\C"),
            StereoRelationship.DIASTEREOMERS,
        )

    def test_different_constitution(self):
        self.assertEqual(
            self.relationship("CCBr", "CCCl"),
            StereoRelationship.NOT_STEREOISOMERS,
        )

    def test_meso_mirror_is_identical(self):
        """Verifica que la imagen especular del butano-2,3-diol meso sea idéntica.

        Returns:
            None.

        """
        self.assertEqual(
            self.relationship("C[C@H](O)[C@H](O)C", "C[C@@H](O)[C@@H](O)C"),
            StereoRelationship.IDENTICAL,
        )

    def test_chiral_diol_pair_and_meso_form(self):
        self.assertEqual(
            self.relationship("C[C@@H](O)[C@H](O)C", "C[C@H](O)[C@@H](O)C"),
            StereoRelationship.ENANTIOMERS,
        )
        self.assertEqual(
            self.relationship("C[C@H](O)[C@H](O)C", "C[C@@H](O)[C@H](O)C"),
            StereoRelationship.DIASTEREOMERS,
        )


class MesoDetectionTest(unittest.TestCase):
    def test_meso_diol(self):
        graph = parse_molecule("C[C@H](O)[C@H](O)C")
        self.assertEqual(sorted(assign_stereo(graph).labels), ["R", "S"])
        self.assertTrue(is_meso(graph))
        self.assertTrue(is_meso(parse_molecule("C[C@@H](O)[C@@H](O)C")))

    def test_chiral_diol_is_not_meso(self):
        graph = parse_molecule("C[C@@H](O)[C@H](O)C")
        self.assertEqual(assign_stereo(graph).labels, ["S", "S"])
        self.assertFalse(is_meso(graph))

    def test_single_center_is_not_meso(self):
        self.assertFalse(is_meso(parse_molecule("CC[C@@H](Br)C")))
        self.assertFalse(is_meso(parse_molecule("CCO")))


if __name__ == "__main__":
    unittest.main()
