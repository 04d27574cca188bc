import os
import sys
import unittest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from chemcalc import (
    check_valence,
    find_rings,
    format_formula,
    formula_difference,
    implicit_h_count,
    molecular_formula,
    ring_order,
)
from chemcore.errors import ParseErrorKind, ValenceViolation
from chemparse import parse_molecule, parse_raw


def hydrogens(notation):
    return [atom.hydrogen_count for atom in parse_molecule(notation).atoms]


def formula(notation):
    return format_formula(molecular_formula(parse_molecule(notation)))


class ImplicitHydrogenTest(unittest.TestCase):
    def test_aliphatic_corpus(self):
        self.assertEqual(hydrogens("C"), [4])
        self.assertEqual(hydrogens("CC=O"), [3, 1, 0])
        self.assertEqual(hydrogens("C#N"), [1, 0])
        self.assertEqual(hydrogens("C=C=C"), [2, 0, 2])
        self.assertEqual(hydrogens("CN(C)C"), [3, 0, 3, 3])

    def test_extended_valences(self):
        self.assertEqual(hydrogens("O=S(=O)(O)O"), [0, 0, 0, 1, 1])
        self.assertEqual(hydrogens("CS(=O)C"), [3, 0, 0, 3])
        self.assertEqual(hydrogens("CP(=O)(O)O"), [3, 0, 0, 1, 1])

    def test_aromatic_rings(self):
        self.assertEqual(formula("c1ccccc1"), "C6H6")
        self.assertEqual(formula("c1ccncc1"), "C5H5N")
        self.assertEqual(formula("c1ccoc1"), "C4H4O")
        self.assertEqual(formula("c1cc[nH]c1"), "C4H5N")
        self.assertEqual(formula("Cc1ccccc1"), "C7H8")
        self.assertEqual(formula("c1ccc2ccccc2c1"), "C10H8")

    def test_bracket_atoms_use_explicit_count(self):
        self.assertEqual(hydrogens("[CH3]C"), [3, 3])
        self.assertEqual(hydrogens("[NH4+]"), [4])
        self.assertEqual(hydrogens("C[O-]"), [3, 0])

    def test_implicit_h_count_single_atom(self):
        graph = parse_raw("CC(C)C")
        self.assertEqual(implicit_h_count(graph, 1), 1)
        self.assertEqual(implicit_h_count(graph, 0), 3)

    def test_pentavalent_carbon_rejected(self):
        with self.assertRaises(ValenceViolation) as ctx:
            parse_molecule("C(C)(C)(C)(C)C")
        self.assertEqual(ctx.exception.atom_index, 0)
        self.assertEqual(ctx.exception.position, 0)
        self.assertEqual(ctx.exception.kind, ParseErrorKind.VALENCE_VIOLATION)

    def test_overfull_oxygen_rejected(self):
        with self.assertRaises(ValenceViolation) as ctx:
            parse_molecule("CO(C)C")
        self.assertEqual(ctx.exception.atom_index, 1)

    def test_overfull_bracket_atom_rejected(self):
        with self.assertRaises(ValenceViolation):
            parse_molecule("[CH5]")

    def test_check_valence_accepts_resolved_graph(self):
        for notation in ("CCO", "c1ccccc1", "O=S(=O)(O)O", "C#CC=C"):
            check_valence(parse_molecule(notation))


class FormulaTest(unittest.TestCase):
    def test_hill_order(self):
        self.assertEqual(formula("CCO"), "C2H6O")
        self.assertEqual(formula("ClC(Cl)Cl"), "CHCl3")
        self.assertEqual(format_formula({"O": 1, "H": 2}), "H2O")
        self.assertEqual(format_formula({}), "")

    def test_formula_difference(self):
        change = formula_difference(parse_molecule("CCBr"), parse_molecule("CCO"))
        self.assertEqual(change, {"Br": -1, "O": 1, "H": 1})


class RingPerceptionTest(unittest.TestCase):
    def test_cyclohexane_ring(self):
        graph = parse_molecule("CC1CCCCC1")
        rings = find_rings(graph)
        self.assertEqual(rings, [frozenset({1, 2, 3, 4, 5, 6})])
        self.assertEqual(ring_order(graph, rings[0]), [1, 2, 3, 4, 5, 6])

    def test_canonical_walk_follows_lower_neighbor(self):
        graph = parse_molecule("C1CC(C2)CCC2C1")
        for ring in find_rings(graph):
            order = ring_order(graph, ring)
            self.assertEqual(order[0], min(ring))

    def test_acyclic(self):
        self.assertEqual(find_rings(parse_molecule("CCCC")), [])


if __name__ == "__main__":
    unittest.main()
