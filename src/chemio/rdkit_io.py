from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from chemcore.model import IMPLICIT_H, BondDirection, BondOrder, ChiralClass, MoleculeGraph

try:
    from rdkit import Chem
except Exception:  # pragma: no cover - optional dependency at runtime
    Chem = None

logger = logging.getLogger(__name__)


def _require_rdkit():
    if Chem is None:
        raise RuntimeError("RDKit no disponible")


def _bond_type(order: BondOrder):
    if order is BondOrder.AROMATIC:
        return Chem.BondType.AROMATIC
    if order is BondOrder.DOUBLE:
        return Chem.BondType.DOUBLE
    if order is BondOrder.TRIPLE:
        return Chem.BondType.TRIPLE
    return Chem.BondType.SINGLE


def _bond_dir(direction: BondDirection):
    if direction is BondDirection.UP:
        return Chem.BondDir.ENDUPRIGHT
    if direction is BondDirection.DOWN:
        return Chem.BondDir.ENDDOWNRIGHT
    return Chem.BondDir.NONE


def _parity(sequence: List[int], reference: List[int]) -> int:
    """0 si `sequence` es una permutación par de `reference`, 1 si es impar."""
    positions = [reference.index(item) for item in sequence]
    swaps = 0
    for i in range(len(positions)):
        for j in range(i + 1, len(positions)):
            if positions[i] > positions[j]:
                swaps += 1
    return swaps % 2


def molgraph_to_rdkit_with_map(molgraph: MoleculeGraph):
    """Convierte el grafo a un `Chem.Mol` saneado.

    Los centros marcados con `@`/`@@` reciben su hidrógeno como átomo
    explícito para que la etiqueta quiral de RDKit se refiera a cuatro
    enlaces reales; la etiqueta se traduce con la lectura Daylight.

    Returns:
        (mol, id_map) donde `id_map` asocia índice del grafo -> índice RDKit.
    """
    _require_rdkit()
    rw = Chem.RWMol()
    id_map: Dict[int, int] = {}
    stereo_h: Dict[int, int] = {}

    for atom in molgraph.atoms:
        rd_atom = Chem.Atom(atom.element)
        rd_atom.SetFormalCharge(atom.charge)
        if atom.isotope is not None:
            rd_atom.SetIsotope(atom.isotope)
        rd_atom.SetIsAromatic(atom.aromatic)
        rd_atom.SetNoImplicit(True)
        hydrogens = atom.hydrogen_count
        if atom.chirality is not ChiralClass.NONE and hydrogens == 1:
            hydrogens = 0
        rd_atom.SetNumExplicitHs(hydrogens)
        id_map[atom.index] = rw.AddAtom(rd_atom)

    for atom in molgraph.atoms:
        if atom.chirality is not ChiralClass.NONE and atom.hydrogen_count == 1:
            h_idx = rw.AddAtom(Chem.Atom("H"))
            stereo_h[atom.index] = h_idx

    for bond in molgraph.bonds:
        begin, end = id_map[bond.a1], id_map[bond.a2]
        if rw.GetBondBetweenAtoms(begin, end) is not None:
            continue
        rw.AddBond(begin, end, _bond_type(bond.order))
        rd_bond = rw.GetBondBetweenAtoms(begin, end)
        if bond.order is BondOrder.AROMATIC:
            rd_bond.SetIsAromatic(True)
        rd_bond.SetBondDir(_bond_dir(bond.direction))
    for atom_index, h_idx in stereo_h.items():
        rw.AddBond(id_map[atom_index], h_idx, Chem.BondType.SINGLE)

    for atom in molgraph.atoms:
        if atom.chirality is ChiralClass.NONE:
            continue
        rd_atom = rw.GetAtomWithIdx(id_map[atom.index])
        written = [
            stereo_h[atom.index] if nbr == IMPLICIT_H else id_map[nbr]
            for nbr in atom.neighbor_order
        ]
        stored = [b.GetOtherAtomIdx(rd_atom.GetIdx()) for b in rd_atom.GetBonds()]
        if len(written) != 4 or sorted(written) != sorted(stored):
            logger.debug("Skipping chiral tag on atom %d: %s vs %s", atom.index, written, stored)
            continue
        chirality = atom.chirality
        if _parity(stored, written):
            chirality = chirality.inverted()
        if chirality is ChiralClass.CLOCKWISE:
            rd_atom.SetChiralTag(Chem.ChiralType.CHI_TETRAHEDRAL_CW)
        else:
            rd_atom.SetChiralTag(Chem.ChiralType.CHI_TETRAHEDRAL_CCW)

    mol = rw.GetMol()
    Chem.SanitizeMol(mol)
    Chem.AssignStereochemistry(mol, cleanIt=True, force=True)
    return mol, id_map


def molgraph_to_rdkit(molgraph: MoleculeGraph):
    mol, _ = molgraph_to_rdkit_with_map(molgraph)
    return mol


def molgraph_to_smiles(molgraph: MoleculeGraph) -> str:
    mol = Chem.RemoveHs(molgraph_to_rdkit(molgraph))
    return Chem.MolToSmiles(mol, canonical=True)


def molgraph_to_molfile(molgraph: MoleculeGraph) -> str:
    mol = molgraph_to_rdkit(molgraph)
    return Chem.MolToMolBlock(mol)


def rdkit_cip_labels(molgraph: MoleculeGraph) -> Dict[int, str]:
    """Etiquetas CIP que RDKit asigna a los centros, por índice del grafo."""
    mol, id_map = molgraph_to_rdkit_with_map(molgraph)
    rd_to_graph = {rd_idx: idx for idx, rd_idx in id_map.items()}
    centers: List[Tuple[int, str]] = Chem.FindMolChiralCenters(mol, includeUnassigned=False)
    return {rd_to_graph[idx]: label for idx, label in centers if idx in rd_to_graph}
