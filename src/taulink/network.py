"""
Construction du réseau bayésien de transmission pour un pedigree.

Chaque individu porte une variable génotype (0, 1, 2) et une table de
probabilité conditionnelle : prior uniforme pour un fondateur, table de
transmission P(enfant | père, mère) pour un non-fondateur.
"""

from types import MappingProxyType

import numpy as np

from .config import TransmissionModel, PROBABILITY_TOLERANCE
from .pedigree import Pedigree


def _frozen(table):
    table = np.array(table, dtype=np.float64)
    table.setflags(write=False)
    return table


class TransmissionCPT:
    """
    Table de probabilité conditionnelle d'un individu.

    `variables` liste les individus indexant les axes de `table` :
    (ind,) pour un fondateur, (ind, père, mère) pour un non-fondateur.
    """

    def __init__(self, ind_id, table, parents=None):
        self.ind_id = ind_id
        self.parents = tuple(parents) if parents else ()
        self.variables = (ind_id,) + self.parents
        self.table = _frozen(table)

    @property
    def is_founder(self):
        return not self.parents

    def is_normalized(self, tol=PROBABILITY_TOLERANCE):
        """Chaque contexte parental somme à 1."""
        return bool(np.all(np.abs(self.table.sum(axis=0) - 1.0) <= tol))

    def __repr__(self):
        kind = "prior" if self.is_founder else f"parents={self.parents}"
        return f"TransmissionCPT({self.ind_id}, {kind})"


class Network:
    """Réseau compilé (pedigree + CPT) pour une valeur de tau, immuable."""

    def __init__(self, pedigree, model, cpts):
        self.pedigree = pedigree
        self.model = model
        self.cpts = MappingProxyType(dict(cpts))

    @property
    def tau(self):
        return self.model.tau

    @property
    def variables(self):
        return self.pedigree.ind_ids

    def __contains__(self, ind_id):
        return ind_id in self.cpts

    def __repr__(self):
        return f"Network(tau={self.tau}, n={len(self.cpts)})"


def build_network(pedigree, tau):
    """
    Assemble les CPT de tous les individus.

    Parameters
    ----------
    pedigree : Pedigree
    tau : float
        Probabilité de transmission d'un parent hétérozygote

    Returns
    -------
    network : Network

    Raises
    ------
    InvalidParameterError
        tau hors de [0, 1]
    MalformedPedigreeError
        pedigree invalide
    """
    if not isinstance(pedigree, Pedigree):
        pedigree = Pedigree.from_records(pedigree)

    model = TransmissionModel(tau)
    trans = model.transmission_table()
    prior = model.founder_prior()

    cpts = {}
    for ind_id in pedigree.topological_order:
        parents = pedigree.get_parents(ind_id)
        if parents is None:
            cpts[ind_id] = TransmissionCPT(ind_id, prior)
        else:
            cpts[ind_id] = TransmissionCPT(ind_id, trans, parents)
    return Network(pedigree, model, cpts)
