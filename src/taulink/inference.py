"""
Moteur d'inférence exacte sur le réseau de transmission.

- Conditionnement fonctionnel : `condition` retourne un nouvel instantané
  immuable, le réseau d'entrée n'est jamais modifié
- Marginales et lois jointes par élimination de variables : produit des
  facteurs (CPT réduites par l'évidence) puis sommation des variables
  cachées, dans un ordre glouton minimisant la taille des facteurs
"""

from functools import reduce
from types import MappingProxyType

import numpy as np

from .config import N_GENOTYPES, check_state
from .errors import InferenceError, InvalidParameterError
from .network import Network


class Factor:
    """Facteur discret : table numpy indexée par des variables génotype."""

    __slots__ = ('variables', 'table')

    def __init__(self, variables, table):
        self.variables = tuple(variables)
        self.table = np.asarray(table, dtype=np.float64)

    def _expand(self, variables):
        """Réordonne la table selon `variables` (axes de taille 1 si absents)."""
        order = [self.variables.index(v) for v in variables if v in self.variables]
        table = np.transpose(self.table, order)
        shape = [N_GENOTYPES if v in self.variables else 1 for v in variables]
        return table.reshape(shape)

    def product(self, other):
        variables = self.variables + tuple(v for v in other.variables
                                           if v not in self.variables)
        return Factor(variables, self._expand(variables) * other._expand(variables))

    def sum_out(self, var):
        axis = self.variables.index(var)
        variables = self.variables[:axis] + self.variables[axis + 1:]
        return Factor(variables, self.table.sum(axis=axis))

    def reduce(self, evidence):
        """Fixe les variables observées (l'axe correspondant disparaît)."""
        observed = [v for v in self.variables if v in evidence]
        if not observed:
            return self
        index = tuple(evidence[v] if v in evidence else slice(None)
                      for v in self.variables)
        variables = tuple(v for v in self.variables if v not in evidence)
        return Factor(variables, self.table[index])

    def __repr__(self):
        return f"Factor({self.variables})"


def _elimination_cost(var, factors):
    scope = set()
    for f in factors:
        if var in f.variables:
            scope.update(f.variables)
    return len(scope)


def eliminate(factors, keep):
    """
    Élimination de variables.

    Parameters
    ----------
    factors : list of Factor
    keep : sequence
        Variables à conserver, dans l'ordre voulu des axes du résultat

    Returns
    -------
    table : array (3,) * len(keep)
        Loi jointe non normalisée des variables `keep`
    """
    factors = list(factors)
    keep = tuple(keep)
    hidden = set()
    for f in factors:
        hidden.update(f.variables)
    hidden.difference_update(keep)

    while hidden:
        var = min(hidden, key=lambda v: (_elimination_cost(v, factors), str(v)))
        related = [f for f in factors if var in f.variables]
        factors = [f for f in factors if var not in f.variables]
        factors.append(reduce(Factor.product, related).sum_out(var))
        hidden.remove(var)

    result = reduce(Factor.product, factors, Factor((), 1.0))
    missing = [v for v in keep if v not in result.variables]
    if missing:
        raise InvalidParameterError(f"Variables absentes des facteurs: {missing}")
    return result._expand(keep)


class ConditionedNetwork:
    """
    Instantané immuable : un réseau et l'évidence appliquée jusqu'ici.
    """

    def __init__(self, network, evidence=None):
        self.network = network
        self.evidence = MappingProxyType(dict(evidence or {}))

    @property
    def pedigree(self):
        return self.network.pedigree

    @property
    def tau(self):
        return self.network.tau

    def factors(self):
        """CPT du réseau réduites par l'évidence courante."""
        return [Factor(cpt.variables, cpt.table).reduce(self.evidence)
                for cpt in self.network.cpts.values()]

    def unnormalized(self, ids):
        """
        Loi jointe non normalisée P(ids, évidence), array (3,) * len(ids).
        Les variables observées valent 0 hors de leur état fixé.
        """
        free = [v for v in ids if v not in self.evidence]
        table = eliminate(self.factors(), free)
        out = np.zeros((N_GENOTYPES,) * len(ids))
        index = tuple(self.evidence[v] if v in self.evidence else slice(None)
                      for v in ids)
        out[index] = table
        return out

    def __repr__(self):
        return f"ConditionedNetwork(tau={self.tau}, evidence={dict(self.evidence)})"


def _as_snapshot(network):
    if isinstance(network, ConditionedNetwork):
        return network
    if isinstance(network, Network):
        return ConditionedNetwork(network)
    raise TypeError(f"Réseau attendu, reçu {type(network).__name__}")


def _check_ids(snapshot, ids):
    ids = list(ids)
    if len(set(ids)) != len(ids):
        raise InvalidParameterError(f"Individus dupliqués dans la requête: {ids}")
    for ind_id in ids:
        if ind_id not in snapshot.network:
            raise InvalidParameterError(f"Individu inconnu: {ind_id}")
    return ids


def condition(network, evidence):
    """
    Fixe des variables à des états observés.

    Les éléments de `evidence` sont appliqués un à un ; chacun doit avoir
    une probabilité non nulle sous le conditionnement courant.

    Parameters
    ----------
    network : Network ou ConditionedNetwork
    evidence : dict {individual_id: état}

    Returns
    -------
    snapshot : ConditionedNetwork
        Nouvel instantané ; `network` est inchangé

    Raises
    ------
    InferenceError
        État de probabilité nulle sous l'évidence courante
    """
    snapshot = _as_snapshot(network)
    for ind_id, state in evidence.items():
        _check_ids(snapshot, [ind_id])
        state = check_state(ind_id, state)
        current = snapshot.evidence.get(ind_id)
        if current is not None:
            if current != state:
                raise InferenceError(
                    f"Individu {ind_id} déjà fixé à {current}, impossible de le fixer à {state}"
                )
            continue
        p = marginal(snapshot, ind_id)[state]
        if not p > 0.0:
            raise InferenceError(
                f"P(individu {ind_id} = {state} | {dict(snapshot.evidence)}) = 0"
            )
        new_evidence = dict(snapshot.evidence)
        new_evidence[ind_id] = state
        snapshot = ConditionedNetwork(snapshot.network, new_evidence)
    return snapshot


def joint(network, ids):
    """
    Loi jointe de plusieurs individus sachant l'évidence courante.

    Returns
    -------
    dist : array (3,) * len(ids)
        dist[g_1, ..., g_k] = P(ids = (g_1, ..., g_k) | évidence)
    """
    snapshot = _as_snapshot(network)
    ids = _check_ids(snapshot, ids)
    table = snapshot.unnormalized(ids)
    total = table.sum()
    if not total > 0.0:
        raise InferenceError(f"Évidence de probabilité nulle: {dict(snapshot.evidence)}")
    return table / total


def marginal(network, ind_id):
    """Distribution (3,) du génotype de `ind_id` sachant l'évidence courante."""
    return joint(network, [ind_id])


def probability_of_evidence(network):
    """P(évidence) sous le prior du réseau."""
    snapshot = _as_snapshot(network)
    return float(eliminate(snapshot.factors(), ()))
