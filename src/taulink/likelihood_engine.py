"""
Vraisemblance de la probabilité de transmission tau.

Hypothèse : un seul fondateur a introduit le variant. Pour chaque
fondateur i, on fixe i hétérozygote et les autres fondateurs non porteurs,
puis on calcule la probabilité de la configuration observée chez les
affectés génotypés par conditionnement séquentiel (règle de chaînage).
La vraisemblance est la moyenne des termes sur les fondateurs.
"""

import logging

import numpy as np
from scipy.optimize import minimize_scalar
from tqdm import tqdm

from .config import HET, HOM_REF, TAU_VALUES, check_state, check_tau
from .errors import InferenceError, InvalidParameterError
from .inference import condition, marginal
from .network import build_network
from .pedigree import Pedigree

logger = logging.getLogger(__name__)


def check_configuration(pedigree, configuration):
    """
    Valide et normalise une configuration {id: état}.

    Les états peuvent être fournis en texte ("0", "1").

    Raises
    ------
    InvalidParameterError
        Identifiant non génotypé/affecté, ou état hors {0, 1, 2}
    """
    checked = {}
    for ind_id, state in configuration.items():
        if ind_id not in pedigree.genotyped_affected:
            raise InvalidParameterError(
                f"Individu {ind_id} absent des affectés génotypés "
                f"{sorted(pedigree.genotyped_affected)}"
            )
        checked[ind_id] = check_state(ind_id, state)
    return checked


def founder_hypothesis_evidence(pedigree, founder):
    """Évidence E_i : `founder` hétérozygote, les autres fondateurs non porteurs."""
    return {f: (HET if f == founder else HOM_REF) for f in sorted(pedigree.founders)}


class TransmissionAnalysis:
    """Vraisemblance de tau pour un pedigree et une configuration fixés."""

    def __init__(self, pedigree, configuration, order=None):
        """
        Parameters
        ----------
        pedigree : Pedigree
        configuration : dict {individual_id: état observé}
            Restreint aux individus affectés et génotypés
        order : list, optional
            Ordre de conditionnement des individus de la configuration
            (défaut : identifiants triés)
        """
        if not isinstance(pedigree, Pedigree):
            pedigree = Pedigree.from_records(pedigree)
        self.ped = pedigree
        if not self.ped.founders:
            raise InvalidParameterError("Le pedigree ne contient aucun fondateur")
        self.configuration = check_configuration(pedigree, configuration)

        if order is None:
            self.order = sorted(self.configuration)
        else:
            self.order = list(order)
            if sorted(self.order) != sorted(self.configuration) or \
               len(set(self.order)) != len(self.order):
                raise InvalidParameterError(
                    f"L'ordre {self.order} n'est pas une permutation de "
                    f"{sorted(self.configuration)}"
                )

        self.founders = sorted(self.ped.founders)
        self._networks = {}

    # ------------------------------------------------------------------
    def network(self, tau):
        tau = check_tau(tau)
        net = self._networks.get(tau)
        if net is None:
            net = build_network(self.ped, tau)
            self._networks[tau] = net
        return net

    def _hypothesis_term(self, network, founder):
        """P(configuration | founder seul introducteur)."""
        snapshot = condition(network, founder_hypothesis_evidence(self.ped, founder))
        prod = 1.0
        for ind_id in self.order:
            state = self.configuration[ind_id]
            p = marginal(snapshot, ind_id)[state]
            prod *= p
            if prod == 0.0:
                logger.debug("tau=%s fondateur %s: P(%s=%s)=0",
                             network.tau, founder, ind_id, state)
                return 0.0
            try:
                snapshot = condition(snapshot, {ind_id: state})
            except InferenceError as e:
                logger.debug("tau=%s fondateur %s: %s", network.tau, founder, e)
                return 0.0
        return float(prod)

    # ==================================================================
    # PUBLIC API
    # ==================================================================
    def hypothesis_terms(self, tau):
        """Terme term_i pour chaque fondateur i."""
        network = self.network(tau)
        return {f: self._hypothesis_term(network, f) for f in self.founders}

    def likelihood(self, tau):
        """L(tau) = moyenne des termes sur les fondateurs (prior uniforme)."""
        terms = self.hypothesis_terms(tau)
        return float(sum(terms.values()) / len(terms))

    def sweep(self, taus=TAU_VALUES, progress=False):
        """
        Courbe de vraisemblance sur une grille de tau.

        Returns
        -------
        curve : list of (tau, likelihood)
        """
        taus = np.asarray(taus, dtype=np.float64)
        values = np.zeros(len(taus))
        for ti in tqdm(range(len(taus)), desc="      tau", leave=False,
                       disable=not progress):
            values[ti] = self.likelihood(taus[ti])
        return [(float(t), float(v)) for t, v in zip(taus, values)]

    def estimate_tau(self, taus=TAU_VALUES, curve=None):
        """
        Estimateur du maximum de vraisemblance de tau.

        Maximum sur la grille, puis affinage borné (scipy) entre les
        points voisins.

        Parameters
        ----------
        taus : array
            Grille de tau, ignorée si `curve` est fournie
        curve : list of (tau, likelihood), optional
            Courbe déjà calculée par `sweep`

        Returns
        -------
        (tau_hat, likelihood) ; (nan, 0.0) si la vraisemblance est nulle partout
        """
        if curve is None:
            curve = self.sweep(taus)
        grid = np.array([t for t, _ in curve])
        values = np.array([v for _, v in curve])
        if len(grid) == 0 or not np.any(values > 0):
            return float('nan'), 0.0

        best = int(np.argmax(values))
        lo = grid[max(best - 1, 0)]
        hi = grid[min(best + 1, len(grid) - 1)]
        if hi <= lo:
            return float(grid[best]), float(values[best])

        def neg_log_l(tau):
            lik = self.likelihood(tau)
            return -np.log(lik) if lik > 0 else np.inf

        res = minimize_scalar(neg_log_l, bounds=(lo, hi), method='bounded',
                              options={'xatol': 1e-6})
        if res.success and np.isfinite(res.fun) and np.exp(-res.fun) > values[best]:
            return float(res.x), float(np.exp(-res.fun))
        return float(grid[best]), float(values[best])


# ======================================================================
# Fonctions de commodité
# ======================================================================
def compute_hypothesis_terms(pedigree, tau, configuration, order=None):
    """Termes par fondateur, dict {founder_id: term}."""
    return TransmissionAnalysis(pedigree, configuration, order).hypothesis_terms(tau)


def compute_likelihood(pedigree, tau, configuration, order=None):
    """
    Vraisemblance de tau sachant la configuration observée.

    Raises
    ------
    InvalidParameterError
        tau hors de [0, 1], configuration invalide, aucun fondateur
    """
    tau = check_tau(tau)
    return TransmissionAnalysis(pedigree, configuration, order).likelihood(tau)


def sweep_likelihood(pedigree, taus, configuration, progress=False):
    """Liste ordonnée de (tau, vraisemblance) sur la grille `taus`."""
    return TransmissionAnalysis(pedigree, configuration).sweep(taus, progress=progress)


def estimate_tau(pedigree, configuration, taus=TAU_VALUES):
    """(tau_hat, vraisemblance maximale)."""
    return TransmissionAnalysis(pedigree, configuration).estimate_tau(taus)
