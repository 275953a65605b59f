"""
Configuration du modèle de transmission d'un variant rare.
"""

import numpy as np

from .errors import InvalidParameterError

# ============================================================
# Encodage des génotypes
# Génotype = nombre de copies du variant rare porté (0, 1, 2)
# ============================================================

N_GENOTYPES = 3

HOM_REF = 0   # non porteur
HET = 1       # porteur hétérozygote
HOM_ALT = 2   # porteur homozygote

GENOTYPE_STATES = (HOM_REF, HET, HOM_ALT)

# Sexe
MALE = 1
FEMALE = 2

# Statut phénotypique
UNAFFECTED = 1
AFFECTED = 2
UNKNOWN = 0

PROBABILITY_TOLERANCE = 1e-9


def check_tau(tau):
    """Vérifie que tau est un réel de [0, 1] et le retourne en float."""
    try:
        value = float(tau)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"tau doit être un réel, reçu {tau!r}")
    if not 0.0 <= value <= 1.0:
        raise InvalidParameterError(f"tau doit être dans [0, 1], reçu {value}")
    return value


def check_state(ind_id, state):
    """Vérifie qu'un état observé est un génotype (0, 1, 2), éventuellement en texte."""
    if isinstance(state, (bool, np.bool_)):
        raise InvalidParameterError(f"Individu {ind_id}: état invalide {state!r}")
    try:
        value = int(state)
        exact = value == float(state)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"Individu {ind_id}: état invalide {state!r}")
    if not exact or value not in GENOTYPE_STATES:
        raise InvalidParameterError(f"Individu {ind_id}: état invalide {state!r}")
    return value


class TransmissionModel:
    """Modèle de transmission parent → enfant paramétré par tau."""

    def __init__(self, tau):
        """
        Parameters
        ----------
        tau : float
            Probabilité qu'un parent hétérozygote transmette le variant
        """
        self.tau = check_tau(tau)
        # transmit(g) pour g = 0, 1, 2
        self.transmit_probs = np.array([0.0, self.tau, 1.0])

    def transmit(self, genotype):
        """Probabilité qu'un parent de génotype `genotype` transmette le variant."""
        return self.transmit_probs[genotype]

    def child_distribution(self, father_geno, mother_geno):
        """
        Distribution du génotype de l'enfant sachant ceux des parents.

        Returns
        -------
        dist : array (3,)
            [P(0 | f, m), P(1 | f, m), P(2 | f, m)]
        """
        tf = self.transmit(father_geno)
        tm = self.transmit(mother_geno)
        return np.array([
            (1.0 - tf) * (1.0 - tm),
            tf * (1.0 - tm) + (1.0 - tf) * tm,
            tf * tm,
        ])

    def transmission_table(self):
        """
        Table complète P(enfant | père, mère).

        Returns
        -------
        trans : array (3, 3, 3)
            trans[g_enfant, g_pere, g_mere]
        """
        # Chaque parent transmet un allèle indépendamment :
        # on construit la loi de l'allèle transmis, puis on convole.
        t = self.transmit_probs
        allele = np.stack([1.0 - t, t])          # allele[a, g] = P(a | g)
        trans = np.zeros((N_GENOTYPES, N_GENOTYPES, N_GENOTYPES))
        for a_pat in (0, 1):
            for a_mat in (0, 1):
                trans[a_pat + a_mat] += np.outer(allele[a_pat], allele[a_mat])
        return trans

    def founder_prior(self):
        return founder_genotype_prior()

    def __repr__(self):
        return f"TransmissionModel(tau={self.tau})"


def founder_genotype_prior():
    """
    Prior uniforme sur les génotypes d'un fondateur (3,).
    Toujours remplacé par une évidence ferme lors du calcul de vraisemblance,
    mais non nul partout pour que le conditionnement reste défini.
    """
    return np.full(N_GENOTYPES, 1.0 / N_GENOTYPES)


def compute_transmission_table(tau):
    """
    Table de transmission parent → enfant.

    trans[g_enfant, g_pere, g_mere] = probabilité
    """
    return TransmissionModel(tau).transmission_table()


# Valeurs de tau pour la courbe de vraisemblance
TAU_VALUES = np.round(np.linspace(0.0, 1.0, 21), 2)
