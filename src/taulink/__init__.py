"""
TauLink — Vraisemblance de la probabilité de transmission d'un variant rare
===========================================================================

Estimation de la vraisemblance de τ (probabilité qu'un parent hétérozygote
transmette le variant) dans un pedigree étendu, sachant le statut porteur
des affectés génotypés, sous l'hypothèse d'un seul fondateur introducteur.

Modules:
    config: Modèle de transmission et constantes
    pedigree: Validation et structure du pedigree
    network: Construction du réseau de CPT pour un τ donné
    inference: Inférence exacte (conditionnement, marginales, lois jointes)
    likelihood_engine: Vraisemblance sur les hypothèses fondateur
    data_parser: Chargement du pedigree et de la configuration
    visualizations: Courbe de vraisemblance et tableau de résultats
"""

__version__ = "1.0.0"

from .errors import (
    TauLinkError, MalformedPedigreeError, InvalidParameterError, InferenceError,
)
from .config import TransmissionModel, compute_transmission_table
from .pedigree import Individual, Pedigree
from .network import Network, build_network
from .inference import condition, marginal, joint, probability_of_evidence
from .likelihood_engine import (
    TransmissionAnalysis, compute_likelihood, compute_hypothesis_terms,
    sweep_likelihood, estimate_tau,
)

__all__ = [
    "TauLinkError",
    "MalformedPedigreeError",
    "InvalidParameterError",
    "InferenceError",
    "TransmissionModel",
    "compute_transmission_table",
    "Individual",
    "Pedigree",
    "Network",
    "build_network",
    "condition",
    "marginal",
    "joint",
    "probability_of_evidence",
    "TransmissionAnalysis",
    "compute_likelihood",
    "compute_hypothesis_terms",
    "sweep_likelihood",
    "estimate_tau",
]
