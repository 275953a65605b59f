"""
Exceptions levées par TauLink.
"""


class TauLinkError(Exception):
    """Classe de base de toutes les erreurs TauLink."""


class MalformedPedigreeError(TauLinkError, ValueError):
    """Pedigree invalide : doublon, parent inconnu, parent unique, cycle."""


class InvalidParameterError(TauLinkError, ValueError):
    """Paramètre hors domaine : tau, configuration, individu inconnu."""


class InferenceError(TauLinkError, ArithmeticError):
    """Conditionnement sur un état de probabilité nulle."""
