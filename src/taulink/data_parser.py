"""
Parseur des fichiers d'entrée : pedigree et configuration observée.
"""

import pandas as pd

from .config import AFFECTED
from .errors import MalformedPedigreeError, InvalidParameterError


def parse_pedigree(filepath, family=None):
    """
    Parse le fichier pedigree (format LINKAGE / Merlin .ped).

    Format: FamilyID IndividualID FatherID MotherID Sex Affection [DNA]
    Séparateur espace ou tabulation, pas de header.
    Affection = 2 pour affecté ; DNA = 1 si l'ADN est disponible
    (colonne optionnelle, disponible par défaut).
    Un fichier contenant plusieurs familles doit préciser `family`.

    Parameters
    ----------
    filepath : str
    family : str, optional
        Identifiant de la famille à retenir

    Returns
    -------
    records : list of dict
        Clés 'family', 'id', 'father_id', 'mother_id', 'sex',
        'affected', 'dna_available', dans l'ordre du fichier
    """
    records = []
    with open(filepath) as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            parts = line.split()
            if len(parts) < 6:
                raise MalformedPedigreeError(
                    f"{filepath}:{line_no}: 6 colonnes attendues, {len(parts)} trouvées"
                )
            try:
                ind_id = int(parts[1])
                father_id = int(parts[2])
                mother_id = int(parts[3])
                sex = int(parts[4])
                status = int(parts[5])
                dna = int(parts[6]) if len(parts) > 6 else 1
            except ValueError as e:
                raise MalformedPedigreeError(f"{filepath}:{line_no}: {e}") from e

            records.append({
                'family': parts[0],
                'id': ind_id,
                'father_id': father_id if father_id != 0 else None,
                'mother_id': mother_id if mother_id != 0 else None,
                'sex': sex,
                'affected': status == AFFECTED,
                'dna_available': dna == 1,
            })

    families = sorted({r['family'] for r in records})
    if family is not None:
        records = [r for r in records if r['family'] == family]
        if not records:
            raise MalformedPedigreeError(
                f"{filepath}: famille {family!r} absente (familles: {families})"
            )
    elif len(families) > 1:
        raise MalformedPedigreeError(
            f"{filepath}: plusieurs familles {families}, préciser la famille à analyser"
        )
    return records


def parse_configuration(filepath):
    """
    Parse le fichier de configuration observée.

    Format: colonnes 'id' et 'state' (tab-separated, avec header).
    state = 1 porteur, 0 non porteur.

    Returns
    -------
    configuration : dict {individual_id: état}
    """
    df = pd.read_csv(filepath, sep='\t', dtype=str)
    df.columns = [c.strip().lower() for c in df.columns]
    if 'id' not in df.columns or 'state' not in df.columns:
        raise InvalidParameterError(
            f"{filepath}: colonnes 'id' et 'state' attendues, trouvé {list(df.columns)}"
        )
    configuration = {}
    for ind_id, state in zip(df['id'], df['state']):
        try:
            ind_id = int(ind_id)
        except ValueError:
            raise InvalidParameterError(f"{filepath}: identifiant invalide {ind_id!r}")
        if ind_id in configuration:
            raise InvalidParameterError(f"{filepath}: individu {ind_id} dupliqué")
        configuration[ind_id] = str(state).strip()
    return configuration


def configuration_from_lists(carriers=None, non_carriers=None):
    """Configuration à partir de listes d'identifiants porteurs / non porteurs."""
    carriers = list(carriers or [])
    non_carriers = list(non_carriers or [])
    both = set(carriers) & set(non_carriers)
    if both:
        raise InvalidParameterError(
            f"Individus à la fois porteurs et non porteurs: {sorted(both)}"
        )
    configuration = {ind_id: 1 for ind_id in carriers}
    configuration.update({ind_id: 0 for ind_id in non_carriers})
    return configuration


def load_all_data(ped_file, config_file=None, carriers=None, non_carriers=None,
                  family=None):
    """
    Charge le pedigree et la configuration observée.

    Les listes carriers / non_carriers complètent le fichier de configuration ;
    un état contradictoire avec le fichier lève InvalidParameterError.

    Returns
    -------
    data : dict avec les clés:
        'pedigree': list des enregistrements
        'configuration': dict {id: état}
    """
    print("=" * 60)
    print("CHARGEMENT DES DONNÉES")
    print("=" * 60)

    print("\n[1/2] Lecture du pedigree...")
    records = parse_pedigree(ped_file, family=family)
    print(f"  {len(records)} individus chargés")

    print("\n[2/2] Lecture de la configuration...")
    if config_file is not None:
        configuration = parse_configuration(config_file)
        if carriers or non_carriers:
            flags = configuration_from_lists(carriers, non_carriers)
            conflicts = sorted(i for i, state in flags.items()
                               if i in configuration and str(configuration[i]) != str(state))
            if conflicts:
                raise InvalidParameterError(
                    f"États contradictoires entre {config_file} et la ligne de commande: "
                    f"{conflicts}"
                )
            configuration.update(flags)
    else:
        configuration = configuration_from_lists(carriers, non_carriers)
    n_carriers = sum(1 for s in configuration.values() if str(s) in ("1", "2"))
    print(f"  {len(configuration)} individus observés "
          f"({n_carriers} porteurs, {len(configuration) - n_carriers} non porteurs)")

    return {
        'pedigree': records,
        'configuration': configuration,
    }
