"""
Gestion de la structure du pedigree.
Validation du graphe parent → enfant, identification des fondateurs
et décomposition en familles nucléaires (trios).
"""

from collections import defaultdict, deque

from .config import AFFECTED, UNKNOWN
from .errors import MalformedPedigreeError


class Individual:
    """Un membre du pedigree."""

    __slots__ = ('id', 'father', 'mother', 'sex', 'affected', 'dna_available')

    def __init__(self, ind_id, father=None, mother=None, sex=UNKNOWN,
                 affected=False, dna_available=False):
        self.id = ind_id
        # 0 et None signifient "parent non renseigné"
        self.father = father if father else None
        self.mother = mother if mother else None
        self.sex = sex
        self.affected = bool(affected)
        self.dna_available = bool(dna_available)

    @property
    def is_founder(self):
        return self.father is None and self.mother is None

    @classmethod
    def from_record(cls, record):
        """
        Construit un individu depuis un enregistrement dict.

        Clés attendues : 'id', 'father_id', 'mother_id', 'sex',
        'affected', 'dna_available'. Le statut peut aussi être fourni
        au format LINKAGE ('status' = 2 pour affecté).
        """
        if 'affected' in record:
            affected = record['affected']
        else:
            affected = record.get('status') == AFFECTED
        return cls(
            record['id'],
            father=record.get('father_id'),
            mother=record.get('mother_id'),
            sex=record.get('sex', UNKNOWN),
            affected=affected,
            dna_available=record.get('dna_available', False),
        )

    def __repr__(self):
        return (f"Individual({self.id}, father={self.father}, mother={self.mother}, "
                f"affected={self.affected}, dna={self.dna_available})")


class NuclearFamily:
    """Représente une famille nucléaire (père, mère, enfants)."""

    def __init__(self, father_id, mother_id, children_ids):
        self.father = father_id
        self.mother = mother_id
        self.children = list(children_ids)

    def trios(self):
        """Trios (enfant, père, mère) de la famille."""
        return [(child, self.father, self.mother) for child in self.children]

    def __repr__(self):
        return f"NuclearFamily({self.father} × {self.mother} → {self.children})"


class Pedigree:
    """
    Structure de pedigree validée : fondateurs, familles nucléaires,
    ordre topologique, individus génotypés et affectés.

    Le pedigree est en lecture seule après construction.
    """

    def __init__(self, individuals):
        """
        Parameters
        ----------
        individuals : iterable of Individual
            Membres du pedigree, dans l'ordre du fichier source

        Raises
        ------
        MalformedPedigreeError
            Identifiant dupliqué ou nul, parent inexistant, parent unique,
            père et mère identiques, ou cycle dans le graphe.
        """
        self.individuals = {}
        for ind in individuals:
            if not ind.id:
                raise MalformedPedigreeError(f"Identifiant invalide: {ind.id!r}")
            if ind.id in self.individuals:
                raise MalformedPedigreeError(f"Identifiant dupliqué: {ind.id}")
            self.individuals[ind.id] = ind
        self.ind_ids = list(self.individuals)

        self._check_parents()

        # Identifier fondateurs et non-fondateurs
        self.founders = {i for i, ind in self.individuals.items() if ind.is_founder}
        self.non_founders = set(self.individuals) - self.founders

        # Construire les familles nucléaires
        self.nuclear_families = self._build_nuclear_families()
        self._parent_in_families = defaultdict(list)  # ind -> familles où il est parent
        for i, fam in enumerate(self.nuclear_families):
            self._parent_in_families[fam.father].append(i)
            self._parent_in_families[fam.mother].append(i)

        self.topological_order = self._compute_topological_order()

        self.affected = {i for i, ind in self.individuals.items() if ind.affected}
        self.genotyped_affected = {i for i, ind in self.individuals.items()
                                   if ind.affected and ind.dna_available}

    @classmethod
    def from_records(cls, records):
        """Construit un pedigree depuis une liste d'enregistrements dict."""
        try:
            individuals = [Individual.from_record(r) for r in records]
        except (TypeError, KeyError, AttributeError) as e:
            raise MalformedPedigreeError(f"Enregistrements de pedigree illisibles: {e!r}") from e
        return cls(individuals)

    # ------------------------------------------------------------------
    def _check_parents(self):
        for ind in self.individuals.values():
            if ind.is_founder:
                continue
            if ind.father is None or ind.mother is None:
                raise MalformedPedigreeError(
                    f"Individu {ind.id}: un seul parent renseigné "
                    f"(père={ind.father}, mère={ind.mother})"
                )
            if ind.father == ind.mother:
                raise MalformedPedigreeError(
                    f"Individu {ind.id}: père et mère identiques ({ind.father})"
                )
            for parent in (ind.father, ind.mother):
                if parent not in self.individuals:
                    raise MalformedPedigreeError(
                        f"Individu {ind.id}: parent {parent} absent du pedigree"
                    )

    def _build_nuclear_families(self):
        """Construit les familles nucléaires à partir du pedigree."""
        # Grouper les enfants par couple parental
        couples = defaultdict(list)
        for ind_id, ind in self.individuals.items():
            if not ind.is_founder:
                couples[(ind.father, ind.mother)].append(ind_id)

        return [NuclearFamily(father, mother, children)
                for (father, mother), children in couples.items()]

    def _compute_topological_order(self):
        """
        Parcours de Kahn : parents avant enfants.
        Un individu jamais atteint fait partie d'un cycle.
        """
        n_parents = {i: (0 if ind.is_founder else 2)
                     for i, ind in self.individuals.items()}
        children = defaultdict(list)
        for ind in self.individuals.values():
            if not ind.is_founder:
                children[ind.father].append(ind.id)
                children[ind.mother].append(ind.id)

        queue = deque(i for i in self.ind_ids if n_parents[i] == 0)
        order = []
        while queue:
            ind_id = queue.popleft()
            order.append(ind_id)
            for child in children[ind_id]:
                n_parents[child] -= 1
                if n_parents[child] == 0:
                    queue.append(child)

        if len(order) < len(self.individuals):
            stuck = sorted(set(self.individuals) - set(order))
            raise MalformedPedigreeError(f"Cycle détecté dans le pedigree: {stuck}")
        return order

    # ------------------------------------------------------------------
    def __len__(self):
        return len(self.individuals)

    def __contains__(self, ind_id):
        return ind_id in self.individuals

    def trios(self):
        """Tous les trios (enfant, père, mère) du pedigree."""
        return [trio for fam in self.nuclear_families for trio in fam.trios()]

    def get_children(self, ind_id):
        """Retourne les enfants d'un individu."""
        children = []
        for fam_idx in self._parent_in_families.get(ind_id, []):
            children.extend(self.nuclear_families[fam_idx].children)
        return children

    def get_spouse(self, ind_id):
        """Retourne le(s) conjoint(s) d'un individu."""
        spouses = []
        for fam_idx in self._parent_in_families.get(ind_id, []):
            fam = self.nuclear_families[fam_idx]
            spouses.append(fam.mother if fam.father == ind_id else fam.father)
        return spouses

    def get_parents(self, ind_id):
        """Retourne (father_id, mother_id), ou None pour un fondateur."""
        ind = self.individuals[ind_id]
        if ind.is_founder:
            return None
        return ind.father, ind.mother

    def is_founder(self, ind_id):
        return ind_id in self.founders

    def get_generation(self, ind_id, _cache=None):
        """Calcule la génération d'un individu (0 pour fondateurs)."""
        if _cache is None:
            _cache = {}
        if ind_id in _cache:
            return _cache[ind_id]
        if self.is_founder(ind_id):
            _cache[ind_id] = 0
            return 0
        father, mother = self.get_parents(ind_id)
        gen = max(self.get_generation(father, _cache),
                  self.get_generation(mother, _cache)) + 1
        _cache[ind_id] = gen
        return gen

    def summary(self):
        """Affiche un résumé du pedigree."""
        print(f"Pedigree: {len(self.individuals)} individus")
        print(f"  Fondateurs: {len(self.founders)} ({sorted(self.founders)})")
        print(f"  Non-fondateurs: {len(self.non_founders)}")
        print(f"  Affectés: {len(self.affected)} ({sorted(self.affected)})")
        print(f"  Affectés génotypés: {len(self.genotyped_affected)} "
              f"({sorted(self.genotyped_affected)})")
        print(f"  Familles nucléaires: {len(self.nuclear_families)}")
        for i, fam in enumerate(self.nuclear_families):
            print(f"    [{i}] {fam}")
