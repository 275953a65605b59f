"""Tests de la structure du pedigree."""

import pytest

from taulink.errors import MalformedPedigreeError
from taulink.pedigree import Individual, Pedigree


class TestStructure:
    def test_founders(self, nine_member):
        assert nine_member.founders == {1, 2, 4, 6}
        assert nine_member.non_founders == {3, 5, 7, 8, 9}

    def test_get_parents(self, nine_member):
        assert nine_member.get_parents(3) == (1, 2)
        assert nine_member.get_parents(8) == (6, 5)
        assert nine_member.get_parents(1) is None

    def test_genotyped_affected(self, nine_member):
        assert nine_member.genotyped_affected == {7, 8, 9}
        assert nine_member.affected == {7, 8, 9}

    def test_affected_without_dna_is_not_genotyped(self):
        ped = Pedigree([
            Individual(1), Individual(2),
            Individual(3, 1, 2, affected=True, dna_available=False),
            Individual(4, 1, 2, affected=True, dna_available=True),
        ])
        assert ped.affected == {3, 4}
        assert ped.genotyped_affected == {4}

    def test_children_and_spouse(self, nine_member):
        assert sorted(nine_member.get_children(1)) == [3, 5]
        assert sorted(nine_member.get_children(5)) == [8, 9]
        assert nine_member.get_children(7) == []
        assert nine_member.get_spouse(3) == [4]
        assert nine_member.get_spouse(5) == [6]

    def test_nuclear_families(self, nine_member):
        couples = {(fam.father, fam.mother): sorted(fam.children)
                   for fam in nine_member.nuclear_families}
        assert couples == {(1, 2): [3, 5], (3, 4): [7], (6, 5): [8, 9]}
        assert sorted(nine_member.trios()) == [
            (3, 1, 2), (5, 1, 2), (7, 3, 4), (8, 6, 5), (9, 6, 5),
        ]

    def test_topological_order(self, nine_member):
        position = {ind: i for i, ind in enumerate(nine_member.topological_order)}
        assert len(position) == 9
        for child, father, mother in nine_member.trios():
            assert position[father] < position[child]
            assert position[mother] < position[child]

    def test_generation(self, nine_member):
        assert nine_member.get_generation(1) == 0
        assert nine_member.get_generation(3) == 1
        assert nine_member.get_generation(9) == 2
        assert nine_member.get_generation(4) == 0

    def test_zero_parent_means_founder(self):
        ped = Pedigree.from_records([
            {'id': 1, 'father_id': 0, 'mother_id': 0},
        ])
        assert ped.founders == {1}

    def test_status_field(self):
        ind = Individual.from_record({'id': 5, 'status': 2})
        assert ind.affected is True
        assert ind.dna_available is False

    def test_summary(self, nine_member, capsys):
        nine_member.summary()
        out = capsys.readouterr().out
        assert "9 individus" in out
        assert "Fondateurs: 4" in out


class TestValidation:
    def test_duplicate_id(self):
        with pytest.raises(MalformedPedigreeError, match="dupliqué"):
            Pedigree([Individual(1), Individual(2), Individual(1)])

    def test_missing_parent(self):
        with pytest.raises(MalformedPedigreeError, match="absent"):
            Pedigree([Individual(1), Individual(3, 1, 2)])

    def test_single_parent(self):
        with pytest.raises(MalformedPedigreeError, match="un seul parent"):
            Pedigree([Individual(1), Individual(3, father=1)])

    def test_same_father_and_mother(self):
        with pytest.raises(MalformedPedigreeError):
            Pedigree([Individual(1), Individual(3, 1, 1)])

    def test_cycle(self):
        with pytest.raises(MalformedPedigreeError, match="Cycle"):
            Pedigree([
                Individual(1, 2, 3),
                Individual(2, 1, 3),
                Individual(3),
            ])

    def test_self_parent(self):
        with pytest.raises(MalformedPedigreeError):
            Pedigree([Individual(1), Individual(2, 2, 1)])

    def test_zero_id(self):
        with pytest.raises(MalformedPedigreeError):
            Pedigree([Individual(0)])

    def test_from_records_missing_id(self):
        with pytest.raises(MalformedPedigreeError):
            Pedigree.from_records([{'father_id': None}])

    def test_from_records_not_a_mapping(self):
        with pytest.raises(MalformedPedigreeError):
            Pedigree.from_records([7])
