"""Pedigrees partagés par les tests."""

import pytest

from taulink.config import MALE, FEMALE
from taulink.pedigree import Pedigree


def nine_member_records():
    """
    Pedigree à neuf membres :
      1 × 2 → 3, 5
      3 × 4 → 7
      5 × 6 → 8, 9
    7, 8, 9 affectés et génotypés.
    """
    def rec(i, father=None, mother=None, sex=MALE, affected=False, dna=False):
        return {'id': i, 'father_id': father, 'mother_id': mother, 'sex': sex,
                'affected': affected, 'dna_available': dna}

    return [
        rec(1, sex=MALE),
        rec(2, sex=FEMALE),
        rec(3, 1, 2, sex=MALE),
        rec(4, sex=FEMALE),
        rec(5, 1, 2, sex=FEMALE),
        rec(6, sex=MALE),
        rec(7, 3, 4, affected=True, dna=True),
        rec(8, 6, 5, affected=True, dna=True),
        rec(9, 6, 5, sex=FEMALE, affected=True, dna=True),
    ]


@pytest.fixture
def nine_member():
    return Pedigree.from_records(nine_member_records())


@pytest.fixture
def trio():
    """Un trio simple : 1 × 2 → 3 (affecté génotypé)."""
    return Pedigree.from_records([
        {'id': 1, 'sex': MALE},
        {'id': 2, 'sex': FEMALE},
        {'id': 3, 'father_id': 1, 'mother_id': 2, 'affected': True,
         'dna_available': True},
    ])
