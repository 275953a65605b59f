"""Tests du chargement des fichiers."""

import pytest

from taulink.data_parser import (
    configuration_from_lists, load_all_data, parse_configuration, parse_pedigree,
)
from taulink.errors import InvalidParameterError, MalformedPedigreeError
from taulink.pedigree import Pedigree

PED_LINES = """\
# famille 1
F1 1 0 0 1 1 0
F1 2 0 0 2 1 0
F1 3 1 2 1 1 0
F1 4 0 0 2 1 0
F1 5 1 2 2 1 0
F1 6 0 0 1 1 0
F1 7 3 4 1 2 1
F1 8 6 5 1 2 1
F1 9 6 5 2 2 1
"""


def _write(path, text):
    path.write_text(text)
    return str(path)


class TestParsePedigree:
    def test_records(self, tmp_path):
        records = parse_pedigree(_write(tmp_path / "family.ped", PED_LINES))
        assert [r['id'] for r in records] == list(range(1, 10))
        assert records[0]['father_id'] is None
        assert records[6]['father_id'] == 3
        assert records[6]['affected'] is True
        assert records[6]['dna_available'] is True
        assert records[2]['dna_available'] is False

        ped = Pedigree.from_records(records)
        assert ped.founders == {1, 2, 4, 6}
        assert ped.genotyped_affected == {7, 8, 9}

    def test_dna_column_optional(self, tmp_path):
        path = _write(tmp_path / "family.ped", "F 1 0 0 1 2\nF 2 0 0 2 1\n")
        records = parse_pedigree(path)
        assert records[0]['dna_available'] is True
        assert records[0]['affected'] is True
        assert records[1]['affected'] is False

    def test_short_line(self, tmp_path):
        path = _write(tmp_path / "family.ped", "F 1 0 0 1\n")
        with pytest.raises(MalformedPedigreeError):
            parse_pedigree(path)

    def test_non_numeric(self, tmp_path):
        path = _write(tmp_path / "family.ped", "F A 0 0 1 1\n")
        with pytest.raises(MalformedPedigreeError):
            parse_pedigree(path)


class TestParseConfiguration:
    def test_configuration(self, tmp_path):
        path = _write(tmp_path / "config.tsv", "id\tstate\n7\t1\n8\t1\n9\t0\n")
        assert parse_configuration(path) == {7: "1", 8: "1", 9: "0"}

    def test_missing_columns(self, tmp_path):
        path = _write(tmp_path / "config.tsv", "ind\tcarrier\n7\t1\n")
        with pytest.raises(InvalidParameterError):
            parse_configuration(path)

    def test_duplicate(self, tmp_path):
        path = _write(tmp_path / "config.tsv", "id\tstate\n7\t1\n7\t0\n")
        with pytest.raises(InvalidParameterError):
            parse_configuration(path)

    def test_from_lists(self):
        assert configuration_from_lists([7, 8], [9]) == {7: 1, 8: 1, 9: 0}
        with pytest.raises(InvalidParameterError):
            configuration_from_lists([7], [7])


class TestLoadAllData:
    def test_load(self, tmp_path, capsys):
        ped = _write(tmp_path / "family.ped", PED_LINES)
        config = _write(tmp_path / "config.tsv", "id\tstate\n7\t1\n8\t1\n")
        data = load_all_data(ped, config, non_carriers=[9])
        assert len(data['pedigree']) == 9
        assert data['configuration'] == {7: "1", 8: "1", 9: 0}
        assert "2 porteurs" in capsys.readouterr().out

    def test_flag_contradicting_file(self, tmp_path):
        ped = _write(tmp_path / "family.ped", PED_LINES)
        config = _write(tmp_path / "config.tsv", "id\tstate\n7\t0\n8\t1\n")
        with pytest.raises(InvalidParameterError):
            load_all_data(ped, config, carriers=[7])
        with pytest.raises(InvalidParameterError):
            load_all_data(ped, config, non_carriers=[8])

    def test_flag_agreeing_with_file(self, tmp_path):
        ped = _write(tmp_path / "family.ped", PED_LINES)
        config = _write(tmp_path / "config.tsv", "id\tstate\n7\t1\n")
        data = load_all_data(ped, config, carriers=[7, 8])
        assert data['configuration'] == {7: 1, 8: 1}

    def test_family_selection(self, tmp_path):
        ped = _write(tmp_path / "family.ped", PED_LINES + "F2 1 0 0 1 2 1\n")
        data = load_all_data(ped, carriers=[1], family='F2')
        assert [r['id'] for r in data['pedigree']] == [1]


class TestMultiFamily:
    TWO_FAMILIES = PED_LINES + "F2 1 0 0 1 1 0\nF2 2 0 0 2 1 0\nF2 3 1 2 1 2 1\n"

    def test_rejected_without_family(self, tmp_path):
        path = _write(tmp_path / "family.ped", self.TWO_FAMILIES)
        with pytest.raises(MalformedPedigreeError, match="plusieurs familles"):
            parse_pedigree(path)

    def test_select_family(self, tmp_path):
        path = _write(tmp_path / "family.ped", self.TWO_FAMILIES)
        records = parse_pedigree(path, family='F2')
        assert [r['id'] for r in records] == [1, 2, 3]
        ped = Pedigree.from_records(records)
        assert ped.genotyped_affected == {3}
        assert len(parse_pedigree(path, family='F1')) == 9

    def test_unknown_family(self, tmp_path):
        path = _write(tmp_path / "family.ped", self.TWO_FAMILIES)
        with pytest.raises(MalformedPedigreeError):
            parse_pedigree(path, family='F3')
