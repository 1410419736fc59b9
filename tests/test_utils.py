import pytest

from backend.utils import sanitize_filename, unique_filename


@pytest.mark.parametrize("name, expected", [
    ("A", "A.csv"),
    ("Operadora Alfa", "Operadora_Alfa.csv"),
    ("Café & Cia!", "Caf_Cia.csv"),
    ("Rede   Norte\tSul", "Rede_Norte_Sul.csv"),
    ("Grupo-X 2024", "Grupo-X_2024.csv"),
    ("a/b\\c:d", "abcd.csv"),
    ("!!!", ".csv"),
])
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected


def test_sanitize_filename_is_idempotent_on_clean_bases():
    # bases with only letters, digits and hyphens survive a second pass
    for name in ["Operadora-Alfa", "Grupo2024", "Caf"]:
        once = sanitize_filename(name)
        assert sanitize_filename(once[: -len(".csv")]) == once


def test_sanitize_filename_strips_underscores_it_produced():
    # "_" is outside the kept character class, so a second pass joins the words
    assert sanitize_filename("Café & Cia!") == "Caf_Cia.csv"
    assert sanitize_filename("Caf_Cia") == "CafCia.csv"


def test_unique_filename_adds_numeric_suffix():
    taken = set()
    assert unique_filename("A.csv", taken) == "A.csv"
    assert unique_filename("A.csv", taken) == "A_2.csv"
    assert unique_filename("A.csv", taken) == "A_3.csv"
    assert taken == {"A.csv", "A_2.csv", "A_3.csv"}


def test_unique_filename_skips_names_already_used():
    taken = {"A.csv", "A_2.csv"}
    assert unique_filename("A.csv", taken) == "A_3.csv"
