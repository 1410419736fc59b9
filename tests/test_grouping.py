from backend.grouping import partition, resolve_grouping_column
from backend.models import make_row
from configurations.config import DEFAULT_GROUPING_COLUMNS


def rows_for(column, values):
    return [make_row({column: v, "id": str(i)}) for i, v in enumerate(values)]


def test_resolve_picks_first_candidate_in_priority_order():
    row = make_row({"Nome da empresa:": "x", "Nome do restaurante:": "y"})
    assert resolve_grouping_column([row], DEFAULT_GROUPING_COLUMNS) == "Nome do restaurante:"


def test_resolve_only_checks_first_row():
    rows = [make_row({"other": "1"}), make_row({"Nome da operadora:": "A"})]
    assert resolve_grouping_column(rows, DEFAULT_GROUPING_COLUMNS) is None


def test_resolve_counts_present_but_empty_column():
    rows = [make_row({"Nome da operadora:": ""})]
    assert resolve_grouping_column(rows, DEFAULT_GROUPING_COLUMNS) == "Nome da operadora:"


def test_resolve_empty_rows():
    assert resolve_grouping_column([], DEFAULT_GROUPING_COLUMNS) is None


def test_partition_keeps_first_seen_order():
    groups = partition(rows_for("k", ["A", "B", "A"]), "k")
    assert [g.key for g in groups] == ["A", "B"]
    assert [r["id"] for r in groups[0].rows] == ["0", "2"]
    assert [r["id"] for r in groups[1].rows] == ["1"]


def test_partition_trims_keys_without_case_folding():
    groups = partition(rows_for("k", [" A ", "A", "a"]), "k")
    assert [(g.key, len(g.rows)) for g in groups] == [("A", 2), ("a", 1)]


def test_partition_drops_rows_without_value():
    rows = rows_for("k", ["A", "  ", "", "B"]) + [make_row({"id": "9"})]
    groups = partition(rows, "k")
    assert sum(len(g.rows) for g in groups) == len(rows) - 3
    for g in groups:
        assert all(r["k"].strip() == g.key for r in g.rows)


def test_partition_places_each_row_once():
    rows = rows_for("k", ["C", "A", "C", "B", "A", "C"])
    groups = partition(rows, "k")
    seen = [r["id"] for g in groups for r in g.rows]
    assert sorted(seen) == sorted(r["id"] for r in rows)
    assert len(seen) == len(set(seen))
