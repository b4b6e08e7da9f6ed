import pytest

from markov_model import CharObservation, FrequencyTable


def make_table(chars):
    table = FrequencyTable()
    for c in chars:
        table.update(c)
    return table


def test_update_keeps_first_seen_order():
    table = make_table("cabcc")
    assert [e.character for e in table] == ["c", "a", "b"]
    assert [e.count for e in table] == [3, 1, 1]
    assert table.total_count == 5
    assert len(table) == 3


def test_probabilities_are_zero_until_computed():
    table = make_table("xy")
    assert all(e.p == 0.0 and e.cp == 0.0 for e in table)


def test_compute_probabilities_running_sum():
    table = make_table("aab")
    table.compute_probabilities()
    a, b = list(table)
    assert a.p == pytest.approx(2 / 3)
    assert a.cp == pytest.approx(2 / 3)
    assert b.p == pytest.approx(1 / 3)
    assert b.cp == pytest.approx(1.0)


def test_compute_probabilities_on_empty_table():
    table = FrequencyTable()
    table.compute_probabilities()
    assert len(table) == 0
    assert table.sample(0.5) is None


def test_sample_scans_in_insertion_order():
    table = make_table("ab")
    table.compute_probabilities()
    assert table.sample(0.0) == "a"
    assert table.sample(0.5) == "a"
    assert table.sample(0.50001) == "b"
    assert table.sample(0.999) == "b"


def test_sample_without_probabilities_returns_none():
    table = make_table("ab")
    assert table.sample(0.3) is None


def test_get_and_str():
    table = make_table("a")
    table.compute_probabilities()
    assert table.get("a") == CharObservation("a", 1, 1.0, 1.0)
    assert table.get("z") is None
    assert str(table) == "(a 1 1.0 1.0)"


@pytest.mark.parametrize("counts", [(1, 4, 1, 1), (2, 3, 1, 1), (3, 2, 1, 1)])
def test_last_cp_covers_every_draw(counts):
    table = FrequencyTable()
    for character, count in zip("abcd", counts):
        for _ in range(count):
            table.update(character)
    table.compute_probabilities()
    assert list(table)[-1].cp == 1.0
    assert table.sample(1 - 2 ** -53) == "d"
