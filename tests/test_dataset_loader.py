import pytest

from basicnn.dataset_loader import load_data, load_queries, parse_samples
from basicnn.dataset_loader import Data


def test_load_data_reference_samples() -> None:
    data = load_data()
    assert [list(d.variables) for d in data] == [
        [-2.0, -1.0], [25.0, 6.0], [17.0, 4.0], [-15.0, -6.0]]
    assert [d.output for d in data] == [1.0, 0.0, 0.0, 1.0]


def test_load_queries() -> None:
    queries = load_queries()
    assert list(queries) == ["emily", "frank"]
    assert list(queries["emily"].variables) == [-7.0, -3.0]
    assert list(queries["frank"].variables) == [20.0, 2.0]


def test_parse_samples_skips_comments_and_blanks() -> None:
    text = "# x1, x2, label\n\n-2, -1, 1\n 25 , 6 , 0 \n"
    assert parse_samples(text) == [Data([-2.0, -1.0], 1.0), Data([25.0, 6.0], 0.0)]


def test_parse_samples_rejects_mixed_widths() -> None:
    with pytest.raises(ValueError, match="line 2"):
        parse_samples("1, 2, 0\n1, 2, 3, 1\n")


def test_parse_samples_rejects_non_numeric() -> None:
    with pytest.raises(ValueError, match="line 1: non-numeric"):
        parse_samples("a, 2, 0\n")


def test_parse_samples_requires_label() -> None:
    with pytest.raises(ValueError, match="line 1"):
        parse_samples("3.0\n")


def test_parse_samples_empty() -> None:
    assert parse_samples("") == []
