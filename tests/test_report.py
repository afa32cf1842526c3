import pytest

from conftest import make_record
from wordle_bench.report import format_comparison, format_histogram, format_record, format_summaries
from wordle_bench.stats import compare


@pytest.mark.parametrize("width", [40, 80])
def test_histogram_fits_width(width):
    rec = make_record("Big", [3] * 500 + [4] * 120 + [None] * 7, words=[f"w{i:04d}" for i in range(627)])
    lines = format_histogram(rec.summary(), width=width).splitlines()
    assert len(lines) == 7
    assert all(len(line) <= width for line in lines)
    assert lines[2].startswith("3 |■") and lines[2].endswith("(500)")
    assert lines[-1].startswith("X |") and lines[-1].endswith("(7)")


def test_small_histogram_uses_one_mark_per_game():
    rec = make_record("Small", [2, 2, 3, None])
    lines = format_histogram(rec.summary()).splitlines()
    assert lines[1] == "2 |■■ (2)"
    assert lines[2] == "3 |■ (1)"
    assert lines[-1] == "X |■ (1)"


def test_format_record():
    text = format_record(make_record("Alpha", [3, 4, None, 2]), histogram=True)
    assert "Alpha v1.0.0" in text
    assert "Ran 4 words" in text
    assert "Guessed 3 correctly, or 75.0%, and 1 incorrectly" in text
    assert "Correct guesses took 3.00 attempts on average" in text
    assert "X |■ (1)" in text


def test_format_summaries_sorted_best_first():
    table = format_summaries([
        make_record("Slow", [5, 6, None]),
        make_record("Fast", [2, 3, 3]),
    ])
    lines = table.splitlines()
    assert lines[0].startswith("Strategy")
    assert lines[2].startswith("Fast")
    assert lines[3].startswith("Slow")


def test_format_comparison():
    result = compare(make_record("New", [2, 3] * 10), make_record("Old", [5, 6] * 10))
    text = format_comparison(result)
    assert "New vs Old" in text
    assert "Turn counts (failures ranked last): a sig. diff." in text
    assert "U=0.0" in text
    assert "Welch's t-test" in text

    same = compare(make_record("New", [3, 4] * 5), make_record("Old", [3, 4] * 5))
    assert "not a sig. diff." in format_comparison(same)
