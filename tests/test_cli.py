import json

import pytest

from conftest import WORDS
from wordle_bench.cli import build_parser, config_from_args, main
from wordle_bench.config import ExecutionMode, WordSelection


@pytest.fixture
def answers(tmp_path):
    path = tmp_path / "answers.txt"
    path.write_text("\n".join(WORDS) + "\n", encoding="utf-8")
    return path


def test_config_from_flags():
    args = build_parser().parse_args([
        "--answers", "a.txt", "--num-words", "10", "--random", "--seed", "7",
        "--parallel", "--workers", "2", "--thread-pool", "--max-turns", "8", "--alpha", "0.01",
    ])
    cfg = config_from_args(args)
    assert cfg.words_to_test == WordSelection.random(10, 7)
    assert cfg.seed == 7
    assert cfg.execution_mode is ExecutionMode.PARALLEL
    assert cfg.max_workers == 2
    assert cfg.pool == "thread"
    assert cfg.max_turns == 8
    assert cfg.significance_threshold == 0.01


def test_flags_override_config_file(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"max_turns": 4, "words_to_test": {"first": 3}}))
    args = build_parser().parse_args(["--answers", "a.txt", "--config", str(path), "--max-turns", "5"])
    cfg = config_from_args(args)
    assert cfg.max_turns == 5
    assert cfg.words_to_test == WordSelection.first(3)


def test_save_then_compare(tmp_path, answers, capsys):
    base_dir = tmp_path / "baselines"
    common = ["--answers", str(answers), "--strategy", "FirstCandidate",
              "--baseline-dir", str(base_dir)]

    assert main(common + ["--save-baseline", "v1"]) == 0
    assert (base_dir / "FirstCandidate@v1.json").is_file()

    # Saving again without --force fails.
    assert main(common + ["--save-baseline", "v1"]) == 1
    assert "already exists" in capsys.readouterr().err

    out_json = tmp_path / "out" / "run.json"
    assert main(common + ["--compare", "v1", "--histogram", "--json", str(out_json)]) == 0
    out = capsys.readouterr().out
    assert "FirstCandidate vs FirstCandidate" in out
    assert "not a sig. diff." in out

    data = json.loads(out_json.read_text(encoding="utf-8"))
    assert data["records"][0]["strategy"]["name"] == "FirstCandidate"
    assert data["comparisons"]["FirstCandidate"]["p_value"] == pytest.approx(1.0)
    assert data["config"]["execution_mode"] == "serial"


def test_compare_against_another_strategy(tmp_path, answers, capsys):
    base_dir = tmp_path / "baselines"
    common = ["--answers", str(answers), "--baseline-dir", str(base_dir)]
    assert main(common + ["--strategy", "FirstCandidate", "--save-baseline", "v1"]) == 0
    capsys.readouterr()
    assert main(common + ["--strategy", "SlateOpener", "--compare", "v1",
                          "--against", "FirstCandidate"]) == 0
    assert "SlateOpener vs FirstCandidate" in capsys.readouterr().out


def test_missing_baseline(tmp_path, answers, capsys):
    code = main(["--answers", str(answers), "--strategy", "FirstCandidate",
                 "--baseline-dir", str(tmp_path), "--compare", "nope"])
    assert code == 1
    assert "--save-baseline" in capsys.readouterr().err


def test_corpus_tag_defaults_to_file_stem(tmp_path, answers):
    main(["--answers", str(answers), "--strategy", "FirstCandidate", "--num-words", "4",
          "--baseline-dir", str(tmp_path / "b"), "--save-baseline", "v1"])
    data = json.loads((tmp_path / "b" / "FirstCandidate@v1.json").read_text(encoding="utf-8"))
    assert data["corpus"]["tag"] == "answers"
    assert data["corpus"]["words"] == WORDS[:4]
    assert data["baseline"]["tag"] == "v1"


def test_unknown_strategy(answers, capsys):
    assert main(["--answers", str(answers), "--strategy", "NoSuchThing"]) == 1
    assert "NoSuchThing" in capsys.readouterr().err


def test_missing_answer_file(tmp_path, capsys):
    assert main(["--answers", str(tmp_path / "missing.txt")]) == 1
    assert "not found" in capsys.readouterr().err
