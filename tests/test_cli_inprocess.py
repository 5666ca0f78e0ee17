from __future__ import annotations

import sys
from pathlib import Path

import pytest

from blockclone import __version__, cli
from blockclone.registry import LinesUnavailable, ScoreRegistry
from tests._sources import ACCUMULATOR_A, ACCUMULATOR_B, NO_CLASS


def _write_pair(root: Path) -> tuple[Path, Path]:
    a = root / "a.py"
    b = root / "b.py"
    a.write_text(ACCUMULATOR_A, "utf-8")
    b.write_text(ACCUMULATOR_B, "utf-8")
    return a, b


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["blockclone", *args])
    cli.main()


def _run_exit(monkeypatch: pytest.MonkeyPatch, *args: str) -> int | str | None:
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, *args)
    return exc.value.code


def test_cli_reports_renamed_duplicates(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_pair(tmp_path)
    _run(monkeypatch, str(tmp_path), "--threshold", "100", "--no-color")
    out = capsys.readouterr().out
    assert "BlockClone" in out
    assert "Comparing 2 files" in out
    assert "Similar Blocks" in out
    assert "a.py:8-12 (method)" in out
    assert "b.py:5-9 (method)" in out
    assert "a.py:10-11 (for_loop)" in out
    assert "Analysis Summary" in out
    assert "Similar block pairs" in out
    assert "Done in" in out


def test_cli_quiet_prints_compact_summary(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    a, b = _write_pair(tmp_path)
    _run(monkeypatch, str(a), str(b), "--threshold", "100", "--quiet")
    out = capsys.readouterr().out
    assert "Analysis Summary" in out
    assert "found=2 analyzed=2 skipped=0 blocks=6 matches=3" in out
    assert "Similar Blocks" not in out
    assert "Done in" not in out


def test_cli_show_lines_prints_source(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_pair(tmp_path)
    _run(monkeypatch, str(tmp_path), "--threshold", "100", "--show-lines")
    out = capsys.readouterr().out
    assert "#1 score=100" in out
    assert "def total(self):" in out
    assert "def compute(self):" in out
    assert "acc += value * 2" in out


def test_cli_show_lines_unavailable(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_pair(tmp_path)

    def _gone(self: ScoreRegistry, score_id: int) -> LinesUnavailable:
        return LinesUnavailable(score_id=score_id, reason="file vanished")

    monkeypatch.setattr(ScoreRegistry, "get_similarity_score_lines", _gone)
    _run(monkeypatch, str(tmp_path), "--threshold", "100", "--show-lines")
    out = capsys.readouterr().out
    assert "Lines for score 0 unavailable: file vanished" in out


def test_cli_no_matches(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_pair(tmp_path)
    _run(
        monkeypatch,
        str(tmp_path),
        "--threshold",
        "100",
        "--no-normalize-names",
    )
    out = capsys.readouterr().out
    assert "No similar blocks at threshold 100." in out
    assert "Similar Blocks" not in out


def test_cli_same_kind_only(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_pair(tmp_path)
    _run(monkeypatch, str(tmp_path), "--threshold", "1", "--same-kind-only")
    out = capsys.readouterr().out
    assert "(method)" in out
    assert "a.py:8-12 (method)" in out
    assert "b.py:7-8 (for_loop)" in out
    # a method is never paired with a loop
    for line in out.splitlines():
        if "a.py:8-12 (method)" in line:
            assert "for_loop" not in line


def test_cli_warns_about_skipped_files(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_pair(tmp_path)
    (tmp_path / "helpers.py").write_text(NO_CLASS, "utf-8")
    _run(monkeypatch, str(tmp_path), "--quiet", "--threshold", "100")
    out = capsys.readouterr().out
    assert "No comparable blocks in" in out
    assert "helpers.py" in out
    assert "found=3 analyzed=2 skipped=1" in out


def test_cli_missing_path_is_contract_error(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    a, _ = _write_pair(tmp_path)
    code = _run_exit(monkeypatch, str(a), str(tmp_path / "missing"))
    assert code == 2
    out = capsys.readouterr().out
    assert "CONTRACT ERROR:" in out
    assert "Path does not exist" in out


def test_cli_single_file_is_contract_error(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    a, _ = _write_pair(tmp_path)
    code = _run_exit(monkeypatch, str(a), str(a))
    assert code == 2
    out = capsys.readouterr().out
    assert "At least two source files are required, found 1." in out


@pytest.mark.parametrize("threshold", ["-1", "101"])
def test_cli_invalid_threshold(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    threshold: str,
) -> None:
    _write_pair(tmp_path)
    code = _run_exit(monkeypatch, str(tmp_path), "--threshold", threshold)
    assert code == 2
    out = capsys.readouterr().out
    assert "Threshold must be between 0 and 100" in out
    assert "BlockClone v" not in out


def test_cli_internal_error_exit_code(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    _write_pair(tmp_path)

    def _boom(*_args: object, **_kwargs: object) -> object:
        raise RuntimeError("comparison exploded")

    monkeypatch.setattr(cli, "compare_all", _boom)
    code = _run_exit(monkeypatch, str(tmp_path))
    assert code == 5
    out = capsys.readouterr().out
    assert "INTERNAL ERROR:" in out
    assert "Reason: RuntimeError: comparison exploded" in out


def test_cli_version_flag(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    code = _run_exit(monkeypatch, "--version")
    assert code == 0
    out = capsys.readouterr().out
    assert f"BlockClone {__version__}" in out
    assert "Comparing" not in out


def test_cli_requires_paths(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    code = _run_exit(monkeypatch)
    assert code == 2
    assert "PATH" in capsys.readouterr().err
