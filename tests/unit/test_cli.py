"""Tests for the pixcmp command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from conftest import EMPTY, GREEN, RED, YELLOW, solid_png

from pixcmp import codec
from pixcmp.buffer import PixelBuffer
from pixcmp.cli import main


class TestExitCodes:
    def test_identical_exit_0(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", RED)
        result = CliRunner().invoke(main, [str(a), str(b)])
        assert result.exit_code == 0
        assert f"match {b}" in result.output

    def test_differs_exit_1(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", GREEN)
        result = CliRunner().invoke(main, [str(a), str(b)])
        assert result.exit_code == 1
        assert "16/16 pixels (100.00%)" in result.output

    def test_size_mismatch_exit_2(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED, size=(4, 4))
        b = solid_png(tmp_path, "b.png", RED, size=(8, 8))
        result = CliRunner().invoke(main, [str(a), str(b)])
        assert result.exit_code == 2
        assert "error: image sizes are not the same" in result.output

    def test_invalid_image_exit_2(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        bad = tmp_path / "bad.png"
        bad.write_text("not an image")
        result = CliRunner().invoke(main, [str(a), str(bad)])
        assert result.exit_code == 2
        assert "error: test image:" in result.output

    def test_missing_file_is_usage_error(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        result = CliRunner().invoke(main, [str(a), str(tmp_path / "missing.png")])
        assert result.exit_code == 2

    def test_requires_test_argument(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        result = CliRunner().invoke(main, [str(a)])
        assert result.exit_code == 2


class TestMultipleTests:
    def test_any_diff_exit_1(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        same = solid_png(tmp_path, "same.png", RED)
        other = solid_png(tmp_path, "other.png", GREEN)
        result = CliRunner().invoke(main, [str(a), str(same), str(other)])
        assert result.exit_code == 1
        assert f"match {same}" in result.output
        assert f"diff {other}" in result.output

    def test_baseline_decoded_once(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[Any] = []
        real = codec.decode

        def _spy(source: Any) -> PixelBuffer:
            calls.append(source)
            return real(source)

        monkeypatch.setattr(codec, "decode", _spy)
        a = solid_png(tmp_path, "a.png", RED)
        tests = [solid_png(tmp_path, f"t{i}.png", RED) for i in range(3)]
        result = CliRunner().invoke(main, [str(a), *map(str, tests)])
        assert result.exit_code == 0
        assert calls.count(a) == 1
        assert len(calls) == 4


class TestOutput:
    def test_output_written(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", EMPTY)
        out = tmp_path / "diff.png"
        result = CliRunner().invoke(main, ["-o", str(out), str(a), str(b)])
        assert result.exit_code == 1
        assert codec.decode(out).pixel(0, 0) == RED
        assert f"diff image: {out}" in result.output

    def test_unsupported_output_exit_2(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", GREEN)
        out = tmp_path / "diff.gif"
        result = CliRunner().invoke(main, ["--output", str(out), str(a), str(b)])
        assert result.exit_code == 2
        assert "not supported" in result.output
        assert not out.exists()

    def test_output_with_many_tests_rejected(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", RED)
        result = CliRunner().invoke(main, ["-o", str(tmp_path / "d.png"), str(a), str(b), str(b)])
        assert result.exit_code == 2
        assert "--output-dir" in result.output

    def test_output_and_output_dir_exclusive(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        result = CliRunner().invoke(
            main,
            ["-o", str(tmp_path / "d.png"), "--output-dir", str(tmp_path / "o"), str(a), str(a)],
        )
        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_output_dir(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", GREEN)
        c = solid_png(tmp_path, "c.png", RED)
        out_dir = tmp_path / "diffs"
        result = CliRunner().invoke(main, ["--output-dir", str(out_dir), str(a), str(b), str(c)])
        assert result.exit_code == 1
        assert codec.decode(out_dir / "b.diff.png").pixel(0, 0) == YELLOW
        assert codec.decode(out_dir / "c.diff.png").pixel(0, 0) == RED


    def test_output_dir_same_stem_rejected(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        (tmp_path / "x").mkdir()
        (tmp_path / "y").mkdir()
        t1 = solid_png(tmp_path / "x", "t.png", GREEN)
        t2 = solid_png(tmp_path / "y", "t.png", RED)
        out_dir = tmp_path / "diffs"
        result = CliRunner().invoke(main, ["--output-dir", str(out_dir), str(a), str(t1), str(t2)])
        assert result.exit_code == 2
        assert "error: --output-dir would write t.diff.png more than once" in result.output
        assert not out_dir.exists()


class TestColors:
    def test_color_options(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", EMPTY)
        b = solid_png(tmp_path, "b.png", RED)
        out = tmp_path / "diff.png"
        result = CliRunner().invoke(
            main, ["--test-color", "1,2,3,255", "-o", str(out), str(a), str(b)]
        )
        assert result.exit_code == 1
        assert codec.decode(out).pixel(0, 0) == (1, 2, 3, 255)

    def test_color_from_env(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", EMPTY)
        out = tmp_path / "diff.png"
        result = CliRunner().invoke(
            main, ["-o", str(out), str(a), str(b)], env={"PIXCMP_BASE_COLOR": "7,8,9,255"}
        )
        assert result.exit_code == 1
        assert codec.decode(out).pixel(0, 0) == (7, 8, 9, 255)

    def test_bad_color(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        result = CliRunner().invoke(main, ["--base-color", "red", str(a), str(a)])
        assert result.exit_code == 2
        assert "R,G,B,A" in result.output


class TestJson:
    def test_json_single(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", RED)
        result = CliRunner().invoke(main, ["--json", str(a), str(b)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["identical"] is True
        assert data["diff_pixels"] == 0
        assert data["test"] == str(b)
        assert data["diff_image"] is None

    def test_json_many(self, tmp_path: Path) -> None:
        a = solid_png(tmp_path, "a.png", RED)
        b = solid_png(tmp_path, "b.png", GREEN)
        result = CliRunner().invoke(main, ["--json", str(a), str(a), str(b)])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert [d["identical"] for d in data] == [True, False]
        assert data[1]["diff_ratio"] == 100.0


class TestHelp:
    def test_help_exits_0(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "BASE" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "pixcmp" in result.output
