"""Tests for the command line interface."""

import json
from pathlib import Path
from typing import Any

from typer.testing import CliRunner

from glyphcompose import __version__
from glyphcompose.cli.app import app
from glyphcompose.io import ProjectReader

runner = CliRunner()

KA = 0x0915
M1 = 0xE100

# Canvas baseline of a project without metrics
BASELINE_Y = 700


def square(x0: float, y0: float, x1: float, y1: float) -> dict[str, Any]:
    """A square given in font units, stored on the tool's y-down canvas."""
    corners = [(x0, y0), (x1, y0), (x1, y1), (x0, y1)]
    return {
        "paths": [
            {
                "type": "outline",
                "points": [],
                "segmentGroups": [
                    [{"point": {"x": x, "y": BASELINE_Y - y}} for x, y in corners]
                ],
            }
        ]
    }


def project_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": "Demo",
        "glyphs": [[KA, square(0, 0, 500, 700)], [M1, square(0, 0, 100, 100)]],
        "characterSets": [
            {
                "nameKey": "main",
                "characters": [
                    {"name": "ka", "unicode": KA},
                    {"name": "m1", "unicode": M1},
                    {"name": "ka_m1", "unicode": 0xE200, "position": ["ka", "m1"]},
                    {"name": "ka_ka", "unicode": 0xE300, "kern": ["ka", "ka"]},
                ],
            }
        ],
        "fontRules": {
            "dev2": {"akhn": {"liga": {"k_ssa": "ka,virama,ssa"}}},
            "groups": {"marks": ["m1"]},
        },
        "positioningRules": [{"base": ["ka"], "mark": ["@marks"]}],
    }
    data.update(overrides)
    return data


def write_project(tmp_path: Path, **overrides: Any) -> Path:
    path = tmp_path / "demo.json"
    path.write_text(json.dumps(project_data(**overrides)), encoding="utf-8")
    return path


class TestGeneral:
    """Tests for app-level options and errors."""

    def test_version(self) -> None:
        """Test --version prints the version and exits."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_project(self, tmp_path: Path) -> None:
        """Test a missing project file is an error exit."""
        result = runner.invoke(app, ["info", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_project(self, tmp_path: Path) -> None:
        """Test a broken project file is an error exit."""
        path = tmp_path / "broken.json"
        path.write_text("[", encoding="utf-8")
        result = runner.invoke(app, ["info", str(path)])
        assert result.exit_code == 1
        assert "Could not load project" in result.output


class TestInfo:
    """Tests for the info command."""

    def test_summary(self, tmp_path: Path) -> None:
        """Test the project summary is printed."""
        result = runner.invoke(app, ["info", str(write_project(tmp_path))])
        assert result.exit_code == 0
        assert "Demo" in result.output
        assert "Summary" in result.output
        assert "Position pairs" in result.output


class TestExpand:
    """Tests for the expand command."""

    def test_expand_group(self, tmp_path: Path) -> None:
        """Test class references are expanded."""
        result = runner.invoke(app, ["expand", str(write_project(tmp_path)), "@marks", "ka"])
        assert result.exit_code == 0
        assert "2 glyphs" in result.output
        assert "m1, ka" in result.output


class TestMatch:
    """Tests for the match command."""

    def test_matched_pair(self, tmp_path: Path) -> None:
        """Test rule, anchor and default offset are shown."""
        result = runner.invoke(app, ["match", str(write_project(tmp_path)), "ka", "m1"])
        assert result.exit_code == 0
        assert "Rule #0" in result.output
        assert "geometric default" in result.output
        assert "Default offset: (200, 700)" in result.output

    def test_unmatched_pair(self, tmp_path: Path) -> None:
        """Test a pair no rule covers is reported."""
        result = runner.invoke(app, ["match", str(write_project(tmp_path)), "m1", "ka"])
        assert result.exit_code == 0
        assert "No positioning rule covers" in result.output

    def test_unknown_glyph(self, tmp_path: Path) -> None:
        """Test unknown glyph names are an error exit."""
        result = runner.invoke(app, ["match", str(write_project(tmp_path)), "nope"])
        assert result.exit_code == 1
        assert "nope" in result.output


class TestAcceptAll:
    """Tests for the accept-all command."""

    def test_writes_composed_project(self, tmp_path: Path) -> None:
        """Test the default output path and accepted values."""
        path = write_project(tmp_path)

        result = runner.invoke(app, ["accept-all", str(path)])

        assert result.exit_code == 0
        assert "1 positioned" in result.output
        assert "1 kerned" in result.output

        with ProjectReader(tmp_path / "demo-composed.json") as reader:
            project = reader.read_project()
        assert len(project.positioning) == 1
        assert len(project.kerning) == 1

    def test_dry_run_writes_nothing(self, tmp_path: Path) -> None:
        """Test --dry-run leaves the file system alone."""
        path = write_project(tmp_path)
        result = runner.invoke(app, ["accept-all", str(path), "--dry-run", "--quiet"])
        assert result.exit_code == 0
        assert not (tmp_path / "demo-composed.json").exists()

    def test_output_and_log_file(self, tmp_path: Path) -> None:
        """Test explicit output and log file paths."""
        path = write_project(tmp_path)
        output = tmp_path / "out.json"
        log_file = tmp_path / "accept.log"

        result = runner.invoke(
            app,
            ["accept-all", str(path), "-o", str(output), "--log-file", str(log_file), "-q"],
        )

        assert result.exit_code == 0
        assert output.exists()
        assert "Pair positioned" in log_file.read_text(encoding="utf-8")


class TestAutokern:
    """Tests for the autokern command."""

    def test_kerns_kern_pairs(self, tmp_path: Path) -> None:
        """Test kern-pair characters receive values."""
        path = write_project(tmp_path)
        output = tmp_path / "kerned.json"

        result = runner.invoke(app, ["autokern", str(path), "-o", str(output)])

        assert result.exit_code == 0
        assert "1 pairs kerned" in result.output
        with ProjectReader(output) as reader:
            assert len(reader.read_project().kerning) == 1

    def test_nothing_to_kern(self, tmp_path: Path) -> None:
        """Test accepted pairs are skipped unless overwriting."""
        path = write_project(tmp_path, kerning=[[f"{KA}-{KA}", 0]])

        result = runner.invoke(app, ["autokern", str(path), "--dry-run"])

        assert result.exit_code == 0
        assert "No pairs to kern" in result.output


class TestLookups:
    """Tests for the lookups command."""

    def test_lists_lookups(self, tmp_path: Path) -> None:
        """Test lookups are printed with their rules."""
        result = runner.invoke(app, ["lookups", str(write_project(tmp_path))])
        assert result.exit_code == 0
        assert "akhn" in result.output
        assert "1 ligatures" in result.output

    def test_glyph_components(self, tmp_path: Path) -> None:
        """Test --glyph shows the producing ligature."""
        result = runner.invoke(app, ["lookups", str(write_project(tmp_path)), "-g", "k_ssa"])
        assert result.exit_code == 0
        assert "k_ssa = ka + virama + ssa" in result.output

    def test_unknown_lookup(self, tmp_path: Path) -> None:
        """Test an unknown lookup name is an error exit."""
        result = runner.invoke(app, ["lookups", str(write_project(tmp_path)), "-n", "nope"])
        assert result.exit_code == 1
        assert "Lookup not found" in result.output
