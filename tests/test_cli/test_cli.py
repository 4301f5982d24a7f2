"""Tests for the tilestyle CLI commands."""
from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from tilestyle import __version__
from tilestyle.cli.main import cli

FIXTURE = Path(__file__).parent.parent / "fixtures" / "streets.json"


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


class TestCLIGroup:
    def test_cli_group_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "import JSON map styles" in result.output

    def test_cli_lists_commands(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert "convert" in result.output
        assert "inspect" in result.output
        assert "filter" in result.output

    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# convert command
# ---------------------------------------------------------------------------


class TestConvertCommand:
    def test_convert_to_file(self, tmp_path) -> None:
        out = tmp_path / "style.json"
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(FIXTURE), "-o", str(out)])
        assert result.exit_code == 0
        assert "Wrote 5 rule(s)" in result.output
        assert "Summary: 0 error(s), 3 warning(s), 1 info" in result.output

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["background"] == "#fcf7e4"
        assert [r["layer_name"] for r in data["rules"]] == [
            "globallandcover",
            "water",
            "waterway",
            "transportation",
            "place",
        ]
        assert data["rules"][3]["properties"] == []

    def test_convert_reports_diagnostics(self, tmp_path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(FIXTURE), "-o", str(tmp_path / "o.json")])
        assert "[layer=Road]" in result.output
        assert "[layer=Hillshade]" in result.output

    def test_convert_to_stdout(self, tmp_path) -> None:
        source = tmp_path / "tiny.json"
        source.write_text(
            json.dumps(
                {
                    "version": 8,
                    "layers": [
                        {"id": "r", "type": "line", "source-layer": "roads", "paint": {"line-color": "#abc"}}
                    ],
                }
            ),
            encoding="utf-8",
        )
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(source)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["rules"][0]["symbol"] == {"type": "line", "width": 1.0, "stroke_color": "#aabbcc"}

    def test_convert_document(self, tmp_path) -> None:
        out = tmp_path / "doc.json"
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(FIXTURE), "--document", "-o", str(out)])
        assert result.exit_code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert [r["id"] for r in data["rules"]] == [1, 2, 3, 4, 5]
        assert data["last_rule_id"] == 5
        assert data["rules"][4]["filter"] == "name exist && rank >= 3"

    def test_convert_unsupported_version(self, tmp_path) -> None:
        source = tmp_path / "v7.json"
        source.write_text(json.dumps({"version": 7, "layers": []}), encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(source), "-o", str(tmp_path / "o.json")])
        assert result.exit_code == 1
        assert "not supported" in result.output

    def test_convert_invalid_json(self, tmp_path) -> None:
        source = tmp_path / "broken.json"
        source.write_text("{", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(source)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_convert_non_utf8_file(self, tmp_path) -> None:
        source = tmp_path / "latin1.json"
        source.write_bytes(b'{"version": 8, "name": "\xff"}')
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(source)])
        assert result.exit_code == 1
        assert "Not UTF-8 text" in result.output
        assert not isinstance(result.exception, UnicodeDecodeError)

    def test_convert_not_a_style(self, tmp_path) -> None:
        source = tmp_path / "list.json"
        source.write_text("[]", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(source)])
        assert result.exit_code == 1
        assert "Not a map style" in result.output

    def test_convert_missing_file(self, tmp_path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["convert", str(tmp_path / "nope.json")])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# inspect command
# ---------------------------------------------------------------------------


class TestInspectCommand:
    def test_inspect_fixture(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", str(FIXTURE)])
        assert result.exit_code == 0
        assert "Style:      Streets Mini" in result.output
        assert "Layers:     9" in result.output
        assert "Rules:      5" in result.output
        assert "Summary: 0 error(s), 3 warning(s), 1 info" in result.output

    def test_inspect_layer_lines(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", str(FIXTURE)])
        lines = result.output.splitlines()
        river = next(line for line in lines if line.strip().startswith("River"))
        assert "-> line" in river
        assert "[class in [river,canal]]" in river
        building = next(line for line in lines if line.strip().startswith("Building"))
        assert "-> skipped" in building
        assert any("warning: Skipped fill-extrusion layer" in line for line in lines)

    def test_inspect_unsupported_version(self, tmp_path) -> None:
        source = tmp_path / "v7.json"
        source.write_text(json.dumps({"version": 7, "name": "Old"}), encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli, ["inspect", str(source)])
        assert result.exit_code == 0
        assert "Version:    7" in result.output
        assert "ERROR" in result.output


# ---------------------------------------------------------------------------
# filter command
# ---------------------------------------------------------------------------


class TestFilterCommand:
    def test_filter_canonical_form(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["filter", "rank>=5&&class in [a, b]"])
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "rank >= 5 && class in [a,b]"
        assert "rank: GE 5.0" in result.output
        assert "class: IN ('a', 'b')" in result.output

    def test_filter_parse_error(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["filter", "class = street"])
        assert result.exit_code == 1
        assert "Parse error" in result.output
