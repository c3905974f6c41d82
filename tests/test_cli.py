"""Unit tests for the svg-typewriter command line.

Tests use CliRunner for isolated command invocation. Font embedding is
disabled with --no-fonts or mocked, so nothing touches the network.
"""

from pathlib import Path
from unittest.mock import patch

import defusedxml.ElementTree as ET
import pytest
from click.testing import CliRunner

from svg_typewriter import __version__
from svg_typewriter.cli.commands.fonts import parse_style, primary_family
from svg_typewriter.cli.commands.render import build_query
from svg_typewriter.cli.main import cli
from svg_typewriter.config import CONFIG_ENV_VAR

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def runner(tmp_path: Path, monkeypatch) -> CliRunner:
    """CliRunner isolated from any config file in the environment."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def _extract_svg(output: str) -> str:
    start = output.index("<svg")
    end = output.rindex("</svg>") + len("</svg>")
    return output[start:end]


class TestMain:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("render", "timeline", "fonts"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_config(self, runner, tmp_path):
        config = tmp_path / "bad.yaml"
        config.write_text("defaults: [width, 600\n", encoding="utf-8")
        result = runner.invoke(cli, ["--config", str(config), "timeline", "-t", "Hi"])
        assert result.exit_code == 1


class TestRender:
    def test_render_to_stdout(self, runner):
        result = runner.invoke(cli, ["render", "--no-fonts", "-t", "Hello;World"])

        assert result.exit_code == 0
        root = ET.fromstring(_extract_svg(result.output))
        assert root.tag == f"{SVG_NS}svg"
        assert len(list(root.iter(f"{SVG_NS}tspan"))) == 10

    def test_render_to_file(self, runner, tmp_path):
        output = tmp_path / "typing.svg"
        result = runner.invoke(
            cli,
            ["render", "--no-fonts", "-t", "Hi", "-o", str(output), "--cursor", "block"],
        )

        assert result.exit_code == 0
        assert output.exists()
        root = ET.parse(output).getroot()
        assert root.get("width") == "450"

    def test_options_override_query(self, runner):
        result = runner.invoke(
            cli,
            [
                "render",
                "--no-fonts",
                "-q",
                "text=Hi&width=300&height=100",
                "--width",
                "500",
                "--no-border",
            ],
        )

        assert result.exit_code == 0
        root = ET.fromstring(_extract_svg(result.output))
        assert root.get("width") == "500"
        assert root.get("height") == "100"
        assert root.find(f"{SVG_NS}rect").get("stroke") == "none"

    def test_lines_file(self, runner, lines_json_file):
        result = runner.invoke(
            cli, ["render", "--no-fonts", "--lines-file", str(lines_json_file)]
        )

        assert result.exit_code == 0
        svg = _extract_svg(result.output)
        assert "'Fira Code'" in svg
        assert "#ff0000" in svg

    def test_invalid_parameter_exits_with_error(self, runner):
        result = runner.invoke(cli, ["render", "--no-fonts", "-q", "width=abc"])
        assert result.exit_code == 1

    def test_config_defaults_apply(self, runner, tmp_path):
        config = tmp_path / "conf.yaml"
        config.write_text(
            "defaults:\n  text: Configured\n  width: 320\nfonts:\n  enabled: false\n",
            encoding="utf-8",
        )
        result = runner.invoke(cli, ["--config", str(config), "render"])

        assert result.exit_code == 0
        root = ET.fromstring(_extract_svg(result.output))
        assert root.get("width") == "320"
        assert "".join(t.text for t in root.iter(f"{SVG_NS}tspan")) == "Configured"


class TestTimeline:
    def test_backspace_schedule(self, runner):
        result = runner.invoke(cli, ["timeline", "-t", "Hi", "--no-repeat"])

        assert result.exit_code == 0
        assert "Timeline (backspace)" in result.output
        assert "Cycle: 3.000s" in result.output
        assert "Repeat: yes" not in result.output

    def test_repeat_reported(self, runner):
        result = runner.invoke(cli, ["timeline", "-t", "a;b", "--deletion", "clear"])

        assert result.exit_code == 0
        assert "Timeline (clear)" in result.output
        assert "Repeat: yes" in result.output

    def test_invalid_parameter(self, runner):
        result = runner.invoke(cli, ["timeline", "-q", "pause=-1"])
        assert result.exit_code == 1


class TestFonts:
    def test_css(self, runner, tmp_path):
        output = tmp_path / "font.css"
        css = "@font-face { src: url(data:font/woff2;base64,YWJj) format('woff2'); }"
        with patch(
            "svg_typewriter.cli.commands.fonts.GoogleFontsResolver.resolve",
            return_value=css,
        ) as mock_resolve:
            result = runner.invoke(
                cli, ["fonts", "css", "Fira Code", "--text", "Hi", "-o", str(output)]
            )

        assert result.exit_code == 0
        mock_resolve.assert_called_once_with("Fira Code", "Hi", "400")
        assert output.read_text(encoding="utf-8") == css
        assert "Inlined files: 1" in result.output

    def test_css_not_found(self, runner):
        with patch(
            "svg_typewriter.cli.commands.fonts.GoogleFontsResolver.resolve",
            return_value=None,
        ):
            result = runner.invoke(cli, ["fonts", "css", "Nope"])

        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_report(self, runner, tmp_path):
        output = tmp_path / "typing.svg"
        runner.invoke(cli, ["render", "--no-fonts", "-t", "Hi;Yo", "-o", str(output)])

        result = runner.invoke(cli, ["fonts", "report", str(output)])

        assert result.exit_code == 0
        assert "Courier Prime" in result.output
        assert "Embedded fonts: no" in result.output

    def test_report_invalid_svg(self, runner, tmp_path):
        broken = tmp_path / "broken.svg"
        broken.write_text("<svg", encoding="utf-8")

        result = runner.invoke(cli, ["fonts", "report", str(broken)])
        assert result.exit_code == 1


class TestHelpers:
    def test_build_query_precedence(self, tmp_path):
        lines = tmp_path / "lines.json"
        lines.write_text('[{"text": "A"}]', encoding="utf-8")

        params = build_query(
            "text=x&width=100",
            lines,
            {"width": 200, "repeat": False, "font": None, "center": None},
        )

        assert params == {
            "text": "x",
            "width": "200",
            "lines": '[{"text": "A"}]',
            "repeat": "false",
        }

    def test_parse_style(self):
        assert parse_style("font-family:'A',monospace;font-size:28px;") == {
            "font-family": "'A',monospace",
            "font-size": "28px",
        }
        assert parse_style(None) == {}

    def test_primary_family(self):
        assert primary_family("'Courier Prime',monospace") == "Courier Prime"
