# tests/integration_tests/test_cli.py
# This file is part of Formulary - A Formula Expression Engine
#
# Test suite for the run_engine command-line interface

import json
import pytest
from run_engine import UnknownFormulaError, main, render_tree, select_root
from dependency import build_tree


@pytest.fixture
def formula_file(tmp_path, nested_formulas):
    path = tmp_path / "formulas.json"
    path.write_text(json.dumps(nested_formulas), encoding="utf-8")
    return str(path)


class TestCommandLine:
    """Test cases for main() exit codes and JSON output."""

    def test_default_check_as_json(self, formula_file, capsys):
        assert main(["-f", formula_file, "--json"]) == 0

        report = json.loads(capsys.readouterr().out)
        assert report["name"] == "Total_Cost"
        assert report["variables"] == ["Capex", "Inflation_Rate", "Opex"]
        assert report["ast"] == "((Capex + Opex) * (1 + Inflation_Rate))"

    def test_all_sections(self, formula_file, capsys):
        exit_code = main(
            [
                "-f",
                formula_file,
                "-n",
                "Opex",
                "--tree",
                "--derivatives",
                "--layout",
                "--expand",
                "Energy",
                "--json",
            ]
        )
        assert exit_code == 0

        report = json.loads(capsys.readouterr().out)
        assert "ast" not in report
        assert report["tree"]["name"] == "Opex"
        assert report["derivatives"]["Maintenance"] == "1"
        assert report["derivatives"]["Energy"] == "Hours"
        assert report["graph"]["nodes"][0] == {
            "id": "Opex",
            "label": "Opex",
            "type": "result",
            "x": 400.0,
            "y": 60.0,
        }

    def test_max_depth_flag(self, tmp_path, chain_formulas, capsys):
        path = tmp_path / "chain.json"
        path.write_text(json.dumps(chain_formulas), encoding="utf-8")

        assert main(["-f", str(path), "--tree", "--max-depth", "1", "--json"]) == 0
        tree = json.loads(capsys.readouterr().out)["tree"]
        assert tree["children"][0]["children"][0]["type"] == "circular"

    def test_missing_file_exit_code(self, tmp_path):
        assert main(["-f", str(tmp_path / "absent.json")]) == 1

    def test_parse_error_exit_code(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"Broken": "a + (b"}), encoding="utf-8")
        assert main(["-f", str(path), "--check"]) == 2

    def test_unknown_formula_exit_code(self, formula_file):
        assert main(["-f", formula_file, "-n", "Missing"]) == 3


class TestHelpers:
    """Test cases for the CLI helper functions."""

    def test_select_root(self, nested_formulas):
        assert select_root(nested_formulas) == "Total_Cost"
        assert select_root(nested_formulas, "Capex") == "Capex"
        with pytest.raises(UnknownFormulaError):
            select_root({})

    def test_render_tree(self, cyclic_formulas):
        text = render_tree(build_tree("A", cyclic_formulas))
        assert text.splitlines() == [
            "ƒ A = B + 1",
            "  ƒ B = A + 1",
            "    ↻ A",
        ]
