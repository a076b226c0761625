"""
Tests for the clause-engine command line.
"""

import json
from pathlib import Path

import pytest
from clause_engine.cli import load_answers, main
from clause_engine.errors import ClauseEngineError


@pytest.fixture
def data_dir(tmp_path, write_reference_dir):
    return write_reference_dir(tmp_path)


def test_list_templates(data_dir, capsys):
    assert main([str(data_dir), "--list-templates"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == ["Lease", "Blank Form"]


def test_text_output_lists_questions(data_dir, capsys):
    assert main([str(data_dir), "Lease"]) == 0
    out = capsys.readouterr().out
    assert "Status:     ask" in out
    assert "[10] (priority 1) Are pets allowed?" in out
    assert "options: Yes, No" in out
    assert "Diagnostics:" in out


def test_json_output_with_answers(data_dir, tmp_path, capsys):
    answers = tmp_path / "answers.yaml"
    answers.write_text("10: 'Yes'\n20: 'No'\n30: '250'\n", encoding="utf-8")
    assert main([str(data_dir), "lease", "--answers", str(answers), "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "done"
    assert payload["included"] == [1, 2, 3]
    assert payload["completionRatio"] == 1.0


def test_empty_template_status(data_dir, capsys):
    assert main([str(data_dir), "Blank Form", "--format", "json"]) == 0
    assert json.loads(capsys.readouterr().out)["status"] == "empty"


def test_analyze_flag(data_dir, capsys):
    assert main([str(data_dir), "Lease", "--analyze"]) == 0
    assert "No warnings" in capsys.readouterr().out


def test_missing_template_argument(data_dir, capsys):
    assert main([str(data_dir)]) == 2
    assert "template name is required" in capsys.readouterr().err


def test_missing_data_dir(tmp_path, capsys):
    assert main([str(tmp_path / "nowhere"), "Lease"]) == 1
    assert "error:" in capsys.readouterr().err


def test_bad_config_is_reported(data_dir, tmp_path, capsys):
    config = tmp_path / "engine.yaml"
    config.write_text("bogus: 1\n", encoding="utf-8")
    assert main([str(data_dir), "Lease", "--config", str(config)]) == 1
    assert "Unknown config keys" in capsys.readouterr().err



def test_sample_lease_data(capsys):
    sample = Path(__file__).resolve().parent.parent / "sample_data" / "lease"
    argv = [str(sample), "Lease", "--answers", str(sample / "answers.yaml"), "--format", "json"]
    assert main(argv) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "ask"
    assert payload["included"] == [1]
    assert payload["pending"] == [2, 3, 4]
    assert [q["Tag_ID"] for q in payload["questions"]] == [20, 50, 30]
    assert payload["completionRatio"] == 0.4

class TestLoadAnswers:

    def test_none(self):
        assert load_answers(None) == {}

    def test_json_file(self, tmp_path):
        path = tmp_path / "answers.json"
        path.write_text('{"10": "Yes"}', encoding="utf-8")
        assert load_answers(str(path)) == {"10": "Yes"}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "answers.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ClauseEngineError):
            load_answers(str(path))
