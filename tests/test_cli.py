import json
import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from quizadmin.api.client import ContentApiError
from quizadmin.cli.main import main

ROOT = Path(__file__).resolve().parents[1]


def _run(module: str, *args: str, cwd: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = str(ROOT) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", module, *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        env=env,
    )


@pytest.fixture(autouse=True)
def _in_tmp(tmp_path, monkeypatch):
    # CLI writes its log file under ./logs
    monkeypatch.chdir(tmp_path)


class TestValidateTemplateCli:
    def test_invalid_template_exit_code(self, tmp_path, minimal_template):
        del minimal_template["sections"][0]["questions"][0]["question_type"]
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps(minimal_template), encoding="utf-8")

        proc = _run("quizadmin.cli.validate_template", str(bad), cwd=tmp_path)

        assert proc.returncode == 4, proc.stdout + proc.stderr
        combined = proc.stdout + proc.stderr
        assert "Template validation failed" in combined
        assert "Question 1 in section 1" in combined

    def test_valid_template(self, tmp_path, past_paper_template):
        good = tmp_path / "good.json"
        good.write_text(json.dumps(past_paper_template), encoding="utf-8")

        proc = _run("quizadmin.cli.validate_template", str(good), cwd=tmp_path)

        assert proc.returncode == 0, proc.stdout + proc.stderr
        assert "8 questions, 45 marks" in proc.stdout

    def test_unparseable_file(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{", encoding="utf-8")
        proc = _run("quizadmin.cli.validate_template", str(bad), cwd=tmp_path)
        assert proc.returncode == 2, proc.stdout + proc.stderr

    def test_permissive_flag(self, tmp_path, minimal_template):
        for opt in minimal_template["sections"][0]["questions"][0]["options"]:
            opt["is_correct"] = False
        path = tmp_path / "t.json"
        path.write_text(json.dumps(minimal_template), encoding="utf-8")

        assert _run("quizadmin.cli.validate_template", str(path), cwd=tmp_path).returncode == 4
        proc = _run("quizadmin.cli.validate_template", "--permissive", str(path), cwd=tmp_path)
        assert proc.returncode == 0, proc.stdout + proc.stderr


class TestMainCli:
    def test_no_command(self):
        assert main([]) == 1

    def test_validate(self, write_json_file, past_paper_template, capsys):
        path = write_json_file("paper.json", past_paper_template)
        assert main(["validate", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Questions: 8" in out
        assert "Total marks: 45" in out

    def test_validate_failure(self, write_json_file, capsys):
        path = write_json_file("paper.json", {"title": "T", "sections": [{}]})
        assert main(["validate", str(path)]) == 4
        assert "Section 1 must have a questions array." in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        assert main(["validate", str(tmp_path / "nope.json")]) == 1

    def test_normalize_to_directory(self, tmp_path, write_json_file, legacy_question_list, app_quiz_document):
        a = write_json_file("legacy.json", legacy_question_list)
        b = write_json_file("quiz.json", app_quiz_document)
        out_dir = tmp_path / "normalized"

        assert main(["normalize", str(a), str(b), "-o", str(out_dir)]) == 0

        quiz = json.loads((out_dir / "quiz.json").read_text(encoding="utf-8"))
        assert quiz["title"] == "Q"
        assert quiz["sections"][0]["questions"][0]["question_text"] == "2+2?"
        assert (out_dir / "legacy.json").exists()

    def test_normalize_reports_unreadable(self, tmp_path, write_json_file, legacy_question_list):
        good = write_json_file("legacy.json", legacy_question_list)
        bad = tmp_path / "bad.json"
        bad.write_text("nope", encoding="utf-8")
        assert main(["normalize", str(good), str(bad), "-o", str(tmp_path / "out")]) == 2
        assert (tmp_path / "out" / "legacy.json").exists()

    def test_summary_with_csv(self, tmp_path, write_json_file, past_paper_template, capsys):
        path = write_json_file("paper.json", past_paper_template)
        csv_path = tmp_path / "summary.csv"
        assert main(["summary", str(path), "--csv", str(csv_path)]) == 0
        out = capsys.readouterr().out
        assert '"total_marks": 45' in out
        assert csv_path.exists()

    @pytest.mark.parametrize("kind", ["quiz", "past-paper"])
    def test_template(self, tmp_path, kind):
        out = tmp_path / f"{kind}.json"
        assert main(["template", kind, "-o", str(out)]) == 0
        assert json.loads(out.read_text(encoding="utf-8"))

    def test_config_not_found(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.yaml"), "template", "quiz"]) == 1


class TestRemoteCommands:
    @patch("quizadmin.cli.main.ContentApiClient")
    def test_pull_past_paper(self, mock_client_cls, tmp_path, legacy_question_list):
        mock_client_cls.from_config.return_value.get_past_paper_questions.return_value = legacy_question_list
        out = tmp_path / "paper.json"

        assert main(["pull", "past-paper", "pp1", "-o", str(out)]) == 0

        saved = json.loads(out.read_text(encoding="utf-8"))
        assert saved["paper_info"]["total_questions"] == 2

    @patch("quizadmin.cli.main.ContentApiClient")
    def test_pull_remote_error(self, mock_client_cls, capsys):
        mock_client_cls.from_config.return_value.get_quiz_questions.side_effect = ContentApiError(
            "Quiz not found", status_code=404
        )
        assert main(["pull", "quiz", "qz1"]) == 5
        assert "Quiz not found" in capsys.readouterr().out

    @patch("quizadmin.cli.main.ContentApiClient")
    def test_push_past_paper_validates_first(self, mock_client_cls, write_json_file):
        client = mock_client_cls.from_config.return_value
        path = write_json_file("paper.json", {"title": "T", "sections": [{}]})

        assert main(["push", "past-paper", "pp1", str(path)]) == 4
        client.save_past_paper_questions.assert_not_called()

    @patch("quizadmin.cli.main.ContentApiClient")
    def test_push_past_paper(self, mock_client_cls, write_json_file, past_paper_template):
        client = mock_client_cls.from_config.return_value
        path = write_json_file("paper.json", past_paper_template)

        assert main(["push", "past-paper", "pp1", str(path)]) == 0
        paper_id, document = client.save_past_paper_questions.call_args[0]
        assert paper_id == "pp1"
        assert document["paper_info"]["total_marks"] == 45

    @patch("quizadmin.cli.main.ContentApiClient")
    def test_push_quiz(self, mock_client_cls, write_json_file, app_quiz_document):
        client = mock_client_cls.from_config.return_value
        client.get_quiz.return_value = {"id": "qz1", "name": "Algebra", "topic_id": "t1"}
        path = write_json_file("quiz.json", app_quiz_document)

        assert main(["push", "quiz", "qz1", str(path)]) == 0
        quiz_id, document = client.upload_quiz_data.call_args[0]
        assert quiz_id == "qz1"
        assert document["questions"][0]["questionText"] == "2+2?"
