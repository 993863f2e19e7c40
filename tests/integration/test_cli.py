import json
import sys
from pathlib import Path

import pytest
from PIL import Image

from portability_copier.main import main


def _run(monkeypatch, tmp_path: Path, *args: str) -> int:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        sys, "argv", ["portability_copier", "--log-file", str(tmp_path / "error.log"), *args]
    )
    with pytest.raises(SystemExit) as excinfo:
        main()
    return excinfo.value.code


def test_services_lists_local_provider(monkeypatch, tmp_path: Path, capsys) -> None:
    code = _run(monkeypatch, tmp_path, "services", "--data-type", "photos")

    out = capsys.readouterr().out
    assert code == 0
    assert "photos:" in out
    assert "export: local" in out
    assert "import: local" in out


def test_copy_then_status(monkeypatch, tmp_path: Path, capsys) -> None:
    src = tmp_path / "src"
    (src / "Album").mkdir(parents=True)
    Image.new("RGB", (8, 8)).save(src / "Album" / "one.jpg")
    dst = tmp_path / "dst"

    code = _run(monkeypatch, tmp_path, "copy", "--source", str(src), "--dest", str(dst), "--job-id", "cli-job")

    out = capsys.readouterr().out
    assert code == 0
    assert "Job: cli-job" in out
    assert (dst / "Album" / "one.jpg").exists()
    assert (tmp_path / ".transfer_jobs" / "cli-job.jsonl").exists()

    code = _run(monkeypatch, tmp_path, "status", "--job-id", "cli-job")

    out = capsys.readouterr().out
    assert code == 0
    assert "Job: cli-job" in out
    assert "Imported: 2, Failed: 0" in out


def test_copy_missing_source_exits_with_failure(monkeypatch, tmp_path: Path, capsys) -> None:
    code = _run(
        monkeypatch, tmp_path, "copy", "--source", str(tmp_path / "absent"), "--dest", str(tmp_path / "dst")
    )

    out = capsys.readouterr().out
    assert code == 1
    assert "E-EXPORT-FATAL" in out


def test_status_unknown_job(monkeypatch, tmp_path: Path) -> None:
    assert _run(monkeypatch, tmp_path, "status", "--job-id", "nope") == 1


def test_invalid_config_exits(monkeypatch, tmp_path: Path) -> None:
    config_path = tmp_path / "bad.json"
    config_path.write_text('{"retry": {"max_attempts": 0}}', encoding="utf-8")

    assert _run(monkeypatch, tmp_path, "--config", str(config_path), "services") == 2


def test_copy_writes_json_report(monkeypatch, tmp_path: Path) -> None:
    src = tmp_path / "src"
    (src / "Album").mkdir(parents=True)
    Image.new("RGB", (8, 8)).save(src / "Album" / "one.jpg")
    report_path = tmp_path / "reports" / "copy.json"

    code = _run(
        monkeypatch,
        tmp_path,
        "copy",
        "--source",
        str(src),
        "--dest",
        str(tmp_path / "dst"),
        "--job-id",
        "report-job",
        "--report",
        str(report_path),
    )

    data = json.loads(report_path.read_text(encoding="utf-8"))
    assert code == 0
    assert data["job_id"] == "report-job"
    assert data["succeeded"] is True
    assert data["pages_imported"] == 2


def test_config_shows_and_saves(monkeypatch, tmp_path: Path, capsys) -> None:
    user_config = tmp_path / "user.json"
    user_config.write_text('{"retry": {"max_attempts": 3}}', encoding="utf-8")
    saved = tmp_path / "saved.json"

    code = _run(monkeypatch, tmp_path, "--config", str(user_config), "config", "--save", str(saved))

    out = capsys.readouterr().out
    assert code == 0
    assert '"max_attempts": 3' in out
    assert json.loads(saved.read_text(encoding="utf-8")) == {"retry": {"max_attempts": 3}}


def test_missing_config_file_exits(monkeypatch, tmp_path: Path, capsys) -> None:
    code = _run(monkeypatch, tmp_path, "--config", str(tmp_path / "absent.json"), "services")

    assert code == 2
    assert "Config error" in capsys.readouterr().err
