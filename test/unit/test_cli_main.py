from __future__ import annotations

import json
from pathlib import Path

import pytest

from cli.main import build_parser, main


def _write_config_dir(base: Path, *, with_profile: bool = True) -> Path:
    config_dir = base / "config"
    config_dir.mkdir()
    (config_dir / "config.json").write_text(json.dumps({
        "OPENAI_KEY": "",
        "OPENAI_BASE_URL": "https://api.example.com/v1",
    }))
    if with_profile:
        (config_dir / "profile.json").write_text(json.dumps({
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@test.com",
            "settings": {"location": "Bangalore", "notice_period": "30 days"},
            "skills": [{"skill_name": "java", "display_name": "Java", "experience": "5"}],
            "resume_text": "Java developer",
        }))
    return config_dir


def _args(tmp_path: Path, config_dir: Path, *rest: str) -> list[str]:
    return ["--db-path", str(tmp_path / "engine.db"), "--config-dir", str(config_dir), *rest]


def test_parser_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_check_config_reports_offline_mode(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_dir = _write_config_dir(tmp_path)

    code = main(_args(tmp_path, config_dir, "check-config"))

    assert code == 0
    assert "no OPENAI_KEY" in capsys.readouterr().out


def test_check_config_fails_on_invalid_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    code = main(_args(tmp_path, config_dir, "check-config"))

    assert code == 1
    assert "Config validation failed" in capsys.readouterr().out


def test_import_profile_then_ask(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_dir = _write_config_dir(tmp_path)

    assert main(_args(tmp_path, config_dir, "import-profile")) == 0
    assert "Imported profile for Jane Doe (1 skills)" in capsys.readouterr().out

    assert main(_args(tmp_path, config_dir, "ask", "What is your notice period?")) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "30 days"
    assert out[1] == "confidence: 95"


def test_choose_prints_selected_option(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_dir = _write_config_dir(tmp_path)
    main(_args(tmp_path, config_dir, "import-profile"))
    capsys.readouterr()

    code = main(_args(
        tmp_path, config_dir, "choose", "Preferred location?",
        "--option", "Mumbai", "--option", "Bangalore",
    ))

    assert code == 0
    assert capsys.readouterr().out.startswith("2. Bangalore (MEDIUM)")


def test_import_profile_without_profile_json(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_dir = _write_config_dir(tmp_path, with_profile=False)

    assert main(_args(tmp_path, config_dir, "import-profile")) == 1
    assert "No profile.json" in capsys.readouterr().out
