from __future__ import annotations

import json
from pathlib import Path

from lpformat.runner import run

RESOURCES = Path(__file__).parent / "resources"


def _config(tmp_path: Path) -> str:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("lp_reader:\n  log_level: WARNING\n")
    return str(config_file)


def test_runner_prints_payload_for_valid_file(tmp_path: Path, capsys) -> None:
    exit_code = run(
        [str(RESOURCES / "3obj_2cons.lp"), "--config", _config(tmp_path), "--json"]
    )

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["valid"] is True
    assert len(payload["objectives"]) == 3
    assert len(payload["constraints"]) == 2


def test_runner_fails_for_invalid_file(tmp_path: Path) -> None:
    exit_code = run([str(RESOURCES / "no_end_section.lp"), "--config", _config(tmp_path)])

    assert exit_code == 1


def test_runner_falls_back_to_defaults_for_missing_config(tmp_path: Path, caplog) -> None:
    missing = tmp_path / "absent.yaml"

    exit_code = run([str(RESOURCES / "3obj_2cons.lp"), "--config", str(missing)])

    assert exit_code == 0
    assert f"Config file not found: {missing}, using defaults" in caplog.text
