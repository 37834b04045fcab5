import io
import json

from snooker.config import ALLOWED_RED_COUNTS, DEFAULT_REDS, Settings
from snooker.logging_setup import bind_frame_context, clear_frame_context, configure_logging

import structlog


def test_defaults():
    assert DEFAULT_REDS in ALLOWED_RED_COUNTS
    assert ALLOWED_RED_COUNTS == (5, 10, 15)


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SNOOKER_DATABASE_URL", "sqlite:///other.db")
    monkeypatch.setenv("SNOOKER_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SNOOKER_LOG_JSON", "false")
    monkeypatch.setenv("SNOOKER_FRAMES_DIR", str(tmp_path))

    settings = Settings()

    assert settings.database_url == "sqlite:///other.db"
    assert settings.log_level == "DEBUG"
    assert settings.log_json is False
    assert settings.frames_dir == tmp_path


def test_logging_emits_json_with_frame_context(capsys):
    configure_logging(level="INFO")
    bind_frame_context(starting_reds=10, source="moves.json", players=["Ali", "Ding"])

    try:
        structlog.get_logger("test").info("frame_saved", moves=3)
    finally:
        clear_frame_context()

    line = capsys.readouterr().err.strip().splitlines()[-1]
    entry = json.loads(line)

    assert entry["event"] == "frame_saved"
    assert entry["starting_reds"] == 10
    assert entry["source"] == "moves.json"
    assert entry["players"] == ["Ali", "Ding"]
    assert entry["moves"] == 3
    assert entry["level"] == "info"


def test_plain_logs_to_given_stream():
    stream = io.StringIO()
    configure_logging(level="WARNING", json_logs=False, stream=stream)

    log = structlog.get_logger("test")
    log.info("hidden")
    log.warning("frame_not_finished_not_recorded", reds=5)

    output = stream.getvalue()

    assert "hidden" not in output
    assert "frame_not_finished_not_recorded" in output
    assert "reds=5" in output
    assert not output.lstrip().startswith("{")
