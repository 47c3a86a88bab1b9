"""Tests for structlog configuration."""

from __future__ import annotations

import structlog

from psrmigrate.log import configure_logging


class TestConfigureLogging:
    def teardown_method(self) -> None:
        structlog.reset_defaults()

    def test_events_go_to_stderr(self, capsys) -> None:
        configure_logging("WARNING")
        structlog.get_logger("psrmigrate.test").warning("duplicate_type_name", name="Base")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "duplicate_type_name" in captured.err
        assert "name=Base" in captured.err

    def test_level_filters(self, capsys) -> None:
        configure_logging("ERROR")
        structlog.get_logger("psrmigrate.test").warning("hidden_event")
        assert "hidden_event" not in capsys.readouterr().err

    def test_unknown_level_falls_back_to_warning(self, capsys) -> None:
        configure_logging("chatty")
        log = structlog.get_logger("psrmigrate.test")
        log.info("quiet_event")
        log.warning("loud_event")
        err = capsys.readouterr().err
        assert "quiet_event" not in err
        assert "loud_event" in err
