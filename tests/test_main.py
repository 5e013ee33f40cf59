"""Tests for the capture station command line."""

import logging

import pytest

from photobooth import main as main_module
from photobooth.domain.session import CaptureMode, CollageLayout
from photobooth.main import build_parser, settings_from_args


def test_parser_overrides_settings() -> None:
    args = build_parser().parse_args(
        [
            "--server",
            "http://10.0.0.7:3000",
            "--mode",
            "single",
            "--layout",
            "strip",
            "--filter",
            "sepia",
            "--camera",
            "2",
        ]
    )

    settings = settings_from_args(args)

    assert settings.server_url == "http://10.0.0.7:3000"
    assert settings.mode is CaptureMode.SINGLE
    assert settings.layout is CollageLayout.STRIP
    assert settings.filter == "sepia"
    assert settings.camera_index == 2


def test_defaults_come_from_settings(monkeypatch) -> None:
    monkeypatch.delenv("BOOTH_MODE", raising=False)
    monkeypatch.setenv("BOOTH_COUNTDOWN_SECONDS", "5")

    settings = settings_from_args(build_parser().parse_args([]))

    assert settings.mode is CaptureMode.COLLAGE
    assert settings.countdown_seconds == 5


def test_parser_rejects_unknown_filter() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--filter", "vaporwave"])


def test_main_logs_banner_and_runs_booth(monkeypatch) -> None:
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    async def fake_run_booth(settings) -> int:  # type: ignore[no-untyped-def]
        return 0

    handler = _Collect()
    logger = logging.getLogger("photobooth.main")
    logger.addHandler(handler)
    monkeypatch.setattr(main_module, "run_booth", fake_run_booth)
    try:
        assert main_module.main(["--mode", "single"]) == 0
    finally:
        logger.removeHandler(handler)

    assert any(
        record.getMessage().startswith("Photobooth - single mode") for record in records
    )
