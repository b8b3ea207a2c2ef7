from __future__ import annotations

import pytest

from ticketref.config import (
    ConfigurationError,
    ReconcilerSettings,
    ReferenceSettings,
    get_reconciler_settings,
    get_reference_settings,
)


def test_reconciler_settings_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TICKETREF_MAX_ATTEMPTS", raising=False)

    assert get_reconciler_settings() == ReconcilerSettings()


def test_reconciler_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TICKETREF_MAX_ATTEMPTS", "5")

    assert get_reconciler_settings().max_attempts == 5


def test_reconciler_settings_reject_zero_attempts() -> None:
    with pytest.raises(ConfigurationError):
        ReconcilerSettings(max_attempts=0)


def test_reference_settings_parse_marker_list(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TICKETREF_REFERENCE_MARKERS", " Hash , ")

    assert get_reference_settings().markers == ("hash",)


def test_reference_settings_default_to_all_markers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TICKETREF_REFERENCE_MARKERS", raising=False)

    assert set(get_reference_settings().markers) == {"hash", "link"}


def test_reference_settings_reject_unknown_marker() -> None:
    with pytest.raises(ConfigurationError, match="mention"):
        ReferenceSettings(markers=("hash", "mention"))
