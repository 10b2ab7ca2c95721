"""Feedback sound routing and runtime settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from bugdefense.audio.engine import EVENT_SOUNDS, SAMPLE_RATE, FeedbackSounds, tone
from bugdefense.core.events import Event, EventBus, EventType
from config.settings import Settings


class RecordingSounds(FeedbackSounds):
    """Records sound names instead of touching the mixer."""

    def __init__(self) -> None:
        super().__init__()
        self.played: list[str] = []

    def play(self, name: str) -> None:
        self.played.append(name)


class TestFeedbackSounds:
    def test_tone_length(self) -> None:
        """A tone holds duration * sample-rate samples."""
        assert len(tone(440, 0.1)) == int(SAMPLE_RATE * 0.1)

    def test_gameplay_events_make_sounds(self) -> None:
        """Bus events map to their blips while attached."""
        bus = EventBus()
        sounds = RecordingSounds()
        sounds.attach(bus)

        bus.emit(Event(EventType.GATE_CORRECT))
        bus.emit(Event(EventType.PRODUCTION_HIT))
        bus.emit(Event(EventType.BUG_SPAWNED))
        sounds.detach()
        bus.emit(Event(EventType.GATE_WRONG))

        assert sounds.played == ["correct", "prod_hit"]

    def test_uninitialized_player_is_silent(self) -> None:
        """Without a mixer play() is a no-op."""
        sounds = FeedbackSounds()
        assert not sounds.is_ready
        sounds.play("correct")

    def test_every_mapped_event_has_a_name(self) -> None:
        """Sound names cover the scoring events."""
        assert EVENT_SOUNDS[EventType.GATE_WRONG] == "wrong"
        assert EVENT_SOUNDS[EventType.COMBO] == "combo"


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        """Out of the box the simulator talks to the public board."""
        for key in ("BUGDEFENSE_ENV", "BUGDEFENSE_DEBUG", "BUGDEFENSE_LEADERBOARD_URL"):
            monkeypatch.delenv(key, raising=False)
        settings = Settings(_env_file=None)

        assert settings.is_simulator
        assert settings.leaderboard.top_limit == 20
        assert settings.storage.local_limit == 50
        assert settings.storage.local_scores_path.name == "scores_v1.json"

    def test_environment_overrides(self, monkeypatch, tmp_path) -> None:
        """Nested sections read their own prefixed variables."""
        monkeypatch.setenv("BUGDEFENSE_ENV", "headless")
        monkeypatch.setenv("BUGDEFENSE_LEADERBOARD_URL", "http://localhost:9000")
        monkeypatch.setenv("BUGDEFENSE_STORAGE_LOCAL_SCORES_PATH", str(tmp_path / "s.json"))

        settings = Settings(_env_file=None)

        assert not settings.is_simulator
        assert settings.leaderboard.url == "http://localhost:9000"
        assert settings.storage.local_scores_path == Path(tmp_path / "s.json")

    def test_volume_is_validated(self, monkeypatch) -> None:
        """Out-of-range volume is rejected."""
        monkeypatch.setenv("BUGDEFENSE_AUDIO_VOLUME", "3")
        with pytest.raises(ValueError):
            Settings(_env_file=None)
