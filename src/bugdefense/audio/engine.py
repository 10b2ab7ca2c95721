"""
BUG DEFENSE audio feedback.

Short chiptune blips for gameplay events: gate placed, correct gate,
wrong gate, production hit, combo, game over.
"""

import array
import logging
import math
from typing import Callable, Dict, List, Optional

import pygame

from bugdefense.core.events import Event, EventBus, EventType

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100


def square(t: float, freq: float) -> float:
    """Square wave oscillator."""
    return 1 if (t * freq) % 1 < 0.5 else -1


def sine(t: float, freq: float) -> float:
    """Sine wave oscillator."""
    return math.sin(2 * math.pi * freq * t)


def tone(
    freq: float,
    duration: float,
    wave: Callable[[float, float], float] = sine,
    volume: float = 0.35,
) -> array.array:
    """One enveloped note as signed 16-bit mono samples."""
    samples = array.array('h')
    count = int(SAMPLE_RATE * duration)
    for i in range(count):
        t = i / SAMPLE_RATE
        attack = min(1.0, t / 0.01)
        release = max(0.0, 1 - t / duration)
        val = wave(t, freq) * volume * attack * release
        samples.append(int(max(-1.0, min(1.0, val)) * 32767))
    return samples


def sequence(notes: List[tuple], wave: Callable[[float, float], float] = square) -> array.array:
    """Concatenate (freq, duration) notes."""
    samples = array.array('h')
    for freq, duration in notes:
        samples.extend(tone(freq, duration, wave))
    return samples


# Event -> sound name
EVENT_SOUNDS: Dict[EventType, str] = {
    EventType.GATE_PLACED: "place",
    EventType.GATE_CORRECT: "correct",
    EventType.GATE_WRONG: "wrong",
    EventType.PRODUCTION_HIT: "prod_hit",
    EventType.COMBO: "combo",
    EventType.SESSION_ENDED: "game_over",
}


class FeedbackSounds:
    """Plays a blip for each gameplay event on the bus."""

    def __init__(self, volume: float = 1.0):
        self._initialized = False
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self._volume = volume
        self._unsubscribers: List[Callable[[], None]] = []

    @property
    def is_ready(self) -> bool:
        return self._initialized

    def init(self) -> bool:
        """Initialize the mixer and generate sounds."""
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, 1024)
            pygame.mixer.init()
            self._generate_sounds()
            self._initialized = True
            logger.info(f"Audio feedback initialized ({len(self._sounds)} sounds)")
            return True
        except Exception as e:
            logger.error(f"Failed to initialize audio: {e}")
            return False

    def _create_sound(self, samples: array.array) -> pygame.mixer.Sound:
        """Create a pygame Sound from mono samples (auto-converted to stereo)."""
        stereo = array.array('h')
        for s in samples:
            stereo.append(s)
            stereo.append(s)
        sound = pygame.mixer.Sound(buffer=stereo)
        sound.set_volume(self._volume)
        return sound

    def _generate_sounds(self) -> None:
        self._sounds["place"] = self._create_sound(tone(520, 0.06))
        self._sounds["correct"] = self._create_sound(tone(800, 0.08))
        self._sounds["wrong"] = self._create_sound(tone(180, 0.08, square))
        self._sounds["prod_hit"] = self._create_sound(tone(120, 0.12, square))
        self._sounds["combo"] = self._create_sound(sequence([(660, 0.06), (880, 0.06), (1320, 0.1)]))
        self._sounds["game_over"] = self._create_sound(sequence([(440, 0.12), (330, 0.12), (220, 0.24)]))

    def play(self, name: str) -> None:
        if not self._initialized:
            return
        sound = self._sounds.get(name)
        if sound is not None:
            sound.play()

    def attach(self, event_bus: EventBus) -> None:
        """Subscribe to the gameplay events that make a sound."""
        for event_type in EVENT_SOUNDS:
            self._unsubscribers.append(event_bus.subscribe(event_type, self._on_event))

    def detach(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def _on_event(self, event: Event) -> None:
        name = EVENT_SOUNDS.get(event.type)
        if name:
            self.play(name)

    def cleanup(self) -> None:
        self.detach()
        if self._initialized:
            pygame.mixer.quit()
            self._initialized = False


_feedback: Optional[FeedbackSounds] = None


def get_feedback_sounds(volume: float = 1.0) -> FeedbackSounds:
    """Get or create the global feedback sound player."""
    global _feedback
    if _feedback is None:
        _feedback = FeedbackSounds(volume)
    return _feedback
