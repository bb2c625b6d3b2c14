"""Short synthesized tones for the Pygame client.

Nothing is loaded from disk: each effect is a sine wave rendered into a
16-bit sample buffer and wrapped in a ``pygame.mixer.Sound``.
"""

from __future__ import annotations

import logging
import math
import random
from array import array

import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
VOLUME = 0.3

MOVE_TONE = (800.0, 0.1)
WIN_NOTES = (523.0, 659.0, 784.0, 1047.0)  # C5 E5 G5 C6
WIN_NOTE_SECONDS = 0.15
SHUFFLE_TONES = 8
SHUFFLE_RANGE = (200.0, 800.0)
SHUFFLE_NOTE_SECONDS = 0.05


def tone(frequency: float, seconds: float, channels: int = 1) -> array:
    """Render a sine tone with a linear fade-out, interleaved per channel."""
    count = int(SAMPLE_RATE * seconds)
    peak = 32767 * VOLUME
    samples = array("h")
    for i in range(count):
        fade = 1.0 - i / count
        value = int(peak * fade * math.sin(2 * math.pi * frequency * i / SAMPLE_RATE))
        samples.extend([value] * channels)
    return samples


def sequence(notes: list[tuple[float, float]], channels: int = 1) -> array:
    samples = array("h")
    for frequency, seconds in notes:
        samples.extend(tone(frequency, seconds, channels))
    return samples


class SoundBoard:
    """Move, win and shuffle effects, switchable on and off."""

    def __init__(self, enabled: bool = True, rng: random.Random | None = None) -> None:
        self.enabled = enabled
        self._rng = rng or random.Random()
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        self._channels = 0
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            init = pygame.mixer.get_init()
        except pygame.error as exc:
            logger.warning("Audio unavailable, sounds disabled: %s", exc)
            return
        if init is None or init[1] != -16:
            logger.warning("Unsupported mixer format %s, sounds disabled", init)
            return
        self._channels = init[2]
        self._build()

    @property
    def available(self) -> bool:
        return bool(self._sounds)

    def _build(self) -> None:
        ch = self._channels
        self._sounds["move"] = pygame.mixer.Sound(buffer=tone(*MOVE_TONE, channels=ch))
        self._sounds["win"] = pygame.mixer.Sound(
            buffer=sequence([(f, WIN_NOTE_SECONDS) for f in WIN_NOTES], ch)
        )

    def _shuffle_sound(self) -> pygame.mixer.Sound:
        lo, hi = SHUFFLE_RANGE
        notes = [
            (self._rng.uniform(lo, hi), SHUFFLE_NOTE_SECONDS) for _ in range(SHUFFLE_TONES)
        ]
        return pygame.mixer.Sound(buffer=sequence(notes, self._channels))

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def play(self, name: str) -> None:
        """Play *name* ("move", "win" or "shuffle") if sound is on."""
        if not (self.enabled and self.available):
            return
        sound = self._shuffle_sound() if name == "shuffle" else self._sounds[name]
        sound.play()
