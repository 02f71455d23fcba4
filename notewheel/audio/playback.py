from __future__ import annotations

"""pygame.mixer-based sample playback implementation."""

from typing import Any, Dict

from ..errors import SampleLoadFailure
from .synthesis import SampleBackend, SilentBackend


class PygameBackend(SampleBackend):
    """Concrete SampleBackend using pygame.mixer."""

    def __init__(self, frequency: int = 44100, channels: int = 32) -> None:
        try:
            import pygame  # type: ignore
        except Exception as e:  # pragma: no cover - runtime dependency
            raise RuntimeError("pygame is not installed (pip install notewheel[audio])") from e

        self._pygame = pygame
        pygame.mixer.init(frequency=frequency, size=-16, channels=2, buffer=1024)
        # Enough voices for chords plus overlapping releases
        pygame.mixer.set_num_channels(channels)

    def load_sample(self, path: str) -> Any:
        try:
            return self._pygame.mixer.Sound(path)
        except (self._pygame.error, FileNotFoundError) as e:
            raise SampleLoadFailure(path, str(e)) from e

    def trigger(self, handle: Any) -> None:
        if handle.get_num_channels() > 0:
            handle.stop()
        handle.play()

    def release(self, handle: Any, fade_ms: int = 100) -> None:
        handle.fadeout(int(fade_ms))

    def stop(self, handle: Any) -> None:
        handle.stop()

    def close(self) -> None:
        try:
            self._pygame.mixer.quit()
        except self._pygame.error:
            pass


def make_backend_from_config(cfg: Dict) -> SampleBackend:
    """Factory for SampleBackend from config dict."""
    audio = cfg.get("audio", {})
    backend = audio.get("backend", "pygame")
    if backend == "pygame":
        return PygameBackend(
            frequency=int(audio.get("frequency", 44100)),
            channels=int(audio.get("channels", 32)),
        )
    if backend == "silent":
        return SilentBackend()
    raise ValueError(f"Unsupported backend: {backend}")
