from __future__ import annotations

"""Abstract-ish sample playback interface.

Samples are pre-rendered, one file per note and instrument. Backends only
load, trigger and release them; nothing is synthesized here.
"""

from typing import Any


class SampleBackend:
    """Abstract-like interface for sample playback engines."""

    def load_sample(self, path: str) -> Any:
        """Load one sample file and return an opaque handle.

        Raises:
            SampleLoadFailure: if the file is missing or cannot be decoded.
        """
        raise NotImplementedError

    def trigger(self, handle: Any) -> None:
        """Start a sample from the beginning (restart if already playing)."""
        raise NotImplementedError

    def release(self, handle: Any, fade_ms: int = 100) -> None:
        """Fade a sample out."""
        raise NotImplementedError

    def stop(self, handle: Any) -> None:
        """Cut a sample immediately."""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources."""
        pass


class SilentBackend(SampleBackend):
    """Backend for headless runs: every sample loads, nothing is heard."""

    def load_sample(self, path: str) -> Any:
        return path

    def trigger(self, handle: Any) -> None:
        pass

    def release(self, handle: Any, fade_ms: int = 100) -> None:
        pass

    def stop(self, handle: Any) -> None:
        pass
