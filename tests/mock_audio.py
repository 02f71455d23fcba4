"""
Mock audio backend for testing NoteWheel.
Records every backend interaction for verification in tests.
"""
from notewheel.audio.samples import SampleBank
from notewheel.audio.synthesis import SampleBackend
from notewheel.errors import SampleLoadFailure


class MockSampleBackend(SampleBackend):
    """Backend whose samples are just their paths."""

    def __init__(self, failing=None):
        self.failing = set(failing or [])
        self.loaded = []
        self.triggered = []
        self.released = []
        self.stopped = []
        self.closed = False

    def load_sample(self, path):
        self.loaded.append(path)
        if any(path.endswith(f) for f in self.failing):
            raise SampleLoadFailure(path, "mock failure")
        return path

    def trigger(self, handle):
        self.triggered.append(handle)

    def release(self, handle, fade_ms=100):
        self.released.append(handle)

    def stop(self, handle):
        self.stopped.append(handle)

    def close(self):
        self.closed = True

    def clear(self):
        self.triggered = []
        self.released = []
        self.stopped = []


def make_bank(failing=None, instrument="Equal Tempered"):
    """Bank with all 12 samples loaded on a mock backend."""
    backend = MockSampleBackend(failing)
    bank = SampleBank(backend, samples_path="sounds", instrument=instrument)
    bank.load_instrument(instrument)
    return bank, backend


def triggered_notes(backend, instrument="Equal Tempered"):
    """Note names from triggered sample paths, in order."""
    prefix = f"{instrument}"
    out = []
    for path in backend.triggered:
        name = path.replace("\\", "/").split("/")[-1].rsplit(".", 1)[0]
        out.append(name[len(prefix):] if name.startswith(prefix) else name)
    return out
