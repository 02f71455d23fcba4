"""Audio collaborator: sample backends and the per-instrument sample bank."""

from .synthesis import SampleBackend, SilentBackend  # noqa: F401
from .samples import SampleBank  # noqa: F401
