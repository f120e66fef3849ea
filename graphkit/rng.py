"""Per-thread random number generators and seed generation."""

from __future__ import annotations

import logging
import os
import threading
import time

import numpy as np

logger = logging.getLogger(__name__)

_SEED_MASK = 2**64 - 1
_local = threading.local()


def cluster_seedgen() -> int:
    """Return a seed from the system entropy source, or a pid/time fallback."""
    try:
        raw = os.urandom(8)
        if len(raw) == 8:
            return int.from_bytes(raw, "little", signed=True)
    except (OSError, NotImplementedError):
        pass
    logger.warning(
        "System entropy source not available, using fallback algorithm to generate seed instead."
    )
    pid = os.getpid()
    s = int(time.time())
    return abs((s * 181) * ((pid - 83) * 359)) % 104729


def _make_generator(seed: int) -> np.random.Generator:
    return np.random.Generator(np.random.MT19937(seed & _SEED_MASK))


class Context:
    """Holds a random generator; each thread gets its own instance via :meth:`get`."""

    def __init__(self):
        self._generator: np.random.Generator | None = None

    @classmethod
    def get(cls) -> "Context":
        instance = getattr(_local, "context", None)
        if instance is None:
            instance = cls()
            _local.context = instance
        return instance

    def set_random_seed(self, seed: int) -> None:
        self._generator = _make_generator(seed)

    def generator(self) -> np.random.Generator:
        """Return the generator, seeding it from :func:`cluster_seedgen` on first use."""
        if self._generator is None:
            self._generator = _make_generator(cluster_seedgen())
        return self._generator