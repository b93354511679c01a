from __future__ import annotations

import hashlib
import logging
import random as _random
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (effective seed, random.Random internal state)
Checkpoint = Tuple[Optional[int], Any]

_SEED_MASK = 0xFFFFFFFF


class RandomSource:
    """
    The integer source behind map fills, random points and table picks.

    Map generation draws one ``randint(1, 100)`` per cell, so a given seed
    always carves the same cave. Seeds may be ints (folded to 32 bits) or
    any string such as a level name. All draws share one re-entrant lock;
    a level generated on a worker thread can use the same source as the
    game loop.
    """

    def __init__(self, seed: Optional[Any] = None) -> None:
        self._lock = threading.RLock()
        self._rng = _random.Random()
        self._seed: Optional[int] = None
        if seed is None:
            self._rng.seed()
            logger.debug("RandomSource started unseeded")
        else:
            self.set_seed(seed)

    @staticmethod
    def derive_seed(text: str) -> int:
        """Fold a string (e.g. ``"level-3"``) into a stable 32-bit seed."""
        return int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:4], "big")

    def set_seed(self, value: Any) -> int:
        """Reseed the stream; returns the effective 32-bit seed."""
        seed = value & _SEED_MASK if isinstance(value, int) else self.derive_seed(str(value))
        with self._lock:
            self._rng.seed(seed)
            self._seed = seed
        logger.debug("RandomSource seeded with %d", seed)
        return seed

    @property
    def seed(self) -> Optional[int]:
        """The effective seed, or None while the stream is unseeded."""
        return self._seed

    def snapshot(self) -> Checkpoint:
        with self._lock:
            return self._seed, self._rng.getstate()

    def restore(self, checkpoint: Checkpoint) -> None:
        seed, state = checkpoint
        with self._lock:
            self._rng.setstate(state)
            self._seed = seed

    @contextmanager
    def temporary_seed(self, value: Any) -> Iterator["RandomSource"]:
        """Draw from a fixed seed inside the block, e.g. to regenerate one level.

        The surrounding stream continues afterwards exactly where it left off.
        """
        with self._lock:
            checkpoint = self.snapshot()
            self.set_seed(value)
            try:
                yield self
            finally:
                self.restore(checkpoint)

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], inclusive on both ends."""
        with self._lock:
            return self._rng.randint(a, b)

    def random(self) -> float:
        with self._lock:
            return self._rng.random()

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("RandomSource.choice() received an empty sequence")
        with self._lock:
            return self._rng.choice(seq)

    def random_key(self, mapping: Mapping[str, Any]) -> str:
        """Pick a uniformly random key from a mapping; empty mapping yields ''."""
        keys = list(mapping.keys())
        if not keys:
            return ""
        if len(keys) == 1:
            return keys[0]
        return keys[self.randint(0, len(keys) - 1)]


_default_lock = threading.Lock()
_default: Optional[RandomSource] = None


def default_source() -> RandomSource:
    """Return the process-wide source, creating it with a non-deterministic seed on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = RandomSource()
        return _default


def seed_default(seed: Any) -> RandomSource:
    """Explicitly (re)initialise the process-wide source."""
    source = default_source()
    source.set_seed(seed)
    logger.info("Process-wide random source seeded (%r)", seed)
    return source


def random_int(a: int, b: int) -> int:
    return default_source().randint(a, b)


__all__ = ["Checkpoint", "RandomSource", "default_source", "seed_default", "random_int"]
