"""A bit-exact model of the C library's default ``rand()`` generator.

The generator is the additive feedback generator used by glibc for
``srand``/``rand``: a 31-word state seeded by a Lehmer generator, with the
first 310 outputs thrown away.  Programs that seed it with a fixed value
produce reproducible data, which this module recreates.
"""

from collections import deque

RAND_MAX = 0x7FFFFFFF

_MASK32 = 0xFFFFFFFF
_DEGREE = 31
_SEPARATION = 3
_WINDOW = _DEGREE + _SEPARATION
_DISCARD = 10 * _DEGREE


def _to_int32(value):
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _lehmer_step(word):
    """One step of the seeding generator, using C's truncating division."""
    hi = abs(word) // 127773
    if word < 0:
        hi = -hi
    lo = word - hi * 127773
    word = 16807 * lo - 2836 * hi
    if word < 0:
        word += 2147483647
    return word


class GlibcRandom:
    """Pseudo-random integers matching ``srand(seed)`` followed by ``rand()``."""

    def __init__(self, seed=1):
        self._state = deque(maxlen=_WINDOW)
        self.seed(seed)

    def seed(self, seed):
        """Reset the generator as ``srand(seed)`` does."""
        seed &= _MASK32
        if seed == 0:
            seed = 1
        word = _to_int32(seed)
        words = [word]
        for _ in range(1, _DEGREE):
            word = _lehmer_step(word)
            words.append(word)
        words.extend(words[:_SEPARATION])
        self._state = deque((w & _MASK32 for w in words), maxlen=_WINDOW)
        for _ in range(_DISCARD):
            self._next()

    def _next(self):
        value = (self._state[_SEPARATION] + self._state[_DEGREE]) & _MASK32
        self._state.append(value)
        return value >> 1

    def rand(self):
        """Return the next value in ``[0, RAND_MAX]``."""
        return self._next()