"""
Marsaglia's universal random number generator.

Lagged-Fibonacci subtraction over a 97-slot history (lags 97 and 33)
combined with an arithmetic correction sequence that breaks the
periodicity of the bare two-tap generator. Every value the generator
holds or returns is an exact multiple of 2**-24, which lets
``generate_array`` evaluate whole blocks with numpy and stay
bit-identical to repeated ``generate`` calls.

There is no shared instance: each worker is handed its own generator.
"""

import operator
from typing import List, Tuple

import numpy as np

MAX_SEED = 900_000_000

BUFFER_LEN = 97
LAG_DISTANCE = 64  # between current_index and second_index

# Correction constants in units of 2**-24
_UNIT = 16777216.0
_CORRECTION = 362436
_CORRECTION_DELTA = 7654321
_CORRECTION_MODULUS = 16777213


class SeedOutOfRange(ValueError):
    """Raised when a seed, or a sub-seed derived from it, is unusable."""

    def __init__(self, name: str, value):
        self.name = name
        self.value = value
        super().__init__(f"initialise: {name} = {value} -- out of range")


def check_sub_seeds(i: int, j: int, k: int, l: int) -> None:
    """Validate the four sub-seeds accepted by ``StreamGenerator.start``."""
    for name, value in (("i", i), ("j", j), ("k", k)):
        if value < 1 or value > 178:
            raise SeedOutOfRange(name, value)
    if l < 0 or l > 168:
        raise SeedOutOfRange("l", l)
    if i == 1 and j == 1 and k == 1:
        raise SeedOutOfRange("ijk", (i, j, k))


def decompose_seed(seed: int) -> Tuple[int, int, int, int]:
    """
    Split a single seed in [0, 900000000] into the four sub-seeds.

    Raises:
        SeedOutOfRange: If the seed or any derived sub-seed is invalid.
    """
    seed = operator.index(seed)
    if seed < 0 or seed > MAX_SEED:
        raise SeedOutOfRange("seed", seed)

    ij = seed // 30082
    kl = seed - 30082 * ij
    i = (ij // 177) % 177 + 2
    j = ij % 177 + 2
    k = (kl // 169) % 178 + 1
    l = kl % 169

    check_sub_seeds(i, j, k, l)
    return i, j, k, l


class StreamGenerator:
    """
    A single independent random stream.

    Not thread-safe: an instance belongs to exactly one worker.
    """

    def __init__(self):
        self.recent_values: List[float] = [0.0] * BUFFER_LEN
        self.correction = 0.0
        self.correction_delta = 0.0
        self.correction_modulus = 0.0
        self.current_index = 0
        self.second_index = 0

    @classmethod
    def from_seed(cls, seed: int) -> "StreamGenerator":
        """Build a generator from a single seed (see ``decompose_seed``)."""
        generator = cls()
        generator.start(*decompose_seed(seed))
        return generator

    def start(self, seed1: int, seed2: int, seed3: int, seed4: int):
        """Fill the history buffer from four sub-seeds and reset the cursors."""
        i, j, k, l = seed1, seed2, seed3, seed4
        for slot in range(BUFFER_LEN):
            s = 0.0
            t = 0.5
            for _ in range(24):
                m = ((i * j) % 179) * k % 179
                i, j, k = j, k, m
                l = (53 * l + 1) % 169
                if (l * m) % 64 >= 32:
                    s += t
                t *= 0.5
            self.recent_values[slot] = s

        self.correction = _CORRECTION / _UNIT
        self.correction_delta = _CORRECTION_DELTA / _UNIT
        self.correction_modulus = _CORRECTION_MODULUS / _UNIT
        self.current_index = BUFFER_LEN - 1
        self.second_index = BUFFER_LEN - 1 - LAG_DISTANCE

    def generate(self) -> float:
        """Return the next value in [0, 1)."""
        buf = self.recent_values
        new_value = buf[self.current_index] - buf[self.second_index]
        if new_value < 0.0:
            new_value += 1.0
        buf[self.current_index] = new_value

        self.current_index = (self.current_index - 1) % BUFFER_LEN
        self.second_index = (self.second_index - 1) % BUFFER_LEN

        self.correction -= self.correction_delta
        if self.correction < 0.0:
            self.correction += self.correction_modulus

        new_value -= self.correction
        if new_value < 0.0:
            new_value += 1.0
        return new_value

    def generate_array(self, n: int) -> np.ndarray:
        """
        Return the next ``n`` values as a float64 array.

        Equivalent to ``n`` calls of ``generate`` and leaves the generator
        in the same state.
        """
        n = operator.index(n)
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        if n == 0:
            return np.empty(0, dtype=np.float64)

        buf = self.recent_values
        cur = self.current_index

        # seq[p] is the p-th value of the stream, oldest history first.
        # Slot (cur - t) holds the value written t steps before the one at cur.
        seq = np.empty(BUFFER_LEN + n, dtype=np.float64)
        seq[:BUFFER_LEN] = [buf[(cur - t) % BUFFER_LEN] for t in range(BUFFER_LEN)]

        short_lag = BUFFER_LEN - LAG_DISTANCE
        pos = BUFFER_LEN
        end = BUFFER_LEN + n
        while pos < end:
            size = min(short_lag, end - pos)
            block = (
                seq[pos - BUFFER_LEN:pos - BUFFER_LEN + size]
                - seq[pos - short_lag:pos - short_lag + size]
            )
            block[block < 0.0] += 1.0
            seq[pos:pos + size] = block
            pos += size

        c0 = int(round(self.correction * _UNIT))
        delta = int(round(self.correction_delta * _UNIT))
        modulus = int(round(self.correction_modulus * _UNIT))
        steps = np.arange(1, n + 1, dtype=np.int64)
        corrections = np.mod(c0 - steps * delta, modulus).astype(np.float64) / _UNIT

        out = seq[BUFFER_LEN:] - corrections
        out[out < 0.0] += 1.0

        # Write the newest 97 values back into their slots.
        cur = (cur - n) % BUFFER_LEN
        tail = seq[-BUFFER_LEN:]
        for t in range(BUFFER_LEN):
            buf[(cur - t) % BUFFER_LEN] = float(tail[t])
        self.current_index = cur
        self.second_index = (self.second_index - n) % BUFFER_LEN
        self.correction = float(corrections[-1])

        return out


def initialise(seed: int) -> StreamGenerator:
    """Create a generator seeded from a single integer."""
    return StreamGenerator.from_seed(seed)
