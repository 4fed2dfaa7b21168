"""
Random sources for the sampling kernel.

A source hands out uniform values in [0, 1). It can be restarted
(replaying the exact same values) and split into independent child
streams, one per row of a batch, so that every row's draws only
depend on the seed and on the row index, never on the order rows
get processed in.

Both implementations are built on numpy's SeedSequence + PCG64:
a seeded source starts from the caller's integer, an entropy
source lets SeedSequence pull fresh entropy from the OS.
"""

import numbers
import numpy as np
from .errors import InvalidSeedError

### How many uniforms we pull at a time when iterating lazily ###
_ITER_BLOCK = 1024

class RandomSource:
    """
    Interface for a restartable stream of uniform values in [0, 1).
    """

    def uniform(self, n):
        """Next `n` values of the stream as a float64 numpy array."""
        raise NotImplementedError

    def restart(self):
        """Rewind the stream to its first value."""
        raise NotImplementedError

    def spawn(self, n):
        """`n` independent child sources."""
        raise NotImplementedError

    def __iter__(self):
        while True:
            for u in self.uniform(_ITER_BLOCK):
                yield float(u)

class SeededSource(RandomSource):

    def __init__(self, seed=None):
        if isinstance(seed, np.random.SeedSequence):
            self._seed_seq = seed
        else:
            self._seed_seq = np.random.SeedSequence(seed)
        self.restart()

    @property
    def entropy(self):
        return self._seed_seq.entropy

    def restart(self):
        ### generate_state does not mutate the SeedSequence, so this replays ###
        self._generator = np.random.Generator(np.random.PCG64(self._seed_seq))
        return self

    def uniform(self, n):
        return self._generator.random(n)

    def spawn(self, n):
        return [SeededSource(child) for child in self._seed_seq.spawn(n)]

    def __repr__(self):
        return f"{type(self).__name__}(entropy={self.entropy})"

class EntropySource(SeededSource):
    """
    Seeded from OS entropy, different on every construction.
    Restarting still replays the values drawn so far.
    """

    def __init__(self):
        super().__init__(None)

def check_seed(seed):
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral):
        raise InvalidSeedError(f"seed must be an integer or None, got {seed!r}")
    if seed < 0:
        raise InvalidSeedError(f"seed must be non-negative, got {seed}")
    return int(seed)

def make_source(seed=None):
    """
    Deterministic source for an integer seed, entropy source for None.
    """
    seed = check_seed(seed)
    if seed is None:
        return EntropySource()
    return SeededSource(seed)
