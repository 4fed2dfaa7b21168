import itertools
import numpy as np
import pytest

from tensorsample.random import RandomSource, SeededSource, EntropySource, make_source, check_seed
from tensorsample.errors import InvalidSeedError

def test_seeded_source_is_reproducible():
    a = SeededSource(1234).uniform(100)
    b = SeededSource(1234).uniform(100)
    assert a.dtype == np.float64
    assert (a == b).all()
    assert ((a >= 0) & (a < 1)).all()

def test_restart_replays_stream():
    source = SeededSource(7)
    first = source.uniform(10)
    source.uniform(10)
    source.restart()
    assert (source.uniform(10) == first).all()

def test_entropy_source_restart_replays_stream():
    source = EntropySource()
    first = source.uniform(5)
    assert (source.restart().uniform(5) == first).all()

def test_entropy_sources_differ():
    assert not (EntropySource().uniform(50) == EntropySource().uniform(50)).all()

def test_spawned_children_are_independent_and_reproducible():
    children = SeededSource(99).spawn(3)
    again = SeededSource(99).spawn(3)

    draws = [c.uniform(20) for c in children]
    assert not (draws[0] == draws[1]).all()
    assert not (draws[1] == draws[2]).all()

    for child, expected in zip(again, draws):
        assert (child.uniform(20) == expected).all()

def test_lazy_iteration():
    source = SeededSource(3)
    values = list(itertools.islice(iter(source), 2500))
    assert len(values) == 2500
    assert all(isinstance(v, float) and 0.0 <= v < 1.0 for v in values)
    assert values == SeededSource(3).uniform(2500).tolist()

def test_make_source():
    assert isinstance(make_source(None), EntropySource)
    source = make_source(5)
    assert isinstance(source, SeededSource)
    assert not isinstance(source, EntropySource)
    assert source.entropy == 5

def test_base_source_is_abstract():
    with pytest.raises(NotImplementedError):
        RandomSource().uniform(1)

@pytest.mark.parametrize("seed", [-3, 2.0, "1", False])
def test_check_seed_rejects(seed):
    with pytest.raises(InvalidSeedError):
        check_seed(seed)

def test_check_seed_accepts_numpy_ints():
    assert check_seed(np.int32(4)) == 4
    assert check_seed(None) is None
