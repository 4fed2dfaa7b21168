import numpy as np
import pytest

import tensorsample
from tensorsample import Tensor, ops

def test_default_dtypes():
    assert str(tensorsample.tensor([0.5, 0.5]).dtype) == "float32"
    assert str(tensorsample.tensor([1, 0]).dtype) == "int32"
    assert str(tensorsample.tensor([1, 0], dtype="float64").dtype) == "float64"

def test_shape_and_rank():
    t = tensorsample.zeros(3, 2, 2)
    assert t.shape == (3, 2, 2)
    assert t.ndim == 3
    assert len(t) == 3
    assert t.device == "cpu"

def test_astype_returns_new_tensor():
    t = tensorsample.tensor([1.0, 2.0])
    t64 = t.astype("float64")
    assert str(t64.dtype) == "float64"
    assert str(t.dtype) == "float32"

def test_wrapping_keeps_dtype():
    t64 = tensorsample.tensor([1.0, 2.0], dtype="float64")
    assert str(Tensor(t64).dtype) == "float64"

def test_sum_cumsum_div():
    t = tensorsample.tensor([[1.0, 1.0, 2.0], [0.0, 3.0, 1.0]], dtype="float64")
    totals = ops.sum(t, dim=-1, keepdims=True)
    assert totals.shape == (2, 1)
    probs = t / totals
    assert np.allclose(probs.numpy(), [[0.25, 0.25, 0.5], [0.0, 0.75, 0.25]])
    cdf = ops.cumsum(probs, dim=-1)
    assert np.allclose(cdf.numpy()[:, -1], 1.0)

def test_reshape():
    t = tensorsample.arange(6)
    assert ops.reshape(t, 2, 3).shape == (2, 3)
    assert t.reshape((3, 2)).shape == (3, 2)
    assert t.reshape(1, -1).tolist() == [[0, 1, 2, 3, 4, 5]]

def test_indexing_and_item():
    t = tensorsample.tensor([[1, 2], [3, 4]])
    assert t[1].tolist() == [3, 4]
    assert t[1, 0].item() == 3
    with pytest.raises(ValueError):
        t.item()

def test_factories():
    assert tensorsample.ones(2).tolist() == [1.0, 1.0]
    assert tensorsample.full((2, 2), fill_value=3).tolist() == [[3.0, 3.0], [3.0, 3.0]]
    r = tensorsample.rand(4, 5).numpy()
    assert r.shape == (4, 5)
    assert ((r >= 0) & (r < 1)).all()

def test_as_tensor_keeps_numpy_precision():
    arr = np.array([0.1, 0.9])
    assert str(ops.as_tensor(arr).dtype) == "float64"
    t = tensorsample.tensor([0.1, 0.9])
    assert ops.as_tensor(t) is t

def test_repr():
    assert repr(tensorsample.tensor([1.0, 2.0])).startswith("tensor(")
    assert "int32" in repr(tensorsample.tensor([1, 2]))

def test_unknown_device():
    with pytest.raises(RuntimeError):
        tensorsample.tensor([1.0], device="tpu")

def test_to_same_device():
    t = tensorsample.tensor([1.0, 2.0])
    moved = t.to("cpu")
    assert moved.device == "cpu"
    assert moved.tolist() == [1.0, 2.0]
