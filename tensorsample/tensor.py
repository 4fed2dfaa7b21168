import numpy as np
from . import _array as ap
from .dtypes import float32, int32

class Tensor:
    """
    Thin container around our Array. No autograd here, just what
    an op needs: shape/dtype introspection, reading the values
    back on the host, and building a new tensor from a buffer.
    """

    def __init__(self, data, device=None, dtype=None):

        ### Unwrap tensors so we never nest containers ###
        if isinstance(data, Tensor):
            data = data.data

        ### Array handles everything regarding device and dtype ###
        self._data = ap.Array(data=data,
                              device=device,
                              dtype=dtype)

    @property
    def xp(self):
        return self._data.xp

    @property
    def data(self):
        """
        simple (view) access to data
        """
        return self._data

    @property
    def dtype(self):
        return self._data.dtype

    @property
    def device(self):
        return self._data.device

    @property
    def shape(self):
        return self._data.shape

    @property
    def ndim(self):
        return len(self._data.shape)

    def __repr__(self):
        ### Always format the host copy, cupy arrays print through numpy anyway ###
        data_str = np.array2string(
            self.numpy(),
            separator=" ",
            precision=5,
            floatmode="fixed",
            max_line_width=80
        )

        # Indent all lines after the first like PyTorch
        lines = data_str.split("\n")
        if len(lines) > 1:
            indent = " " * len("tensor(")
            data_str = lines[0] + "\n" + "\n".join(indent + line for line in lines[1:])

        extra = f", dtype={self.dtype}" if str(self.dtype) != float32 else ""
        if "cuda" in self.device:
            extra += f", device={self.device}"

        return f"tensor({data_str}{extra})"

    def to(self, device):
        return Tensor(self._data.to(device))

    def astype(self, dtype):
        return Tensor(self._data.astype(dtype))

    def reshape(self, *shape):
        if len(shape) == 1 and isinstance(shape[0], (tuple, list)):
            shape = shape[0]
        return Tensor(self._data.reshape(tuple(shape)))

    def sum(self, dim=None, keepdims=False):
        return Tensor(self._data.sum(axis=dim, keepdims=keepdims))

    def cumsum(self, dim=None):
        return Tensor(self._data.cumsum(axis=dim))

    def __truediv__(self, val):
        if isinstance(val, Tensor):
            val = val.data
        return Tensor(self._data / val)

    def __getitem__(self, idx):
        if isinstance(idx, Tensor):
            idx = idx.data
        return Tensor(self._data[idx])

    def item(self):
        if self._data.size != 1:
            raise ValueError(f"only one element tensors can be converted to Python scalars, got {self.shape}")
        return self.numpy().reshape(-1)[0].item()

    def numpy(self):
        """
        Synchronous host copy of the values (no-op view for cpu tensors)
        """
        return self._data.asnumpy()

    def tolist(self):
        return self.numpy().tolist()

    def __len__(self):
        if self.ndim == 0:
            raise TypeError("len() of a 0-d tensor")
        return self.shape[0]

def _parse_shape(shape):
    if len(shape) == 1 and isinstance(shape[0], (tuple, list)):
        shape = shape[0]
    return tuple(shape)

def tensor(data, device=None, dtype=None):
    return Tensor(data, device=device, dtype=dtype)

def zeros(*shape, device="cpu", dtype=float32):
    return Tensor(ap.Array.zeros(_parse_shape(shape), device=device, dtype=dtype))

def ones(*shape, device="cpu", dtype=float32):
    return Tensor(ap.Array.ones(_parse_shape(shape), device=device, dtype=dtype))

def full(*shape, fill_value, device="cpu", dtype=float32):
    return Tensor(ap.Array.full(_parse_shape(shape), fill_value, device=device, dtype=dtype))

def arange(start=None, end=None, step=1, *, device="cpu", dtype=int32):
    if end is None:
        if start is None:
            raise TypeError("arange() missing required argument 'end'")
        start, end = 0, start
    return Tensor(ap.Array.arange(start, end, step, device=device, dtype=dtype))

def rand(*shape, device="cpu", dtype=float32):
    return Tensor(ap.Array.rand(_parse_shape(shape), device=device, dtype=dtype))
