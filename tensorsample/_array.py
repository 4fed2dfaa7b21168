"""
Numpy lives on the CPU, Cupy lives on the GPU.

Array hides which of the two holds our data, so the rest of
the library can ask for a shape, a dtype or a device and
grab the right backend (`xp`) without caring where it sits.
"""

import warnings
import numpy as np

try:
    import cupy as cp
    NUM_AVAIL_GPUS = cp.cuda.runtime.getDeviceCount()
    CUDA_AVAILABLE = NUM_AVAIL_GPUS > 0
except ImportError:
    cp = None
    CUDA_AVAILABLE = False
    NUM_AVAIL_GPUS = 0
    warnings.warn("Cupy not installed, all arrays will live on the CPU")
except RuntimeError:
    ### Cupy is installed but there is no driver/GPU to talk to ###
    CUDA_AVAILABLE = False
    NUM_AVAIL_GPUS = 0

def _is_ndarray(data):
    if isinstance(data, np.ndarray):
        return True
    return CUDA_AVAILABLE and isinstance(data, cp.ndarray)

def _parse_device(device):
    """
    Split `cpu`, `cuda`, `cuda:{idx}` into (device, idx)
    """
    if device == "cpu":
        return "cpu", None

    if "cuda" not in device:
        raise RuntimeError(f"Unknown device {device}, expected cpu or cuda:{{idx}}")

    if not CUDA_AVAILABLE:
        raise RuntimeError("CUDA Not supported, check cupy installation")

    idx = int(device.split(":")[-1]) if ":" in device else 0

    ### Make sure our tgt device is available ###
    if idx + 1 > NUM_AVAIL_GPUS:
        raise RuntimeError(f"cuda:{idx} does not exist")

    return "cuda", idx

class Array:

    def __init__(self, data, device=None, dtype=None):

        ### If input is already Array Type, grab its data (and keep its dtype) ###
        if isinstance(data, Array):
            if dtype is None:
                dtype = str(data.dtype)
            data = data._array

        ### Lists, tuples, scalars all go through numpy first ###
        if not _is_ndarray(data):
            data = np.array(data)

        ### No device given, we keep the data where it already is ###
        if device is None:
            device = "cpu" if isinstance(data, np.ndarray) else f"cuda:{data.device.id}"
        tgt_device, tgt_device_idx = _parse_device(device)

        ### Figure out dtype, float64 -> float32 and int64 -> int32 like torch defaults ###
        if dtype is None:
            current_dtype = str(data.dtype)
            if current_dtype == "float64":
                dtype = "float32"
            elif current_dtype == "int64":
                dtype = "int32"
            else:
                dtype = current_dtype
        else:
            dtype = str(np.dtype(dtype))

        self._array = self._move_array(data, tgt_device, tgt_device_idx)

        ### Cast on the correct GPU, cupy ops default to cuda:0 otherwise ###
        if str(self._array.dtype) != dtype:
            if tgt_device == "cuda":
                with cp.cuda.Device(tgt_device_idx):
                    self._array = self._array.astype(dtype)
            else:
                self._array = self._array.astype(dtype)

        ### Cache frequently accessed attributes ###
        self._xp = np if isinstance(self._array, np.ndarray) else cp
        self._dev_id = None if self._xp is np else self._array.device.id
        self._device = "cpu" if self._xp is np else f"cuda:{self._dev_id}"

    @property
    def xp(self):
        return self._xp

    @property
    def device(self):
        return self._device

    @property
    def dtype(self):
        return self._array.dtype

    @property
    def shape(self):
        return self._array.shape

    @property
    def ndim(self):
        return self._array.ndim

    @property
    def size(self):
        return self._array.size

    def astype(self, dtype):
        """
        Always a copy (even for the same dtype), the original is left untouched
        """
        return Array(self._run(self._array.astype, dtype), device=self._device, dtype=dtype)

    def to(self, device):

        ### "cuda" defaults to first gpu ###
        if device == "cuda":
            device = "cuda:0"

        ### if our tgt device is the same as current device, theres nothing to do ###
        if device == self._device:
            return self
        return Array(self._array, device=device, dtype=self.dtype)

    @staticmethod
    def _move_array(arr, tgt_dev, tgt_dev_idx=None):
        if tgt_dev == "cuda":
            if isinstance(arr, np.ndarray) or arr.device.id != tgt_dev_idx:
                with cp.cuda.Device(tgt_dev_idx):
                    return cp.asarray(arr)
            return arr
        if isinstance(arr, np.ndarray):
            return arr
        return cp.asnumpy(arr)

    def asnumpy(self):
        if self._device == "cpu":
            return self._array
        return cp.asnumpy(self._array)

    def _run(self, func, *args, **kwargs):
        """
        Run an xp function under the right device context
        """
        if self._xp is np:
            return func(*args, **kwargs)
        with cp.cuda.Device(self._dev_id):
            return func(*args, **kwargs)

    def _wrap(self, result):
        ### Results keep whatever dtype numpy/cupy gave them, no float32 downcast ###
        return Array(result, device=self._device, dtype=str(result.dtype))

    def sum(self, axis=None, keepdims=False):
        return self._wrap(self._run(self._xp.sum, self._array, axis=axis, keepdims=keepdims))

    def cumsum(self, axis=None):
        return self._wrap(self._run(self._xp.cumsum, self._array, axis=axis))

    def reshape(self, shape):
        return self._wrap(self._run(self._array.reshape, shape))

    def __truediv__(self, other):
        if isinstance(other, Array):
            if other.device != self._device:
                raise RuntimeError(f"Expected all tensors to be on the "
                 f"same device, but found at least two devices, "
                 f"{self._device} and {other.device}!")
            other = other._array
        return self._wrap(self._run(self._xp.true_divide, self._array, other))

    def __len__(self):
        return len(self._array)

    def __repr__(self):
        data_str = np.array2string(
            self.asnumpy(),
            separator=" ",
            precision=5,
            floatmode="fixed",
            max_line_width=80
        )

        ### Indent continuation lines (like torch does) ###
        lines = data_str.split("\n")
        if len(lines) > 1:
            indent = " " * len("Array(")
            data_str = lines[0] + "\n" + "\n".join(indent + line for line in lines[1:])

        device_info = f", device='{self.device}'" if "cuda" in self.device else ""
        return f"Array({data_str}, dtype={self.dtype}{device_info})"

    def __getitem__(self, idx):
        if isinstance(idx, tuple):
            idx = tuple(i._array if isinstance(i, Array) else i for i in idx)
        elif isinstance(idx, Array):
            idx = idx._array
        return Array(self._xp.asarray(self._run(self._array.__getitem__, idx)),
                     device=self._device, dtype=self.dtype)

    def __setitem__(self, idx, value):
        if isinstance(value, Array):
            value = value._array
        self._run(self._array.__setitem__, idx, value)

    @classmethod
    def _wrap_factory(cls, xp_func, *args, device="cpu", dtype="float32", **kwargs):
        """
        Wrap numpy/cupy factory functions (zeros, ones, arange, etc.)
        """
        tgt_device, tgt_device_idx = _parse_device(device)

        if tgt_device == "cuda":
            with cp.cuda.Device(tgt_device_idx):
                arr = getattr(cp, xp_func)(*args, **kwargs)
        else:
            arr = getattr(np, xp_func)(*args, **kwargs)

        return cls(arr, device=device, dtype=dtype)

    @classmethod
    def zeros(cls, shape, device="cpu", dtype="float32"):
        return cls._wrap_factory("zeros", shape, device=device, dtype=dtype)

    @classmethod
    def ones(cls, shape, device="cpu", dtype="float32"):
        return cls._wrap_factory("ones", shape, device=device, dtype=dtype)

    @classmethod
    def full(cls, shape, fill_value, device="cpu", dtype="float32"):
        return cls._wrap_factory("full", shape, fill_value, device=device, dtype=dtype)

    @classmethod
    def arange(cls, start, end=None, step=1, device="cpu", dtype="int32"):
        if end is None:
            end = start
            start = 0
        return cls._wrap_factory("arange", start, end, step, device=device, dtype=dtype)

    @classmethod
    def rand(cls, shape, device="cpu", dtype="float32"):
        ### Unseeded convenience values, the sampler has its own random sources ###
        ### Always drawn on the host and moved, so cpu and cuda agree on the stream ###
        return cls(np.random.random_sample(shape), device=device, dtype=dtype)
