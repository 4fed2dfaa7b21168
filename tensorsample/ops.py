from .tensor import Tensor

### Functional Access to Tensor Methods ###
def reshape(input, *shape):
    return input.reshape(*shape)

def sum(input, dim=None, keepdims=False):
    return input.sum(dim, keepdims)

def cumsum(input, dim=None):
    return input.cumsum(dim)

def as_tensor(input, device=None, dtype=None):
    """
    Lists, numpy/cupy arrays and tensors all come back as a Tensor.
    Tensors already on the requested device/dtype are returned as is.
    """
    if isinstance(input, Tensor) and device is None and dtype is None:
        return input

    ### Arrays keep their own precision, only plain python data gets the float32 default ###
    if dtype is None and not isinstance(input, Tensor) and hasattr(input, "dtype"):
        dtype = str(input.dtype)
    return Tensor(input, device=device, dtype=dtype)
