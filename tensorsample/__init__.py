from .tensor import Tensor, tensor, zeros, ones, full, arange, rand

from .ops import *
from .dtypes import *
from .errors import *
from .random import RandomSource, SeededSource, EntropySource, make_source
from .sampling import *
