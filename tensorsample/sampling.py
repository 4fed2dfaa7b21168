"""
Categorical (multinomial) sampling.

probs is either one distribution (K,) or a batch of them (B, K).
Internally everything is a batch: a vector becomes a single row
batch on the way in and gets its batch dim dropped on the way out,
so there is exactly one sampling path.

Per row we:
    1) normalize the weights by their sum
    2) build the CDF once (left to right cumulative sum)
    3) draw N uniforms from the row's own random stream and pick
       the smallest index i with u < cdf[i] (inverse CDF)

Every error is raised while validating, before any row is sampled.
"""

import numbers
import threading
import warnings
import numpy as np

from . import config
from .dtypes import float32, float64, index_dtype
from .errors import (
    InvalidRankError,
    DegenerateDistributionError,
    InvalidDistributionError,
    InvalidSampleCountError,
    InvalidWorkerCountError,
)
from .ops import as_tensor, sum, cumsum, reshape
from .random import check_seed, make_source
from .tensor import Tensor

__all__ = ["multinomial", "empirical_probs", "SampleRequest"]

def check_shape(shape):
    """
    Returns True if the input was a single distribution (rank 1)
    that we need to promote to a one row batch.
    """
    rank = len(shape)
    if rank not in (1, 2):
        raise InvalidRankError(
            f"probs must be 1D (one distribution) or 2D (batch of distributions), got rank {rank} with shape {tuple(shape)}"
        )
    if shape[-1] < 2:
        raise DegenerateDistributionError(
            f"Number of outcomes must be at least 2, got {shape[-1]}"
        )
    return rank == 1

def check_num_samples(num_samples):
    if isinstance(num_samples, bool) or not isinstance(num_samples, numbers.Integral):
        raise InvalidSampleCountError(f"num_samples must be a positive integer, got {num_samples!r}")
    if num_samples <= 0:
        raise InvalidSampleCountError(f"num_samples must be a positive integer, got {num_samples}")
    return int(num_samples)

class SampleRequest:
    """
    A validated call: a (B, K) float64 batch plus how to sample it
    and what shape to hand back.
    """

    def __init__(self, batch, num_samples, seed=None, normalized=False, squeeze=False, device="cpu"):
        self.batch = batch
        self.num_samples = num_samples
        self.seed = seed
        self.normalized = normalized
        self.squeeze = squeeze
        self.device = device

    @classmethod
    def from_input(cls, probs, num_samples, seed=None, normalized=False):
        probs = as_tensor(probs)
        squeeze = check_shape(probs.shape)
        if probs.dtype.kind not in "biuf":
            raise InvalidDistributionError(f"probs must hold numeric weights, got dtype {probs.dtype}")
        num_samples = check_num_samples(num_samples)
        seed = check_seed(seed)

        ### astype always copies, the callers tensor is never touched ###
        batch = probs.astype(float64)
        if squeeze:
            batch = reshape(batch, 1, -1)

        return cls(batch, num_samples, seed=seed, normalized=bool(normalized),
                   squeeze=squeeze, device=probs.device)

    @property
    def batch_size(self):
        return self.batch.shape[0]

    @property
    def num_outcomes(self):
        return self.batch.shape[1]

    @property
    def out_shape(self):
        if self.squeeze:
            return (self.num_samples,)
        return (self.batch_size, self.num_samples)

def normalize(batch, normalized=False):
    """
    Divide every row of a (B, K) float tensor by its sum.

    Rows are always renormalized, `normalized=True` only means we
    check the caller was right and warn if the row sum drifted
    further than NORMALIZED_ATOL from 1.
    """
    weights = batch.numpy()

    bad_rows = np.flatnonzero(~np.isfinite(weights).all(axis=-1))
    if bad_rows.size:
        raise InvalidDistributionError(f"Row {bad_rows[0]} of probs contains NaN or infinite weights")

    bad_rows = np.flatnonzero((weights < 0).any(axis=-1))
    if bad_rows.size:
        raise InvalidDistributionError(f"Row {bad_rows[0]} of probs contains negative weights")

    totals = sum(batch, dim=-1, keepdims=True)
    host_totals = totals.numpy().reshape(-1)

    ### Finite weights can still overflow to an infinite sum ###
    bad_rows = np.flatnonzero(~(np.isfinite(host_totals) & (host_totals > 0)))
    if bad_rows.size:
        row = bad_rows[0]
        raise InvalidDistributionError(
            f"Row {row} of probs sums to {host_totals[row]}, cannot normalize it into a distribution"
        )

    if normalized and config.WARN_UNNORMALIZED:
        drift = np.abs(host_totals - 1.0)
        if (drift > config.NORMALIZED_ATOL).any():
            row = int(np.argmax(drift))
            warnings.warn(
                f"normalized=True but row {row} of probs sums to {host_totals[row]:.6f}, renormalizing it",
                UserWarning,
            )

    return batch / totals

def _sample_row(cdf_row, last, source, num_samples):
    """
    Inverse CDF draws for one row. `last` is the highest outcome with
    non zero mass, anything past the end of a drifted CDF lands there.
    """
    u = source.uniform(num_samples)
    idx = np.searchsorted(cdf_row, u, side="right")
    return np.minimum(idx, last)

def _sample_rows(cdf, last, sources, out, num_samples, num_workers):
    """
    Fill `out[r]` for every row. With num_workers > 1 rows are handed
    out to a pool of threads, each row still reads only its own stream.
    """
    num_rows = len(sources)

    if num_workers <= 1 or num_rows <= 1:
        for r in range(num_rows):
            out[r] = _sample_row(cdf[r], last[r], sources[r], num_samples)
        return

    ### Thread safe iterator so two workers never grab the same row ###
    rows = iter(range(num_rows))
    lock = threading.Lock()
    errors = []

    def _worker_loop():
        while True:
            with lock:
                r = next(rows, None)
            if r is None:
                return
            try:
                out[r] = _sample_row(cdf[r], last[r], sources[r], num_samples)
            except Exception as e:
                ### Hand the exception back to the main thread ###
                errors.append(e)
                return

    workers = [threading.Thread(target=_worker_loop, daemon=True)
               for _ in range(min(num_workers, num_rows))]
    for t in workers:
        t.start()
    for t in workers:
        t.join()

    if errors:
        raise errors[0]

def multinomial(probs, num_samples=1, seed=None, normalized=False, num_workers=None):
    """
    Sample outcome indices from categorical distributions.

    probs: shape (K,) or (B, K), non negative weights, need not sum to 1
    num_samples: number of independent draws per distribution
    seed: optional non negative int, same seed -> same samples
    normalized: caller asserts rows already sum to 1 (checked, see `normalize`)
    num_workers: threads used to sample rows, defaults to TENSORSAMPLE_NUM_WORKERS

    returns: int32 tensor of shape (num_samples,) or (B, num_samples)
    """
    if num_workers is None:
        num_workers = config.NUM_WORKERS
    if isinstance(num_workers, bool) or not isinstance(num_workers, numbers.Integral) or num_workers < 0:
        raise InvalidWorkerCountError(f"num_workers must be a non-negative integer, got {num_workers!r}")

    request = SampleRequest.from_input(probs, num_samples, seed=seed, normalized=normalized)
    probs = normalize(request.batch, normalized=request.normalized)

    ### One CDF per row, reused for all of that rows draws ###
    cdf = cumsum(probs, dim=-1).numpy()
    weights = probs.numpy()
    last = weights.shape[-1] - 1 - np.argmax(weights[:, ::-1] > 0, axis=-1)

    ### Row r always gets child r of the seed, whatever thread samples it ###
    sources = make_source(request.seed).spawn(request.batch_size)

    out = np.empty((request.batch_size, request.num_samples), dtype=index_dtype)
    _sample_rows(cdf, last, sources, out, request.num_samples, num_workers)

    return Tensor(out.reshape(request.out_shape), device=request.device, dtype=index_dtype)

def empirical_probs(samples, num_outcomes):
    """
    Fraction of draws that landed on each outcome.
    (N,) samples -> (num_outcomes,), (B, N) samples -> (B, num_outcomes)
    """
    events = as_tensor(samples).numpy()
    squeeze = events.ndim == 1
    if squeeze:
        events = events.reshape(1, -1)

    if events.size and (events.min() < 0 or events.max() >= num_outcomes):
        raise ValueError(f"samples must be outcome indices in [0, {num_outcomes})")

    counts = np.stack([np.bincount(row, minlength=num_outcomes) for row in events])
    freqs = counts / max(events.shape[-1], 1)

    return Tensor(freqs[0] if squeeze else freqs, dtype=float32)
