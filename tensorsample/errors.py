"""
Errors raised by the sampling kernel. Every one of them is raised
while validating a call, before a single draw is made, so a call
either returns a full result or nothing at all.
"""

class SamplingError(ValueError):
    """Base class for every validation failure of the sampling kernel."""

class InvalidRankError(SamplingError):
    """Probabilities must be a vector (one distribution) or a matrix (a batch)."""

class DegenerateDistributionError(SamplingError):
    """Fewer than two outcomes along the distribution axis."""

class InvalidDistributionError(SamplingError):
    """A row cannot be normalized: negative, NaN/Inf weights or a non-positive sum."""

class InvalidSampleCountError(SamplingError):
    """num_samples must be a positive integer."""

class InvalidSeedError(SamplingError):
    """A seed must be a non-negative integer or None."""

class InvalidWorkerCountError(SamplingError):
    """num_workers must be a non-negative integer."""
