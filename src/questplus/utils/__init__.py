"""
utils
=====

Shared utility functions and helpers for questplus.

This subpackage provides:
- candidates : functions for generating stimulus and parameter grids.
- math : entropy and normalisation helpers.
- rng : random number handling for reproducibility.
"""

from .candidates import custom_candidates, linear_candidates, log_candidates
from .math import normalize, shannon_entropy
from .rng import fold_in, seed, split

__all__ = [
    # candidates
    "linear_candidates",
    "log_candidates",
    "custom_candidates",
    # math
    "shannon_entropy",
    "normalize",
    # rng
    "seed",
    "split",
    "fold_in",
]
