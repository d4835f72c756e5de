"""
candidates.py
-------------

Utilities for generating candidate stimulus and parameter grids.

Separation of concerns
----------------------
- Candidate generation (this module) defines *what* values are possible.
- Trial placement strategies define *which* stimulus to present next.

Examples
--------
>>> from questplus.utils.candidates import linear_candidates
>>> linear_candidates(0.0, 5.0, 1.0)
Array([0., 1., 2., 3., 4.], dtype=float64)
"""

from __future__ import annotations

import jax.numpy as jnp
import numpy as np

from questplus.data.transforms import ArrayLike
from questplus.errors import EmptyDomain


def linear_candidates(start: float, stop: float, step: float) -> jnp.ndarray:
    """
    Evenly spaced values in the half-open interval [start, stop).

    Parameters
    ----------
    start, stop : float
        Interval bounds; ``stop`` is excluded.
    step : float
        Spacing, must be non-zero.

    Returns
    -------
    jnp.ndarray
        1-D float64 grid.

    Notes
    -----
    The number of points is ``ceil((stop - start) / step)`` with a small
    tolerance, so that e.g. (0.01, 0.02, 0.01) gives exactly one point.
    """
    if step == 0:
        raise ValueError("step must be non-zero")
    n = int(np.ceil((stop - start) / step - 1e-10))
    if n <= 0:
        raise EmptyDomain(f"no values in [{start}, {stop}) with step {step}")
    return start + step * jnp.arange(n, dtype=jnp.float64)


def log_candidates(start: float, stop: float, num: int) -> jnp.ndarray:
    """
    ``num`` log-spaced values from ``start`` to ``stop`` (both included).

    Both bounds must be positive.
    """
    if start <= 0 or stop <= 0:
        raise ValueError("log-spaced candidates require positive bounds")
    if num < 1:
        raise EmptyDomain("num must be >= 1")
    return jnp.logspace(jnp.log10(start), jnp.log10(stop), num, dtype=jnp.float64)


def custom_candidates(values: ArrayLike) -> jnp.ndarray:
    """
    Wrap a user-defined list of values as a 1-D float64 grid.

    Duplicates are removed, first occurrence order preserved.
    """
    arr = np.ravel(np.asarray(values, dtype=float))
    _, first = np.unique(arr, return_index=True)
    arr = arr[np.sort(first)]
    if arr.shape[0] == 0:
        raise EmptyDomain("candidate list is empty")
    return jnp.asarray(arr, dtype=jnp.float64)
