"""
math.py
-------

Math utilities for questplus.

Includes:
- shannon_entropy : entropy of a discrete distribution (0 * log 0 = 0).
- normalize : rescale a non-negative tensor to sum to one.

All functions use JAX (jax.numpy).

Examples
--------
>>> import jax.numpy as jnp
>>> from questplus.utils import math
>>> float(math.shannon_entropy(jnp.array([0.5, 0.5])))
0.6931471805599453
"""

from __future__ import annotations

from typing import Sequence

import jax.numpy as jnp
from jax.scipy.special import xlogy


def shannon_entropy(p: jnp.ndarray, axis: int | Sequence[int] | None = None) -> jnp.ndarray:
    """
    Shannon entropy H(p) = -sum p log p, in nats.

    Parameters
    ----------
    p : jnp.ndarray
        Probabilities. Any shape.
    axis : int, tuple of int or None, default=None
        Axes to sum over. None sums over every axis (scalar result).

    Returns
    -------
    jnp.ndarray
        Entropy, with ``axis`` reduced.

    Notes
    -----
    Uses xlogy so that zero-probability cells contribute exactly 0.
    """
    if axis is not None and not isinstance(axis, int):
        axis = tuple(axis)
    return -jnp.sum(xlogy(p, p), axis=axis)


def normalize(x: jnp.ndarray) -> jnp.ndarray:
    """
    Divide by the total so the tensor sums to 1.

    The caller is responsible for ensuring the total is positive and finite.
    """
    return x / jnp.sum(x)
