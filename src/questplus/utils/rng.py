"""
rng.py
------

Random number utilities for questplus.

Thin wrappers around JAX PRNG keys so that randomised stimulus selection
and simulated observers are reproducible.

Examples
--------
>>> from questplus.utils.rng import seed, split
>>> key = seed(0)
>>> k1, k2 = split(key)
"""

from __future__ import annotations

import jax
import jax.random as jr


def seed(seed_value: int) -> jax.Array:
    """
    Create a new PRNG key from an integer seed.

    Parameters
    ----------
    seed_value : int
        Seed for random number generation.

    Returns
    -------
    jax.Array
        New PRNG key.
    """
    return jr.PRNGKey(seed_value)


def split(key: jax.Array, num: int = 2):
    """
    Split a PRNG key into multiple independent keys.

    Parameters
    ----------
    key : jax.Array
        RNG key to split.
    num : int, default=2
        Number of new keys to return.

    Returns
    -------
    jax.Array
        Stacked independent PRNG keys.
    """
    return jr.split(key, num=num)


def fold_in(key: jax.Array, data: int) -> jax.Array:
    """
    Derive a key deterministically from ``key`` and an integer.

    Used to key a random choice on a counter (e.g. the trial number), so the
    same state always yields the same draw.
    """
    return jr.fold_in(key, data)
