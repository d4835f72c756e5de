"""
transforms.py
-------------

Stimulus scale transformations.

Stimulus domains hold *physical* intensities (what the caller presents).
The psychometric model may operate on a transformed axis:

- linear  : x
- log10   : log10(x)
- decibel : 20 * log10(x)

functions:
- to_model_scale(values, scale): physical intensities -> model axis
- from_model_scale(values, scale): model axis -> physical intensities
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Union

import jax.numpy as jnp
import numpy as np

from questplus.errors import InvalidStimulusValue

ArrayLike = Union[Sequence[float], np.ndarray, jnp.ndarray]


class StimScale(str, Enum):
    """Scale on which the psychometric model sees stimulus intensities."""

    LINEAR = "linear"
    LOG10 = "log10"
    DECIBEL = "decibel"


def to_model_scale(values: ArrayLike, scale: StimScale | str = StimScale.LINEAR) -> jnp.ndarray:
    """
    Map physical stimulus intensities onto the model axis.

    Parameters
    ----------
    values : array-like
        Physical intensities.
    scale : StimScale or str, default="linear"

    Returns
    -------
    jnp.ndarray
        Intensities on the model axis (float64).

    Raises
    ------
    InvalidStimulusValue
        If a logarithmic scale is requested for non-positive intensities.
    """
    scale = StimScale(scale)
    x = jnp.asarray(values, dtype=jnp.float64)
    if scale is StimScale.LINEAR:
        return x
    if bool(jnp.any(x <= 0)):
        raise InvalidStimulusValue(
            f"stimulus values must be > 0 on the '{scale.value}' scale"
        )
    if scale is StimScale.LOG10:
        return jnp.log10(x)
    return 20.0 * jnp.log10(x)


def from_model_scale(values: ArrayLike, scale: StimScale | str = StimScale.LINEAR) -> jnp.ndarray:
    """Inverse of to_model_scale()."""
    scale = StimScale(scale)
    y = jnp.asarray(values, dtype=jnp.float64)
    if scale is StimScale.LINEAR:
        return y
    if scale is StimScale.LOG10:
        return 10.0**y
    return 10.0 ** (y / 20.0)
