"""
prior.py
--------

Prior construction over the discretised parameter grid.

The joint prior is the outer product of independent per-parameter weight
vectors:

    prior[i_1, ..., i_k] ∝ w_1[i_1] * ... * w_k[i_k]

Each vector is normalised on its own, and the joint tensor is renormalised
once more to absorb floating-point error.

Connections
-----------
- QuestPlusSession copies the prior to initialise its posterior.
- Parameters without supplied weights get a uniform prior.
"""

from __future__ import annotations

from typing import Any, Mapping

import jax.numpy as jnp

from questplus.data.domain import ParameterDomain
from questplus.errors import InvalidPriorWeights, ParameterLengthMismatch, ParameterNotFound
from questplus.posterior.belief import BeliefState
from questplus.utils.math import normalize


def _normalized_weights(name: str, grid: jnp.ndarray, weights: Any | None) -> jnp.ndarray:
    if weights is None:
        return jnp.full(grid.shape, 1.0 / grid.shape[0], dtype=jnp.float64)

    w = jnp.ravel(jnp.asarray(weights, dtype=jnp.float64))
    if w.shape[0] != grid.shape[0]:
        raise ParameterLengthMismatch(name, grid.shape[0], w.shape[0])
    if not bool(jnp.all(jnp.isfinite(w))) or bool(jnp.any(w < 0)):
        raise InvalidPriorWeights(f"prior weights for '{name}' must be finite and >= 0")
    total = float(jnp.sum(w))
    if total <= 0:
        raise InvalidPriorWeights(f"prior weights for '{name}' sum to zero")
    return w / total


def make_prior(
    parameter_domain: ParameterDomain,
    weights: Mapping[str, Any] | None = None,
) -> BeliefState:
    """
    Build the joint prior BeliefState.

    Parameters
    ----------
    parameter_domain : ParameterDomain
    weights : mapping of name -> array-like, optional
        Unnormalised weights per parameter. Parameters not listed get
        uniform weights.

    Returns
    -------
    BeliefState

    Raises
    ------
    ParameterNotFound
        If ``weights`` names a parameter that is not in the domain.
    ParameterLengthMismatch
        If a weight vector's length differs from its grid length.
    InvalidPriorWeights
        If a weight vector is negative, non-finite, or sums to zero.

    Examples
    --------
    >>> domain = make_parameter_domain({"mean": [7, 8], "sd": [7, 7.5]})
    >>> prior = make_prior(domain, {"mean": [1.0, 3.0]})
    >>> prior.marginal("mean")
    Array([0.25, 0.75], dtype=float64)
    """
    weights = dict(weights or {})
    unknown = set(weights) - set(parameter_domain.names)
    if unknown:
        raise ParameterNotFound(unknown, parameter_domain.names)

    joint = jnp.ones((), dtype=jnp.float64)
    for name, grid in parameter_domain.items():
        w = _normalized_weights(name, grid, weights.get(name))
        joint = joint[..., None] * w

    return BeliefState(parameter_domain, normalize(joint))
