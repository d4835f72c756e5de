"""
estimate.py
-----------

Point estimates of the psychometric parameters from a BeliefState.

- mode : grid values at the most probable cell. Ties resolve to the
         lexicographically smallest index tuple (first maximum in C order).
- mean : per-parameter expectation of the marginal distribution. Need not
         coincide with any grid cell.
"""

from __future__ import annotations

from enum import Enum

import jax.numpy as jnp

from questplus.posterior.belief import BeliefState


class ParamEstimationMethod(str, Enum):
    """How to reduce the posterior to one value per parameter."""

    MODE = "mode"
    MEAN = "mean"


def mode_index(belief: BeliefState) -> tuple[int, ...]:
    """Joint grid index of the posterior mode."""
    # argmax returns the first maximum of the C-ordered flat view
    flat = int(jnp.argmax(jnp.ravel(belief.values)))
    return tuple(int(i) for i in jnp.unravel_index(flat, belief.shape))


def estimate_mode(belief: BeliefState) -> dict[str, float]:
    """Grid values at the posterior mode, keyed by parameter name."""
    return belief.parameter_domain.values_at(mode_index(belief))


def estimate_mean(belief: BeliefState) -> dict[str, float]:
    """Posterior mean of each parameter, keyed by parameter name."""
    return {
        name: float(jnp.sum(belief.marginal(name) * grid))
        for name, grid in belief.parameter_domain.items()
    }


def estimate(
    belief: BeliefState, method: ParamEstimationMethod | str = ParamEstimationMethod.MODE
) -> dict[str, float]:
    """
    Point estimate with the requested method.

    Parameters
    ----------
    belief : BeliefState
    method : ParamEstimationMethod or {"mode", "mean"}, default="mode"

    Returns
    -------
    dict[str, float]
        One value per parameter, in declaration order.
    """
    method = ParamEstimationMethod(method)
    if method is ParamEstimationMethod.MODE:
        return estimate_mode(belief)
    return estimate_mean(belief)
