"""
diagnostics.py
--------------

Posterior summaries for grid beliefs.

Provides:
- parameter_summary : mean, std, mode and quantiles of every marginal
- print_parameter_summary : human-readable version

Examples
--------
>>> summary = parameter_summary(session.posterior)
>>> print(f"mean: {summary['mean']['mean']:.2f} ± {summary['mean']['std']:.2f}")
"""

from __future__ import annotations

import jax.numpy as jnp

from questplus.posterior.belief import BeliefState
from questplus.posterior.estimate import estimate_mode


def marginal_quantile(grid: jnp.ndarray, marginal: jnp.ndarray, q: float) -> float:
    """
    Lowest grid value whose cumulative marginal mass reaches ``q``.

    The grid is sorted first, so unsorted parameter grids are handled.
    """
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"quantile must be in [0, 1], got {q}")
    order = jnp.argsort(grid)
    cdf = jnp.cumsum(marginal[order])
    # guard against cdf[-1] landing just below q through rounding
    idx = int(jnp.searchsorted(cdf, q - 1e-12, side="left"))
    idx = min(idx, grid.shape[0] - 1)
    return float(grid[order][idx])


def parameter_summary(
    belief: BeliefState,
    *,
    quantiles: tuple[float, ...] = (0.025, 0.25, 0.5, 0.75, 0.975),
) -> dict[str, dict]:
    """
    Compute summary statistics for every parameter marginal.

    Parameters
    ----------
    belief : BeliefState
        Posterior (or prior) to summarise.
    quantiles : tuple of floats, default=(0.025, 0.25, 0.5, 0.75, 0.975)

    Returns
    -------
    summary : dict[str, dict]
        For each parameter:
        - "mean": marginal expectation
        - "std": marginal standard deviation
        - "mode": value at the joint posterior mode
        - "quantiles": dict mapping quantile to grid value
    """
    joint_mode = estimate_mode(belief)
    summary = {}
    for name, grid in belief.parameter_domain.items():
        marginal = belief.marginal(name)
        mean = jnp.sum(marginal * grid)
        var = jnp.sum(marginal * (grid - mean) ** 2)
        summary[name] = {
            "mean": float(mean),
            "std": float(jnp.sqrt(jnp.maximum(var, 0.0))),
            "mode": joint_mode[name],
            "quantiles": {q: marginal_quantile(grid, marginal, q) for q in quantiles},
        }
    return summary


def print_parameter_summary(belief: BeliefState) -> None:
    """
    Print a human-readable parameter summary.

    Examples
    --------
    >>> print_parameter_summary(session.posterior)
    Parameter Summary (entropy 1.386 nats):
    ...
    """
    summary = parameter_summary(belief, quantiles=(0.025, 0.975))
    print(f"Parameter Summary (entropy {belief.entropy():.3f} nats):")
    print("=" * 60)
    for name, stats in summary.items():
        lo = stats["quantiles"][0.025]
        hi = stats["quantiles"][0.975]
        print(f"\n{name}:")
        print(f"  Mean: {stats['mean']:.4f}")
        print(f"  Std:  {stats['std']:.4f}")
        print(f"  Mode: {stats['mode']:.4f}")
        print(f"  95% interval: [{lo:.4f}, {hi:.4f}]")
