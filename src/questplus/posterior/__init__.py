"""
posterior
=========

Belief state over the parameter grid, point estimates, and diagnostics.

This subpackage provides:
- BeliefState: normalised probability tensor (prior or posterior)
- bayes_update: one-observation Bayesian update, without side effects
- ParamEstimationMethod, estimate, estimate_mode, estimate_mean
- diagnostics: parameter_summary / print_parameter_summary
"""

from .belief import BeliefState, bayes_update
from .diagnostics import marginal_quantile, parameter_summary, print_parameter_summary
from .estimate import (
    ParamEstimationMethod,
    estimate,
    estimate_mean,
    estimate_mode,
    mode_index,
)

__all__ = [
    # Belief
    "BeliefState",
    "bayes_update",
    # Estimation
    "ParamEstimationMethod",
    "estimate",
    "estimate_mode",
    "estimate_mean",
    "mode_index",
    # Diagnostics
    "parameter_summary",
    "print_parameter_summary",
    "marginal_quantile",
]
