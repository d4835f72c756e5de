"""
belief.py
---------

Belief state over the discretised parameter grid (prior / posterior).

A BeliefState is a dense, parameter-domain-shaped probability tensor:
every entry >= 0 and the total is 1 (within 1e-8).

Bayesian update
---------------
Given stimulus index s and observed outcome o:

    numerator[θ] = posterior[θ] * L[o, s, θ]
    Z            = Σ_θ numerator[θ]
    posterior    = numerator / Z

The new tensor is staged and only assigned after Z has been validated, so a
failed update (Z == 0 or non-finite) leaves the belief untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax.numpy as jnp

from questplus.data.domain import ParameterDomain
from questplus.errors import (
    InvalidPriorWeights,
    NumericalDegeneracy,
    ShapeInvariantViolation,
)
from questplus.utils.math import shannon_entropy

if TYPE_CHECKING:
    from questplus.model.likelihood import LikelihoodTensor

logger = logging.getLogger(__name__)

NORMALIZATION_ATOL = 1e-8


def bayes_update(values: jnp.ndarray, likelihood_slice: jnp.ndarray) -> jnp.ndarray:
    """
    Posterior after one observation, without mutating anything.

    Parameters
    ----------
    values : jnp.ndarray
        Current belief, parameter-shaped.
    likelihood_slice : jnp.ndarray
        P(observed outcome | presented stimulus, θ), same shape.

    Returns
    -------
    jnp.ndarray
        Normalised posterior.

    Raises
    ------
    ShapeInvariantViolation
        If the two tensors differ in shape.
    NumericalDegeneracy
        If the normalisation constant is zero or non-finite.
    """
    if values.shape != likelihood_slice.shape:
        raise ShapeInvariantViolation(
            f"belief shape {values.shape} != likelihood slice shape {likelihood_slice.shape}"
        )
    numerator = values * likelihood_slice
    z = jnp.sum(numerator)
    if not bool(jnp.isfinite(z)) or float(z) <= 0.0:
        raise NumericalDegeneracy(
            f"posterior normalisation constant is {float(z)!r}; the observation is "
            "incompatible with every parameter hypothesis"
        )
    return numerator / z


class BeliefState:
    """
    Probability tensor over the joint parameter grid.

    Parameters
    ----------
    parameter_domain : ParameterDomain
        Grid the belief is defined on.
    values : jnp.ndarray
        Probabilities, shape ``parameter_domain.shape``.

    Notes
    -----
    - Created by make_prior(); sessions own a private copy as posterior.
    - update() is the only mutator.
    """

    def __init__(self, parameter_domain: ParameterDomain, values: jnp.ndarray) -> None:
        values = jnp.asarray(values, dtype=jnp.float64)
        if tuple(values.shape) != parameter_domain.shape:
            raise ShapeInvariantViolation(
                f"belief values have shape {tuple(values.shape)}, "
                f"parameter domain has shape {parameter_domain.shape}"
            )
        if not bool(jnp.all(jnp.isfinite(values))) or bool(jnp.any(values < 0)):
            raise InvalidPriorWeights("belief values must be finite and non-negative")
        total = float(jnp.sum(values))
        if abs(total - 1.0) > NORMALIZATION_ATOL:
            raise InvalidPriorWeights(f"belief values sum to {total}, expected 1")
        self.parameter_domain = parameter_domain
        self._values = values

    @property
    def values(self) -> jnp.ndarray:
        """Current probability tensor (immutable jax array)."""
        return self._values

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self._values.shape)

    def copy(self) -> BeliefState:
        """Independent BeliefState over the same domain."""
        return BeliefState(self.parameter_domain, jnp.array(self._values, copy=True))

    def entropy(self) -> float:
        """Shannon entropy of the belief, in nats."""
        return float(shannon_entropy(self._values))

    def marginal(self, name: str) -> jnp.ndarray:
        """Distribution over one parameter, summing out all others."""
        axis = self.parameter_domain.axis(name)
        others = tuple(a for a in range(self._values.ndim) if a != axis)
        return jnp.sum(self._values, axis=others)

    def marginals(self) -> dict[str, jnp.ndarray]:
        """Marginal distribution of every parameter, in declaration order."""
        return {name: self.marginal(name) for name in self.parameter_domain.names}

    def update(
        self, likelihood: LikelihoodTensor, stimulus_index: int, outcome: int
    ) -> None:
        """
        Condition the belief on one observed trial, in place.

        Raises
        ------
        InvalidOutcome, UnknownStimulus
            If the indices are outside the likelihood tensor.
        NumericalDegeneracy
            If the observation has zero likelihood everywhere. The belief is
            left unchanged.
        """
        new_values = bayes_update(self._values, likelihood.slice(outcome, stimulus_index))
        self._values = new_values
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "belief updated: stimulus_index=%d outcome=%d entropy=%.6f",
                stimulus_index,
                outcome,
                self.entropy(),
            )

    def __repr__(self) -> str:
        return (
            f"BeliefState(parameters={list(self.parameter_domain.names)}, "
            f"shape={self.shape})"
        )
