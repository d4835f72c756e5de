"""
likelihood.py
-------------

Precomputed likelihood tensor P(outcome | stimulus, parameters).

Layout
------
values[o, s, i_1, ..., i_k] = P(outcome o | stimulus s, params (i_1, ..., i_k))

- axis 0 : outcome
- axis 1 : stimulus index
- axes 2.. : parameter grids, in ParameterDomain declaration order

The tensor is built once per session by evaluating the psychometric model on
the broadcast grid (no per-cell Python loop) and is read-only afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import jax.numpy as jnp

from questplus.data.domain import ParameterDomain, StimulusDomain
from questplus.errors import (
    InvalidOutcome,
    OutcomeProbabilityInvalid,
    ParameterNotFound,
    ShapeInvariantViolation,
    UnknownStimulus,
)
from questplus.model.psychometric import PsychometricModel

logger = logging.getLogger(__name__)

PROBABILITY_ATOL = 1e-8


@dataclass(frozen=True, eq=False)
class LikelihoodTensor:
    """
    Immutable likelihood tensor plus the domains it was built on.

    Attributes
    ----------
    values : jnp.ndarray, shape (outcome_count, n_stimuli, *parameter_shape)
    stimulus_domain : StimulusDomain
    parameter_domain : ParameterDomain
    model : PsychometricModel
    """

    values: jnp.ndarray
    stimulus_domain: StimulusDomain
    parameter_domain: ParameterDomain
    model: PsychometricModel

    def __post_init__(self) -> None:
        expected = (
            self.outcome_count,
            len(self.stimulus_domain),
            *self.parameter_domain.shape,
        )
        if tuple(self.values.shape) != expected:
            raise ShapeInvariantViolation(
                f"likelihood tensor has shape {tuple(self.values.shape)}, expected {expected}"
            )

    @property
    def outcome_count(self) -> int:
        return self.model.outcome_count

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self.values.shape)

    def check_outcome(self, outcome: int) -> int:
        if not 0 <= int(outcome) < self.outcome_count:
            raise InvalidOutcome(
                f"outcome {outcome} out of range [0, {self.outcome_count})"
            )
        return int(outcome)

    def check_stimulus_index(self, stimulus_index: int) -> int:
        n = len(self.stimulus_domain)
        if not 0 <= int(stimulus_index) < n:
            raise UnknownStimulus(f"stimulus index {stimulus_index} out of range [0, {n})")
        return int(stimulus_index)

    def slice(self, outcome: int, stimulus_index: int) -> jnp.ndarray:
        """P(outcome | stimulus, ·) over the parameter grid."""
        o = self.check_outcome(outcome)
        s = self.check_stimulus_index(stimulus_index)
        return self.values[o, s]


def build_likelihood(
    stimulus_domain: StimulusDomain,
    parameter_domain: ParameterDomain,
    model: PsychometricModel,
) -> LikelihoodTensor:
    """
    Evaluate ``model`` over every (stimulus, parameter assignment) pair.

    Parameters
    ----------
    stimulus_domain : StimulusDomain
    parameter_domain : ParameterDomain
        Must declare exactly the model's parameter names (any order).
    model : PsychometricModel

    Returns
    -------
    LikelihoodTensor

    Raises
    ------
    ParameterNotFound
        If the domain and the model disagree on parameter names.
    InvalidDistributionParameter
        Propagated from the model (e.g. sd <= 0 somewhere on the grid).
    OutcomeProbabilityInvalid
        If any returned probability is negative/non-finite or an outcome
        vector does not sum to 1.
    ShapeInvariantViolation
        If the model returns a tensor of the wrong shape.
    """
    names = set(parameter_domain.names)
    expected_names = set(model.parameter_names)
    if names != expected_names:
        raise ParameterNotFound(names ^ expected_names, expected_names)

    n_params = parameter_domain.ndim
    x = stimulus_domain.model_values.reshape((-1,) + (1,) * n_params)
    grids = parameter_domain.broadcast_grids(leading_dims=1)

    raw = model.respond(x, **grids)
    target = (model.outcome_count, len(stimulus_domain), *parameter_domain.shape)
    try:
        values = jnp.broadcast_to(jnp.asarray(raw, dtype=jnp.float64), target)
    except ValueError as exc:
        raise ShapeInvariantViolation(
            f"model returned shape {tuple(jnp.shape(raw))}, cannot broadcast to {target}"
        ) from exc

    if not bool(jnp.all(jnp.isfinite(values))):
        raise OutcomeProbabilityInvalid("model returned non-finite probabilities")
    if bool(jnp.any(values < 0)):
        raise OutcomeProbabilityInvalid("model returned negative probabilities")
    totals = jnp.sum(values, axis=0)
    worst = float(jnp.max(jnp.abs(totals - 1.0)))
    if worst > PROBABILITY_ATOL:
        raise OutcomeProbabilityInvalid(
            f"outcome probabilities do not sum to 1 (max deviation {worst:.3g})"
        )

    logger.debug(
        "built %s likelihood tensor with shape %s (%d cells)",
        type(model).__name__,
        target,
        values.size,
    )
    return LikelihoodTensor(
        values=values,
        stimulus_domain=stimulus_domain,
        parameter_domain=parameter_domain,
        model=model,
    )
