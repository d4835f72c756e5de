"""
experiment_session.py
---------------------

QuestPlusSession orchestrates one adaptive test.

Responsibilities
----------------
1. Own the domains, the (immutable) likelihood tensor and the prior.
2. Keep the posterior BeliefState and the TrialHistory.
3. Delegate stimulus choice to a TrialPlacement strategy.
4. Reduce the posterior to point estimates on demand.

Lifecycle
---------
    session = QuestPlusSession(...)
    while caller_wants_more_trials:
        x = session.next_stimulus()
        outcome = present_and_collect(x)        # outside questplus
        session.update(x, outcome)
    session.estimate()

There is no stopping rule: the caller decides when the session ends.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, Mapping

import jax.numpy as jnp

from questplus.data.dataset import TrialHistory, TrialRecord
from questplus.data.domain import (
    ParameterDomain,
    StimulusDomain,
    make_parameter_domain,
    make_stimulus_domain,
)
from questplus.data.transforms import StimScale
from questplus.errors import ShapeInvariantViolation
from questplus.model.likelihood import LikelihoodTensor, build_likelihood
from questplus.model.prior import make_prior
from questplus.model.psychometric import PsychometricModel, get_model
from questplus.posterior.belief import BeliefState
from questplus.posterior.estimate import ParamEstimationMethod, estimate
from questplus.trial_placement.base import TrialPlacement
from questplus.trial_placement.min_entropy import (
    MinEntropyPlacement,
    MinNEntropyPlacement,
    PlacementConfig,
)

logger = logging.getLogger(__name__)


class StimSelectionMethod(str, Enum):
    """Stimulus selection criterion."""

    MIN_ENTROPY = "min_entropy"
    MIN_N_ENTROPY = "min_n_entropy"


def make_placement(
    method: StimSelectionMethod | str, config: PlacementConfig | None = None
) -> TrialPlacement:
    """Instantiate the TrialPlacement for a selection method."""
    method = StimSelectionMethod(method)
    if method is StimSelectionMethod.MIN_ENTROPY:
        return MinEntropyPlacement()
    return MinNEntropyPlacement.from_config(config or PlacementConfig())


class QuestPlusSession:
    """
    One QUEST+ adaptive-testing run.

    Parameters
    ----------
    stimulus_domain : StimulusDomain
    parameter_domain : ParameterDomain
    likelihood : LikelihoodTensor
        Built from the same two domains.
    prior : BeliefState
        Built on the same parameter domain. The session keeps its own copy.
    selection_method : StimSelectionMethod or str, default="min_entropy"
    estimation_method : ParamEstimationMethod or str, default="mode"
        Default method for estimate().
    placement_config : PlacementConfig, optional
        Settings for "min_n_entropy".

    Attributes
    ----------
    posterior : BeliefState
        Current belief; starts as a copy of the prior.
    history : TrialHistory
        Completed trials, oldest first.

    Raises
    ------
    ShapeInvariantViolation
        If the likelihood or prior were built on different domains.
    """

    def __init__(
        self,
        stimulus_domain: StimulusDomain,
        parameter_domain: ParameterDomain,
        likelihood: LikelihoodTensor,
        prior: BeliefState,
        selection_method: StimSelectionMethod | str = StimSelectionMethod.MIN_ENTROPY,
        estimation_method: ParamEstimationMethod | str = ParamEstimationMethod.MODE,
        *,
        placement_config: PlacementConfig | None = None,
    ) -> None:
        if not likelihood.stimulus_domain.matches(stimulus_domain):
            raise ShapeInvariantViolation(
                "likelihood tensor was built on a different stimulus domain"
            )
        if not likelihood.parameter_domain.matches(parameter_domain):
            raise ShapeInvariantViolation(
                "likelihood tensor was built on a different parameter domain"
            )
        if not prior.parameter_domain.matches(parameter_domain):
            raise ShapeInvariantViolation("prior was built on a different parameter domain")

        self.stimulus_domain = stimulus_domain
        self.parameter_domain = parameter_domain
        self.likelihood = likelihood
        self.selection_method = StimSelectionMethod(selection_method)
        self.estimation_method = ParamEstimationMethod(estimation_method)
        self.placement = make_placement(self.selection_method, placement_config)

        self.prior = prior.copy()
        self.posterior = prior.copy()
        self.history = TrialHistory()

        logger.info(
            "QUEST+ session: %d stimuli, parameters %s (grid %s), %d outcomes, "
            "selection=%s, estimation=%s",
            len(stimulus_domain),
            list(parameter_domain.names),
            parameter_domain.shape,
            likelihood.outcome_count,
            self.selection_method.value,
            self.estimation_method.value,
        )

    @classmethod
    def from_model(
        cls,
        stimuli: Any,
        parameters: Mapping[str, Any],
        model: PsychometricModel | str = "norm_cdf",
        prior_weights: Mapping[str, Any] | None = None,
        *,
        stim_scale: StimScale | str = StimScale.LINEAR,
        **kwargs: Any,
    ) -> QuestPlusSession:
        """
        Build domains, likelihood and prior in one call.

        Parameters
        ----------
        stimuli : array-like
            Candidate stimulus values.
        parameters : mapping of name -> array-like
            Parameter grids.
        model : PsychometricModel or str, default="norm_cdf"
            Model instance or registered model name.
        prior_weights : mapping of name -> array-like, optional
            Unnormalised prior weights per parameter.
        stim_scale : StimScale or str, default="linear"
        **kwargs
            Forwarded to the constructor (selection_method, ...).

        Examples
        --------
        >>> session = QuestPlusSession.from_model(
        ...     stimuli=range(50),
        ...     parameters={
        ...         "mean": [7, 8],
        ...         "sd": [7, 7.5],
        ...         "lower_asymptote": 0.5,
        ...         "lapse_rate": 0.01,
        ...     },
        ... )
        """
        if isinstance(model, str):
            model = get_model(model)
        stimulus_domain = make_stimulus_domain(list(stimuli), scale=stim_scale)
        parameter_domain = make_parameter_domain(parameters)
        likelihood = build_likelihood(stimulus_domain, parameter_domain, model)
        prior = make_prior(parameter_domain, prior_weights)
        return cls(stimulus_domain, parameter_domain, likelihood, prior, **kwargs)

    # ------------------------------------------------------------------
    # PLACEMENT INTERFACE
    # ------------------------------------------------------------------
    def next_stimulus_index(self) -> int:
        """Index of the stimulus to present next."""
        return self.placement.propose(self.posterior, self.likelihood, self.history)

    def next_stimulus(self) -> float:
        """
        Stimulus value to present next.

        Calling this repeatedly without an intervening update() returns the
        same stimulus.
        """
        return self.stimulus_domain[self.next_stimulus_index()]

    @property
    def expected_entropies(self) -> jnp.ndarray | None:
        """Expected entropy per stimulus from the last selection, or None."""
        return self.placement.last_scores

    # ------------------------------------------------------------------
    # UPDATE INTERFACE
    # ------------------------------------------------------------------
    def update(self, stimulus: float | int, outcome: int, *, by_index: bool = False) -> None:
        """
        Condition the posterior on an observed trial.

        Parameters
        ----------
        stimulus : float or int
            Presented stimulus value, or its index when ``by_index=True``.
        outcome : int
            Observed outcome index.
        by_index : bool, default=False
            Interpret ``stimulus`` as an index into the stimulus domain.

        Raises
        ------
        UnknownStimulus
            If the value/index is not in the stimulus domain.
        InvalidOutcome
            If ``outcome`` is out of range.
        NumericalDegeneracy
            If the observation is impossible under every hypothesis. Neither
            the posterior nor the history is modified.
        """
        if by_index:
            stimulus_index = self.likelihood.check_stimulus_index(int(stimulus))
        else:
            stimulus_index = self.stimulus_domain.index_of(stimulus)

        self.posterior.update(self.likelihood, stimulus_index, outcome)
        self.history.add_trial(stimulus_index, self.stimulus_domain[stimulus_index], outcome)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "trial %d: stimulus=%g outcome=%d entropy=%.6f",
                len(self.history),
                self.stimulus_domain[stimulus_index],
                outcome,
                self.posterior.entropy(),
            )

    def replay(self, trials: Iterable[TrialRecord | tuple[int, int]]) -> None:
        """
        Apply recorded trials in order.

        Parameters
        ----------
        trials : iterable
            TrialRecords or (stimulus_index, outcome) pairs.
        """
        for trial in trials:
            if isinstance(trial, TrialRecord):
                self.update(trial.stimulus_index, trial.outcome, by_index=True)
            else:
                stimulus_index, outcome = trial
                self.update(stimulus_index, outcome, by_index=True)

    # ------------------------------------------------------------------
    # ESTIMATION
    # ------------------------------------------------------------------
    def estimate(self, method: ParamEstimationMethod | str | None = None) -> dict[str, float]:
        """
        Point estimate of every parameter.

        Parameters
        ----------
        method : ParamEstimationMethod or str, optional
            Defaults to the session's estimation_method.
        """
        return estimate(self.posterior, method or self.estimation_method)

    @property
    def entropy(self) -> float:
        """Entropy of the current posterior, in nats."""
        return self.posterior.entropy()

    def __len__(self) -> int:
        return len(self.history)

    def __repr__(self) -> str:
        return (
            f"QuestPlusSession(model={self.likelihood.model!r}, "
            f"n_stimuli={len(self.stimulus_domain)}, "
            f"parameters={list(self.parameter_domain.names)}, trials={len(self.history)})"
        )
