"""
min_entropy.py
--------------

Expected-entropy placement strategies.

- MinEntropyPlacement: the stimulus with the lowest expected posterior
  entropy; ties go to the lowest stimulus index. Fully deterministic.
- MinNEntropyPlacement: a random stimulus among the n lowest, which avoids
  presenting the same intensity over and over. The random key is derived
  from the seed and the trial count, so identical state gives identical
  proposals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import jax.random as jr

from questplus.acquisition.expected_entropy import expected_entropy
from questplus.acquisition.optimize import optimize_acqf_discrete
from questplus.errors import EmptyDomain
from questplus.trial_placement.base import TrialPlacement
from questplus.utils.rng import fold_in, seed

if TYPE_CHECKING:
    import jax.numpy as jnp

    from questplus.data.dataset import TrialHistory
    from questplus.model.likelihood import LikelihoodTensor
    from questplus.posterior.belief import BeliefState

logger = logging.getLogger(__name__)


def _score(posterior: BeliefState, likelihood: LikelihoodTensor) -> jnp.ndarray:
    if len(likelihood.stimulus_domain) == 0:
        raise EmptyDomain("stimulus domain has no candidates")
    return expected_entropy(posterior.values, likelihood.values)


class MinEntropyPlacement(TrialPlacement):
    """
    Choose argmin_s E[H | s].

    Examples
    --------
    >>> placement = MinEntropyPlacement()
    >>> idx = placement.propose(posterior, likelihood, history)
    """

    def propose(
        self,
        posterior: BeliefState,
        likelihood: LikelihoodTensor,
        history: TrialHistory,
    ) -> int:
        scores = _score(posterior, likelihood)
        self.last_scores = scores
        best, values = optimize_acqf_discrete(scores, q=1)
        idx = int(best[0])
        logger.debug("min_entropy: stimulus_index=%d expected_entropy=%.6f", idx, float(values[0]))
        return idx


@dataclass
class PlacementConfig:
    """
    Configuration for randomised stimulus selection.

    Settings of MinNEntropyPlacement (session selection method
    "min_n_entropy"), validated on construction.

    Attributes
    ----------
    n : int
        Number of lowest-entropy stimuli to choose from.
    max_consecutive_reps : int | None
        Maximum number of times in a row the same stimulus may be selected.
        None means unlimited.
    seed : int
        Seed for the selection PRNG.

    Examples
    --------
    >>> config = PlacementConfig(n=3, max_consecutive_reps=2, seed=42)
    """

    n: int = 5
    max_consecutive_reps: int | None = 2
    seed: int = 0

    def __post_init__(self):
        """Validate configuration."""
        if self.n <= 0:
            raise ValueError(f"n must be positive, got {self.n}")
        if self.max_consecutive_reps is not None and self.max_consecutive_reps <= 0:
            raise ValueError(
                f"max_consecutive_reps must be positive or None, got {self.max_consecutive_reps}"
            )


class MinNEntropyPlacement(TrialPlacement):
    """
    Random choice among the ``n`` stimuli with the lowest expected entropy.

    Parameters
    ----------
    n : int, default=5
        Size of the candidate set.
    max_consecutive_reps : int or None, default=2
        A stimulus already presented this many times in a row is removed from
        the candidate set (when others are available). None disables the rule.
    seed_value : int, default=0
        Seed of the base PRNG key.

    Raises
    ------
    ValueError
        If the settings are rejected by PlacementConfig.
    """

    def __init__(
        self, n: int = 5, max_consecutive_reps: int | None = 2, seed_value: int = 0
    ) -> None:
        super().__init__()
        self.config = PlacementConfig(
            n=n, max_consecutive_reps=max_consecutive_reps, seed=seed_value
        )
        self.n = n
        self.max_consecutive_reps = max_consecutive_reps
        self._key = seed(seed_value)

    @classmethod
    def from_config(cls, config: PlacementConfig) -> MinNEntropyPlacement:
        return cls(
            n=config.n,
            max_consecutive_reps=config.max_consecutive_reps,
            seed_value=config.seed,
        )

    def _blocked(self, history: TrialHistory) -> int | None:
        """Stimulus index that hit the repetition limit, if any."""
        k = self.max_consecutive_reps
        if k is None or len(history) < k:
            return None
        recent = history.stimulus_indices[-k:]
        return recent[0] if len(set(recent)) == 1 else None

    def propose(
        self,
        posterior: BeliefState,
        likelihood: LikelihoodTensor,
        history: TrialHistory,
    ) -> int:
        scores = _score(posterior, likelihood)
        self.last_scores = scores
        order, _ = optimize_acqf_discrete(scores, q=int(scores.shape[0]))
        ranked = [int(i) for i in order]

        blocked = self._blocked(history)
        if blocked is not None and len(ranked) > 1:
            ranked = [i for i in ranked if i != blocked]
        candidates = ranked[: self.n]

        key = fold_in(self._key, len(history))
        idx = candidates[int(jr.randint(key, (), 0, len(candidates)))]
        logger.debug(
            "min_n_entropy: candidates=%s blocked=%s stimulus_index=%d",
            candidates,
            blocked,
            idx,
        )
        return idx
