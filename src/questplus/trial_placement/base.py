"""
base.py
-------

Abstract base class for stimulus selection strategies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import jax.numpy as jnp

if TYPE_CHECKING:
    from questplus.data.dataset import TrialHistory
    from questplus.model.likelihood import LikelihoodTensor
    from questplus.posterior.belief import BeliefState


class TrialPlacement(ABC):
    """
    Abstract interface for trial placement strategies.

    Methods
    -------
    propose(posterior, likelihood, history) -> int
        Index of the stimulus to present next.

    Attributes
    ----------
    last_scores : jnp.ndarray or None
        Per-stimulus scores from the most recent proposal. None until
        propose() has been called once.
    """

    def __init__(self) -> None:
        self.last_scores: jnp.ndarray | None = None

    @abstractmethod
    def propose(
        self,
        posterior: BeliefState,
        likelihood: LikelihoodTensor,
        history: TrialHistory,
    ) -> int:
        """
        Propose the next stimulus.

        Parameters
        ----------
        posterior : BeliefState
            Current belief (read only).
        likelihood : LikelihoodTensor
            Precomputed likelihood tensor.
        history : TrialHistory
            Trials so far (read only).

        Returns
        -------
        int
            Index into likelihood.stimulus_domain.
        """
        ...
