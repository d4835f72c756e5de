"""
dataset.py
-----------

Trial record containers for questplus.

defines:
- TrialRecord: one presented stimulus and the observed outcome
- TrialHistory: append-only log of TrialRecords

Notes
-----
- The history is kept for audit and replay only. The posterior is a
  sufficient statistic; Bayesian updates never read the history.
- Data is stored in plain Python lists. Use to_numpy() for analysis.
"""

from __future__ import annotations

from typing import Iterator, NamedTuple

import numpy as np


class TrialRecord(NamedTuple):
    """
    A single completed trial.

    Attributes
    ----------
    stimulus_index : int
        Index into the session's StimulusDomain.
    stimulus : float
        Stimulus value at that index (physical units).
    outcome : int
        Observed outcome index (for NormCDF: 1 = correct, 0 = incorrect).
    """

    stimulus_index: int
    stimulus: float
    outcome: int


class TrialHistory:
    """
    Append-only sequence of TrialRecords.

    Attributes
    ----------
    stimulus_indices : List[int]
    stimuli : List[float]
    outcomes : List[int]
    """

    def __init__(self) -> None:
        self.stimulus_indices: list[int] = []
        self.stimuli: list[float] = []
        self.outcomes: list[int] = []

    def add_trial(self, stimulus_index: int, stimulus: float, outcome: int) -> None:
        """
        append a single trial.

        Parameters
        ----------
        stimulus_index : int
            Index of the presented stimulus.
        stimulus : float
            Presented stimulus value.
        outcome : int
            Observed outcome index.
        """
        self.stimulus_indices.append(int(stimulus_index))
        self.stimuli.append(float(stimulus))
        self.outcomes.append(int(outcome))

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Return stimulus indices, stimuli, outcomes as numpy arrays.

        Returns
        -------
        stimulus_indices : np.ndarray
        stimuli : np.ndarray
        outcomes : np.ndarray
        """
        return (
            np.array(self.stimulus_indices, dtype=int),
            np.array(self.stimuli, dtype=float),
            np.array(self.outcomes, dtype=int),
        )

    @property
    def trials(self) -> list[TrialRecord]:
        """Return all trials as TrialRecords, oldest first."""
        return [
            TrialRecord(i, s, o)
            for i, s, o in zip(self.stimulus_indices, self.stimuli, self.outcomes)
        ]

    def __len__(self) -> int:
        """Return number of trials."""
        return len(self.outcomes)

    def __iter__(self) -> Iterator[TrialRecord]:
        return iter(self.trials)

    def tail(self, n: int) -> TrialHistory:
        """
        Return last n trials as a new TrialHistory.

        Parameters
        ----------
        n : int
            Number of trials to keep
        """
        new_history = TrialHistory()
        if n <= 0:
            return new_history
        new_history.stimulus_indices = self.stimulus_indices[-n:]
        new_history.stimuli = self.stimuli[-n:]
        new_history.outcomes = self.outcomes[-n:]
        return new_history

    def copy(self) -> TrialHistory:
        """Create an independent copy of this history."""
        new_history = TrialHistory()
        new_history.stimulus_indices = list(self.stimulus_indices)
        new_history.stimuli = list(self.stimuli)
        new_history.outcomes = list(self.outcomes)
        return new_history
