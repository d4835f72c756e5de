"""
trial_placement
===============

Stimulus selection strategies.

- MinEntropyPlacement: deterministic QUEST+ choice (lowest expected entropy)
- MinNEntropyPlacement: random choice among the n most informative stimuli

Examples
--------
>>> from questplus.trial_placement import MinEntropyPlacement
>>> placement = MinEntropyPlacement()
>>> stimulus_index = placement.propose(posterior, likelihood, history)
"""

from questplus.trial_placement.base import TrialPlacement
from questplus.trial_placement.min_entropy import (
    MinEntropyPlacement,
    MinNEntropyPlacement,
    PlacementConfig,
)

__all__ = [
    "TrialPlacement",
    "MinEntropyPlacement",
    "MinNEntropyPlacement",
    "PlacementConfig",
]
