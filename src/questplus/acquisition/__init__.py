"""
acquisition
===========

Acquisition functions for QUEST+ stimulus selection.

This module provides:
- expected_entropy: E[H(posterior) | stimulus] for every candidate
- predictive_outcome_probabilities: p(outcome | stimulus) under the posterior
- information_gain: H(posterior) - expected_entropy
- optimize_acqf_discrete: rank candidates by score

Design
------
Functional style, as the rest of the package:
    scores = expected_entropy(posterior.values, likelihood.values)
    idx, _ = optimize_acqf_discrete(scores, q=1)
"""

from questplus.acquisition.expected_entropy import (
    expected_entropy,
    information_gain,
    predictive_outcome_probabilities,
)
from questplus.acquisition.optimize import optimize_acqf_discrete

__all__ = [
    "expected_entropy",
    "information_gain",
    "predictive_outcome_probabilities",
    "optimize_acqf_discrete",
]
