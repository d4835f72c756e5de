"""
session
=======

Experiment orchestration.

This subpackage provides:
- QuestPlusSession : owns domains, likelihood, prior/posterior and trial
  history; exposes next_stimulus(), update() and estimate().
- PlacementConfig : settings for randomised stimulus selection.
- StimSelectionMethod : "min_entropy" | "min_n_entropy".
"""

from .experiment_session import (
    PlacementConfig,
    QuestPlusSession,
    StimSelectionMethod,
    make_placement,
)

__all__ = ["QuestPlusSession", "PlacementConfig", "StimSelectionMethod", "make_placement"]
