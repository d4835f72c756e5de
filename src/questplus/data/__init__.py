"""
questplus.data
==============

Submodule for stimulus/parameter domains and trial records.

Includes:
- domain: StimulusDomain, ParameterDomain and their constructors
- dataset: TrialRecord, TrialHistory
- transforms: stimulus scale conversions (linear, log10, decibel)
"""

from .dataset import TrialHistory, TrialRecord
from .domain import (
    ParameterDomain,
    StimulusDomain,
    make_parameter_domain,
    make_stimulus_domain,
)
from .transforms import StimScale, from_model_scale, to_model_scale

__all__ = [
    "StimulusDomain",
    "ParameterDomain",
    "make_stimulus_domain",
    "make_parameter_domain",
    "TrialRecord",
    "TrialHistory",
    "StimScale",
    "to_model_scale",
    "from_model_scale",
]
