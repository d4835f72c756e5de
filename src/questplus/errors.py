"""
errors.py
---------

Exception types raised by questplus.

Every error derives from QuestPlusError *and* from the closest built-in
exception, so callers can catch either ``QuestPlusError`` or e.g. ``ValueError``.

Recoverable (user input; fix and retry construction):
- EmptyDomain, ParameterLengthMismatch, ParameterNotFound, InvalidPriorWeights,
  InvalidDistributionParameter, InvalidStimulusValue, UnknownStimulus,
  InvalidOutcome, UnknownModel

Session-fatal:
- NumericalDegeneracy : the observation has zero likelihood under every
  parameter hypothesis. The session is no longer meaningful.

Defects:
- OutcomeProbabilityInvalid : a psychometric model returned something that is
  not a probability vector.
- ShapeInvariantViolation : tensors do not line up. Abort, do not retry.
"""

from __future__ import annotations


class QuestPlusError(Exception):
    """Base class for all questplus errors."""


class EmptyDomain(QuestPlusError, ValueError):
    """A stimulus or parameter grid has no candidate values."""


class ParameterLengthMismatch(QuestPlusError, ValueError):
    """A prior weight vector does not match its parameter grid length."""

    def __init__(self, name: str, expected: int, got: int) -> None:
        super().__init__(
            f"length of '{name}' grid ({expected}) and '{name}' prior weights "
            f"({got}) does not match"
        )
        self.name = name
        self.expected = expected
        self.got = got


class ParameterNotFound(QuestPlusError, KeyError):
    """Parameter names that are not part of the parameter domain/model."""

    def __init__(self, missing, available) -> None:
        self.missing = sorted(missing)
        self.available = sorted(available)
        super().__init__(f"{self.missing} not in {self.available}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class InvalidPriorWeights(QuestPlusError, ValueError):
    """Prior weights are negative, non-finite, or sum to zero."""


class InvalidDistributionParameter(QuestPlusError, ValueError):
    """The psychometric model rejected a parameter value (e.g. sd <= 0)."""


class OutcomeProbabilityInvalid(QuestPlusError, ValueError):
    """Model output is not a valid probability vector over outcomes."""


class InvalidStimulusValue(QuestPlusError, ValueError):
    """A stimulus value cannot be represented on the requested scale."""


class UnknownStimulus(QuestPlusError, ValueError):
    """A stimulus value or index that is not part of the stimulus domain."""


class InvalidOutcome(QuestPlusError, ValueError):
    """An outcome index outside ``[0, outcome_count)``."""


class UnknownModel(QuestPlusError, KeyError):
    """No psychometric model registered under the requested name."""

    def __str__(self) -> str:
        return str(self.args[0])


class NumericalDegeneracy(QuestPlusError, ArithmeticError):
    """Posterior normalisation constant is zero or non-finite."""


class ShapeInvariantViolation(QuestPlusError, RuntimeError):
    """Internal tensor shapes disagree. Indicates a bug, not bad input."""
