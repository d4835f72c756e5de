"""
domain.py
---------

Discretised stimulus and parameter domains.

A StimulusDomain is the "menu" of intensities the procedure may present.
A ParameterDomain is an ordered set of named 1-D grids; the joint parameter
grid is their Cartesian product, laid out in declaration order (the first
declared parameter is the slowest-varying axis).

Both are immutable once built: grids are stored as jax arrays and the
containers are frozen dataclasses.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

import jax.numpy as jnp
import numpy as np

from questplus.data.transforms import ArrayLike, StimScale, to_model_scale
from questplus.errors import EmptyDomain, ParameterNotFound, UnknownStimulus

# Fraction of the smallest grid gap within which an inexact value snaps to
# the nearest stimulus
LOOKUP_SPACING_FRACTION = 0.25


@dataclass(frozen=True, eq=False)
class StimulusDomain:
    """
    Ordered sequence of candidate stimulus intensities.

    Attributes
    ----------
    values : jnp.ndarray, shape (n_stimuli,)
        Physical intensities, in presentation units.
    scale : StimScale
        Axis on which the psychometric model evaluates the intensities.
    """

    values: jnp.ndarray
    scale: StimScale = StimScale.LINEAR
    model_values: jnp.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scale", StimScale(self.scale))
        object.__setattr__(self, "model_values", to_model_scale(self.values, self.scale))

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def __getitem__(self, index: int) -> float:
        if not -len(self) <= index < len(self):
            raise UnknownStimulus(
                f"stimulus index {index} out of range for domain of size {len(self)}"
            )
        return float(self.values[index])

    def __iter__(self) -> Iterator[float]:
        return iter(np.asarray(self.values).tolist())

    def index_of(self, value: float) -> int:
        """
        Return the index of a stimulus value.

        Exact matches win. Otherwise the nearest grid value is returned if it
        lies within ``LOOKUP_SPACING_FRACTION`` of the smallest gap between
        distinct grid values (for a single-value domain, within a relative
        1e-9 of that value).

        Raises
        ------
        UnknownStimulus
            If no grid value matches.
        """
        values = np.asarray(self.values)
        exact = np.flatnonzero(values == value)
        if exact.size:
            return int(exact[0])
        distance = np.abs(values - value)
        nearest = int(np.argmin(distance))
        if distance[nearest] <= self.lookup_tolerance:
            return nearest
        raise UnknownStimulus(f"stimulus value {value!r} is not in the stimulus domain")

    @property
    def lookup_tolerance(self) -> float:
        """Largest distance at which index_of() accepts an inexact value."""
        unique = np.unique(np.asarray(self.values))
        if unique.shape[0] > 1:
            return LOOKUP_SPACING_FRACTION * float(np.min(np.diff(unique)))
        return 1e-9 * abs(float(unique[0]))

    def matches(self, other: StimulusDomain) -> bool:
        """True if both domains hold the same values on the same scale."""
        return (
            self.scale is other.scale
            and self.values.shape == other.values.shape
            and bool(jnp.all(self.values == other.values))
        )


@dataclass(frozen=True, eq=False)
class ParameterDomain:
    """
    Ordered mapping of parameter name -> 1-D grid of candidate values.

    Attributes
    ----------
    names : tuple of str
        Parameter names in declaration order (axis order of every tensor
        indexed by parameters).
    grids : tuple of jnp.ndarray
        One 1-D float64 grid per name.
    """

    names: tuple[str, ...]
    grids: tuple[jnp.ndarray, ...]

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(int(g.shape[0]) for g in self.grids)

    @property
    def ndim(self) -> int:
        return len(self.names)

    @property
    def size(self) -> int:
        return int(np.prod(self.shape))

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __getitem__(self, name: str) -> jnp.ndarray:
        return self.grids[self.axis(name)]

    def axis(self, name: str) -> int:
        """Axis of ``name`` in parameter-shaped tensors."""
        try:
            return self.names.index(name)
        except ValueError:
            raise ParameterNotFound({name}, self.names) from None

    def items(self) -> Iterator[tuple[str, jnp.ndarray]]:
        return zip(self.names, self.grids)

    def matches(self, other: ParameterDomain) -> bool:
        """True if both domains declare the same names and grids, in order."""
        return (
            self.names == other.names
            and self.shape == other.shape
            and all(bool(jnp.all(a == b)) for a, b in zip(self.grids, other.grids))
        )

    def values_at(self, index: tuple[int, ...]) -> dict[str, float]:
        """Map a joint grid index tuple to {name: grid value}."""
        return {
            name: float(grid[i]) for name, grid, i in zip(self.names, self.grids, index)
        }

    def broadcast_grids(self, leading_dims: int = 0) -> dict[str, jnp.ndarray]:
        """
        Return each grid reshaped to broadcast against the joint grid.

        Parameters
        ----------
        leading_dims : int, default=0
            Number of singleton axes to prepend (e.g. 1 for a stimulus axis).
        """
        out = {}
        for k, (name, grid) in enumerate(self.items()):
            shape = [1] * (leading_dims + self.ndim)
            shape[leading_dims + k] = grid.shape[0]
            out[name] = grid.reshape(shape)
        return out


def make_stimulus_domain(
    values: ArrayLike, scale: StimScale | str = StimScale.LINEAR
) -> StimulusDomain:
    """
    Build a StimulusDomain.

    Parameters
    ----------
    values : array-like
        Candidate stimulus intensities.
    scale : StimScale or str, default="linear"
        Axis the psychometric model operates on.

    Raises
    ------
    EmptyDomain
        If ``values`` is empty.
    """
    arr = jnp.ravel(jnp.asarray(values, dtype=jnp.float64))
    if arr.shape[0] == 0:
        raise EmptyDomain("stimulus domain must contain at least one value")
    if np.unique(np.asarray(arr)).shape[0] != arr.shape[0]:
        warnings.warn(
            "stimulus domain contains duplicate values; value lookups resolve "
            "to the first occurrence",
            UserWarning,
            stacklevel=2,
        )
    return StimulusDomain(values=arr, scale=scale)


def make_parameter_domain(named_grids: Mapping[str, Any]) -> ParameterDomain:
    """
    Build a ParameterDomain from an ordered mapping of name -> grid.

    Scalars are promoted to single-value grids.

    Raises
    ------
    EmptyDomain
        If there are no parameters or any grid is empty.
    """
    if not named_grids:
        raise EmptyDomain("parameter domain must define at least one parameter")
    names = []
    grids = []
    for name, grid in named_grids.items():
        arr = jnp.ravel(jnp.atleast_1d(jnp.asarray(grid, dtype=jnp.float64)))
        if arr.shape[0] == 0:
            raise EmptyDomain(f"parameter grid '{name}' is empty")
        names.append(str(name))
        grids.append(arr)
    return ParameterDomain(names=tuple(names), grids=tuple(grids))
