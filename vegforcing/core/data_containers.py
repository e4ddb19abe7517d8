"""
Core containers for the calendar, soil geometry, stand tables and outputs.

This module defines the immutable data structures shared by the synthesis
components and a small helper to broadcast annual parameters to the number of
simulated years.

Classes
-------
Calendar
    Frozen daily calendar between a start and an end date (inclusive).
SoilLayers
    Frozen soil-layer geometry given by lower-boundary depths.
StandPropertyTable
    Optional per-year table of stand properties overriding annual parameters.
VegetationSeries
    Container for the synthesized daily series and root profiles.

Functions
---------
to_annual
    Broadcast a scalar or validate a per-year sequence of length ``N``.

Notes
-----
- Depths are in metres and negative downward, as expected by the solver.
- ``to_annual`` never recycles or truncates: a sequence must have exactly one
  value or one value per simulated year.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from vegforcing.core.exceptions import (
    ConfigurationError,
    DomainError,
    ValidationError,
)

Array = np.ndarray

logger = logging.getLogger(__name__)

STAND_TABLE_FIELDS = ("height", "maxlai", "sai", "densef", "age")


def to_annual(
    x: float | Sequence[float] | Array | None, n_years: int, name: str
) -> Array:
    """
    Coerce a scalar or per-year sequence to an array of length ``n_years``.

    Parameters
    ----------
    x : float or array-like
        Scalar (or length-1 sequence) broadcast to every simulated year, or a
        sequence with exactly one value per simulated year.
    n_years : int
        Number of simulated years ``N``.
    name : str
        Parameter name, used in error messages.

    Returns
    -------
    ndarray, shape (N,)
        Per-year values with dtype=float64.

    Raises
    ------
    ConfigurationError
        If ``x`` is ``None``.
    ValidationError
        If ``x`` is not 1-D or its length is neither 1 nor ``n_years``.
    """
    if x is None:
        raise ConfigurationError(f"Missing required parameter '{name}'.")
    arr = np.asarray(x, dtype=np.float64)
    if arr.ndim == 0:
        return np.full(n_years, float(arr), dtype=np.float64)
    if arr.ndim != 1:
        raise ValidationError(f"'{name}' must be a scalar or a 1-D sequence.")
    if arr.shape[0] == 1:
        return np.full(n_years, float(arr[0]), dtype=np.float64)
    if arr.shape[0] != n_years:
        raise ValidationError(
            f"'{name}' has {arr.shape[0]} values; expected 1 or {n_years} "
            "(one per simulated year)."
        )
    return arr.copy()


# -------------------------
# Calendar
# -------------------------


@dataclass(frozen=True)
class Calendar:
    """
    Daily calendar of a simulation period.

    Parameters
    ----------
    start, end : date-like
        First and last simulated day (inclusive). Anything accepted by
        :class:`pandas.Timestamp` works (``datetime.date``, ISO strings, ...).

    Attributes
    ----------
    dates : pandas.DatetimeIndex, shape (T,)
        Every simulated day.
    year, doy, year_length : ndarray of int, shape (T,)
        Calendar year, 1-based day of year and year length (365/366) of each
        date.
    years : ndarray of int, shape (N,)
        Simulated calendar years, in chronological order.
    year_lengths : ndarray of int, shape (N,)
        Length of each simulated year.

    Raises
    ------
    ValidationError
        If ``end`` lies before ``start``.
    """

    start: pd.Timestamp
    end: pd.Timestamp

    dates: pd.DatetimeIndex = field(init=False, repr=False)
    year: Array = field(init=False, repr=False)
    doy: Array = field(init=False, repr=False)
    year_length: Array = field(init=False, repr=False)
    years: Array = field(init=False, repr=False)
    year_lengths: Array = field(init=False, repr=False)

    def __post_init__(self):
        start = pd.Timestamp(self.start).normalize()
        end = pd.Timestamp(self.end).normalize()
        if end < start:
            raise ValidationError(
                f"Calendar end {end.date()} lies before start {start.date()}."
            )
        dates = pd.date_range(start, end, freq="D")
        years = np.arange(start.year, end.year + 1)
        # day-of-year of 31 Dec is the year length
        year_lengths = pd.to_datetime(
            [f"{y}-12-31" for y in years]
        ).dayofyear.to_numpy()

        # We assign using object.__setattr__ because the dataclass is frozen
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "dates", dates)
        object.__setattr__(self, "year", dates.year.to_numpy())
        object.__setattr__(self, "doy", dates.dayofyear.to_numpy())
        object.__setattr__(
            self, "year_length", np.where(dates.is_leap_year, 366, 365)
        )
        object.__setattr__(self, "years", years)
        object.__setattr__(self, "year_lengths", year_lengths)

    def __len__(self) -> int:
        return len(self.dates)

    @property
    def n_years(self) -> int:
        """Number of simulated calendar years ``N``."""
        return len(self.years)

    @property
    def year_index(self) -> Array:
        """Zero-based index into ``years`` for every date."""
        return self.year - self.years[0]

    @property
    def start_offset(self) -> int:
        """Days of the first simulated year that precede ``start``."""
        return int(self.doy[0]) - 1


# -------------------------
# Soil geometry
# -------------------------


@dataclass(frozen=True)
class SoilLayers:
    """
    Soil-layer geometry given by lower-boundary depths.

    Parameters
    ----------
    lower : array-like, shape (L,)
        Lower boundary of each layer [m], negative downward and strictly
        decreasing (the first layer starts at the surface, depth 0).

    Raises
    ------
    DomainError
        If the geometry is empty, not 1-D, starts at or above the surface, or
        is not strictly decreasing.

    Examples
    --------
    >>> soil = SoilLayers([-0.05, -0.15, -0.3, -0.6, -1.0])
    >>> soil.midpoints
    array([-0.025, -0.1  , -0.225, -0.45 , -0.8  ])
    """

    lower: Array

    def __post_init__(self):
        lower = np.asarray(self.lower, dtype=np.float64)
        if lower.ndim != 1 or lower.size == 0:
            raise DomainError("Soil layer depths must be a non-empty 1-D array.")
        if lower[0] >= 0.0:
            raise DomainError(
                "Soil layer depths must be negative downward "
                f"(first lower boundary is {lower[0]})."
            )
        if np.any(np.diff(lower) >= 0.0):
            raise DomainError(
                "Soil layer lower boundaries must be strictly decreasing."
            )
        object.__setattr__(self, "lower", lower)

    def __len__(self) -> int:
        return self.lower.shape[0]

    @property
    def upper(self) -> Array:
        """Upper boundary of each layer [m] (0 for the top layer)."""
        return np.concatenate(([0.0], self.lower[:-1]))

    @property
    def midpoints(self) -> Array:
        """Depth of each layer's midpoint [m]."""
        return 0.5 * (self.upper + self.lower)

    @property
    def thickness(self) -> Array:
        """Layer thickness [m], positive."""
        return self.upper - self.lower

    @property
    def deepest(self) -> float:
        """Lower boundary of the deepest layer [m]."""
        return float(self.lower[-1])


# -------------------------
# Stand property table
# -------------------------


@dataclass(frozen=True)
class StandPropertyTable:
    """
    Per-year stand properties overriding the annual parameters.

    Parameters
    ----------
    data : pandas.DataFrame
        One row per year with a ``year`` column (or index) and any subset of
        the value columns ``height``, ``maxlai``, ``sai``, ``densef``,
        ``age``. Other columns are ignored.

    Notes
    -----
    A present column supersedes the matching annual parameter for the whole
    run, so it must provide a value for every simulated year. Columns holding
    no value at all (e.g. ``None`` fields in :meth:`from_records`) are
    dropped.
    """

    data: pd.DataFrame

    def __post_init__(self):
        df = pd.DataFrame(self.data).copy()
        if "year" in df.columns:
            df = df.set_index("year")
        df.index = df.index.astype(int)
        if not df.index.is_unique:
            raise ValidationError("Stand property table has duplicate years.")
        ignored = [c for c in df.columns if c not in STAND_TABLE_FIELDS]
        if ignored:
            logger.debug("Ignoring stand table columns %s", ignored)
        df = df[[c for c in STAND_TABLE_FIELDS if c in df.columns]]
        # columns without any value leave the parameter in charge
        df = df.dropna(axis=1, how="all")
        object.__setattr__(self, "data", df.astype(float).sort_index())

    @classmethod
    def from_records(
        cls, rows: Iterable[Sequence[float]]
    ) -> "StandPropertyTable":
        """Build a table from ``(year, height, maxlai, sai, densef, age)`` rows."""
        df = pd.DataFrame(
            list(rows), columns=("year",) + STAND_TABLE_FIELDS
        )
        return cls(df)

    def covers(self, name: str) -> bool:
        """Return True if the table provides column ``name``."""
        return name in self.data.columns

    def annual(self, name: str, years: Array) -> Array:
        """
        Values of column ``name`` for each of ``years``.

        Raises
        ------
        ValidationError
            If a simulated year is missing from the table (or is NaN).
        """
        values = self.data[name].reindex(years)
        missing = values.index[values.isna()].tolist()
        if missing:
            raise ValidationError(
                f"Stand property table lacks '{name}' for years {missing}."
            )
        return values.to_numpy(dtype=np.float64)


# -------------------------
# Outputs
# -------------------------


@dataclass
class VegetationSeries:
    """Synthesized daily vegetation series and per-year root profiles."""

    dates: pd.DatetimeIndex  # (T,)
    lai: Array  # (T,)
    height: Array  # (T,)
    sai: Array  # (T,)
    densef: Array  # (T,)
    age: Array  # (T,)

    years: Array  # (N,)
    maxlai: Array  # (N,)
    roots: Array  # (N, L)

    def to_frame(self) -> pd.DataFrame:
        """Return the daily series as a DataFrame indexed by date."""
        return pd.DataFrame(
            {
                "lai": self.lai,
                "height": self.height,
                "sai": self.sai,
                "densef": self.densef,
                "age": self.age,
            },
            index=pd.Index(self.dates, name="date"),
        )

    def roots_for(self, year: int) -> Array:
        """Root profile used in calendar ``year``."""
        idx = np.flatnonzero(self.years == year)
        if idx.size == 0:
            raise KeyError(f"Year {year} is not part of the simulation.")
        return self.roots[idx[0]]
