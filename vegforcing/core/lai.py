"""
Seasonal leaf-area-index models for a single year.

One frozen dataclass per shape model carries exactly the parameters that model
needs. Numeric phenology fields may hold a scalar or one value per simulated
year; :func:`vegforcing.core.expander.expand_annual` splits the latter into
per-year instances before :func:`seasonal_lai` evaluates them.

Classes
-------
FixedPhase
    Budburst / emergence / leaf-fall / shedding breakpoints, linear between.
TableInterpolated
    Caller-supplied ``(doy, fraction of maximum)`` pairs.
SigmoidBlend
    Sine-eased 'Coupmodel' curve with shape exponents.

Functions
---------
seasonal_lai
    Validate a model against a year length and emit its daily LAI.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import ClassVar, Sequence, Tuple, Union

import numpy as np

from vegforcing.core.exceptions import (
    ConfigurationError,
    DomainError,
    ValidationError,
)
from vegforcing.core.methods import LAIMethod
from vegforcing.library.shapes import (
    fixed_phase_curve,
    sigmoid_blend_curve,
    table_curve,
)

Array = np.ndarray
AnnualValue = Union[float, Sequence[float]]


def _scalar(value, name: str) -> float:
    arr = np.asarray(value, dtype=float)
    if arr.size != 1:
        raise ConfigurationError(
            f"'{name}' holds {arr.size} annual values; expand the model per "
            "year before evaluating a single season."
        )
    return float(arr.reshape(()))


def _check_frac(winlaifrac: float) -> None:
    if not (0.0 <= winlaifrac <= 1.0):
        raise DomainError("winlaifrac must be in [0, 1].")


class _SeasonalModel:
    """Shared helpers of the LAI model variants."""

    method: ClassVar[LAIMethod]
    annual_fields: ClassVar[Tuple[str, ...]] = ()

    def _scalars(self) -> dict:
        return {
            f.name: _scalar(getattr(self, f.name), f.name)
            for f in fields(self)
            if f.name in self.annual_fields
        }


@dataclass(frozen=True)
class FixedPhase(_SeasonalModel):
    """
    Four-breakpoint LAI model with a flat winter level.

    Parameters
    ----------
    budburst_doy : float or sequence, default=121
        Day of year of budburst.
    emerge_dur : float or sequence, default=28
        Days from budburst until the maximum is reached.
    leaffall_doy : float or sequence, default=279
        Day of year when leaf fall begins.
    leaffall_dur : float or sequence, default=58
        Days from the start of leaf fall until the winter level is reached.
    winlaifrac : float or sequence, default=0.0
        Winter LAI as a fraction of the maximum, in [0, 1].
    """

    budburst_doy: AnnualValue = 121
    emerge_dur: AnnualValue = 28
    leaffall_doy: AnnualValue = 279
    leaffall_dur: AnnualValue = 58
    winlaifrac: AnnualValue = 0.0

    method: ClassVar[LAIMethod] = LAIMethod.FIXED_PHASE
    annual_fields: ClassVar[Tuple[str, ...]] = (
        "budburst_doy",
        "emerge_dur",
        "leaffall_doy",
        "leaffall_dur",
        "winlaifrac",
    )

    def breakpoints(self) -> Array:
        """Return the four breakpoint days of this (single-year) model."""
        p = self._scalars()
        return np.array(
            [
                p["budburst_doy"],
                p["budburst_doy"] + p["emerge_dur"],
                p["leaffall_doy"],
                p["leaffall_doy"] + p["leaffall_dur"],
            ]
        )

    def validate(self, year_length: int) -> None:
        """Check ``1 <= b1 < b2 < b3 < b4 <= year_length``."""
        _check_frac(self._scalars()["winlaifrac"])
        bp = self.breakpoints()
        if not (
            1 <= bp[0] and np.all(np.diff(bp) > 0) and bp[-1] <= year_length
        ):
            raise DomainError(
                "Fixed-phase breakpoints must satisfy "
                f"1 ≤ b1 < b2 < b3 < b4 ≤ {year_length}; got {bp.tolist()}."
            )

    def daily(self, maxlai: float, year_length: int) -> Array:
        p = self._scalars()
        return fixed_phase_curve(
            year_length,
            maxlai,
            p["winlaifrac"],
            p["budburst_doy"],
            p["emerge_dur"],
            p["leaffall_doy"],
            p["leaffall_dur"],
        )


@dataclass(frozen=True)
class TableInterpolated(_SeasonalModel):
    """
    LAI interpolated from ``(doy, fraction of maximum)`` pairs.

    The table is shared by every simulated year. Days outside the table hold
    the nearest supplied value.

    Raises
    ------
    ValidationError
        If the table is missing, empty or its columns differ in length.
    """

    doy: Tuple[float, ...] = None
    frac: Tuple[float, ...] = None

    method: ClassVar[LAIMethod] = LAIMethod.TABLE

    def __post_init__(self):
        if self.doy is None or self.frac is None:
            raise ValidationError(
                "The table-interpolated LAI model needs 'lai_doy' and "
                "'lai_frac'."
            )
        doy = tuple(float(v) for v in np.atleast_1d(self.doy))
        frac = tuple(float(v) for v in np.atleast_1d(self.frac))
        if len(doy) == 0 or len(doy) != len(frac):
            raise ValidationError(
                "LAI table needs matching, non-empty 'doy' and 'frac' columns "
                f"(got {len(doy)} and {len(frac)})."
            )
        object.__setattr__(self, "doy", doy)
        object.__setattr__(self, "frac", frac)

    def validate(self, year_length: int) -> None:
        doy = np.asarray(self.doy)
        if np.any(np.diff(doy) <= 0):
            raise DomainError("LAI table days must be strictly increasing.")
        if doy[0] < 1 or doy[-1] > year_length:
            raise DomainError(
                f"LAI table days must lie within [1, {year_length}]."
            )

    def daily(self, maxlai: float, year_length: int) -> Array:
        return table_curve(year_length, maxlai, self.doy, self.frac)


@dataclass(frozen=True)
class SigmoidBlend(_SeasonalModel):
    """
    Sine-eased LAI curve after the 'Coupmodel' plant interpolation.

    Parameters
    ----------
    incr_start : float or sequence, default=121
        Day of year when the increase begins (budburst).
    peak : float or sequence, default=210
        Day of year of maximum LAI.
    decline_end : float or sequence, default=337
        Day of year when the winter level is reached again.
    shape_incr, shape_decr : float or sequence, default=0.3, 3.0
        Positive exponents of the rising and falling phase.
    winlaifrac : float or sequence, default=0.0
        Winter LAI as a fraction of the maximum, in [0, 1].
    """

    incr_start: AnnualValue = 121
    peak: AnnualValue = 210
    decline_end: AnnualValue = 337
    shape_incr: AnnualValue = 0.3
    shape_decr: AnnualValue = 3.0
    winlaifrac: AnnualValue = 0.0

    method: ClassVar[LAIMethod] = LAIMethod.SIGMOID_BLEND
    annual_fields: ClassVar[Tuple[str, ...]] = (
        "incr_start",
        "peak",
        "decline_end",
        "shape_incr",
        "shape_decr",
        "winlaifrac",
    )

    def validate(self, year_length: int) -> None:
        """
        Check ``1 <= incr_start <= peak < decline_end <= year_length``.

        ``peak`` must precede ``decline_end``: a zero-length decline would
        drop the peak day itself to the winter level.
        """
        p = self._scalars()
        _check_frac(p["winlaifrac"])
        bp = np.array(
            [1, p["incr_start"], p["peak"], p["decline_end"], year_length]
        )
        if np.any(np.diff(bp) < 0) or bp[2] >= bp[3]:
            raise DomainError(
                "Sigmoid-blend breakpoints must satisfy 1 ≤ incr_start ≤ "
                f"peak < decline_end ≤ {year_length}; got {bp.tolist()}."
            )
        if p["shape_incr"] <= 0 or p["shape_decr"] <= 0:
            raise DomainError("Shape exponents must be positive.")

    def daily(self, maxlai: float, year_length: int) -> Array:
        p = self._scalars()
        return sigmoid_blend_curve(
            year_length,
            p["winlaifrac"] * maxlai,
            maxlai,
            p["incr_start"],
            p["peak"],
            p["decline_end"],
            p["shape_incr"],
            p["shape_decr"],
        )


LAIModel = Union[FixedPhase, TableInterpolated, SigmoidBlend]


def seasonal_lai(model: LAIModel, maxlai: float, year_length: int) -> Array:
    """
    Daily LAI of one year.

    Parameters
    ----------
    model : FixedPhase, TableInterpolated or SigmoidBlend
        Single-year LAI model (annual fields must be scalars).
    maxlai : float
        Maximum LAI of the year, non-negative.
    year_length : {365, 366}
        Number of days of the year.

    Returns
    -------
    ndarray, shape (year_length,)
        LAI for days ``1..year_length``.

    Raises
    ------
    ConfigurationError
        If ``model`` is not an LAI model or still holds annual vectors.
    DomainError
        If the breakpoints do not fit the year, ``year_length`` is not 365 or
        366, or ``maxlai`` is negative.
    """
    if not isinstance(model, (FixedPhase, TableInterpolated, SigmoidBlend)):
        raise ConfigurationError(
            f"Unsupported LAI model {type(model).__name__}."
        )
    if year_length not in (365, 366):
        raise DomainError(f"year_length must be 365 or 366, not {year_length}.")
    maxlai = _scalar(maxlai, "maxlai")
    if maxlai < 0:
        raise DomainError("maxlai must be non-negative.")
    model.validate(year_length)
    return model.daily(maxlai, year_length)
