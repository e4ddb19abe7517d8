"""
Daily stand properties from annual anchor values.

Annual anchors ``y[1..N]`` (height, stem area index, canopy density) are the
values reached at the end of each simulated year. An optional initial value
``y0`` holds at the end of the year before the first simulated year and
defaults to ``y[1]``. Three policies turn the anchors into daily series:

``constant``
    Right-continuous steps: year 1 takes ``y0`` and year ``k`` takes
    ``y[k-1]``; values change only at year boundaries.
``linear``
    Linear interpolation between consecutive year-end anchors.
``growthperiod``
    Per year, hold ``y[k-1]`` before the growth window, ramp linearly to
    ``y[k]`` inside ``[start[k], end[k]]`` and hold ``y[k]`` afterwards.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import numpy as np

from vegforcing.core.data_containers import (
    Calendar,
    StandPropertyTable,
    to_annual,
)
from vegforcing.core.exceptions import ConfigurationError, DomainError
from vegforcing.core.methods import StandInterp
from vegforcing.core.vegetation import VegetationParams

Array = np.ndarray

logger = logging.getLogger(__name__)


def _growth_window(
    calendar: Calendar, start, end
) -> tuple[Array, Array]:
    if start is None or end is None:
        raise ConfigurationError(
            "Growth-period interpolation needs 'growth_start_doy' and "
            "'growth_end_doy'."
        )
    n = calendar.n_years
    start = to_annual(start, n, "growth_start_doy")
    end = to_annual(end, n, "growth_end_doy")
    bad = (start < 1) | (end < start) | (end > calendar.year_lengths)
    if np.any(bad):
        years = calendar.years[bad].tolist()
        raise DomainError(
            "Growth windows must satisfy 1 ≤ start ≤ end ≤ year length; "
            f"violated in years {years}."
        )
    return start, end


def interpolate_stand_property(
    calendar: Calendar,
    values: float | Sequence[float],
    initial: Optional[float] = None,
    method: StandInterp | str = StandInterp.CONSTANT,
    growth_start: float | Sequence[float] | None = None,
    growth_end: float | Sequence[float] | None = None,
    name: str = "value",
) -> Array:
    """
    Daily series from annual year-end anchors.

    Parameters
    ----------
    calendar : Calendar
        Simulation period.
    values : float or sequence of float
        Year-end anchors, scalar or one per simulated year.
    initial : float, optional
        Value at the end of the year preceding the simulation. Defaults to the
        first anchor.
    method : StandInterp or str, default='constant'
        ``'constant'``, ``'linear'`` or ``'growthperiod'``.
    growth_start, growth_end : float or sequence of float, optional
        Growth window bounds (day of year), required by ``'growthperiod'``.
    name : str, default='value'
        Property name used in error messages.

    Returns
    -------
    ndarray, shape (T,)
        Daily values aligned with ``calendar.dates``.

    Raises
    ------
    ConfigurationError
        For an unknown method or a missing growth window.
    ValidationError
        If ``values`` or the window bounds are not scalar or length ``N``.
    DomainError
        If a growth window is out of order or outside its year.
    """
    method = StandInterp.parse(method)
    y = to_annual(values, calendar.n_years, name)
    y0 = y[0] if initial is None else float(initial)
    prev = np.concatenate(([y0], y[:-1]))  # level at the start of each year
    k = calendar.year_index

    if method is StandInterp.CONSTANT:
        return prev[k]

    if method is StandInterp.LINEAR:
        # day position counted from 31 Dec of the year before the first one
        ends = np.concatenate(([0], np.cumsum(calendar.year_lengths)))
        pos = ends[k] + calendar.doy
        return np.interp(pos, ends, np.concatenate(([y0], y)))

    start, end = _growth_window(calendar, growth_start, growth_end)
    s, e = start[k], end[k]
    doy = calendar.doy.astype(float)
    span = e - s
    frac = np.divide(
        doy - s, span, out=(doy >= e).astype(float), where=span > 0
    )
    frac = np.clip(frac, 0.0, 1.0)
    return (1.0 - frac) * prev[k] + frac * y[k]


def daily_stand_age(calendar: Calendar, age_ini: float) -> Array:
    """
    Stand age [years] for every date.

    Age is ``age_ini`` at the start of the first simulated year and grows by
    ``1 / year_length`` per day, reaching ``age_ini + k`` on 31 Dec of the
    ``k``-th simulated year.
    """
    return (
        float(age_ini)
        + calendar.year_index
        + calendar.doy / calendar.year_length
    )


def make_stand_properties(
    calendar: Calendar,
    params: VegetationParams,
    table: Optional[StandPropertyTable] = None,
) -> Dict[str, Array]:
    """
    Daily height, stem area index, canopy density and age, plus annual maxLAI.

    Parameters
    ----------
    calendar : Calendar
        Simulation period.
    params : VegetationParams
        Annual anchors, initial values, interpolation policy and growth
        window.
    table : StandPropertyTable, optional
        Per-year values superseding the matching annual parameters.

    Returns
    -------
    dict of {str: ndarray}
        ``height``, ``sai``, ``densef`` and ``age`` with shape (T,), and
        ``maxlai`` with shape (N,).
    """
    n = calendar.n_years
    years = calendar.years

    def annual(field: str) -> Array:
        if table is not None and table.covers(field):
            return table.annual(field, years)
        return to_annual(getattr(params, field), n, field)

    method = params.standprop_interp
    start = end = None
    if method is StandInterp.GROWTH_PERIOD:
        start, end = params.growth_window()

    out: Dict[str, Array] = {}
    for field in ("height", "sai", "densef"):
        out[field] = interpolate_stand_property(
            calendar,
            annual(field),
            initial=getattr(params, f"{field}_ini"),
            method=method,
            growth_start=start,
            growth_end=end,
            name=field,
        )
    out["maxlai"] = annual("maxlai")

    if table is not None and table.covers("age"):
        age_ini = table.annual("age", years)[0] - 1.0
    else:
        age_ini = params.age_ini
    out["age"] = daily_stand_age(calendar, age_ini)

    if table is not None:
        logger.debug(
            "Stand table overrides %s",
            [f for f in out if table.covers(f)],
        )
    return out
