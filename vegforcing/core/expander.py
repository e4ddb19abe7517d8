"""
Multi-year expansion of seasonal LAI models onto a calendar.

Each simulated calendar year gets its own full-year curve built from that
year's parameters and year length. The curves are concatenated
chronologically and cut to the calendar's start and end dates. Day-of-year
breakpoints are used literally in leap and non-leap years alike.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

import numpy as np

from vegforcing.core.data_containers import Calendar, to_annual
from vegforcing.core.lai import LAIModel, seasonal_lai

Array = np.ndarray

logger = logging.getLogger(__name__)


def expand_annual(model: LAIModel, n_years: int) -> List[LAIModel]:
    """
    Split a model holding annual vectors into one instance per year.

    Parameters
    ----------
    model : LAIModel
        Model whose annual fields are scalars or length-``n_years`` vectors.
    n_years : int
        Number of simulated years ``N``.

    Returns
    -------
    list of LAIModel
        ``N`` models with scalar annual fields, in chronological order.

    Raises
    ------
    ValidationError
        If an annual field has a length other than 1 or ``n_years``.
    """
    columns = {
        name: to_annual(getattr(model, name), n_years, name)
        for name in model.annual_fields
    }
    return [
        replace(model, **{name: float(v[i]) for name, v in columns.items()})
        for i in range(n_years)
    ]


def expand_lai(
    calendar: Calendar, model: LAIModel, maxlai: float | Sequence[float]
) -> Array:
    """
    Daily LAI over the calendar.

    Parameters
    ----------
    calendar : Calendar
        Simulation period; may start and end mid-year.
    model : LAIModel
        LAI model, with scalar or per-year annual fields.
    maxlai : float or sequence of float
        Maximum LAI, scalar or one value per simulated year.

    Returns
    -------
    ndarray, shape (T,)
        LAI aligned with ``calendar.dates``.

    Raises
    ------
    ValidationError
        If an annual vector does not match the number of simulated years.
    DomainError
        If any year's breakpoints do not fit that year.
    """
    n = calendar.n_years
    maxlai = to_annual(maxlai, n, "maxlai")
    per_year = expand_annual(model, n)

    # validate all years before producing any output
    for m, year_length in zip(per_year, calendar.year_lengths):
        m.validate(int(year_length))

    logger.debug(
        "Expanding %s LAI over %d year(s) %d-%d",
        model.method.value,
        n,
        calendar.years[0],
        calendar.years[-1],
    )
    full = np.concatenate(
        [
            seasonal_lai(m, lai, int(year_length))
            for m, lai, year_length in zip(
                per_year, maxlai, calendar.year_lengths
            )
        ]
    )
    first = calendar.start_offset
    return full[first : first + len(calendar)]
