from __future__ import annotations
import numpy as np
Array = np.ndarray


def _days(year_length: int) -> Array:
    return np.arange(1, int(year_length) + 1, dtype=float)


def fixed_phase_curve(
    year_length: int,
    maxval: float,
    winter_frac: float,
    budburst_doy: float,
    emerge_dur: float,
    leaffall_doy: float,
    leaffall_dur: float,
) -> Array:
    """
    Piecewise-linear seasonal curve with a flat winter level.

    The breakpoints are budburst, end of leaf emergence, leaf fall and end of
    leaf shedding. The curve rises from ``winter_frac * maxval`` to ``maxval``
    over the emergence phase, stays at ``maxval`` and falls back during the
    shedding phase. Outside the breakpoints it is flat at the winter level.

    Parameters
    ----------
    year_length : int
        Number of days of the year (365 or 366).
    maxval : float
        Summer maximum.
    winter_frac : float
        Winter level as a fraction of ``maxval``.
    budburst_doy, leaffall_doy : float
        Day of year of budburst and of the onset of leaf fall.
    emerge_dur, leaffall_dur : float
        Duration [days] of leaf emergence and of leaf shedding.

    Returns
    -------
    ndarray, shape (year_length,)
        Daily values for days ``1..year_length``.
    """
    minval = winter_frac * maxval
    xp = np.array(
        [
            budburst_doy,
            budburst_doy + emerge_dur,
            leaffall_doy,
            leaffall_doy + leaffall_dur,
        ],
        dtype=float,
    )
    yp = np.array([minval, maxval, maxval, minval], dtype=float)
    return np.interp(_days(year_length), xp, yp, left=minval, right=minval)


def table_curve(
    year_length: int, maxval: float, doy: Array, frac: Array
) -> Array:
    """
    Linear interpolation of ``(doy, frac * maxval)`` pairs over a full year.

    Days before the first and after the last pair hold the nearest value.
    """
    xp = np.asarray(doy, dtype=float)
    yp = np.asarray(frac, dtype=float) * maxval
    return np.interp(_days(year_length), xp, yp)


def sigmoid_blend_curve(
    year_length: int,
    minval: float,
    maxval: float,
    doy_incr: float,
    doy_max: float,
    doy_min: float,
    shape_incr: float,
    shape_decr: float,
) -> Array:
    r"""
    Seasonal course after the 'Coupmodel' plant interpolation.

    Breakpoints ``[1, doy_incr, doy_max, doy_min, year_length]`` carry the
    values ``[minval, minval, maxval, minval, minval]`` and the segment
    exponents ``[1, shape_incr, shape_decr, 1]``. Within segment :math:`i`

    .. math::

        \alpha = \sin\left(\frac{d - b_i}{b_{i+1} - b_i}
                 \frac{\pi}{2}\right)^{e_i}, \qquad
        v(d) = (1 - \alpha) v_i + \alpha v_{i+1}

    Exponents above 1 give a slow start, below 1 a fast start. A zero-length
    segment (coincident breakpoints) is a jump to the later value.

    Parameters
    ----------
    year_length : int
        Number of days of the year (365 or 366).
    minval, maxval : float
        Off-season and peak values.
    doy_incr : float
        Day of year when the increase towards ``maxval`` begins.
    doy_max : float
        Day of year when ``maxval`` is reached.
    doy_min : float
        Day of year when ``minval`` is reached again.
    shape_incr, shape_decr : float
        Exponents of the increasing and decreasing phase.

    Returns
    -------
    ndarray, shape (year_length,)
        Daily values for days ``1..year_length``.

    References
    ----------
    Jansson, P.-E. & Karlberg, L. (2004): Coupled heat and mass transfer model
    for soil-plant-atmosphere systems. Royal Institute of Technology, Dept of
    Civil and Environmental Engineering, Stockholm.
    """
    bp = np.array([1, doy_incr, doy_max, doy_min, year_length], dtype=float)
    values = np.array([minval, minval, maxval, minval, minval], dtype=float)
    forms = np.array([1.0, shape_incr, shape_decr, 1.0])

    d = _days(year_length)
    # last day belongs to the last segment
    ind = np.clip(np.searchsorted(bp, d, side="right") - 1, 0, 3)
    span = bp[ind + 1] - bp[ind]
    pos = np.divide(
        d - bp[ind], span, out=np.ones_like(d), where=span > 0
    )
    alpha = np.sin(pos * np.pi / 2) ** forms[ind]
    return (1 - alpha) * values[ind] + alpha * values[ind + 1]
