import numpy as np
import numpy.testing as npt
import pytest

from vegforcing.core.exceptions import (
    ConfigurationError,
    DomainError,
    ValidationError,
)
from vegforcing.core.lai import (
    FixedPhase,
    SigmoidBlend,
    TableInterpolated,
    seasonal_lai,
)

ATOL = 1e-10
RTOL = 1e-10


# -------------------------
# fixed-phase
# -------------------------


def test_fixed_phase_values_at_breakpoints():
    model = FixedPhase(
        budburst_doy=121,
        emerge_dur=28,
        leaffall_doy=279,
        leaffall_dur=58,
        winlaifrac=0.2,
    )
    lai = seasonal_lai(model, 5.0, 365)

    assert lai.shape == (365,)
    assert lai[121 - 1] == pytest.approx(0.2 * 5.0)
    assert lai[121 + 28 - 1] == 5.0
    assert lai[279 - 1] == 5.0
    assert lai[279 + 58 - 1] == pytest.approx(1.0)
    npt.assert_allclose(lai[:120], 1.0)


def test_fixed_phase_leap_year_has_366_values():
    lai = seasonal_lai(FixedPhase(), 6.0, 366)
    assert lai.shape == (366,)
    assert lai[-1] == 0.0


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(budburst_doy=0),
        dict(leaffall_doy=140),  # before end of emergence
        dict(leaffall_doy=330),  # shedding ends after day 365
        dict(emerge_dur=0),
    ],
)
def test_fixed_phase_rejects_bad_ordering(kwargs):
    with pytest.raises(DomainError):
        seasonal_lai(FixedPhase(**kwargs), 5.0, 365)


def test_fixed_phase_rejects_winter_fraction_out_of_range():
    with pytest.raises(DomainError):
        seasonal_lai(FixedPhase(winlaifrac=1.5), 5.0, 365)


# -------------------------
# table-interpolated
# -------------------------


def test_table_round_trips_supplied_points():
    doy = [1, 100, 150, 250, 365]
    frac = [0.1, 0.2, 1.0, 0.9, 0.1]
    lai = seasonal_lai(TableInterpolated(doy=doy, frac=frac), 4.0, 365)

    npt.assert_allclose(
        lai[np.asarray(doy) - 1], np.asarray(frac) * 4.0, rtol=RTOL, atol=ATOL
    )


def test_table_holds_nearest_value_outside_range():
    model = TableInterpolated(doy=[60, 200], frac=[0.5, 1.0])
    lai = seasonal_lai(model, 2.0, 365)
    npt.assert_array_equal(lai[:60], 1.0)
    npt.assert_array_equal(lai[199:], 2.0)


def test_table_requires_data():
    with pytest.raises(ValidationError):
        TableInterpolated()
    with pytest.raises(ValidationError):
        TableInterpolated(doy=[1, 2, 3], frac=[0.1, 0.2])


def test_table_rejects_unordered_days():
    with pytest.raises(DomainError):
        seasonal_lai(TableInterpolated(doy=[10, 5], frac=[0, 1]), 1.0, 365)
    with pytest.raises(DomainError):
        seasonal_lai(TableInterpolated(doy=[10, 366], frac=[0, 1]), 1.0, 365)


# -------------------------
# sigmoid-blend
# -------------------------


def test_sigmoid_blend_peak_and_ends():
    model = SigmoidBlend(
        incr_start=100,
        peak=200,
        decline_end=300,
        shape_incr=0.3,
        shape_decr=3.0,
        winlaifrac=0.1,
    )
    lai = seasonal_lai(model, 5.0, 365)
    assert lai[200 - 1] == 5.0
    assert lai[0] == pytest.approx(0.5)
    assert lai[-1] == pytest.approx(0.5)
    assert np.argmax(lai) == 200 - 1


def test_sigmoid_blend_exponent_one_matches_closed_form():
    model = SigmoidBlend(
        incr_start=100,
        peak=200,
        decline_end=300,
        shape_incr=1.0,
        shape_decr=1.0,
        winlaifrac=0.1,
    )
    lai = seasonal_lai(model, 5.0, 365)
    d = np.arange(1, 366, dtype=float)
    lo, hi = 0.5, 5.0

    expected = np.full(365, lo)
    rise = (d >= 100) & (d < 200)
    fall = (d >= 200) & (d < 300)
    a_rise = np.sin((d[rise] - 100) / 100 * np.pi / 2)
    a_fall = np.sin((d[fall] - 200) / 100 * np.pi / 2)
    expected[rise] = lo + a_rise * (hi - lo)
    expected[fall] = hi - a_fall * (hi - lo)

    npt.assert_allclose(lai, expected, rtol=RTOL, atol=ATOL)


def test_sigmoid_blend_shape_exponents_bend_the_rise():
    base = dict(incr_start=100, peak=200, decline_end=300, shape_decr=1.0)
    linear = seasonal_lai(SigmoidBlend(shape_incr=1.0, **base), 5.0, 365)
    slow = seasonal_lai(SigmoidBlend(shape_incr=3.0, **base), 5.0, 365)
    fast = seasonal_lai(SigmoidBlend(shape_incr=0.3, **base), 5.0, 365)

    inside = slice(100, 199)
    assert np.all(slow[inside] < linear[inside])
    assert np.all(fast[inside] > linear[inside])


def test_sigmoid_blend_zero_length_segments_jump():
    # increase starts on day 1 and the decline ends on the last day
    lai = seasonal_lai(
        SigmoidBlend(incr_start=1, peak=180, decline_end=366), 4.0, 366
    )
    assert np.all(np.isfinite(lai))
    assert lai[0] == 0.0
    assert lai[-1] == 0.0

    # increase and peak coincide: immediate jump to the maximum
    lai = seasonal_lai(
        SigmoidBlend(incr_start=150, peak=150, decline_end=300), 4.0, 365
    )
    assert lai[148] == 0.0
    assert lai[149] == 4.0


def test_sigmoid_blend_rejects_bad_ordering_and_shapes():
    with pytest.raises(DomainError):
        seasonal_lai(SigmoidBlend(incr_start=220, peak=200), 5.0, 365)
    with pytest.raises(DomainError):
        seasonal_lai(SigmoidBlend(decline_end=400), 5.0, 365)
    with pytest.raises(DomainError):
        # peak and end of decline coincide at the last day
        seasonal_lai(SigmoidBlend(peak=365, decline_end=365), 5.0, 365)
    with pytest.raises(DomainError):
        seasonal_lai(SigmoidBlend(peak=250, decline_end=250), 5.0, 365)
    with pytest.raises(DomainError):
        seasonal_lai(SigmoidBlend(shape_decr=0.0), 5.0, 365)


# -------------------------
# seasonal_lai dispatch
# -------------------------


def test_seasonal_lai_rejects_bad_inputs():
    with pytest.raises(DomainError):
        seasonal_lai(FixedPhase(), 5.0, 360)
    with pytest.raises(DomainError):
        seasonal_lai(FixedPhase(), -1.0, 365)
    with pytest.raises(ConfigurationError):
        seasonal_lai("b90", 5.0, 365)
    with pytest.raises(ConfigurationError):
        seasonal_lai(FixedPhase(budburst_doy=[100, 110]), 5.0, 365)


def test_seasonal_lai_is_pure():
    model = SigmoidBlend()
    a = seasonal_lai(model, 5.0, 365)
    b = seasonal_lai(model, 5.0, 365)
    npt.assert_array_equal(a, b)
