import numpy as np
import numpy.testing as npt
import pytest

from vegforcing.core.data_containers import Calendar
from vegforcing.core.exceptions import DomainError, ValidationError
from vegforcing.core.expander import expand_annual, expand_lai
from vegforcing.core.lai import (
    FixedPhase,
    SigmoidBlend,
    TableInterpolated,
    seasonal_lai,
)


def test_three_years_with_annual_maxima():
    cal = Calendar("2003-01-01", "2005-12-31")
    lai = expand_lai(cal, FixedPhase(), [4.0, 6.0, 5.0])

    # 2004 is a leap year
    assert len(lai) == 365 + 366 + 365 == len(cal)
    for year, peak in zip((2003, 2004, 2005), (4.0, 6.0, 5.0)):
        assert lai[cal.year == year].max() == peak


def test_partial_years_are_cut_from_full_years():
    cal = Calendar("2004-03-01", "2005-06-30")
    model = SigmoidBlend()
    lai = expand_lai(cal, model, 5.0)

    full_2004 = seasonal_lai(model, 5.0, 366)
    full_2005 = seasonal_lai(model, 5.0, 365)
    expected = np.concatenate((full_2004[60:], full_2005[:181]))

    assert len(lai) == len(cal) == 306 + 181
    npt.assert_array_equal(lai, expected)


def test_breakpoints_are_literal_in_leap_years():
    cal = Calendar("2003-01-01", "2004-12-31")
    lai = expand_lai(cal, FixedPhase(winlaifrac=0.0), 6.0)
    dates = cal.dates

    # day 149 (budburst + emergence) is 29 May in 2003 and 28 May in 2004
    assert lai[dates.get_loc("2003-05-29")] == 6.0
    assert lai[dates.get_loc("2004-05-28")] == 6.0
    assert lai[dates.get_loc("2004-05-29")] == 6.0
    assert lai[dates.get_loc("2004-05-27")] < 6.0


def test_annual_phenology_vectors():
    cal = Calendar("2010-01-01", "2012-12-31")
    model = FixedPhase(budburst_doy=[100, 110, 120], winlaifrac=0.0)
    lai = expand_lai(cal, model, 3.0)

    for year, budburst in zip((2010, 2011, 2012), (100, 110, 120)):
        season = lai[cal.year == year]
        assert np.all(season[:budburst] == 0.0)
        assert season[budburst] > 0.0


def test_expand_annual_broadcasts_scalars():
    models = expand_annual(FixedPhase(leaffall_doy=[270, 280]), 2)
    assert [m.leaffall_doy for m in models] == [270.0, 280.0]
    assert [m.budburst_doy for m in models] == [121.0, 121.0]

    table = TableInterpolated(doy=[1, 365], frac=[0.0, 1.0])
    assert expand_annual(table, 3) == [table, table, table]


def test_annual_length_mismatch_is_rejected():
    cal = Calendar("2003-01-01", "2005-12-31")
    with pytest.raises(ValidationError):
        expand_lai(cal, FixedPhase(), [4.0, 6.0])
    with pytest.raises(ValidationError):
        expand_lai(cal, FixedPhase(budburst_doy=[100, 110, 120, 130]), 5.0)


def test_invalid_year_fails_before_output():
    cal = Calendar("2003-01-01", "2004-12-31")
    # day 366 only exists in 2004
    model = SigmoidBlend(decline_end=366)
    with pytest.raises(DomainError):
        expand_lai(cal, model, 5.0)


def test_expand_lai_is_pure():
    cal = Calendar("2000-06-15", "2003-02-01")
    model = SigmoidBlend(peak=[200, 205, 210, 215])
    a = expand_lai(cal, model, [3.0, 4.0, 5.0, 6.0])
    b = expand_lai(cal, model, [3.0, 4.0, 5.0, 6.0])
    npt.assert_array_equal(a, b)
