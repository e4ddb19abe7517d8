import numpy as np
import numpy.testing as npt
import pytest

from vegforcing.core.data_containers import SoilLayers
from vegforcing.core.exceptions import (
    ConfigurationError,
    DomainError,
    ValidationError,
)
from vegforcing.core.roots import (
    annual_root_profiles,
    linear_root_density,
    relative_root_density,
)

ATOL = 1e-12
RTOL = 1e-10

# ten 10-cm layers down to 1 m
EVEN = SoilLayers(-0.1 * np.arange(1, 11))
# uneven layers, as in a typical forest soil profile
UNEVEN = SoilLayers([-0.05, -0.15, -0.3, -0.6, -1.0, -1.6])


# -------------------------
# betamodel
# -------------------------


def test_beta_first_layer_and_total():
    dens = relative_root_density(EVEN, "betamodel", beta=0.97)
    npt.assert_allclose(dens[0], 1 - 0.97**10, rtol=RTOL, atol=ATOL)
    npt.assert_allclose(dens.sum(), 1 - 0.97**100, rtol=RTOL, atol=ATOL)


def test_beta_is_non_negative_and_non_increasing():
    dens = relative_root_density(EVEN, "betamodel", beta=0.95)
    assert np.all(dens >= 0)
    assert np.all(np.diff(dens) <= 0)


def test_larger_beta_shifts_roots_deeper():
    shallow = np.cumsum(relative_root_density(UNEVEN, "betamodel", beta=0.9))
    deep = np.cumsum(relative_root_density(UNEVEN, "betamodel", beta=0.97))
    assert np.all(shallow >= deep)


def test_beta_is_clipped_at_maxrootdepth():
    dens = relative_root_density(
        EVEN, "betamodel", maxrootdepth=-0.45, beta=0.97
    )
    # the layer from 40 to 50 cm only gets roots down to 45 cm
    npt.assert_allclose(
        dens[4], 0.97**40 - 0.97**45, rtol=RTOL, atol=ATOL
    )
    npt.assert_array_equal(dens[5:], 0.0)
    npt.assert_allclose(dens.sum(), 1 - 0.97**45, rtol=RTOL, atol=ATOL)


def test_beta_out_of_range():
    with pytest.raises(DomainError):
        relative_root_density(EVEN, "betamodel", beta=1.5)
    with pytest.raises(DomainError):
        relative_root_density(EVEN, "betamodel", beta=0.0)


# -------------------------
# table
# -------------------------


def test_table_reproduces_values_at_supplied_depths():
    soil = SoilLayers([-0.1, -0.2, -0.4, -0.6])  # midpoints .05 .15 .3 .5
    dens = relative_root_density(
        soil,
        "table",
        relrootden=[15.0, 10.0, 5.0],
        rootdepths=[-0.05, -0.3, -0.5],
    )
    npt.assert_allclose(dens, [15.0, 13.0, 10.0, 5.0], rtol=1e-9, atol=1e-9)


def test_table_clamps_shallow_and_zeroes_deep():
    dens = relative_root_density(
        UNEVEN,
        "table",
        relrootden=[30.0, 10.0],
        rootdepths=[-0.2, -0.5],
    )
    # midpoints: -0.025, -0.1, -0.225, -0.45, -0.8, -1.3
    assert dens[0] == 30.0
    assert dens[1] == 30.0
    npt.assert_array_equal(dens[4:], 0.0)


def test_table_rejects_positive_depths():
    with pytest.raises(DomainError):
        relative_root_density(
            UNEVEN, "table", relrootden=[1.0, 0.5], rootdepths=[0.1, 0.2]
        )


def test_table_requires_data():
    with pytest.raises(ValidationError):
        relative_root_density(UNEVEN, "table", relrootden=[1.0])
    with pytest.raises(ValidationError):
        relative_root_density(
            UNEVEN, "table", relrootden=[1.0, 2.0], rootdepths=[-0.1]
        )


# -------------------------
# linear / constant
# -------------------------


def test_linear_density_endpoints():
    assert linear_root_density(0.0, -1.2, top=0.2) == 0.2
    assert linear_root_density(-1.2, -1.2, top=0.2) == 0.0
    assert linear_root_density(-1.5, -1.2, top=0.2) == 0.0


def test_linear_profile_at_midpoints():
    dens = relative_root_density(
        EVEN, "linear", maxrootdepth=-0.6, relrootden=[0.2, 99.0]
    )
    expected = np.clip(0.2 * (1 - EVEN.midpoints / -0.6), 0.0, None)
    npt.assert_allclose(dens, expected, rtol=1e-9, atol=1e-12)
    npt.assert_array_equal(dens[6:], 0.0)
    assert np.all(np.diff(dens[:6]) < 0)


def test_linear_defaults_to_unit_maximum():
    dens = relative_root_density(EVEN, "linear")
    npt.assert_allclose(dens[0], 1 - 0.05 / 1.0, rtol=1e-9, atol=1e-12)


def test_constant_profile():
    dens = relative_root_density(
        UNEVEN, "const", maxrootdepth=-0.6, relrootden=0.2
    )
    npt.assert_array_equal(dens, [0.2, 0.2, 0.2, 0.2, 0.0, 0.0])

    dens = relative_root_density(UNEVEN, "constant")
    npt.assert_array_equal(dens, 1.0)


# -------------------------
# errors and annual profiles
# -------------------------


def test_unknown_method():
    with pytest.raises(ConfigurationError):
        relative_root_density(UNEVEN, "exponential")


def test_geometry_and_depth_errors():
    with pytest.raises(DomainError):
        relative_root_density([-0.1, -0.3, -0.2], "betamodel")
    with pytest.raises(DomainError):
        relative_root_density(UNEVEN, "betamodel", maxrootdepth=0.1)
    with pytest.raises(DomainError):
        relative_root_density(UNEVEN, "constant", maxrootdepth=-2.0)


def test_annual_profiles_follow_rooting_depth():
    roots = annual_root_profiles(
        EVEN, 3, "betamodel", maxrootdepth=[-0.3, -0.6, -1.0], beta=0.96
    )
    assert roots.shape == (3, 10)
    assert np.count_nonzero(roots[0]) == 3
    assert np.count_nonzero(roots[1]) == 6
    assert np.count_nonzero(roots[2]) == 10
    npt.assert_allclose(roots[0][:3], roots[2][:3], rtol=RTOL, atol=ATOL)


def test_annual_profiles_share_default_depth():
    roots = annual_root_profiles(UNEVEN, 2, "linear")
    npt.assert_array_equal(roots[0], roots[1])
    with pytest.raises(ValidationError):
        annual_root_profiles(UNEVEN, 3, beta=[0.9, 0.95])


def test_profiles_are_pure():
    a = relative_root_density(UNEVEN, "betamodel", beta=0.93)
    b = relative_root_density(UNEVEN, "betamodel", beta=0.93)
    npt.assert_array_equal(a, b)
