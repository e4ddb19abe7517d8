"""
Relative root-length density per soil layer.

Four models are available (:class:`~vegforcing.core.methods.RootMethod`):

- ``betamodel``: cumulative root fraction ``1 - beta**d`` (``d`` in cm) after
  Gale & Grigal (1987), differenced over the layer boundaries;
- ``table``: linear interpolation of ``(depth, density)`` pairs at the layer
  midpoints;
- ``linear``: density falling linearly from a maximum at the surface to 0 at
  the maximum rooting depth, evaluated at the layer midpoints;
- ``constant``: uniform density down to the maximum rooting depth.

Densities are relative; they are not normalized to sum to one.

References
----------
Gale, M.R. & Grigal, D.F. (1987): Vertical root distributions of northern
tree species in relation to successional status. Canadian Journal of Forest
Research, 17: 829-834.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from vegforcing.core.data_containers import SoilLayers, to_annual
from vegforcing.core.exceptions import DomainError, ValidationError
from vegforcing.core.methods import RootMethod

Array = np.ndarray


def _as_soil(soil: SoilLayers | Sequence[float]) -> SoilLayers:
    return soil if isinstance(soil, SoilLayers) else SoilLayers(soil)


def _top_density(relrootden) -> float:
    if relrootden is None:
        return 1.0
    return float(np.atleast_1d(relrootden)[0])


def _check_maxrootdepth(soil: SoilLayers, maxrootdepth: float) -> None:
    if maxrootdepth >= 0.0:
        raise DomainError(
            f"maxrootdepth must lie below the surface (got {maxrootdepth})."
        )
    if maxrootdepth < soil.deepest:
        raise DomainError(
            f"maxrootdepth {maxrootdepth} lies below the deepest soil layer "
            f"boundary {soil.deepest}."
        )


def beta_root_density(
    soil: SoilLayers, maxrootdepth: float, beta: float
) -> Array:
    """
    Gale & Grigal root distribution, clipped at ``maxrootdepth``.

    Every layer boundary deeper than ``maxrootdepth`` is moved up to it, so the
    layer straddling ``maxrootdepth`` receives the root fraction down to that
    depth and all layers below it receive 0.
    """
    if not (0.0 < beta <= 1.0):
        raise DomainError(f"beta must be in (0, 1], got {beta}.")
    depth_cm = np.minimum(-100.0 * soil.lower, -100.0 * maxrootdepth)
    cumulative = 1.0 - beta**depth_cm
    return np.diff(cumulative, prepend=0.0)


def table_root_density(
    soil: SoilLayers,
    relrootden: Optional[Sequence[float]],
    rootdepths: Optional[Sequence[float]],
) -> Array:
    """
    Interpolate ``(rootdepths, relrootden)`` pairs at the layer midpoints.

    Midpoints deeper than the deepest pair get 0; midpoints shallower than the
    shallowest pair take its density. Depths are in metres, negative
    downward like the layer boundaries.
    """
    if relrootden is None or rootdepths is None:
        raise ValidationError(
            "The table root model needs 'rootden' and 'rootdepths'."
        )
    x = np.atleast_1d(np.asarray(rootdepths, dtype=float))
    y = np.atleast_1d(np.asarray(relrootden, dtype=float))
    if x.size == 0 or x.shape != y.shape:
        raise ValidationError(
            "Root table needs matching, non-empty depth and density columns."
        )
    if np.any(x > 0.0):
        raise DomainError(
            "Root table depths must be negative downward (at or below 0 m)."
        )
    order = np.argsort(x)
    x, y = x[order], y[order]
    if np.any(np.diff(x) == 0):
        raise DomainError("Root table depths must be unique.")
    return np.interp(soil.midpoints, x, y, left=0.0)


def linear_root_density(
    depth: Array | float, maxrootdepth: float, top: float = 1.0
) -> Array:
    """
    Linearly decreasing density at arbitrary ``depth`` [m, negative].

    Equals ``top`` at the surface, 0 at ``maxrootdepth`` and below.
    """
    return np.interp(
        depth, [maxrootdepth, 0.0], [0.0, top], left=0.0, right=top
    )


def relative_root_density(
    soil: SoilLayers | Sequence[float],
    method: RootMethod | str = RootMethod.BETA,
    maxrootdepth: Optional[float] = None,
    beta: float = 0.97,
    relrootden: Optional[Sequence[float]] = None,
    rootdepths: Optional[Sequence[float]] = None,
) -> Array:
    """
    Relative root-length density of each soil layer.

    Parameters
    ----------
    soil : SoilLayers or sequence of float
        Lower layer boundaries [m, negative downward].
    method : RootMethod or str, default='betamodel'
        ``'betamodel'``, ``'table'``, ``'linear'`` or ``'constant'``.
    maxrootdepth : float, optional
        Maximum rooting depth [m, negative]; defaults to the deepest layer
        boundary. Not used by ``'table'``.
    beta : float, default=0.97
        Shape parameter of ``'betamodel'``, in (0, 1]. Values closer to 1 put
        more roots at depth.
    relrootden : sequence of float, optional
        Densities of the ``'table'`` model, or (first element) the maximum
        density of ``'linear'`` and ``'constant'`` (default 1).
    rootdepths : sequence of float, optional
        Depths [m, negative] of the ``'table'`` densities.

    Returns
    -------
    ndarray, shape (L,)
        Non-negative relative density per layer.

    Raises
    ------
    ConfigurationError
        For an unknown method.
    ValidationError
        If the ``'table'`` model lacks its table.
    DomainError
        For non-monotonic soil geometry, ``maxrootdepth`` at or above the
        surface or below the deepest layer, or ``beta`` outside (0, 1].

    Examples
    --------
    >>> relative_root_density([-0.1, -0.3, -0.6, -1.0], "constant",
    ...                       maxrootdepth=-0.6, relrootden=0.2)
    array([0.2, 0.2, 0.2, 0. ])
    """
    method = RootMethod.parse(method)
    soil = _as_soil(soil)

    if method is RootMethod.TABLE:
        return table_root_density(soil, relrootden, rootdepths)

    maxrootdepth = (
        soil.deepest if maxrootdepth is None else float(maxrootdepth)
    )
    _check_maxrootdepth(soil, maxrootdepth)

    if method is RootMethod.BETA:
        return beta_root_density(soil, maxrootdepth, float(beta))

    top = _top_density(relrootden)
    if method is RootMethod.LINEAR:
        return linear_root_density(soil.midpoints, maxrootdepth, top)
    return np.where(soil.lower >= maxrootdepth, top, 0.0)


def annual_root_profiles(
    soil: SoilLayers | Sequence[float],
    n_years: int,
    method: RootMethod | str = RootMethod.BETA,
    maxrootdepth: float | Sequence[float] | None = None,
    beta: float | Sequence[float] = 0.97,
    relrootden: Optional[Sequence[float]] = None,
    rootdepths: Optional[Sequence[float]] = None,
) -> Array:
    """
    One root profile per simulated year.

    ``maxrootdepth`` and ``beta`` may be scalars or hold one value per year;
    the table and maximum density are shared by all years.

    Returns
    -------
    ndarray, shape (N, L)
        Row ``i`` is the profile of the ``i``-th simulated year.
    """
    soil = _as_soil(soil)
    if maxrootdepth is None:
        maxrootdepth = soil.deepest
    depths = to_annual(maxrootdepth, n_years, "maxrootdepth")
    betas = to_annual(beta, n_years, "beta")
    return np.vstack(
        [
            relative_root_density(
                soil, method, d, b, relrootden, rootdepths
            )
            for d, b in zip(depths, betas)
        ]
    )
