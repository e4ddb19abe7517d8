"""
Vegetation parameter presets and dataclass container.

This module provides a single, concrete dataclass :class:`VegetationParams`
that encapsulates the stand and phenology parameters consumed by the
synthesis components. The class is **frozen** (immutable) and uses **slots**
for memory efficiency. It defaults to a deciduous beech stand and includes
convenience constructors to load other presets (e.g., spruce).

The parameters cover seasonal LAI (method selector, maximum LAI, winter
fraction, phenology days and shape exponents, optional LAI table), annual
stand properties (height, stem area index, canopy density, their initial
values and stand age) with their interpolation policy and growth window, and
root distribution (method selector, maximum rooting depth, beta, optional
root table).

Classes
-------
VegetationParams
    Immutable container for vegetation parameters. Defaults to beech.
    Provides :meth:`VegetationParams.beech`, :meth:`VegetationParams.spruce`,
    :meth:`VegetationParams.from_preset` and
    :meth:`VegetationParams.with_overrides`.

Notes
-----
- **Annual values**: numeric stand and phenology parameters accept a scalar
  (same value every year) or a sequence with one value per simulated year.
  Their length is checked against the simulation period when the series are
  generated, since the period is not known here.
- **Method selectors** are parsed into enums at construction time; unknown
  names raise :class:`~vegforcing.core.exceptions.ConfigurationError`.
- **Derived parameters**: if ``growth_start_doy``/``growth_end_doy`` are not
  provided, the growth window defaults to ``budburst_doy``/``leaffall_doy``.
  ``maxrootdepth=None`` means the deepest soil layer boundary.

Examples
--------
>>> from vegforcing.core.vegetation import VegetationParams
>>> vp = VegetationParams.beech()        # equivalent to VegetationParams()
>>> vp = VegetationParams.spruce()
>>> vp = vp.with_overrides(maxlai=[4.0, 6.0, 5.0], lai_method="coupmodel")

See Also
--------
vegforcing.core.model.VegetationModel : Engine consuming VegetationParams.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from vegforcing.core.exceptions import (
    ConfigurationError,
    DomainError,
    ValidationError,
)
from vegforcing.core.lai import (
    FixedPhase,
    LAIModel,
    SigmoidBlend,
    TableInterpolated,
)
from vegforcing.core.methods import LAIMethod, RootMethod, StandInterp

AnnualValue = Union[float, Sequence[float]]


def _as_value(v):
    """Freeze list/array inputs into tuples; leave scalars untouched."""
    if v is None or np.ndim(v) == 0:
        return v
    return tuple(float(x) for x in np.ravel(v))


@dataclass(frozen=True, slots=True)
class VegetationParams:
    """
    Concrete vegetation parameter set (defaults to beech).

    Parameters
    ----------
    name : str, default="beech"
        Human-readable stand identifier.
    lai_method : LAIMethod or str, default="fixed-phase"
        ``'fixed-phase'`` (``'b90'``), ``'table-interpolated'``
        (``'linear'``) or ``'sigmoid-blend'`` (``'coupmodel'``).
    maxlai : float or sequence
        Maximum leaf area index [m²/m²].
    winlaifrac : float
        Winter LAI as a fraction of ``maxlai``, in [0, 1].
    budburst_doy, leaffall_doy : float or sequence
        Day of year of budburst and of the start of leaf fall.
    emerge_dur, leaffall_dur : float or sequence
        Duration [days] of leaf emergence and of leaf shedding.
    shp_budburst, shp_leaffall : float or sequence
        Shape exponents of the rising and falling phase ('sigmoid-blend').
    shp_optdoy : float or sequence
        Day of year of maximum LAI ('sigmoid-blend').
    lai_doy, lai_frac : sequence of float, optional
        LAI table ('table-interpolated'): days of year and fractions of
        ``maxlai``.
    height, sai, densef : float or sequence
        Year-end canopy height [m], stem area index [m²/m²] and canopy
        density [-].
    height_ini, sai_ini, densef_ini : float, optional
        Values at the end of the year preceding the simulation; default to
        the first annual value.
    age_ini : float
        Stand age [years] at the start of the first simulated year.
    standprop_interp : StandInterp or str, default="constant"
        ``'constant'`` (``'step'``), ``'linear'`` or ``'growthperiod'``.
    growth_start_doy, growth_end_doy : float or sequence, optional
        Growth window of ``'growthperiod'``; default to budburst/leaf fall.
    root_method : RootMethod or str, default="betamodel"
        ``'betamodel'``, ``'table'``, ``'linear'`` or ``'constant'``.
    maxrootdepth : float or sequence, optional
        Maximum rooting depth [m, negative]; defaults to the deepest layer.
    betaroot : float or sequence
        Beta of the root model, in (0, 1].
    rootden, rootdepths : sequence of float, optional
        Root table, or (``rootden[0]``) the maximum density of the 'linear'
        and 'constant' models.

    Notes
    -----
    - This class is frozen for immutability and uses slots.
    - Defaults reproduce a **beech** stand; use ``from_preset("spruce")`` or
      ``spruce()`` for an evergreen spruce stand.

    Raises
    ------
    ConfigurationError
        For unknown method names.
    ValidationError
        If a table method is selected without its table.
    DomainError
        If ``winlaifrac`` is outside [0, 1].
    """

    # --- Identity ---
    name: str = "beech"

    # --- Seasonal LAI ---
    lai_method: LAIMethod | str = LAIMethod.FIXED_PHASE
    maxlai: AnnualValue = 6.0
    winlaifrac: AnnualValue = 0.0
    budburst_doy: AnnualValue = 121
    leaffall_doy: AnnualValue = 279
    emerge_dur: AnnualValue = 28
    leaffall_dur: AnnualValue = 58
    shp_budburst: AnnualValue = 0.3
    shp_leaffall: AnnualValue = 3.0
    shp_optdoy: AnnualValue = 210
    lai_doy: Optional[Tuple[float, ...]] = None
    lai_frac: Optional[Tuple[float, ...]] = None

    # --- Stand properties ---
    height: AnnualValue = 25.0
    height_ini: Optional[float] = None
    sai: AnnualValue = 1.0
    sai_ini: Optional[float] = None
    densef: AnnualValue = 1.0
    densef_ini: Optional[float] = None
    age_ini: float = 100.0
    standprop_interp: StandInterp | str = StandInterp.CONSTANT
    growth_start_doy: Optional[AnnualValue] = None
    growth_end_doy: Optional[AnnualValue] = None

    # --- Roots ---
    root_method: RootMethod | str = RootMethod.BETA
    maxrootdepth: Optional[AnnualValue] = None
    betaroot: AnnualValue = 0.97
    rootden: Optional[Tuple[float, ...]] = None
    rootdepths: Optional[Tuple[float, ...]] = None

    # -------------------------
    # Post-init: normalize & validate
    # -------------------------
    def __post_init__(self):
        """
        Parse method selectors, freeze sequences and run basic checks.

        Because :class:`VegetationParams` is frozen, normalized values are
        assigned with ``object.__setattr__``.
        """
        object.__setattr__(
            self, "lai_method", LAIMethod.parse(self.lai_method)
        )
        object.__setattr__(
            self, "standprop_interp", StandInterp.parse(self.standprop_interp)
        )
        object.__setattr__(
            self, "root_method", RootMethod.parse(self.root_method)
        )
        selectors = ("name", "lai_method", "standprop_interp", "root_method")
        for f in fields(self):
            if f.name in selectors:
                continue
            object.__setattr__(self, f.name, _as_value(getattr(self, f.name)))

        frac = np.asarray(self.winlaifrac, dtype=float)
        if np.any((frac < 0.0) | (frac > 1.0)):
            raise DomainError("winlaifrac must be in [0, 1].")

        # build the LAI model once so table/selector problems surface here
        self.lai_model()
        if self.root_method is RootMethod.TABLE and (
            self.rootden is None or self.rootdepths is None
        ):
            raise ValidationError(
                "root_method='table' needs 'rootden' and 'rootdepths'."
            )

    # -------------------------
    # Derived views
    # -------------------------
    def lai_model(self) -> LAIModel:
        """Return the LAI model variant selected by ``lai_method``."""
        if self.lai_method is LAIMethod.FIXED_PHASE:
            return FixedPhase(
                budburst_doy=self.budburst_doy,
                emerge_dur=self.emerge_dur,
                leaffall_doy=self.leaffall_doy,
                leaffall_dur=self.leaffall_dur,
                winlaifrac=self.winlaifrac,
            )
        if self.lai_method is LAIMethod.TABLE:
            return TableInterpolated(doy=self.lai_doy, frac=self.lai_frac)
        # leaf shedding ends at leaffall_doy + leaffall_dur
        try:
            decline_end = np.add(self.leaffall_doy, self.leaffall_dur)
        except ValueError as e:
            raise ValidationError(
                "leaffall_doy and leaffall_dur hold annual vectors of "
                "different lengths."
            ) from e
        return SigmoidBlend(
            incr_start=self.budburst_doy,
            peak=self.shp_optdoy,
            decline_end=_as_value(decline_end),
            shape_incr=self.shp_budburst,
            shape_decr=self.shp_leaffall,
            winlaifrac=self.winlaifrac,
        )

    def growth_window(self) -> tuple[AnnualValue, AnnualValue]:
        """Growth window bounds, defaulting to budburst and leaf fall."""
        start = (
            self.budburst_doy
            if self.growth_start_doy is None
            else self.growth_start_doy
        )
        end = (
            self.leaffall_doy
            if self.growth_end_doy is None
            else self.growth_end_doy
        )
        return start, end

    # -------------------------
    # Convenience constructors / presets
    # -------------------------
    def with_overrides(self, **overrides) -> "VegetationParams":
        """
        Return a copy with selected parameters replaced.

        Raises
        ------
        ConfigurationError
            If an override names an unknown parameter.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigurationError(f"Unknown parameter(s) {unknown}.")
        return replace(self, **overrides)

    @classmethod
    def beech(cls) -> "VegetationParams":
        """Return a `VegetationParams` instance with beech defaults."""
        return cls(name="beech")

    @classmethod
    def spruce(cls) -> "VegetationParams":
        """Return a `VegetationParams` instance with spruce parameters."""
        return cls.from_preset("spruce")

    @classmethod
    def from_preset(cls, name: str) -> "VegetationParams":
        """
        Instantiate from a named preset.

        Parameters
        ----------
        name : {'beech', 'spruce'}
            Preset identifier.

        Returns
        -------
        VegetationParams
            Parameter set for the given preset.

        Raises
        ------
        ConfigurationError
            If `name` is not a known preset.
        """
        presets: Mapping[str, dict] = {
            # beech is the class default; listed for clarity
            "beech": dict(name="beech"),
            # --- evergreen spruce: needles kept over winter ---
            "spruce": dict(
                name="spruce",
                # seasonal LAI
                maxlai=5.0,
                winlaifrac=0.8,
                budburst_doy=140,
                emerge_dur=35,
                leaffall_doy=270,
                leaffall_dur=60,
                shp_optdoy=200,
                # stand
                height=30.0,
                sai=1.2,
                densef=1.0,
                age_ini=80.0,
                # roots: shallower system
                betaroot=0.95,
            ),
        }
        try:
            return cls(**presets[name])
        except KeyError as e:
            raise ConfigurationError(
                f"Unknown preset '{name}'. Known: {sorted(presets)}"
            ) from e
