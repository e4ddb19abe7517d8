"""
Vegetation forcing synthesis engine.

This module assembles the daily vegetation forcing of one simulation setup.
The public entry point is :class:`VegetationModel`, which composes the static
containers :class:`~.data_containers.Calendar`,
:class:`~.data_containers.SoilLayers`, :class:`~.vegetation.VegetationParams`
and an optional :class:`~.data_containers.StandPropertyTable`, and produces a
:class:`~.data_containers.VegetationSeries` object.

The implementation follows a modular design: annual stand properties (and the
annual maximum LAI) first, then the multi-year LAI expansion, then one root
profile per simulated year.

Design Principles
-----------------
- **Deterministic & reproducible**: given the same inputs, `evolve()` returns
  bit-identical series.
- **Pure numerics**: no I/O, plotting, or file access; inputs/outputs are
  NumPy arrays.
- **Fail fast**: every parameter problem raises before any series is
  returned.

See Also
--------
vegforcing.core.lai : Seasonal LAI models.
vegforcing.core.expander : Multi-year LAI expansion.
vegforcing.core.standprop : Stand property interpolation.
vegforcing.core.roots : Relative root density models.

Examples
--------
>>> from vegforcing.core.model import VegetationModel
>>> from vegforcing.core.vegetation import VegetationParams
>>> m = VegetationModel.from_dates(
...     "2003-01-01", "2005-12-31",
...     soil=[-0.05, -0.15, -0.3, -0.6, -1.0],
...     params=VegetationParams.beech(),
... )
>>> res = m.evolve()
>>> res.lai.shape
(1096,)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from vegforcing.core.data_containers import (
    Calendar,
    SoilLayers,
    StandPropertyTable,
    VegetationSeries,
)
from vegforcing.core.expander import expand_lai
from vegforcing.core.roots import annual_root_profiles
from vegforcing.core.standprop import make_stand_properties
from vegforcing.core.vegetation import VegetationParams

Array = np.ndarray

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VegetationModel:
    r"""Daily vegetation forcing for one site and simulation period.

    Parameters
    ----------
    calendar : Calendar
        Simulation period (may start and end mid-year).
    soil : SoilLayers
        Soil layer geometry used for the root profiles.
    params : VegetationParams
        Phenology, stand and root parameters with their method selectors.
    table : StandPropertyTable, optional
        Per-year stand properties superseding the annual parameters.

    Notes
    -----
    - **Complexity.** :math:`O(T + N\,L)` for ``T`` days, ``N`` years and
      ``L`` soil layers.
    - **Units.** LAI and SAI [m² m⁻²], height [m], canopy density [-], age
      [years], depths [m, negative downward].

    See Also
    --------
    vegforcing.core.data_containers.VegetationSeries
        Output container returned by :meth:`evolve`.
    """

    calendar: Calendar
    soil: SoilLayers
    params: VegetationParams
    table: Optional[StandPropertyTable] = None

    @classmethod
    def from_dates(
        cls,
        start,
        end,
        soil: SoilLayers | Sequence[float],
        params: Optional[VegetationParams] = None,
        table: Optional[StandPropertyTable] = None,
    ) -> "VegetationModel":
        """Build a model from a date range and lower layer boundaries."""
        if not isinstance(soil, SoilLayers):
            soil = SoilLayers(soil)
        return cls(
            calendar=Calendar(start, end),
            soil=soil,
            params=VegetationParams() if params is None else params,
            table=table,
        )

    # ---------------------------
    # Public API
    # ---------------------------
    def evolve(self) -> VegetationSeries:
        """Synthesize the daily series and root profiles."""
        cal, p = self.calendar, self.params
        logger.debug(
            "Synthesizing %s forcing %s..%s (%d days, %d years): "
            "lai=%s, standprop=%s, roots=%s",
            p.name,
            cal.start.date(),
            cal.end.date(),
            len(cal),
            cal.n_years,
            p.lai_method.value,
            p.standprop_interp.value,
            p.root_method.value,
        )

        stand = make_stand_properties(cal, p, self.table)
        lai = expand_lai(cal, p.lai_model(), stand["maxlai"])
        roots = self._root_profiles()

        return VegetationSeries(
            dates=cal.dates,
            lai=lai,
            height=stand["height"],
            sai=stand["sai"],
            densef=stand["densef"],
            age=stand["age"],
            years=cal.years.copy(),
            maxlai=stand["maxlai"],
            roots=roots,
        )

    # --------------------------- End of public API --------------------------

    def _root_profiles(self) -> Array:
        """
        Root profile of each simulated year.

        Returns
        -------
        ndarray of shape (N, L)
            Identical rows unless ``maxrootdepth`` or ``betaroot`` vary by
            year.
        """
        p = self.params
        return annual_root_profiles(
            self.soil,
            self.calendar.n_years,
            method=p.root_method,
            maxrootdepth=p.maxrootdepth,
            beta=p.betaroot,
            relrootden=p.rootden,
            rootdepths=p.rootdepths,
        )
