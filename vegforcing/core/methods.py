"""
Method selectors for the synthesis components.

Each component accepts exactly one of a closed set of strategies. Selectors
are :class:`enum.Enum` members; plain strings (including the historical names
``'b90'``, ``'coupmodel'``, ``'const'``, ...) are parsed once, when the
parameters are built, and unknown names raise :class:`ConfigurationError`.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from vegforcing.core.exceptions import ConfigurationError


class _Method(str, Enum):
    """Base class for string-valued method selectors."""

    @classmethod
    def _aliases(cls) -> Mapping[str, str]:
        return {}

    @classmethod
    def parse(cls, value):
        """
        Return the member matching ``value``.

        Parameters
        ----------
        value : str or member
            Member, member value or alias (case-insensitive).

        Raises
        ------
        ConfigurationError
            If ``value`` names no known method.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            key = cls._aliases().get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        known = sorted([m.value for m in cls] + list(cls._aliases()))
        raise ConfigurationError(
            f"Unknown {cls.__name__} '{value}'. Known: {known}"
        )


class LAIMethod(_Method):
    """Seasonal LAI shape models."""

    FIXED_PHASE = "fixed-phase"
    TABLE = "table-interpolated"
    SIGMOID_BLEND = "sigmoid-blend"

    @classmethod
    def _aliases(cls) -> Mapping[str, str]:
        return {
            "b90": "fixed-phase",
            "linear": "table-interpolated",
            "table": "table-interpolated",
            "coupmodel": "sigmoid-blend",
        }


class StandInterp(_Method):
    """Interpolation policies for annual stand properties."""

    CONSTANT = "constant"
    LINEAR = "linear"
    GROWTH_PERIOD = "growthperiod"

    @classmethod
    def _aliases(cls) -> Mapping[str, str]:
        return {"step": "constant", "linear-growthperiod": "growthperiod"}


class RootMethod(_Method):
    """Relative root-density models."""

    BETA = "betamodel"
    TABLE = "table"
    LINEAR = "linear"
    CONSTANT = "constant"

    @classmethod
    def _aliases(cls) -> Mapping[str, str]:
        return {"beta": "betamodel", "const": "constant"}
