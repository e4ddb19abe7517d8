"""Daily vegetation and root-distribution forcing for hydrological models."""

import logging

from vegforcing.core.data_containers import (
    Calendar,
    SoilLayers,
    StandPropertyTable,
    VegetationSeries,
)
from vegforcing.core.exceptions import (
    ConfigurationError,
    DomainError,
    ValidationError,
    VegForcingError,
)
from vegforcing.core.model import VegetationModel
from vegforcing.core.vegetation import VegetationParams

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Calendar",
    "SoilLayers",
    "StandPropertyTable",
    "VegetationSeries",
    "VegetationModel",
    "VegetationParams",
    "VegForcingError",
    "ConfigurationError",
    "ValidationError",
    "DomainError",
]
