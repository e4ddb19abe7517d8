"""Exception hierarchy for vegforcing.

All errors are raised eagerly, before any output is produced, and are scoped
to the single call that raised them. The concrete classes also derive from
:class:`ValueError` so generic ``except ValueError`` handlers keep working.
"""


class VegForcingError(Exception):
    """Top vegforcing exception."""


class ConfigurationError(VegForcingError, ValueError):
    """Raised for unknown method selectors or missing method parameters."""


class ValidationError(VegForcingError, ValueError):
    """Raised when annual vectors or tables do not match the run."""


class DomainError(VegForcingError, ValueError):
    """Raised when breakpoints, windows or soil geometry are out of order."""
