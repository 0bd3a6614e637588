"""Exceptions raised by the acoustic collar settings package."""


class ValidationError(ValueError):
    """A proposed configuration value breaks one of the settings invariants.

    Attributes:
        field: Name of the offending field (may be dotted, e.g. 'correction_steps[0].strength_range')
    """

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field
