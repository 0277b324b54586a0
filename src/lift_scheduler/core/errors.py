"""Exception types raised by the planning core."""


class ConfigurationError(ValueError):
    """Invalid plan configuration (weeks out of range, unmapped split/day count)."""


class SelectionUnsatisfiable(Exception):
    """
    No movement satisfied the selection constraints.

    Never propagated out of plan generation: the assembler records the
    condition as a warning on the plan and carries on without the slot.
    """

    def __init__(self, message: str, muscle: str | None = None):
        super().__init__(message)
        self.muscle = muscle
