"""
Exceptions raised by the plan ledger.

Everything the ledger raises for an expected condition derives from PlanError,
so callers (the CLI, the pipelines) can report it to the operator and carry on.
Filesystem failures are not wrapped: they surface as the builtin OSError.
"""


class PlanError(Exception):
    """Base class for all expected ledger failures."""


class InvalidInput(PlanError, ValueError):
    """User supplied data is malformed (empty required field, zero quantity...)."""


class StateError(PlanError):
    """The operation is not possible in the current session state."""


class NoActiveGroup(StateError):
    def __init__(self, message: str = "No plan group is currently open."):
        super().__init__(message)


class NothingSelected(StateError):
    def __init__(self, message: str = "Select at least one FNSKU to branch."):
        super().__init__(message)


class EverythingSelected(StateError):
    def __init__(self, message: str = "Every FNSKU is selected, nothing would be left to move."):
        super().__init__(message)


class ReportImportError(PlanError):
    """A vendor report could not be turned into entries. No entries are returned."""
