"""Exception classes for production chain and KPI operations.

Every user-facing error carries a stable ``code`` and the ``params`` (conflicting
quantities, dates, identifiers) so the API layer can render an actionable message.
"""

from django.utils.translation import gettext_lazy as _


class ProductionError(Exception):
    """Base exception for this module."""

    code = "production_error"
    default_message = _("Production operation failed")

    def __init__(self, message=None, **params):
        self.params = params
        if message is None:
            message = self.default_message
        message = str(message)
        self.message = message % params if params else message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"code": self.code, "detail": self.message, "params": self.params}


class InvalidRangeError(ProductionError):
    """Raised when a date range is inverted, has no working days, or a date is outside it."""

    code = "invalid_range"
    default_message = _("Invalid date range")


class InvalidQuantityError(ProductionError):
    """Raised when a quantity is negative or not allowed for the targeted unit."""

    code = "invalid_quantity"
    default_message = _("Invalid quantity")


class LockedUnitError(ProductionError):
    """Raised when an edit would change the value of a completed (locked) unit."""

    code = "locked_unit"
    default_message = _("The unit is locked by a completion record")


class OverCommittedError(ProductionError):
    """Raised when a new total is below the quantity already completed."""

    code = "over_committed"
    default_message = _("Cannot set total to %(new_total)s; %(locked_sum)s units already completed")


class NoAssigneeError(ProductionError):
    """Raised when the next chain step's department has nobody to receive the work."""

    code = "no_assignee"
    default_message = _("Department %(department_id)s has no member to assign step %(step_order)s to")


class ChainStepsError(ProductionError):
    """Raised when chain steps violate ordering, department or locking rules."""

    code = "invalid_chain_steps"
    default_message = _("Invalid production chain steps")


class ChainStateError(ProductionError):
    """Raised when a chain or run is not in a state that allows the operation."""

    code = "invalid_chain_state"
    default_message = _("The production chain does not allow this operation")


class AssignmentError(ProductionError):
    """Raised when a week assignment does not fit the chain, the assignee or its own state."""

    code = "invalid_assignment"
    default_message = _("Invalid KPI week assignment")


class AssignmentOverflowError(ProductionError):
    """Raised when a department is given more than a day's target in one week."""

    code = "assignment_over_target"
    default_message = _(
        "Department %(department_id)s would be assigned %(assigned)s on %(date)s, above the day target %(target)s"
    )


class StaleKPISnapshotError(Exception):
    """Raised when a KPI was modified between read and write; the operation is retried."""

    pass
