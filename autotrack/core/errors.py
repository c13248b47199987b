"""
Typed failures raised by the subscription workflow.
"""


class WorkflowError(Exception):
    """Base error for workflow operations."""


class NotFoundError(WorkflowError):
    """Subscription (or other record) does not exist."""


class InvalidTransitionError(WorkflowError):
    """Current status does not match the transition's required pre-state."""


class UnauthorizedError(WorkflowError):
    """Actor's role, sub-role or department does not pass the gate."""


class ValidationError(WorkflowError):
    """Input rejected before any mutation (empty reason, bad cost, alert days out of range)."""
