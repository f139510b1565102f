"""
Errors raised by organization workflows.

Every workflow error carries an HTTP-style ``status_code`` so that an outer
HTTP layer can map it without knowing the taxonomy. Callers that need to
tell "needs upgrade" apart from "bad input" catch ``QuotaExceededError``
separately from ``DuplicateError``.
"""


class OrganizationError(Exception):
    """Base class for errors surfaced by organization workflows."""

    status_code = 400

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def __str__(self):
        return self.message


class ConflictError(OrganizationError):
    """The organization is already provisioned."""
    status_code = 409


class DuplicateError(OrganizationError):
    """An invite is already pending or the invitee already has an account."""
    status_code = 400


class QuotaExceededError(OrganizationError):
    """A plan limit (seats or messages) would be exceeded."""
    status_code = 402


class ForbiddenError(OrganizationError):
    """An authorization invariant was violated."""
    status_code = 403


class NotAcceptableError(ForbiddenError):
    """The requested membership change is not allowed."""
    status_code = 406


class NotFoundError(OrganizationError):
    status_code = 404


class NotProvisionedError(OrganizationError):
    """The account has no organization set up yet."""
    status_code = 400


class TenantStateError(OrganizationError):
    """Stored tenant data breaks the one workspace / one team constraint."""
    status_code = 500


class TransactionFailedError(OrganizationError):
    """
    A write workflow failed for an unexpected reason and was rolled back.

    The message is deliberately generic; the underlying cause is chained via
    ``__cause__`` and logged where the failure happened.
    """
    status_code = 400
