"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations inside service layers.
They are deliberately **not** DRF exceptions so that the domain layer stays
framework-agnostic.  The global DRF exception handler in
``core.domain.exception_handler`` renders them in the uniform error
envelope using the status code carried by each class.

Mapping cheatsheet
------------------
┌──────────────────────┬──────────────────────────────────────┬──────┐
│ Domain Exception     │ Meaning                              │ Code │
├──────────────────────┼──────────────────────────────────────┼──────┤
│ DomainError          │ missing / malformed input            │ 400  │
│ AuthenticationFailed │ missing / invalid credential         │ 401  │
│ PermissionDenied     │ authenticated but not permitted      │ 403  │
│ NotFound             │ resource does not exist              │ 404  │
│ Conflict             │ state precondition violated          │ 409  │
│ InvalidTransition    │ illegal lifecycle transition         │ 409  │
│ UploadFailed         │ remote media host rejected an upload │ 500  │
└──────────────────────┴──────────────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidTransition

    if new_status not in ALLOWED_TRANSITIONS[current_status]:
        raise InvalidTransition(current=current_status, target=new_status)
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    status_code = 400

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class AuthenticationFailed(DomainError):
    """
    The credential is missing, malformed, expired or revoked.

    Maps to HTTP 401.
    """

    status_code = 401

    def __init__(self, message: str = "Unauthorized access.") -> None:
        super().__init__(message)


class PermissionDenied(DomainError):
    """
    The authenticated user does not have the required role or relationship
    to the resource for this operation.

    Maps to HTTP 403.
    """

    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action.") -> None:
        super().__init__(message)


class NotFound(DomainError):
    """
    The requested resource does not exist.

    Maps to HTTP 404.
    """

    status_code = 404

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource.

    Typical usage: double assignment, duplicate feedback, duplicate email.
    Maps to HTTP 409.
    """

    status_code = 409

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)


class InvalidTransition(Conflict):
    """
    A state-machine transition that is not allowed from the current status.

    Inherits from ``Conflict`` because an invalid transition IS a conflict
    with the resource's current state.  Maps to HTTP 409.

    Example::

        raise InvalidTransition(
            current="PENDING",
            target="RESOLVED",
            reason="Complaint must be accepted first.",
        )
    """

    def __init__(
        self,
        message: str | None = None,
        *,
        current: str | None = None,
        target: str | None = None,
        reason: str | None = None,
    ) -> None:
        if message is None:
            parts = ["Invalid state transition"]
            if current and target:
                parts.append(f"from '{current}' to '{target}'")
            if reason:
                parts.append(f"({reason})")
            message = " ".join(parts) + "."
        super().__init__(message)
        self.current = current
        self.target = target
        self.reason = reason


class UploadFailed(DomainError):
    """
    The remote media host did not accept an uploaded file.

    Maps to HTTP 500: the request was valid but a collaborator failed.
    """

    status_code = 500

    def __init__(self, message: str = "Error uploading image.") -> None:
        super().__init__(message)
