from fastapi import HTTPException, status


class InvyteError(Exception):
    """Base class for errors raised by the invitation and gift-claim core."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationError(InvyteError):
    """Raised for malformed input: missing fields or an unrecognized enum value."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(InvyteError):
    """Raised when no event, guest or wishlist item matches the given keys."""

    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(InvyteError):
    """Raised when a non-host tries a host-only operation."""

    status_code = status.HTTP_403_FORBIDDEN


def to_http_exception(error: InvyteError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=str(error))
