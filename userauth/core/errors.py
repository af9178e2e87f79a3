"""
Account error hierarchy.

Each error carries the HTTP status the API answers with; the app factory maps
them to ``{"message": ...}`` responses.
"""


class AccountError(Exception):
    """Base class for account-related exceptions."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AccountError):
    status_code = 409


class AccountNotFoundError(AccountError):
    status_code = 404


class AlreadyVerifiedError(AccountError):
    status_code = 400


class InvalidCredentialsError(AccountError):
    status_code = 401


class AccountValidationError(AccountError, ValueError):
    """A field violates the account schema."""

    status_code = 400


class AvatarProcessingError(AccountError):
    status_code = 400
