# account_service/exceptions.py


class AccountServiceError(Exception):
    """Base class for errors raised by the account service."""


class MalformedRequestError(AccountServiceError):
    """Request body is empty, not JSON, or not shaped like a candidate."""

    def __init__(self, message: str = "Malformed request body"):
        super().__init__(message)
        self.message = message


class UserExistsError(AccountServiceError):
    """An account with the candidate's email is already registered."""

    def __init__(self, message: str = "User exists"):
        super().__init__(message)
        self.message = message


class IdentifierConflictError(AccountServiceError):
    """No free account id could be claimed under concurrent inserts."""
