# services/errors.py
from typing import List


class ValidationFailed(Exception):
    """Input rejected before any store call. `errors` keeps the order the rules ran in."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class OperationFailed(Exception):
    """A store write failed; the message is the user-facing "Failed to ..." text."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotAuthenticated(OperationFailed):
    def __init__(self, message: str = "You must be logged in to do that."):
        super().__init__(message)
