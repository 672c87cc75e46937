"""
Errors raised by the game core and its collaborators.

- InvalidProperty: a named property failed validation; resubmit corrected input.
- AlreadySolved: the game is over; no further guesses are accepted.
- NotFound: a key did not resolve to a stored game or guess (collaborator layer only).
- DecodeError: an external key is not a well-formed encoding.
"""


class CodebreakerError(Exception):
    """Base class for every error this package raises on purpose."""


class InvalidProperty(CodebreakerError, ValueError):
    def __init__(self, property: str, message: str) -> None:
        super().__init__(f"{property} {message}")
        self.property = property
        self.message = message


ValidationError = InvalidProperty


class AlreadySolved(CodebreakerError):
    def __init__(self, message: str = "Already solved") -> None:
        super().__init__(message)


class NotFound(CodebreakerError, LookupError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class DecodeError(CodebreakerError, ValueError):
    pass
