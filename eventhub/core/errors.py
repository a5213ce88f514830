"""Domain errors raised by the catalog and registration services."""

import enum


class ErrorCode(str, enum.Enum):
    NOT_FOUND = "NOT_FOUND"
    RULE_VIOLATION = "RULE_VIOLATION"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    UNEXPECTED = "UNEXPECTED"


class Rule(str, enum.Enum):
    """Business rules a registration or sign-up request can break."""

    ALREADY_REGISTERED = "already registered"
    CAPACITY_REACHED = "capacity reached"
    NOT_REGISTERED = "not registered"
    USER_EXISTS = "user exists"


class DomainError(Exception):
    """Base error with a code, a user-safe message and the ids involved."""

    code = ErrorCode.UNEXPECTED

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = {key: str(value) for key, value in context.items() if value is not None}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """A referenced event, registration or file does not exist."""

    code = ErrorCode.NOT_FOUND


_RULE_MESSAGES = {
    Rule.ALREADY_REGISTERED: "User is already registered for this event",
    Rule.CAPACITY_REACHED: "Event has reached its participant limit",
    Rule.NOT_REGISTERED: "User is not registered for this event",
    Rule.USER_EXISTS: "A user with this ID already exists",
}


class RuleViolationError(DomainError):
    code = ErrorCode.RULE_VIOLATION

    def __init__(self, rule: Rule, **context) -> None:
        super().__init__(_RULE_MESSAGES[rule], **context)
        self.rule = rule


class InvalidArgumentError(DomainError):
    code = ErrorCode.INVALID_ARGUMENT


class UnexpectedError(DomainError):
    """Storage or infrastructure failure the caller cannot fix."""

    code = ErrorCode.UNEXPECTED


class EventBusyError(UnexpectedError):
    """The per-event lock could not be taken in time."""
