"""
Result Type
Success value or tagged error, returned by domain operations and handlers
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, Tuple, TypeVar, Union


T = TypeVar("T")


class ErrorKind(str, Enum):
    """Error categories understood by the HTTP boundary"""
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    INVALID_TRANSITION = "InvalidTransition"
    DOMAIN_RULE = "DomainRuleViolation"
    ACCESS_DENIED = "AccessDenied"
    VALIDATION = "ValidationFailure"
    UNAUTHENTICATED = "Unauthenticated"
    LIMIT_EXCEEDED = "SubscriptionLimitExceeded"
    UNEXPECTED = "Unexpected"


@dataclass(frozen=True)
class FieldError:
    """One failing input field"""
    field: str
    message: str


@dataclass(frozen=True)
class Error:
    """Tagged error carried by Err"""
    kind: ErrorKind
    code: str
    message: str
    field_errors: Tuple[FieldError, ...] = ()
    transition: Optional[Tuple[str, str]] = None

    def __str__(self) -> str:
        return f"{self.kind.value}({self.code}): {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: Error

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def ok(value: Any = None) -> Ok:
    return Ok(value)


def not_found(resource: str, identifier: Any) -> Err:
    return Err(Error(
        ErrorKind.NOT_FOUND,
        f"{resource.lower()}.not_found",
        f"{resource} {identifier} not found."
    ))


def conflict(code: str, message: str) -> Err:
    return Err(Error(ErrorKind.CONFLICT, code, message))


def invalid_transition(entity: str, current: Any, target: Any, message: Optional[str] = None) -> Err:
    current_value = getattr(current, "value", current)
    target_value = getattr(target, "value", target)
    return Err(Error(
        ErrorKind.INVALID_TRANSITION,
        f"{entity.lower()}.invalid_transition",
        message or f"Cannot move {entity} from {current_value} to {target_value}.",
        transition=(str(current_value), str(target_value)),
    ))


def domain_rule(code: str, message: str) -> Err:
    return Err(Error(ErrorKind.DOMAIN_RULE, code, message))


def access_denied(message: str = "You do not have access to this resource.") -> Err:
    return Err(Error(ErrorKind.ACCESS_DENIED, "access_denied", message))


def unauthenticated(message: str = "Authentication is required.") -> Err:
    return Err(Error(ErrorKind.UNAUTHENTICATED, "unauthenticated", message))


def validation_failed(field_errors: Tuple[FieldError, ...]) -> Err:
    fields = ", ".join(sorted({e.field for e in field_errors}))
    return Err(Error(
        ErrorKind.VALIDATION,
        "validation_failed",
        f"One or more fields are invalid: {fields}.",
        field_errors=tuple(field_errors),
    ))


def invalid_field(field_name: str, message: str) -> Err:
    return validation_failed((FieldError(field_name, message),))


def limit_exceeded(code: str, message: str) -> Err:
    return Err(Error(ErrorKind.LIMIT_EXCEEDED, code, message))


def unexpected(message: str = "An unexpected error occurred.") -> Err:
    return Err(Error(ErrorKind.UNEXPECTED, "unexpected", message))
