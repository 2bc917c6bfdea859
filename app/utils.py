from contextlib import contextmanager
from typing import Any, Iterator, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from domain.errors import DomainError, NotFoundError, NotProvidedError, ValidationError, parse_error

M = TypeVar("M", bound=BaseModel)

# Errors that mean the field carries nothing usable
REQUIRED_ERRORS = {"missing", "string_too_short"}


def parse_id(raw_id: str, entity: str) -> int:
    """Parse an id path segment, answering 404 when it is not an integer."""
    try:
        return int(raw_id)
    except ValueError:
        raise NotFoundError(f"Invalid {entity}'s id") from None


def describe(exc: SchemaValidationError) -> str:
    """Render the first schema error as a short sentence, e.g. "Name is required"."""
    error = exc.errors()[0]
    if error["type"] == "value_error":
        return str(error.get("ctx", {}).get("error", error["msg"]))

    fields = [part for part in error["loc"] if isinstance(part, str)]
    if not fields:
        return error["msg"]
    field = fields[-1].replace("_", " ").capitalize()
    if error["type"] in REQUIRED_ERRORS:
        return f"{field} is required"
    return f"{field}: {error['msg']}"


def parse_body(payload: Any, model: Type[M], entity: str) -> M:
    """Validate a request body, answering with the entity's own messages."""
    if not payload:
        raise NotProvidedError(f"{entity.capitalize()} not provided")
    try:
        return model.model_validate(payload)
    except SchemaValidationError as exc:
        raise ValidationError(f"Invalid {entity}", detail=describe(exc)) from exc


@contextmanager
def error_boundary(default_message: str) -> Iterator[None]:
    """Let domain errors through and wrap anything else as UnexpectedError."""
    try:
        yield
    except DomainError:
        raise
    except Exception as exc:
        raise parse_error(exc, default_message) from exc
