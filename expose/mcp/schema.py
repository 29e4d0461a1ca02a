"""Schema adapters: describe tool arguments as JSON Schema and validate input.

The dispatcher only talks to the :class:`SchemaAdapter` protocol, so any
schema library can back a tool. :class:`PydanticSchema` is the adapter for
pydantic models, which is what the bundled tools use.
"""

import inspect
import json
import logging
from typing import Any, Awaitable, Protocol, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# Schema advertised for tools that declare no arguments
EMPTY_INPUT_SCHEMA: dict[str, Any] = {"type": "object"}


class ValidationIssue(BaseModel):
    """A single validation failure, located by its path into the input."""

    path: list[str | int] = Field(default_factory=list)
    message: str


class ValidationOutcome(BaseModel):
    """Either a validated value (``ok``) or the ordered list of issues."""

    ok: bool
    value: Any = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def success(cls, value: Any) -> "ValidationOutcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, issues: list[ValidationIssue]) -> "ValidationOutcome":
        return cls(ok=False, issues=issues)


@runtime_checkable
class SchemaAdapter(Protocol):
    """What a tool's argument schema must support."""

    def describe(self) -> dict[str, Any]:
        """Return a JSON-Schema description of the accepted input."""
        ...

    def validate(self, value: Any) -> ValidationOutcome | Awaitable[ValidationOutcome]:
        """Validate ``value``; report problems as issues instead of raising."""
        ...


class PydanticSchema:
    """Schema adapter backed by a pydantic model class."""

    def __init__(self, model: type[BaseModel]):
        self.model = model

    def describe(self) -> dict[str, Any]:
        schema = self.model.model_json_schema()
        schema.pop("title", None)
        return schema

    def validate(self, value: Any) -> ValidationOutcome:
        """Validate ``value`` as JSON in strict mode, without type coercion."""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            return ValidationOutcome.failure([ValidationIssue(path=[], message=f"Value is not JSON: {e}")])
        try:
            return ValidationOutcome.success(self.model.model_validate_json(payload, strict=True))
        except ValidationError as e:
            return ValidationOutcome.failure([
                ValidationIssue(path=list(error["loc"]), message=error["msg"])
                for error in e.errors()
            ])

    def __repr__(self) -> str:
        return f"PydanticSchema({self.model.__name__})"


def as_schema(schema: SchemaAdapter | type[BaseModel] | None) -> SchemaAdapter | None:
    """Accept a pydantic model class wherever an adapter is expected."""
    if schema is None:
        return None
    if isinstance(schema, type) and issubclass(schema, BaseModel):
        return PydanticSchema(schema)
    if not isinstance(schema, SchemaAdapter):
        raise TypeError(
            f"Expected a SchemaAdapter or pydantic model, got {type(schema).__name__}"
        )
    return schema


def describe(schema: SchemaAdapter | None) -> dict[str, Any]:
    """JSON Schema for discovery; tools without a schema accept any object."""
    if schema is None:
        return dict(EMPTY_INPUT_SCHEMA)
    return schema.describe()


async def validate(schema: SchemaAdapter, value: Any) -> ValidationOutcome:
    """
    Validate ``value`` against ``schema`` without ever raising.

    Adapters may validate synchronously or return an awaitable. If an adapter
    itself fails, the failure becomes a single issue at the root path so the
    caller still sees "bad input" rather than a crash.
    """
    try:
        outcome = schema.validate(value)
        if inspect.isawaitable(outcome):
            outcome = await outcome
    except Exception as e:
        logger.exception(f"Schema adapter {schema!r} failed during validation")
        return ValidationOutcome.failure([ValidationIssue(path=[], message=str(e))])
    return outcome
