"""
Declarative request validation.

Each endpoint declares a RuleSet: an ordered list of fields, each with the rules
its value must satisfy. Validation checks every field and collects one message
per failing field (the first rule it breaks), so a client sees all problems in
one response. Optional fields are skipped when absent (missing or null) and
validated when present. Nothing is applied unless the whole payload passes.

After the rules pass, the payload is parsed into the endpoint's pydantic schema
for type coercion; see validated_body().
"""

import json
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, TypeVar

from email_validator import EmailNotValidError, validate_email
from fastapi import Request
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Largest value a 32-bit signed INTEGER column holds.
INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class FieldError:
    """One failed field and the message to show for it."""

    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationFailed(Exception):
    """Request payload broke one or more field rules. Maps to HTTP 400."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))


@dataclass(frozen=True)
class Rule:
    """A predicate on a single value plus the message reported when it fails."""

    check: Callable[[Any], bool]
    message: str


def parse_iso8601_date(value: Any) -> date:
    """
    Parse an ISO-8601 date or datetime string into a date.

    Accepts "2024-01-15", "2024-01-15T09:30:00" and offsets/"Z". Raises
    ValueError otherwise.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("expected an ISO-8601 date string")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


def _is_non_empty(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _as_int(value: Any) -> int | None:
    """Integer value of an int or an ASCII digit string; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdecimal():
            try:
                return int(text)
            except ValueError:
                # Beyond the interpreter's integer string conversion limit.
                return None
    return None


def _is_email(value: Any) -> bool:
    if not isinstance(value, str) or value != value.strip():
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _is_iso8601_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_iso8601_date(value)
    except ValueError:
        return False
    return True


def non_empty(message: str) -> Rule:
    return Rule(_is_non_empty, message)


def min_length(length: int, message: str) -> Rule:
    return Rule(lambda v: isinstance(v, str) and len(v) >= length, message)


def one_of(choices: Iterable[str], message: str) -> Rule:
    allowed = frozenset(choices)
    return Rule(lambda v: isinstance(v, str) and v in allowed, message)


def email(message: str) -> Rule:
    return Rule(_is_email, message)


def iso8601_date(message: str) -> Rule:
    return Rule(_is_iso8601_date, message)


def positive_int(message: str, maximum: int = INT32_MAX) -> Rule:
    """Integer (or digit string) in 1..maximum."""

    def check(value: Any) -> bool:
        number = _as_int(value)
        return number is not None and 0 < number <= maximum

    return Rule(check, message)


@dataclass(frozen=True)
class FieldRules:
    name: str
    rules: tuple[Rule, ...]
    optional: bool = False


def field(name: str, *rules: Rule, optional: bool = False) -> FieldRules:
    """Declare the rules for one payload field."""
    return FieldRules(name=name, rules=rules, optional=optional)


class RuleSet:
    """Ordered field rules for one endpoint."""

    def __init__(self, *fields: FieldRules) -> None:
        self.fields = fields

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def check(self, payload: Any) -> list[FieldError]:
        """Return every field error in declaration order (empty when valid)."""
        if not isinstance(payload, dict):
            return [FieldError("body", "Request body must be a JSON object")]
        errors: list[FieldError] = []
        for entry in self.fields:
            value = payload.get(entry.name)
            if value is None and entry.optional:
                continue
            for rule in entry.rules:
                if not rule.check(value):
                    errors.append(FieldError(entry.name, rule.message))
                    break
        return errors

    def validate(self, payload: Any) -> dict[str, Any]:
        """
        Validate and return only the declared fields that are present.

        Raises ValidationFailed with all field errors.
        """
        errors = self.check(payload)
        if errors:
            raise ValidationFailed(errors)
        return {
            name: payload[name]
            for name in self.field_names
            if payload.get(name) is not None
        }


def errors_from_pydantic(exc: ValidationError) -> list[FieldError]:
    """Flatten a pydantic ValidationError into FieldErrors keyed by the last loc element."""
    return [
        FieldError(str(err["loc"][-1]) if err.get("loc") else "body", err["msg"])
        for err in exc.errors()
    ]


def validated_body(
    rules: RuleSet, schema: type[ModelT]
) -> Callable[[Request], Awaitable[ModelT]]:
    """
    Build a FastAPI dependency that reads the JSON body, applies the rule set,
    then parses the surviving fields into ``schema``.
    """

    async def dependency(request: Request) -> ModelT:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationFailed([FieldError("body", "Request body must be valid JSON")])
        data = rules.validate(payload)
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise ValidationFailed(errors_from_pydantic(e)) from e

    return dependency
