"""
Request body rule tables.

Each endpoint declares field -> FieldRules; `validate` evaluates every rule
of every field and produces the itemized error list returned with a 400.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

from email_validator import validate_email, EmailNotValidError

Predicate = Callable[[Any], bool]
Rule = Tuple[Predicate, str]


@dataclass(frozen=True)
class FieldRules:
    rules: List[Rule]
    trim: bool = False


def is_not_empty(value: Any) -> bool:
    # Lists, objects and numbers count as missing: every field is a string
    return isinstance(value, str) and value != ""


def is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def min_length(n: int) -> Predicate:
    def check(value: Any) -> bool:
        return isinstance(value, str) and len(value) >= n
    return check


REGISTER_RULES: Dict[str, FieldRules] = {
    "email": FieldRules(
        trim=True,
        rules=[
            (is_not_empty, "Email is required!"),
            (is_email, "Not a valid email!"),
        ],
    ),
    "firstName": FieldRules(trim=True, rules=[(is_not_empty, "First name is required!")]),
    "lastName": FieldRules(trim=True, rules=[(is_not_empty, "Last name is required!")]),
    "password": FieldRules(
        rules=[
            (is_not_empty, "Password is required!"),
            (min_length(8), "Password length should be at least of 8 chars!"),
        ],
    ),
}

LOGIN_RULES: Dict[str, FieldRules] = {
    "email": FieldRules(
        trim=True,
        rules=[
            (is_not_empty, "Email is required!"),
            (is_email, "Not a valid email!"),
        ],
    ),
    "password": FieldRules(rules=[(is_not_empty, "Password is required!")]),
}


def field_error(msg: str, path: str) -> dict:
    return {"type": "field", "msg": msg, "path": path, "location": "body"}


def validate(payload: Any, table: Dict[str, FieldRules]) -> Tuple[Dict[str, Any], List[dict]]:
    """
    Returns:
        (cleaned, errors): the sanitized values for the declared fields, and
        one error dict per failed rule (empty when the payload is valid)
    """
    if not isinstance(payload, dict):
        return {}, [field_error("Request body must be a JSON object", "")]

    cleaned: Dict[str, Any] = {}
    errors: List[dict] = []
    for name, field_rules in table.items():
        value = payload.get(name)
        if field_rules.trim and isinstance(value, str):
            value = value.strip()
        cleaned[name] = value
        for predicate, message in field_rules.rules:
            if not predicate(value):
                errors.append(field_error(message, name))
    return cleaned, errors
