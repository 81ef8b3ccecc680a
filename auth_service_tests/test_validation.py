"""Tests for the request rule tables."""
import pytest

from auth_service.validation import LOGIN_RULES, REGISTER_RULES, validate


def messages(errors, path):
    return [e["msg"] for e in errors if e["path"] == path]


def test_valid_register_payload_has_no_errors():
    data, errors = validate(
        {"firstName": "Lokesh", "lastName": "Jha", "email": "lokesh@mern.space", "password": "password"},
        REGISTER_RULES,
    )
    assert errors == []
    assert data["email"] == "lokesh@mern.space"


def test_register_fields_are_trimmed():
    data, errors = validate(
        {"firstName": "  Lokesh ", "lastName": " Jha ", "email": "  lokesh@mern.space  ", "password": " password "},
        REGISTER_RULES,
    )
    assert errors == []
    assert data["firstName"] == "Lokesh"
    assert data["lastName"] == "Jha"
    assert data["email"] == "lokesh@mern.space"
    # Passwords are taken verbatim
    assert data["password"] == " password "


def test_missing_register_fields_are_itemized():
    _, errors = validate({}, REGISTER_RULES)

    assert "Email is required!" in messages(errors, "email")
    assert messages(errors, "firstName") == ["First name is required!"]
    assert messages(errors, "lastName") == ["Last name is required!"]
    assert "Password is required!" in messages(errors, "password")
    for error in errors:
        assert error["type"] == "field"
        assert error["location"] == "body"
        assert set(error) == {"type", "msg", "path", "location"}


def test_whitespace_only_name_is_empty():
    _, errors = validate(
        {"firstName": "   ", "lastName": "Jha", "email": "lokesh@mern.space", "password": "password"},
        REGISTER_RULES,
    )
    assert messages(errors, "firstName") == ["First name is required!"]


@pytest.mark.parametrize("email", ["not-an-email", "lokesh@", "@mern.space", "lokesh mern.space"])
def test_invalid_email_is_rejected(email):
    _, errors = validate({"email": email, "password": "password"}, LOGIN_RULES)
    assert messages(errors, "email") == ["Not a valid email!"]


def test_short_password_is_rejected():
    _, errors = validate(
        {"firstName": "Lokesh", "lastName": "Jha", "email": "lokesh@mern.space", "password": "short"},
        REGISTER_RULES,
    )
    assert messages(errors, "password") == ["Password length should be at least of 8 chars!"]


def test_login_only_requires_a_password_to_be_present():
    _, errors = validate({"email": "lokesh@mern.space", "password": "x"}, LOGIN_RULES)
    assert errors == []


def test_non_string_values_fail_rules():
    _, errors = validate({"email": 42, "password": None}, LOGIN_RULES)
    assert messages(errors, "email") == ["Email is required!", "Not a valid email!"]
    assert messages(errors, "password") == ["Password is required!"]


@pytest.mark.parametrize("name", [["Lokesh"], {"a": 1}, 7, True])
def test_non_string_names_are_rejected(name):
    _, errors = validate(
        {"firstName": name, "lastName": name, "email": "lokesh@mern.space", "password": "password"},
        REGISTER_RULES,
    )
    assert messages(errors, "firstName") == ["First name is required!"]
    assert messages(errors, "lastName") == ["Last name is required!"]


@pytest.mark.parametrize("payload", [None, [], "text", 3])
def test_non_object_body_is_a_single_error(payload):
    data, errors = validate(payload, LOGIN_RULES)
    assert data == {}
    assert len(errors) == 1
    assert errors[0]["path"] == ""
