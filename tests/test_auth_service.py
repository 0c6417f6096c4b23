"""Tests for the auth service, called directly with a session."""

import pytest

import auth
from errors import AuthError, ConflictError, ValidationError
from helpers import validate
from schemas import LoginRequest, RegisterRequest
from security import decode_access_token, verify_password


def registration(**overrides):
    data = {"name": "Jane Doe", "email": "jane@example.com", "password": "secret1"}
    data.update(overrides)
    return validate(RegisterRequest, data)


class TestRegister:
    def test_register_returns_user_and_token(self, db):
        user, token = auth.register(db, registration())
        assert user.id
        assert user.name == "Jane Doe"
        assert decode_access_token(token) == user.id

    def test_password_is_hashed(self, db):
        user, _ = auth.register(db, registration())
        assert user.hashed_password != "secret1"
        assert verify_password("secret1", user.hashed_password)

    def test_email_is_normalized(self, db):
        user, _ = auth.register(db, registration(email="Jane@Example.COM"))
        assert user.email == "jane@example.com"

    def test_register_twice_conflicts(self, db):
        auth.register(db, registration())
        with pytest.raises(ConflictError):
            auth.register(db, registration(name="Other"))

    @pytest.mark.parametrize("overrides, field", [
        ({"name": ""}, "name"),
        ({"email": "jane"}, "email"),
        ({"password": "short"}, "password"),
    ])
    def test_invalid_registration(self, overrides, field):
        with pytest.raises(ValidationError) as exc:
            registration(**overrides)
        assert [e["field"] for e in exc.value.errors] == [field]
        assert exc.value.status_code == 400


class TestLogin:
    def test_login(self, db, user):
        found, token = auth.login(db, LoginRequest(email="test@example.com", password="password1"))
        assert found.id == user.id
        assert decode_access_token(token) == user.id

    def test_unknown_email_and_wrong_password_match(self, db, user):
        with pytest.raises(AuthError) as unknown:
            auth.login(db, LoginRequest(email="ghost@example.com", password="password1"))
        with pytest.raises(AuthError) as wrong:
            auth.login(db, LoginRequest(email="test@example.com", password="nope123"))
        assert unknown.value.message == wrong.value.message == "Invalid credentials"
        assert unknown.value.status_code == wrong.value.status_code == 401

    def test_missing_password(self):
        with pytest.raises(ValidationError):
            validate(LoginRequest, {"email": "test@example.com"})


class TestCurrentUser:
    def test_resolves_token(self, db, user):
        _, token = auth.login(db, LoginRequest(email="test@example.com", password="password1"))
        assert auth.get_current_user(db, token).id == user.id

    @pytest.mark.parametrize("token", [None, "", "garbage"])
    def test_rejects_bad_tokens(self, db, token):
        with pytest.raises(AuthError):
            auth.get_current_user(db, token)
