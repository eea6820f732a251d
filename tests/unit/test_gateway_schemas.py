"""Unit tests for bk_gateway Pydantic schemas."""

import pytest
from pydantic import ValidationError

from src.bk_gateway.user.schemas import LoginResponse, RegisterRequest, UserInfo


class TestRegisterRequest:
    def test_valid_input(self) -> None:
        req = RegisterRequest(username="bank_user_01", email="alice@example.com", password="SecureP@ss1")
        assert req.username == "bank_user_01"
        assert req.email == "alice@example.com"

    @pytest.mark.parametrize(
        ("username", "email", "password"),
        [
            ("ab", "a@b.com", "SecureP@ss1"),            # username too short
            ("a" * 65, "a@b.com", "SecureP@ss1"),        # username too long
            ("alice!", "a@b.com", "SecureP@ss1"),        # username bad characters
            ("alice", "not-an-email", "SecureP@ss1"),
            ("alice", "a@b.com", "Ab1"),                 # password too short
            ("alice", "a@b.com", "alllower1"),
            ("alice", "a@b.com", "ALLUPPER1"),
            ("alice", "a@b.com", "NoDigitPass"),
        ],
    )
    def test_rejected(self, username: str, email: str, password: str) -> None:
        with pytest.raises(ValidationError):
            RegisterRequest(username=username, email=email, password=password)


class TestLoginResponse:
    def test_defaults(self) -> None:
        resp = LoginResponse(
            access_token="a",
            refresh_token="r",
            user=UserInfo(user_id="u-1", username="alice", email="a@b.com", role="USER"),
        )
        assert resp.token_type == "Bearer"
        assert resp.expires_in == 1800
        assert resp.user.role == "USER"
