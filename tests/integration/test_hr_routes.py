"""Integration tests for HR/admin login, logout and profile endpoints."""

from __future__ import annotations

import asyncio

from fastapi import status
from fastapi.testclient import TestClient

from tests.utils import HR_DEFAULT_PASSWORD, complete_survey, login, seed_account


def _seed_hr(client: TestClient, loop: asyncio.AbstractEventLoop) -> None:
    loop.run_until_complete(seed_account(client.session_factory, "hr@acme.com", "password-1"))  # type: ignore


class TestLogin:
    def test_login_sets_session_cookie(
        self, test_client: TestClient, loop: asyncio.AbstractEventLoop
    ) -> None:
        _seed_hr(test_client, loop)

        response = test_client.post(
            "/hr/login", json={"email": "hr@acme.com", "password": "password-1"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["account"]["email"] == "hr@acme.com"
        assert data["account"]["role"] == "hr"
        assert isinstance(data["account"]["companyId"], int)

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("hr_session=")
        assert "HttpOnly" in cookie
        assert "SameSite=lax" in cookie or "samesite=lax" in cookie.lower()
        assert "Max-Age=604800" in cookie
        assert "Secure" not in cookie

    def test_bad_password_is_401_without_revealing_account(
        self, test_client: TestClient, loop: asyncio.AbstractEventLoop
    ) -> None:
        _seed_hr(test_client, loop)

        wrong_password = test_client.post(
            "/hr/login", json={"email": "hr@acme.com", "password": "nope"}
        )
        unknown_email = test_client.post(
            "/hr/login", json={"email": "ghost@acme.com", "password": "nope"}
        )

        assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.json() == unknown_email.json() == {"message": "Invalid email or password"}

    def test_invalid_body_is_400(self, test_client: TestClient) -> None:
        response = test_client.post("/hr/login", json={"email": "not-an-email"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Invalid request data"
        assert "error" in response.json()


class TestSessionLifecycle:
    def test_me_requires_session(self, test_client: TestClient) -> None:
        response = test_client.get("/hr/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"message": "Not authenticated"}

    def test_me_with_unknown_token(self, test_client: TestClient) -> None:
        test_client.cookies.set("hr_session", "forged")
        response = test_client.get("/hr/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"message": "Invalid or expired session"}

    def test_login_me_logout(self, test_client: TestClient, loop: asyncio.AbstractEventLoop) -> None:
        _seed_hr(test_client, loop)
        login(test_client, "hr@acme.com", "password-1")

        me = test_client.get("/hr/me")
        assert me.status_code == status.HTTP_200_OK
        assert me.json()["email"] == "hr@acme.com"
        token = test_client.cookies.get("hr_session")

        logout = test_client.post("/hr/logout")
        assert logout.status_code == status.HTTP_200_OK
        assert logout.json() == {"success": True}

        # The server-side session is gone even if the client replays the cookie
        test_client.cookies.set("hr_session", token)
        assert test_client.get("/hr/me").status_code == status.HTTP_401_UNAUTHORIZED

    def test_plain_logout_route_without_session(self, test_client: TestClient) -> None:
        response = test_client.post("/logout")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True}


class TestChangePassword:
    def test_auto_provisioned_account_changes_default_password(self, test_client: TestClient) -> None:
        complete_survey(test_client, "ana@acme.com")
        login(test_client, "hr@acme.com", HR_DEFAULT_PASSWORD)

        wrong = test_client.post(
            "/hr/change-password",
            json={"currentPassword": "wrong-one", "newPassword": "brand-new-pass"},
        )
        assert wrong.status_code == status.HTTP_400_BAD_REQUEST

        too_short = test_client.post(
            "/hr/change-password",
            json={"currentPassword": HR_DEFAULT_PASSWORD, "newPassword": "short"},
        )
        assert too_short.status_code == status.HTTP_400_BAD_REQUEST

        changed = test_client.post(
            "/hr/change-password",
            json={"currentPassword": HR_DEFAULT_PASSWORD, "newPassword": "brand-new-pass"},
        )
        assert changed.status_code == status.HTTP_200_OK

        login(test_client, "hr@acme.com", "brand-new-pass")

    def test_requires_session(self, test_client: TestClient) -> None:
        response = test_client.post(
            "/hr/change-password",
            json={"currentPassword": "a", "newPassword": "long-enough"},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
