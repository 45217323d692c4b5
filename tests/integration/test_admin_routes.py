"""Integration tests for admin-only tenant, participant and certification routes."""

from __future__ import annotations

from fastapi import status
from fastapi.testclient import TestClient

from tests.utils import ADMIN_EMAIL, HR_DEFAULT_PASSWORD, complete_survey, login, register_employee


def _company_id(client: TestClient, domain: str) -> int:
    companies = client.get("/admin/companies").json()
    return next(company["id"] for company in companies if company["domain"] == domain)


def test_admin_routes_reject_hr(admin_client: TestClient) -> None:
    complete_survey(admin_client, "ana@acme.com")
    login(admin_client, "hr@acme.com", HR_DEFAULT_PASSWORD)

    assert admin_client.get("/admin/companies").status_code == status.HTTP_403_FORBIDDEN
    assert admin_client.get("/admin/certifications").status_code == status.HTTP_403_FORBIDDEN
    created = admin_client.post("/admin/certifications", json={"companyId": 1, "title": "x"})
    assert created.status_code == status.HTTP_403_FORBIDDEN


def test_admin_routes_require_session(test_client: TestClient) -> None:
    response = test_client.get("/admin/employees")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestListings:
    def test_companies(self, admin_client: TestClient) -> None:
        register_employee(admin_client, "ana@acme.com")
        register_employee(admin_client, "dee@globex.io")

        companies = admin_client.get("/admin/companies").json()

        domains = {company["domain"] for company in companies}
        assert {"acme.com", "globex.io", "pulsehq.com"} <= domains
        acme = next(company for company in companies if company["domain"] == "acme.com")
        assert acme["name"] == "acme"

    def test_employees_filtered_by_company(self, admin_client: TestClient) -> None:
        register_employee(admin_client, "ana@acme.com", department="Sales")
        register_employee(admin_client, "ben@acme.com")
        register_employee(admin_client, "dee@globex.io")
        acme_id = _company_id(admin_client, "acme.com")

        everyone = admin_client.get("/admin/employees").json()
        acme = admin_client.get("/admin/employees", params={"companyId": acme_id}).json()

        assert len(everyone) == 3
        assert {employee["email"] for employee in acme} == {"ana@acme.com", "ben@acme.com"}


class TestCertifications:
    def test_issue(self, admin_client: TestClient) -> None:
        register_employee(admin_client, "ana@acme.com")
        acme_id = _company_id(admin_client, "acme.com")

        response = admin_client.post(
            "/admin/certifications",
            json={
                "companyId": acme_id,
                "title": "Great Place to Work",
                "description": "Top decile engagement",
                "validUntil": "2027-10-19T00:00:00Z",
                "metadata": {"score": 4.6},
            },
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "active"
        assert data["certificateNumber"].startswith("CERT-")
        assert data["companyId"] == acme_id
        assert data["metadata"] == {"score": 4.6}
        assert data["validFrom"]
        assert data["company"]["domain"] == "acme.com"
        assert data["issuedByAccount"]["email"] == ADMIN_EMAIL

    def test_missing_fields_is_400(self, admin_client: TestClient) -> None:
        response = admin_client.post("/admin/certifications", json={"title": "No company"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        empty_title = admin_client.post("/admin/certifications", json={"companyId": 1, "title": ""})
        assert empty_title.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_company_is_404(self, admin_client: TestClient) -> None:
        response = admin_client.post("/admin/certifications", json={"companyId": 9999, "title": "x"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_filtered_by_company(self, admin_client: TestClient) -> None:
        register_employee(admin_client, "ana@acme.com")
        register_employee(admin_client, "dee@globex.io")
        acme_id = _company_id(admin_client, "acme.com")
        globex_id = _company_id(admin_client, "globex.io")
        for company_id, title in ((acme_id, "First"), (globex_id, "Other"), (acme_id, "Second")):
            created = admin_client.post(
                "/admin/certifications", json={"companyId": company_id, "title": title}
            )
            assert created.status_code == status.HTTP_200_OK

        everything = admin_client.get("/admin/certifications").json()
        acme = admin_client.get("/admin/certifications", params={"companyId": acme_id}).json()

        assert len(everything) == 3
        assert [item["title"] for item in acme] == ["Second", "First"]

    def test_revoke_is_idempotent(self, admin_client: TestClient) -> None:
        register_employee(admin_client, "ana@acme.com")
        acme_id = _company_id(admin_client, "acme.com")
        certification = admin_client.post(
            "/admin/certifications", json={"companyId": acme_id, "title": "Great Place to Work"}
        ).json()
        path = f"/admin/certifications/{certification['id']}/revoke"

        first = admin_client.patch(path)
        second = admin_client.patch(path)

        assert first.status_code == second.status_code == status.HTTP_200_OK
        assert first.json() == second.json() == {"success": True}
        listed = admin_client.get("/admin/certifications").json()
        assert listed[0]["status"] == "revoked"

    def test_revoke_unknown_is_404(self, admin_client: TestClient) -> None:
        response = admin_client.patch("/admin/certifications/12345/revoke")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_revoke_with_wrong_method_is_405(self, admin_client: TestClient) -> None:
        response = admin_client.get("/admin/certifications/1/revoke")
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.json() == {"message": "Method not allowed"}
