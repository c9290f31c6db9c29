from __future__ import annotations

from datetime import date, timedelta

import jwt

from app.core.config import Settings, get_settings
from app.main import app
from app.models.imported_user_models import ImportedUser

from conftest import VALID_CSV, bearer

ENDPOINT = "/functions/parse-csv"


def test_preflight_returns_cors_headers(client) -> None:
    response = client.options(ENDPOINT)

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "authorization" in response.headers["access-control-allow-headers"]


def test_admin_upload_returns_generated_users(client, db, admin_user) -> None:
    response = client.post(ENDPOINT, json={"csvContent": VALID_CSV}, headers=bearer(admin_user))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 2
    assert body["errors"] == []
    assert [u["full_name"] for u in body["users"]] == ["Jane Doe", "John Smith"]
    assert body["users"][0]["generated_email"] == "jane.doe@company.com"
    assert len(body["users"][0]["generated_password"]) == 16
    assert response.headers["access-control-allow-origin"] == "*"

    assert db.query(ImportedUser).count() == 2


def test_skipped_rows_are_reported(client, admin_user) -> None:
    too_young = (date.today() + timedelta(days=400)).isoformat()
    content = VALID_CSV + f"Not Born Yet,12345,{too_young}\n"

    response = client.post(ENDPOINT, json={"csvContent": content}, headers=bearer(admin_user))

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["errors"][0]["line"] == 4


def test_missing_authorization_header(client) -> None:
    response = client.post(ENDPOINT, json={"csvContent": VALID_CSV})

    assert response.status_code == 400
    assert response.json() == {"error": "No authorization header"}


def test_non_bearer_scheme_is_unauthorized(client) -> None:
    response = client.post(
        ENDPOINT,
        json={"csvContent": VALID_CSV},
        headers={"Authorization": "Basic abc"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Unauthorized"}


def test_invalid_token_is_rejected(client) -> None:
    forged = jwt.encode({"user_id": "nobody", "type": "access"}, "wrong-key", algorithm="HS256")

    response = client.post(
        ENDPOINT,
        json={"csvContent": VALID_CSV},
        headers={"Authorization": f"Bearer {forged}"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Unauthorized"}


def test_non_admin_gets_403_regardless_of_content(client, db, regular_user) -> None:
    for payload in ({"csvContent": VALID_CSV}, {"csvContent": ""}, {}):
        response = client.post(ENDPOINT, json=payload, headers=bearer(regular_user))
        assert response.status_code == 403
        assert "error" in response.json()

    response = client.post(
        ENDPOINT,
        content=b"not json",
        headers={**bearer(regular_user), "Content-Type": "application/json"},
    )
    assert response.status_code == 403
    assert db.query(ImportedUser).count() == 0


def test_missing_csv_content(client, admin_user) -> None:
    response = client.post(ENDPOINT, json={}, headers=bearer(admin_user))

    assert response.status_code == 400
    assert response.json() == {"error": "No CSV content provided"}


def test_header_only_csv(client, admin_user) -> None:
    response = client.post(
        ENDPOINT,
        json={"csvContent": "name,postal_code,birthday\n"},
        headers=bearer(admin_user),
    )

    assert response.status_code == 400
    assert "at least one data row" in response.json()["error"]


def test_missing_columns_are_reported(client, admin_user) -> None:
    response = client.post(
        ENDPOINT,
        json={"csvContent": "full name,city\nJane Doe,Paris\n"},
        headers=bearer(admin_user),
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert "postal_code" in error and "birthday" in error


def test_row_limit_rejects_batch(client, db, admin_user) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(
        secret_key="tests-secret-key", max_csv_rows=1
    )

    response = client.post(ENDPOINT, json={"csvContent": VALID_CSV}, headers=bearer(admin_user))

    assert response.status_code == 400
    assert "limit is 1" in response.json()["error"]
    assert db.query(ImportedUser).count() == 0


def test_revoked_token_is_unauthorized(client, db, admin_user) -> None:
    headers = bearer(admin_user)
    assert client.post("/api/v1/auth/logout", headers=headers).status_code == 200

    response = client.post(ENDPOINT, json={"csvContent": VALID_CSV}, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Unauthorized"}
