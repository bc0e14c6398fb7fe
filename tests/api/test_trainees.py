"""API tests for /api/v1/trainees.

Exercises the full stack (routing, auth, multipart upload, repository)
against the in-memory SQLite database from ``tests/conftest.py``.
"""
from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

import pytest

from src.app.core.config import get_settings
from src.app.services.roster.fields import EXPORT_HEADERS, TEMPLATE_HEADERS


if TYPE_CHECKING:
    from httpx import AsyncClient

BASE = "/api/v1/trainees"
TEST_ACTOR_ID = "user-42"


def _upload(text: str | bytes, filename: str = "roster.csv", content_type: str = "text/csv") -> dict:
    body = text.encode("utf-8") if isinstance(text, str) else text
    return {"file": (filename, body, content_type)}


async def _import(client: AsyncClient, headers: dict, text: str) -> dict:
    response = await client.post(f"{BASE}/import", files=_upload(text), headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_requires_token(client: AsyncClient) -> None:
    response = await client.get(BASE)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_rejects_token_signed_with_other_key(client: AsyncClient, make_token) -> None:
    token = make_token(secret="x" * 40)
    response = await client.get(BASE, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_actor_falls_back_to_subject(client: AsyncClient, make_token) -> None:
    token = make_token(subject="clerk@clinic.example", user_id=None)
    headers = {"Authorization": f"Bearer {token}"}

    report = await _import(client, headers, "Name\nAda\n")
    trainee_id = report["outcomes"][0]["trainee_id"]

    response = await client.get(f"{BASE}/{trainee_id}", headers=headers)
    assert response.json()["data"]["created_by"] == "clerk@clinic.example"


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_import_reports_each_row(
    client: AsyncClient, auth_headers: dict, sample_roster_csv: str
) -> None:
    report = await _import(client, auth_headers, sample_roster_csv)

    assert report["total_rows"] == 3
    assert report["created"] == 2
    assert report["rejected"] == 1
    assert report["success"] is False
    assert report["unmapped_headers"] == ["Favourite Colour"]
    assert [o["status"] for o in report["outcomes"]] == ["created", "rejected", "created"]
    assert report["outcomes"][1]["reason"] == "missing name information"


@pytest.mark.asyncio
async def test_imported_trainee_is_stored_with_derived_fields(
    client: AsyncClient, auth_headers: dict
) -> None:
    report = await _import(
        client, auth_headers, "First Name,Last Name,DOB,Unique ID\nAda,Lovelace,1990-06-15,TRN-HACKED\n"
    )
    trainee_id = report["outcomes"][0]["trainee_id"]

    response = await client.get(f"{BASE}/{trainee_id}", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Ada Lovelace"
    assert data["unique_id"] != "TRN-HACKED"
    assert data["date_of_birth"] == "1990-06-15"
    assert isinstance(data["age"], int)
    assert data["status"] == "active"
    assert data["created_by"] == TEST_ACTOR_ID


@pytest.mark.asyncio
async def test_import_duplicates_across_uploads(client: AsyncClient, auth_headers: dict) -> None:
    await _import(client, auth_headers, "Name,SSN\nAda,111-22-3333\n")
    report = await _import(client, auth_headers, "Name,SSN\nAda,111-22-3333\nGrace,999-88-7777\n")

    assert report["created"] == 1
    assert report["duplicates"] == 1
    assert report["outcomes"][0]["is_duplicate_identity"] is True


@pytest.mark.asyncio
async def test_import_strips_excel_bom(client: AsyncClient, auth_headers: dict) -> None:
    body = "\ufeffName,City\nAda,London\n".encode("utf-8")
    response = await client.post(f"{BASE}/import", files=_upload(body), headers=auth_headers)

    report = response.json()
    assert report["created"] == 1
    assert report["unmapped_headers"] == []


@pytest.mark.asyncio
async def test_import_without_actor_is_refused(client: AsyncClient, make_token) -> None:
    # Valid signature and subject for the router guard, but the actor claim
    # resolves to nothing usable.
    token = make_token(subject="   ", user_id=None)
    response = await client.post(
        f"{BASE}/import",
        files=_upload("Name\nAda\n"),
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_import_empty_file(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.post(f"{BASE}/import", files=_upload(""), headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "IMPORT_ABORTED"


@pytest.mark.asyncio
async def test_import_non_utf8(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.post(
        f"{BASE}/import", files=_upload(b"Name\n\xff\xfe\xfa\n"), headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "FILE_VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_import_wrong_file_type(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.post(
        f"{BASE}/import",
        files=_upload("Name\nAda\n", filename="roster.pdf", content_type="application/pdf"),
        headers=auth_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_import_row_limit(
    client: AsyncClient, auth_headers: dict, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(get_settings(), "ROSTER_IMPORT_MAX_ROWS", 2)
    response = await client.post(
        f"{BASE}/import", files=_upload("Name\nA\nB\nC\n"), headers=auth_headers
    )

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"


# ---------------------------------------------------------------------------
# Preview and template
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_preview_does_not_write(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.post(
        f"{BASE}/import/preview",
        files=_upload("DOB,Full Name,Shoe Size\n1990-06-15,Ada,7\n"),
        headers=auth_headers,
    )

    assert response.status_code == 200
    preview = response.json()["data"]
    assert preview["column_mapping"] == {"DOB": "date_of_birth", "Full Name": "name"}
    assert preview["unmapped_headers"] == ["Shoe Size"]
    assert preview["data_rows"] == 1

    listing = await client.get(BASE, headers=auth_headers)
    assert listing.json()["pagination"]["total"] == 0


@pytest.mark.asyncio
async def test_template_download(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.get(f"{BASE}/import/template", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    header_line = next(csv.reader(io.StringIO(response.text)))
    assert header_line == list(TEMPLATE_HEADERS)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_export_round_trip(client: AsyncClient, auth_headers: dict) -> None:
    await _import(
        client,
        auth_headers,
        "First Name,Last Name,SSN,Status\nAda,Lovelace,111-22-3333,inactive\nGrace,Hopper,,\n",
    )

    response = await client.get(f"{BASE}/export", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="trainees-export-' in response.headers["content-disposition"]
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert list(rows[0]) == list(EXPORT_HEADERS)
    # Ordered by last name.
    assert [r["Last Name"] for r in rows] == ["Hopper", "Lovelace"]
    assert rows[1]["Status"] == "inactive"
    assert rows[0]["SSN"] == ""

    # Re-importing the export trips the SSN uniqueness check only for Ada.
    report = await _import(client, auth_headers, response.text)
    assert report["unmapped_headers"] == []
    assert report["created"] == 1
    assert report["duplicates"] == 1


@pytest.mark.asyncio
async def test_export_status_filter(client: AsyncClient, auth_headers: dict) -> None:
    await _import(client, auth_headers, "Name,Status\nAda,inactive\nGrace,active\n")

    response = await client.get(f"{BASE}/export", params={"status": "inactive"}, headers=auth_headers)

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [r["Name"] for r in rows] == ["Ada"]


@pytest.mark.asyncio
async def test_export_search_filter(client: AsyncClient, auth_headers: dict) -> None:
    await _import(client, auth_headers, "Name\nAda Lovelace\nGrace Hopper\n")

    response = await client.get(f"{BASE}/export", params={"search": "hopper"}, headers=auth_headers)

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [r["Name"] for r in rows] == ["Grace Hopper"]


# ---------------------------------------------------------------------------
# List / get / update
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_with_filters(client: AsyncClient, auth_headers: dict) -> None:
    await _import(client, auth_headers, "Name,Status\nAda,inactive\nGrace,\nAlan,\n")

    response = await client.get(BASE, params={"status": "active"}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 2
    assert {t["name"] for t in body["data"]} == {"Grace", "Alan"}

    response = await client.get(BASE, params={"search": "alan"}, headers=auth_headers)
    assert [t["name"] for t in response.json()["data"]] == ["Alan"]


@pytest.mark.asyncio
async def test_get_unknown_trainee(client: AsyncClient, auth_headers: dict) -> None:
    response = await client.get(f"{BASE}/does-not-exist", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TRAINEE_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_birth_date_recomputes_age(client: AsyncClient, auth_headers: dict) -> None:
    report = await _import(client, auth_headers, "Name\nAda\n")
    trainee_id = report["outcomes"][0]["trainee_id"]

    response = await client.put(
        f"{BASE}/{trainee_id}", json={"date_of_birth": "1990-01-01"}, headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["date_of_birth"] == "1990-01-01"
    assert data["age"] >= 34

    response = await client.put(
        f"{BASE}/{trainee_id}", json={"date_of_birth": None}, headers=auth_headers
    )
    data = response.json()["data"]
    assert data["date_of_birth"] is None
    assert data["age"] is None


@pytest.mark.asyncio
async def test_update_rejects_unknown_status(client: AsyncClient, auth_headers: dict) -> None:
    report = await _import(client, auth_headers, "Name\nAda\n")
    trainee_id = report["outcomes"][0]["trainee_id"]

    response = await client.put(
        f"{BASE}/{trainee_id}", json={"status": "retired"}, headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
