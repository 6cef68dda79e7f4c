"""Tests for services API endpoints, including the completion workflow."""

from __future__ import annotations

import pytest
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker


async def _create_client(api_client: AsyncClient, name: str = "Cliente C1") -> int:
    response = await api_client.post(
        "/api/clients",
        json={"name": name, "address": "Rua das Palmeiras, 45", "phone": "(21) 99876-5432"},
    )
    return response.json()["id"]


async def _create_service(
    api_client: AsyncClient,
    client_id: int,
    date: str = "2024-01-10T09:00:00",
    value: float = 150.00,
) -> dict:
    response = await api_client.post(
        "/api/services",
        json={"client_id": client_id, "date": date, "value": value},
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_service(api_client: AsyncClient) -> None:
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id)

    assert service["status"] == "scheduled"
    assert service["client_name"] == "Cliente C1"
    assert service["client_address"] == "Rua das Palmeiras, 45"
    assert service["photos_before"] == []
    assert service["photos_after"] == []
    assert service["value"] == 150.0
    assert service["installments"] == 1


@pytest.mark.asyncio
async def test_create_service_for_missing_client(api_client: AsyncClient) -> None:
    response = await api_client.post(
        "/api/services",
        json={"client_id": 4242, "date": "2024-01-10T09:00:00", "value": 80},
    )
    assert response.status_code == 422
    assert "4242" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_service_rejects_zero_installments(api_client: AsyncClient) -> None:
    client_id = await _create_client(api_client)
    response = await api_client.post(
        "/api/services",
        json={"client_id": client_id, "date": "2024-01-10T09:00:00", "installments": 0},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_aware_dates_stored_in_business_time(api_client: AsyncClient) -> None:
    """UTC input is converted to America/Sao_Paulo wall-clock time."""
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id, date="2024-01-10T12:00:00Z")
    assert service["date"] == "2024-01-10T09:00:00"


@pytest.mark.asyncio
async def test_completion_scenario(api_client: AsyncClient) -> None:
    """in_progress has no side effects; completed schedules reminder and posts income."""
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id)

    started = await api_client.patch(
        f"/api/services/{service['id']}", json={"status": "in_progress"}
    )
    assert started.status_code == 200
    assert started.json()["status"] == "in_progress"

    client = (await api_client.get(f"/api/clients/{client_id}")).json()
    assert client["last_service_date"] is None
    assert client["next_reminder_date"] is None
    assert (await api_client.get("/api/financials")).json()["total"] == 0

    completed = await api_client.patch(
        f"/api/services/{service['id']}",
        json={
            "status": "completed",
            "signature": "data:image/png;base64,SIG",
            "payment_method": "pix",
            "installments": 1,
        },
    )
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    assert completed.json()["signature"] == "data:image/png;base64,SIG"

    client = (await api_client.get(f"/api/clients/{client_id}")).json()
    assert client["last_service_date"] == "2024-01-10T09:00:00"
    assert client["next_reminder_date"] == "2024-07-10T09:00:00"

    ledger = (await api_client.get("/api/financials")).json()
    assert ledger["total"] == 1
    record = ledger["items"][0]
    assert record["type"] == "income"
    assert record["amount"] == 150.0
    assert record["date"] == "2024-01-10T09:00:00"
    assert record["category"] == "Limpeza"
    assert record["description"] == f"Serviço #{service['id']}"


@pytest.mark.asyncio
async def test_completing_twice_posts_once(api_client: AsyncClient) -> None:
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id)

    for _ in range(2):
        response = await api_client.patch(
            f"/api/services/{service['id']}", json={"status": "completed"}
        )
        assert response.status_code == 200

    assert (await api_client.get("/api/financials")).json()["total"] == 1


@pytest.mark.asyncio
async def test_backward_transition_conflict(api_client: AsyncClient) -> None:
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id)
    await api_client.patch(f"/api/services/{service['id']}", json={"status": "in_progress"})

    response = await api_client.patch(
        f"/api/services/{service['id']}", json={"status": "scheduled"}
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "Invalid transition from in_progress to scheduled"


@pytest.mark.asyncio
async def test_failed_completion_rolls_back_everything(
    api_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """If the client leg fails, status and ledger stay untouched."""
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id)
    await api_client.patch(f"/api/services/{service['id']}", json={"status": "in_progress"})

    async with session_factory() as session:
        await session.execute(text("DELETE FROM clients WHERE id = :id"), {"id": client_id})
        await session.commit()

    response = await api_client.patch(
        f"/api/services/{service['id']}", json={"status": "completed", "notes": "fim"}
    )
    assert response.status_code == 404

    async with session_factory() as session:
        row = (
            await session.execute(
                text("SELECT status, notes FROM services WHERE id = :id"),
                {"id": service["id"]},
            )
        ).one()
        ledger_rows = (
            await session.execute(text("SELECT COUNT(*) FROM financial_records"))
        ).scalar()
    assert row.status == "in_progress"
    assert row.notes is None
    assert ledger_rows == 0


@pytest.mark.asyncio
async def test_patch_merges_photos(api_client: AsyncClient) -> None:
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id)

    await api_client.patch(
        f"/api/services/{service['id']}",
        json={"photos_before": ["data:image/jpeg;base64,B1", "data:image/jpeg;base64,B2"]},
    )
    response = await api_client.patch(
        f"/api/services/{service['id']}",
        json={"photos_after": ["data:image/jpeg;base64,A1"]},
    )

    payload = response.json()
    assert payload["photos_before"] == ["data:image/jpeg;base64,B1", "data:image/jpeg;base64,B2"]
    assert payload["photos_after"] == ["data:image/jpeg;base64,A1"]
    assert payload["status"] == "scheduled"


@pytest.mark.asyncio
async def test_list_services_newest_first_with_filters(api_client: AsyncClient) -> None:
    client_id = await _create_client(api_client)
    first = await _create_service(api_client, client_id, date="2024-01-10T09:00:00")
    second = await _create_service(api_client, client_id, date="2024-01-12T09:00:00")
    await api_client.patch(f"/api/services/{first['id']}", json={"status": "completed"})

    response = await api_client.get("/api/services")
    assert [item["id"] for item in response.json()["items"]] == [second["id"], first["id"]]

    scheduled = await api_client.get("/api/services", params={"status": "scheduled"})
    assert [item["id"] for item in scheduled.json()["items"]] == [second["id"]]

    by_day = await api_client.get("/api/services", params={"day": "2024-01-10"})
    assert [item["id"] for item in by_day.json()["items"]] == [first["id"]]


@pytest.mark.asyncio
async def test_delete_service_keeps_ledger(api_client: AsyncClient) -> None:
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id)
    await api_client.patch(f"/api/services/{service['id']}", json={"status": "completed"})

    response = await api_client.delete(f"/api/services/{service['id']}")
    assert response.status_code == 204

    assert (await api_client.get(f"/api/services/{service['id']}")).status_code == 404
    ledger = (await api_client.get("/api/financials")).json()
    assert ledger["total"] == 1
    assert ledger["items"][0]["amount"] == 150.0


@pytest.mark.asyncio
async def test_delete_unknown_service(api_client: AsyncClient) -> None:
    response = await api_client.delete("/api/services/777")
    assert response.status_code == 404
    assert response.json()["detail"] == "Service not found"


@pytest.mark.asyncio
async def test_receipt(api_client: AsyncClient) -> None:
    await api_client.post("/api/settings", json={"key": "company_name", "value": "AF Clean"})
    client_id = await _create_client(api_client)
    service = await _create_service(api_client, client_id, value=320.0)
    await api_client.patch(
        f"/api/services/{service['id']}",
        json={
            "photos_before": ["data:image/jpeg;base64,B1", "data:image/jpeg;base64,B2"],
            "status": "completed",
            "payment_method": "cartão",
            "installments": 3,
        },
    )

    response = await api_client.get(f"/api/services/{service['id']}/receipt")
    assert response.status_code == 200
    receipt = response.json()
    assert receipt["company_name"] == "AF Clean"
    assert receipt["client_name"] == "Cliente C1"
    assert receipt["value"] == 320.0
    assert receipt["installments"] == 3
    assert receipt["photo_before"] == "data:image/jpeg;base64,B1"
    assert receipt["photo_after"] is None
    assert receipt["next_recommended_cleaning"] == "2024-07-10T09:00:00"
