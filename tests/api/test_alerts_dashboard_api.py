"""API tests for alerts, dashboard and notification endpoints."""

from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from stockroom.api.dependencies import get_alert_aggregator, get_dashboard_service, get_pool
from stockroom.api.main import app
from stockroom.core.entities import Alert, AlertLevel, AlertType, ChartPoint, DashboardStats
from stockroom.core.services import AlertAggregator, DashboardService


@pytest.fixture
def mock_aggregator():
    aggregator = AsyncMock(spec=AlertAggregator)
    aggregator.list_alerts.return_value = [
        Alert(
            id="lowstock-1",
            type=AlertType.LOW_STOCK,
            title="Low stock: Cable",
            message="Only 5 left (min 10). Consider reordering.",
            level=AlertLevel.WARNING,
            created_at=datetime(2026, 6, 1, 12, 0, 0),
            meta={"item_id": 1},
        ),
        Alert(
            id="warn-reorder_pending",
            type=AlertType.INTERNAL_WARNING,
            title="Alert generation warning",
            message="no such table: stock_reorders",
            level=AlertLevel.WARNING,
        ),
    ]
    return aggregator


@pytest.fixture
def mock_dashboard():
    service = AsyncMock(spec=DashboardService)
    service.get_stats.return_value = DashboardStats(
        total_items=3, low_stock_items=1, total_value=42.5, recent_movements=7
    )
    service.get_chart.return_value = [
        ChartPoint(date=date(2026, 6, 1), day="Mon", stock_in=20, stock_out=4),
    ]
    return service


@pytest.fixture
async def client(pool, mock_aggregator, mock_dashboard):
    app.dependency_overrides[get_pool] = lambda: pool
    app.dependency_overrides[get_alert_aggregator] = lambda: mock_aggregator
    app.dependency_overrides[get_dashboard_service] = lambda: mock_dashboard
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_pool, None)
    app.dependency_overrides.pop(get_alert_aggregator, None)
    app.dependency_overrides.pop(get_dashboard_service, None)


class TestAlertsEndpoint:
    async def test_list_alerts(self, client):
        response = await client.get("/api/alerts")

        assert response.status_code == 200
        alerts = response.json()["alerts"]
        assert [a["id"] for a in alerts] == ["lowstock-1", "warn-reorder_pending"]
        assert alerts[0]["type"] == "low_stock"
        assert alerts[0]["level"] == "warning"
        assert alerts[1]["created_at"] is None


class TestDashboardEndpoints:
    async def test_stats_are_camel_case(self, client):
        response = await client.get("/api/dashboard/stats")

        assert response.status_code == 200
        assert response.json() == {
            "totalItems": 3,
            "lowStockItems": 1,
            "totalValue": 42.5,
            "recentMovements": 7,
        }

    async def test_chart(self, client, mock_dashboard):
        response = await client.get("/api/dashboard/chart", params={"timeframe": "month"})

        assert response.status_code == 200
        assert response.json() == [
            {"date": "2026-06-01", "day": "Mon", "stockIn": 20, "stockOut": 4}
        ]
        mock_dashboard.get_chart.assert_awaited_once_with("month")


class TestNotificationEndpoints:
    @pytest.fixture
    async def notifications(self, pool, seeded):
        async with pool.transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO users (name, email) VALUES ('carol', 'carol@example.com')"
            )
            other_user = cursor.lastrowid
            ids = {}
            for key, user_id, created in (
                ("own", seeded["user_id"], "2026-06-01T10:00:00"),
                ("broadcast", None, "2026-06-01T11:00:00"),
                ("foreign", other_user, "2026-06-01T12:00:00"),
            ):
                cursor = await conn.execute(
                    """
                    INSERT INTO notifications (user_id, title, message, created_at)
                    VALUES (?, ?, 'body', ?)
                    """,
                    (user_id, key, created),
                )
                ids[key] = cursor.lastrowid
        return ids

    async def test_anonymous_is_401(self, client):
        response = await client.get("/api/notifications")
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    async def test_list_own_and_broadcast(self, client, seeded, notifications):
        response = await client.get(
            "/api/notifications", headers={"X-User-Id": str(seeded["user_id"])}
        )

        assert response.status_code == 200
        titles = [n["title"] for n in response.json()["notifications"]]
        assert titles == ["broadcast", "own"]

    async def test_mark_read(self, client, seeded, notifications):
        headers = {"X-User-Id": str(seeded["user_id"])}

        response = await client.post(
            f"/api/notifications/{notifications['own']}/read", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["read"] is True

        foreign = await client.post(
            f"/api/notifications/{notifications['foreign']}/read", headers=headers
        )
        assert foreign.status_code == 404
        assert foreign.json()["error_code"] == "NOTIFICATION_NOT_FOUND"
