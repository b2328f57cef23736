"""
Casework Backend: API Endpoint Tests
======================================

What:  HTTP-level behavior: status codes, error bodies, headers.
How:   HTTPX AsyncClient over ASGITransport; services are patched where the
       route module imported them, the DB session is the conftest mock.

What we test:
    ✅ Health check (connected / disconnected)
    ✅ Search short-query path and parameter validation
    ✅ Vacation rule violations → 400 with details.code
    ✅ NotFoundError → 404, DatabaseError → generic 500
    ✅ X-Request-ID and X-Total-Count headers
    ✅ Document upload and invoice creation status codes
    ✅ Rate limiting → 429 with Retry-After
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from casework.exceptions import DatabaseError, NotFoundError, OverlapError, PastDateError
from casework.middleware.rate_limit import RateLimitMiddleware
from casework.schemas.document import DocumentResponse, DocumentUploadResponse
from casework.schemas.invoice import InvoiceResponse
from casework.schemas.vacation import HelperRef, VacationListResponse, VacationResponse


def _vacation_response(**overrides):
    data = dict(
        id=4,
        helper=HelperRef(id=7, first_name="Anna", last_name="Schmidt"),
        from_date=date(2030, 6, 11),
        to_date=date(2030, 6, 20),
        days=10,
        approved=False,
    )
    data.update(overrides)
    return VacationResponse(**data)


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        conn = MagicMock()
        conn.execute = AsyncMock()
        engine = MagicMock()
        engine.connect.return_value.__aenter__ = AsyncMock(return_value=conn)
        engine.connect.return_value.__aexit__ = AsyncMock(return_value=False)

        with patch("casework.routes.health.engine", engine):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_database_down(self, test_client):
        engine = MagicMock()
        engine.connect.side_effect = OSError("connection refused")

        with patch("casework.routes.health.engine", engine):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestSearchRoutes:

    @pytest.mark.asyncio
    async def test_short_query_empty(self, test_client, mock_db_session):
        response = await test_client.get("/api/search", params={"q": "a"})

        assert response.status_code == 200
        assert response.json()["results"] == []
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, test_client):
        response = await test_client.get("/api/search", params={"q": "schmidt", "limit": 500})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_category(self, test_client):
        response = await test_client.get("/api/search", params={"q": "schmidt", "category": "invoices"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_suggestions(self, test_client):
        response = await test_client.get(
            "/api/search/suggestions", params=[("q", "sch"), ("recent", "Schmidt")],
        )
        assert response.status_code == 200
        assert response.json()["suggestions"][0]["text"] == "Schmidt"

    @pytest.mark.asyncio
    async def test_database_error_is_generic_500(self, test_client):
        with patch("casework.routes.search.search_service") as mock_service:
            mock_service.search = AsyncMock(side_effect=DatabaseError(context={"sql": "SELECT secret"}))
            response = await test_client.get("/api/search", params={"q": "schmidt"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "SELECT" not in response.text
        assert "details" not in body


class TestVacationRoutes:

    @pytest.mark.asyncio
    async def test_create_returns_201(self, test_client):
        with patch("casework.routes.vacations.vacation_service") as mock_service:
            mock_service.create_vacation = AsyncMock(return_value=_vacation_response())
            response = await test_client.post("/api/vacations", json={
                "helper_id": 7, "from_date": "2030-06-11", "to_date": "2030-06-20",
            })

        assert response.status_code == 201
        assert response.json()["approved"] is False

    @pytest.mark.asyncio
    async def test_overlap_returns_400_with_code(self, test_client):
        with patch("casework.routes.vacations.vacation_service") as mock_service:
            mock_service.create_vacation = AsyncMock(side_effect=OverlapError([12]))
            response = await test_client.post("/api/vacations", json={
                "helper_id": 7, "from_date": "2030-06-05", "to_date": "2030-06-15",
            })

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Vacation period overlaps with existing vacation"
        assert body["details"]["code"] == "overlap"
        assert body["details"]["conflicting_ids"] == [12]

    @pytest.mark.asyncio
    async def test_past_date_returns_400(self, test_client):
        with patch("casework.routes.vacations.vacation_service") as mock_service:
            mock_service.create_vacation = AsyncMock(
                side_effect=PastDateError(date(2020, 1, 1), date(2024, 6, 1)),
            )
            response = await test_client.post("/api/vacations", json={
                "helper_id": 7, "from_date": "2020-01-01", "to_date": "2020-01-05",
            })

        assert response.status_code == 400
        assert response.json()["details"]["code"] == "past_date"

    @pytest.mark.asyncio
    async def test_malformed_body_is_422(self, test_client):
        response = await test_client.post("/api/vacations", json={"helper_id": 7, "from_date": "soon"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_not_found_returns_404(self, test_client):
        with patch("casework.routes.vacations.vacation_service") as mock_service:
            mock_service.get_vacation = AsyncMock(
                side_effect=NotFoundError(resource="vacation", resource_id="99"),
            )
            response = await test_client.get("/api/vacations/99")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_sets_total_count_header(self, test_client):
        listing = VacationListResponse(vacations=[_vacation_response()], total_count=1)
        with patch("casework.routes.vacations.vacation_service") as mock_service:
            mock_service.list_vacations = AsyncMock(return_value=listing)
            response = await test_client.get("/api/vacations", params={"status": "pending"})

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "1"

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_status(self, test_client):
        response = await test_client.get("/api/vacations", params={"status": "maybe"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_returns_204(self, test_client):
        with patch("casework.routes.vacations.vacation_service") as mock_service:
            mock_service.delete_vacation = AsyncMock(return_value=None)
            response = await test_client.delete("/api/vacations/4")
        assert response.status_code == 204


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/api/search", params={"q": ""})
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_echoed_in_errors(self, test_client):
        with patch("casework.routes.vacations.vacation_service") as mock_service:
            mock_service.get_vacation = AsyncMock(side_effect=NotFoundError(resource="vacation"))
            response = await test_client.get("/api/vacations/1", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"
        assert response.json()["request_id"] == "abc12345"


class TestDocumentAndInvoiceRoutes:

    @pytest.mark.asyncio
    async def test_upload_document(self, test_client, sample_pdf_bytes):
        uploaded = DocumentUploadResponse(document=DocumentResponse(
            id=1, helper_id=7, name="Vertrag.pdf", document_type="contract",
            mime_type="application/pdf", size_bytes=len(sample_pdf_bytes),
            visible_to_helper=True, uploaded_by="admin",
            download_url="/api/helpers/7/documents/1/download",
        ))
        with patch("casework.routes.helpers.document_service") as mock_service:
            mock_service.upload_document = AsyncMock(return_value=uploaded)
            response = await test_client.post(
                "/api/helpers/7/documents",
                files={"file": ("Vertrag.pdf", sample_pdf_bytes, "application/pdf")},
                data={"document_type": "contract", "visible_to_helper": "true"},
            )

        assert response.status_code == 201
        kwargs = mock_service.upload_document.await_args.kwargs
        assert kwargs["filename"] == "Vertrag.pdf"
        assert kwargs["content"] == sample_pdf_bytes
        assert kwargs["visible_to_helper"] is True

    @pytest.mark.asyncio
    async def test_create_invoice(self, test_client):
        created = InvoiceResponse(
            id=1, invoice_number="R-2024-0001", case_id=3, work_hours=4.0, service_count=2,
            hourly_rate=25.5, total_amount=102.0, status="erstellt",
            invoice_date=date(2024, 6, 30), due_date=date(2024, 7, 14),
        )
        with patch("casework.routes.invoices.invoice_service") as mock_service:
            mock_service.create_invoice = AsyncMock(return_value=created)
            response = await test_client.post("/api/invoices", json={"case_id": 3})

        assert response.status_code == 201
        assert response.json()["invoice_number"] == "R-2024-0001"

    @pytest.mark.asyncio
    async def test_dashboard_rejects_unknown_range(self, test_client):
        response = await test_client.get("/api/dashboard", params={"time_range": "decade"})
        assert response.status_code == 422


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_limit_exceeded(self):
        app = FastAPI()
        app.add_middleware(RateLimitMiddleware, max_requests=2, window_seconds=60)

        @app.get("/ping")
        async def ping():
            return {"ok": True}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            statuses = [(await client.get("/ping")).status_code for _ in range(3)]
            blocked = await client.get("/ping")

        assert statuses == [200, 200, 429]
        assert blocked.json()["error"] == "rate_limit_exceeded"
        assert int(blocked.headers["Retry-After"]) >= 1
