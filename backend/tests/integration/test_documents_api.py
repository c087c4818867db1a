"""Integration tests for the Documents API

Tests the HTTP surface end to end:
- Review endpoint status-code mapping (404/403/409)
- Upload, submission, metadata edit and delete
- Read endpoints (list, detail, history, stats)
"""

import io
import logging
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from docflow.domain.documents import DocumentStatus
from docflow.models import Approval, Document, Notification, UserActivity
from docflow.observability.logging_config import LogContextFilter

PDF_BYTES = b"%PDF-1.4\n%\xE2\xE3\xCF\xD3\ntest content\n"


def _review(client: TestClient, document_id, action: str, comment=None):
    body = {"action": action}
    if comment is not None:
        body["comment"] = comment
    return client.post(f"/api/v1/documents/{document_id}/approval", json=body)


def _upload(client: TestClient, filename="manual.pdf", content=PDF_BYTES,
            content_type="application/pdf", **form):
    data = {"title": "QM Manual"}
    data.update(form)
    return client.post(
        "/api/v1/documents",
        files={"file": (filename, io.BytesIO(content), content_type)},
        data=data,
    )


class TestReviewEndpoint:
    """POST /api/v1/documents/{id}/approval"""

    def test_manager_approves_submitted_document(self, manager_client, submitted_document):
        response = _review(manager_client, submitted_document.id, "APPROVE", "Looks good")

        assert response.status_code == 200
        data = response.json()
        assert data["document"]["status"] == "PENDING"
        assert data["document"]["allowed_actions"] == []
        assert data["approval"]["status"] == "PENDING"
        assert data["approval"]["comment"] == "Looks good"
        assert UUID(data["approval"]["document_id"]) == submitted_document.id

    def test_two_stage_approval(self, manager_client, standardization_client, submitted_document):
        assert _review(manager_client, submitted_document.id, "APPROVE").status_code == 200

        response = _review(standardization_client, submitted_document.id, "APPROVE")

        assert response.status_code == 200
        assert response.json()["document"]["status"] == "APPROVED"

    def test_wrong_role_is_403(self, standardization_client, submitted_document, db_session):
        response = _review(standardization_client, submitted_document.id, "APPROVE")

        assert response.status_code == 403
        assert response.json() == {
            "error": "forbidden",
            "message": "MANAGER role required to act on SUBMITTED documents",
        }
        assert db_session.scalar(select(func.count()).select_from(Approval)) == 0

    def test_admin_review_is_403(self, admin_client, pending_document):
        response = _review(admin_client, pending_document.id, "REJECT")

        assert response.status_code == 403
        assert "STANDARDIZATION" in response.json()["message"]

    def test_terminal_document_is_409(self, manager_client, make_document):
        document = make_document(DocumentStatus.REJECTED)

        response = _review(manager_client, document.id, "APPROVE")

        assert response.status_code == 409
        assert response.json()["error"] == "invalid_state"

    def test_repeated_approval_is_409(self, standardization_client, pending_document):
        assert _review(standardization_client, pending_document.id, "APPROVE").status_code == 200

        response = _review(standardization_client, pending_document.id, "APPROVE")

        assert response.status_code == 409

    def test_unknown_document_is_404(self, manager_client):
        response = _review(manager_client, uuid4(), "APPROVE")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_unknown_action_is_422(self, manager_client, submitted_document):
        response = _review(manager_client, submitted_document.id, "ESCALATE")

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_role_cannot_be_supplied_in_body(self, standardization_client, submitted_document):
        response = standardization_client.post(
            f"/api/v1/documents/{submitted_document.id}/approval",
            json={"action": "APPROVE", "role": "MANAGER"},
        )

        assert response.status_code == 422

    def test_missing_token_is_rejected(self, client, submitted_document):
        response = _review(client, submitted_document.id, "APPROVE")

        assert response.status_code in (401, 403)

    def test_response_carries_request_id(self, manager_client, submitted_document):
        response = manager_client.post(
            f"/api/v1/documents/{submitted_document.id}/approval",
            json={"action": "REJECT"},
            headers={"X-Request-ID": "req-42"},
        )

        assert response.headers["X-Request-ID"] == "req-42"


class TestUpload:
    """POST /api/v1/documents"""

    def test_upload_pdf_defaults_to_submitted(self, admin_client, admin_user, db_session, storage):
        response = _upload(admin_client, description="Company manual")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "SUBMITTED"
        assert data["version"] == 1
        assert data["file_type"] == "pdf"
        assert data["file_size"] == len(PDF_BYTES)
        assert data["file_path"].endswith("-manual.pdf")
        assert UUID(data["creator_id"]) == admin_user.id
        assert storage.exists(data["file_path"])

        activity = db_session.scalars(select(UserActivity)).one()
        assert activity.type == "UPLOAD"
        assert activity.document_id == UUID(data["id"])

    def test_upload_as_draft(self, admin_client):
        response = _upload(admin_client, status="DRAFTED")

        assert response.status_code == 201
        assert response.json()["status"] == "DRAFTED"

    def test_upload_cannot_start_approved(self, admin_client, db_session):
        response = _upload(admin_client, status="APPROVED")

        assert response.status_code == 400
        assert db_session.scalar(select(func.count()).select_from(Document)) == 0

    def test_unsupported_type_rejected(self, admin_client):
        response = _upload(admin_client, filename="orders.csv", content=b"a,b\n", content_type="text/csv")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_empty_file_rejected(self, admin_client):
        response = _upload(admin_client, content=b"")

        assert response.status_code == 400

    def test_docx_upload(self, admin_client):
        response = _upload(
            admin_client,
            filename="procedure v2.docx",
            content=b"PK\x03\x04docx",
            content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        )

        assert response.status_code == 201
        assert response.json()["file_type"] == "docx"
        assert response.json()["file_path"].endswith("-procedure_v2.docx")

    def test_reviewer_cannot_upload(self, manager_client):
        response = _upload(manager_client)

        assert response.status_code == 403
        assert response.json() == {
            "error": "forbidden",
            "message": "Insufficient permissions. Required role: ADMIN",
        }


class TestSubmitEndpoint:
    """POST /api/v1/documents/{id}/submit"""

    def test_admin_submits_draft(self, admin_client, drafted_document):
        response = admin_client.post(f"/api/v1/documents/{drafted_document.id}/submit")

        assert response.status_code == 200
        assert response.json()["status"] == "SUBMITTED"

    def test_submit_non_draft_is_409(self, admin_client, submitted_document):
        response = admin_client.post(f"/api/v1/documents/{submitted_document.id}/submit")

        assert response.status_code == 409

    def test_manager_cannot_submit(self, manager_client, drafted_document):
        response = manager_client.post(f"/api/v1/documents/{drafted_document.id}/submit")

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"


class TestMetadataEdit:
    """PATCH /api/v1/documents/{id}"""

    def test_edit_submitted_document(self, admin_client, submitted_document, db_session):
        response = admin_client.patch(
            f"/api/v1/documents/{submitted_document.id}",
            json={"title": "QM Manual v2"},
        )

        assert response.status_code == 200
        assert response.json()["title"] == "QM Manual v2"
        assert response.json()["status"] == "SUBMITTED"
        assert db_session.scalars(select(UserActivity)).one().type == "UPDATE"

    def test_edit_pending_document_is_409(self, admin_client, pending_document):
        response = admin_client.patch(
            f"/api/v1/documents/{pending_document.id}",
            json={"title": "Changed"},
        )

        assert response.status_code == 409

    def test_status_is_not_editable(self, admin_client, submitted_document):
        response = admin_client.patch(
            f"/api/v1/documents/{submitted_document.id}",
            json={"status": "APPROVED"},
        )

        assert response.status_code == 422


class TestDelete:
    """DELETE /api/v1/documents/{id}"""

    def test_delete_removes_document_and_related_records(
        self, admin_client, manager_client, submitted_document, db_session
    ):
        document_id = submitted_document.id
        assert _review(manager_client, document_id, "APPROVE").status_code == 200

        response = admin_client.delete(f"/api/v1/documents/{document_id}")

        assert response.status_code == 204
        db_session.expire_all()
        assert db_session.get(Document, document_id) is None
        assert db_session.scalar(select(func.count()).select_from(Approval)) == 0
        assert db_session.scalar(select(func.count()).select_from(Notification)) == 0

        # Activity history survives, including the delete itself
        types = {a.type for a in db_session.scalars(select(UserActivity))}
        assert types == {"APPROVE", "DELETE"}

    def test_delete_removes_stored_file(self, admin_client, storage):
        created = _upload(admin_client).json()
        assert storage.exists(created["file_path"])

        response = admin_client.delete(f"/api/v1/documents/{created['id']}")

        assert response.status_code == 204
        assert not storage.exists(created["file_path"])

    def test_delete_succeeds_when_file_is_missing(self, admin_client, submitted_document):
        response = admin_client.delete(f"/api/v1/documents/{submitted_document.id}")

        assert response.status_code == 204

    def test_delete_unknown_is_404(self, admin_client):
        assert admin_client.delete(f"/api/v1/documents/{uuid4()}").status_code == 404

    def test_reviewer_cannot_delete(self, manager_client, submitted_document):
        assert manager_client.delete(f"/api/v1/documents/{submitted_document.id}").status_code == 403


class TestReadEndpoints:
    """GET endpoints"""

    def test_list_filters_by_status(self, manager_client, make_document):
        make_document(DocumentStatus.SUBMITTED, title="A")
        make_document(DocumentStatus.PENDING, title="B")
        make_document(DocumentStatus.SUBMITTED, title="C")

        response = manager_client.get("/api/v1/documents", params={"status": "SUBMITTED"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {d["title"] for d in data["items"]} == {"A", "C"}
        assert all(d["allowed_actions"] == ["APPROVE", "REJECT"] for d in data["items"])

    def test_detail_shows_allowed_actions_per_role(
        self, manager_client, standardization_client, pending_document
    ):
        manager_view = manager_client.get(f"/api/v1/documents/{pending_document.id}").json()
        std_view = standardization_client.get(f"/api/v1/documents/{pending_document.id}").json()

        assert manager_view["allowed_actions"] == []
        assert std_view["allowed_actions"] == ["APPROVE", "REJECT"]

    def test_detail_unknown_is_404(self, manager_client):
        response = manager_client.get(f"/api/v1/documents/{uuid4()}")

        assert response.status_code == 404

    def test_approval_history(self, manager_client, standardization_client, submitted_document):
        _review(manager_client, submitted_document.id, "APPROVE", "stage one")
        _review(standardization_client, submitted_document.id, "REJECT", "stage two")

        response = manager_client.get(f"/api/v1/documents/{submitted_document.id}/approvals")

        assert response.status_code == 200
        assert [a["comment"] for a in response.json()] == ["stage two", "stage one"]
        assert [a["status"] for a in response.json()] == ["REJECTED", "PENDING"]

    def test_stats(self, admin_client, make_document):
        make_document(DocumentStatus.SUBMITTED)
        make_document(DocumentStatus.SUBMITTED)
        make_document(DocumentStatus.APPROVED)

        response = admin_client.get("/api/v1/documents/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["by_status"]["SUBMITTED"] == 2
        assert data["by_status"]["APPROVED"] == 1
        assert data["by_status"]["DRAFTED"] == 0


class TestDownload:
    """GET /api/v1/documents/{id}/download"""

    def test_download_streams_stored_file(self, admin_client, manager_client):
        created = _upload(admin_client, filename="procedure.pdf").json()

        response = manager_client.get(f"/api/v1/documents/{created['id']}/download")

        assert response.status_code == 200
        assert response.content == PDF_BYTES
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="procedure.pdf"'

    def test_inline_view(self, admin_client, standardization_client):
        created = _upload(
            admin_client,
            filename="form.docx",
            content=b"PK\x03\x04docx",
            content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ).json()

        response = standardization_client.get(
            f"/api/v1/documents/{created['id']}/download", params={"inline": "true"}
        )

        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'inline; filename="form.docx"'
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        )

    def test_missing_stored_file_is_404(self, manager_client, submitted_document):
        response = manager_client.get(f"/api/v1/documents/{submitted_document.id}/download")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_unknown_document_is_404(self, manager_client):
        response = manager_client.get(f"/api/v1/documents/{uuid4()}/download")

        assert response.status_code == 404

    def test_requires_token(self, client, submitted_document):
        response = client.get(f"/api/v1/documents/{submitted_document.id}/download")

        assert response.status_code in (401, 403)


class TestErrorEnvelope:
    """HTTPExceptions render as {"error", "message"} like workflow errors"""

    def test_invalid_token_is_401_envelope(self, client):
        response = client.get(
            "/api/v1/documents", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        assert response.json()["message"].startswith("Invalid token")
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_missing_token_uses_envelope(self, client):
        response = client.get("/api/v1/documents")

        assert response.status_code in (401, 403)
        assert set(response.json()) == {"error", "message"}

    def test_admin_only_endpoint_for_reviewer(self, standardization_client, submitted_document):
        response = standardization_client.delete(f"/api/v1/documents/{submitted_document.id}")

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_unknown_route_is_404_envelope(self, admin_client):
        response = admin_client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "message": "Not Found"}

    def test_error_response_carries_request_id(self, manager_client):
        response = manager_client.get(
            f"/api/v1/documents/{uuid4()}", headers={"X-Request-ID": "req-404"}
        )

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "req-404"


class TestRequestLogContext:
    """Log lines inside a request carry the caller and the document"""

    def test_transition_log_carries_actor_and_document(
        self, manager_client, manager_user, submitted_document, caplog
    ):
        caplog.set_level(logging.INFO)
        caplog.handler.addFilter(LogContextFilter())

        response = manager_client.post(
            f"/api/v1/documents/{submitted_document.id}/approval",
            json={"action": "APPROVE"},
            headers={"X-Request-ID": "req-log"},
        )

        assert response.status_code == 200
        record = next(
            r for r in caplog.records
            if r.name == "docflow.documents.transition" and "SUBMITTED -> PENDING" in r.getMessage()
        )
        assert record.request_id == "req-log"
        assert record.actor_role == "MANAGER"
        assert record.actor_id == manager_user.id
        assert record.document_id == submitted_document.id

    def test_refusal_logged_by_handler_carries_actor(
        self, standardization_client, standardization_user, submitted_document, caplog
    ):
        caplog.set_level(logging.INFO)
        caplog.handler.addFilter(LogContextFilter())

        response = _review(standardization_client, submitted_document.id, "APPROVE")

        assert response.status_code == 403
        record = next(r for r in caplog.records if r.name == "docflow.main" and "forbidden" in r.getMessage())
        assert record.actor_id == standardization_user.id
        assert record.document_id == submitted_document.id
