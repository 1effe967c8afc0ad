# tests/test_documents.py

"""
Tests for document upload and the lease signature workflow.

Blob storage is patched out; only the returned url and blob name matter here.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from azure.core.exceptions import AzureError

from conftest import assign_manager, auth_headers
from models import Document, Notification, Payment
from services.exceptions import ConflictError


@pytest.fixture
def blob_upload():
    with patch("routers.documents.upload_to_blob", return_value=("https://blob.test/documents/lease.pdf", "1/lease.pdf")) as mock:
        yield mock


def upload(client, user, tenant, document_type="lease_agreement", content=b"%PDF-1.4 lease", entity_type="tenant"):
    return client.post(
        "/api/documents",
        data={"entityType": entity_type, "entityId": str(tenant.id), "documentType": document_type},
        files={"file": ("lease.pdf", content, "application/pdf")},
        headers=auth_headers(user),
    )


class TestUpload:

    def test_upload_creates_draft(self, client, owner, tenant, blob_upload):
        response = upload(client, owner, tenant)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "draft"
        assert data["url"] == "https://blob.test/documents/lease.pdf"
        assert data["size"] == len(b"%PDF-1.4 lease")
        blob_upload.assert_called_once()

    def test_empty_file_is_400(self, client, owner, tenant, blob_upload):
        response = upload(client, owner, tenant, content=b"")

        assert response.status_code == 400
        blob_upload.assert_not_called()

    def test_invisible_entity_is_404(self, client, other_owner, tenant, blob_upload):
        response = upload(client, other_owner, tenant)

        assert response.status_code == 404
        blob_upload.assert_not_called()

    def test_delete_removes_row_and_blob(self, client, db, owner, tenant, blob_upload):
        document_id = upload(client, owner, tenant).json()["data"]["id"]

        with patch("routers.documents.delete_from_blob") as blob_delete:
            response = client.delete(f"/api/documents/{document_id}", headers=auth_headers(owner))

        assert response.status_code == 200
        blob_delete.assert_called_once_with("documents", "1/lease.pdf")
        assert db.query(Document).count() == 0

    def test_storage_outage_is_503(self, client, db, owner, tenant):
        with patch("routers.documents.upload_to_blob", side_effect=AzureError("storage down")):
            response = upload(client, owner, tenant)

        assert response.status_code == 503
        assert db.query(Document).count() == 0

    def test_failed_write_discards_blob(self, client, db, owner, tenant, blob_upload):
        with patch("services.document_service.create_document", side_effect=ConflictError("write failed")), \
                patch("routers.documents.delete_from_blob") as blob_delete:
            response = upload(client, owner, tenant)

        assert response.status_code == 409
        blob_delete.assert_called_once_with("documents", "1/lease.pdf")
        assert db.query(Document).count() == 0


class TestSignatureFlow:

    def test_request_then_sign(self, client, db, owner, tenant_user, tenant, blob_upload):
        document_id = upload(client, owner, tenant).json()["data"]["id"]

        requested = client.post(f"/api/documents/{document_id}/request-signature", headers=auth_headers(owner))
        assert requested.status_code == 200
        assert requested.json()["data"]["status"] == "pending_signature"
        assert db.query(Notification).filter(Notification.user_id == tenant_user.id).count() == 1

        signed = client.post(
            f"/api/documents/{document_id}/sign", json={"signatureMethod": "typed"}, headers=auth_headers(tenant_user)
        )
        assert signed.status_code == 200
        data = signed.json()["data"]
        assert data["status"] == "signed"
        assert data["signedBy"] == tenant_user.id
        assert data["signedAt"] is not None

        again = client.post(f"/api/documents/{document_id}/sign", headers=auth_headers(tenant_user))
        assert again.status_code == 400

    def test_cannot_sign_a_draft(self, client, owner, tenant_user, tenant, blob_upload):
        document_id = upload(client, owner, tenant).json()["data"]["id"]

        response = client.post(f"/api/documents/{document_id}/sign", headers=auth_headers(tenant_user))

        assert response.status_code == 400

    def test_owner_cannot_sign(self, client, owner, tenant, blob_upload):
        document_id = upload(client, owner, tenant).json()["data"]["id"]
        client.post(f"/api/documents/{document_id}/request-signature", headers=auth_headers(owner))

        response = client.post(f"/api/documents/{document_id}/sign", headers=auth_headers(owner))

        assert response.status_code == 403

    def test_rejected_is_terminal(self, client, owner, tenant_user, tenant, blob_upload):
        document_id = upload(client, owner, tenant).json()["data"]["id"]
        client.post(f"/api/documents/{document_id}/request-signature", headers=auth_headers(owner))

        rejected = client.post(
            f"/api/documents/{document_id}/reject",
            json={"notes": "Rent amount is wrong"},
            headers=auth_headers(tenant_user),
        )
        resign = client.post(f"/api/documents/{document_id}/sign", headers=auth_headers(tenant_user))

        assert rejected.status_code == 200
        assert rejected.json()["data"]["status"] == "rejected"
        assert rejected.json()["data"]["notes"] == "Rent amount is wrong"
        assert resign.status_code == 400

    def test_non_lease_documents_have_no_signature(self, client, owner, tenant, blob_upload):
        document_id = upload(client, owner, tenant, document_type="id_copy").json()["data"]["id"]

        response = client.post(f"/api/documents/{document_id}/request-signature", headers=auth_headers(owner))

        assert response.status_code == 400


class TestManagerCapabilities:

    @pytest.fixture
    def payment(self, db, owner, tenant, unit):
        payment = Payment(
            tenant_id=tenant.id,
            unit_id=unit.id,
            amount=Decimal("150000"),
            payment_date=date(2026, 3, 2),
            period_month=3,
            period_year=2026,
            received_by=owner.id,
        )
        db.add(payment)
        db.commit()
        return payment

    def test_tenant_documents_need_view_tenants(self, client, db, owner, manager, property_, tenant, blob_upload):
        assign_manager(db, property_, manager, can_view_tenants=False)
        upload(client, owner, tenant, document_type="id_copy")
        headers = auth_headers(manager)

        entity = client.get(f"/api/documents/entity/tenant/{tenant.id}", headers=headers)
        listed = client.get("/api/documents", headers=headers)
        uploaded = upload(client, manager, tenant, document_type="id_copy")

        assert entity.status_code == 403
        assert listed.json()["pagination"]["total"] == 0
        assert uploaded.status_code == 403

    def test_tenant_documents_visible_with_view_tenants(self, client, db, owner, manager, property_, tenant, blob_upload):
        assign_manager(db, property_, manager)
        upload(client, owner, tenant, document_type="id_copy")

        response = client.get(f"/api/documents/entity/tenant/{tenant.id}", headers=auth_headers(manager))

        assert response.status_code == 200
        assert len(response.json()["data"]) == 1

    def test_payment_documents_need_view_payments(self, client, db, owner, manager, property_, payment, blob_upload):
        assign_manager(db, property_, manager, can_view_payments=False)
        document_id = upload(client, owner, payment, document_type="receipt", entity_type="payment").json()["data"]["id"]
        headers = auth_headers(manager)

        entity = client.get(f"/api/documents/entity/payment/{payment.id}", headers=headers)
        single = client.get(f"/api/documents/{document_id}", headers=headers)

        assert entity.status_code == 403
        assert single.status_code == 404
