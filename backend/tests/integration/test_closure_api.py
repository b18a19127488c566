"""Integration tests for the organization closure API

Tests cover:
- Authentication (missing/invalid token, disabled user)
- Owner-only access (403), unknown organization (404)
- Preview payload, initiate success and 409 with blockers
- Force close, archive listing and archive detail (owner only, 404 once unavailable)
"""

import pytest
from datetime import timedelta
from uuid import uuid4

from models.base import utc_now
from models.contract import Contract, ContractStatus
from models.org import OrgInvite, OrganizationStatus
from models.organization_archive import ArchiveStatus, OrganizationArchive

API = "/api/v1/organizations"


@pytest.fixture
def funded_contract(db_session, org, other_user):
    contract = Contract(
        org_id=org.id,
        performer_id=other_user.id,
        amount=1200000,
        status=ContractStatus.FUNDED.value,
    )
    db_session.add(contract)
    db_session.commit()
    return contract


class TestAuthentication:

    def test_missing_token(self, client, org):
        response = client.get(f"{API}/{org.id}/closure-preview")
        assert response.status_code in (401, 403)

    def test_invalid_token(self, client, org):
        client.headers = {"Authorization": "Bearer not-a-jwt"}

        response = client.get(f"{API}/{org.id}/closure-preview")

        assert response.status_code == 401

    def test_disabled_user(self, owner_client, db_session, owner, org):
        owner.status = "DISABLED"
        db_session.commit()

        response = owner_client.get(f"{API}/{org.id}/closure-preview")

        assert response.status_code == 403


class TestClosurePreviewEndpoint:

    def test_preview(self, owner_client, org, project, make_document):
        make_document(project, size_bytes=1024)

        response = owner_client.get(f"{API}/{org.id}/closure-preview")

        assert response.status_code == 200
        data = response.json()
        assert data["can_close"] is True
        assert data["blockers"] == []
        assert len(data["archivable_data"]) == 1
        assert data["archivable_data"][0]["size_bytes"] == 1024
        assert data["impact"]["documents"] == 1

    def test_preview_lists_blockers(self, owner_client, org, funded_contract):
        response = owner_client.get(f"{API}/{org.id}/closure-preview")

        data = response.json()
        assert data["can_close"] is False
        assert data["blockers"][0]["id"] == str(funded_contract.id)
        assert data["blockers"][0]["severity"] == "blocking"

    def test_non_owner_forbidden(self, other_client, org):
        response = other_client.get(f"{API}/{org.id}/closure-preview")
        assert response.status_code == 403

    def test_unknown_org(self, owner_client):
        response = owner_client.get(f"{API}/{uuid4()}/closure-preview")
        assert response.status_code == 404


class TestInitiateClosureEndpoint:

    def test_initiate(self, owner_client, db_session, org):
        response = owner_client.post(
            f"{API}/{org.id}/closure-initiate",
            json={"reason": "Команда распущена"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["archive_id"] is not None

        db_session.refresh(org)
        assert org.status == OrganizationStatus.ARCHIVED.value
        assert org.closure_reason == "Команда распущена"

    def test_initiate_without_body(self, owner_client, org):
        response = owner_client.post(f"{API}/{org.id}/closure-initiate")
        assert response.status_code == 200

    def test_blocked_returns_409_with_blockers(self, owner_client, db_session, org, funded_contract):
        response = owner_client.post(f"{API}/{org.id}/closure-initiate")

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert len(detail["blockers"]) == 1
        assert detail["blockers"][0]["module_id"] == "contracts"
        assert detail["blockers"][0]["action_required"] == "Завершите работу по контракту или верните средства"

        db_session.refresh(org)
        assert org.status == OrganizationStatus.ACTIVE.value

    def test_already_closed_returns_409(self, owner_client, org):
        owner_client.post(f"{API}/{org.id}/closure-initiate")

        response = owner_client.post(f"{API}/{org.id}/closure-initiate")

        assert response.status_code == 409

    def test_reason_too_long(self, owner_client, org):
        response = owner_client.post(
            f"{API}/{org.id}/closure-initiate",
            json={"reason": "x" * 2001},
        )
        assert response.status_code == 422

    def test_non_owner_forbidden(self, other_client, org):
        response = other_client.post(f"{API}/{org.id}/closure-initiate")
        assert response.status_code == 403


class TestForceCloseEndpoint:

    def test_force_close_empty_org(self, owner_client, db_session, org):
        response = owner_client.post(f"{API}/{org.id}/force-close")

        assert response.status_code == 200
        assert response.json()["archive_id"] is None
        db_session.refresh(org)
        assert org.status == OrganizationStatus.DELETED.value

    def test_force_close_with_warnings(self, owner_client, db_session, org):
        db_session.add(OrgInvite(org_id=org.id, email="new@test.com"))
        db_session.commit()

        response = owner_client.post(f"{API}/{org.id}/force-close")

        assert response.status_code == 409
        assert response.json()["detail"]["blockers"][0]["module_id"] == "invites"


class TestArchivesEndpoint:

    def test_lists_own_archives(self, owner_client, org):
        owner_client.post(f"{API}/{org.id}/closure-initiate")

        response = owner_client.get(f"{API}/archives")

        assert response.status_code == 200
        archives = response.json()
        assert len(archives) == 1
        assert archives[0]["organization_id"] == str(org.id)
        assert archives[0]["organization_name"] == "Test Organization"
        assert archives[0]["status"] == "active"
        assert archives[0]["snapshot"]["members_count"] == 1

    def test_empty_for_other_users(self, other_client):
        response = other_client.get(f"{API}/archives")

        assert response.status_code == 200
        assert response.json() == []


class TestArchiveDetailEndpoint:

    @pytest.fixture
    def archive_id(self, service, org, owner, project, make_document):
        make_document(project, title="Signed contract", size_bytes=2048)
        return service.initiate_closing(org.id, owner.id).archive_id

    def test_owner_opens_archive(self, owner_client, archive_id, org):
        response = owner_client.get(f"{API}/archives/{archive_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["archive"]["id"] == str(archive_id)
        assert body["archive"]["organization_id"] == str(org.id)
        assert len(body["documents"]) == 1
        document = body["documents"][0]
        assert document["title"] == "Signed contract"
        assert document["project_name"] == "Website Redesign"
        assert document["file_size_bytes"] == 2048
        assert document["metadata"]["version"] == 1

    def test_other_user_forbidden(self, other_client, archive_id):
        response = other_client.get(f"{API}/archives/{archive_id}")

        assert response.status_code == 403

    def test_unknown_archive(self, owner_client):
        response = owner_client.get(f"{API}/archives/{uuid4()}")

        assert response.status_code == 404

    def test_expired_archive_not_found(self, owner_client, db_session, archive_id):
        archive = db_session.get(OrganizationArchive, archive_id)
        archive.expires_at = utc_now() - timedelta(minutes=1)
        db_session.commit()

        response = owner_client.get(f"{API}/archives/{archive_id}")

        assert response.status_code == 404

    def test_purged_archive_not_found(self, owner_client, db_session, archive_id):
        archive = db_session.get(OrganizationArchive, archive_id)
        archive.status = ArchiveStatus.PURGED.value
        db_session.commit()

        response = owner_client.get(f"{API}/archives/{archive_id}")

        assert response.status_code == 404


class TestObservabilityEndpoints:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_metrics(self, client):
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "workspace_closure_attempts_total" in response.text

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
