"""Unit tests for Org model

Tests cover:
- Org creation with valid data and defaults
- Slug validation (valid and invalid formats)
- Name validation (empty, too long)
- Duplicate slug rejection
- Closure fields and is_active
"""

import pytest
from sqlalchemy.exc import IntegrityError
from uuid import UUID
from datetime import datetime

from models.org import Org, OrganizationStatus


class TestOrgCreation:
    """Test basic org creation with valid data"""

    def test_create_org_with_minimal_data(self, db_session, owner):
        """Create org with only required fields"""
        org = Org(name="Acme Studio", slug="acme-studio", owner_id=owner.id)
        db_session.add(org)
        db_session.commit()

        assert isinstance(org.id, UUID)
        assert org.status == OrganizationStatus.ACTIVE.value
        assert org.is_active is True
        assert org.settings_json == {}
        assert org.closed_at is None
        assert org.closure_reason is None
        assert isinstance(org.created_at, datetime)

    def test_name_is_stripped(self, db_session, owner):
        org = Org(name="  Acme Studio  ", slug="acme-studio", owner_id=owner.id)
        assert org.name == "Acme Studio"

    def test_duplicate_slug_rejected(self, db_session, owner):
        """Slugs are unique across organizations"""
        db_session.add(Org(name="First", slug="acme", owner_id=owner.id))
        db_session.commit()

        db_session.add(Org(name="Second", slug="acme", owner_id=owner.id))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()


class TestOrgValidation:
    """Test slug and name validators"""

    @pytest.mark.parametrize("slug", ["acme", "acme-studio", "test-org-123"])
    def test_valid_slugs(self, slug):
        org = Org(name="Acme", slug=slug)
        assert org.slug == slug

    @pytest.mark.parametrize("slug", ["Acme_Studio", "acme studio", "acme.studio", "a"])
    def test_invalid_slugs(self, slug):
        with pytest.raises(ValueError):
            Org(name="Acme", slug=slug)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            Org(name="   ", slug="acme")

    def test_long_name_rejected(self):
        with pytest.raises(ValueError, match="200 characters"):
            Org(name="x" * 201, slug="acme")


class TestOrgStatus:
    """Closure lifecycle fields"""

    def test_archived_org_is_not_active(self, db_session, org):
        org.status = OrganizationStatus.ARCHIVED.value
        db_session.commit()

        assert org.is_active is False

    def test_status_check_constraint(self, db_session, org):
        org.status = "closed"
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
