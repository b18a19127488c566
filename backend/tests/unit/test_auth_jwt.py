"""Unit tests for JWT token generation and validation

Tests cover:
- Token creation with valid claims
- Token decoding and validation
- Token expiration handling
- Invalid token handling
- Environment configuration
"""

import pytest
import time
from uuid import uuid4
import jwt

import sys
from pathlib import Path
backend_src = Path(__file__).parent.parent.parent / "src"
sys.path.insert(0, str(backend_src))

from auth.jwt import create_access_token, decode_token

TEST_SECRET = 'test-secret-key-256-bits-minimum-length-required-for-security'


class TestCreateAccessToken:
    """Test JWT token creation"""

    def test_create_token_with_valid_claims(self, monkeypatch):
        """Test creating token returns a three-part JWT"""
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        monkeypatch.setenv('JWT_EXPIRY_MINUTES', '60')

        token = create_access_token(user_id=uuid4(), email="owner@test.com")

        assert isinstance(token, str)
        assert len(token.split('.')) == 3

    def test_token_contains_correct_claims(self, monkeypatch):
        """Test token payload carries sub, email, iat and exp"""
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)

        user_id = uuid4()
        token = create_access_token(user_id=user_id, email="owner@test.com")

        payload = jwt.decode(token, TEST_SECRET, algorithms=['HS256'])
        assert payload['sub'] == str(user_id)
        assert payload['email'] == "owner@test.com"
        assert 'iat' in payload
        assert 'exp' in payload

    def test_token_expiry_uses_configured_minutes(self, monkeypatch):
        """Test exp is JWT_EXPIRY_MINUTES after iat"""
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        monkeypatch.setenv('JWT_EXPIRY_MINUTES', '15')

        token = create_access_token(user_id=uuid4(), email="owner@test.com")

        payload = jwt.decode(token, TEST_SECRET, algorithms=['HS256'])
        assert payload['exp'] - payload['iat'] == 15 * 60

    def test_invalid_expiry_falls_back_to_default(self, monkeypatch):
        """Test non-numeric JWT_EXPIRY_MINUTES falls back to 60 minutes"""
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)
        monkeypatch.setenv('JWT_EXPIRY_MINUTES', 'soon')

        token = create_access_token(user_id=uuid4(), email="owner@test.com")

        payload = jwt.decode(token, TEST_SECRET, algorithms=['HS256'])
        assert payload['exp'] - payload['iat'] == 60 * 60

    def test_missing_secret_raises(self, monkeypatch):
        """Test token creation fails without JWT_SECRET"""
        monkeypatch.delenv('JWT_SECRET', raising=False)

        with pytest.raises(ValueError, match="JWT_SECRET"):
            create_access_token(user_id=uuid4(), email="owner@test.com")


class TestDecodeToken:
    """Test JWT token validation"""

    def test_decode_valid_token(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)

        user_id = uuid4()
        token = create_access_token(user_id=user_id, email="owner@test.com")

        payload = decode_token(token)
        assert payload['sub'] == str(user_id)

    def test_decode_expired_token(self, monkeypatch):
        """Test expired token raises ExpiredSignatureError"""
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)

        now = int(time.time())
        token = jwt.encode(
            {'sub': str(uuid4()), 'iat': now - 7200, 'exp': now - 3600},
            TEST_SECRET,
            algorithm='HS256'
        )

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_token(token)

    def test_decode_token_signed_with_other_secret(self, monkeypatch):
        """Test tampered or foreign tokens are rejected"""
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)

        token = jwt.encode({'sub': str(uuid4())}, 'another-secret', algorithm='HS256')

        with pytest.raises(jwt.InvalidTokenError):
            decode_token(token)

    def test_decode_garbage(self, monkeypatch):
        monkeypatch.setenv('JWT_SECRET', TEST_SECRET)

        with pytest.raises(jwt.InvalidTokenError):
            decode_token("not-a-jwt")
