import pytest
from unittest.mock import Mock, patch
from sqlalchemy.orm import Session
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from app.services.auth_service import AuthService
from app.schemas import RegisterRequest, LoginRequest
from app.enums import UserRole
from app.exceptions import ConflictError, UnauthorizedError
from app.auth import verify_token, verify_password
from app.models import User


class TestAuthService:
    """Test cases for AuthService business logic."""

    def test_check_user_exists_returns_true_when_user_exists(self):
        """Test that check_user_exists returns True when user exists."""
        # Arrange
        mock_db = Mock(spec=Session)
        mock_query = Mock()
        mock_filter = Mock()

        mock_db.query.return_value = mock_query
        mock_query.filter.return_value = mock_filter
        mock_filter.first.return_value = Mock()  # User exists

        # Act
        result = AuthService.check_user_exists(mock_db, "test@example.com")

        # Assert
        assert result is True
        mock_db.query.assert_called_once()

    def test_check_user_exists_returns_false_when_user_does_not_exist(self):
        mock_db = Mock(spec=Session)
        mock_db.query.return_value.filter.return_value.first.return_value = None

        assert AuthService.check_user_exists(mock_db, "test@example.com") is False

    def test_create_access_token_for_user(self):
        """Token carries email as subject plus id and role."""
        mock_user = Mock()
        mock_user.email = "test@example.com"
        mock_user.id = 1
        mock_user.role = UserRole.ADMIN

        with patch('app.services.auth_service.auth_create_access_token') as mock_create_token:
            mock_create_token.return_value = "test_token"

            result = AuthService.create_access_token_for_user(mock_user)

            assert result == "test_token"
            token_data = mock_create_token.call_args[1]['data']
            assert token_data['sub'] == "test@example.com"
            assert token_data['user_id'] == 1
            assert token_data['role'] == "admin"

    def test_register_user_email_already_exists(self):
        """Registration fails with a conflict when email is taken."""
        mock_db = Mock(spec=Session)
        request = RegisterRequest(name="Test", email="test@example.com", password="testpassword")

        with patch.object(AuthService, 'check_user_exists', return_value=True):
            with pytest.raises(ConflictError) as exc_info:
                AuthService.register_user(mock_db, request)

            assert "Email already registered" in exc_info.value.message
            mock_db.add.assert_not_called()

    def test_register_user_creates_plain_user(self, db_session):
        """New accounts always get the user role and a usable token."""
        request = RegisterRequest(name="Aline", email="aline@example.com", password="secret123")

        result = AuthService.register_user(db_session, request)

        assert result.data.user.email == "aline@example.com"
        assert result.data.user.role == UserRole.USER
        assert result.data.token_type == "bearer"

        payload = verify_token(result.data.token)
        assert payload["sub"] == "aline@example.com"
        assert payload["role"] == "user"

        user = db_session.query(User).filter(User.email == "aline@example.com").first()
        assert verify_password("secret123", user.password_hash)
        assert user.password_hash != "secret123"

    def test_login_user_success(self, db_session, owner):
        result = AuthService.login_user(
            db_session, LoginRequest(email="owner@example.com", password="testpass123")
        )

        assert result.data.user.id == owner.id
        assert verify_token(result.data.token)["user_id"] == owner.id

    def test_login_user_invalid_credentials(self):
        """Test login fails with invalid credentials."""
        mock_db = Mock(spec=Session)
        request = LoginRequest(email="test@example.com", password="wrongpassword")

        with patch('app.services.auth_service.auth_authenticate_user', return_value=None):
            with pytest.raises(UnauthorizedError) as exc_info:
                AuthService.login_user(mock_db, request)

            assert "Incorrect email or password" in exc_info.value.message
