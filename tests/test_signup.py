"""
Tests for user signup endpoint.
"""
from app.db.models.user import User
from app.core.security import verify_password


def test_signup_success(client, db):
    """Test successful user registration."""
    response = client.post(
        "/auth/signup",
        json={
            "full_name": "Test User",
            "email": "Test_Signup@Example.com",
            "password": "testpass123",
        },
    )

    assert response.status_code == 201
    assert response.json()["message"] == "User created successfully"
    assert "user_id" in response.json()

    # Verify user exists in database
    user = db.query(User).filter(User.email == "test_signup@example.com").first()
    assert user is not None
    assert user.full_name == "Test User"
    assert user.password_hash != "testpass123"
    assert verify_password("testpass123", user.password_hash)


def test_signup_duplicate_email(client, user):
    """Test signup with an already registered email."""
    response = client.post(
        "/auth/signup",
        json={
            "full_name": "New User",
            "email": user.email,
            "password": "newpass123",
        },
    )

    assert response.status_code == 400
    assert "Email already registered" in response.json()["detail"]


def test_signup_missing_fields(client):
    """Test signup with missing required fields."""
    response = client.post(
        "/auth/signup",
        json={
            "email": "test@example.com",
            "password": "testpass123"
        },
    )

    assert response.status_code == 422  # Validation error
    assert "detail" in response.json()


def test_signup_short_password(client):
    """Test signup with password too short."""
    response = client.post(
        "/auth/signup",
        json={
            "full_name": "Test User",
            "email": "short@example.com",
            "password": "short",
        },
    )

    assert response.status_code == 422


def test_signup_password_over_bcrypt_limit(client):
    """Passwords longer than 72 bytes are rejected, not silently truncated."""
    response = client.post(
        "/auth/signup",
        json={
            "full_name": "Test User",
            "email": "long@example.com",
            "password": "é" * 40,
        },
    )

    assert response.status_code == 422


def test_signup_invalid_email(client):
    response = client.post(
        "/auth/signup",
        json={
            "full_name": "Test User",
            "email": "not-an-email",
            "password": "testpass123",
        },
    )

    assert response.status_code == 422
