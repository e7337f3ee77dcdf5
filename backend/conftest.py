"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users (with profile).
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``create_book`` factory fixture for marketplace listings.
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            user = create_user(username="rahim")
            # or with all fields:
            user = create_user(
                username="karim",
                password="Str0ng!Pass",
                email="karim@example.com",
                phone_number="01712345678",
                role="admin",
                institution=dhaka_university,
            )

    A ``Profile`` is created unless ``with_profile=False``.
    """
    from accounts.models import Profile, User

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        email: str | None = None,
        phone_number: str | None = None,
        role: str | None = None,
        is_active: bool = True,
        with_profile: bool = True,
        institution=None,
        department=None,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"testuser{_counter}"
        if email is None:
            email = f"{username}@test.local"
        if phone_number is None:
            phone_number = f"017{_counter:08d}"

        user = User.objects.create_user(
            username=username,
            password=password,
            email=email,
            phone_number=phone_number,
            is_active=is_active,
            **kwargs,
        )
        if role is not None:
            user.role = role
            user.save(update_fields=["role"])
        if with_profile:
            Profile.objects.create(
                user=user,
                name=username.title(),
                phone_number=phone_number,
                institution=institution,
                department=department,
            )
        return user

    return _factory


@pytest.fixture()
def auth_header(create_user, api_client):
    """
    Returns a helper function that creates a user and returns an
    ``Authorization`` header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(username="rahim")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/core/notifications/")
            assert resp.status_code != 401

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(
        *,
        username: str | None = None,
        role: str | None = None,
        **user_kwargs,
    ) -> dict[str, str]:
        user = create_user(username=username, role=role, **user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def create_book(create_user):
    """Factory fixture for a listed book; creates a seller when none is given."""
    from books.models import Book

    def _factory(*, seller=None, title: str = "Calculus", price: int = 350, **kwargs) -> Book:
        if seller is None:
            seller = create_user()
        return Book.objects.create(
            seller=seller,
            title=title,
            author=kwargs.pop("author", "Anton"),
            price=price,
            **kwargs,
        )

    return _factory
