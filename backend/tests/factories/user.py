"""Factory Boy definition for :class:`chirp.models.user.User`."""

from __future__ import annotations

import factory

from chirp.models.user import Role, User
from tests.factories import BaseFactory

DEFAULT_PASSWORD = "password123"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`chirp.models.user.User` instances.

    Notes
    -----
    - Every user gets :data:`DEFAULT_PASSWORD` unless ``password=`` is passed.
    - Use ``role=Role.ADMIN`` or the :class:`AdminFactory` for administrators.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    display_name = factory.LazyAttribute(lambda o: o.username.capitalize())
    bio = None
    role = Role.USER
    is_active = True
    is_verified = False
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD


class AdminFactory(UserFactory):
    """Administrator account."""

    username = factory.Sequence(lambda n: f"admin{n}")
    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    role = Role.ADMIN
