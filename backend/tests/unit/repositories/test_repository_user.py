"""Unit tests for UserRepository."""

import pytest

from chirp.repositories.base import Pagination
from chirp.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_get_by_email_and_username(self, repo, session):
        u = UserFactory(email="alice@example.com", username="alice")
        session.commit()

        assert repo.get_by_email("ALICE@example.com").id == u.id
        assert repo.get_by_username("alice").id == u.id
        assert repo.get_by_username("ALICE") is None

    @pytest.mark.parametrize("identifier", ["carol", "carol@example.com", " Carol@Example.com "])
    def test_find_by_identifier(self, repo, session, identifier):
        u = UserFactory(email="carol@example.com", username="carol")
        session.commit()

        found = repo.find_by_identifier(identifier)

        assert found is not None
        assert found.id == u.id

    def test_find_by_identifier_unknown(self, repo, session):
        assert repo.find_by_identifier("nobody") is None

    def test_exists_helpers(self, repo, session):
        UserFactory(email="bob@example.com", username="bob")
        session.commit()

        assert repo.exists_by_email("bob@example.com")
        assert repo.exists_by_username("bob")
        assert not repo.exists_by_email("nonexistent@example.com")
        assert not repo.exists_by_username("nonexistent")

    def test_increment_counter(self, repo, session):
        u = UserFactory()
        session.commit()

        repo.increment_counter(u.id, "followers_count", 2)
        repo.increment_counter(u.id, "followers_count", -1)
        session.commit()

        assert repo.get(u.id).followers_count == 1

    def test_safe_update_fields(self, repo, session):
        u = UserFactory()
        session.commit()

        updated = repo.assign_updates(u, {"display_name": "Renamed"})
        assert updated.display_name == "Renamed"

        # Credentials and handles are never updatable
        with pytest.raises(ValueError):
            repo.assign_updates(u, {"password_hash": "x"})
        with pytest.raises(ValueError):
            repo.assign_updates(u, {"username": "other"})

    def test_paginate_with_filter_and_sort(self, repo, session):
        for name in ("pz", "pa", "pm"):
            UserFactory(username=name, display_name=name)
        session.commit()

        page = repo.paginate(Pagination(page=1, limit=10, sort=["-username"]))
        names = [u.username for u in page.items if u.username in {"pz", "pa", "pm"}]
        assert names == ["pz", "pm", "pa"]

        filtered = repo.paginate(Pagination(page=1, limit=10), filters={"username": "pm"})
        assert filtered.total == 1
        assert filtered.items[0].username == "pm"

    def test_pagination_sort_defaults_to_empty(self, repo, session):
        UserFactory(username="nosort")
        session.commit()

        page = repo.paginate(Pagination(page=1, limit=50))

        assert Pagination(page=1, limit=50).sort == []
        assert "nosort" in {u.username for u in page.items}
