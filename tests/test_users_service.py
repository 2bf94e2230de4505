"""Unit tests for accounts.services.users against an in-memory SQLite database."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError

from accounts.core.errors import AlreadyExists, NotFound
from accounts.core.security import verify_password
from accounts.schemas.auth import SignUpRequest
from accounts.services.users import (
    create_user,
    delete_user,
    get_user_by_email,
    get_user_by_id,
    list_users,
    split_full_name,
    update_user,
)
from tests.support import make_session_factory


def _signup(name: str = "Jane Doe", email: str = "jane@x.com", **kwargs: object) -> SignUpRequest:
    return SignUpRequest(name=name, email=email, password="Password123", **kwargs)


class TestSplitFullName(unittest.TestCase):
    def test_first_space_boundary(self) -> None:
        self.assertEqual(split_full_name("Jane Doe"), ("Jane", "Doe"))
        self.assertEqual(split_full_name("Jane Mary Doe"), ("Jane", "Mary Doe"))

    def test_single_word_has_empty_last_name(self) -> None:
        self.assertEqual(split_full_name("Cher"), ("Cher", ""))


class UserRepositoryTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, session_factory = make_session_factory()
        self.db = session_factory()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestCreateUser(UserRepositoryTestCase):
    def test_creates_user_with_split_name_and_hashed_password(self) -> None:
        user = create_user(self.db, _signup(), rounds=4)
        self.assertEqual(user.first_name, "Jane")
        self.assertEqual(user.last_name, "Doe")
        self.assertEqual(user.email, "jane@x.com")
        self.assertEqual(user.role, "user")
        self.assertTrue(user.is_active)
        self.assertNotEqual(user.password_hash, "Password123")
        self.assertTrue(verify_password("Password123", user.password_hash))
        self.assertIsNotNone(user.created_at)

    def test_email_is_lowercased(self) -> None:
        user = create_user(self.db, _signup(email="  Jane@X.COM "), rounds=4)
        self.assertEqual(user.email, "jane@x.com")
        self.assertEqual(get_user_by_email(self.db, "JANE@x.com").id, user.id)

    def test_duplicate_email_raises_already_exists(self) -> None:
        create_user(self.db, _signup(), rounds=4)
        with self.assertRaises(AlreadyExists):
            create_user(self.db, _signup(name="Other Person"), rounds=4)

    def test_integrity_error_on_commit_maps_to_already_exists(self) -> None:
        """A racing insert that slips past the lookup is still reported as a conflict."""
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("unique"))
        with self.assertRaises(AlreadyExists):
            create_user(db, _signup(), rounds=4)
        db.rollback.assert_called_once()

    def test_explicit_role(self) -> None:
        user = create_user(self.db, _signup(role="admin"), rounds=4)
        self.assertEqual(user.role, "admin")


class TestReadUsers(UserRepositoryTestCase):
    def test_get_user_by_id_missing_raises_not_found(self) -> None:
        with self.assertRaises(NotFound):
            get_user_by_id(self.db, 999)

    def test_get_user_by_email_missing_returns_none(self) -> None:
        self.assertIsNone(get_user_by_email(self.db, "nobody@x.com"))

    def test_list_users_ordered_by_id(self) -> None:
        a = create_user(self.db, _signup(email="a@x.com"), rounds=4)
        b = create_user(self.db, _signup(email="b@x.com"), rounds=4)
        self.assertEqual([u.id for u in list_users(self.db)], [a.id, b.id])


class TestUpdateUser(UserRepositoryTestCase):
    def test_updates_fields_and_touches_updated_at(self) -> None:
        user = create_user(self.db, _signup(), rounds=4)
        before = user.updated_at
        updated = update_user(self.db, user.id, {"first_name": "Janet", "role": "moderator"}, rounds=4)
        self.assertEqual(updated.first_name, "Janet")
        self.assertEqual(updated.last_name, "Doe")
        self.assertEqual(updated.role, "moderator")
        self.assertNotEqual(updated.updated_at, before)

    def test_password_is_rehashed(self) -> None:
        user = create_user(self.db, _signup(), rounds=4)
        old_hash = user.password_hash
        updated = update_user(self.db, user.id, {"password": "NewPassword456"}, rounds=4)
        self.assertNotEqual(updated.password_hash, old_hash)
        self.assertTrue(verify_password("NewPassword456", updated.password_hash))

    def test_email_change_to_taken_address_raises_already_exists(self) -> None:
        create_user(self.db, _signup(email="a@x.com"), rounds=4)
        b = create_user(self.db, _signup(email="b@x.com"), rounds=4)
        with self.assertRaises(AlreadyExists):
            update_user(self.db, b.id, {"email": "A@x.com"}, rounds=4)

    def test_missing_user_raises_not_found(self) -> None:
        with self.assertRaises(NotFound):
            update_user(self.db, 42, {"first_name": "X"}, rounds=4)


class TestDeleteUser(UserRepositoryTestCase):
    def test_delete_returns_id_and_removes_row(self) -> None:
        user = create_user(self.db, _signup(), rounds=4)
        self.assertEqual(delete_user(self.db, user.id), user.id)
        self.assertIsNone(get_user_by_email(self.db, "jane@x.com"))

    def test_delete_missing_raises_not_found(self) -> None:
        with self.assertRaises(NotFound):
            delete_user(self.db, 5)
