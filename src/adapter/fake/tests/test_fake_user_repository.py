"""Unit tests for FakeUserRepository: verifies Port contract compliance."""

import threading
import unittest
from datetime import datetime, timedelta, timezone

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import DuplicateError
from domain.model.user import User


class TestFakeUserRepository(unittest.TestCase):
    """Tests that FakeUserRepository correctly implements UserRepository Protocol."""

    def setUp(self):
        self.repo = FakeUserRepository()
        self.now = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)

    # ── create + lookups ─────────────────────────────────────

    def test_create_and_get(self):
        user = self.repo.create(email='a@x.com', password_hash='hash')

        self.assertIsInstance(user, User)
        self.assertFalse(user.is_verified)
        self.assertEqual(self.repo.get_by_id(user.id), user)
        self.assertEqual(self.repo.get_by_email('a@x.com'), user)

    def test_create_duplicate_raises(self):
        self.repo.create(email='a@x.com', password_hash='hash')
        with self.assertRaises(DuplicateError):
            self.repo.create(email='a@x.com', password_hash='other')

    def test_lookups_return_none_for_missing(self):
        self.assertIsNone(self.repo.get_by_id('missing'))
        self.assertIsNone(self.repo.get_by_email('missing@x.com'))

    def test_returned_users_are_copies(self):
        user = self.repo.create(email='a@x.com', password_hash='hash')
        user.is_verified = True
        self.assertFalse(self.repo.get_by_id(user.id).is_verified)

    # ── verification ─────────────────────────────────────────

    def test_mark_verified(self):
        self.repo.create(email='a@x.com', password_hash='hash')
        self.assertTrue(self.repo.mark_verified('a@x.com').is_verified)
        self.assertIsNone(self.repo.mark_verified('missing@x.com'))

    # ── reset tokens ─────────────────────────────────────────

    def test_reset_token_set_find_consume(self):
        user = self.repo.create(email='a@x.com', password_hash='hash')
        expiry = self.now + timedelta(hours=1)

        self.assertTrue(self.repo.set_reset_token(user.id, 'tok', expiry))
        self.assertEqual(self.repo.find_by_reset_token('tok', self.now).id, user.id)

        updated = self.repo.consume_reset_token('tok', self.now, 'new-hash')
        self.assertEqual(updated.password_hash, 'new-hash')
        self.assertIsNone(updated.reset_token)
        self.assertIsNone(updated.reset_token_expiry)
        self.assertIsNone(self.repo.consume_reset_token('tok', self.now, 'again'))

    def test_set_reset_token_for_missing_user(self):
        self.assertFalse(self.repo.set_reset_token('missing', 'tok', self.now))

    def test_expiry_boundary_is_exclusive(self):
        user = self.repo.create(email='a@x.com', password_hash='hash')
        self.repo.set_reset_token(user.id, 'tok', self.now)

        self.assertIsNone(self.repo.find_by_reset_token('tok', self.now))
        self.assertIsNone(self.repo.consume_reset_token('tok', self.now, 'new-hash'))
        self.assertEqual(self.repo.get_by_id(user.id).password_hash, 'hash')

    def test_reads_while_creating_on_other_threads(self):
        errors: list[Exception] = []
        start = threading.Barrier(4)

        def create_many(prefix: str):
            start.wait()
            for i in range(300):
                self.repo.create(email=f'{prefix}-{i}@x.com', password_hash='hash')

        def read_many():
            start.wait()
            try:
                for _ in range(300):
                    self.repo.get_by_email('missing@x.com')
                    self.repo.find_by_reset_token('tok', self.now)
            except RuntimeError as e:
                errors.append(e)

        threads = [
            threading.Thread(target=create_many, args=('a',)),
            threading.Thread(target=create_many, args=('b',)),
            threading.Thread(target=read_many),
            threading.Thread(target=read_many),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertEqual(len(self.repo.store), 600)


if __name__ == '__main__':
    unittest.main()
