"""Unit tests for API dependencies: repository and mailer wiring.

Tests focus on:
- 503 when MongoDB client is None
- Correct database name is used
- MongoUserRepository receives the database instance
- One SmtpMailer per process
"""

import unittest
from unittest.mock import patch, MagicMock

from fastapi import HTTPException

import api.dependencies as dependencies
from api.dependencies import close_mailer, get_mailer, get_user_repo
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.smtp.mailer import SmtpMailer
from utils.settings import Settings

SETTINGS = Settings(jwt_secret='test-secret', mongo_url='mongodb://db:27017', database_name='authdb')


@patch('api.dependencies.get_settings', return_value=SETTINGS)
class TestGetUserRepo(unittest.TestCase):

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_mongo_repository_when_connected(self, mock_get_client, _settings):
        mock_client = MagicMock()
        mock_get_client.return_value = mock_client

        repo = get_user_repo()

        self.assertIsInstance(repo, MongoUserRepository)
        mock_get_client.assert_called_once_with('mongodb://db:27017')
        mock_client.__getitem__.assert_called_with('authdb')

    @patch('api.dependencies.get_mongodb_client')
    def test_raises_503_when_mongodb_unavailable(self, mock_get_client, _settings):
        mock_get_client.return_value = None

        with self.assertRaises(HTTPException) as context:
            get_user_repo()

        self.assertEqual(context.exception.status_code, 503)
        self.assertEqual(context.exception.detail, "Database unavailable")

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_protocol_compatible_object(self, mock_get_client, _settings):
        mock_get_client.return_value = MagicMock()

        repo = get_user_repo()

        expected_methods = [
            'create', 'get_by_email', 'get_by_id', 'mark_verified',
            'set_reset_token', 'find_by_reset_token', 'consume_reset_token',
        ]
        for method in expected_methods:
            self.assertTrue(
                hasattr(repo, method),
                f"MongoUserRepository missing protocol method: {method}"
            )


@patch('api.dependencies.get_settings', return_value=SETTINGS)
class TestGetMailer(unittest.TestCase):

    def tearDown(self):
        dependencies._mailer = None

    def test_single_instance(self, _settings):
        first = get_mailer()
        second = get_mailer()

        self.assertIsInstance(first, SmtpMailer)
        self.assertIs(first, second)

    def test_close_mailer_drops_instance(self, _settings):
        first = get_mailer()
        with patch.object(first, 'close') as mock_close:
            close_mailer()
            mock_close.assert_called_once()

        self.assertIsNot(get_mailer(), first)


if __name__ == '__main__':
    unittest.main()
