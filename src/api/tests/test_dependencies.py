"""Unit tests for API dependencies — get_user_repo() dependency injection."""

import unittest
from unittest.mock import patch, MagicMock

from fastapi import HTTPException

from api.dependencies import get_user_repo, DATABASE_NAME
from adapter.mongodb.user_repository import MongoUserRepository


class TestGetUserRepo(unittest.TestCase):
    """Test cases for get_user_repo() dependency injection function."""

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_mongo_repository_when_connected(self, mock_get_client):
        mock_client = MagicMock()
        mock_get_client.return_value = mock_client

        repo = get_user_repo()

        self.assertIsInstance(repo, MongoUserRepository)
        mock_client.__getitem__.assert_called_with(DATABASE_NAME)

    @patch('api.dependencies.get_mongodb_client')
    def test_raises_503_when_mongodb_unavailable(self, mock_get_client):
        mock_get_client.return_value = None

        with self.assertRaises(HTTPException) as context:
            get_user_repo()

        self.assertEqual(context.exception.status_code, 503)
        self.assertEqual(context.exception.detail, "Database unavailable")

    @patch('api.dependencies.get_mongodb_client')
    def test_returns_protocol_compatible_object(self, mock_get_client):
        mock_get_client.return_value = MagicMock()

        repo = get_user_repo()

        for method in ['get_by_provider_uid', 'get_by_id', 'create', 'update']:
            self.assertTrue(callable(getattr(repo, method, None)), method)


if __name__ == '__main__':
    unittest.main()
