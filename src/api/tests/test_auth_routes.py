"""Tests for auth routes: provider callback and current user."""

import unittest

from fastapi.testclient import TestClient

from api.dependencies import get_user_repo
from api.main import app
from api.security import create_access_token, verify_token
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import PersistenceError


ROBERTO = {'uid': 1, 'info': {'email': 'Roberto@test.com', 'name': 'Roberto'}}


class AuthRouteTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        app.dependency_overrides[get_user_repo] = lambda: self.repo
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class TestCallbackRoute(AuthRouteTestCase):
    """POST /auth/{provider}/callback"""

    def test_first_callback_creates_user(self):
        response = self.client.post("/auth/facebook/callback", json=ROBERTO)

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertTrue(data['created'])
        self.assertEqual(data['user']['provider_uid'], '1')
        self.assertEqual(data['user']['name'], 'Roberto')
        self.assertEqual(data['user']['email'], 'Roberto@test.com')
        self.assertEqual(data['user']['provider'], 'facebook')

    def test_token_is_keyed_by_user_id(self):
        data = self.client.post("/auth/facebook/callback", json=ROBERTO).json()
        self.assertEqual(verify_token(data['token']), data['user']['id'])

    def test_second_callback_updates_same_user(self):
        first = self.client.post("/auth/facebook/callback", json=ROBERTO).json()
        response = self.client.post("/auth/facebook/callback", json=ROBERTO)

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertFalse(data['created'])
        self.assertEqual(data['user']['id'], first['user']['id'])
        self.assertEqual(data['user']['name'], 'Roberto')
        self.assertEqual(len(self.repo.store), 1)

    def test_free_form_extra_keys_ignored(self):
        response = self.client.post("/auth/facebook/callback", json={
            'uid': 'abc',
            'here': 'is',
            'some': 'auth',
            'data': '.',
            'provider': 'facebook',
        })

        self.assertEqual(response.status_code, 201)
        self.assertIsNone(response.json()['user']['name'])

    def test_missing_uid_returns_400(self):
        response = self.client.post("/auth/facebook/callback", json={'info': {'name': 'Roberto'}})

        self.assertEqual(response.status_code, 400)
        self.assertIn("uid", response.json()['detail'])
        self.assertEqual(self.repo.store, {})

    def test_empty_uid_returns_400(self):
        response = self.client.post("/auth/facebook/callback", json={'uid': ''})
        self.assertEqual(response.status_code, 400)

    def test_boolean_uid_returns_400_without_signing_in(self):
        """JSON true must not be coerced into uid "1" and hijack that user."""
        self.client.post("/auth/facebook/callback", json=ROBERTO)
        before = dict(self.repo.store)

        response = self.client.post("/auth/facebook/callback", json={'uid': True})

        self.assertEqual(response.status_code, 400)
        self.assertNotIn('token', response.json())
        self.assertEqual(self.repo.store, before)

    def test_float_uid_returns_400_without_signing_in(self):
        self.client.post("/auth/facebook/callback", json=ROBERTO)
        before = dict(self.repo.store)

        response = self.client.post("/auth/facebook/callback", json={'uid': 1.0})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.repo.store, before)

    def test_non_string_info_field_returns_400(self):
        response = self.client.post("/auth/facebook/callback", json={'uid': '1', 'info': {'name': 42}})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.repo.store, {})

    def test_non_object_body_returns_400(self):
        response = self.client.post("/auth/facebook/callback", json=['uid', '1'])
        self.assertEqual(response.status_code, 400)

    def test_storage_failure_returns_500(self):
        self.repo.fail_with = PersistenceError("down")

        response = self.client.post("/auth/facebook/callback", json=ROBERTO)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['detail'], "Failed to store user")


class TestMeRoute(AuthRouteTestCase):
    """GET /auth/me"""

    def test_returns_signed_in_user(self):
        token = self.client.post("/auth/facebook/callback", json=ROBERTO).json()['token']

        response = self.client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['provider_uid'], '1')

    def test_missing_token_returns_401(self):
        response = self.client.get("/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], "Not authenticated")

    def test_invalid_token_returns_401(self):
        response = self.client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)

    def test_unknown_user_returns_401(self):
        token = create_access_token('no-such-user')
        response = self.client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['detail'], "User not found")


class TestRootRoute(unittest.TestCase):

    def test_root_reports_service(self):
        response = TestClient(app).get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'running')


if __name__ == '__main__':
    unittest.main()
