import time
import unittest
from unittest.mock import MagicMock, patch

from fintrack.auth import IdentityService
from fintrack.data.repository import FinanceRepository
from fintrack.errors import AuthError


def auth_response(user_id="user-1", email="ana@example.com", token="access", metadata=None, session=True):
    user = MagicMock(id=user_id, email=email, user_metadata=metadata or {})
    return MagicMock(
        user=user,
        session=MagicMock(access_token=token, refresh_token="refresh") if session else None,
    )


class TestIdentityService(unittest.TestCase):
    def setUp(self):
        self.mock_client = MagicMock()
        self.mock_repo = MagicMock(spec=FinanceRepository)
        self.mock_factory = MagicMock()
        self.service = IdentityService(self.mock_client, self.mock_repo, self.mock_factory)

    def test_sign_in(self):
        self.mock_client.auth.sign_in_with_password.return_value = auth_response()
        session = self.service.sign_in("ana@example.com", "secret")

        self.assertEqual(session.user_id, "user-1")
        self.assertEqual(session.access_token, "access")
        self.assertTrue(session.confirmed)
        self.mock_client.auth.sign_in_with_password.assert_called_once_with(
            {"email": "ana@example.com", "password": "secret"}
        )

    def test_sign_in_rejected(self):
        self.mock_client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
        with self.assertRaises(AuthError):
            self.service.sign_in("ana@example.com", "wrong")

    def test_sign_up_creates_free_profile(self):
        self.mock_client.auth.sign_up.return_value = auth_response(session=False)
        session = self.service.sign_up("ana@example.com", "secret")

        self.assertFalse(session.confirmed)
        user_id, document = self.mock_repo.create_profile.call_args[0]
        self.assertEqual(user_id, "user-1")
        self.assertEqual(document["plan"], "free")
        self.assertEqual(document["email"], "ana@example.com")
        self.assertIsNotNone(document["created_at"])

    def test_start_oauth_returns_provider_url(self):
        flow_client = MagicMock()
        flow_client.auth.sign_in_with_oauth.return_value = MagicMock(url="https://accounts.example/authorize")
        self.mock_factory.return_value = flow_client
        flow = self.service.start_oauth("google", "http://localhost:8000/api/auth/callback")

        self.assertEqual(flow.url, "https://accounts.example/authorize")
        args, _ = flow_client.auth.sign_in_with_oauth.call_args
        self.assertEqual(args[0]["provider"], "google")
        self.assertEqual(
            args[0]["options"]["redirect_to"],
            f"http://localhost:8000/api/auth/callback?flow={flow.flow_id}",
        )
        self.mock_client.auth.sign_in_with_oauth.assert_not_called()

    def test_concurrent_oauth_flows_keep_their_own_client(self):
        alice_client, bob_client = MagicMock(), MagicMock()
        alice_client.auth.exchange_code_for_session.return_value = auth_response(user_id="alice")
        self.mock_factory.side_effect = [alice_client, bob_client]
        self.mock_repo.get_profile.return_value = {"id": "alice"}

        alice = self.service.start_oauth("google")
        bob = self.service.start_oauth("google")
        self.assertNotEqual(alice.flow_id, bob.flow_id)

        session = self.service.complete_oauth("code-alice", alice.flow_id)
        self.assertEqual(session.user_id, "alice")
        alice_client.auth.exchange_code_for_session.assert_called_once_with({"auth_code": "code-alice"})
        bob_client.auth.exchange_code_for_session.assert_not_called()

    def test_flow_can_complete_only_once(self):
        self.mock_factory.return_value.auth.exchange_code_for_session.return_value = auth_response()
        self.mock_repo.get_profile.return_value = {"id": "user-1"}
        flow = self.service.start_oauth("google")
        self.service.complete_oauth("code-123", flow.flow_id)
        with self.assertRaises(AuthError):
            self.service.complete_oauth("code-123", flow.flow_id)

    def test_unknown_flow(self):
        with self.assertRaises(AuthError):
            self.service.complete_oauth("code-123", "never-started")

    def test_expired_flow(self):
        flow = self.service.start_oauth("google")
        with patch("fintrack.auth.time.monotonic", return_value=time.monotonic() + 3600):
            with self.assertRaises(AuthError):
                self.service.complete_oauth("code-123", flow.flow_id)

    def test_first_oauth_login_creates_profile(self):
        self.mock_factory.return_value.auth.exchange_code_for_session.return_value = auth_response(
            metadata={"full_name": "Ana Souza", "avatar_url": "https://img.example/ana.png"}
        )
        self.mock_repo.get_profile.return_value = None
        flow = self.service.start_oauth("google")
        self.service.complete_oauth("code-123", flow.flow_id)

        _, document = self.mock_repo.create_profile.call_args[0]
        self.assertEqual(document["name"], "Ana Souza")
        self.assertEqual(document["photo_url"], "https://img.example/ana.png")

    def test_returning_oauth_login_keeps_profile(self):
        self.mock_factory.return_value.auth.exchange_code_for_session.return_value = auth_response()
        self.mock_repo.get_profile.return_value = {"id": "user-1", "plan": "pro"}
        flow = self.service.start_oauth("google")
        self.service.complete_oauth("code-123", flow.flow_id)
        self.mock_repo.create_profile.assert_not_called()


    def test_verify(self):
        self.mock_client.auth.get_user.return_value = auth_response()
        user = self.service.verify("access")
        self.assertEqual((user.id, user.email, user.access_token), ("user-1", "ana@example.com", "access"))

    def test_verify_rejects_bad_token(self):
        self.mock_client.auth.get_user.side_effect = Exception("invalid JWT")
        with self.assertRaises(AuthError):
            self.service.verify("garbage")

    def test_profile(self):
        self.mock_repo.get_profile.return_value = {"id": "user-1", "email": "ana@example.com", "plan": "pro"}
        profile = self.service.profile("user-1")
        self.assertEqual(profile.plan, "pro")
        self.mock_repo.get_profile.return_value = None
        self.assertIsNone(self.service.profile("user-2"))


if __name__ == "__main__":
    unittest.main()
