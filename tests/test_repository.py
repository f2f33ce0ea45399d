import unittest
from unittest.mock import MagicMock

from supabase import Client

from fintrack.data.repository import FinanceRepository
from fintrack.errors import NotFound, RemoteError


class TestFinanceRepository(unittest.TestCase):
    def setUp(self):
        self.mock_client = MagicMock(spec=Client)

        # Chainable query builder: .select().eq().eq().execute()
        self.mock_table = MagicMock()
        for method in ("select", "insert", "update", "delete", "eq"):
            getattr(self.mock_table, method).return_value = self.mock_table
        self.mock_table.execute.return_value = MagicMock(data=[])
        self.mock_client.table.return_value = self.mock_table

        self.repo = FinanceRepository(self.mock_client)

    def respond(self, data):
        self.mock_table.execute.return_value = MagicMock(data=data)

    # --- fetch_all ---
    def test_fetch_all_filters_by_user(self):
        self.respond([{"id": 1, "description": "Mercado"}])
        rows = self.repo.fetch_all("transactions", "user-1")

        self.assertEqual(rows, [{"id": 1, "description": "Mercado"}])
        self.mock_client.table.assert_called_with("transactions")
        self.mock_table.eq.assert_called_once_with("user_id", "user-1")

    def test_fetch_all_empty(self):
        self.respond(None)
        self.assertEqual(self.repo.fetch_all("transactions", "user-1"), [])

    def test_fetch_all_failure(self):
        self.mock_table.execute.side_effect = Exception("connection reset")
        with self.assertRaises(RemoteError):
            self.repo.fetch_all("transactions", "user-1")

    # --- add ---
    def test_add_returns_assigned_id(self):
        self.respond([{"id": 42}])
        new_id = self.repo.add("credit_cards", "user-1", {"name": "Nubank"})

        self.assertEqual(new_id, "42")
        args, _ = self.mock_table.insert.call_args
        self.assertEqual(args[0], {"name": "Nubank", "user_id": "user-1"})

    def test_add_without_returned_row(self):
        self.respond([])
        with self.assertRaises(RemoteError):
            self.repo.add("credit_cards", "user-1", {"name": "Nubank"})

    # --- update / delete ---
    def test_update_scoped_to_owner(self):
        self.respond([{"id": "t1"}])
        self.repo.update("transactions", "user-1", "t1", {"amount": 10})

        self.mock_table.update.assert_called_once_with({"amount": 10})
        self.mock_table.eq.assert_any_call("id", "t1")
        self.mock_table.eq.assert_any_call("user_id", "user-1")

    def test_update_missing_row(self):
        self.respond([])
        with self.assertRaises(NotFound):
            self.repo.update("transactions", "user-1", "t1", {"amount": 10})

    def test_delete(self):
        self.respond([{"id": "t1"}])
        self.repo.delete("transactions", "user-1", "t1")
        self.mock_table.delete.assert_called_once()

    def test_delete_failure(self):
        self.mock_table.execute.side_effect = Exception("timeout")
        with self.assertRaises(RemoteError):
            self.repo.delete("transactions", "user-1", "t1")

    # --- profiles ---
    def test_get_profile(self):
        self.respond([{"id": "user-1", "plan": "free"}])
        self.assertEqual(self.repo.get_profile("user-1"), {"id": "user-1", "plan": "free"})
        self.mock_client.table.assert_called_with("users")

    def test_get_profile_missing(self):
        self.assertIsNone(self.repo.get_profile("user-1"))

    def test_create_profile(self):
        self.repo.create_profile("user-1", {"email": "ana@example.com", "plan": "free"})
        args, _ = self.mock_table.insert.call_args
        self.assertEqual(args[0]["id"], "user-1")


if __name__ == "__main__":
    unittest.main()
