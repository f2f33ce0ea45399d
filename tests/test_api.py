import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from fintrack.api.dependencies import get_current_user, get_identity, get_store
from fintrack.auth import CurrentUser, IdentityService, OAuthFlow
from fintrack.data.repository import FinanceRepository
from fintrack.data.store import FinanceStore
from fintrack.errors import RemoteError
from fintrack.main import app

USER = CurrentUser(id="u1", email="ana@example.com", access_token="token")

STORED = {
    "transactions": [
        {"id": "t1", "description": "Salário", "amount": 5000, "date": "2024-03-05T12:00:00",
         "category": "salario", "type": "income", "payment_method": "transfer"},
        {"id": "t2", "description": "Mercado", "amount": 600, "date": "2024-03-10T12:00:00",
         "category": "alimentacao", "type": "expense", "payment_method": "credit", "credit_card_id": "c1"},
        {"id": "t3", "description": "Uber", "amount": 400, "date": "2024-03-12T12:00:00",
         "category": "transporte", "type": "expense", "payment_method": "pix"},
    ],
    "credit_cards": [
        {"id": "c1", "name": "Nubank", "bank": "Nu", "limit": 2000, "due_day": 10, "closing_day": 3},
    ],
    "fixed_expenses": [
        {"id": "f2", "description": "Internet", "amount": 100, "day_of_month": 20, "category": "internet"},
        {"id": "f1", "description": "Aluguel", "amount": 1500, "day_of_month": 5, "category": "aluguel"},
    ],
}

MARCH = {"year": 2024, "month": 2}


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.mock_repo = MagicMock(spec=FinanceRepository)
        self.mock_repo.fetch_all.side_effect = lambda table, user_id: list(STORED[table])
        self.store = FinanceStore(self.mock_repo, USER.id).refresh()

        app.dependency_overrides[get_store] = lambda: self.store
        app.dependency_overrides[get_current_user] = lambda: USER
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class TestMetaAndSummary(ApiTestCase):
    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "ok")

    def test_summary(self):
        data = self.client.get("/api/summary", params=MARCH).json()
        self.assertEqual(data["total_income"], 5000)
        self.assertEqual(data["total_expenses"], 1000)
        self.assertEqual(data["balance"], 4000)
        self.assertEqual(data["transaction_count"], 3)
        self.assertEqual(data["fixed_expenses_total"], 1600)
        self.assertEqual(data["previous"]["key"], "2024-02")
        self.assertEqual(data["cards"][0]["percentage"], 30.0)

    def test_month_out_of_range(self):
        response = self.client.get("/api/summary", params={"year": 2024, "month": 12})
        self.assertEqual(response.status_code, 422)

    def test_vocabulary(self):
        data = self.client.get("/api/meta/vocabulary").json()
        self.assertEqual(len(data["categories"]), 29)
        self.assertEqual(data["transaction_types"], ["income", "expense"])


class TestTransactions(ApiTestCase):
    def test_list_newest_first(self):
        data = self.client.get("/api/transactions", params=MARCH).json()
        self.assertEqual([t["id"] for t in data], ["t3", "t2", "t1"])
        self.assertEqual(data[1]["creditCardId"], "c1")

    def test_create(self):
        self.mock_repo.add.return_value = "t9"
        response = self.client.post("/api/transactions", json={
            "description": "Cinema", "amount": 45, "date": "2024-03-20",
            "category": "lazer", "type": "expense", "paymentMethod": "pix",
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["record"]["id"], "t9")
        self.assertEqual(response.json()["message"], "Transação adicionada")

    def test_credit_requires_card(self):
        response = self.client.post("/api/transactions", json={
            "description": "Cinema", "amount": 45, "date": "2024-03-20",
            "type": "expense", "paymentMethod": "credit",
        })
        self.assertEqual(response.status_code, 422)
        self.mock_repo.add.assert_not_called()

    def test_update_unknown(self):
        response = self.client.patch("/api/transactions/nope", json={"amount": 10})
        self.assertEqual(response.status_code, 404)

    def test_remote_failure(self):
        self.mock_repo.delete.side_effect = RemoteError("Erro ao excluir de transactions")
        response = self.client.delete("/api/transactions/t1")
        self.assertEqual(response.status_code, 502)
        self.assertEqual(len(self.store.transactions), 3)

    def test_export_csv(self):
        response = self.client.get("/api/transactions/export")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/csv"))
        self.assertIn('filename="transacoes_', response.headers["content-disposition"])


class TestFixedExpensesAndReports(ApiTestCase):
    def test_fixed_expenses_sorted_by_day(self):
        data = self.client.get("/api/fixed-expenses").json()
        self.assertEqual(data["total"], 1600)
        self.assertEqual([e["id"] for e in data["items"]], ["f1", "f2"])

    def test_category_csv(self):
        response = self.client.get("/api/reports/categories.csv", params=MARCH)
        lines = response.text.splitlines()
        self.assertEqual(lines[0], "category,amount,percentage")
        self.assertEqual(lines[1], "Alimentação,600.0,60.00%")

    def test_empty_month_has_nothing_to_export(self):
        response = self.client.get("/api/reports/categories.csv", params={"year": 2020, "month": 0})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Não há dados para exportar")

    def test_monthly_xlsx(self):
        response = self.client.get("/api/reports/monthly.xlsx", params=MARCH)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.content.startswith(b"PK"))


class TestSpreadsheetEndpoints(ApiTestCase):
    def test_import(self):
        content = "Data,Descrição,Valor\n15/03/2024,Mercado,\"-150,50\"\n".encode("utf-8")
        response = self.client.post("/api/spreadsheet/import", files={"file": ("extrato.csv", content, "text/csv")})
        data = response.json()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(data["count"], 1)
        self.assertEqual(data["rows"][0]["amount"], 150.5)
        self.assertTrue(data["rows"][0]["isNew"])
        self.mock_repo.add.assert_not_called()

    def test_import_empty_file(self):
        response = self.client.post("/api/spreadsheet/import", files={"file": ("vazio.csv", b"", "text/csv")})
        self.assertEqual(response.status_code, 400)

    def test_save_nothing_pending(self):
        rows = self.client.get("/api/spreadsheet", params=MARCH).json()
        response = self.client.post("/api/spreadsheet/save", json={"rows": rows})
        self.assertEqual(response.json()["message"], "Nenhuma alteração para salvar")
        self.assertEqual(response.json()["saved"], 0)

    def test_save_new_row(self):
        self.mock_repo.add.return_value = "t10"
        row = {"id": "imported-1-1", "date": "2024-03-21", "description": "Padaria",
               "amount": 12.5, "type": "expense", "isNew": True}
        response = self.client.post("/api/spreadsheet/save", json={"rows": [row]})
        self.assertEqual(response.json()["saved"], 1)
        self.assertEqual(len(self.store.transactions), 4)


class TestAuthRequired(unittest.TestCase):
    def test_me_without_token(self):
        response = TestClient(app).get("/api/auth/me")
        self.assertEqual(response.status_code, 401)


class TestOAuthEndpoints(unittest.TestCase):
    def setUp(self):
        self.identity = MagicMock(spec=IdentityService)
        app.dependency_overrides[get_identity] = lambda: self.identity
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_start_returns_flow_id(self):
        self.identity.start_oauth.return_value = OAuthFlow(flow_id="f1", url="https://accounts.example/auth")
        response = self.client.get("/api/auth/oauth", params={"provider": "google"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["flow_id"], "f1")
        self.identity.start_oauth.assert_called_once_with("google")

    def test_callback_without_flow(self):
        response = self.client.get("/api/auth/callback", params={"code": "abc"})
        self.assertEqual(response.status_code, 401)
        self.identity.complete_oauth.assert_not_called()


if __name__ == "__main__":
    unittest.main()
