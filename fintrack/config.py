"""
fintrack — Configuration: environment, tables, vocabularies, import tokens.
"""
import os
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

# ---------------------------------------------------------------------------
# External services: managed database + identity provider
# ---------------------------------------------------------------------------
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")

# Where the identity provider sends the browser back after a third-party sign-in
OAUTH_REDIRECT_URL = os.environ.get("FINTRACK_OAUTH_REDIRECT", "http://localhost:8000/api/auth/callback")
OAUTH_DEFAULT_PROVIDER = "google"
# Seconds a started third-party sign-in waits for its callback
OAUTH_FLOW_TTL = int(os.environ.get("FINTRACK_OAUTH_FLOW_TTL", "600"))

# Per-user namespace: every row carries this column
USER_COLUMN = "user_id"

PROFILES_TABLE = "users"
TRANSACTIONS_TABLE = "transactions"
CREDIT_CARDS_TABLE = "credit_cards"
FIXED_EXPENSES_TABLE = "fixed_expenses"

DEFAULT_PLAN = "free"

# ---------------------------------------------------------------------------
# Calendar: month/day fields are read in this timezone
# ---------------------------------------------------------------------------
LOCAL_TIMEZONE = ZoneInfo(os.environ.get("FINTRACK_TIMEZONE", "America/Sao_Paulo"))

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]
MONTH_ABBREVIATIONS = [
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
]

TREND_MONTHS = 6

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("FINTRACK_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# ---------------------------------------------------------------------------
# Display names (pt-BR) for category and payment-method tags
# ---------------------------------------------------------------------------
CATEGORY_LABELS = {
    # expenses
    "alimentacao": "Alimentação",
    "transporte": "Transporte",
    "moradia": "Moradia",
    "aluguel": "Aluguel",
    "condominio": "Condomínio",
    "agua": "Água",
    "luz": "Luz",
    "internet": "Internet",
    "telefone": "Telefone",
    "tv": "TV por Assinatura",
    "academia": "Academia",
    "plano_saude": "Plano de Saúde",
    "seguro": "Seguro",
    "financiamento": "Financiamento",
    "lazer": "Lazer",
    "saude": "Saúde",
    "educacao": "Educação",
    "vestuario": "Vestuário",
    "assinaturas": "Assinaturas",
    "outros_gastos": "Outros gastos",
    # income
    "salario": "Salário",
    "adiantamento": "Adiantamento",
    "bonus": "Bônus/Comissão",
    "investimentos": "Investimentos",
    "vendas": "Vendas",
    "aluguel_recebido": "Aluguel recebido",
    "freelance": "Freelance",
    "outras_receitas": "Outras receitas",
    # catch-all
    "outros": "Outros",
}

PAYMENT_METHOD_LABELS = {
    "money": "Dinheiro",
    "debit": "Débito",
    "credit": "Cartão de Crédito",
    "pix": "PIX",
    "transfer": "Transferência",
}

# ---------------------------------------------------------------------------
# CSV import: header roles (accent-insensitive, lower-cased substring match;
# an exact header match wins over a substring match)
# ---------------------------------------------------------------------------
HEADER_TOKENS = {
    "date": ["data", "date"],
    "description": ["descri"],
    "category": ["categ"],
    "payment_method": ["method", "pagamento", "forma"],
    "amount": ["valor", "amount", "value"],
    "type": ["tipo", "type"],
}

# Payment-method synonyms, first match wins.
# Debit is checked first so "cartão de débito" is not read as credit.
PAYMENT_METHOD_TOKENS = [
    (("debito", "debit"), "debit"),
    (("cartao", "credito", "credit", "card"), "credit"),
    (("pix",), "pix"),
    (("transf",), "transfer"),
]

INCOME_TOKENS = ("receita", "income", "entrada", "ganho")

# Category synonyms, first match wins.
# An exact known tag is resolved before these are tried.
CATEGORY_TOKENS = [
    (("aliment", "mercado", "restaurante"), "alimentacao"),
    (("transport", "uber", "combust"), "transporte"),
    (("casa", "morad"), "moradia"),
    (("lazer",), "lazer"),
    (("saude", "farmacia"), "saude"),
    (("educa",), "educacao"),
    (("salario",), "salario"),
]

IMPORT_ENCODINGS = ("utf-8-sig", "cp1252")

# ---------------------------------------------------------------------------
# Export labels (file name prefix: <label>_<YYYY-MM-DD>.csv)
# ---------------------------------------------------------------------------
EXPORT_LABELS = {
    "transactions": "transacoes",
    "fixed_expenses": "despesas-fixas",
    "spreadsheet": "planilha-financeira",
    "monthly_report": "relatorio-mensal",
    "category_report": "relatorio-categorias",
}

# ---------------------------------------------------------------------------
# User-facing notifications (pt-BR)
# ---------------------------------------------------------------------------
MESSAGES = {
    "transaction_added": "Transação adicionada",
    "transaction_updated": "Transação atualizada",
    "transaction_deleted": "Transação excluída",
    "card_added": "Cartão adicionado",
    "card_updated": "Cartão atualizado",
    "card_deleted": "Cartão excluído",
    "fixed_added": "Despesa adicionada",
    "fixed_updated": "Despesa atualizada",
    "fixed_deleted": "Despesa excluída",
    "import_done": "Importação concluída",
    "import_empty": "Nenhum registro importado",
    "nothing_to_save": "Nenhuma alteração para salvar",
    "saved": "Dados salvos com sucesso!",
    "nothing_to_export": "Não há dados para exportar",
}
