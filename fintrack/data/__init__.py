"""Records, CSV import/export, storage access and the per-user in-memory store."""
from .loader import ImportResult, import_csv, parse_rows
from .export import export_filename, to_csv_text
from .models import CreditCard, FixedExpense, SpreadsheetRow, Transaction, UserProfile
from .repository import FinanceRepository
from .schemas import Category, MonthPeriod, PaymentMethod, TransactionType
from .store import FinanceStore
