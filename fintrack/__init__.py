"""fintrack — personal finance API: transactions, cards, fixed expenses, reports."""

__version__ = "1.0.0"
