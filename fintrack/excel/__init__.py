"""Workbook styling, formatting and writing."""
from .styles import *
from .formatters import format_header_row, format_data_cell, auto_column_width, add_kpi_card
from .writer import ExcelWriter
