"""
Colors, fonts, fills, borders and number formats for exported workbooks.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
PRIMARY = "3949AB"
PRIMARY_DARK = "1A237E"
INCOME_GREEN = "2E7D32"
EXPENSE_RED = "C62828"
ALTERNATE_ROW = "F5F6FA"
TOTAL_ROW_BG = "E8EAF6"
LIGHT_RED = "FFEBEE"
LIGHT_GREEN = "E8F5E9"
WHITE = "FFFFFF"
BLACK = "000000"
GRAY = "666666"

# ---------------------------------------------------------------------------
# Number formats (pt-BR money)
# ---------------------------------------------------------------------------
CURRENCY_FORMAT = '"R$ "#,##0.00'
PERCENT_FORMAT = '0.00"%"'
DATE_FORMAT = "DD/MM/YYYY"

# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------
TITLE_FONT = Font(name="Calibri", size=20, bold=True, color=PRIMARY_DARK)
SUBTITLE_FONT = Font(name="Calibri", size=11, italic=True, color=GRAY)
SECTION_FONT = Font(name="Calibri", size=13, bold=True, color=PRIMARY_DARK)
HEADER_FONT = Font(name="Calibri", size=11, bold=True, color=WHITE)
DATA_FONT = Font(name="Calibri", size=10, color=BLACK)
TOTAL_FONT = Font(name="Calibri", size=10, bold=True, color=BLACK)
KPI_VALUE_FONT = Font(name="Calibri", size=22, bold=True, color=PRIMARY_DARK)
KPI_LABEL_FONT = Font(name="Calibri", size=10, color=GRAY)
POSITIVE_KPI_FONT = Font(name="Calibri", size=22, bold=True, color=INCOME_GREEN)
NEGATIVE_KPI_FONT = Font(name="Calibri", size=22, bold=True, color=EXPENSE_RED)

# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------
HEADER_FILL = PatternFill(start_color=PRIMARY, end_color=PRIMARY, fill_type="solid")
ALTERNATE_FILL = PatternFill(start_color=ALTERNATE_ROW, end_color=ALTERNATE_ROW, fill_type="solid")
TOTAL_FILL = PatternFill(start_color=TOTAL_ROW_BG, end_color=TOTAL_ROW_BG, fill_type="solid")
INCOME_FILL = PatternFill(start_color=LIGHT_GREEN, end_color=LIGHT_GREEN, fill_type="solid")
EXPENSE_FILL = PatternFill(start_color=LIGHT_RED, end_color=LIGHT_RED, fill_type="solid")

# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------
THIN_BORDER = Border(
    left=Side(style="thin", color="D0D3E0"),
    right=Side(style="thin", color="D0D3E0"),
    top=Side(style="thin", color="D0D3E0"),
    bottom=Side(style="thin", color="D0D3E0"),
)
HEADER_BORDER = Border(
    left=Side(style="thin", color=PRIMARY_DARK),
    right=Side(style="thin", color=PRIMARY_DARK),
    top=Side(style="thin", color=PRIMARY_DARK),
    bottom=Side(style="medium", color=PRIMARY_DARK),
)
TOTAL_BORDER = Border(
    left=Side(style="thin", color="9FA8DA"),
    right=Side(style="thin", color="9FA8DA"),
    top=Side(style="medium", color="9FA8DA"),
    bottom=Side(style="medium", color="9FA8DA"),
)

# ---------------------------------------------------------------------------
# Alignments
# ---------------------------------------------------------------------------
CENTER = Alignment(horizontal="center", vertical="center")
LEFT = Alignment(horizontal="left", vertical="center")
RIGHT = Alignment(horizontal="right", vertical="center")

# Row highlight name -> fill
HIGHLIGHT_FILLS = {
    "income": INCOME_FILL,
    "expense": EXPENSE_FILL,
}
