# bizdash/commission_dashboard/constants.py
"""
Constants for Commission Dashboard Module

Centralized configuration for:
- Sale / payment status values as stored in the database
- Month names and filter ranges
- Color schemes and chart settings
- Export styles
"""

from decimal import Decimal

# =====================================================================
# STATUS VALUES (stored values, do not translate)
# =====================================================================

STATUS_COMPLETED = "concluída"
STATUS_PENDING = "pendente"

PAYMENT_PENDING = "pendente"
PAYMENT_PAID = "pago"

# =====================================================================
# MONTHS (zero-based index, 0 = January)
# =====================================================================

MONTH_NAMES_PT = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro"
]

ALL_MONTHS = tuple(range(12))

YEAR_OPTIONS = list(range(2020, 2031))

# =====================================================================
# MONEY
# =====================================================================

CURRENCY_SYMBOL = "R$"
CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Fixed costs without a usable duration count as a single month
DEFAULT_FIXED_COST_MONTHS = 1

# =====================================================================
# COLOR SCHEME
# =====================================================================

COLORS = {
    "revenue": "#16a34a",          # Green
    "sale_costs": "#ea580c",       # Orange
    "fixed_costs": "#dc2626",      # Red
    "net_positive": "#16a34a",
    "net_negative": "#dc2626",
    "profit": "#0d9488",           # Teal
    "commission": "#1f77b4",       # Blue
    "text_light": "#666666",
    "grid": "#e0e0e0",
}

# =====================================================================
# CHART DIMENSIONS
# =====================================================================

CHART_WIDTH = 800
CHART_HEIGHT = 360

# =====================================================================
# EXPORT SETTINGS
# =====================================================================

EXCEL_STYLES = {
    "header_fill_color": "1f77b4",
    "header_font_color": "FFFFFF",
    "currency_format": '"R$" #,##0.00',
    "percent_format": '0.0"%"',
    "date_format": 'DD/MM/YYYY',
}
