"""Централизованные стили для Streamlit приложения."""

from typing import Final

# ===== COLORS =====
PRIMARY_COLOR: Final[str] = "#1976D2"
STAT_CARD_COLORS: Final[dict] = {
    "products": ("#E3F2FD", "#1976D2"),
    "categories": ("#E8F5E8", "#388E3C"),
    "suppliers": ("#FFF3E0", "#F57C00"),
    "transactions": ("#F3E5F5", "#7B1FA2"),
}

TRANSACTION_TYPE_COLORS: Final[dict] = {
    "PURCHASE": "#0088FE",
    "SALE": "#00C49F",
    "RETURN": "#FFBB28",
}

# ===== SIDEBAR STYLES =====
SIDEBAR_HIDE_STYLE: Final[str] = """
<style>
    [data-testid="stSidebar"] {
        display: none;
    }
    [data-testid="stSidebarNav"] {
        display: none;
    }
</style>
"""

# Стандартная навигация Streamlit скрыта: ссылки рисует render_sidebar
SIDEBAR_NAV_HIDE_STYLE: Final[str] = """
<style>
[data-testid="stSidebarNav"] {
    display: none;
}

div[data-testid="stSidebar"] .stButton button {
    text-align: left !important;
    justify-content: flex-start !important;
}
</style>
"""


def get_stat_card_html(title: str, value: int, kind: str) -> str:
    """
    Генерирует HTML карточки дашборда.

    Args:
        title: Подпись
        value: Значение
        kind: Ключ из STAT_CARD_COLORS
    """
    background, accent = STAT_CARD_COLORS.get(kind, ("#F5F5F5", PRIMARY_COLOR))
    return f"""
    <div style="background: {background}; padding: 1rem; border-radius: 10px; margin-bottom: 1rem;">
        <div style="font-size: 0.9rem; color: #555;">{title}</div>
        <div style="font-size: 2rem; font-weight: bold; color: {accent};">{value}</div>
    </div>
    """


def get_stock_badge_html(stock: int, threshold: int) -> str:
    """Бейдж остатка: красный ниже порога."""
    color = "#F44336" if stock < threshold else "#4CAF50"
    return (
        f'<span style="background: {color}; color: white; padding: 2px 8px; '
        f'border-radius: 8px; font-size: 0.8rem;">{stock}</span>'
    )
