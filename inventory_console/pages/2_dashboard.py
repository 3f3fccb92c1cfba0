"""Дашборд: сводные показатели склада и транзакций."""

import pandas as pd
import plotly.express as px
import streamlit as st

from components import format_money, render_records, render_sidebar, setup_page
from config import app_config
from core.auth import get_api_client, require_authentication
from dashboard import load_dashboard
from styles import TRANSACTION_TYPE_COLORS, get_stat_card_html

setup_page("dashboard")

# Проверка аутентификации (останавливает выполнение если не авторизован)
api_client = require_authentication()
render_sidebar(api_client)

st.title("Dashboard")

with st.spinner("Loading dashboard..."):
    stats = load_dashboard(api_client)

# Переход на вход, если 401 пришёл в рабочем потоке
get_api_client()

for message in stats.errors:
    st.warning(message)

cards = [
    ("Total Products", stats.total_products, "products"),
    ("Categories", stats.total_categories, "categories"),
    ("Suppliers", stats.total_suppliers, "suppliers"),
    ("Transactions", stats.total_transactions, "transactions"),
]
for column, (title, value, kind) in zip(st.columns(len(cards)), cards):
    with column:
        st.markdown(get_stat_card_html(title, value, kind), unsafe_allow_html=True)

col_left, col_right = st.columns(2)

with col_left:
    st.subheader(f"Low stock (< {app_config.low_stock_threshold})")
    render_records(stats.low_stock_products, ["name", "sku", "stockQuantity"])

with col_right:
    st.subheader("This month by type")
    if stats.monthly_by_type:
        frame = pd.DataFrame(
            {"type": list(stats.monthly_by_type), "count": list(stats.monthly_by_type.values())}
        )
        figure = px.pie(
            frame,
            names="type",
            values="count",
            color="type",
            color_discrete_map=TRANSACTION_TYPE_COLORS,
        )
        st.plotly_chart(figure, use_container_width=True)
    else:
        st.info("No transactions this month")

st.subheader("Recent transactions")
recent = [
    {**transaction, "totalPrice": format_money(transaction.get("totalPrice") or 0)}
    for transaction in stats.recent_transactions
]
render_records(recent, ["id", "transactionType", "totalProducts", "totalPrice", "status", "createdAt"])
