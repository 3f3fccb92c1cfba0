"""Транзакции: поиск, фильтр по типу, детали и возврат."""

import streamlit as st
from pydantic import ValidationError

from components import (
    flash,
    format_money,
    records_or_error,
    render_flash,
    render_records,
    render_result,
    render_sidebar,
    setup_page,
    single_record,
)
from config import app_config
from constants import TRANSACTION_FILTER_ALL, TRANSACTION_TYPES
from core.auth import require_authentication
from dashboard import count_by_type, filter_transactions
from schemas import TransactionRequest

setup_page("transactions")

api_client = require_authentication()
render_sidebar(api_client)

st.title("Transactions")
render_flash()

col_search, col_type = st.columns([3, 1])
search_text = col_search.text_input("Search", placeholder="Description, note or status")
transaction_type = col_type.selectbox("Type", (TRANSACTION_FILTER_ALL,) + TRANSACTION_TYPES)

transactions = records_or_error(
    api_client.get_all_transactions(size=app_config.transactions_page_size, search_text=search_text or None),
    "transactions",
)
visible = filter_transactions(transactions, transaction_type)

counts = count_by_type(transactions)
for column, kind in zip(st.columns(len(TRANSACTION_TYPES)), TRANSACTION_TYPES):
    column.metric(kind.title(), counts.get(kind, 0))

render_records(
    [{**t, "totalPrice": format_money(t.get("totalPrice") or 0)} for t in visible],
    ["id", "transactionType", "totalProducts", "totalPrice", "status", "description", "createdAt"],
)

# ===== DETAILS =====
st.markdown("---")
selected = st.selectbox(
    "Transaction details",
    [None] + [t["id"] for t in visible],
    format_func=lambda tid: "Select a transaction" if tid is None else f"#{tid}",
)

if selected is not None:
    details = single_record(api_client.get_transaction_by_id(selected), "transaction")
    if details:
        col1, col2, col3 = st.columns(3)
        col1.metric("Type", details.get("transactionType") or "-")
        col2.metric("Quantity", details.get("totalProducts") or 0)
        col3.metric("Total", format_money(details.get("totalPrice") or 0))
        st.json(details, expanded=False)

# ===== RETURN =====
st.markdown("---")
st.subheader("Return to supplier")
products = records_or_error(api_client.get_all_products(), "products")
suppliers = records_or_error(api_client.get_all_suppliers(), "suppliers")
product_names = {p["id"]: p.get("name", f"#{p['id']}") for p in products}
supplier_names = {s["id"]: s.get("name", f"#{s['id']}") for s in suppliers}

if not product_names:
    st.info("No products to return")
else:
    with st.form(key="return_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        product_id = col1.selectbox("Product", list(product_names), format_func=lambda pid: product_names[pid])
        quantity = col2.number_input("Quantity", min_value=1, value=1, step=1)
        supplier_id = st.selectbox(
            "Supplier",
            [None] + list(supplier_names),
            format_func=lambda sid: "-" if sid is None else supplier_names[sid],
        )
        description = st.text_input("Reason")
        submit_return = st.form_submit_button("Create return")

    if submit_return:
        try:
            request = TransactionRequest(
                product_id=product_id,
                quantity=int(quantity),
                supplier_id=supplier_id,
                description=description or None,
            )
        except ValidationError as e:
            st.error(f"❌ {e.errors()[0]['msg']}")
        else:
            if render_result(api_client.create_return_transaction(request)):
                flash("Return created")
                st.rerun()
