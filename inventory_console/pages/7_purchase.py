"""Закупка: корзина товаров от поставщика."""

import streamlit as st

from cart import add_line, find_product, remove_line, submit_purchase, update_price, update_quantity
from components import (
    flash,
    records_or_error,
    render_cart,
    render_fanout_report,
    render_flash,
    render_sidebar,
    setup_page,
)
from config import app_config
from constants import SESSION_PURCHASE_CART
from core.auth import get_api_client, require_authentication
from core.exceptions import CartError

setup_page("purchase")

api_client = require_authentication()
render_sidebar(api_client)

st.title("Purchase")
render_flash()

products = records_or_error(api_client.get_all_products(), "products")
suppliers = records_or_error(api_client.get_all_suppliers(), "suppliers")
supplier_names = {s["id"]: s.get("name", f"#{s['id']}") for s in suppliers}

lines = st.session_state[SESSION_PURCHASE_CART]

# ===== ADD ITEM =====
if products:
    with st.form(key="purchase_add_form", clear_on_submit=True):
        product_id = st.selectbox(
            "Product",
            [p["id"] for p in products],
            format_func=lambda pid: find_product(products, pid).get("name", f"#{pid}"),
        )
        col1, col2 = st.columns(2)
        quantity = col1.number_input("Quantity", min_value=1, value=1, step=1)
        unit_price = col2.number_input("Unit price", min_value=0.0, value=0.0, step=1.0)
        add = st.form_submit_button("Add to cart")

    if add:
        product = find_product(products, product_id)
        try:
            st.session_state[SESSION_PURCHASE_CART] = add_line(lines, product, int(quantity), unit_price)
        except CartError as e:
            st.error(f"❌ {e.message}")
        else:
            st.rerun()
else:
    st.info("No products available")

# ===== CART =====
st.subheader("Cart")
render_cart(lines)

for line in lines:
    col_name, col_qty, col_price, col_remove = st.columns([3, 1, 1, 1])
    col_name.write(line.product.get("name"))
    new_quantity = col_qty.number_input(
        "Qty", value=line.quantity, step=1, key=f"purchase_qty_{line.product_id}", label_visibility="collapsed"
    )
    new_price = col_price.number_input(
        "Price", value=float(line.unit_price), step=1.0, key=f"purchase_price_{line.product_id}",
        label_visibility="collapsed",
    )
    if new_quantity != line.quantity or new_price != line.unit_price:
        updated = update_quantity(lines, line.product_id, int(new_quantity))
        updated = update_price(updated, line.product_id, new_price)
        st.session_state[SESSION_PURCHASE_CART] = updated
        st.rerun()
    if col_remove.button("Remove", key=f"purchase_remove_{line.product_id}"):
        st.session_state[SESSION_PURCHASE_CART] = remove_line(lines, line.product_id)
        st.rerun()

# ===== SUBMIT =====
st.markdown("---")
supplier_id = st.selectbox(
    "Supplier",
    [None] + list(supplier_names),
    format_func=lambda sid: "Select a supplier" if sid is None else supplier_names[sid],
)
description = st.text_input("Description (optional)")

if st.button("Create purchase", type="primary", disabled=not lines):
    try:
        with st.spinner("Creating transactions..."):
            report = submit_purchase(
                api_client,
                lines,
                supplier_id,
                description=description,
                max_workers=app_config.fanout_max_workers,
            )
    except CartError as e:
        st.error(f"❌ {e.message}")
    else:
        # Переход на вход, если 401 пришёл в рабочем потоке
        get_api_client()
        if render_fanout_report(report, "Purchase transactions created successfully!"):
            st.session_state[SESSION_PURCHASE_CART] = ()
            flash("Purchase transactions created successfully!")
            st.rerun()
