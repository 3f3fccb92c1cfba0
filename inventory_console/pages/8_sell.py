"""Продажа: корзина товаров для покупателя."""

import streamlit as st

from cart import (
    add_line,
    available_stock,
    find_product,
    remove_line,
    submit_sale,
    update_price,
    update_quantity,
)
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
from constants import SESSION_SALE_CART
from core.auth import get_api_client, require_authentication
from core.exceptions import CartError
from styles import get_stock_badge_html

setup_page("sell")

api_client = require_authentication()
render_sidebar(api_client)

st.title("Sell")
render_flash()

# Продавать можно только то, что есть на складе
products = [
    p for p in records_or_error(api_client.get_all_products(), "products")
    if (p.get("stockQuantity") or 0) > 0
]

lines = st.session_state[SESSION_SALE_CART]

# ===== ADD ITEM =====
if products:
    product_id = st.selectbox(
        "Product",
        [p["id"] for p in products],
        format_func=lambda pid: find_product(products, pid).get("name", f"#{pid}"),
    )
    product = find_product(products, product_id)
    left = available_stock(lines, product)
    st.markdown(
        f"In stock: {get_stock_badge_html(product.get('stockQuantity') or 0, app_config.low_stock_threshold)}"
        f" &nbsp; Available for this sale: **{left}**",
        unsafe_allow_html=True,
    )

    col1, col2 = st.columns(2)
    quantity = col1.number_input("Quantity", min_value=1, value=1, step=1, key="sell_quantity")
    # Цена по умолчанию - цена товара
    unit_price = col2.number_input(
        "Unit price",
        min_value=0.0,
        value=float(product.get("price") or 0),
        step=1.0,
        key=f"sell_price_{product_id}",
    )

    if st.button("Add to cart", disabled=left <= 0):
        try:
            st.session_state[SESSION_SALE_CART] = add_line(
                lines, product, int(quantity), unit_price, check_stock=True
            )
        except CartError as e:
            st.error(f"❌ {e.message}")
        else:
            st.rerun()
else:
    st.info("No products in stock")

# ===== CART =====
st.subheader("Cart")
render_cart(lines)

for line in lines:
    col_name, col_qty, col_price, col_remove = st.columns([3, 1, 1, 1])
    col_name.write(line.product.get("name"))
    new_quantity = col_qty.number_input(
        "Qty",
        value=line.quantity,
        step=1,
        key=f"sale_qty_{line.product_id}",
        label_visibility="collapsed",
    )
    new_price = col_price.number_input(
        "Price",
        value=float(line.unit_price),
        step=1.0,
        key=f"sale_price_{line.product_id}",
        label_visibility="collapsed",
    )
    if new_quantity != line.quantity or new_price != line.unit_price:
        try:
            updated = update_quantity(lines, line.product_id, int(new_quantity), check_stock=True)
        except CartError as e:
            st.error(f"❌ {e.message}")
        else:
            st.session_state[SESSION_SALE_CART] = update_price(updated, line.product_id, new_price)
            st.rerun()
    if col_remove.button("Remove", key=f"sale_remove_{line.product_id}"):
        st.session_state[SESSION_SALE_CART] = remove_line(lines, line.product_id)
        st.rerun()

# ===== SUBMIT =====
st.markdown("---")
customer_name = st.text_input("Customer name")
description = st.text_input("Description (optional)")

if st.button("Complete sale", type="primary", disabled=not lines):
    try:
        with st.spinner("Creating transactions..."):
            report = submit_sale(
                api_client,
                lines,
                customer_name,
                description=description,
                max_workers=app_config.fanout_max_workers,
            )
    except CartError as e:
        st.error(f"❌ {e.message}")
    else:
        # Переход на вход, если 401 пришёл в рабочем потоке
        get_api_client()
        if render_fanout_report(report, "Sale completed successfully!"):
            st.session_state[SESSION_SALE_CART] = ()
            flash("Sale completed successfully!")
            st.rerun()
