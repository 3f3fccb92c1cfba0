"""Товары: список, создание, редактирование и удаление."""

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
from constants import MSG_EMPTY_FIELDS, SESSION_EDIT_PRODUCT_ID
from core.auth import require_admin, require_authentication
from schemas import ImageUpload, ProductForm
from styles import get_stock_badge_html

setup_page("products")

api_client = require_authentication()
render_sidebar(api_client)

st.title("Products")
render_flash()

products = records_or_error(api_client.get_all_products(), "products")
categories = records_or_error(api_client.get_all_categories(), "categories")
category_names = {category["id"]: category.get("name", "") for category in categories}

search = st.text_input("Search", placeholder="Name or SKU")
if search:
    needle = search.lower()
    products = [
        product for product in products
        if needle in (product.get("name") or "").lower() or needle in (product.get("sku") or "").lower()
    ]

render_records(
    [
        {
            **product,
            "category": category_names.get(product.get("categoryId"), ""),
            "price": format_money(product.get("price") or 0),
        }
        for product in products
    ],
    ["id", "name", "sku", "category", "price", "stockQuantity"],
)

low = [p for p in products if (p.get("stockQuantity") or 0) < app_config.low_stock_threshold]
if low:
    st.markdown(
        "Low stock: " + ", ".join(
            f"{p.get('name')} {get_stock_badge_html(p.get('stockQuantity') or 0, app_config.low_stock_threshold)}"
            for p in low
        ),
        unsafe_allow_html=True,
    )

# ===== CREATE / EDIT =====
st.markdown("---")
product_ids = [product["id"] for product in products]
edit_choice = st.selectbox(
    "Edit product",
    [None] + product_ids,
    format_func=lambda pid: "➕ New product" if pid is None else f"#{pid}",
    key=SESSION_EDIT_PRODUCT_ID,
)

current = {}
if edit_choice is not None:
    current = single_record(api_client.get_product_by_id(edit_choice), "product")

if not categories:
    st.info("Create a category first")
else:
    category_ids = list(category_names)
    default_category = current.get("categoryId")
    with st.form(key="product_form", clear_on_submit=edit_choice is None):
        name = st.text_input("Name", value=current.get("name", ""))
        sku = st.text_input("SKU", value=current.get("sku") or "")
        description = st.text_area("Description", value=current.get("description") or "")
        col1, col2, col3 = st.columns(3)
        price = col1.number_input("Price", min_value=0.0, value=float(current.get("price") or 0), step=1.0)
        stock = col2.number_input("Stock quantity", min_value=0, value=int(current.get("stockQuantity") or 0))
        category_id = col3.selectbox(
            "Category",
            category_ids,
            index=category_ids.index(default_category) if default_category in category_ids else 0,
            format_func=lambda cid: category_names[cid],
        )
        image_file = st.file_uploader("Image", type=["png", "jpg", "jpeg", "webp"])
        submitted = st.form_submit_button("Save product")

    if submitted:
        if not name.strip() or price <= 0:
            st.error(MSG_EMPTY_FIELDS)
        else:
            image = None
            if image_file is not None:
                image = ImageUpload(
                    filename=image_file.name,
                    content=image_file.getvalue(),
                    content_type=image_file.type or "application/octet-stream",
                )
            try:
                form = ProductForm(
                    name=name.strip(),
                    sku=sku,
                    description=description,
                    price=price,
                    stock_quantity=int(stock),
                    category_id=category_id,
                    product_id=edit_choice,
                )
            except ValidationError as e:
                st.error(f"❌ {e.errors()[0]['msg']}")
            else:
                if edit_choice is None:
                    result = api_client.create_product(form, image)
                else:
                    result = api_client.update_product(form, image)
                if render_result(result):
                    flash("Product updated successfully!" if edit_choice else "Product created successfully!")
                    st.rerun()

# ===== DELETE =====
if edit_choice is not None and api_client.is_admin():
    if st.button(f"🗑️ Delete product #{edit_choice}", type="secondary"):
        if render_result(api_client.delete_product(edit_choice)):
            flash("Product deleted")
            del st.session_state[SESSION_EDIT_PRODUCT_ID]
            st.rerun()
elif edit_choice is not None:
    require_admin(api_client)
