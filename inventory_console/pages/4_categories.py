"""Категории товаров."""

import streamlit as st

from components import (
    flash,
    records_or_error,
    render_flash,
    render_records,
    render_result,
    render_sidebar,
    setup_page,
    single_record,
)
from constants import MSG_EMPTY_FIELDS
from core.auth import require_admin, require_authentication
from schemas import CategoryPayload

setup_page("categories")

api_client = require_authentication()
render_sidebar(api_client)

st.title("Categories")
render_flash()

categories = records_or_error(api_client.get_all_categories(), "categories")
render_records(categories, ["id", "name", "description"])

if not require_admin(api_client):
    st.stop()

st.markdown("---")
by_id = {category["id"]: category for category in categories}
selected = st.selectbox(
    "Edit category",
    [None] + list(by_id),
    format_func=lambda cid: "➕ New category" if cid is None else by_id[cid].get("name", f"#{cid}"),
)
current = {}
if selected is not None:
    current = single_record(api_client.get_category_by_id(selected), "category")

with st.form(key="category_form", clear_on_submit=selected is None):
    name = st.text_input("Name", value=current.get("name", ""))
    description = st.text_area("Description", value=current.get("description") or "")
    submitted = st.form_submit_button("Save category")

if submitted:
    if not name.strip():
        st.error(MSG_EMPTY_FIELDS)
    else:
        payload = CategoryPayload(name=name.strip(), description=description or None)
        if selected is None:
            result = api_client.create_category(payload)
        else:
            result = api_client.update_category(selected, payload)
        if render_result(result):
            flash("Category saved")
            st.rerun()

if selected is not None and st.button(f"🗑️ Delete category '{current.get('name')}'"):
    if render_result(api_client.delete_category(selected)):
        flash("Category deleted")
        st.rerun()
