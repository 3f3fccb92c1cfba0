"""Поставщики."""

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
from schemas import SupplierPayload

setup_page("suppliers")

api_client = require_authentication()
render_sidebar(api_client)

st.title("Suppliers")
render_flash()

suppliers = records_or_error(api_client.get_all_suppliers(), "suppliers")
render_records(suppliers, ["id", "name", "email", "phone", "address"])

if not require_admin(api_client):
    st.stop()

st.markdown("---")
by_id = {supplier["id"]: supplier for supplier in suppliers}
selected = st.selectbox(
    "Edit supplier",
    [None] + list(by_id),
    format_func=lambda sid: "➕ New supplier" if sid is None else by_id[sid].get("name", f"#{sid}"),
)

current = {}
if selected is not None:
    # Свежие данные поставщика, а не из списка
    current = single_record(api_client.get_supplier_by_id(selected), "supplier")

with st.form(key="supplier_form", clear_on_submit=selected is None):
    name = st.text_input("Name", value=current.get("name", ""))
    col1, col2 = st.columns(2)
    email = col1.text_input("Email", value=current.get("email") or "")
    phone = col2.text_input("Phone", value=current.get("phone") or "")
    address = st.text_area("Address", value=current.get("address") or "")
    submitted = st.form_submit_button("Save supplier")

if submitted:
    if not name.strip():
        st.error(MSG_EMPTY_FIELDS)
    else:
        payload = SupplierPayload(name=name.strip(), email=email, phone=phone, address=address)
        if selected is None:
            result = api_client.create_supplier(payload)
        else:
            result = api_client.update_supplier(selected, payload)
        if render_result(result):
            flash("Supplier saved")
            st.rerun()

if selected is not None and st.button(f"🗑️ Delete supplier '{current.get('name', selected)}'"):
    if render_result(api_client.delete_supplier(selected)):
        flash("Supplier deleted")
        st.rerun()
