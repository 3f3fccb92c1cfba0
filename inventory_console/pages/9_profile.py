"""Профиль пользователя и смена пароля."""

import streamlit as st

from components import flash, render_flash, render_result, render_sidebar, setup_page
from constants import MSG_PASSWORDS_MISMATCH, SESSION_USER_INFO
from core.auth import fetch_current_user, require_authentication, validate_password

setup_page("profile")

api_client = require_authentication()
render_sidebar(api_client)

st.title("Profile")
render_flash()

user = st.session_state.get(SESSION_USER_INFO)
if not user:
    st.warning("User profile is not available")
    st.stop()

col1, col2 = st.columns(2)
col1.metric("Role", user.get("role") or "-")
col2.metric("User ID", user.get("id") or "-")

# ===== PROFILE =====
st.subheader("Personal information")
with st.form(key="profile_form"):
    name = st.text_input("Name", value=user.get("name") or "")
    email = st.text_input("Email", value=user.get("email") or "")
    phone_number = st.text_input("Phone number", value=user.get("phoneNumber") or "")
    save_profile = st.form_submit_button("Save")

if save_profile:
    if not name.strip() or not email.strip():
        st.error("❌ Name and email are required")
    elif not user.get("id"):
        st.error("❌ User ID not found")
    else:
        fields = {"name": name.strip(), "email": email.strip()}
        if phone_number.strip():
            fields["phone_number"] = phone_number.strip()
        if render_result(api_client.update_user(user["id"], **fields)):
            st.session_state[SESSION_USER_INFO] = fetch_current_user(api_client) or {**user, **fields}
            flash("Profile updated successfully!")
            st.rerun()

# ===== PASSWORD =====
st.subheader("Change password")
with st.form(key="password_form", clear_on_submit=True):
    new_password = st.text_input("New password", type="password")
    confirm_password = st.text_input("Confirm new password", type="password")
    change_password = st.form_submit_button("Change password")

if change_password:
    password_error = validate_password(new_password)
    if not new_password or not confirm_password:
        st.error("❌ All password fields are required")
    elif new_password != confirm_password:
        st.error(MSG_PASSWORDS_MISMATCH)
    elif password_error:
        st.error(f"❌ {password_error}")
    elif render_result(api_client.update_user(user["id"], password=new_password)):
        flash("Password changed successfully!")
        st.rerun()
