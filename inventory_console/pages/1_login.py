"""Страница входа и регистрации."""

import logging

import streamlit as st
from pydantic import ValidationError

from components import setup_page
from constants import (
    MSG_EMPTY_FIELDS,
    MSG_LOGIN_ERROR,
    MSG_PASSWORDS_MISMATCH,
    MSG_PROFILE_UNAVAILABLE,
    MSG_REGISTER_ERROR,
    MSG_REGISTER_SUCCESS,
    PAGE_DASHBOARD,
    ROLE_ADMIN,
    ROLE_MANAGER,
    SESSION_USER_CHECKED,
    SESSION_USER_INFO,
)
from core.auth import ensure_storage_loaded, get_api_client, sign_in, validate_password
from core.exceptions import UserProfileUnavailableError
from core.session import init_session_state
from schemas import RegisterRequest
from styles import SIDEBAR_HIDE_STYLE

logger = logging.getLogger(__name__)

setup_page("login")

init_session_state()
api_client = get_api_client()
ensure_storage_loaded()

# Скрываем sidebar и навигацию для неавторизованных пользователей
st.markdown(SIDEBAR_HIDE_STYLE, unsafe_allow_html=True)

if api_client.is_authenticated():
    st.switch_page(PAGE_DASHBOARD)

st.markdown("## 📦 Inventory Console")

tab_login, tab_register = st.tabs(["Login", "Register"])

with tab_login:
    with st.form(key="login_form"):
        login_email = st.text_input("Email", placeholder="you@company.com")
        login_password = st.text_input("Password", type="password")
        submit_login = st.form_submit_button("Login", use_container_width=True)

    if submit_login:
        if not login_email or not login_password:
            st.error(MSG_EMPTY_FIELDS)
        else:
            with st.spinner("Signing in..."):
                try:
                    result, user = sign_in(api_client, login_email.strip(), login_password)
                except UserProfileUnavailableError as e:
                    logger.warning(f"Login rolled back: {e.to_dict()}")
                    st.error(MSG_PROFILE_UNAVAILABLE)
                else:
                    if result.success:
                        st.session_state[SESSION_USER_INFO] = user
                        st.session_state[SESSION_USER_CHECKED] = True
                        logger.info(f"User logged in with role {user.get('role')}")
                        st.switch_page(PAGE_DASHBOARD)
                    else:
                        st.error(f"{MSG_LOGIN_ERROR}: {result.message}")

with tab_register:
    with st.form(key="register_form"):
        name = st.text_input("Full name")
        email = st.text_input("Email")
        phone_number = st.text_input("Phone number")
        role = st.selectbox("Role", [ROLE_MANAGER, ROLE_ADMIN])
        password = st.text_input("Password", type="password")
        password_confirm = st.text_input("Confirm password", type="password")
        submit_register = st.form_submit_button("Register", use_container_width=True)

    if submit_register:
        password_error = validate_password(password)
        if not name.strip() or not email.strip() or not phone_number.strip():
            st.error(MSG_EMPTY_FIELDS)
        elif password != password_confirm:
            st.error(MSG_PASSWORDS_MISMATCH)
        elif password_error:
            st.error(f"❌ {password_error}")
        else:
            try:
                request = RegisterRequest(
                    name=name,
                    email=email,
                    password=password,
                    phone_number=phone_number,
                    role=role,
                )
            except ValidationError as e:
                st.error(f"❌ {e.errors()[0]['msg']}")
            else:
                with st.spinner("Creating account..."):
                    result = api_client.register(request)
                if result.success:
                    st.success(MSG_REGISTER_SUCCESS)
                else:
                    st.error(f"{MSG_REGISTER_ERROR}: {result.message}")
