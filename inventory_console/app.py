"""Главная страница - навигация и маршрутизация."""

import streamlit as st

from components import setup_page
from constants import PAGE_DASHBOARD, PAGE_LOGIN
from core.auth import ensure_storage_loaded, get_api_client
from core.session import init_session_state

setup_page("main")

# Инициализация session state
init_session_state()

# Сначала загружаем сессию из localStorage
api_client = get_api_client()
ensure_storage_loaded()

if api_client.is_authenticated():
    st.switch_page(PAGE_DASHBOARD)
else:
    st.switch_page(PAGE_LOGIN)
