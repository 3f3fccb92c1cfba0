"""Общие компоненты для Streamlit приложения."""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd
import streamlit as st

from api_client import APIClient
from cart import Cart, total_amount, total_items
from config import PAGE_CONFIGS, app_config
from constants import CURRENCY_SYMBOL, MSG_FANOUT_FAILED, SESSION_FLASH_MESSAGE, SESSION_USER_INFO
from core.auth import logout
from core.envelope import ApiResponse
from core.fanout import FanOutReport
from core.logging_config import setup_logging
from styles import SIDEBAR_NAV_HIDE_STYLE

NAV_LINKS = (
    ("pages/2_dashboard.py", "Dashboard", "📊"),
    ("pages/3_products.py", "Products", "📦"),
    ("pages/4_categories.py", "Categories", "🗂️"),
    ("pages/5_suppliers.py", "Suppliers", "🚚"),
    ("pages/6_transactions.py", "Transactions", "🔁"),
    ("pages/7_purchase.py", "Purchase", "🛒"),
    ("pages/8_sell.py", "Sell", "🏷️"),
    ("pages/9_profile.py", "Profile", "👤"),
)


def setup_page(key: str) -> None:
    """Логирование и конфигурация страницы (первым вызовом на странице)."""
    setup_logging(level=app_config.log_level, json_logs=app_config.log_json)
    page_config = PAGE_CONFIGS[key]
    st.set_page_config(
        page_title=page_config.title,
        page_icon=page_config.icon,
        layout=page_config.layout,
        initial_sidebar_state=page_config.initial_sidebar_state,
    )


def render_sidebar(api_client: APIClient) -> None:
    """
    Отображает навигацию, пользователя и кнопку выхода.

    Args:
        api_client: API клиент
    """
    st.markdown(SIDEBAR_NAV_HIDE_STYLE, unsafe_allow_html=True)
    with st.sidebar:
        st.markdown("### 📦 Inventory Console")
        for page, label, icon in NAV_LINKS:
            st.page_link(page, label=label, icon=icon)

        st.markdown("---")
        user_info = st.session_state.get(SESSION_USER_INFO) or {}
        st.caption(user_info.get("email") or user_info.get("name") or "")
        role = api_client.get_role()
        if role:
            st.caption(f"Role: {role}")

        if st.button("Logout", use_container_width=True, type="secondary"):
            logout()


def flash(message: str) -> None:
    """Сохранить сообщение об успехе до следующего рендера (после st.rerun)."""
    st.session_state[SESSION_FLASH_MESSAGE] = message


def render_flash() -> None:
    message = st.session_state.get(SESSION_FLASH_MESSAGE)
    if message:
        st.success(message)
        st.session_state[SESSION_FLASH_MESSAGE] = None


def render_result(result: ApiResponse, success_message: Optional[str] = None) -> bool:
    """
    Показать результат вызова API.

    Returns:
        True если вызов успешен
    """
    if result.success:
        if success_message:
            st.success(success_message)
        return True
    st.error(f"❌ {result.message}")
    return False


def records_or_error(result: ApiResponse, what: str) -> List[Dict[str, Any]]:
    """Список записей из ответа; при ошибке показывает сообщение и возвращает []."""
    if not result.success:
        st.error(f"❌ Failed to load {what}: {result.message}")
        return []
    return result.data if isinstance(result.data, list) else []


def render_records(records: Sequence[Mapping[str, Any]], columns: Sequence[str]) -> None:
    """Таблица записей с выбранными колонками."""
    if not records:
        st.info("Nothing to show yet")
        return
    frame = pd.DataFrame(list(records))
    visible = [column for column in columns if column in frame.columns]
    st.dataframe(frame[visible], use_container_width=True, hide_index=True)


def render_fanout_report(report: FanOutReport, success_message: str) -> bool:
    """
    Показать итог пачки транзакций.

    Returns:
        True если все транзакции созданы
    """
    if report.all_succeeded:
        st.success(success_message)
        return True

    st.error(MSG_FANOUT_FAILED.format(failed=report.failed_count, total=report.total))
    for message in report.failure_messages:
        st.caption(f"• {message}")
    return False


def format_money(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"


def render_cart(lines: Cart) -> None:
    """Таблица корзины с итогами."""
    if not lines:
        st.info("Cart is empty")
        return

    frame = pd.DataFrame(
        [
            {
                "Product": line.product.get("name"),
                "Quantity": line.quantity,
                "Unit price": format_money(line.unit_price),
                "Total": format_money(line.total_price),
            }
            for line in lines
        ]
    )
    st.dataframe(frame, use_container_width=True, hide_index=True)
    col1, col2 = st.columns(2)
    col1.metric("Items", total_items(lines))
    col2.metric("Total amount", format_money(total_amount(lines)))


def single_record(result: ApiResponse, key: str) -> Dict[str, Any]:
    """
    Одна запись из ответа get-by-id.

    Ключей category и supplier нет в правилах извлечения конверта,
    поэтому для них data - весь конверт, и запись лежит под key.
    """
    if not render_result(result) or not isinstance(result.data, dict):
        return {}
    nested = result.data.get(key)
    return nested if isinstance(nested, dict) else result.data
