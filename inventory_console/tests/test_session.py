"""Тесты сессии: шифрование значений, состояния, очистка, навигация и localStorage."""

import json
from unittest.mock import Mock

import pytest

from constants import (
    LOCALSTORAGE_AUTH_TOKEN_KEY,
    LOCALSTORAGE_USER_ROLE_KEY,
    MAX_STORAGE_LOAD_ATTEMPTS,
    SESSION_PENDING_REDIRECT,
    SESSION_STORAGE_LOADED,
)
from core.auth import ensure_storage_loaded
from core.crypto import TokenCipher
from core.session import LoginRedirect, SessionState, SessionStore
from core.storage import (
    STORAGE_LOAD_COMPONENT_KEY,
    STORAGE_WRITE_COMPONENT_KEY,
    BrowserStorage,
    MemoryStorage,
)


# ==================== TokenCipher ====================

def test_cipher_roundtrip_and_obfuscation(cipher):
    encrypted = cipher.encrypt("jwt-token")

    assert encrypted != "jwt-token"
    assert "jwt-token" not in encrypted
    assert cipher.decrypt(encrypted) == "jwt-token"


def test_cipher_rejects_foreign_key(cipher):
    encrypted = TokenCipher("anotherKey").encrypt("jwt-token")
    assert cipher.decrypt(encrypted) is None


def test_cipher_rejects_garbage(cipher):
    assert cipher.decrypt("not-encrypted") is None


def test_cipher_requires_key():
    with pytest.raises(ValueError):
        TokenCipher("")


# ==================== SessionStore ====================

def test_new_session_is_anonymous(session):
    assert session.state is SessionState.ANONYMOUS
    assert session.get_token() is None
    assert session.get_role() is None
    assert session.is_admin() is False


def test_token_is_stored_encrypted(session, storage):
    session.set_token("jwt-token")

    assert storage.get_item(LOCALSTORAGE_AUTH_TOKEN_KEY) != "jwt-token"
    assert session.get_token() == "jwt-token"
    assert session.state is SessionState.AUTHENTICATED


def test_role_is_stored_encrypted(session, storage):
    session.set_role("ADMIN")

    assert storage.get_item(LOCALSTORAGE_USER_ROLE_KEY) != "ADMIN"
    assert session.is_admin() is True


def test_manager_is_not_admin(session):
    session.set_token("jwt-token")
    session.set_role("MANAGER")
    assert session.is_admin() is False


def test_corrupted_token_reads_as_absent(session, storage):
    storage.set_item(LOCALSTORAGE_AUTH_TOKEN_KEY, "garbage")

    assert session.get_token() is None
    assert session.state is SessionState.ANONYMOUS


def test_clear_removes_both_keys_and_navigates(session, storage, navigator):
    session.set_token("jwt-token")
    session.set_role("ADMIN")

    session.clear()

    assert LOCALSTORAGE_AUTH_TOKEN_KEY not in storage
    assert LOCALSTORAGE_USER_ROLE_KEY not in storage
    assert session.state is SessionState.ANONYMOUS
    navigator.assert_called_once_with()


def test_discard_does_not_navigate(session, storage, navigator):
    session.set_token("jwt-token")

    session.discard()

    assert LOCALSTORAGE_AUTH_TOKEN_KEY not in storage
    navigator.assert_not_called()


def test_sessions_are_independent(cipher):
    first = SessionStore(MemoryStorage(), cipher, Mock())
    second = SessionStore(MemoryStorage(), cipher, Mock())

    first.set_token("first-token")

    assert first.is_authenticated()
    assert not second.is_authenticated()


# ==================== LoginRedirect ====================

def test_redirect_outside_script_thread_is_deferred(monkeypatch):
    switch_page = Mock()
    monkeypatch.setattr("core.session.st.switch_page", switch_page)
    flags = {}
    redirect = LoginRedirect(flags, page="pages/1_login.py")

    redirect()

    assert flags[SESSION_PENDING_REDIRECT] is True
    switch_page.assert_not_called()

    redirect.consume()

    switch_page.assert_called_once_with("pages/1_login.py")
    assert SESSION_PENDING_REDIRECT not in flags


def test_consume_without_pending_redirect_does_nothing(monkeypatch):
    switch_page = Mock()
    monkeypatch.setattr("core.session.st.switch_page", switch_page)

    LoginRedirect({}).consume()

    switch_page.assert_not_called()


# ==================== BrowserStorage ====================

class FakeJsEval:
    """Компонент streamlit_js_eval: ответы по key, None - браузер ещё не ответил."""

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.calls = []

    def __call__(self, js_expressions, key=None):
        self.calls.append((key, js_expressions))
        return self.answers.get(key)


@pytest.fixture
def js_eval(monkeypatch):
    fake = FakeJsEval()
    monkeypatch.setattr("core.storage.streamlit_js_eval", fake)
    return fake


def test_load_fills_mirror_from_component_value(js_eval):
    js_eval.answers[STORAGE_LOAD_COMPONENT_KEY] = json.dumps({"authToken": "encrypted-token", "userRole": None})
    browser = BrowserStorage({})

    assert browser.load() is True

    assert browser.get_item("authToken") == "encrypted-token"
    assert browser.get_item("userRole") is None
    assert "localStorage.getItem" in js_eval.calls[0][1]


def test_load_restores_session_for_session_store(js_eval, cipher):
    js_eval.answers[STORAGE_LOAD_COMPONENT_KEY] = json.dumps(
        {"authToken": cipher.encrypt("jwt-token"), "userRole": cipher.encrypt("ADMIN")}
    )
    browser = BrowserStorage({})
    browser.load()

    session = SessionStore(browser, cipher, Mock())

    assert session.get_token() == "jwt-token"
    assert session.is_admin() is True


def test_load_waits_for_browser_answer(js_eval):
    browser = BrowserStorage({})

    assert browser.load() is False
    assert browser.get_item("authToken") is None


def test_load_keeps_values_written_in_this_session(js_eval):
    js_eval.answers[STORAGE_LOAD_COMPONENT_KEY] = json.dumps({"authToken": "stored"})
    browser = BrowserStorage({})
    browser.set_item("authToken", "fresh")

    browser.load()

    assert browser.get_item("authToken") == "fresh"


def test_load_ignores_malformed_payload(js_eval):
    js_eval.answers[STORAGE_LOAD_COMPONENT_KEY] = "not json"
    browser = BrowserStorage({})

    assert browser.load() is True
    assert browser.get_item("authToken") is None


def test_writes_are_deferred_until_flush(js_eval):
    state = {}
    browser = BrowserStorage(state)

    browser.set_item("authToken", "value")
    browser.remove_item("userRole")

    assert browser.get_item("authToken") == "value"
    assert len(state["pending"]) == 2
    assert js_eval.calls == []

    browser.flush()

    key, script = js_eval.calls[0]
    assert key == f"{STORAGE_WRITE_COMPONENT_KEY}_1"
    assert 'localStorage.setItem("authToken", "value");' in script
    assert 'localStorage.removeItem("userRole");' in script
    assert state["pending"] == []


def test_batch_is_resent_until_browser_acknowledges(js_eval):
    state = {}
    browser = BrowserStorage(state)
    browser.set_item("authToken", "value")

    assert browser.flush() is False
    browser.set_item("userRole", "role")
    assert browser.flush() is False

    first_key, first_script = js_eval.calls[0]
    second_key, second_script = js_eval.calls[1]
    assert first_key == second_key
    assert first_script == second_script
    assert "userRole" not in second_script

    js_eval.answers[first_key] = "ok"
    assert browser.flush() is False
    assert state["in_flight"] == []
    assert browser.has_pending_writes

    assert browser.flush() is False
    assert js_eval.calls[-1][0] == f"{STORAGE_WRITE_COMPONENT_KEY}_2"
    assert 'localStorage.setItem("userRole", "role");' in js_eval.calls[-1][1]


def test_flush_without_pending_writes_is_noop(js_eval):
    assert BrowserStorage({}).flush() is True
    assert js_eval.calls == []


# ==================== ensure_storage_loaded ====================

def test_ensure_storage_loaded_marks_loaded_and_flushes(js_eval, monkeypatch):
    state = {}
    monkeypatch.setattr("core.auth.st.session_state", state)
    js_eval.answers[STORAGE_LOAD_COMPONENT_KEY] = json.dumps({"authToken": "stored"})

    storage = ensure_storage_loaded()

    assert state[SESSION_STORAGE_LOADED] is True
    assert storage.get_item("authToken") == "stored"

    storage.remove_item("authToken")
    ensure_storage_loaded()

    assert [key for key, _ in js_eval.calls] == [STORAGE_LOAD_COMPONENT_KEY, f"{STORAGE_WRITE_COMPONENT_KEY}_1"]


def test_ensure_storage_loaded_retries_then_gives_up(js_eval, monkeypatch):
    state = {}
    monkeypatch.setattr("core.auth.st.session_state", state)
    monkeypatch.setattr("core.auth.time.sleep", Mock())
    rerun = Mock(side_effect=RuntimeError("rerun"))
    monkeypatch.setattr("core.auth.st.rerun", rerun)

    for _ in range(MAX_STORAGE_LOAD_ATTEMPTS):
        with pytest.raises(RuntimeError):
            ensure_storage_loaded()

    ensure_storage_loaded()

    assert rerun.call_count == MAX_STORAGE_LOAD_ATTEMPTS
    assert state[SESSION_STORAGE_LOADED] is True
