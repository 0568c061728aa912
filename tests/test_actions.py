"""
Tests for signup/login/logout actions.
"""

import threading

import pytest
import pytest_asyncio

from app import actions
from app.actions import (
    EMAIL_TAKEN,
    INVALID_CREDENTIALS,
    INVALID_EMAIL,
    PASSWORD_TOO_SHORT,
    Redirect,
)
from app.auth import CookieJar, bind_cookies, hash_password
from app.db import StoreUnavailable
from app.dependencies import init_dependencies, close_dependencies, get_db, get_session_manager


@pytest_asyncio.fixture
async def deps(tmp_path):
    await init_dependencies(str(tmp_path / "actions.db"))
    yield get_db()
    await close_dependencies()


@pytest_asyncio.fixture
async def existing_user(deps):
    return await deps.create_user("a@b.com", hash_password("longenough1"))


class TestSignup:

    @pytest.mark.asyncio
    async def test_invalid_email(self, deps, jar):
        with bind_cookies(jar):
            result = await actions.signup(None, {"email": "bad-email", "password": "longenough1"})

        assert result == {"errors": {"email": INVALID_EMAIL}}
        assert result == {"errors": {"email": "Please enter a valid email address"}}
        assert await deps.get_user_by_email("bad-email") is None
        assert jar.pending == []

    @pytest.mark.asyncio
    async def test_short_password(self, deps, jar):
        with bind_cookies(jar):
            result = await actions.signup(None, {"email": "a@b.com", "password": "short"})

        assert result == {"errors": {"password": "Password must be at least 8 characters long"}}
        assert await deps.get_user_by_email("a@b.com") is None

    @pytest.mark.asyncio
    async def test_password_length_ignores_surrounding_spaces(self, deps, jar):
        with bind_cookies(jar):
            result = await actions.signup(None, {"email": "a@b.com", "password": "  short   "})

        assert result == {"errors": {"password": PASSWORD_TOO_SHORT}}

    @pytest.mark.asyncio
    async def test_both_errors_reported(self, deps, jar):
        with bind_cookies(jar):
            result = await actions.signup(None, {})

        assert result == {"errors": {"email": INVALID_EMAIL, "password": PASSWORD_TOO_SHORT}}

    @pytest.mark.asyncio
    async def test_duplicate_email(self, existing_user, jar):
        with bind_cookies(jar):
            result = await actions.signup(None, {"email": "a@b.com", "password": "longenough1"})

        assert result == {"errors": {"email": "This email already exists."}}
        assert result["errors"]["email"] == EMAIL_TAKEN
        assert jar.pending == []

    @pytest.mark.asyncio
    async def test_success_issues_session_and_redirects(self, deps, jar):
        with bind_cookies(jar):
            result = await actions.signup(None, {"email": "new@b.com", "password": "longenough1"})

        assert result == Redirect("/training")

        user = await deps.get_user_by_email("new@b.com")
        assert user is not None
        assert user.password_hash != "longenough1"

        session_id = jar.get("auth_session")
        validated = await get_session_manager().validate_session(session_id)
        assert validated.user.id == user.id

    @pytest.mark.asyncio
    async def test_other_store_errors_propagate(self, deps, jar, monkeypatch):
        async def broken_create_user(email, password_hash):
            raise StoreUnavailable("disk I/O error")

        monkeypatch.setattr(deps, "create_user", broken_create_user)

        with bind_cookies(jar):
            with pytest.raises(StoreUnavailable):
                await actions.signup(None, {"email": "a@b.com", "password": "longenough1"})


    @pytest.mark.asyncio
    async def test_hashing_runs_off_the_event_loop_thread(self, deps, jar, monkeypatch):
        threads = []

        def recording_hash(password):
            threads.append(threading.get_ident())
            return hash_password(password)

        monkeypatch.setattr(actions, "hash_password", recording_hash)

        with bind_cookies(jar):
            await actions.signup(None, {"email": "new@b.com", "password": "longenough1"})

        assert len(threads) == 1
        assert threads[0] != threading.get_ident()


class TestLogin:

    @pytest.mark.asyncio
    async def test_unknown_email(self, deps, jar):
        with bind_cookies(jar):
            result = await actions.login(None, {"email": "nobody@b.com", "password": "longenough1"})

        assert result == {"errors": {"email": "Please check your email or password"}}
        assert jar.pending == []

    @pytest.mark.asyncio
    async def test_wrong_password_matches_unknown_email(self, existing_user, jar):
        with bind_cookies(jar):
            wrong_password = await actions.login(None, {"email": "a@b.com", "password": "wrongpass1"})
            unknown_email = await actions.login(None, {"email": "x@b.com", "password": "longenough1"})

        assert wrong_password == unknown_email
        assert wrong_password == {"errors": {"email": INVALID_CREDENTIALS}}
        assert jar.pending == []

    @pytest.mark.asyncio
    async def test_success(self, existing_user, jar):
        with bind_cookies(jar):
            result = await actions.login(None, {"email": "a@b.com", "password": "longenough1"})

        assert isinstance(result, Redirect)
        assert result.url == "/training"
        assert len(jar.pending) == 1

        validated = await get_session_manager().validate_session(jar.get("auth_session"))
        assert validated.user.id == existing_user


    @pytest.mark.asyncio
    async def test_password_check_runs_off_the_event_loop_thread(self, existing_user, jar, monkeypatch):
        threads = []

        def recording_verify(password, password_hash):
            threads.append(threading.get_ident())
            return False

        monkeypatch.setattr(actions, "verify_password", recording_verify)

        with bind_cookies(jar):
            result = await actions.login(None, {"email": "a@b.com", "password": "longenough1"})

        assert result == {"errors": {"email": INVALID_CREDENTIALS}}
        assert len(threads) == 1
        assert threads[0] != threading.get_ident()


class TestAuthDispatch:

    @pytest.mark.asyncio
    async def test_login_mode(self, existing_user, jar):
        with bind_cookies(jar):
            result = await actions.auth("login", None, {"email": "a@b.com", "password": "wrongpass1"})

        assert result == {"errors": {"email": INVALID_CREDENTIALS}}

    @pytest.mark.asyncio
    async def test_any_other_mode_is_signup(self, existing_user, jar):
        with bind_cookies(jar):
            result = await actions.auth("signup", None, {"email": "a@b.com", "password": "longenough1"})

        assert result == {"errors": {"email": EMAIL_TAKEN}}


class TestLogout:

    @pytest.mark.asyncio
    async def test_redirects_without_session(self, deps, jar):
        with bind_cookies(jar):
            result = await actions.logout()

        assert result == Redirect("/")

    @pytest.mark.asyncio
    async def test_ends_session(self, existing_user, jar):
        with bind_cookies(jar):
            await actions.login(None, {"email": "a@b.com", "password": "longenough1"})
        session_id = jar.get("auth_session")

        logout_jar = CookieJar({"auth_session": session_id})
        with bind_cookies(logout_jar):
            result = await actions.logout()

        assert result == Redirect("/")
        assert [c.is_blank for c in logout_jar.pending] == [True]
        assert (await get_session_manager().validate_session(session_id)).session is None
