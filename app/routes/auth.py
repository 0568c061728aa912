"""
Authentication routes - signup/login/logout.
"""

from pathlib import Path

from fastapi import APIRouter, Request, Query
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..config import settings
from ..dependencies import check_auth
from .. import actions
from ..actions import ActionResult, Redirect

router = APIRouter()
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _render_result(request: Request, mode: str, result: ActionResult):
    """Turn an action result into a redirect or the form with errors."""
    if isinstance(result, Redirect):
        return RedirectResponse(url=result.url, status_code=303)

    return templates.TemplateResponse(
        request,
        "auth.html",
        {"mode": mode, "errors": result.get("errors", {})},
        status_code=400
    )


@router.get("/", response_class=HTMLResponse)
async def auth_page(request: Request, mode: str = Query("login")):
    """Show the login/signup form."""
    if await check_auth():
        return RedirectResponse(url=settings.authenticated_redirect, status_code=303)

    return templates.TemplateResponse(
        request,
        "auth.html",
        {"mode": mode, "errors": {}}
    )


@router.post("/auth")
async def auth(request: Request, mode: str = Query("login")):
    """Handle the combined form, dispatching on ``mode``."""
    form_data = await request.form()
    result = await actions.auth(mode, None, form_data)
    return _render_result(request, mode, result)


@router.post("/signup")
async def signup(request: Request):
    """Handle signup form submission."""
    form_data = await request.form()
    result = await actions.signup(None, form_data)
    return _render_result(request, "signup", result)


@router.post("/login")
async def login(request: Request):
    """Handle login form submission."""
    form_data = await request.form()
    result = await actions.login(None, form_data)
    return _render_result(request, "login", result)


@router.post("/logout")
async def logout(request: Request):
    """Handle logout."""
    result = await actions.logout()
    return RedirectResponse(url=result.url, status_code=303)

