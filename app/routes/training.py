"""
Pages behind login.
"""

from pathlib import Path

from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..db import User
from ..dependencies import require_auth

router = APIRouter(prefix="/training")
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("", response_class=HTMLResponse)
async def training(request: Request, user: User = Depends(require_auth)):
    """Landing page for logged-in users."""
    return templates.TemplateResponse(
        request,
        "training.html",
        {"user": user}
    )
