"""
web/routes.py -- Jinja2 template routes for the Doorman web UI.

These routes serve server-rendered HTML. They share app.state with the API
routes (same user store and session store) but return HTML or redirects.
The pages themselves call the JSON API (POST /login, POST /signup,
GET /api/user, POST /logout) from web/static/app.js.

Routes:
  GET /        -- login page; redirects to /main when already signed in
  GET /signup  -- signup page
  GET /main    -- welcome page (auth required)
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from auth.dependencies import current_user_id

logger = logging.getLogger("doorman.web")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
router = APIRouter()

STATIC_DIR = Path(__file__).parent / "static"


def _require_auth(request: Request) -> Optional[RedirectResponse]:
    """Return a RedirectResponse to / if not signed in, None if OK.

    Call at the top of protected route handlers:
        if redirect := _require_auth(request):
            return redirect
    """
    if current_user_id(request) is None:
        logger.debug("Anonymous request for %s; redirecting to /", request.url.path)
        return RedirectResponse("/", status_code=302)
    return None


@router.get("/", response_class=HTMLResponse)
def login_page(request: Request):
    if current_user_id(request) is not None:
        return RedirectResponse("/main", status_code=302)
    return templates.TemplateResponse(request, "login.html")


@router.get("/signup", response_class=HTMLResponse)
def signup_page(request: Request):
    return templates.TemplateResponse(request, "signup.html")


@router.get("/main", response_class=HTMLResponse)
def main_page(request: Request):
    if redirect := _require_auth(request):
        return redirect
    return templates.TemplateResponse(request, "main.html")
