"""
api/routes/auth.py -- Account and session JSON endpoints.

Routes:
  POST /login     -- email/password login; starts a session
  POST /signup    -- create an account; starts a session
  POST /logout    -- destroy the session; always succeeds
  GET  /api/user  -- profile of the signed-in user (no password hash)

Security:
  POST /login and POST /signup share one rate-limit counter per client
  address (Settings.auth_rate_limit, fixed window). The limit is checked before the
  handler body runs, so a throttled request never reaches the store.
  authenticate_user() provides timing equalization -- use it, never inline.
  Unknown email and wrong password return the same 401 body.
  Cache-Control: no-store on login and signup responses.
"""

import json
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse

from api.limiter import AUTH_LIMIT, limiter
from api.models import LoginRequest, SignupRequest, SuccessResponse, UserProfile
from auth.credentials import authenticate_user, hash_password
from auth.dependencies import begin_session, current_user_id, end_session
from auth.errors import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from auth.models import User
from auth.store import UserStore

logger = logging.getLogger("doorman.api")

# Auth policy:
# - POST /login:     public, rate-limited
# - POST /signup:    public, rate-limited
# - POST /logout:    public -- destroying a session needs no prior auth
# - GET  /api/user:  requires a session (redirect to / otherwise)
router = APIRouter()

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_payload(request: Request) -> dict:
    """Return the request body as a dict, from JSON or from form fields.

    An empty body is an empty dict; the request models then report the
    missing fields. Anything else that does not decode is a 400.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {k: v for k, v in form.items() if isinstance(v, str)}
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise ValidationError("Request body must be JSON or form data") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@router.post("/login", response_model=SuccessResponse)
@limiter.shared_limit(AUTH_LIMIT, scope="auth")
def login(request: Request, response: Response, payload: dict = Depends(read_payload)) -> SuccessResponse:
    """Authenticate with email and password; start a session."""
    body = LoginRequest.parse(payload)
    user_store: UserStore = request.app.state.user_store
    response.headers["Cache-Control"] = "no-store"

    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        logger.info("Login failed from %s", _client(request))
        raise AuthenticationError()

    begin_session(request, user.id)
    logger.info("Login succeeded for user %d", user.id)
    return SuccessResponse()


@router.post("/signup", response_model=SuccessResponse)
@limiter.shared_limit(AUTH_LIMIT, scope="auth")
def signup(request: Request, response: Response, payload: dict = Depends(read_payload)) -> SuccessResponse:
    """Create an account and start a session for it.

    The pre-check avoids paying for bcrypt on an obviously taken email. It is
    not the guard: two concurrent signups can both pass it, and the UNIQUE
    constraint inside create_user() decides which one wins.
    """
    body = SignupRequest.parse(payload)
    user_store: UserStore = request.app.state.user_store
    response.headers["Cache-Control"] = "no-store"

    if user_store.get_by_email(body.email) is not None:
        raise ConflictError()

    user_id = user_store.create_user(
        User(
            email=body.email,
            name=body.name,
            password_hash=hash_password(body.password),
            nickname=body.nickname,
            age=body.age,
            phone=body.phone,
            sex=body.sex,
        )
    )
    begin_session(request, user_id)
    logger.info("Created user %d", user_id)
    return SuccessResponse()


@router.post("/logout", response_model=SuccessResponse)
def logout(request: Request) -> SuccessResponse:
    """Destroy the current session. Succeeds with or without one."""
    end_session(request)
    return SuccessResponse()


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/api/user", response_model=UserProfile)
def current_user(request: Request):
    """Return the signed-in user's profile.

    A session whose user record has disappeared is destroyed and answered
    with 401, so the browser does not keep presenting a dead cookie.
    """
    user_id = current_user_id(request)
    if user_id is None:
        return RedirectResponse("/", status_code=302)

    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(user_id)
    if user is None:
        logger.warning("Session references missing user %d; destroying it", user_id)
        end_session(request)
        raise AuthorizationError()
    return UserProfile.from_user(user)


def _client(request: Request) -> str:
    return request.client.host if request.client else "unknown"
