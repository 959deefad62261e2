import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from supabase import AuthApiError, AuthRetryableError

from fiszki.api.deps import read_json_body
from fiszki.core.config import AUTH_COOKIE_NAME, AUTH_COOKIE_SECURE
from fiszki.core.database import get_supabase
from fiszki.core.errors import (
    ApiError,
    UnauthorizedError,
    UpstreamUnavailableError,
    ValidationError,
    is_upstream_unavailable,
)
from fiszki.models.common import ERROR_RESPONSES, AuthResponse, LogoutResponse
from fiszki.validators.auth import (
    ERROR_MESSAGES,
    map_auth_error,
    validate_email,
    validate_password,
    validate_password_match,
)

router = APIRouter(prefix="/api/auth", tags=["auth"], responses=ERROR_RESPONSES)

logger = logging.getLogger(__name__)

ALREADY_REGISTERED_CODES = ("user_already_exists", "email_exists")


def _dump(value: Any) -> Any:
    if value is None or isinstance(value, dict):
        return value
    return value.model_dump(mode="json")


def _field(value: Any, name: str) -> Any:
    if isinstance(value, dict):
        return value.get(name)
    return getattr(value, name, None)


def _set_session_cookie(response: Response, session: Any) -> None:
    access_token = _field(session, "access_token")
    if not access_token:
        return
    response.set_cookie(
        AUTH_COOKIE_NAME,
        access_token,
        max_age=_field(session, "expires_in"),
        path="/",
        secure=AUTH_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def _unavailable() -> UpstreamUnavailableError:
    return UpstreamUnavailableError(
        "Serwis uwierzytelniania jest niedostępny",
        ERROR_MESSAGES["network_error"],
    )


def _is_already_registered(error: AuthApiError) -> bool:
    message = (error.message or "").lower()
    return (
        getattr(error, "code", None) in ALREADY_REGISTERED_CODES
        or "already registered" in message
        or "already exists" in message
    )


@router.post("/login", response_model=AuthResponse, summary="Sign in with email and password")
async def login(request: Request, response: Response, supabase=Depends(get_supabase)):
    try:
        body = await read_json_body(request)
        if not isinstance(body, dict):
            body = {}
        email = body.get("email")
        password = body.get("password")

        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise ValidationError("Email i hasło są wymagane")

        email_error = validate_email(email)
        if email_error:
            raise ValidationError(email_error)

        try:
            result = await supabase.auth.sign_in_with_password({
                "email": email.strip(),
                "password": password,
            })
        except AuthRetryableError as e:
            logger.error(f"Supabase auth unreachable: {e.message}")
            raise _unavailable()
        except AuthApiError as e:
            logger.warning(f"Supabase auth error: {e.message}")
            if is_upstream_unavailable(e):
                raise _unavailable()
            raise UnauthorizedError(map_auth_error(e), None)

        _set_session_cookie(response, result.session)
        return {"user": _dump(result.user), "session": _dump(result.session)}
    except ApiError:
        raise
    except Exception as e:
        if is_upstream_unavailable(e):
            logger.error(f"Supabase auth unreachable: {e}")
            raise _unavailable()
        logger.exception("Unexpected login error")
        raise ApiError("Wystąpił błąd podczas logowania", status_code=500)


@router.post("/register", response_model=AuthResponse, summary="Create an account and sign in")
async def register(request: Request, response: Response, supabase=Depends(get_supabase)):
    try:
        body = await read_json_body(request)
        if not isinstance(body, dict):
            body = {}
        email = body.get("email")
        password = body.get("password")
        confirm_password = body.get("confirmPassword")

        if not all(isinstance(value, str) and value for value in (email, password, confirm_password)):
            raise ValidationError("Email, hasło i potwierdzenie hasła są wymagane")

        for error in (
            validate_email(email),
            validate_password(password),
            validate_password_match(password, confirm_password),
        ):
            if error:
                raise ValidationError(error)

        try:
            result = await supabase.auth.sign_up({"email": email.strip(), "password": password})
        except AuthRetryableError as e:
            logger.error(f"Supabase auth unreachable: {e.message}")
            raise _unavailable()
        except AuthApiError as e:
            logger.warning(f"Supabase registration error: {e.message}")
            if is_upstream_unavailable(e):
                raise _unavailable()
            if _is_already_registered(e):
                return {"user": None, "session": None}
            if getattr(e, "code", None) == "weak_password" or "password" in (e.message or "").lower():
                raise ValidationError(ERROR_MESSAGES["weak_password"])
            raise ValidationError(map_auth_error(e))

        if not result.user:
            raise ApiError("Nie udało się utworzyć konta. Spróbuj ponownie", status_code=500)

        # An already registered address comes back as a user without identities
        if _field(result.user, "identities") == []:
            return {"user": None, "session": None}

        _set_session_cookie(response, result.session)
        return {"user": _dump(result.user), "session": _dump(result.session)}
    except ApiError:
        raise
    except Exception as e:
        if is_upstream_unavailable(e):
            logger.error(f"Supabase auth unreachable: {e}")
            raise _unavailable()
        logger.exception("Unexpected registration error")
        raise ApiError("Wystąpił błąd podczas rejestracji", status_code=500)


@router.post("/logout", response_model=LogoutResponse, summary="Sign out and clear the session cookie")
async def logout(response: Response, supabase=Depends(get_supabase)):
    try:
        await supabase.auth.sign_out()
    except Exception as e:
        logger.error(f"Supabase logout error: {e}")

    response.delete_cookie(
        AUTH_COOKIE_NAME,
        path="/",
        secure=AUTH_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return LogoutResponse(success=True, message="Wylogowano pomyślnie")
