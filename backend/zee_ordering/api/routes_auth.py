from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from zee_ordering.adapters.smtp_mailer import MailerError, SmtpMailer
from zee_ordering.config import Settings, get_settings
from zee_ordering.schemas.auth_schema import ForgotIn, LoginIn
from zee_ordering.services.auth_service import (
    AuthConfigurationError,
    AuthService,
    InvalidCredentials,
    MissingCredentials,
    RecoveryNotAllowed,
)
from zee_ordering.utils.logger import get_logger

router = APIRouter(prefix="/api/auth", tags=["auth"])
log = get_logger("api.auth")


def get_mailer(settings: Settings = Depends(get_settings)):
    return SmtpMailer(settings)


@router.post("/login", summary="Exchange the admin pair for a session cookie")
def login(
    response: Response,
    payload: Optional[LoginIn] = None,
    settings: Settings = Depends(get_settings),
):
    payload = payload or LoginIn()
    svc = AuthService(settings)
    try:
        token = svc.login(payload.email, payload.password)
    except AuthConfigurationError as e:
        log.error("Login attempted but %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    except MissingCredentials as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.AUTH_COOKIE_SECURE,
    )
    return {"ok": True}


@router.post("/logout", summary="Drop the session cookie")
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        settings.AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.AUTH_COOKIE_SECURE,
    )
    return {"ok": True}


@router.post("/forgot", summary="Mail the owner a credential reminder")
def forgot(
    payload: Optional[ForgotIn] = None,
    settings: Settings = Depends(get_settings),
    mailer=Depends(get_mailer),
):
    payload = payload or ForgotIn()
    svc = AuthService(settings, mailer=mailer)
    try:
        svc.send_recovery(payload.email)
    except MissingCredentials as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RecoveryNotAllowed as e:
        raise HTTPException(status_code=403, detail=str(e))
    except AuthConfigurationError as e:
        log.error("Recovery requested but %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    except MailerError:
        log.exception("Recovery mail failed")
        raise HTTPException(status_code=500, detail="Failed to send recovery email.")
    return {"ok": True}
