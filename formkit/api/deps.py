"""Request dependencies — the form store and the signed-in user."""

from fastapi import HTTPException, Request

from formkit.config import get_settings
from formkit.services.form_store import FormStore


def get_form_store(request: Request) -> FormStore:
    """The application's form store, created at startup."""
    store = getattr(request.app.state, "form_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Storage is not available")
    return store


def get_current_user_email(request: Request) -> str:
    """Email of the signed-in user, as forwarded by the auth proxy."""
    email = request.headers.get(get_settings().AUTH_EMAIL_HEADER, "").strip()
    if not email:
        raise HTTPException(status_code=401, detail="User unauthorized")
    return email
