# auth.py
import logging

import requests

from errors import Unauthenticated

logger = logging.getLogger(__name__)

# -------------------------------------------------------
# REST AUTH ENDPOINT (Login)
# -------------------------------------------------------
FIREBASE_REST_SIGNIN = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

LOGIN_ERRORS = {
    "EMAIL_NOT_FOUND": "No account found.",
    "INVALID_PASSWORD": "Wrong password.",
    "INVALID_LOGIN_CREDENTIALS": "Wrong email or password.",
    "USER_DISABLED": "Account disabled.",
    "INVALID_EMAIL": "Invalid email.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts.",
}


def signin_with_email_password(api_key: str, email: str, password: str, timeout=30):
    payload = {
        "email": email,
        "password": password,
        "returnSecureToken": True,
    }
    resp = requests.post(FIREBASE_REST_SIGNIN, params={"key": api_key}, json=payload, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def auth_error_message(exc) -> str:
    """Map Firebase HTTP errors to user-friendly messages"""
    if isinstance(exc, requests.exceptions.HTTPError) and exc.response is not None:
        try:
            data = exc.response.json()
            code = data.get("error", {}).get("message", "").upper()
        except ValueError:
            return "Auth server error."
        # codes can carry a suffix, e.g. "TOO_MANY_ATTEMPTS_TRY_LATER : ..."
        code = code.split(":")[0].strip()
        return LOGIN_ERRORS.get(code, f"Login error: {code}")
    if isinstance(exc, requests.exceptions.ConnectionError):
        return "Cannot reach the sign-in service."
    return str(exc)


class AuthSession:
    """The signed-in staff member, as far as this process knows."""

    def __init__(self):
        self.uid = None
        self.email = None

    def sign_in(self, uid, email=None):
        self.uid = uid or None
        self.email = email
        logger.info("Signed in as %s", email or uid)

    def sign_in_with_password(self, api_key, email, password):
        res = signin_with_email_password(api_key, email, password)
        self.sign_in(res.get("localId"), res.get("email", email))
        return res

    def sign_out(self):
        self.uid = self.email = None

    def current_user_id(self):
        return self.uid

    def require_user_id(self) -> str:
        if not self.uid:
            raise Unauthenticated()
        return self.uid
