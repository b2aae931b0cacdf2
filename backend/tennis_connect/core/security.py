"""
Password hashing and session-cookie signing.

Passwords are hashed with scrypt and stored as ``"<hex digest>.<salt>"``.
The session cookie carries the server-side session id inside an HS256
token signed with ``SESSION_SECRET``, so a client cannot forge or tamper
with a session id.
"""

import hashlib
import hmac
import secrets

from jose import jwt
from jose.exceptions import JWTError

from tennis_connect.core.settings import settings

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_KEY_LEN = 64

_COOKIE_ALGORITHM = "HS256"


def _scrypt(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_KEY_LEN,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    return f"{_scrypt(password, salt).hex()}.{salt}"


def verify_password(supplied: str, stored: str) -> bool:
    """Check ``supplied`` against a stored ``"<hex digest>.<salt>"`` value.

    Malformed stored values never match.
    """
    hashed, sep, salt = (stored or "").partition(".")
    if not sep or not hashed or not salt:
        return False
    try:
        expected = bytes.fromhex(hashed)
    except ValueError:
        return False
    return hmac.compare_digest(expected, _scrypt(supplied, salt))


def sign_session_id(session_id: str) -> str:
    return jwt.encode({"sid": session_id}, settings.SESSION_SECRET, algorithm=_COOKIE_ALGORITHM)


def unsign_session_id(token: str) -> str | None:
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[_COOKIE_ALGORITHM])
    except JWTError:
        return None

    sid = payload.get("sid")
    return str(sid) if sid else None
