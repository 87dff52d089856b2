from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from typing import Optional

from fastapi import HTTPException, Request, status

PASSWORD_HASH_ALGO = "pbkdf2_sha256"
PASSWORD_HASH_ITERATIONS = 200_000


def _derive(password: str, salt: str, iterations: int) -> str:
    dk = hashlib.pbkdf2_hmac("sha256", password.strip().encode("utf-8"), salt.encode("utf-8"), iterations)
    return base64.urlsafe_b64encode(dk).decode("utf-8")


def hash_password(password: str) -> str:
    """Hash an admin password for storage in config.toml."""
    if not password.strip():
        raise ValueError("Password cannot be empty")
    salt = secrets.token_hex(16)
    digest = _derive(password, salt, PASSWORD_HASH_ITERATIONS)
    return f"{PASSWORD_HASH_ALGO}${PASSWORD_HASH_ITERATIONS}${salt}${digest}"


def _verify_hashed(password: str, stored_hash: str) -> bool:
    parts = stored_hash.split("$")
    if len(parts) != 4 or parts[0] != PASSWORD_HASH_ALGO or not parts[1].isdigit():
        return False
    _, iterations, salt, digest = parts
    return hmac.compare_digest(_derive(password, salt, int(iterations)), digest)


def verify_admin_password(password: Optional[str], configured: Optional[str]) -> bool:
    """Check a submitted password against the configured one (plain text or pbkdf2 hash).

    An unset configured password never matches.
    """
    if not password or not configured:
        return False
    if configured.startswith(PASSWORD_HASH_ALGO + "$"):
        return _verify_hashed(password, configured)
    return hmac.compare_digest(password.encode("utf-8"), configured.encode("utf-8"))


def require_admin_password(request: Request, password: Optional[str]) -> None:
    configured = request.app.state.config.get("admin", {}).get("password")
    if verify_admin_password(password, configured):
        return None
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid password")
