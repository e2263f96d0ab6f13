# nameplate_dashboard/auth.py
"""
Session token handling and route guards.

The session is a PyJWT-signed token carried in an HttpOnly, SameSite=Strict
cookie named ``token``. Role and hierarchy identifiers ride inside the token;
the guards only look up the account to confirm it still exists and is active.
"""
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Dict, Optional

import jwt
from flask import current_app, g, jsonify, redirect, request

from nameplate_dashboard.db.enums import UserRole
from nameplate_dashboard.db.session import get_session
from nameplate_dashboard.errors import AuthenticationError
from nameplate_dashboard.models.user import User

JWT_ALGORITHM = "HS256"
TOKEN_COOKIE = "token"


def build_token_payload(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "officerName": user.officer_name,
        "officerNumber": user.officer_number,
        "rmo": user.rmo,
    }


def create_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    ttl = timedelta(hours=current_app.config["JWT_TTL_HOURS"])
    payload = build_token_payload(user)
    payload["iat"] = int(now.timestamp())
    payload["exp"] = int((now + ttl).timestamp())
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc


def set_token_cookie(response, token: str):
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        httponly=True,
        secure=current_app.config["SESSION_COOKIE_SECURE"],
        samesite="Strict",
        path="/",
        max_age=current_app.config["JWT_TTL_HOURS"] * 60 * 60,
    )
    return response


def clear_token_cookie(response):
    response.delete_cookie(TOKEN_COOKIE, path="/", samesite="Strict", httponly=True)
    return response


def _account_is_active(user_id: Optional[str]) -> bool:
    if not user_id:
        return False
    db = get_session()
    try:
        user = db.get(User, user_id)
        return user is not None and bool(user.is_active)
    finally:
        db.close()


def current_identity() -> Optional[Dict[str, Any]]:
    """
    Decoded token of the current request, or None when the token is absent,
    invalid, or belongs to an account that is missing or disabled.
    """
    if "identity" in g:
        return g.identity
    token = request.cookies.get(TOKEN_COOKIE)
    identity = None
    if token:
        try:
            identity = decode_token(token)
        except AuthenticationError:
            identity = None
    if identity is not None and not _account_is_active(identity.get("id")):
        identity = None
    g.identity = identity
    return identity


def home_path(identity: Dict[str, Any]) -> str:
    """Landing page of a role: /admin, /rmo/<rmo> or /<officerNumber>."""
    role = identity.get("role")
    if role == UserRole.admin.value:
        return "/admin"
    if role == UserRole.rmo.value:
        return f"/rmo/{identity.get('rmo')}"
    return f"/{identity.get('officerNumber')}"


def _wants_json() -> bool:
    return request.path.startswith("/api/")


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if current_identity() is None:
            if _wants_json():
                return jsonify({"success": False, "error": "Unauthorized"}), 401
            return redirect("/login")
        return f(*args, **kwargs)
    return decorated_function


def role_required(*roles: UserRole):
    allowed = {role.value for role in roles}

    def decorator(f):
        @wraps(f)
        @login_required
        def decorated_function(*args, **kwargs):
            if current_identity().get("role") not in allowed:
                return jsonify({"success": False, "error": "Insufficient permissions"}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required(f):
    return role_required(UserRole.admin)(f)


def reviewer_required(f):
    return role_required(UserRole.admin, UserRole.rmo)(f)


def can_access_rmo(identity: Dict[str, Any], rmo: str) -> bool:
    """Admins see every RMO; everyone else only their own."""
    if identity.get("role") == UserRole.admin.value:
        return True
    return identity.get("rmo") == rmo
