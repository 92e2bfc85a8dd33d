import datetime
from functools import wraps

import jwt
from flask import current_app, g, request

from ..extensions import db
from ..models import (
    Account,
    ROLE_ADMIN,
    ROLE_STAFF,
    ROLE_THERAPIST,
)
from .errors import AppError, Forbidden, Unauthorized


def issue_token(account):
    """Sign a token carrying the account id and its role at login time."""
    payload = {
        "id": account.id,
        "role": account.role,
        "exp": datetime.datetime.now(datetime.timezone.utc)
        + datetime.timedelta(seconds=current_app.config["JWT_EXPIRES_SECONDS"]),
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm="HS256")


def _read_token():
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1].strip()
        if token:
            return token
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])


def token_required(fn):
    """Accept a bearer header or the auth cookie and expose the claims on g.user."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _read_token()
        if not token:
            raise Unauthorized("Authentication required")

        try:
            payload = jwt.decode(
                token, current_app.config["JWT_SECRET"], algorithms=["HS256"]
            )
        except jwt.ExpiredSignatureError:
            current_app.logger.warning("Rejected expired token")
            raise Unauthorized("Token expired")
        except jwt.InvalidTokenError:
            current_app.logger.warning("Rejected invalid token")
            raise Unauthorized("Invalid token")

        if "id" not in payload or "role" not in payload:
            raise Unauthorized("Invalid token")

        g.user = {"id": payload["id"], "role": payload["role"]}
        return fn(*args, **kwargs)

    return wrapper


def _current_user(check_name):
    user = g.get("user")
    if user is None:
        raise AppError(f"Authentication middleware must run before {check_name}", 500)
    return user


def active_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = _current_user("active_required")
        account = db.session.get(Account, user["id"])
        if not account:
            raise Unauthorized("User not found")
        if not account.is_active:
            raise Forbidden("Account is inactive")
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    """Compare the role claim from the token against a fixed allow-set."""
    label = " or ".join(roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = _current_user("role_required")
            if user["role"] not in roles:
                raise Forbidden(f"{label} access required")
            return fn(*args, **kwargs)

        return wrapper

    return decorator


admin_required = role_required(ROLE_ADMIN)
staff_required = role_required(ROLE_STAFF)
therapist_required = role_required(ROLE_THERAPIST)
staff_or_admin_required = role_required(ROLE_STAFF, ROLE_ADMIN)
therapist_or_staff_required = role_required(ROLE_THERAPIST, ROLE_STAFF)
