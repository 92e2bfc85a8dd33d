from flask import Blueprint, current_app, g
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
import bcrypt

from ..extensions import db
from ..models import Account, ROLE_CUSTOMER
from ..schemas import ChangePasswordRequest, LoginRequest, RegisterRequest
from ..serializers import serialize_account
from ..utils.auth import active_required, issue_token, token_required
from ..utils.errors import BadRequest, Forbidden, NotFound, Unauthorized
from ..utils.responses import success
from ..utils.validation import validate_body

auth_bp = Blueprint("auth", __name__, url_prefix="/api/account")


def hash_password(password):
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password, password_hash):
    if not password_hash:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def ensure_unique_identity(email=None, username=None, exclude_id=None):
    """Reject an email or username that already belongs to another account."""
    if email is not None:
        query = select(Account).where(Account.email == email)
        if exclude_id is not None:
            query = query.where(Account.id != exclude_id)
        if db.session.scalar(query):
            raise BadRequest("Email already exists")

    if username is not None:
        query = select(Account).where(Account.username == username)
        if exclude_id is not None:
            query = query.where(Account.id != exclude_id)
        if db.session.scalar(query):
            raise BadRequest("Username already exists")


def _authenticate(body):
    account = db.session.scalar(select(Account).where(Account.email == body.email))
    if not account or not check_password(body.password, account.password_hash):
        raise Unauthorized("Invalid credentials")
    if not account.is_active:
        raise Forbidden("Account is deactivated")
    return account


@auth_bp.route("/register", methods=["POST"])
@validate_body(RegisterRequest)
def register(body):
    """
    POST /api/account/register
    Self-service signup. The role is always Customer regardless of the payload.
    """
    ensure_unique_identity(email=body.email, username=body.username)

    account = Account(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role=ROLE_CUSTOMER,
        dob=body.dob,
        phone=body.phone,
        is_active=True,
    )
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Register integrity error: {e}")
        raise BadRequest("Database integrity error")

    current_app.logger.info(f"User registered successfully: {account.email}")
    return success(
        serialize_account(account), "Registration successful, please log in", 201
    )


@auth_bp.route("/login", methods=["POST"])
@validate_body(LoginRequest)
def login(body):
    account = _authenticate(body)
    token = issue_token(account)

    current_app.logger.info(f"User logged in: {account.email}")
    return success({"user": serialize_account(account), "token": token}, "Login successful")


@auth_bp.route("/loginWithCookies", methods=["POST"])
@validate_body(LoginRequest)
def login_with_cookies(body):
    """Same checks as /login, but the token travels in an http-only cookie."""
    account = _authenticate(body)
    token = issue_token(account)

    response, status_code = success(
        {"user": serialize_account(account)}, "Login successful"
    )
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        token,
        max_age=current_app.config["JWT_EXPIRES_SECONDS"],
        httponly=True,
        secure=current_app.config["AUTH_COOKIE_SECURE"],
        samesite="Strict",
    )
    current_app.logger.info(f"User logged in with cookie: {account.email}")
    return response, status_code


@auth_bp.route("/logout", methods=["GET"])
def logout():
    # Tokens are stateless; a bearer token stays valid until it expires.
    response, status_code = success(None, "Logout successful")
    response.delete_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        httponly=True,
        secure=current_app.config["AUTH_COOKIE_SECURE"],
        samesite="Strict",
    )
    return response, status_code


@auth_bp.route("/changePassword", methods=["POST"])
@token_required
@active_required
@validate_body(ChangePasswordRequest)
def change_password(body):
    account = db.session.get(Account, g.user["id"])
    if not account:
        raise NotFound("User not found")

    if not check_password(body.current_password, account.password_hash):
        raise BadRequest("Invalid current password")
    if body.current_password == body.new_password:
        raise BadRequest("New password must be different from current password")
    if len(body.new_password) < 6:
        raise BadRequest("New password must be at least 6 characters")

    account.password_hash = hash_password(body.new_password)
    db.session.commit()

    current_app.logger.info(f"Password changed for: {account.email}")
    return success(None, "Password changed successfully")
