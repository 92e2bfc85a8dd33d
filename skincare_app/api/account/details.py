# Account management: admin CRUD and self-service profile
from flask import Blueprint, current_app, g
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...extensions import db
from ...models import Account
from ...routes.auth import ensure_unique_identity, hash_password
from ...schemas import (
    AccountAdminUpdateRequest,
    AccountCreateRequest,
    ProfileUpdateRequest,
)
from ...serializers import serialize_account
from ...utils.auth import active_required, admin_required, token_required
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

account_bp = Blueprint("account", __name__, url_prefix="/api/account")


def _apply_updates(account, body):
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise BadRequest("No update data provided")

    ensure_unique_identity(
        email=updates.get("email"),
        username=updates.get("username"),
        exclude_id=account.id,
    )
    for field, value in updates.items():
        setattr(account, field, value)

    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Account update integrity error: {e}")
        raise BadRequest("Database integrity error")


@account_bp.route("", methods=["GET"])
@token_required
@active_required
@admin_required
def get_all_accounts():
    accounts = db.session.scalars(select(Account).order_by(Account.id)).all()
    if not accounts:
        raise NotFound("No accounts found")
    return success([serialize_account(a) for a in accounts], "Accounts retrieved")


@account_bp.route("", methods=["POST"])
@token_required
@active_required
@admin_required
@validate_body(AccountCreateRequest)
def create_account(body):
    """Admin-only: create an account with any role (e.g. Staff, Therapist)."""
    ensure_unique_identity(email=body.email, username=body.username)

    account = Account(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role=body.role,
        dob=body.dob,
        phone=body.phone,
        is_active=True,
    )
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Account create integrity error: {e}")
        raise BadRequest("Database integrity error")

    return success(serialize_account(account), "Account created successfully", 201)


@account_bp.route("/profile", methods=["GET"])
@token_required
@active_required
def get_profile():
    account = db.session.get(Account, g.user["id"])
    if not account:
        raise NotFound("Account not found")
    return success(serialize_account(account), "Account retrieved successfully")


@account_bp.route("/updateProfile", methods=["PATCH"])
@token_required
@active_required
@validate_body(ProfileUpdateRequest)
def update_profile(body):
    account = db.session.get(Account, g.user["id"])
    if not account:
        raise NotFound("Account not found")

    _apply_updates(account, body)
    return success(serialize_account(account), "Account updated successfully")


@account_bp.route("/<int:account_id>", methods=["PATCH"])
@token_required
@active_required
@admin_required
@validate_body(AccountAdminUpdateRequest)
def update_account_admin(account_id, body):
    account = db.session.get(Account, account_id)
    if not account:
        raise NotFound("Account not found")

    _apply_updates(account, body)
    return success(serialize_account(account), "Account updated successfully")


@account_bp.route("/<int:account_id>", methods=["DELETE"])
@token_required
@active_required
@admin_required
def delete_account(account_id):
    account = db.session.get(Account, account_id)
    if not account:
        raise NotFound("Account not found")

    db.session.delete(account)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Account delete integrity error: {e}")
        raise BadRequest("Account is still referenced by other records")

    return success(None, "Account deleted successfully")
