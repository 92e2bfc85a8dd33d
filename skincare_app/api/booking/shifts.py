# Therapist shifts: a slot on a given date occupied by one appointment
import datetime

from flask import Blueprint, current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ...extensions import db
from ...models import Shift, Therapist
from ...schemas import ShiftCreateRequest, ShiftUpdateRequest
from ...serializers import (
    serialize_appointment,
    serialize_shift,
    serialize_slot,
    serialize_therapist,
)
from ...utils.auth import (
    active_required,
    staff_or_admin_required,
    therapist_required,
    token_required,
)
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

shifts_bp = Blueprint("shifts", __name__, url_prefix="/api/shifts")


def _serialize_upcoming(shift):
    data = serialize_shift(shift)
    data["slot"] = serialize_slot(shift.slot)
    data["therapist"] = serialize_therapist(shift.therapist)
    return data


def _upcoming_for_therapist(therapist_id):
    today = datetime.date.today()
    return db.session.scalars(
        select(Shift)
        .where(Shift.therapist_id == therapist_id, Shift.date >= today)
        .options(
            selectinload(Shift.slot),
            selectinload(Shift.therapist).selectinload(Therapist.specialization),
        )
        .order_by(Shift.date, Shift.slot_id)
    ).all()


@shifts_bp.route("", methods=["GET"])
def get_all_shifts():
    shifts = db.session.scalars(select(Shift).order_by(Shift.date, Shift.id)).all()
    if not shifts:
        raise NotFound("No shifts found")
    return success([serialize_shift(s) for s in shifts], "Shifts retrieved")


@shifts_bp.route("/<int:shift_id>", methods=["GET"])
def get_shift(shift_id):
    shift = db.session.get(Shift, shift_id)
    if not shift:
        raise NotFound("Shift not found")

    data = serialize_shift(shift)
    data["slot"] = serialize_slot(shift.slot)
    data["appointment"] = serialize_appointment(shift.appointment)
    data["therapist"] = serialize_therapist(shift.therapist)
    return success(data, "Shift retrieved")


@shifts_bp.route("/therapist/<int:therapist_id>", methods=["GET"])
def get_shifts_by_therapist(therapist_id):
    shifts = db.session.scalars(
        select(Shift)
        .where(Shift.therapist_id == therapist_id)
        .order_by(Shift.date, Shift.id)
    ).all()
    return success([serialize_shift(s) for s in shifts], "Shifts retrieved")


@shifts_bp.route("/therapist/upcoming/<int:therapist_id>", methods=["GET"])
def get_upcoming_shifts_by_therapist(therapist_id):
    """Shifts from today onward, with slot and therapist specialization expanded."""
    shifts = _upcoming_for_therapist(therapist_id)
    return success([_serialize_upcoming(s) for s in shifts], "Shifts retrieved")


@shifts_bp.route("/account/upcoming/<int:account_id>", methods=["GET"])
@token_required
@active_required
@therapist_required
def get_upcoming_shifts_by_account(account_id):
    therapist = db.session.scalar(
        select(Therapist).where(Therapist.account_id == account_id)
    )
    if not therapist:
        raise NotFound("Therapist not found")

    shifts = _upcoming_for_therapist(therapist.id)
    return success([_serialize_upcoming(s) for s in shifts], "Shifts retrieved")


@shifts_bp.route("", methods=["POST"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(ShiftCreateRequest)
def create_shift(body):
    shift = Shift(**body.model_dump())
    db.session.add(shift)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Shift create integrity error: {e}")
        raise BadRequest("Database integrity error")
    return success(serialize_shift(shift), "Shift created successfully", 201)


@shifts_bp.route("/<int:shift_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(ShiftUpdateRequest)
def update_shift(shift_id, body):
    shift = db.session.get(Shift, shift_id)
    if not shift:
        raise NotFound("Shift not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(shift, field, value)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Shift update integrity error: {e}")
        raise BadRequest("Database integrity error")
    return success(serialize_shift(shift), "Shift updated successfully")


@shifts_bp.route("/<int:shift_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_shift(shift_id):
    shift = db.session.get(Shift, shift_id)
    if not shift:
        raise NotFound("Shift not found")

    db.session.delete(shift)
    db.session.commit()
    return success(None, "Shift deleted successfully")
