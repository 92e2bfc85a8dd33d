from flask import Blueprint, current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...extensions import db
from ...models import Slot
from ...schemas import SlotCreateRequest, SlotUpdateRequest
from ...serializers import serialize_slot
from ...utils.auth import active_required, staff_or_admin_required, token_required
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

slots_bp = Blueprint("slots", __name__, url_prefix="/api/slots")


@slots_bp.route("", methods=["GET"])
def get_all_slots():
    slots = db.session.scalars(select(Slot).order_by(Slot.slot_num)).all()
    if not slots:
        raise NotFound("No slots found")
    return success([serialize_slot(s) for s in slots], "Slots retrieved")


@slots_bp.route("/<int:slot_id>", methods=["GET"])
def get_slot(slot_id):
    slot = db.session.get(Slot, slot_id)
    if not slot:
        raise NotFound("Slot not found")
    return success(serialize_slot(slot), "Slot retrieved")


@slots_bp.route("", methods=["POST"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(SlotCreateRequest)
def create_slot(body):
    slot = Slot(**body.model_dump())
    db.session.add(slot)
    db.session.commit()
    return success(serialize_slot(slot), "Slot created successfully", 201)


@slots_bp.route("/<int:slot_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(SlotUpdateRequest)
def update_slot(slot_id, body):
    slot = db.session.get(Slot, slot_id)
    if not slot:
        raise NotFound("Slot not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(slot, field, value)
    db.session.commit()
    return success(serialize_slot(slot), "Slot updated successfully")


@slots_bp.route("/<int:slot_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_slot(slot_id):
    slot = db.session.get(Slot, slot_id)
    if not slot:
        raise NotFound("Slot not found")

    db.session.delete(slot)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Slot delete integrity error: {e}")
        raise BadRequest("Slot is still referenced by other records")
    return success(None, "Slot deleted successfully")
