# Appointments, check-in/check-out photos
from flask import Blueprint, current_app, g, request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...extensions import db
from ...models import Appointment, Service, Slot, Therapist
from ...schemas import AppointmentCreateRequest, AppointmentUpdateRequest
from ...serializers import serialize_appointment, serialize_service, serialize_slot
from ...utils.auth import (
    active_required,
    staff_or_admin_required,
    therapist_or_staff_required,
    token_required,
)
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.uploads import save_image
from ...utils.validation import validate_body

appointments_bp = Blueprint("appointments", __name__, url_prefix="/api/appointment")


def load_booking_targets(therapist_id, slot_id, service_id):
    """Resolve the therapist, slot and service an appointment points at."""
    service = db.session.get(Service, service_id)
    if not service:
        raise NotFound("Service not found")
    if not db.session.get(Therapist, therapist_id):
        raise NotFound("Therapist not found")
    if not db.session.get(Slot, slot_id):
        raise NotFound("Slot not found")
    return service


@appointments_bp.route("", methods=["GET"])
def get_all_appointments():
    appointments = db.session.scalars(
        select(Appointment).order_by(Appointment.created_at.desc(), Appointment.id)
    ).all()
    if not appointments:
        raise NotFound("No appointments found")
    return success(
        [serialize_appointment(a) for a in appointments], "Appointments retrieved"
    )


@appointments_bp.route("/<int:appointment_id>", methods=["GET"])
def get_appointment(appointment_id):
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")

    data = serialize_appointment(appointment)
    data["service"] = serialize_service(appointment.service)
    data["slot"] = serialize_slot(appointment.slot)
    return success(data, "Appointment retrieved")


@appointments_bp.route("/customer/<int:customer_id>", methods=["GET"])
def get_appointments_by_customer(customer_id):
    appointments = db.session.scalars(
        select(Appointment)
        .where(Appointment.customer_id == customer_id)
        .order_by(Appointment.created_at.desc(), Appointment.id)
    ).all()
    if not appointments:
        raise NotFound("No appointments found for this customer")
    return success(
        [serialize_appointment(a) for a in appointments], "Appointments retrieved"
    )


@appointments_bp.route("/account/<int:account_id>", methods=["GET"])
def get_appointments_by_account(account_id):
    """Appointments assigned to the therapist profile owned by this account."""
    therapist = db.session.scalar(
        select(Therapist).where(Therapist.account_id == account_id)
    )
    if not therapist:
        raise NotFound("Therapist not found")

    appointments = db.session.scalars(
        select(Appointment)
        .where(Appointment.therapist_id == therapist.id)
        .order_by(Appointment.created_at.desc(), Appointment.id)
    ).all()
    return success(
        [serialize_appointment(a) for a in appointments], "Appointments retrieved"
    )


@appointments_bp.route("", methods=["POST"])
@token_required
@active_required
@validate_body(AppointmentCreateRequest)
def create_appointment(body):
    service = load_booking_targets(body.therapist_id, body.slot_id, body.service_id)

    appointment = Appointment(
        therapist_id=body.therapist_id,
        customer_id=g.user["id"],
        service_id=service.id,
        slot_id=body.slot_id,
        notes=body.notes,
        amount=service.price,
        status="Scheduled",
    )
    db.session.add(appointment)
    db.session.commit()

    current_app.logger.info(
        f"Appointment {appointment.id} created for customer {g.user['id']}"
    )
    return success(
        serialize_appointment(appointment), "Appointment created successfully", 201
    )


@appointments_bp.route("/<int:appointment_id>", methods=["PATCH"])
@token_required
@active_required
@therapist_or_staff_required
@validate_body(AppointmentUpdateRequest)
def update_appointment(appointment_id, body):
    """
    PATCH /api/appointment/<appointment_id>
    Accepts multipart/form-data with optional files:
    - checkInImage
    - checkOutImage
    plus optional status and notes fields.
    """
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")

    check_in = request.files.get("checkInImage")
    check_out = request.files.get("checkOutImage")
    if check_in:
        appointment.check_in_image = save_image(check_in, "appointments")
    if check_out:
        appointment.check_out_image = save_image(check_out, "appointments")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(appointment, field, value)
    db.session.commit()

    return success(serialize_appointment(appointment), "Appointment updated successfully")


@appointments_bp.route("/<int:appointment_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_appointment(appointment_id):
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        raise NotFound("Appointment not found")

    db.session.delete(appointment)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Appointment delete integrity error: {e}")
        raise BadRequest("Appointment is still referenced by other records")
    return success(None, "Appointment deleted successfully")
