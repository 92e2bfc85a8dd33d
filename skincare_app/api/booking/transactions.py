# Transactions and the booking flow: appointment + shift + transaction
from flask import Blueprint, current_app, g
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ...extensions import db
from ...models import Appointment, Shift, Transaction
from ...schemas import BookingRequest, TransactionUpdateRequest
from ...serializers import (
    serialize_appointment,
    serialize_shift,
    serialize_transaction,
)
from ...utils.auth import active_required, staff_or_admin_required, token_required
from ...utils.errors import InternalServerError, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body
from .appointments import load_booking_targets

transactions_bp = Blueprint("transactions", __name__, url_prefix="/api/transaction")


@transactions_bp.route("", methods=["GET"])
def get_all_transactions():
    transactions = db.session.scalars(
        select(Transaction).order_by(Transaction.created_at.desc(), Transaction.id)
    ).all()
    if not transactions:
        raise NotFound("No transactions found")
    return success(
        [serialize_transaction(t) for t in transactions], "Transactions retrieved"
    )


@transactions_bp.route("/<int:transaction_id>", methods=["GET"])
def get_transaction(transaction_id):
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        raise NotFound("Transaction not found")
    return success(serialize_transaction(transaction), "Transaction retrieved")


@transactions_bp.route("/customer/<int:customer_id>", methods=["GET"])
@token_required
@active_required
def get_transactions_by_customer(customer_id):
    transactions = db.session.scalars(
        select(Transaction)
        .where(Transaction.customer_id == customer_id)
        .order_by(Transaction.created_at.desc(), Transaction.id)
    ).all()
    if not transactions:
        raise NotFound("No transactions found for this customer")
    return success(
        [serialize_transaction(t) for t in transactions], "Transactions retrieved"
    )


@transactions_bp.route("", methods=["POST"])
@token_required
@active_required
@validate_body(BookingRequest)
def create_booking(body):
    """
    POST /api/transaction
    Books a service for the caller. Creates the appointment (status Scheduled,
    amount taken from the service price), the shift that holds the slot on the
    requested date, and a pending transaction, all in one commit.
    """
    service = load_booking_targets(body.therapist_id, body.slot_id, body.service_id)
    customer_id = g.user["id"]

    appointment = Appointment(
        therapist_id=body.therapist_id,
        customer_id=customer_id,
        service_id=service.id,
        slot_id=body.slot_id,
        notes=body.notes,
        amount=service.price,
        status="Scheduled",
    )
    shift = Shift(
        slot_id=body.slot_id,
        therapist_id=body.therapist_id,
        date=body.date,
        is_available=True,
        appointment=appointment,
    )
    transaction = Transaction(
        customer_id=customer_id,
        payment_method=body.payment_method,
        status="pending",
        appointment=appointment,
    )
    db.session.add_all([appointment, shift, transaction])

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Booking failed for customer {customer_id}: {e}")
        raise InternalServerError("Booking failed") from e

    current_app.logger.info(
        f"Booking created: appointment {appointment.id}, "
        f"shift {shift.id}, transaction {transaction.id}"
    )
    return success(
        {
            "appointment": serialize_appointment(appointment),
            "shift": serialize_shift(shift),
            "transaction": serialize_transaction(transaction),
        },
        "Booking created successfully",
        201,
    )


@transactions_bp.route("/<int:transaction_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(TransactionUpdateRequest)
def update_transaction(transaction_id, body):
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        raise NotFound("Transaction not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(transaction, field, value)
    db.session.commit()
    return success(serialize_transaction(transaction), "Transaction updated successfully")


@transactions_bp.route("/<int:transaction_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_transaction(transaction_id):
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction:
        raise NotFound("Transaction not found")

    db.session.delete(transaction)
    db.session.commit()
    return success(None, "Transaction deleted successfully")
