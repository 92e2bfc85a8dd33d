from flask import Blueprint
from sqlalchemy import select

from ...extensions import db
from ...models import PaymentMethod
from ...schemas import PaymentMethodRequest, PaymentMethodUpdateRequest
from ...serializers import serialize_payment_method
from ...utils.auth import active_required, admin_required, token_required
from ...utils.errors import NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

payment_methods_bp = Blueprint(
    "payment_methods", __name__, url_prefix="/api/paymentMethod"
)


@payment_methods_bp.route("", methods=["GET"])
def get_payment_methods():
    """Only methods currently offered at checkout."""
    methods = db.session.scalars(
        select(PaymentMethod)
        .where(PaymentMethod.is_active.is_(True))
        .order_by(PaymentMethod.id)
    ).all()
    if not methods:
        raise NotFound("No payment methods found")
    return success(
        [serialize_payment_method(m) for m in methods], "Payment methods retrieved"
    )


@payment_methods_bp.route("", methods=["POST"])
@token_required
@active_required
@admin_required
@validate_body(PaymentMethodRequest)
def create_payment_method(body):
    method = PaymentMethod(**body.model_dump())
    db.session.add(method)
    db.session.commit()
    return success(
        serialize_payment_method(method), "Payment method created successfully", 201
    )


@payment_methods_bp.route("/<int:method_id>", methods=["PUT"])
@token_required
@active_required
@admin_required
@validate_body(PaymentMethodUpdateRequest)
def update_payment_method(method_id, body):
    method = db.session.get(PaymentMethod, method_id)
    if not method:
        raise NotFound("Payment method not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(method, field, value)
    db.session.commit()
    return success(serialize_payment_method(method), "Payment method updated successfully")


@payment_methods_bp.route("/<int:method_id>", methods=["DELETE"])
@token_required
@active_required
@admin_required
def delete_payment_method(method_id):
    method = db.session.get(PaymentMethod, method_id)
    if not method:
        raise NotFound("Payment method not found")

    db.session.delete(method)
    db.session.commit()
    return success(None, "Payment method deleted successfully")
