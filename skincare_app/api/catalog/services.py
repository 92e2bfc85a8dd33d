# Service catalog with inline feedback on the detail view
from flask import Blueprint, current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ...extensions import db
from ...models import Feedback, Service, Therapist
from ...schemas import ServiceCreateRequest, ServiceUpdateRequest
from ...serializers import serialize_feedback, serialize_service
from ...utils.auth import active_required, staff_or_admin_required, token_required
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

services_bp = Blueprint("services", __name__, url_prefix="/api/service")


@services_bp.route("", methods=["GET"])
def get_all_services():
    services = db.session.scalars(select(Service).order_by(Service.id)).all()
    if not services:
        raise NotFound("No services found")
    return success([serialize_service(s) for s in services], "Services retrieved")


@services_bp.route("/<int:service_id>", methods=["GET"])
def get_service(service_id):
    """
    GET /api/service/<service_id>
    Returns the service with its feedback embedded. Each feedback carries the
    author's username and the therapist's username.
    """
    service = db.session.get(Service, service_id)
    if not service:
        raise NotFound("Service not found")

    feedbacks = db.session.scalars(
        select(Feedback)
        .where(Feedback.service_id == service_id)
        .options(
            selectinload(Feedback.account),
            selectinload(Feedback.therapist).selectinload(Therapist.account),
        )
        .order_by(Feedback.created_at.desc())
    ).all()

    feedback_list = []
    for fb in feedbacks:
        item = serialize_feedback(fb)
        item["account"] = (
            {"id": fb.account.id, "username": fb.account.username}
            if fb.account
            else None
        )
        item["therapist"] = (
            {
                "id": fb.therapist.id,
                "accountId": fb.therapist.account_id,
                "username": fb.therapist.account.username
                if fb.therapist.account
                else None,
            }
            if fb.therapist
            else None
        )
        feedback_list.append(item)

    data = serialize_service(service)
    data["feedbacks"] = feedback_list
    return success(data, "Service retrieved")


@services_bp.route("", methods=["POST"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(ServiceCreateRequest)
def create_service(body):
    service = Service(**body.model_dump())
    db.session.add(service)
    db.session.commit()
    return success(serialize_service(service), "Create Successfully", 201)


@services_bp.route("/<int:service_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(ServiceUpdateRequest)
def update_service(service_id, body):
    service = db.session.get(Service, service_id)
    if not service:
        raise NotFound("Service not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(service, field, value)
    db.session.commit()
    return success(serialize_service(service), "Update Successfully")


@services_bp.route("/<int:service_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_service(service_id):
    service = db.session.get(Service, service_id)
    if not service:
        raise NotFound("Service not found")

    data = serialize_service(service)
    db.session.delete(service)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Service delete integrity error: {e}")
        raise BadRequest("Service is still referenced by other records")
    return success(data, "Delete Successfully")
