# Feedback on completed appointments, optional photo
from flask import Blueprint, current_app, g, request
from sqlalchemy import select

from ...extensions import db
from ...models import (
    Appointment,
    Feedback,
    ROLE_ADMIN,
    ROLE_STAFF,
    Service,
    Therapist,
)
from ...schemas import FeedbackCreateRequest, FeedbackUpdateRequest
from ...serializers import serialize_feedback
from ...utils.auth import active_required, token_required
from ...utils.errors import Forbidden, NotFound
from ...utils.responses import success
from ...utils.uploads import save_image
from ...utils.validation import validate_body

feedback_bp = Blueprint("feedback", __name__, url_prefix="/api/feedback")


def _owned_feedback(feedback_id):
    """Load feedback the caller may change: their own, or any for staff/admin."""
    feedback = db.session.get(Feedback, feedback_id)
    if not feedback:
        raise NotFound("Feedback not found")

    user = g.user
    if feedback.account_id != user["id"] and user["role"] not in (ROLE_STAFF, ROLE_ADMIN):
        raise Forbidden("You can only modify your own feedback")
    return feedback


@feedback_bp.route("", methods=["GET"])
def get_all_feedback():
    feedbacks = db.session.scalars(
        select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id)
    ).all()
    if not feedbacks:
        raise NotFound("No feedback found")
    return success([serialize_feedback(f) for f in feedbacks], "Feedback retrieved")


@feedback_bp.route("/<int:feedback_id>", methods=["GET"])
def get_feedback(feedback_id):
    feedback = db.session.get(Feedback, feedback_id)
    if not feedback:
        raise NotFound("Feedback not found")
    return success(serialize_feedback(feedback), "Feedback retrieved")


@feedback_bp.route("", methods=["POST"])
@token_required
@active_required
@validate_body(FeedbackCreateRequest)
def create_feedback(body):
    """
    POST /api/feedback
    JSON or multipart/form-data with:
    - appointmentId, serviceId, therapistId (int)
    - comment (string)
    - rating (int, 1..5)
    - image (file, optional)
    """
    if not db.session.get(Appointment, body.appointment_id):
        raise NotFound("Appointment not found")
    if not db.session.get(Service, body.service_id):
        raise NotFound("Service not found")
    if not db.session.get(Therapist, body.therapist_id):
        raise NotFound("Therapist not found")

    images = body.images
    image_file = request.files.get("image")
    if image_file:
        images = save_image(image_file, "feedback")

    feedback = Feedback(
        account_id=g.user["id"],
        appointment_id=body.appointment_id,
        service_id=body.service_id,
        therapist_id=body.therapist_id,
        comment=body.comment,
        rating=body.rating,
        images=images,
    )
    db.session.add(feedback)
    db.session.commit()

    current_app.logger.info(
        f"Feedback {feedback.id} posted by account {g.user['id']}"
    )
    return success(serialize_feedback(feedback), "Feedback posted successfully", 201)


@feedback_bp.route("/<int:feedback_id>", methods=["PUT"])
@token_required
@active_required
@validate_body(FeedbackUpdateRequest)
def update_feedback(feedback_id, body):
    feedback = _owned_feedback(feedback_id)

    image_file = request.files.get("image")
    if image_file:
        feedback.images = save_image(image_file, "feedback")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(feedback, field, value)
    db.session.commit()
    return success(serialize_feedback(feedback), "Feedback updated successfully")


@feedback_bp.route("/<int:feedback_id>", methods=["DELETE"])
@token_required
@active_required
def delete_feedback(feedback_id):
    feedback = _owned_feedback(feedback_id)
    db.session.delete(feedback)
    db.session.commit()
    return success(None, "Feedback deleted successfully")
