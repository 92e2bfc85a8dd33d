from flask import Blueprint, current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ...extensions import db
from ...models import Account, Service, Therapist
from ...schemas import TherapistCreateRequest, TherapistUpdateRequest
from ...serializers import serialize_therapist
from ...utils.auth import active_required, admin_required, token_required
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

therapists_bp = Blueprint("therapists", __name__, url_prefix="/api/therapist")


def load_services(service_ids):
    services = db.session.scalars(
        select(Service).where(Service.id.in_(service_ids))
    ).all()
    found = {s.id for s in services}
    missing = [sid for sid in service_ids if sid not in found]
    if missing:
        raise NotFound(f"Service not found: {missing[0]}")
    return list(services)


def _certifications(items):
    return [c.model_dump(by_alias=True, mode="json") for c in items]


@therapists_bp.route("", methods=["GET"])
def get_all_therapists():
    therapists = db.session.scalars(
        select(Therapist)
        .options(selectinload(Therapist.specialization))
        .order_by(Therapist.id)
    ).all()
    if not therapists:
        raise NotFound("No therapists found")
    return success([serialize_therapist(t) for t in therapists], "Therapists retrieved")


@therapists_bp.route("/<int:therapist_id>", methods=["GET"])
def get_therapist(therapist_id):
    therapist = db.session.get(Therapist, therapist_id)
    if not therapist:
        raise NotFound("Therapist not found")
    return success(serialize_therapist(therapist, expand_account=True), "Therapist retrieved")


@therapists_bp.route("/by-service/<int:service_id>", methods=["GET"])
def get_therapists_by_service(service_id):
    """Therapists whose specialization includes the given service."""
    therapists = db.session.scalars(
        select(Therapist)
        .where(Therapist.specialization.any(Service.id == service_id))
        .options(
            selectinload(Therapist.account), selectinload(Therapist.specialization)
        )
        .order_by(Therapist.id)
    ).all()
    if not therapists:
        raise NotFound("No therapists found for this service")
    return success(
        [serialize_therapist(t, expand_account=True) for t in therapists],
        "Therapists retrieved",
    )


@therapists_bp.route("", methods=["POST"])
@token_required
@active_required
@admin_required
@validate_body(TherapistCreateRequest)
def create_therapist(body):
    if not db.session.get(Account, body.account_id):
        raise NotFound("Account not found")
    existing = db.session.scalar(
        select(Therapist).where(Therapist.account_id == body.account_id)
    )
    if existing:
        raise BadRequest("Account already has a therapist profile")

    therapist = Therapist(
        account_id=body.account_id,
        specialization=load_services(body.specialization),
        certification=_certifications(body.certification),
        experience=body.experience,
    )
    db.session.add(therapist)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Therapist create integrity error: {e}")
        raise BadRequest("Database integrity error")

    return success(serialize_therapist(therapist), "Created Successfully", 201)


@therapists_bp.route("/<int:therapist_id>", methods=["PUT"])
@token_required
@active_required
@admin_required
@validate_body(TherapistUpdateRequest)
def update_therapist(therapist_id, body):
    therapist = db.session.get(Therapist, therapist_id)
    if not therapist:
        raise NotFound("Therapist not found")

    if body.specialization is not None:
        therapist.specialization = load_services(body.specialization)
    if body.certification is not None:
        therapist.certification = _certifications(body.certification)
    if body.experience is not None:
        therapist.experience = body.experience

    db.session.commit()
    return success(serialize_therapist(therapist), "Updated Successfully")


@therapists_bp.route("/<int:therapist_id>", methods=["DELETE"])
@token_required
@active_required
@admin_required
def delete_therapist(therapist_id):
    therapist = db.session.get(Therapist, therapist_id)
    if not therapist:
        raise NotFound("Therapist not found")

    data = serialize_therapist(therapist)
    db.session.delete(therapist)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Therapist delete integrity error: {e}")
        raise BadRequest("Therapist is still referenced by other records")
    return success(data, "Deleted Successfully")
