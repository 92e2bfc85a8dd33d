from flask import Blueprint, current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ...extensions import db
from ...models import Roadmap, Scoreband
from ...schemas import ScorebandRequest, ScorebandUpdateRequest
from ...serializers import serialize_scoreband
from ...utils.auth import active_required, staff_or_admin_required, token_required
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

scorebands_bp = Blueprint("scorebands", __name__, url_prefix="/api/scoreband")


def _check_range(min_point, max_point):
    if min_point > max_point:
        raise BadRequest("minPoint must not be greater than maxPoint")


def _require_roadmap(roadmap_id):
    if not db.session.get(Roadmap, roadmap_id):
        raise NotFound("Roadmap not found")


@scorebands_bp.route("", methods=["GET"])
def get_all_scorebands():
    scorebands = db.session.scalars(
        select(Scoreband).order_by(Scoreband.min_point, Scoreband.id)
    ).all()
    if not scorebands:
        raise NotFound("No scorebands found")
    return success(
        [serialize_scoreband(s, expand_roadmap=True) for s in scorebands],
        "Scorebands retrieved",
    )


@scorebands_bp.route("/<int:scoreband_id>", methods=["GET"])
def get_scoreband(scoreband_id):
    scoreband = db.session.get(Scoreband, scoreband_id)
    if not scoreband:
        raise NotFound("Scoreband not found")
    return success(
        serialize_scoreband(scoreband, expand_roadmap=True), "Scoreband retrieved"
    )


@scorebands_bp.route("", methods=["POST"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(ScorebandRequest)
def create_scoreband(body):
    _check_range(body.min_point, body.max_point)
    _require_roadmap(body.roadmap_id)

    scoreband = Scoreband(**body.model_dump())
    db.session.add(scoreband)
    db.session.commit()
    return success(
        serialize_scoreband(scoreband, expand_roadmap=True),
        "Scoreband created successfully",
        201,
    )


@scorebands_bp.route("/<int:scoreband_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(ScorebandUpdateRequest)
def update_scoreband(scoreband_id, body):
    scoreband = db.session.get(Scoreband, scoreband_id)
    if not scoreband:
        raise NotFound("Scoreband not found")

    updates = body.model_dump(exclude_none=True)
    _check_range(
        updates.get("min_point", scoreband.min_point),
        updates.get("max_point", scoreband.max_point),
    )
    if "roadmap_id" in updates:
        _require_roadmap(updates["roadmap_id"])

    for field, value in updates.items():
        setattr(scoreband, field, value)
    db.session.commit()
    return success(
        serialize_scoreband(scoreband, expand_roadmap=True),
        "Scoreband updated successfully",
    )


@scorebands_bp.route("/<int:scoreband_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_scoreband(scoreband_id):
    scoreband = db.session.get(Scoreband, scoreband_id)
    if not scoreband:
        raise NotFound("Scoreband not found")

    db.session.delete(scoreband)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Scoreband delete integrity error: {e}")
        raise BadRequest("Scoreband is still referenced by other records")
    return success(None, "Scoreband deleted successfully")
