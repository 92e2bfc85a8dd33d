# Roadmaps: bundles of services recommended for a skin type
from flask import Blueprint, current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ...extensions import db
from ...models import Roadmap
from ...schemas import RoadmapRequest, RoadmapUpdateRequest
from ...serializers import serialize_roadmap
from ...utils.auth import active_required, staff_or_admin_required, token_required
from ...utils.errors import BadRequest, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body
from ..catalog.therapists import load_services

roadmaps_bp = Blueprint("roadmaps", __name__, url_prefix="/api/roadmap")


@roadmaps_bp.route("", methods=["GET"])
def get_all_roadmaps():
    roadmaps = db.session.scalars(
        select(Roadmap).options(selectinload(Roadmap.services)).order_by(Roadmap.id)
    ).all()
    if not roadmaps:
        raise NotFound("No roadmaps found")
    return success([serialize_roadmap(r) for r in roadmaps], "Roadmaps retrieved")


@roadmaps_bp.route("/<int:roadmap_id>", methods=["GET"])
def get_roadmap(roadmap_id):
    roadmap = db.session.get(Roadmap, roadmap_id)
    if not roadmap:
        raise NotFound("Roadmap not found")
    return success(serialize_roadmap(roadmap), "Roadmap retrieved")


@roadmaps_bp.route("", methods=["POST"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(RoadmapRequest)
def create_roadmap(body):
    roadmap = Roadmap(estimate=body.estimate, services=load_services(body.services))
    db.session.add(roadmap)
    db.session.commit()
    return success(serialize_roadmap(roadmap), "Roadmap created successfully", 201)


@roadmaps_bp.route("/<int:roadmap_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(RoadmapUpdateRequest)
def update_roadmap(roadmap_id, body):
    roadmap = db.session.get(Roadmap, roadmap_id)
    if not roadmap:
        raise NotFound("Roadmap not found")

    if body.services is not None:
        roadmap.services = load_services(body.services)
    if body.estimate is not None:
        roadmap.estimate = body.estimate
    db.session.commit()
    return success(serialize_roadmap(roadmap), "Roadmap updated successfully")


@roadmaps_bp.route("/<int:roadmap_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_roadmap(roadmap_id):
    roadmap = db.session.get(Roadmap, roadmap_id)
    if not roadmap:
        raise NotFound("Roadmap not found")

    db.session.delete(roadmap)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Roadmap delete integrity error: {e}")
        raise BadRequest("Roadmap is still referenced by other records")
    return success(None, "Roadmap deleted successfully")
