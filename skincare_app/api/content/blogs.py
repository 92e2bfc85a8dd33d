from flask import Blueprint, current_app, g
from sqlalchemy import select

from ...extensions import db
from ...models import Blog
from ...schemas import BlogCreateRequest, BlogUpdateRequest
from ...serializers import serialize_blog
from ...utils.auth import active_required, staff_or_admin_required, token_required
from ...utils.errors import NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

blogs_bp = Blueprint("blogs", __name__, url_prefix="/api/blog")


def _blog_images(images):
    return [img.model_dump(by_alias=True) for img in images]


@blogs_bp.route("", methods=["GET"])
def get_all_blogs():
    blogs = db.session.scalars(select(Blog).order_by(Blog.created_at.desc(), Blog.id)).all()
    if not blogs:
        raise NotFound("No blogs found")
    return success([serialize_blog(b) for b in blogs], "Blogs retrieved")


@blogs_bp.route("/<int:blog_id>", methods=["GET"])
def get_blog(blog_id):
    blog = db.session.get(Blog, blog_id)
    if not blog:
        raise NotFound("Blog not found")
    return success(serialize_blog(blog), "Blog retrieved")


@blogs_bp.route("", methods=["POST"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(BlogCreateRequest)
def create_blog(body):
    blog = Blog(
        staff_id=g.user["id"],
        title=body.title,
        status=body.status,
        content=body.content,
        images=_blog_images(body.images),
    )
    db.session.add(blog)
    db.session.commit()

    current_app.logger.info(f"Blog {blog.id} published by staff {g.user['id']}")
    return success(serialize_blog(blog), "Blog created successfully", 201)


@blogs_bp.route("/<int:blog_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(BlogUpdateRequest)
def update_blog(blog_id, body):
    blog = db.session.get(Blog, blog_id)
    if not blog:
        raise NotFound("Blog not found")

    updates = body.model_dump(exclude_unset=True)
    if "images" in updates:
        updates["images"] = _blog_images(body.images)
    for field, value in updates.items():
        setattr(blog, field, value)
    db.session.commit()
    return success(serialize_blog(blog), "Blog updated successfully")


@blogs_bp.route("/<int:blog_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_blog(blog_id):
    blog = db.session.get(Blog, blog_id)
    if not blog:
        raise NotFound("Blog not found")

    db.session.delete(blog)
    db.session.commit()
    return success(None, "Blog deleted successfully")
