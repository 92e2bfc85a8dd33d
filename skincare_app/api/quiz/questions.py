from flask import Blueprint
from sqlalchemy import select

from ...extensions import db
from ...models import Question
from ...schemas import QuestionRequest, QuestionUpdateRequest
from ...serializers import serialize_question
from ...utils.auth import active_required, staff_or_admin_required, token_required
from ...utils.errors import NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

questions_bp = Blueprint("questions", __name__, url_prefix="/api/question")


def _answers(answers):
    return [a.model_dump() for a in answers]


@questions_bp.route("", methods=["GET"])
def get_all_questions():
    questions = db.session.scalars(select(Question).order_by(Question.id)).all()
    if not questions:
        raise NotFound("No questions found")
    return success([serialize_question(q) for q in questions], "Questions retrieved")


@questions_bp.route("/<int:question_id>", methods=["GET"])
def get_question(question_id):
    question = db.session.get(Question, question_id)
    if not question:
        raise NotFound("Question not found")
    return success(serialize_question(question), "Question retrieved")


@questions_bp.route("", methods=["POST"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(QuestionRequest)
def create_question(body):
    question = Question(title=body.title, answers=_answers(body.answers))
    db.session.add(question)
    db.session.commit()
    return success(serialize_question(question), "Question created successfully", 201)


@questions_bp.route("/<int:question_id>", methods=["PUT"])
@token_required
@active_required
@staff_or_admin_required
@validate_body(QuestionUpdateRequest)
def update_question(question_id, body):
    question = db.session.get(Question, question_id)
    if not question:
        raise NotFound("Question not found")

    if body.title is not None:
        question.title = body.title
    if body.answers is not None:
        question.answers = _answers(body.answers)
    db.session.commit()
    return success(serialize_question(question), "Question updated successfully")


@questions_bp.route("/<int:question_id>", methods=["DELETE"])
@token_required
@active_required
@staff_or_admin_required
def delete_question(question_id):
    question = db.session.get(Question, question_id)
    if not question:
        raise NotFound("Question not found")

    db.session.delete(question)
    db.session.commit()
    return success(None, "Question deleted successfully")
