# Skin quiz results and the submission flow that scores them
from flask import Blueprint, current_app, g
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ...extensions import db
from ...models import (
    Account,
    Question,
    ROLE_ADMIN,
    ROLE_STAFF,
    Roadmap,
    Scoreband,
    UserQuiz,
)
from ...schemas import (
    QuizSubmissionRequest,
    UserQuizCreateRequest,
    UserQuizUpdateRequest,
)
from ...serializers import serialize_user_quiz
from ...utils.auth import active_required, token_required
from ...utils.errors import BadRequest, Forbidden, NotFound
from ...utils.responses import success
from ...utils.validation import validate_body

user_quiz_bp = Blueprint("user_quiz", __name__, url_prefix="/api/userQuiz")


def _expanded_query():
    return select(UserQuiz).options(
        selectinload(UserQuiz.account),
        selectinload(UserQuiz.scoreband)
        .selectinload(Scoreband.roadmap)
        .selectinload(Roadmap.services),
    )


def _owned_user_quiz(user_quiz_id):
    user_quiz = db.session.get(UserQuiz, user_quiz_id)
    if not user_quiz:
        raise NotFound("User quiz not found")

    user = g.user
    if user_quiz.account_id != user["id"] and user["role"] not in (ROLE_STAFF, ROLE_ADMIN):
        raise Forbidden("You can only modify your own quiz results")
    return user_quiz


def find_scoreband(total_point):
    """The band whose [minPoint, maxPoint] range contains the score."""
    return db.session.scalar(
        select(Scoreband)
        .where(Scoreband.min_point <= total_point, Scoreband.max_point >= total_point)
        .order_by(Scoreband.min_point, Scoreband.id)
    )


def score_answers(answers):
    """
    Match each submitted answer against the question's answer options.
    Returns (result items, total points).
    """
    result = []
    total_point = 0
    for item in answers:
        question = db.session.get(Question, item.question_id)
        if not question:
            raise NotFound(f"Question not found: {item.question_id}")

        option = next(
            (a for a in question.answers or [] if a.get("title") == item.answer),
            None,
        )
        if option is None:
            raise BadRequest(
                f"Answer '{item.answer}' is not an option for question {question.id}"
            )

        point = int(option.get("point", 0))
        total_point += point
        result.append({"title": question.title, "answer": item.answer, "point": point})
    return result, total_point


@user_quiz_bp.route("", methods=["GET"])
def get_all_user_quizzes():
    user_quizzes = db.session.scalars(
        _expanded_query().order_by(UserQuiz.created_at.desc(), UserQuiz.id)
    ).all()
    if not user_quizzes:
        raise NotFound("No user quizzes found")
    return success(
        [serialize_user_quiz(uq, expand=True) for uq in user_quizzes],
        "User quizzes retrieved",
    )


@user_quiz_bp.route("/by-account", methods=["GET"])
@token_required
@active_required
def get_user_quizzes_by_account():
    user_quizzes = db.session.scalars(
        _expanded_query()
        .where(UserQuiz.account_id == g.user["id"])
        .order_by(UserQuiz.created_at.desc(), UserQuiz.id)
    ).all()
    if not user_quizzes:
        raise NotFound("No user quizzes found for this account")
    return success(
        [serialize_user_quiz(uq, expand=True) for uq in user_quizzes],
        "User quizzes retrieved",
    )


@user_quiz_bp.route("/<int:user_quiz_id>", methods=["GET"])
def get_user_quiz(user_quiz_id):
    user_quiz = db.session.get(UserQuiz, user_quiz_id)
    if not user_quiz:
        raise NotFound("User quiz not found")
    return success(serialize_user_quiz(user_quiz, expand=True), "User quiz retrieved")


@user_quiz_bp.route("", methods=["POST"])
@token_required
@active_required
@validate_body(UserQuizCreateRequest)
def create_user_quiz(body):
    if not db.session.get(Account, body.account_id):
        raise NotFound("Account not found")
    if not db.session.get(Scoreband, body.scoreband_id):
        raise NotFound("Scoreband not found")

    user_quiz = UserQuiz(
        account_id=body.account_id,
        scoreband_id=body.scoreband_id,
        result=[r.model_dump() for r in body.result],
        total_point=body.total_point,
    )
    db.session.add(user_quiz)
    db.session.commit()
    return success(
        serialize_user_quiz(user_quiz, expand=True), "User quiz created successfully", 201
    )


@user_quiz_bp.route("/submit", methods=["POST"])
@token_required
@active_required
@validate_body(QuizSubmissionRequest)
def submit_quiz(body):
    """
    POST /api/userQuiz/submit
    Scores the caller's answers, picks the matching scoreband and stores the
    result. The response carries the scoreband with its recommended roadmap.
    """
    result, total_point = score_answers(body.answers)

    scoreband = find_scoreband(total_point)
    if not scoreband:
        raise NotFound(f"No scoreband matches a total of {total_point} points")

    user_quiz = UserQuiz(
        account_id=g.user["id"],
        scoreband_id=scoreband.id,
        result=result,
        total_point=total_point,
    )
    db.session.add(user_quiz)
    db.session.commit()

    current_app.logger.info(
        f"Quiz submitted by account {g.user['id']}: "
        f"{total_point} points, scoreband {scoreband.id}"
    )
    return success(
        serialize_user_quiz(user_quiz, expand=True), "Quiz submitted successfully", 201
    )


@user_quiz_bp.route("/<int:user_quiz_id>", methods=["PUT"])
@token_required
@active_required
@validate_body(UserQuizUpdateRequest)
def update_user_quiz(user_quiz_id, body):
    user_quiz = _owned_user_quiz(user_quiz_id)

    if body.result is not None:
        user_quiz.result = [r.model_dump() for r in body.result]
    if body.total_point is not None:
        user_quiz.total_point = body.total_point
    db.session.commit()
    return success(
        serialize_user_quiz(user_quiz, expand=True), "User quiz updated successfully"
    )


@user_quiz_bp.route("/<int:user_quiz_id>", methods=["DELETE"])
@token_required
@active_required
def delete_user_quiz(user_quiz_id):
    user_quiz = _owned_user_quiz(user_quiz_id)
    db.session.delete(user_quiz)
    db.session.commit()
    return success(None, "User quiz deleted successfully")
