import pytest

MISSING_ID = 9999

# prefix, update verb, valid update body, role allowed to write, item message
ENTITIES = [
    pytest.param(
        "/api/account", "patch", {"phone": "0999999999"}, "Admin", "Account not found",
        marks=pytest.mark.account, id="account",
    ),
    pytest.param(
        "/api/service", "put", {"price": 1}, "Staff", "Service not found",
        marks=pytest.mark.catalog, id="service",
    ),
    pytest.param(
        "/api/therapist", "put", {"experience": "2 years"}, "Admin", "Therapist not found",
        marks=pytest.mark.catalog, id="therapist",
    ),
    pytest.param(
        "/api/slots", "put", {"endTime": "10:00"}, "Staff", "Slot not found",
        marks=pytest.mark.booking, id="slot",
    ),
    pytest.param(
        "/api/shifts", "put", {"isAvailable": False}, "Staff", "Shift not found",
        marks=pytest.mark.booking, id="shift",
    ),
    pytest.param(
        "/api/appointment", "patch", {"notes": "late"}, "Staff", "Appointment not found",
        marks=pytest.mark.booking, id="appointment",
    ),
    pytest.param(
        "/api/transaction", "put", {"status": "completed"}, "Staff", "Transaction not found",
        marks=pytest.mark.booking, id="transaction",
    ),
    pytest.param(
        "/api/paymentMethod", "put", {"isActive": False}, "Admin", "Payment method not found",
        marks=pytest.mark.booking, id="payment-method",
    ),
    pytest.param(
        "/api/feedback", "put", {"rating": 3}, "Staff", "Feedback not found",
        marks=pytest.mark.content, id="feedback",
    ),
    pytest.param(
        "/api/blog", "put", {"title": "Spring"}, "Staff", "Blog not found",
        marks=pytest.mark.content, id="blog",
    ),
    pytest.param(
        "/api/question", "put", {"title": "Oily?"}, "Staff", "Question not found",
        marks=pytest.mark.quiz, id="question",
    ),
    pytest.param(
        "/api/roadmap", "put", {"estimate": "2 weeks"}, "Staff", "Roadmap not found",
        marks=pytest.mark.quiz, id="roadmap",
    ),
    pytest.param(
        "/api/scoreband", "put", {"typeOfSkin": "Dry"}, "Staff", "Scoreband not found",
        marks=pytest.mark.quiz, id="scoreband",
    ),
    pytest.param(
        "/api/userQuiz", "put", {"totalPoint": 1}, "Staff", "User quiz not found",
        marks=pytest.mark.quiz, id="user-quiz",
    ),
]

# account and payment method have no single-item GET
READABLE = [p for p in ENTITIES if p.id not in ("account", "payment-method")]

EMPTY_LISTS = [
    ("/api/service", "No services found"),
    ("/api/therapist", "No therapists found"),
    ("/api/slots", "No slots found"),
    ("/api/shifts", "No shifts found"),
    ("/api/appointment", "No appointments found"),
    ("/api/transaction", "No transactions found"),
    ("/api/paymentMethod", "No payment methods found"),
    ("/api/feedback", "No feedback found"),
    ("/api/blog", "No blogs found"),
    ("/api/question", "No questions found"),
    ("/api/roadmap", "No roadmaps found"),
    ("/api/scoreband", "No scorebands found"),
    ("/api/userQuiz", "No user quizzes found"),
]


@pytest.fixture
def writer_headers(admin_headers, staff_headers):
    return {"Admin": admin_headers, "Staff": staff_headers}


class TestMissingItems:
    """Every read, update and delete of an unknown id answers 404."""

    @pytest.mark.parametrize("prefix, verb, body, role, message", READABLE)
    def test_get(self, client, prefix, verb, body, role, message):
        response = client.get(f"{prefix}/{MISSING_ID}")

        assert response.status_code == 404
        assert response.json["status"] == "error"
        assert response.json["message"] == message

    @pytest.mark.parametrize("prefix, verb, body, role, message", ENTITIES)
    def test_update(self, client, writer_headers, prefix, verb, body, role, message):
        send = getattr(client, verb)
        response = send(f"{prefix}/{MISSING_ID}", json=body, headers=writer_headers[role])

        assert response.status_code == 404
        assert response.json["message"] == message

    @pytest.mark.parametrize("prefix, verb, body, role, message", ENTITIES)
    def test_delete(self, client, writer_headers, prefix, verb, body, role, message):
        response = client.delete(f"{prefix}/{MISSING_ID}", headers=writer_headers[role])

        assert response.status_code == 404
        assert response.json["message"] == message


class TestEmptyLists:
    @pytest.mark.parametrize("path, message", EMPTY_LISTS)
    def test_empty_list_is_404(self, client, db, path, message):
        response = client.get(path)

        assert response.status_code == 404
        assert response.json["statusCode"] == 404
        assert response.json["message"] == message
