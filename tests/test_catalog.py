import pytest

from skincare_app.models import Feedback, Service


@pytest.fixture
def service_payload():
    return {
        "serviceName": "Acne Treatment",
        "description": "Clears clogged pores",
        "price": 300000,
        "isActive": True,
    }


@pytest.fixture
def certification():
    return [
        {"name": "Dermatology Basics", "issuedBy": "Skin Institute", "issuedDate": "2021-09-01"}
    ]


@pytest.mark.catalog
class TestServices:
    def test_empty_list_is_404(self, client):
        response = client.get("/api/service")

        assert response.status_code == 404
        assert response.json["message"] == "No services found"

    def test_list_services(self, client, sample_service):
        response = client.get("/api/service")

        assert response.status_code == 200
        assert response.json["results"] == 1
        assert response.json["data"][0]["serviceName"] == "Hydrating Facial"
        assert response.json["data"][0]["price"] == 450000.0

    def test_missing_service(self, client, db):
        response = client.get("/api/service/999")

        assert response.status_code == 404
        assert response.json["message"] == "Service not found"

    def test_service_detail_embeds_feedback(
        self, client, db_session, sample_customer, sample_service, sample_therapist
    ):
        db_session.add(
            Feedback(
                account_id=sample_customer.id,
                appointment_id=1,
                service_id=sample_service.id,
                therapist_id=sample_therapist.id,
                comment="Lovely",
                rating=5,
            )
        )
        db_session.commit()

        response = client.get(f"/api/service/{sample_service.id}")

        assert response.status_code == 200
        feedbacks = response.json["data"]["feedbacks"]
        assert len(feedbacks) == 1
        assert feedbacks[0]["account"]["username"] == "customer"
        assert feedbacks[0]["therapist"]["username"] == "therapist"

    def test_staff_creates_service(self, client, staff_headers, service_payload):
        response = client.post("/api/service", json=service_payload, headers=staff_headers)

        assert response.status_code == 201
        assert response.json["message"] == "Create Successfully"
        assert response.json["data"]["serviceName"] == "Acne Treatment"

    def test_customer_cannot_create_service(self, client, auth_headers, service_payload):
        response = client.post("/api/service", json=service_payload, headers=auth_headers)

        assert response.status_code == 403
        assert response.json["message"] == "Staff or Admin access required"

    def test_create_service_requires_price(self, client, staff_headers, service_payload):
        service_payload.pop("price")
        response = client.post("/api/service", json=service_payload, headers=staff_headers)

        assert response.status_code == 400
        assert response.json["message"] == "price is required"

    def test_update_service(self, client, staff_headers, sample_service):
        response = client.put(
            f"/api/service/{sample_service.id}",
            json={"price": 500000},
            headers=staff_headers,
        )

        assert response.status_code == 200
        assert response.json["data"]["price"] == 500000.0
        assert response.json["data"]["serviceName"] == "Hydrating Facial"

    @pytest.mark.parametrize("field", ["serviceName", "description", "price", "isActive"])
    def test_update_rejects_null(self, client, staff_headers, sample_service, field):
        response = client.put(
            f"/api/service/{sample_service.id}", json={field: None}, headers=staff_headers
        )

        assert response.status_code == 400
        assert response.json["message"] == f"{field} cannot be null"

    def test_update_clears_image(self, client, db_session, staff_headers, sample_service):
        sample_service.image = "/images/services/old.png"
        db_session.commit()

        response = client.put(
            f"/api/service/{sample_service.id}", json={"image": None}, headers=staff_headers
        )

        assert response.status_code == 200
        assert response.json["data"]["image"] is None

    def test_update_missing_service(self, client, staff_headers):
        response = client.put("/api/service/999", json={"price": 1}, headers=staff_headers)

        assert response.status_code == 404

    def test_delete_service(self, client, db_session, admin_headers, service_payload):
        service = Service(
            service_name="Peel", description="Chemical peel", price=200000, is_active=True
        )
        db_session.add(service)
        db_session.commit()
        service_id = service.id

        response = client.delete(f"/api/service/{service_id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.json["message"] == "Delete Successfully"

        response = client.get(f"/api/service/{service_id}")
        assert response.status_code == 404


@pytest.mark.catalog
class TestTherapists:
    def test_empty_list_is_404(self, client):
        response = client.get("/api/therapist")

        assert response.status_code == 404
        assert response.json["message"] == "No therapists found"

    def test_list_expands_specialization(self, client, sample_therapist):
        response = client.get("/api/therapist")

        assert response.status_code == 200
        therapist = response.json["data"][0]
        assert therapist["specialization"][0]["serviceName"] == "Hydrating Facial"
        assert therapist["certification"][0]["issuedBy"] == "Beauty Academy"

    def test_detail_expands_account(self, client, sample_therapist):
        response = client.get(f"/api/therapist/{sample_therapist.id}")

        assert response.status_code == 200
        assert response.json["data"]["account"]["username"] == "therapist"
        assert "passwordHash" not in response.json["data"]["account"]

    def test_by_service(self, client, sample_therapist, sample_service):
        response = client.get(f"/api/therapist/by-service/{sample_service.id}")

        assert response.status_code == 200
        assert [t["id"] for t in response.json["data"]] == [sample_therapist.id]

    def test_by_service_without_therapists(self, client, sample_service):
        response = client.get(f"/api/therapist/by-service/{sample_service.id}")

        assert response.status_code == 404

    def test_admin_creates_therapist(
        self, client, admin_headers, make_account, sample_service, certification
    ):
        account = make_account("newtherapist", "newtherapist@example.com", role="Therapist")
        response = client.post(
            "/api/therapist",
            json={
                "accountId": account.id,
                "specialization": [sample_service.id],
                "certification": certification,
                "experience": "3 years",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json["data"]
        assert data["accountId"] == account.id
        assert data["certification"][0]["issuedDate"] == "2021-09-01"
        assert data["specialization"][0]["id"] == sample_service.id

    def test_create_therapist_twice_for_same_account(
        self, client, admin_headers, sample_therapist, sample_service, certification
    ):
        response = client.post(
            "/api/therapist",
            json={
                "accountId": sample_therapist.account_id,
                "specialization": [sample_service.id],
                "certification": certification,
                "experience": "1 year",
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json["message"] == "Account already has a therapist profile"

    def test_create_therapist_empty_specialization(
        self, client, admin_headers, sample_customer, certification
    ):
        response = client.post(
            "/api/therapist",
            json={
                "accountId": sample_customer.id,
                "specialization": [],
                "certification": certification,
                "experience": "1 year",
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json["message"] == "Specialization must be a non-empty array"

    def test_create_therapist_bad_certification_name(
        self, client, admin_headers, sample_customer, sample_service
    ):
        response = client.post(
            "/api/therapist",
            json={
                "accountId": sample_customer.id,
                "specialization": [sample_service.id],
                "certification": [
                    {"name": "Level 2!", "issuedBy": "Academy", "issuedDate": "2020-01-01"}
                ],
                "experience": "1 year",
            },
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert (
            response.json["message"]
            == "Certification name must only contain letters and spaces"
        )

    def test_update_cannot_change_account(self, client, admin_headers, sample_therapist):
        response = client.put(
            f"/api/therapist/{sample_therapist.id}",
            json={"accountId": 42, "experience": "6 years"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json["message"] == "Cannot update accountId"

    def test_update_experience(self, client, admin_headers, sample_therapist):
        response = client.put(
            f"/api/therapist/{sample_therapist.id}",
            json={"experience": "6 years"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json["data"]["experience"] == "6 years"

    @pytest.mark.parametrize("field", ["specialization", "certification", "experience"])
    def test_update_rejects_null(self, client, admin_headers, sample_therapist, field):
        response = client.put(
            f"/api/therapist/{sample_therapist.id}", json={field: None}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json["message"] == f"{field} cannot be null"

    def test_staff_cannot_create_therapist(self, client, staff_headers):
        response = client.post("/api/therapist", json={}, headers=staff_headers)

        assert response.status_code == 403

    def test_delete_therapist(self, client, admin_headers, sample_therapist):
        therapist_id = sample_therapist.id
        response = client.delete(f"/api/therapist/{therapist_id}", headers=admin_headers)
        assert response.status_code == 200

        response = client.get(f"/api/therapist/{therapist_id}")
        assert response.status_code == 404
