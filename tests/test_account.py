import pytest

from skincare_app.models import Account


@pytest.mark.account
class TestAccountAdmin:
    """Admin-only account management."""

    def test_list_accounts(self, client, admin_headers, sample_customer):
        response = client.get("/api/account", headers=admin_headers)

        assert response.status_code == 200
        assert response.json["results"] == 2
        emails = {a["email"] for a in response.json["data"]}
        assert emails == {"admin@example.com", "customer@example.com"}

    def test_staff_cannot_list_accounts(self, client, staff_headers):
        response = client.get("/api/account", headers=staff_headers)

        assert response.status_code == 403

    def test_admin_creates_staff_account(self, client, admin_headers):
        response = client.post(
            "/api/account",
            json={
                "username": "newstaff",
                "email": "newstaff@example.com",
                "password": "secret123",
                "dob": "1990-01-01",
                "phone": "0987654321",
                "role": "Staff",
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json["data"]["role"] == "Staff"

    def test_create_account_rejects_unknown_role(self, client, admin_headers):
        response = client.post(
            "/api/account",
            json={
                "username": "odd",
                "email": "odd@example.com",
                "password": "secret123",
                "dob": "1990-01-01",
                "phone": "0987654321",
                "role": "Owner",
            },
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_customer_cannot_create_account(self, client, auth_headers):
        response = client.post(
            "/api/account",
            json={
                "username": "sneaky",
                "email": "sneaky@example.com",
                "password": "secret123",
                "dob": "1990-01-01",
                "phone": "0987654321",
                "role": "Admin",
            },
            headers=auth_headers,
        )

        assert response.status_code == 403

    def test_admin_updates_role_and_active_flag(
        self, client, db_session, admin_headers, sample_customer
    ):
        response = client.patch(
            f"/api/account/{sample_customer.id}",
            json={"role": "Staff", "isActive": False},
            headers=admin_headers,
        )

        assert response.status_code == 200
        db_session.expire_all()
        account = db_session.get(Account, sample_customer.id)
        assert account.role == "Staff"
        assert account.is_active is False

    def test_update_missing_account(self, client, admin_headers):
        response = client.patch(
            "/api/account/9999", json={"phone": "0999999999"}, headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json["message"] == "Account not found"

    @pytest.mark.parametrize("field", ["username", "email", "dob", "phone", "role", "isActive"])
    def test_admin_update_rejects_null(self, client, admin_headers, sample_customer, field):
        response = client.patch(
            f"/api/account/{sample_customer.id}", json={field: None}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json["message"] == f"{field} cannot be null"

    def test_delete_account(self, client, admin_headers, sample_customer):
        account_id = sample_customer.id
        response = client.delete(f"/api/account/{account_id}", headers=admin_headers)
        assert response.status_code == 200

        response = client.delete(f"/api/account/{account_id}", headers=admin_headers)
        assert response.status_code == 404


@pytest.mark.account
class TestProfile:
    def test_get_profile(self, client, auth_headers):
        response = client.get("/api/account/profile", headers=auth_headers)

        assert response.status_code == 200
        assert response.json["data"]["username"] == "customer"
        assert "passwordHash" not in response.json["data"]

    def test_update_profile(self, client, auth_headers):
        response = client.patch(
            "/api/account/updateProfile",
            json={"phone": "0911111111", "username": "renamed"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json["data"]["phone"] == "0911111111"
        assert response.json["data"]["username"] == "renamed"

    def test_update_profile_cannot_change_role(self, client, db_session, auth_headers, sample_customer):
        response = client.patch(
            "/api/account/updateProfile",
            json={"role": "Admin", "phone": "0922222222"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert db_session.get(Account, sample_customer.id).role == "Customer"

    def test_update_profile_duplicate_email(self, client, auth_headers, sample_staff):
        response = client.patch(
            "/api/account/updateProfile",
            json={"email": "staff@example.com"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json["message"] == "Email already exists"

    def test_update_profile_empty_body(self, client, auth_headers):
        response = client.patch(
            "/api/account/updateProfile", json={}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json["message"] == "No update data provided"
