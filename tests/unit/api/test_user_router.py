"""HTTP tests for the user endpoints."""

from urllib.parse import parse_qs, urlsplit

from fastapi.testclient import TestClient
from sqlmodel import Session

from membership.app.entities.core.user import MembershipFee, MembershipStatus, User, UserRepository
from tests.fixtures.core import TEST_PASSWORD
from tests.fixtures.dummies import RecordingEmailService

API = "/api/v1"


def _login(client: TestClient, email: str, password: str = TEST_PASSWORD) -> dict[str, str]:
    response = client.post(f"{API}/user/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


class TestRegistration:
    def test_create_user(self, client: TestClient, email_service: RecordingEmailService):
        response = client.post(
            f"{API}/user",
            json={
                "email": "New@Example.com",
                "password": "pw-1",
                "confirmPassword": "pw-1",
                "company": "Acme",
                "companyRepName1": "Ada",
                "referrer1": "a@x.com",
                "referrer2": "b@x.com",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["email"] == "new@example.com"
        assert body["role"] == "User"
        assert body["id"]
        assert "password" not in body
        assert len(email_service.sent_to("new@example.com")) == 1

    def test_password_mismatch(self, client: TestClient):
        response = client.post(
            f"{API}/user",
            json={"email": "n@example.com", "password": "a", "confirmPassword": "b"},
        )

        assert response.status_code == 401
        assert response.json() == {
            "status": "error",
            "err": "Passwords doesn't match, What a shame!",
        }

    def test_empty_password_answers_401(self, client: TestClient):
        response = client.post(
            f"{API}/user",
            json={"email": "n@example.com", "password": "", "confirmPassword": "x"},
        )

        assert response.status_code == 401
        assert response.json()["err"] == "Passwords doesn't match, What a shame!"

    def test_duplicate_email(self, client: TestClient, applicant: User):
        response = client.post(
            f"{API}/user",
            json={"email": applicant.email, "password": "a", "confirmPassword": "a"},
        )

        assert response.status_code == 404
        assert response.json()["status"] == "error"

    def test_user_count_is_a_string(self, client: TestClient, applicant: User):
        response = client.get(f"{API}/user/usercount")

        assert response.status_code == 200
        assert response.json() == "1"


class TestQueries:
    def test_list_and_get(self, client: TestClient, applicant: User):
        listed = client.get(f"{API}/user").json()
        assert [u["id"] for u in listed] == [applicant.id]
        assert "password" not in listed[0]

        fetched = client.get(f"{API}/user/{applicant.id}").json()
        assert fetched["email"] == applicant.email
        assert fetched["referrer1"] == "a@x.com"
        assert fetched["referred1"] is False
        assert fetched["membershipStatus"] == "inactive"

    def test_get_unknown(self, client: TestClient):
        response = client.get(f"{API}/user/missing")

        assert response.status_code == 404
        assert response.json() == {"status": "error", "err": "No User with such id existing"}


class TestLoginAndEdit:
    def test_login(self, client: TestClient, applicant: User):
        response = client.post(
            f"{API}/user/login", json={"email": applicant.email, "password": TEST_PASSWORD}
        )

        body = response.json()
        assert body["id"] == applicant.id
        assert body["role"] == "User"
        assert body["token"].count(".") == 2

    def test_login_rejected(self, client: TestClient, applicant: User):
        response = client.post(
            f"{API}/user/login", json={"email": applicant.email, "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["err"] == "Invalid email or password"

    def test_update_requires_bearer(self, client: TestClient, applicant: User):
        response = client.put(f"{API}/user", json={"id": applicant.id, "company": "x"})

        assert response.status_code == 401
        assert response.json() == {"status": "error", "err": "Missing Bearer token"}

    def test_update_with_token(self, client: TestClient, applicant: User, session: Session):
        headers = _login(client, applicant.email)

        response = client.put(
            f"{API}/user",
            json={"id": applicant.id, "company": "Acme Holdings", "tradeGroup": "B2B"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "message": f"User with id {applicant.id} has been updated",
        }
        stored = UserRepository(session).get(applicant.id, refresh=True)
        assert stored.company == "Acme Holdings"
        assert stored.trade_group == "B2B"

    def test_update_other_user_forbidden(
        self, client: TestClient, applicant: User, user_factory
    ):
        other = user_factory(email="other@example.com")
        headers = _login(client, other.email)

        response = client.put(
            f"{API}/user", json={"id": applicant.id, "company": "x"}, headers=headers
        )

        assert response.status_code == 401

    def test_update_without_id(self, client: TestClient, applicant: User):
        headers = _login(client, applicant.email)

        response = client.put(f"{API}/user", json={"company": "x"}, headers=headers)

        assert response.status_code == 401
        assert response.json()["err"] == "No User id provided!"

    def test_delete(self, client: TestClient, applicant: User, session: Session):
        headers = _login(client, applicant.email)

        response = client.request(
            "DELETE", f"{API}/user", json={"id": applicant.id}, headers=headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == f"User with id {applicant.id} has been deleted"
        session.expire_all()
        assert UserRepository(session).get(applicant.id) is None


class TestPasswordReset:
    def test_forgot_then_change(
        self, client: TestClient, applicant: User, email_service: RecordingEmailService
    ):
        response = client.put(
            f"{API}/user/{applicant.id}",
            json={"email": applicant.email, "url": "https://app.example.com/reset"},
        )
        assert response.status_code == 200
        assert response.json()["message"] == (
            "Click on the link sent to your email to change your password."
        )

        [message] = email_service.sent_to(applicant.email)
        href = message.body.split('href="', 1)[1].split('"', 1)[0]
        assert href.startswith("https://app.example.com/reset?token=")
        token = parse_qs(urlsplit(href).query)["token"][0]

        changed = client.put(
            f"{API}/user/change/{token}",
            json={"password": "brand-new", "confirmPassword": "brand-new"},
        )
        assert changed.status_code == 200
        assert changed.json()["message"] == "Password successfully changed."

        _login(client, applicant.email, "brand-new")

        reused = client.put(
            f"{API}/user/change/{token}",
            json={"password": "again", "confirmPassword": "again"},
        )
        assert reused.status_code == 401
        assert reused.json()["err"] == "Invalid Token!"

    def test_forgot_unknown_email(self, client: TestClient):
        response = client.put(
            f"{API}/user/whatever", json={"email": "nobody@example.com", "url": "https://x"}
        )

        assert response.status_code == 404
        assert response.json()["err"] == "No User with such email existing"

    def test_change_with_bad_token(self, client: TestClient):
        response = client.put(
            f"{API}/user/change/not-a-token",
            json={"password": "a", "confirmPassword": "a"},
        )

        assert response.status_code == 401


class TestReferees:
    def test_validate_referee(self, client: TestClient, user_factory):
        user_factory(
            email="paid@example.com",
            membership_fee=MembershipFee.PAID,
            membership_status=MembershipStatus.ACTIVE,
        )

        ok = client.post(f"{API}/validatereferee", json={"email": "paid@example.com"})
        assert ok.json() == {"status": "success", "message": "The referee is valid"}

        missing = client.post(f"{API}/validatereferee", json={"email": "x@example.com"})
        assert missing.status_code == 404
        assert missing.json()["err"] == "The referee is either invalid or not fully paid"

    def test_alert_referees(
        self, client: TestClient, applicant: User, email_service: RecordingEmailService
    ):
        response = client.post(
            f"{API}/alertreferee",
            json={"id": applicant.id, "referrerUrl": "https://app.example.com/refer/"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "The referees has been alerted."
        assert len(email_service.sent_to("a@x.com")) == 1
        assert len(email_service.sent_to("b@x.com")) == 1


class TestUpload:
    def test_upload(self, client: TestClient, blob_storage):
        response = client.post(
            f"{API}/user/upload", files={"file": ("Logo.PNG", b"\x89PNG", "image/png")}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        [name] = blob_storage.blobs
        assert body["bannerUrl"] == f"https://files.example.com/userfiles/{name}"

    def test_empty_upload(self, client: TestClient):
        response = client.post(
            f"{API}/user/upload", files={"file": ("empty.png", b"", "image/png")}
        )

        assert response.status_code == 401
        assert response.json()["err"] == "No file uploaded!"


def test_security_and_request_id_headers(client: TestClient):
    response = client.get(f"{API}/user/usercount", headers={"X-Request-ID": "req-1"})

    assert response.headers["X-Request-ID"] == "req-1"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
