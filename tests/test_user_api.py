import pytest
from fastapi import status

from keychat.core.gateways import UserGateway

from conftest import bearer, break_store, register


class TestUserById:

    def test_returns_user_record(self, client):
        _, key = register(client, "alice")
        bob_id, _ = register(client, "bob", "bob@example.com")

        response = client.get(f"/user_by_id/{bob_id}", headers=bearer(key))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "status": "success",
            "data": {"user": {"id": bob_id, "username": "bob", "email": "bob@example.com"}},
        }

    @pytest.mark.parametrize("user_id", ["abc", "1_0", "1.5", "1e3", "0x1"])
    def test_non_numeric_id_is_a_fail_with_status_200(self, client, user_id):
        # Kept as-is: this route answers 200 where other validation paths answer 400
        for n in range(10):
            _, key = register(client, f"user{n}")

        response = client.get(f"/user_by_id/{user_id}", headers=bearer(key))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "fail", "data": {"userId": f"{user_id} is not a number"}}

    def test_unknown_id_is_a_fail(self, client):
        _, key = register(client, "alice")

        response = client.get("/user_by_id/9999", headers=bearer(key))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"status": "fail", "data": {"userId": "9999 does not exist"}}


class TestMyInfo:

    def test_returns_caller_record(self, client):
        user_id, key = register(client, "alice", "alice@example.com")

        response = client.get("/myinfo", headers=bearer(key))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["user"] == {
            "id": user_id,
            "username": "alice",
            "email": "alice@example.com",
        }

    def test_depends_on_the_key_used(self, client):
        register(client, "alice")
        bob_id, bob_key = register(client, "bob")

        response = client.get("/myinfo", headers=bearer(bob_key))

        assert response.json()["data"]["user"]["id"] == bob_id


class TestUserByUsername:

    def test_returns_user_record(self, client):
        _, key = register(client, "alice")
        bob_id, _ = register(client, "bob")

        response = client.get("/user_by_username/bob", headers=bearer(key))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["user"]["id"] == bob_id

    def test_unknown_username_is_a_fail(self, client):
        _, key = register(client, "alice")

        response = client.get("/user_by_username/nobody", headers=bearer(key))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"status": "fail", "data": {"username": "nobody does not exist"}}

    def test_store_failure_is_an_internal_error(self, client, monkeypatch):
        _, key = register(client, "alice")
        register(client, "bob")
        break_store(monkeypatch, UserGateway)

        response = client.get("/user_by_username/bob", headers=bearer(key))

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"status": "error", "message": "Internal server error"}
