"""
System endpoint and error envelope tests.
"""

from conftest import envelope


class TestHealth:

    def test_health(self, client, book, user):
        resp = client.get("/health")
        status, message, data = envelope(resp)

        assert resp.status_code == 200
        assert status == "success"
        assert message == "healthy"
        database = data["checks"]["database"]
        assert database["status"] == "healthy"
        assert database["details"] == {"books": 1, "users": 1, "purchases": 0}

    def test_version(self, client, db_session):
        _, _, data = envelope(client.get("/version"))
        assert data["api_version"]


class TestErrorEnvelope:

    def test_unknown_route(self, client, db_session):
        resp = client.get("/does-not-exist")
        status, _, data = envelope(resp)
        assert resp.status_code == 404
        assert status == "error"
        assert data is None

    def test_wrong_method(self, client, db_session):
        resp = client.delete("/book/all")
        assert resp.status_code == 405
        assert envelope(resp)[0] == "error"

    def test_cors_allowed_origin(self, client, db_session):
        resp = client.get("/book/all", headers={"Origin": "http://localhost:8081"})
        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:8081"

    def test_cors_other_origin(self, client, db_session):
        resp = client.get("/book/all", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in resp.headers
