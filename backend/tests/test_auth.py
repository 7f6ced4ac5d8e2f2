from permitpro.models.user import User


class TestAuthAPI:
    def test_first_login_creates_user(self, client):
        r = client.post("/api/auth/login", json={"email": "Admin@PermitPro.com", "password": "admin123"})
        assert r.status_code == 200
        assert r.json() == {"name": "Admin User", "role": "Administrator"}

    def test_second_login_reuses_user(self, client, db):
        client.post("/api/auth/login", json={"email": "clerk@permitpro.com"})
        client.post("/api/auth/login", json={"email": "CLERK@permitpro.com", "password": "anything"})

        assert db.query(User).filter(User.email == "clerk@permitpro.com").count() == 1

    def test_blank_email(self, client):
        r = client.post("/api/auth/login", json={"email": "  "})
        assert r.status_code == 400


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
