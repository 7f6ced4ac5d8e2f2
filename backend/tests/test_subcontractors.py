import pytest


@pytest.fixture
def make_subcontractor(client):
    def _make(company_name="Sparks Electric", trade_type="Electrical", **extra):
        r = client.post("/api/subcontractors", json={
            "companyName": company_name,
            "tradeType": trade_type,
            **extra,
        })
        assert r.status_code == 201, r.text
        return r.json()

    return _make


class TestSubcontractorsAPI:
    def test_create_list_filter(self, client, make_subcontractor):
        make_subcontractor()
        make_subcontractor(company_name="Pipe Pros", trade_type="Plumbing")

        assert len(client.get("/api/subcontractors").json()) == 2
        r = client.get("/api/subcontractors", params={"tradeType": "Plumbing"})
        assert [s["companyName"] for s in r.json()] == ["Pipe Pros"]

    def test_blank_trade_type(self, client):
        r = client.post("/api/subcontractors", json={"companyName": "Nobody", "tradeType": " "})
        assert r.status_code == 400

    def test_update(self, client, make_subcontractor):
        sub = make_subcontractor()
        r = client.put(f"/api/subcontractors/{sub['id']}", json={"phoneNumber": "305-555-0142"})
        assert r.status_code == 200
        assert r.json()["phoneNumber"] == "305-555-0142"

    def test_update_and_delete_missing(self, client):
        assert client.put("/api/subcontractors/77", json={"email": "x@y.z"}).status_code == 404
        assert client.delete("/api/subcontractors/77").status_code == 404


class TestAssignments:
    def test_assign_duplicate_and_remove(self, client, make_package, make_subcontractor):
        package = make_package()
        subs = [make_subcontractor(company_name=f"Sub {n}") for n in range(1, 6)]
        assert package["id"] == 1
        assert subs[-1]["id"] == 5

        r = client.post("/api/permits/1/subcontractors", json={"subcontractorId": 5, "tradeType": "Electrical"})
        assert r.status_code == 201
        assert r.json()["subcontractor"]["companyName"] == "Sub 5"

        r = client.post("/api/permits/1/subcontractors", json={"subcontractorId": 5, "tradeType": "Electrical"})
        assert r.status_code == 409

        r = client.delete("/api/permits/1/subcontractors/5")
        assert r.status_code == 200
        assert r.json()["message"] == "Subcontractor removed from package"

        listed = client.get("/api/permits/1/subcontractors").json()
        assert 5 not in [a["subcontractorId"] for a in listed]

    def test_trade_type_defaults_to_subcontractor(self, client, make_package, make_subcontractor):
        package = make_package()
        sub = make_subcontractor(company_name="Roof Co", trade_type="Roofing")

        r = client.post(f"/api/permits/{package['id']}/subcontractors", json={"subcontractorId": sub["id"]})
        assert r.status_code == 201
        assert r.json()["tradeType"] == "Roofing"

        detail = client.get(f"/api/permits/{package['id']}").json()
        assert [a["subcontractorId"] for a in detail["subcontractors"]] == [sub["id"]]

    def test_assign_unknown_ids(self, client, make_package, make_subcontractor):
        package = make_package()
        sub = make_subcontractor()
        assert client.post(f"/api/permits/{package['id']}/subcontractors", json={"subcontractorId": 99}).status_code == 404
        assert client.post("/api/permits/99/subcontractors", json={"subcontractorId": sub["id"]}).status_code == 404

    def test_remove_missing_assignment(self, client, make_package, make_subcontractor):
        package = make_package()
        sub = make_subcontractor()
        r = client.delete(f"/api/permits/{package['id']}/subcontractors/{sub['id']}")
        assert r.status_code == 404

    def test_delete_subcontractor_drops_assignments(self, client, make_package, make_subcontractor):
        package = make_package()
        sub = make_subcontractor()
        client.post(f"/api/permits/{package['id']}/subcontractors", json={"subcontractorId": sub["id"]})

        listed = client.get("/api/subcontractors").json()
        assert listed[0]["packages"][0]["customerName"] == "John Doe"

        assert client.delete(f"/api/subcontractors/{sub['id']}").status_code == 200
        assert client.get(f"/api/permits/{package['id']}/subcontractors").json() == []
