import pytest

from permitpro.errors import ConflictError
from permitpro.models.contractor import Contractor
from permitpro.services.package_service import PackageService
from permitpro.utils.timestamps import utc_timestamp


class TestContractorsAPI:
    def test_create_and_list(self, client, make_contractor):
        make_contractor(company_name="Zeta Homes")
        make_contractor(company_name="Acme Builders", email="office@acme.example")

        r = client.get("/api/contractors")
        assert r.status_code == 200
        data = r.json()
        assert [c["companyName"] for c in data] == ["Acme Builders", "Zeta Homes"]
        assert data[0]["email"] == "office@acme.example"
        assert data[0]["packages"] == []

    def test_duplicate_license(self, client, make_contractor):
        make_contractor(license_number="CGC-123456")
        r = client.post("/api/contractors", json={
            "companyName": "Copycat LLC",
            "licenseNumber": "CGC-123456",
            "address": "2 Elsewhere",
            "phoneNumber": "305-555-0199",
        })
        assert r.status_code == 409
        assert r.json()["licenseNumber"] == "CGC-123456"

    def test_missing_required_field(self, client):
        r = client.post("/api/contractors", json={"companyName": "Acme Builders"})
        assert r.status_code == 400

    def test_update(self, client, make_contractor):
        contractor = make_contractor()
        r = client.put(f"/api/contractors/{contractor['id']}", json={"contactPerson": "Ana Ruiz"})
        assert r.status_code == 200
        assert r.json()["contactPerson"] == "Ana Ruiz"
        assert r.json()["licenseNumber"] == contractor["licenseNumber"]

    def test_update_to_taken_license(self, client, make_contractor):
        make_contractor(license_number="CGC-1")
        other = make_contractor(license_number="CGC-2")
        r = client.put(f"/api/contractors/{other['id']}", json={"licenseNumber": "CGC-1"})
        assert r.status_code == 409

    def test_update_missing(self, client):
        r = client.put("/api/contractors/404", json={"contactPerson": "Nobody"})
        assert r.status_code == 404

    def test_delete_unreferenced(self, client, make_contractor):
        contractor = make_contractor()
        r = client.delete(f"/api/contractors/{contractor['id']}")
        assert r.status_code == 200
        assert client.get("/api/contractors").json() == []

    def test_delete_missing(self, client):
        assert client.delete("/api/contractors/404").status_code == 404

    def test_delete_with_packages_is_refused(self, client, make_contractor, make_package):
        contractor = make_contractor(license_number="CGC-9")
        first = make_package(contractorId=contractor["id"])
        second = make_package(customerName="Jane Smith", contractorLicense="CGC-9")
        make_package(customerName="Bob Johnson")

        r = client.delete(f"/api/contractors/{contractor['id']}")
        assert r.status_code == 409
        body = r.json()
        assert body["packageCount"] == 2
        assert [p["id"] for p in body["packages"]] == [first["id"], second["id"]]
        assert "reassign" in body["message"]

        listed = client.get("/api/contractors").json()
        assert [p["id"] for p in listed[0]["packages"]] == [first["id"], second["id"]]

    def test_reassign_then_delete(self, client, make_contractor, make_package):
        old = make_contractor(company_name="Old Co")
        new = make_contractor(company_name="New Co")
        first = make_package(contractorId=old["id"])
        second = make_package(customerName="Jane Smith", contractorId=old["id"])

        r = client.put(f"/api/contractors/{old['id']}/reassign-packages", json={"newContractorId": new["id"]})
        assert r.status_code == 200
        body = r.json()
        assert body["reassignedCount"] == 2
        assert body["newContractorName"] == "New Co"

        for package in (first, second):
            assert client.get(f"/api/permits/{package['id']}").json()["contractorId"] == new["id"]

        assert client.delete(f"/api/contractors/{old['id']}").status_code == 200

    def test_reassign_with_no_packages(self, client, make_contractor):
        old = make_contractor()
        new = make_contractor()
        r = client.put(f"/api/contractors/{old['id']}/reassign-packages", json={"newContractorId": new["id"]})
        assert r.status_code == 200
        assert r.json()["reassignedCount"] == 0

    def test_reassign_to_unknown_contractor(self, client, make_contractor, make_package):
        old = make_contractor()
        package = make_package(contractorId=old["id"])

        r = client.put(f"/api/contractors/{old['id']}/reassign-packages", json={"newContractorId": 999})
        assert r.status_code == 404
        assert client.get(f"/api/permits/{package['id']}").json()["contractorId"] == old["id"]

    def test_reassign_to_same_contractor(self, client, make_contractor):
        contractor = make_contractor()
        r = client.put(
            f"/api/contractors/{contractor['id']}/reassign-packages",
            json={"newContractorId": contractor["id"]},
        )
        assert r.status_code == 400


class TestContractorDeletion:
    def test_package_assigned_during_delete_is_a_conflict(self, db, test_db, monkeypatch):
        service = PackageService(db)
        contractor = Contractor(
            company_name="Acme Builders",
            license_number="CGC-555",
            address="1 Builder Way",
            phone_number="305-555-0100",
            created_at=utc_timestamp(),
            updated_at=utc_timestamp(),
        )
        db.add(contractor)
        db.commit()
        contractor_id = contractor.id

        real_delete = db.delete

        def delete_after_concurrent_assignment(obj):
            other = test_db()
            try:
                PackageService(other).create_package(
                    "Jane Smith", "456 Oak Ave", "Orange", "Shed Permit",
                    contractor_id=contractor_id,
                )
            finally:
                other.close()
            real_delete(obj)

        monkeypatch.setattr(db, "delete", delete_after_concurrent_assignment)

        with pytest.raises(ConflictError) as exc:
            service.delete_contractor(contractor_id)

        assert exc.value.details["packageCount"] == 1
        assert exc.value.details["packages"][0]["customerName"] == "Jane Smith"
        assert db.get(Contractor, contractor_id) is not None
