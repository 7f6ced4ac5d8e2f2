import pytest

from permitpro.errors import ConflictError, NotFoundError, ValidationError
from permitpro.models.checklist import ChecklistTemplate
from permitpro.services.checklist_service import DEFAULT_CHECKLIST_ITEMS, ChecklistService

MOBILE_HOME_ITEMS = [
    "Site Plan",
    "Foundation Design",
    "Manufacturer's Installation Instructions",
    "Electrical Permit",
    "Plumbing Permit",
    "HVAC Permit",
    "Soil Test Report",
    "Flood Zone Determination",
    "Property Survey",
    "Building Code Compliance Certificate",
]


class TestTemplateResolver:
    def test_creates_template_from_defaults(self, db):
        template = ChecklistService(db).resolve_template("Miami-Dade", "Mobile Home Permit")

        assert template.county == "Miami-Dade"
        assert [i.name for i in template.items] == MOBILE_HOME_ITEMS
        assert [i.order for i in template.items] == list(range(10))
        assert all(i.is_required and not i.is_custom for i in template.items)

    @pytest.mark.parametrize("permit_type", list(DEFAULT_CHECKLIST_ITEMS))
    def test_resolve_is_idempotent(self, db, permit_type):
        service = ChecklistService(db)
        first = service.resolve_template("Orange", permit_type)
        second = service.resolve_template("Orange", permit_type)

        assert first.id == second.id
        assert db.query(ChecklistTemplate).count() == 1

    def test_same_permit_type_differs_per_county(self, db):
        service = ChecklistService(db)
        a = service.resolve_template("Orange", "Shed Permit")
        b = service.resolve_template("Lake", "Shed Permit")
        assert a.id != b.id

    def test_lost_race_falls_back_to_existing_template(self, test_db, monkeypatch):
        winner_session = test_db()
        loser_session = test_db()
        try:
            loser = ChecklistService(loser_session)
            real_lookup = loser.find_template
            lookups = []

            def stale_lookup(county, permit_type):
                # First lookup runs before the winner commits
                lookups.append((county, permit_type))
                if len(lookups) == 1:
                    return None
                return real_lookup(county, permit_type)

            monkeypatch.setattr(loser, "find_template", stale_lookup)

            winner = ChecklistService(winner_session).resolve_template("Polk", "Modular Home Permit")
            resolved = loser.resolve_template("Polk", "Modular Home Permit")

            assert resolved.id == winner.id
            assert len(lookups) == 2
            assert [i.name for i in resolved.items] == [i.name for i in winner.items]
            assert loser_session.query(ChecklistTemplate).count() == 1
        finally:
            winner_session.close()
            loser_session.close()

    def test_create_duplicate_template_conflicts(self, db):
        service = ChecklistService(db)
        service.create_template("Lee", "Shed Permit")
        with pytest.raises(ConflictError):
            service.create_template("Lee", "Shed Permit")

    def test_unknown_permit_type_rejected(self, db):
        with pytest.raises(ValidationError):
            ChecklistService(db).resolve_template("Lee", "Pool Permit")


class TestTemplateMaintenance:
    def test_add_and_remove_custom_item(self, db):
        service = ChecklistService(db)
        template = service.resolve_template("Lee", "Shed Permit")

        item = service.add_custom_item(template.id, "HOA Approval Letter")
        assert item.is_custom
        assert item.order == len(DEFAULT_CHECKLIST_ITEMS["Shed Permit"])

        service.remove_custom_item(template.id, item.id)
        names = [i.name for i in service.get_template(template.id).items]
        assert "HOA Approval Letter" not in names

    def test_duplicate_custom_item_conflicts(self, db):
        service = ChecklistService(db)
        template = service.resolve_template("Lee", "Shed Permit")
        with pytest.raises(ConflictError):
            service.add_custom_item(template.id, "Site Plan")

    def test_default_items_cannot_be_removed(self, db):
        service = ChecklistService(db)
        template = service.resolve_template("Lee", "Shed Permit")
        with pytest.raises(ValidationError):
            service.remove_custom_item(template.id, template.items[0].id)

    def test_reset_restores_defaults(self, db):
        service = ChecklistService(db)
        template = service.resolve_template("Lee", "Shed Permit")
        service.add_custom_item(template.id, "Tree Removal Permit")

        reset = service.reset_template(template.id)
        assert [i.name for i in reset.items] == DEFAULT_CHECKLIST_ITEMS["Shed Permit"]

    def test_missing_template(self, db):
        with pytest.raises(NotFoundError):
            ChecklistService(db).get_template(999)


class TestChecklistTemplatesAPI:
    def test_create_and_list_templates(self, client):
        r = client.post("/api/checklist-templates", json={
            "county": "Broward",
            "permitType": "Shed Permit",
        })
        assert r.status_code == 201
        assert len(r.json()["items"]) == 6

        r = client.get("/api/checklist-templates", params={"county": "Broward"})
        assert r.status_code == 200
        assert [t["permitType"] for t in r.json()] == ["Shed Permit"]

    def test_create_with_explicit_items(self, client):
        r = client.post("/api/checklist-templates", json={
            "county": "Monroe",
            "permitType": "Shed Permit",
            "items": ["Site Plan", "Wind Load Certification"],
        })
        assert r.status_code == 201
        assert [i["name"] for i in r.json()["items"]] == ["Site Plan", "Wind Load Certification"]

    def test_duplicate_template_returns_409(self, client):
        body = {"county": "Broward", "permitType": "Shed Permit"}
        client.post("/api/checklist-templates", json=body)
        r = client.post("/api/checklist-templates", json=body)
        assert r.status_code == 409
        assert r.json()["county"] == "Broward"

    def test_invalid_permit_type_returns_400(self, client):
        r = client.post("/api/checklist-templates", json={"county": "Broward", "permitType": "Barn"})
        assert r.status_code == 400

    def test_custom_item_endpoints(self, client):
        template = client.post("/api/checklist-templates", json={
            "county": "Broward", "permitType": "Shed Permit",
        }).json()

        r = client.post(f"/api/checklist-templates/{template['id']}/items", json={"name": "Anchoring Plan"})
        assert r.status_code == 201
        item = r.json()
        assert item["isCustom"] is True

        r = client.delete(f"/api/checklist-templates/{template['id']}/items/{item['id']}")
        assert r.status_code == 200

        r = client.delete(f"/api/checklist-templates/{template['id']}/items/{item['id']}")
        assert r.status_code == 404

    def test_export_then_import_into_other_county(self, client):
        template = client.post("/api/checklist-templates", json={
            "county": "Broward", "permitType": "Shed Permit",
        }).json()
        client.post(f"/api/checklist-templates/{template['id']}/items", json={"name": "Anchoring Plan"})

        exported = client.get(f"/api/checklist-templates/{template['id']}/export").json()
        assert exported["customItems"] == ["Anchoring Plan"]
        assert exported["exportDate"]

        exported["county"] = "Collier"
        r = client.post("/api/checklist-templates/import", json=exported)
        assert r.status_code == 200
        imported = r.json()
        assert imported["county"] == "Collier"
        assert imported["items"][-1]["name"] == "Anchoring Plan"
        assert imported["items"][-1]["isCustom"] is True

    def test_reset_endpoint(self, client):
        template = client.post("/api/checklist-templates", json={
            "county": "Broward", "permitType": "Shed Permit",
        }).json()
        client.post(f"/api/checklist-templates/{template['id']}/items", json={"name": "Anchoring Plan"})

        r = client.post(f"/api/checklist-templates/{template['id']}/reset")
        assert r.status_code == 200
        assert [i["name"] for i in r.json()["items"]] == DEFAULT_CHECKLIST_ITEMS["Shed Permit"]
