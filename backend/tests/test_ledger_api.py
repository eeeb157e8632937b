"""Inflows and outflows: creation, paging, stock checks and audit entries."""
from models.log import AuditLog
from models.stock import Inflow

from conftest import add_inflow, make_material


def _inflow_payload(catalog, material, **overrides):
    payload = {
        "materialId": str(material.id),
        "unitId": str(catalog["unit"].id),
        "projectId": str(catalog["project"].id),
        "quantity": "12.5",
        "unitPrice": "4",
        "deliveryDate": "2024-02-01T10:00:00Z",
        "receivedBy": "Store keeper",
        "supplierName": "Acme Supplies",
        "purpose": "Foundation pour",
    }
    payload.update(overrides)
    return payload


def _outflow_payload(catalog, material, **overrides):
    payload = {
        "materialId": str(material.id),
        "unitId": str(catalog["unit"].id),
        "projectId": str(catalog["project"].id),
        "quantity": "4",
        "releaseDate": "2024-02-03T08:30:00+02:00",
        "authorizedBy": "Site manager",
        "receivedBy": "Foreman",
        "purpose": "Columns",
    }
    payload.update(overrides)
    return payload


class TestInflows:

    def test_create_computes_total_and_records_creator(self, client, db_session, catalog, editor, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])

        resp = client.post("/api/inflows", json=_inflow_payload(catalog, material), headers=editor_headers)

        assert resp.status_code == 201
        body = resp.json()
        assert body["totalValue"] == 50.0
        assert body["quantity"] == 12.5
        assert body["createdBy"] == str(editor.id)
        assert body["materialName"] == "Cement"
        assert body["deliveryDate"].startswith("2024-02-01T10:00:00")

    def test_total_is_empty_without_price(self, client, db_session, catalog, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        payload = _inflow_payload(catalog, material)
        del payload["unitPrice"]

        body = client.post("/api/inflows", json=payload, headers=editor_headers).json()
        assert body["totalValue"] is None

    def test_quantity_must_be_positive(self, client, db_session, catalog, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])

        resp = client.post("/api/inflows", json=_inflow_payload(catalog, material, quantity="0"), headers=editor_headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid input"

    def test_unknown_project(self, client, db_session, catalog, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        payload = _inflow_payload(catalog, material, projectId="00000000-0000-0000-0000-000000000003")

        resp = client.post("/api/inflows", json=payload, headers=editor_headers)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Project not found"}

    def test_viewer_cannot_create(self, client, db_session, catalog, viewer_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        resp = client.post("/api/inflows", json=_inflow_payload(catalog, material), headers=viewer_headers)
        assert resp.status_code == 403

    def test_paged_listing_newest_first(self, client, db_session, catalog, editor, viewer_headers):
        from datetime import datetime
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        for hour, quantity in enumerate((1, 2, 3)):
            add_inflow(db_session, material, catalog["unit"], catalog["project"], editor, quantity,
                       created_at=datetime(2024, 1, 1, hour))

        first = client.get("/api/inflows?page=1&limit=2", headers=viewer_headers).json()
        second = client.get("/api/inflows?page=2&limit=2", headers=viewer_headers).json()

        assert [item["quantity"] for item in first["items"]] == [3.0, 2.0]
        assert [item["quantity"] for item in second["items"]] == [1.0]
        assert first["page"] == 1 and first["limit"] == 2

    def test_update_recomputes_total(self, client, db_session, catalog, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        inflow = client.post("/api/inflows", json=_inflow_payload(catalog, material), headers=editor_headers).json()

        resp = client.put(f"/api/inflows/{inflow['id']}", json={"quantity": "10"}, headers=editor_headers)

        assert resp.status_code == 200
        assert resp.json()["totalValue"] == 40.0

    def test_delete_is_hard_and_audited(self, client, db_session, catalog, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        inflow = client.post("/api/inflows", json=_inflow_payload(catalog, material), headers=editor_headers).json()

        assert client.delete(f"/api/inflows/{inflow['id']}", headers=editor_headers).status_code == 200
        assert client.get(f"/api/inflows/{inflow['id']}", headers=editor_headers).status_code == 404
        assert db_session.query(Inflow).count() == 0

        actions = [entry.action for entry in db_session.query(AuditLog).filter(AuditLog.table_name == "inflows")]
        assert sorted(actions) == ["CREATE", "DELETE"]


class TestOutflows:

    def test_release_within_stock(self, client, db_session, catalog, editor, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        add_inflow(db_session, material, catalog["unit"], catalog["project"], editor, 10)

        resp = client.post("/api/outflows", json=_outflow_payload(catalog, material), headers=editor_headers)

        assert resp.status_code == 201
        body = resp.json()
        assert body["isReturned"] is False
        # +02:00 normalized to UTC
        assert body["releaseDate"].startswith("2024-02-03T06:30:00")

        stock = client.get(f"/api/inventory/stock/{material.id}", headers=editor_headers).json()
        assert stock["currentStock"] == 6.0

    def test_insufficient_stock(self, client, db_session, catalog, editor, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        add_inflow(db_session, material, catalog["unit"], catalog["project"], editor, 10)

        resp = client.post("/api/outflows", json=_outflow_payload(catalog, material, quantity="15"),
                           headers=editor_headers)

        assert resp.status_code == 400
        assert resp.json() == {
            "error": "Insufficient stock",
            "details": {"available": 10.0, "requested": 15.0, "materialName": "Cement"},
        }

    def test_stock_is_counted_per_unit(self, client, db_session, catalog, editor, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        add_inflow(db_session, material, catalog["alt_unit"], catalog["project"], editor, 10)

        resp = client.post("/api/outflows", json=_outflow_payload(catalog, material), headers=editor_headers)
        assert resp.status_code == 400
        assert resp.json()["details"]["available"] == 0.0

    def test_mark_returned(self, client, db_session, catalog, editor, editor_headers):
        material = make_material(db_session, "Cement", catalog["category"], catalog["unit"])
        add_inflow(db_session, material, catalog["unit"], catalog["project"], editor, 10)
        outflow = client.post("/api/outflows", json=_outflow_payload(catalog, material), headers=editor_headers).json()

        resp = client.put(f"/api/outflows/{outflow['id']}",
                          json={"isReturned": True, "returnDate": "2024-02-10T00:00:00"},
                          headers=editor_headers)

        assert resp.status_code == 200
        assert resp.json()["isReturned"] is True
        assert resp.json()["returnDate"].startswith("2024-02-10")
