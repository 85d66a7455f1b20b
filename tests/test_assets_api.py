from datetime import timedelta


def test_requires_authentication(lab_client):
    response = lab_client.get("/api/assets/")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_create_asset_defaults(create_asset):
    asset = create_asset()

    assert asset["status"] == "available"
    assert asset["condition"] == "good"
    assert asset["quantity"] == 1
    assert asset["is_low_stock"] is False
    assert asset["last_updated_by"] == "Asha Assistant"


def test_consumable_serial_number_is_dropped(create_asset):
    asset = create_asset(asset_type="consumable", serial_number="SHOULD-GO",
                         quantity=10, min_quantity=2)
    assert asset["serial_number"] is None


def test_duplicate_serial_number_is_rejected(lab_client, assistant_headers, create_asset):
    create_asset(serial_number="DUP-1")

    response = lab_client.post("/api/assets/", json={
        "asset_name": "Second scope",
        "category": "Electronics",
        "asset_type": "non-consumable",
        "serial_number": "DUP-1",
        "lab_location": "Lab A",
    }, headers=assistant_headers)

    assert response.status_code == 400
    assert "DUP-1" in response.json()["message"]


def test_missing_required_field_is_a_400(lab_client, assistant_headers):
    response = lab_client.post("/api/assets/", json={
        "asset_name": "No category",
        "asset_type": "consumable",
        "lab_location": "Lab A",
    }, headers=assistant_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_maintenance_cycle_on_consumable_is_rejected(lab_client, assistant_headers):
    response = lab_client.post("/api/assets/", json={
        "asset_name": "Pipette tips",
        "category": "Consumables",
        "asset_type": "consumable",
        "lab_location": "Lab A",
        "maintenance_cycle_days": 60,
    }, headers=assistant_headers)

    assert response.status_code == 400
    assert "non-consumable" in response.json()["message"]


def test_short_cycle_is_rejected(lab_client, assistant_headers):
    response = lab_client.post("/api/assets/", json={
        "asset_name": "Microscope",
        "category": "Optics",
        "asset_type": "non-consumable",
        "lab_location": "Lab A",
        "maintenance_cycle_days": 20,
    }, headers=assistant_headers)

    assert response.status_code == 400


def test_month_cycle_seeds_next_due(create_asset, today):
    asset = create_asset(maintenance_cycle_months=2)

    assert asset["maintenance_cycle_days"] == 60
    assert asset["next_maintenance_due"] == (today + timedelta(days=60)).isoformat()


def test_derived_fields_cannot_be_written_by_clients(lab_client, assistant_headers, create_asset):
    asset = create_asset(asset_type="consumable", quantity=5, min_quantity=1)

    response = lab_client.put(f"/api/assets/{asset['id']}", json={
        "is_low_stock": True,
        "notes": "restocked",
    }, headers=assistant_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["is_low_stock"] is False
    assert data["notes"] == "restocked"


def test_update_recomputes_low_stock(lab_client, assistant_headers, create_asset):
    asset = create_asset(asset_type="consumable", quantity=5, min_quantity=1)

    response = lab_client.put(f"/api/assets/{asset['id']}", json={"min_quantity": 8},
                              headers=assistant_headers)

    assert response.status_code == 200
    assert response.json()["data"]["is_low_stock"] is True


def test_quantity_patch(lab_client, assistant_headers, create_asset):
    asset = create_asset(asset_type="consumable", quantity=5, min_quantity=3)
    url = f"/api/assets/{asset['id']}/quantity"

    response = lab_client.patch(url, json={"quantity_change": -3}, headers=assistant_headers)
    assert response.status_code == 200
    assert response.json()["data"]["quantity"] == 2
    assert response.json()["data"]["is_low_stock"] is True

    response = lab_client.patch(url, json={"quantity_change": -5}, headers=assistant_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Quantity cannot be negative"

    current = lab_client.get(f"/api/assets/{asset['id']}", headers=assistant_headers)
    assert current.json()["data"]["quantity"] == 2


def test_status_patch(lab_client, assistant_headers, create_asset):
    asset = create_asset()

    response = lab_client.patch(f"/api/assets/{asset['id']}/status",
                                json={"status": "in_use"}, headers=assistant_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "in_use"

    response = lab_client.patch(f"/api/assets/{asset['id']}/status",
                                json={"status": "lost"}, headers=assistant_headers)
    assert response.status_code == 400


def test_maintenance_cycle_patch(lab_client, assistant_headers, create_asset, today):
    asset = create_asset()
    url = f"/api/assets/{asset['id']}/maintenance-cycle"

    response = lab_client.patch(url, json={"maintenance_cycle_days": 90}, headers=assistant_headers)
    assert response.status_code == 200
    assert response.json()["data"]["next_maintenance_due"] == (today + timedelta(days=90)).isoformat()

    response = lab_client.patch(url, json={"maintenance_cycle_days": None}, headers=assistant_headers)
    assert response.status_code == 200
    assert response.json()["data"]["next_maintenance_due"] is None

    response = lab_client.patch(url, json={"maintenance_cycle_days": 7}, headers=assistant_headers)
    assert response.status_code == 400


def test_get_unknown_asset_is_404(lab_client, assistant_headers):
    response = lab_client.get("/api/assets/00000000-0000-0000-0000-000000000000",
                              headers=assistant_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Asset not found"


def test_list_filters_and_search(lab_client, assistant_headers, create_asset):
    create_asset(asset_name="Bunsen burner", category="Chemistry", lab_location="Lab B")
    create_asset(asset_name="Oscilloscope", serial_number="OSC-42", lab_location="Lab A")

    by_location = lab_client.get("/api/assets/", params={"lab_location": "Lab B"},
                                 headers=assistant_headers).json()
    assert by_location["count"] == 1
    assert by_location["data"][0]["asset_name"] == "Bunsen burner"

    by_serial = lab_client.get("/api/assets/", params={"search": "osc-4"},
                               headers=assistant_headers).json()
    assert [a["serial_number"] for a in by_serial["data"]] == ["OSC-42"]

    by_category = lab_client.get("/api/assets/", params={"category": "Chemistry"},
                                 headers=assistant_headers).json()
    assert by_category["count"] == 1


def test_sort_by_low_stock(lab_client, assistant_headers, create_asset):
    create_asset(asset_name="Gloves", asset_type="consumable", quantity=50)
    create_asset(asset_name="Filters", asset_type="consumable", quantity=3)

    response = lab_client.get("/api/assets/", params={"sort_by": "lowStock"},
                              headers=assistant_headers)
    assert [a["asset_name"] for a in response.json()["data"]] == ["Filters", "Gloves"]


def test_alert_endpoints(lab_client, assistant_headers, create_asset, today):
    create_asset(asset_name="Gloves", asset_type="consumable", quantity=1, min_quantity=10)
    create_asset(asset_name="Scope", warranty_expiry_date=(today + timedelta(days=10)).isoformat())
    create_asset(asset_name="Old scope", warranty_expiry_date=(today + timedelta(days=90)).isoformat())
    create_asset(asset_name="Due soon", last_maintenance_date=(today - timedelta(days=27)).isoformat(),
                 maintenance_cycle_days=30)
    create_asset(asset_name="Overdue", last_maintenance_date=(today - timedelta(days=40)).isoformat(),
                 maintenance_cycle_days=30)
    create_asset(asset_name="Busy", status="under_maintenance",
                 last_maintenance_date=(today - timedelta(days=27)).isoformat(),
                 maintenance_cycle_days=30)
    create_asset(asset_name="Busy late", status="under_maintenance",
                 last_maintenance_date=(today - timedelta(days=40)).isoformat(),
                 maintenance_cycle_days=30)

    def names(path):
        response = lab_client.get(path, headers=assistant_headers)
        assert response.status_code == 200
        return [a["asset_name"] for a in response.json()["data"]]

    assert names("/api/assets/alerts/low-stock") == ["Gloves"]
    assert names("/api/assets/alerts/warranty-expiring") == ["Scope"]
    assert names("/api/assets/alerts/maintenance-due-soon") == ["Due soon"]
    assert names("/api/assets/alerts/maintenance-overdue") == ["Overdue"]


def test_warranty_alert_follows_stored_flag(lab_client, assistant_headers, create_asset, today):
    asset = create_asset(asset_name="Scope", warranty_expiry_date=(today + timedelta(days=10)).isoformat())

    cleared = lab_client.put(f"/api/assets/{asset['id']}", json={"warranty_expiry_date": None},
                             headers=assistant_headers).json()["data"]
    assert cleared["warranty_expiry_date"] is None
    assert cleared["is_warranty_expiring"] is True

    alert = lab_client.get("/api/assets/alerts/warranty-expiring", headers=assistant_headers).json()
    assert [a["asset_name"] for a in alert["data"]] == ["Scope"]

    stats = lab_client.get("/api/assets/stats/dashboard", headers=assistant_headers).json()["data"]
    assert stats["warranty_expiring_assets"] == 1


def test_dashboard_stats(lab_client, assistant_headers, create_asset):
    create_asset(category="Electronics", lab_location="Lab A")
    create_asset(category="Chemistry", lab_location="Lab B", status="in_use")
    create_asset(asset_type="consumable", category="Chemistry", quantity=0, min_quantity=4)

    stats = lab_client.get("/api/assets/stats/dashboard", headers=assistant_headers).json()["data"]

    assert stats["total_assets"] == 3
    assert stats["available_assets"] == 2
    assert stats["in_use_assets"] == 1
    assert stats["low_stock_assets"] == 1
    assert stats["categories"] == ["Chemistry", "Electronics"]
    assert stats["lab_locations"] == ["Lab A", "Lab B"]


def test_assets_by_location(lab_client, assistant_headers, create_asset):
    create_asset(asset_name="Beta", lab_location="Physics Lab")
    create_asset(asset_name="Alpha", lab_location="Physics Lab")
    create_asset(asset_name="Gamma", lab_location="Chem Lab")

    response = lab_client.get("/api/assets/location/Physics Lab", headers=assistant_headers)
    assert [a["asset_name"] for a in response.json()["data"]] == ["Alpha", "Beta"]


def test_delete_asset(lab_client, assistant_headers, create_asset):
    asset = create_asset()

    response = lab_client.delete(f"/api/assets/{asset['id']}", headers=assistant_headers)
    assert response.status_code == 200

    response = lab_client.get(f"/api/assets/{asset['id']}", headers=assistant_headers)
    assert response.status_code == 404
