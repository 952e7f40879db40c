from io import BytesIO

from openpyxl import Workbook

from utils.spreadsheet import VOUCHER_COLUMNS, XLSX_MEDIA_TYPE


def create_voucher(client, provider_id, **overrides):
    payload = {
        "provider_id": provider_id,
        "name": "5GB / 30 Hari",
        "total_stock": 10,
        "remaining_stock": 10,
        "planned_stock": 0,
        "cost_price": "10000",
        "sell_price": "12000",
    }
    payload.update(overrides)
    response = client.post("/vouchers/", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


def log_messages(client, type=None):
    params = {"type": type} if type else {}
    return [entry["message"] for entry in client.get("/activity-logs/", params=params).json()]


def test_tenant_header_is_required(client):
    response = client.get("/providers/", headers={"X-Tenant-ID": "  "})
    assert response.status_code == 400


def test_seed_default_providers_is_idempotent(client):
    first = client.post("/providers/seed-defaults").json()
    second = client.post("/providers/seed-defaults").json()

    assert [p["name"] for p in first] == ["Telkomsel", "IM3", "Three", "XL", "Axis", "Smartfren", "By.U"]
    assert [p["original_id"] for p in first] == list(range(1, 8))
    assert len(second) == 7


def test_provider_original_id_is_assigned_and_unique(client):
    first = client.post("/providers/", json={"name": "Telkomsel"}).json()
    second = client.post("/providers/", json={"name": "IM3"}).json()
    assert (first["original_id"], second["original_id"]) == (1, 2)

    duplicate = client.post("/providers/", json={"name": "Other", "original_id": 2})
    assert duplicate.status_code == 400


def test_providers_are_isolated_per_tenant(client, provider):
    response = client.get("/providers/", headers={"X-Tenant-ID": "tenant-b"})
    assert response.json() == []
    assert client.get(f"/providers/{provider['id']}", headers={"X-Tenant-ID": "tenant-b"}).status_code == 404


def test_update_and_delete_provider_cascades_vouchers(client, provider):
    create_voucher(client, provider["id"])

    updated = client.patch(f"/providers/{provider['id']}", json={"name": "Telkomsel Baru"})
    assert updated.json()["name"] == "Telkomsel Baru"

    assert client.delete(f"/providers/{provider['id']}").status_code == 200
    assert client.get("/vouchers/").json() == []
    assert log_messages(client, "DELETE_PROVIDER") == ['Provider "Telkomsel Baru" dihapus.']
    assert client.delete(f"/providers/{provider['id']}").status_code == 404


def test_upsert_creates_then_updates_by_name(client, provider):
    created = create_voucher(client, provider["id"])
    updated = create_voucher(client, provider["id"], remaining_stock=7)

    assert updated["id"] == created["id"]
    assert updated["remaining_stock"] == 7
    assert len(client.get("/vouchers/", params={"provider_id": provider["id"]}).json()) == 1
    assert log_messages(client, "EDIT") == [
        'Voucher "5GB / 30 Hari" diperbarui.',
        'Voucher "5GB / 30 Hari" ditambahkan.',
    ]


def test_upsert_without_sell_price_uses_auto_price(client, provider):
    voucher = create_voucher(client, provider["id"], sell_price=None, cost_price="10100")
    assert float(voucher["sell_price"]) == 12500

    client.post("/configurations/", json={"name": "voucher_markup", "value": "1000"})
    voucher = create_voucher(client, provider["id"], name="2GB / 7 Hari", sell_price=None, cost_price="10100")
    assert float(voucher["sell_price"]) == 11500


def test_upsert_for_unknown_provider_fails(client):
    response = client.post("/vouchers/", json={"provider_id": 999, "name": "1GB / 1 Hari"})
    assert response.status_code == 400


def test_update_voucher_rejects_duplicate_name(client, provider):
    create_voucher(client, provider["id"])
    other = create_voucher(client, provider["id"], name="1GB / 1 Hari")

    response = client.patch(f"/vouchers/{other['id']}", json={"name": "5GB / 30 Hari"})
    assert response.status_code == 400

    response = client.patch(f"/vouchers/{other['id']}", json={"planned_stock": 4})
    assert response.json()["planned_stock"] == 4
    assert client.patch("/vouchers/999", json={"planned_stock": 1}).status_code == 404


def test_add_stock_reduces_planned_stock(client, provider):
    voucher = create_voucher(client, provider["id"], total_stock=10, remaining_stock=2, planned_stock=5)

    response = client.post(f"/vouchers/{voucher['id']}/add-stock", json={"quantity": 8})

    body = response.json()
    assert (body["total_stock"], body["remaining_stock"], body["planned_stock"]) == (18, 10, 0)
    assert log_messages(client, "ADD_STOCK") == ['8 stok ditambahkan ke "5GB / 30 Hari".']
    assert client.post(f"/vouchers/{voucher['id']}/add-stock", json={"quantity": 0}).status_code == 422


def test_sale_sells_available_lines_and_reports_skipped(client, provider):
    big = create_voucher(client, provider["id"], remaining_stock=5, sell_price="12000")
    small = create_voucher(client, provider["id"], name="1GB / 1 Hari", remaining_stock=1, sell_price="5000")

    response = client.post("/vouchers/sale", json={"cart": {str(big["id"]): 2, str(small["id"]): 3, "999": 1}})

    assert response.status_code == 200
    result = response.json()
    assert float(result["total"]) == 24000
    assert [line["voucher_id"] for line in result["sold"]] == [big["id"]]
    assert sorted(line["voucher_id"] for line in result["skipped"]) == sorted([small["id"], 999])
    assert result["message"] == "Penjualan: 2x 5GB / 30 Hari | Total: Rp 24.000."
    assert client.get(f"/vouchers/{big['id']}").json()["remaining_stock"] == 3
    assert client.get(f"/vouchers/{small['id']}").json()["remaining_stock"] == 1
    assert log_messages(client, "SALE") == [result["message"]]


def test_sale_fails_when_nothing_can_be_sold(client, provider):
    voucher = create_voucher(client, provider["id"], remaining_stock=1)

    response = client.post("/vouchers/sale", json={"cart": {str(voucher["id"]): 2}})

    assert response.status_code == 400
    assert client.get(f"/vouchers/{voucher['id']}").json()["remaining_stock"] == 1
    assert log_messages(client, "SALE") == []


def test_delete_voucher_logs(client, provider):
    voucher = create_voucher(client, provider["id"])
    assert client.delete(f"/vouchers/{voucher['id']}").status_code == 200
    assert client.get(f"/vouchers/{voucher['id']}").status_code == 404
    assert log_messages(client, "DELETE_VOUCHER") == ['Voucher "5GB / 30 Hari" dihapus.']


def test_name_suggestions_and_auto_price_endpoints(client):
    assert client.get("/vouchers/name-suggestions", params={"q": "15gb / 30"}).json() == ["15GB / 30 Hari"]
    price = client.get("/vouchers/auto-price", params={"cost_price": "10000"}).json()
    assert float(price["sell_price"]) == 12000


def test_import_upserts_rows_and_creates_missing_providers(client, provider):
    wb = Workbook()
    ws = wb.active
    ws.append(VOUCHER_COLUMNS)
    ws.append([1, "5GB / 30 Hari", 10, 6, 10000, 12000, 2])
    ws.append([9, "1GB / 1 Hari", 4, None, 3000, None, None])
    ws.append([None, "No provider", 1, 1, 1000, 2000, 0])
    ws.append([2, "Negative stock", -5, 1, 1000, 2000, 0])
    buffer = BytesIO()
    wb.save(buffer)

    response = client.post(
        "/vouchers/import",
        files={"file": ("vouchers.xlsx", buffer.getvalue(), XLSX_MEDIA_TYPE)},
    )

    assert response.status_code == 200, response.text
    assert response.json() == {"imported": 2, "skipped_rows": [4, 5]}

    providers = {p["original_id"]: p for p in client.get("/providers/").json()}
    assert providers[9]["name"] == "Provider 9"

    vouchers = {v["name"]: v for v in client.get("/vouchers/").json()}
    assert vouchers["5GB / 30 Hari"]["provider_id"] == provider["id"]
    assert vouchers["1GB / 1 Hari"]["remaining_stock"] == 4
    assert float(vouchers["1GB / 1 Hari"]["sell_price"]) == 5000
    assert log_messages(client, "IMPORT") == ["Mengimpor 2 voucher dari Excel."]


def test_import_rejects_non_excel_upload(client):
    response = client.post("/vouchers/import", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400


def test_export_downloads_inventory(client, provider):
    create_voucher(client, provider["id"])

    response = client.get("/vouchers/export")

    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX_MEDIA_TYPE
    assert "attachment; filename=Voucher_" in response.headers["content-disposition"]
    assert response.content[:2] == b"PK"


def test_text_reports(client, provider):
    create_voucher(client, provider["id"], total_stock=10, remaining_stock=4, planned_stock=5)
    client.post("/tenants/initialize-configs")
    client.patch("/configurations/report_signature/", json={"value": "Mbak Sari"})

    complete = client.get("/reports/vouchers/complete")
    short = client.get("/reports/vouchers/short")

    assert complete.status_code == 200
    assert "Total Seluruh Penjualan : Rp 72.000" in complete.text
    assert complete.text.endswith("Created by : Mbak Sari")
    assert "Rp 50.000" in short.text


def test_tenant_configs_initialisation(client):
    assert client.get("/tenants/configs-initialized").json() == {"configs_initialized": False}

    created = client.post("/tenants/initialize-configs")
    assert created.status_code == 201
    assert set(created.json()["new_configs"]) == {"voucher_markup", "voucher_price_rounding", "business_name", "report_signature"}

    again = client.post("/tenants/initialize-configs").json()
    assert again["new_configs"] == []
    assert client.get("/tenants/configs-initialized").json() == {"configs_initialized": True}
    assert client.get("/configurations/", params={"name": "business_name"}).json()[0]["value"] == "UNI BRILINK"
    assert client.patch("/configurations/missing/", json={"value": "x"}).status_code == 404
