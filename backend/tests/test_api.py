"""
HTTP tests: envelope, status codes and the main floor flow through the routers.
"""


def test_health_check(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "ronda-api"


def test_request_id_is_echoed_and_headers_set(client):
    response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_list_tables_envelope(client, seed_tables):
    response = client.get("/api/tables")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [t["number"] for t in body["data"]] == [1, 2, 3, 4]
    assert body["data"][0]["zone_name"] == "PRINCIPAL"


def test_unknown_table_is_404(client, db_session):
    response = client.get("/api/tables/999")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": "Mesa con ID 999 no encontrado",
        "code": "NOT_FOUND",
    }


def test_malformed_body_is_400_with_envelope(client, seed_table, seed_mozo):
    response = client.post(
        "/api/orders",
        json={"table_id": seed_table.id, "mozo_id": seed_mozo.id, "items": []},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_ERROR"
    assert "items" in body["error"]


def test_non_json_body_is_415(client, seed_zone):
    response = client.post(
        "/api/zones", content="name=VIP", headers={"Content-Type": "text/plain"}
    )

    assert response.status_code == 415


def test_duplicate_zone_is_409(client, seed_zone):
    response = client.post("/api/zones", json={"name": "Principal", "color": "#123456"})

    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_order_to_close_flow(client, seed_table, seed_mozo, seed_products):
    beer, empanada = seed_products

    submitted = client.post(
        "/api/orders",
        json={
            "table_id": seed_table.id,
            "mozo_id": seed_mozo.id,
            "items": [
                {"product_id": beer.id, "quantity": 2, "notes": "bien fría"},
                {"product_id": empanada.id, "quantity": 1},
            ],
        },
    )
    assert submitted.status_code == 201, submitted.json()
    order = submitted.json()["data"]
    assert order["ronda_total_cents"] == 250
    assert order["table_status"] == "ESPERANDO"

    feed = client.get("/api/orders", params={"status": "PENDIENTE"}).json()["data"]
    assert [o["id"] for o in feed] == [order["order_id"]]

    advanced = client.patch(f"/api/orders/{order['order_id']}/status", json={"status": "PREPARANDO"})
    assert advanced.status_code == 200
    assert advanced.json()["data"]["status"] == "PREPARANDO"

    ronda = client.get(f"/api/tables/{seed_table.id}/active-ronda").json()["data"]
    assert ronda["total_cents"] == 250
    assert len(ronda["orders"][0]["items"]) == 2

    closed = client.post(f"/api/tables/{seed_table.id}/close", json={"payment_method": "TARJETA"})
    assert closed.status_code == 200, closed.json()
    assert closed.json()["data"]["total_cents"] == 250

    idle = client.get(f"/api/tables/{seed_table.id}/active-ronda").json()
    assert idle == {"success": True, "data": None}
    assert client.get(f"/api/tables/{seed_table.id}").json()["data"]["status"] == "LIBRE"


def test_close_idle_table_is_404(client, seed_table):
    response = client.post(f"/api/tables/{seed_table.id}/close", json={"payment_method": "EFECTIVO"})

    assert response.status_code == 404


def test_group_and_ungroup_over_http(client, seed_tables):
    ids = [seed_tables[0].id, seed_tables[1].id]

    created = client.post("/api/table-groups", json={"table_ids": ids})
    assert created.status_code == 201
    group_id = created.json()["data"]["id"]

    assert len(client.get("/api/table-groups").json()["data"]) == 1

    dissolved = client.delete(f"/api/table-groups/{group_id}")
    assert dissolved.status_code == 200
    assert client.get("/api/table-groups").json()["data"] == []


def test_reservation_endpoints(client, seed_table, seed_admin):
    created = client.post(
        "/api/reservations",
        json={
            "table_id": seed_table.id,
            "customer_name": "Lucía",
            "party_size": 2,
            "reservation_time": "2026-03-14T21:00:00",
            "created_by_id": seed_admin.id,
        },
    )
    assert created.status_code == 201, created.json()
    reservation_id = created.json()["data"]["id"]

    overlapping = client.post(
        "/api/reservations",
        json={
            "table_id": seed_table.id,
            "customer_name": "Marcos",
            "party_size": 2,
            "reservation_time": "2026-03-14T22:00:00",
            "created_by_id": seed_admin.id,
        },
    )
    assert overlapping.status_code == 409

    on_day = client.get("/api/reservations", params={"date": "2026-03-14"}).json()["data"]
    assert [r["id"] for r in on_day] == [reservation_id]
    assert client.get("/api/reservations", params={"date": "2026-03-15"}).json()["data"] == []

    seated = client.post(f"/api/reservations/{reservation_id}/seat")
    assert seated.status_code == 200
    assert seated.json()["data"]["table_status"] == "OCUPADA"

    assert client.delete(f"/api/reservations/{reservation_id}").status_code == 409


def test_close_ronda_endpoint(client, seed_table):
    opened = client.post(f"/api/tables/{seed_table.id}/ronda")
    ronda_id = opened.json()["data"]["id"]

    closed = client.post(f"/api/rondas/{ronda_id}/close", json={"payment_method": "QR"})

    assert closed.status_code == 200
    assert closed.json()["data"]["total_cents"] == 0


def test_admin_endpoints(client, seed_tables, seed_products):
    users = client.post(
        "/api/admin/users", json={"name": "Barman Pedro", "email": "pedro@ronda.com", "role": "BARMAN"}
    )
    assert users.status_code == 201

    products = client.get("/api/admin/products", params={"product_type": "COCINA"}).json()["data"]
    assert [p["name"] for p in products] == ["Empanada de Carne"]

    stats = client.get("/api/admin/stats")
    assert stats.status_code == 200
    assert stats.json()["data"]["total_tables"] == 4


def test_malformed_request_id_is_replaced(client):
    response = client.get("/api/health", headers={"X-Request-ID": "not a valid id!"})

    echoed = response.headers["X-Request-ID"]
    assert echoed != "not a valid id!"
    assert len(echoed) == 32


def test_opened_ronda_keeps_table_busy_when_booked(client, seed_table, seed_admin):
    opened = client.post(f"/api/tables/{seed_table.id}/ronda")
    assert opened.status_code == 200
    assert client.get(f"/api/tables/{seed_table.id}").json()["data"]["status"] == "OCUPADA"

    booked = client.post(
        "/api/reservations",
        json={
            "table_id": seed_table.id,
            "customer_name": "Lucía",
            "party_size": 2,
            "reservation_time": "2026-03-14T21:00:00",
            "created_by_id": seed_admin.id,
        },
    )

    assert booked.status_code == 201
    assert client.get(f"/api/tables/{seed_table.id}").json()["data"]["status"] == "OCUPADA"
