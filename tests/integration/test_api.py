"""
Integration tests for the FuelEU Ledger API.

Ledger endpoints run against the SQLite test session with the shared
test fleet as fuel data source.
"""

import pytest

from api.repository import SqlLedgerStore, route_lookup
from api.state import get_engine
from conftest import DEFICIT_SHIP, SURPLUS_SHIP, SWING_SHIP
from src.compliance.engine import ComplianceEngine
from src.compliance.fuel_data import RouteFuelDataSource, RouteRecord
from src.compliance.locks import ShipLocks


@pytest.fixture
def ledger_client(client, db, fuel_source):
    """Client whose engine reads the test fleet instead of the mock source."""
    from api.main import app

    app.dependency_overrides[get_engine] = lambda: ComplianceEngine(
        SqlLedgerStore(db), fuel_source, ShipLocks()
    )
    return client


@pytest.fixture
def routes_client(client, db):
    """Client whose engine reads the route registry with no fallback."""
    from api.main import app

    app.dependency_overrides[get_engine] = lambda: ComplianceEngine(
        SqlLedgerStore(db), RouteFuelDataSource(route_lookup(db)), ShipLocks()
    )
    return client


def route_payload(route_id, intensity, **overrides):
    payload = {
        "route_id": route_id,
        "vessel_type": "Container",
        "fuel_type": "HFO",
        "year": 2025,
        "ghg_intensity": intensity,
        "fuel_consumption_t": 5000.0,
        "distance_km": 12000.0,
        "total_emissions_t": 5000.0 * intensity,
    }
    payload.update(overrides)
    return payload


def assert_rejected(response, status, reason, kind):
    assert response.status_code == status
    body = response.json()
    assert body["success"] is False
    assert body["reason"] == reason
    assert body["kind"] == kind
    assert body["message"]


# =============================================================================
# System
# =============================================================================

class TestSystem:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "FuelEU Ledger API"
        assert data["status"] == "operational"
        assert "banking" in data["endpoints"]

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "ok"
        assert data["fuel_data_source"] == "mock"

    def test_request_id_and_security_headers(self, client):
        response = client.get("/", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"
        assert response.headers["X-Content-Type-Options"] == "nosniff"


# =============================================================================
# Compliance
# =============================================================================

class TestComplianceReference:
    def test_target(self, client):
        response = client.get("/api/compliance/target", params={"year": 2030})
        assert response.status_code == 200
        assert response.json() == {"year": 2030, "target": 85.6904}

    def test_target_before_regime(self, client):
        assert client.get("/api/compliance/target", params={"year": 2024}).json()["target"] == 91.16

    def test_limits(self, client):
        data = client.get("/api/compliance/limits").json()
        assert data["reference_ghg"] == 91.16
        assert data["limits"][0]["start_year"] == 2025
        assert data["limits"][0]["target"] == 89.3368
        assert data["limits"][-1]["end_year"] is None

    def test_fuel_types(self, client):
        fuels = {f["id"]: f for f in client.get("/api/compliance/fuel-types").json()["fuel_types"]}
        assert fuels["hfo"]["lcv_mj_per_g"] == 0.0405
        assert "lng" in fuels

    def test_intensity(self, client):
        response = client.post("/api/compliance/intensity", json={
            "fuels": [{"fuel_type": "HFO", "mass_t": 100}],
            "year": 2025,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["ghg_intensity"] == pytest.approx(91.74)
        assert data["energy_mj"] == pytest.approx(4_050_000.0)
        assert data["target"] == 89.3368
        assert data["compliance_balance_gco2eq"] < 0

    def test_intensity_unknown_fuel(self, client):
        response = client.post("/api/compliance/intensity", json={
            "fuels": [{"fuel_type": "unobtainium", "mass_t": 1}],
        })
        assert_rejected(response, 400, None, "invalid_input")

    def test_missing_query_parameter(self, client):
        response = client.get("/api/compliance/cb", params={"year": 2025})
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["kind"] == "validation_error"
        assert body["detail"]


class TestComplianceBalance:
    def test_default_mock_source(self, client):
        data = client.get("/api/compliance/cb", params={"shipId": "ANY", "year": 2025}).json()
        assert data["cb_gco2eq"] == pytest.approx(-5_816_000.0)
        assert data["ghgie_actual"] == pytest.approx(90.5)
        assert data["is_compliant"] is False
        assert data["deficit"] == pytest.approx(5_816_000.0)

    def test_surplus(self, ledger_client):
        data = ledger_client.get(
            "/api/compliance/cb", params={"shipId": SURPLUS_SHIP, "year": 2025}
        ).json()
        assert data["cb_gco2eq"] == pytest.approx(4_336_800.0)
        assert data["surplus"] == pytest.approx(4_336_800.0)
        assert data["deficit"] is None

    def test_adjusted(self, ledger_client):
        data = ledger_client.get(
            "/api/compliance/adjusted-cb", params={"shipId": DEFICIT_SHIP, "year": 2025}
        ).json()
        assert data == {"ship_id": DEFICIT_SHIP, "year": 2025, "adjusted_cb": -5_816_000.0}

    def test_penalty(self, ledger_client):
        response = ledger_client.get(
            "/api/compliance/penalty",
            params={"shipId": DEFICIT_SHIP, "year": 2025, "consecutiveYears": 2},
        )
        assert response.status_code == 200
        assert response.json()["penalty_eur"] == 4138

    def test_penalty_rejects_zero_years(self, ledger_client):
        response = ledger_client.get(
            "/api/compliance/penalty",
            params={"shipId": DEFICIT_SHIP, "year": 2025, "consecutiveYears": 0},
        )
        assert response.status_code == 422


# =============================================================================
# Banking
# =============================================================================

class TestBanking:
    def test_bank_and_apply(self, ledger_client):
        response = ledger_client.post("/api/banking/bank", json={
            "shipId": SWING_SHIP, "year": 2025, "amount": 2_000_000,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["entry"]["amount"] == 2_000_000
        assert data["available_surplus"] == pytest.approx(336_800.0)

        response = ledger_client.post("/api/banking/apply", json={
            "shipId": SWING_SHIP, "year": 2030, "amount": 500_000,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["cb_before"] == pytest.approx(-1_309_600.0)
        assert data["cb_after"] == pytest.approx(-809_600.0)

        balance = ledger_client.get("/api/banking/balance", params={"shipId": SWING_SHIP}).json()
        assert balance["total_banked"] == pytest.approx(1_500_000.0)
        assert len(balance["entries"]) == 1

        records = ledger_client.get("/api/banking/records", params={"shipId": SWING_SHIP}).json()
        assert records["records"][0]["banked_amount"] == 2_000_000

    def test_snake_case_body_accepted(self, ledger_client):
        response = ledger_client.post("/api/banking/bank", json={
            "ship_id": SURPLUS_SHIP, "year": 2025, "amount": 1_000,
        })
        assert response.status_code == 200

    def test_no_surplus(self, ledger_client):
        response = ledger_client.post("/api/banking/bank", json={
            "shipId": DEFICIT_SHIP, "year": 2025, "amount": 1_000,
        })
        assert_rejected(response, 409, "no_surplus", "state_conflict")

    def test_insufficient_surplus(self, ledger_client):
        response = ledger_client.post("/api/banking/bank", json={
            "shipId": SURPLUS_SHIP, "year": 2025, "amount": 10_000_000,
        })
        assert_rejected(response, 422, "insufficient_surplus", "insufficient_resource")

    def test_invalid_amount(self, ledger_client):
        response = ledger_client.post("/api/banking/bank", json={
            "shipId": SURPLUS_SHIP, "year": 2025, "amount": -5,
        })
        assert_rejected(response, 400, "invalid_amount", "invalid_input")

    def test_apply_without_bank(self, ledger_client):
        response = ledger_client.post("/api/banking/apply", json={
            "shipId": DEFICIT_SHIP, "year": 2025, "amount": 1_000,
        })
        assert_rejected(response, 422, "insufficient_banked", "insufficient_resource")


# =============================================================================
# Borrowing
# =============================================================================

class TestBorrowing:
    def test_validate_and_borrow(self, ledger_client):
        validation = ledger_client.get(
            "/api/borrowing/validate", params={"shipId": DEFICIT_SHIP, "year": 2025}
        ).json()
        assert validation["can_borrow"] is True
        assert validation["max_allowed_acs"] == pytest.approx(8_933_680.0)

        response = ledger_client.post("/api/borrowing/borrow", json={
            "shipId": DEFICIT_SHIP, "year": 2025,
        })
        assert response.status_code == 200
        assert response.json()["aggravated_amount"] == pytest.approx(6_397_600.0)

        history = ledger_client.get(
            "/api/borrowing/history", params={"shipId": DEFICIT_SHIP}
        ).json()
        assert [e["year"] for e in history["entries"]] == [2025]

        adjusted = ledger_client.get(
            "/api/compliance/adjusted-cb", params={"shipId": DEFICIT_SHIP, "year": 2026}
        ).json()
        assert adjusted["adjusted_cb"] == pytest.approx(-12_213_600.0)

    def test_refusal_is_reported_with_200(self, ledger_client):
        response = ledger_client.get(
            "/api/borrowing/validate", params={"shipId": SURPLUS_SHIP, "year": 2025}
        )
        assert response.status_code == 200
        assert response.json()["can_borrow"] is False
        assert response.json()["reason"] == "no_deficit"

    def test_already_borrowed(self, ledger_client):
        body = {"shipId": DEFICIT_SHIP, "year": 2025}
        assert ledger_client.post("/api/borrowing/borrow", json=body).status_code == 200
        response = ledger_client.post("/api/borrowing/borrow", json=body)
        assert_rejected(response, 409, "already_borrowed", "state_conflict")

    def test_consecutive(self, ledger_client):
        ledger_client.post("/api/borrowing/borrow", json={"shipId": DEFICIT_SHIP, "year": 2025})
        response = ledger_client.post("/api/borrowing/borrow", json={
            "shipId": DEFICIT_SHIP, "year": 2026,
        })
        assert_rejected(response, 409, "consecutive_borrow", "state_conflict")


# =============================================================================
# Pools
# =============================================================================

class TestPools:
    def test_create_and_get(self, client):
        response = client.post("/api/pools", json={
            "year": 2025,
            "members": [
                {"shipId": "S1", "cbBefore": 10_000},
                {"shipId": "S2", "cbBefore": -5_000},
            ],
        })
        assert response.status_code == 201
        data = response.json()
        assert data["total_cb_before"] == 5_000
        assert {m["ship_id"]: m["cb_after"] for m in data["members"]} == {"S1": 5_000, "S2": 0}

        fetched = client.get(f"/api/pools/{data['pool_id']}")
        assert fetched.status_code == 200
        assert fetched.json()["members"] == data["members"]

    def test_negative_pool(self, client):
        response = client.post("/api/pools", json={
            "year": 2025,
            "members": [
                {"shipId": "S1", "cbBefore": -10_000},
                {"shipId": "S2", "cbBefore": 5_000},
            ],
        })
        assert_rejected(response, 409, "pool_negative", "state_conflict")
        assert "negative" in response.json()["message"]

    def test_duplicate_members(self, client):
        response = client.post("/api/pools", json={
            "year": 2025,
            "members": [
                {"shipId": "S1", "cbBefore": 10},
                {"shipId": "S1", "cbBefore": -5},
            ],
        })
        assert_rejected(response, 400, "invalid_members", "invalid_input")

    def test_validate(self, client):
        response = client.post("/api/pools/validate", json={
            "members": [{"shipId": "S1", "cbBefore": -1}],
        })
        assert response.status_code == 200
        assert response.json() == {
            "is_valid": False,
            "message": "Pool total CB is negative (-1.0). Cannot create pool.",
            "reason": "pool_negative",
        }

    def test_unknown_pool(self, client):
        response = client.get("/api/pools/does-not-exist")
        assert_rejected(response, 404, None, "not_found")


# =============================================================================
# Routes
# =============================================================================

class TestRoutes:
    def test_create_list_get(self, client):
        assert client.post("/api/routes", json=route_payload("R001", 91.0)).status_code == 201
        assert client.post(
            "/api/routes", json=route_payload("R002", 88.0, fuel_type="LNG")
        ).status_code == 201

        routes = client.get("/api/routes").json()["routes"]
        assert [r["route_id"] for r in routes] == ["R001", "R002"]

        lng = client.get("/api/routes", params={"fuelType": "LNG"}).json()["routes"]
        assert [r["route_id"] for r in lng] == ["R002"]

        assert client.get("/api/routes/R002").json()["ghg_intensity"] == 88.0

    def test_unknown_route(self, client):
        assert_rejected(client.get("/api/routes/R404"), 404, None, "not_found")

    def test_duplicate_route(self, client):
        client.post("/api/routes", json=route_payload("R001", 91.0))
        response = client.post("/api/routes", json=route_payload("R001", 91.0))
        assert_rejected(response, 409, None, "state_conflict")

    def test_comparison(self, client):
        client.post("/api/routes", json=route_payload("R001", 91.0, is_baseline=True))
        client.post("/api/routes", json=route_payload("R002", 88.0))

        data = client.get("/api/routes/comparison").json()
        assert data["baseline"]["route_id"] == "R001"
        assert data["target"] == 89.3368
        [comparison] = data["comparisons"]
        assert comparison["route"]["route_id"] == "R002"
        assert comparison["percent_diff"] == -3.3
        assert comparison["is_compliant"] is True

    def test_comparison_without_baseline(self, client):
        client.post("/api/routes", json=route_payload("R001", 91.0))
        assert_rejected(client.get("/api/routes/comparison"), 404, None, "not_found")

    def test_single_baseline(self, client):
        client.post("/api/routes", json=route_payload("R001", 91.0, is_baseline=True))
        client.post("/api/routes", json=route_payload("R002", 88.0))

        response = client.post("/api/routes/R002/baseline")
        assert response.status_code == 200
        assert response.json()["is_baseline"] is True
        assert client.get("/api/routes/R001").json()["is_baseline"] is False


class TestRouteFuelData:
    def test_balance_from_route(self, routes_client):
        routes_client.post("/api/routes", json=route_payload("R001", 91.0))

        data = routes_client.get(
            "/api/compliance/cb", params={"shipId": "R001", "year": 2025}
        ).json()
        assert data["energy_scope_mj"] == pytest.approx(202_500_000.0)
        assert data["ghgie_actual"] == pytest.approx(91.0)

    def test_no_compliance_data(self, routes_client):
        response = routes_client.get("/api/compliance/cb", params={"shipId": "R999", "year": 2025})
        assert_rejected(response, 404, "no_compliance_data", "not_found")

    def test_no_compliance_data_on_bank(self, routes_client):
        response = routes_client.post("/api/banking/bank", json={
            "shipId": "R999", "year": 2025, "amount": 1,
        })
        assert_rejected(response, 404, "no_compliance_data", "not_found")


class TestPenaltyWithoutEnergy:
    @staticmethod
    def laid_up_after_2025(ship_id, year):
        return RouteRecord(
            route_id=ship_id, fuel_type="HFO", year=year,
            ghg_intensity=91.0, fuel_consumption_t=100.0 if year == 2025 else 0.0,
        )

    def test_conflict_instead_of_server_error(self, client, db):
        from api.main import app

        app.dependency_overrides[get_engine] = lambda: ComplianceEngine(
            SqlLedgerStore(db), RouteFuelDataSource(self.laid_up_after_2025), ShipLocks()
        )
        assert client.post(
            "/api/borrowing/borrow", json={"shipId": "LAID-UP", "year": 2025}
        ).status_code == 200

        response = client.get(
            "/api/compliance/penalty", params={"shipId": "LAID-UP", "year": 2026}
        )
        assert_rejected(response, 409, "no_penalty_basis", "state_conflict")
