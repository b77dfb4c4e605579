#!/usr/bin/env python3
"""
FuelEU Ledger CLI Tool.

Command-line interface for administrative tasks:
- Database operations (create tables, seed the route registry)
- Ledger lookups (targets, compliance balances, bank balances)
- Health checks

Usage:
    python -m api.cli init-db
    python -m api.cli seed-routes
    python -m api.cli target --year 2030
    python -m api.cli balance --ship R001 --year 2025
    python -m api.cli bank-balance --ship R001
    python -m api.cli check-health
"""
import argparse
import sys

# Ensure imports work
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))


# Registry rows loaded by seed-routes: ghg intensity (gCO2eq/MJ),
# fuel consumption (t), distance (km)
SEED_ROUTES = [
    ("R001", "Container", "HFO", 2024, 91.0, 5000.0, 12000.0),
    ("R002", "BulkCarrier", "LNG", 2024, 88.0, 4800.0, 11500.0),
    ("R003", "Tanker", "MGO", 2024, 93.5, 5100.0, 12500.0),
    ("R004", "RoRo", "HFO", 2025, 89.2, 4900.0, 11800.0),
    ("R005", "Container", "LNG", 2025, 90.5, 4950.0, 11900.0),
]


def init_db() -> None:
    """Initialize the database."""
    from api.database import init_db as do_init

    print("Initializing database...")
    do_init()
    print("Database initialized successfully.")


def seed_routes() -> None:
    """Load the sample route registry (skips routes that already exist)."""
    from api.database import get_db_context
    from api.models import Route

    added = 0
    with get_db_context() as db:
        for route_id, vessel, fuel, year, intensity, consumption, distance in SEED_ROUTES:
            if db.query(Route).filter(Route.route_id == route_id).first():
                continue
            db.add(Route(
                route_id=route_id,
                vessel_type=vessel,
                fuel_type=fuel,
                year=year,
                ghg_intensity=intensity,
                fuel_consumption_t=consumption,
                distance_km=distance,
                total_emissions_t=consumption * intensity,
                is_baseline=(route_id == "R001"),
            ))
            added += 1

    print(f"\nSeeded {added} route(s) ({len(SEED_ROUTES) - added} already present).")


def show_target(year: int) -> None:
    """Print the GHG intensity target for a year."""
    from src.compliance.targets import reduction_for, target_for

    print(f"\n{year}: {target_for(year):.4f} gCO2eq/MJ ({reduction_for(year):g}% below reference)")


def show_balance(ship_id: str, year: int) -> None:
    """Compute and print the raw and adjusted compliance balance of a ship-year."""
    from api.database import get_db_context
    from api.repository import SqlLedgerStore
    from api.state import get_app_state
    from src.compliance.engine import ComplianceEngine
    from src.compliance.errors import ShipDataNotFoundError

    with get_db_context() as db:
        state = get_app_state()
        engine = ComplianceEngine(SqlLedgerStore(db), state.fuel_source(db), state.locks)
        try:
            balance = engine.compute_balance(ship_id, year)
            adjusted = engine.adjusted_cb(ship_id, year)
        except ShipDataNotFoundError as e:
            print(f"\nError: {e.message}")
            sys.exit(1)

    print("\n" + "=" * 60)
    print(f"COMPLIANCE BALANCE  {ship_id} / {year}")
    print("=" * 60)
    print(f"Target intensity:  {balance.target_intensity:>16.5f} gCO2eq/MJ")
    print(f"Actual intensity:  {balance.actual_intensity:>16.5f} gCO2eq/MJ")
    print(f"Energy in scope:   {balance.energy_scope_mj:>16.1f} MJ")
    print(f"Raw CB:            {balance.cb_value:>16.1f} gCO2eq")
    print(f"Adjusted CB:       {adjusted:>16.1f} gCO2eq")
    print(f"Status:            {'SURPLUS' if adjusted >= 0 else 'DEFICIT':>16}")
    print("=" * 60 + "\n")


def show_bank_balance(ship_id: str) -> None:
    """List a ship's unspent bank entries."""
    from api.database import get_db_context
    from api.repository import SqlLedgerStore

    with get_db_context() as db:
        store = SqlLedgerStore(db)
        entries = store.list_bank_entries(ship_id=ship_id)
        total = store.total_banked(ship_id)

    if not entries:
        print(f"\nNo banked surplus for {ship_id}.")
        return

    print("\n" + "=" * 60)
    print(f"{'Entry':<8} {'Year':<6} {'Banked':>20} {'Remaining':>20}")
    print("-" * 60)
    for entry in entries:
        print(f"{entry.id:<8} {entry.year:<6} {entry.banked_amount:>20.1f} {entry.amount:>20.1f}")
    print("=" * 60)
    print(f"Total banked: {total:.1f} gCO2eq\n")


def check_health() -> None:
    """Check API health."""
    import requests

    url = "http://localhost:8000/api/health"
    try:
        response = requests.get(url, timeout=5)
        if response.status_code == 200:
            data = response.json()
            print(f"\nAPI Status: {data.get('status', 'unknown')}")
            print(f"Version: {data.get('version', 'unknown')}")
            print(f"Fuel data source: {data.get('fuel_data_source', 'unknown')}")
        else:
            print(f"\nAPI returned status code: {response.status_code}")
            sys.exit(1)
    except requests.exceptions.ConnectionError:
        print("\nError: Could not connect to API. Is the server running?")
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="FuelEU Ledger CLI Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Create tables and load the sample routes:
    python -m api.cli init-db
    python -m api.cli seed-routes

  Target intensity for 2030:
    python -m api.cli target --year 2030

  Compliance balance of a ship:
    python -m api.cli balance --ship R001 --year 2025

  Banked surplus of a ship:
    python -m api.cli bank-balance --ship R001
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Initialize the database")
    subparsers.add_parser("seed-routes", help="Load the sample route registry")

    target_parser = subparsers.add_parser("target", help="Show the target intensity for a year")
    target_parser.add_argument("--year", type=int, required=True)

    balance_parser = subparsers.add_parser("balance", help="Compute a ship's compliance balance")
    balance_parser.add_argument("--ship", required=True, help="Ship id")
    balance_parser.add_argument("--year", type=int, required=True)

    bank_parser = subparsers.add_parser("bank-balance", help="Show a ship's banked surplus")
    bank_parser.add_argument("--ship", required=True, help="Ship id")

    subparsers.add_parser("check-health", help="Check API health")

    args = parser.parse_args(argv)

    if args.command == "init-db":
        init_db()
    elif args.command == "seed-routes":
        seed_routes()
    elif args.command == "target":
        show_target(args.year)
    elif args.command == "balance":
        show_balance(args.ship, args.year)
    elif args.command == "bank-balance":
        show_bank_balance(args.ship)
    elif args.command == "check-health":
        check_health()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
