# Overview: Flask CLI command groups for bootstrap and quick report inspection.

# backend/shelfpos/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables (idempotent).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed [--force]
#   Load the demo catalog and sales history into an empty store.
#
# Reports:
# - python -m flask reports low-stock
#   Products at or below their reorder threshold.
# - python -m flask reports inventory-value
#   Cost-basis and retail valuation of stock on hand.
# - python -m flask reports profit [--days 30]
#   Revenue, cost and margin over the trailing window (all-time when omitted).

import click
from flask.cli import with_appcontext

from .extensions import db
from .services import product_service, reporting_service
from .services.seed_service import seed_demo_data
from .storage import StorageAdapter
from .time_utils import trailing_range


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database schema ready.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system seed' for demo data.")


@system_group.command('seed')
@click.option('--force', is_flag=True, help='Seed even if products already exist')
@with_appcontext
def seed(force):
    """Load demo categories, products and sales."""
    db.create_all()
    if seed_demo_data(StorageAdapter(db.session), force=force):
        click.echo("PASS Demo data loaded.")
    else:
        click.echo("WARN Store already has products, nothing seeded (use --force).")


@click.group('reports')
def reports_group():
    """Print report summaries to the terminal."""


@reports_group.command('low-stock')
@with_appcontext
def low_stock():
    """List reorder candidates."""
    products = product_service.list_low_stock(StorageAdapter(db.session))
    if not products:
        click.echo("PASS No products at or below their minimum.")
        return
    for p in products:
        click.echo(f"{p['id']:>5}  {p['sku'] or '-':<12} {p['name']:<30} qty={p['quantity']} min={p['min_quantity']}")


@reports_group.command('inventory-value')
@with_appcontext
def inventory_value():
    """Show stock valuation at cost and at retail."""
    value = reporting_service.inventory_value(StorageAdapter(db.session))
    click.echo(f"Cost basis:   {value['total_cost']:,.2f}")
    click.echo(f"Retail value: {value['total_retail']:,.2f}")


@reports_group.command('profit')
@click.option('--days', type=int, default=None, help='Trailing window in days (default: all-time)')
@with_appcontext
def profit(days):
    """Show revenue, cost and margin."""
    start, end = trailing_range(days) if days else (None, None)
    report = reporting_service.profit_report(StorageAdapter(db.session), start, end)
    click.echo(f"Revenue:      {report['total_revenue']:,.2f}")
    click.echo(f"Cost:         {report['total_cost']:,.2f}")
    click.echo(f"Gross profit: {report['gross_profit']:,.2f}")
    click.echo(f"Margin:       {report['profit_margin']:.2f}%")
    for row in report["by_product"]:
        click.echo(f"  {row['product_name']:<30} sold={row['quantity_sold']:<5} profit={row['profit']:,.2f}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(reports_group)
