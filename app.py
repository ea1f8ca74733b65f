import logging
import os

import click
from flask import Flask, current_app
from flask.cli import AppGroup
from flask_migrate import Migrate

from config import get_config
from models import db
from services import calculate_late_fee, fix_overpaid_bills, generate_bulk_bills, mark_overdue_bills
from services.billing import days_overdue

migrate = Migrate()

bills_cli = AppGroup('bills', help='Supplier bill maintenance.')


def configure_logging(level='INFO'):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(config_name=None):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    configure_logging(app.config['LOG_LEVEL'])

    db.init_app(app)
    migrate.init_app(app, db)

    app.cli.add_command(bills_cli)
    return app


# ============================================
# CLI - BILLS
# ============================================

@bills_cli.command('generate')
@click.argument('purchase_order_ids', nargs=-1, type=int, required=True)
@click.option('--discount', type=float, default=0, help='Discount applied to each bill.')
def generate_command(purchase_order_ids, discount):
    """Bill delivered purchase orders with the configured tax rate and payment terms."""
    result = generate_bulk_bills(
        db.session,
        list(purchase_order_ids),
        tax_rate=current_app.config['DEFAULT_TAX_RATE'],
        discount_amount=discount,
        default_payment_terms=current_app.config['DEFAULT_PAYMENT_TERMS'],
    )
    for item in result['results']:
        if item['success']:
            bill = item['bill']
            click.echo(f"PO {item['purchase_order_id']}: {bill.bill_number} total {bill.total_amount:.2f} due {bill.due_date}")
        else:
            click.echo(f"PO {item['purchase_order_id']}: {item['error']} - {item['message']}")
    click.echo(f"Generated {result['success_count']} of {result['processed_count']} bill(s).")


@bills_cli.command('fix-overpaid')
@click.option('--dry-run', is_flag=True, help='Report the corrections without writing them.')
def fix_overpaid_command(dry_run):
    """Cap paid amounts at the bill total and recompute outstanding amounts."""
    fixes = fix_overpaid_bills(db.session, dry_run=dry_run)
    if not fixes:
        click.echo('No overpaid bills found.')
        return

    for fix in fixes:
        click.echo(
            f"{fix['bill_number'] or fix['bill_id']}: total {fix['total_amount']:.2f}, "
            f"paid {fix['paid_amount']:.2f} -> {fix['corrected_paid_amount']:.2f}, "
            f"outstanding {fix['outstanding_amount']:.2f} -> {fix['corrected_outstanding_amount']:.2f}"
        )
    prefix = 'Would fix' if dry_run else 'Fixed'
    click.echo(f"{prefix} {len(fixes)} bill(s).")


@bills_cli.command('mark-overdue')
@click.option('--restaurant-id', type=int, default=None, help='Only check bills of this restaurant.')
def mark_overdue_command(restaurant_id):
    """Flag unpaid bills past their due date as overdue."""
    result = mark_overdue_bills(db.session, restaurant_id=restaurant_id)
    fee_percentage = current_app.config['LATE_FEE_PERCENTAGE']
    for bill in result['overdue_bills']:
        click.echo(
            f"{bill.bill_number}: {days_overdue(bill)} day(s) overdue, outstanding {bill.outstanding_amount:.2f}, "
            f"late fee {calculate_late_fee(bill, fee_percentage):.2f}"
        )
    click.echo(f"Marked {result['marked_count']} of {result['total_overdue']} overdue bill(s).")


app = create_app(os.environ.get('FLASK_ENV'))


if __name__ == '__main__':
    with app.app_context():
        db.create_all()
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
