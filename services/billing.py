"""
Billing Service

Generates supplier bills from received purchase orders and records
payments against them.

Bill amounts are recomputed from scratch on every change, so after any
write:
- outstanding_amount == max(0, total_amount - paid_amount)
- paid_amount <= total_amount
- status follows from (outstanding_amount, paid_amount, due_date)
"""

import logging
from collections import namedtuple
from datetime import date, datetime, timedelta

from models import PurchaseOrder, SupplierBill, SupplierPayment
from constants import (
    BILL_PENDING,
    BILL_PARTIALLY_PAID,
    BILL_PAID,
    BILL_OVERDUE,
    BILL_CANCELLED,
    BILLABLE_PO_STATUSES,
    DEFAULT_PAYMENT_TERMS,
    DEFAULT_TAX_RATE,
    DEFAULT_TERM_DAYS,
    LATE_FEE_PERCENTAGE,
    MONEY_PLACES,
    PAYMENT_CANCELLED,
    PAYMENT_COMPLETED,
    PAYMENT_TERM_DAYS,
    VALID_PAYMENT_METHODS,
)
from .errors import (
    LedgerError,
    BillAlreadyExistsError,
    BillNotCancellableError,
    BillNotPayableError,
    InvalidDiscountError,
    InvalidPaymentAmountError,
    InvalidPaymentMethodError,
    OverpaymentError,
    PurchaseOrderNotReceivedError,
)
from .receiving import add_stock_from_purchase_order
from .transactions import atomic, get_or_raise

logger = logging.getLogger(__name__)

# Result of applying a payment to a bill, before it is written back
PaymentOutcome = namedtuple('PaymentOutcome', ['paid_amount', 'outstanding_amount', 'status'])


def money(value):
    """Round to the two decimal places monetary columns are stored with."""
    return round(value or 0, MONEY_PLACES)


def _as_date(value):
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


# =========== AMOUNTS ===========

def normalize_payment_terms(payment_terms):
    return (payment_terms or '').strip().upper().replace(' ', '_')


def term_days(payment_terms):
    """Days until due for a supplier's payment terms; unknown terms mean 30."""
    return PAYMENT_TERM_DAYS.get(normalize_payment_terms(payment_terms), DEFAULT_TERM_DAYS)


def calculate_due_date(bill_date, payment_terms):
    return _as_date(bill_date) + timedelta(days=term_days(payment_terms))


def calculate_bill_amounts(items, tax_rate=DEFAULT_TAX_RATE, discount_amount=0):
    """
    Bill amounts from received (not ordered) quantities.

    tax is charged on the subtotal after discount.

    Returns:
        dict with subtotal, discount_amount, tax_amount, total_amount
    """
    subtotal = money(sum((item.received_quantity or 0) * (item.unit_price or 0) for item in items))
    discount_amount = money(discount_amount)
    if discount_amount < 0:
        raise InvalidDiscountError("Discount amount cannot be negative", discount_amount=discount_amount)
    if discount_amount > subtotal:
        raise InvalidDiscountError(
            f"Discount amount ({discount_amount:.2f}) cannot exceed subtotal ({subtotal:.2f})",
            discount_amount=discount_amount, subtotal=subtotal,
        )

    subtotal_after_discount = subtotal - discount_amount
    tax_amount = money(subtotal_after_discount * tax_rate / 100)
    total_amount = money(subtotal_after_discount + tax_amount)

    return {
        'subtotal': subtotal,
        'discount_amount': discount_amount,
        'tax_amount': tax_amount,
        'total_amount': total_amount,
    }


# =========== STATUS ===========

def resolve_status(paid_amount, outstanding_amount, due_date, current_status, today=None):
    """
    Status implied by a bill's amounts.

    paid when nothing is outstanding, partially_paid once something is
    paid, otherwise unchanged; anything still outstanding past its due date
    is overdue.
    """
    if outstanding_amount <= 0:
        status = BILL_PAID
    elif paid_amount > 0:
        status = BILL_PARTIALLY_PAID
    else:
        status = current_status

    if outstanding_amount > 0 and due_date is not None and due_date < _as_date(today):
        status = BILL_OVERDUE
    return status


def can_receive_payment(bill):
    return (bill.outstanding_amount or 0) > 0 and bill.status not in (BILL_CANCELLED, BILL_PAID)


def is_overdue(bill, today=None):
    """True when money is still owed after the due date (the due date itself is not late)."""
    if bill.due_date is None or (bill.outstanding_amount or 0) <= 0:
        return False
    if bill.status in (BILL_PAID, BILL_CANCELLED):
        return False
    return _as_date(today) > bill.due_date


def days_overdue(bill, today=None):
    if not is_overdue(bill, today):
        return 0
    return (_as_date(today) - bill.due_date).days


def calculate_late_fee(bill, fee_percentage=LATE_FEE_PERCENTAGE, today=None):
    """fee_percentage of the outstanding amount per 30 days overdue."""
    days = days_overdue(bill, today)
    if days <= 0:
        return 0.0
    return money(bill.outstanding_amount * fee_percentage / 100 * (days / 30))


def payment_progress(bill):
    if not bill.total_amount or bill.total_amount <= 0:
        return 0.0
    return bill.paid_amount / bill.total_amount * 100


def apply_payment(bill, payment_amount, today=None):
    """
    Compute the bill's amounts and status after payment_amount is paid.

    Pure: the bill is not modified.
    """
    total_amount = money(bill.total_amount)
    new_paid = money((bill.paid_amount or 0) + payment_amount)
    new_outstanding = money(max(0, total_amount - new_paid))

    # Floating-point guard
    if new_outstanding == 0 and new_paid > total_amount:
        new_paid = total_amount

    new_status = resolve_status(new_paid, new_outstanding, bill.due_date, bill.status, today)
    return PaymentOutcome(new_paid, new_outstanding, new_status)


def validate_payment(bill, payment_amount):
    """
    Raises:
        InvalidPaymentAmountError: payment_amount is not positive
        BillNotPayableError: the bill is cancelled or fully paid
        OverpaymentError: payment_amount exceeds the outstanding amount
    """
    if payment_amount is None or money(payment_amount) <= 0:
        raise InvalidPaymentAmountError("Payment amount must be greater than zero", payment_amount=payment_amount)

    if not can_receive_payment(bill):
        raise BillNotPayableError(
            f"This bill cannot receive payments (Status: {bill.status})",
            bill_id=bill.id, status=bill.status,
        )

    outstanding = money(bill.outstanding_amount)
    if money(payment_amount) > outstanding:
        raise OverpaymentError(
            f"Payment amount ({payment_amount:,.2f}) cannot exceed outstanding amount ({outstanding:,.2f})",
            bill_id=bill.id, payment_amount=payment_amount, outstanding_amount=outstanding,
        )


def bill_payments_balance(bill):
    """True when the non-cancelled payments add up to paid_amount."""
    paid = sum(p.payment_amount for p in bill.payments if p.status != PAYMENT_CANCELLED)
    return money(paid) == money(bill.paid_amount)


# =========== BILL GENERATION ===========

def generate_bill_from_purchase_order(session, purchase_order_id, bill_date=None, tax_rate=None,
                                      discount_amount=0, supplier_invoice_number=None, notes=None,
                                      default_payment_terms=DEFAULT_PAYMENT_TERMS):
    """
    Create the bill for a delivered purchase order.

    Raises:
        BillAlreadyExistsError: the purchase order already has a bill
        PurchaseOrderNotReceivedError: the purchase order is not delivered
    """
    with atomic(session):
        purchase_order = get_or_raise(session, PurchaseOrder, purchase_order_id, lock=True)

        if purchase_order.bill is not None:
            raise BillAlreadyExistsError(
                f"Bill already exists for Purchase Order {purchase_order.po_number}",
                purchase_order_id=purchase_order.id, bill_id=purchase_order.bill.id,
            )
        if purchase_order.status not in BILLABLE_PO_STATUSES:
            raise PurchaseOrderNotReceivedError(
                "Purchase Order must be delivered before generating a bill",
                purchase_order_id=purchase_order.id, status=purchase_order.status,
            )

        supplier = purchase_order.supplier
        bill_date = _as_date(bill_date or purchase_order.actual_delivery_date)
        # Manual receives have no supplier record
        payment_terms = supplier.payment_terms if supplier is not None else default_payment_terms
        amounts = calculate_bill_amounts(
            purchase_order.items,
            DEFAULT_TAX_RATE if tax_rate is None else tax_rate,
            discount_amount,
        )

        bill = SupplierBill(
            purchase_order_id=purchase_order.id,
            restaurant_id=purchase_order.restaurant_id,
            supplier_id=purchase_order.supplier_id,
            supplier_invoice_number=supplier_invoice_number,
            bill_date=bill_date,
            due_date=calculate_due_date(bill_date, payment_terms),
            subtotal=amounts['subtotal'],
            tax_amount=amounts['tax_amount'],
            discount_amount=amounts['discount_amount'],
            total_amount=amounts['total_amount'],
            paid_amount=0.0,
            outstanding_amount=amounts['total_amount'],
            status=BILL_PENDING,
            notes=notes or f"Auto-generated from PO {purchase_order.po_number}",
        )
        session.add(bill)
        session.flush()
        bill.bill_number = f"BILL-{bill_date.year}-{bill.id:06d}"

    logger.info("Bill %s generated from purchase order %s (%s): total %.2f due %s",
                bill.bill_number, purchase_order.po_number, purchase_order.supplier_display_name,
                bill.total_amount, bill.due_date)
    return bill


def process_received_purchase_order(session, purchase_order_id, **options):
    """
    Receive a purchase order's stock and bill it, in one transaction.

    options are passed to generate_bill_from_purchase_order().
    """
    with atomic(session):
        inventory_result = add_stock_from_purchase_order(session, purchase_order_id)
        bill = generate_bill_from_purchase_order(session, purchase_order_id, **options)

    return {
        'inventory_result': inventory_result,
        'bill': bill,
        'message': 'Purchase order processed: inventory updated and bill generated',
    }


def generate_bulk_bills(session, purchase_order_ids, **options):
    """Bill several purchase orders; one failure does not stop the others."""
    results = []
    success_count = 0
    for purchase_order_id in purchase_order_ids:
        try:
            bill = generate_bill_from_purchase_order(session, purchase_order_id, **options)
        except LedgerError as e:
            logger.error("Bulk bill generation failed for purchase order %s: %s", purchase_order_id, e.message)
            results.append({
                'success': False,
                'purchase_order_id': purchase_order_id,
                'error': e.code,
                'message': e.message,
            })
            continue
        success_count += 1
        results.append({'success': True, 'purchase_order_id': purchase_order_id, 'bill': bill})

    error_count = len(purchase_order_ids) - success_count
    return {
        'success': error_count == 0,
        'processed_count': len(purchase_order_ids),
        'success_count': success_count,
        'error_count': error_count,
        'results': results,
    }


# =========== PAYMENTS ===========

def record_payment(session, bill_id, payment_amount, payment_method, payment_date=None,
                   transaction_reference=None, notes=None, created_by_user_id=None, today=None):
    """
    Record a payment and update the bill's amounts and status.

    The bill row is locked for the whole read-check-write, so two concurrent
    payments cannot both pass the overpayment check.

    Returns:
        dict with payment and bill

    Raises:
        InvalidPaymentAmountError, BillNotPayableError, OverpaymentError:
            before anything is written
    """
    if payment_method not in VALID_PAYMENT_METHODS:
        raise InvalidPaymentMethodError(f"Invalid payment method: {payment_method}", payment_method=payment_method)

    with atomic(session):
        bill = get_or_raise(session, SupplierBill, bill_id, lock=True)

        logger.info("Recording payment of %s on bill %s: status %s, paid %.2f, outstanding %.2f",
                    payment_amount, bill.bill_number, bill.status, bill.paid_amount, bill.outstanding_amount)

        validate_payment(bill, payment_amount)

        payment_date = _as_date(payment_date or today)
        payment = SupplierPayment(
            bill=bill,
            restaurant_id=bill.restaurant_id,
            supplier_id=bill.supplier_id,
            payment_date=payment_date,
            payment_amount=money(payment_amount),
            payment_method=payment_method,
            transaction_reference=transaction_reference,
            notes=notes or '',
            created_by_user_id=created_by_user_id,
            status=PAYMENT_COMPLETED,
        )
        session.add(payment)
        session.flush()
        payment.payment_reference = f"PAY-{payment_date.year}-{payment.id:06d}"

        previous = (bill.paid_amount, bill.outstanding_amount, bill.status)
        outcome = apply_payment(bill, payment.payment_amount, today)
        bill.paid_amount = outcome.paid_amount
        bill.outstanding_amount = outcome.outstanding_amount
        bill.status = outcome.status

        logger.info("Bill %s after payment %s: paid %.2f -> %.2f, outstanding %.2f -> %.2f, status %s -> %s",
                    bill.bill_number, payment.payment_reference, previous[0], outcome.paid_amount,
                    previous[1], outcome.outstanding_amount, previous[2], outcome.status)

    return {'payment': payment, 'bill': bill}


def cancel_bill(session, bill_id, reason=None):
    """
    Cancel a bill that is not yet paid. Bills are never deleted.

    Raises:
        BillNotCancellableError: the bill is paid or already cancelled
    """
    with atomic(session):
        bill = get_or_raise(session, SupplierBill, bill_id, lock=True)
        if bill.status in (BILL_PAID, BILL_CANCELLED):
            raise BillNotCancellableError(
                f"Bill {bill.bill_number} cannot be cancelled (Status: {bill.status})",
                bill_id=bill.id, status=bill.status,
            )
        previous_status = bill.status
        bill.status = BILL_CANCELLED
        if reason:
            bill.notes = f"{bill.notes or ''}\nCancelled: {reason}".strip()

    logger.info("Bill %s cancelled (was %s)", bill.bill_number, previous_status)
    return bill


# =========== MAINTENANCE ===========

def mark_overdue_bills(session, restaurant_id=None, today=None):
    """Flag every unpaid bill past its due date as overdue."""
    today = _as_date(today)
    with atomic(session):
        query = (session.query(SupplierBill)
                 .filter(SupplierBill.due_date < today)
                 .filter(SupplierBill.outstanding_amount > 0)
                 .filter(SupplierBill.status.notin_([BILL_PAID, BILL_CANCELLED])))
        if restaurant_id is not None:
            query = query.filter(SupplierBill.restaurant_id == restaurant_id)
        overdue_bills = query.order_by(SupplierBill.id).with_for_update().all()

        marked_count = 0
        for bill in overdue_bills:
            if bill.status != BILL_OVERDUE:
                bill.status = BILL_OVERDUE
                marked_count += 1

    logger.info("Overdue bills marked: %s of %s (restaurant %s)", marked_count, len(overdue_bills), restaurant_id)
    return {
        'marked_count': marked_count,
        'total_overdue': len(overdue_bills),
        'overdue_bills': overdue_bills,
    }


def fix_overpaid_bills(session, dry_run=False):
    """
    Repair bills whose paid amount exceeds their total.

    paid_amount is capped at total_amount, outstanding_amount recomputed,
    and the bill marked paid when nothing remains. With dry_run nothing is
    written.

    Returns:
        list of dicts with bill_id, bill_number and the before/after amounts
    """
    fixes = []
    with atomic(session):
        bills = (session.query(SupplierBill)
                 .filter((SupplierBill.outstanding_amount < 0) | (SupplierBill.paid_amount > SupplierBill.total_amount))
                 .order_by(SupplierBill.id)
                 .with_for_update()
                 .all())

        for bill in bills:
            corrected_paid = min(bill.paid_amount, bill.total_amount)
            corrected_outstanding = money(max(0, bill.total_amount - corrected_paid))
            corrected_status = BILL_PAID if corrected_outstanding <= 0 else bill.status
            fixes.append({
                'bill_id': bill.id,
                'bill_number': bill.bill_number,
                'total_amount': bill.total_amount,
                'paid_amount': bill.paid_amount,
                'outstanding_amount': bill.outstanding_amount,
                'corrected_paid_amount': corrected_paid,
                'corrected_outstanding_amount': corrected_outstanding,
                'corrected_status': corrected_status,
            })
            if dry_run:
                continue

            bill.paid_amount = corrected_paid
            bill.outstanding_amount = corrected_outstanding
            bill.status = corrected_status
            logger.warning("Fixed overpaid bill %s: paid %.2f, outstanding %.2f",
                           bill.bill_number, corrected_paid, corrected_outstanding)

    return fixes


# =========== REPORTING ===========

def get_billing_summary(session, restaurant_id, date_from=None, date_to=None, today=None):
    """Bill and payment totals for a restaurant over a date range (default: last 30 days)."""
    today = _as_date(today)
    date_to = _as_date(date_to or today)
    date_from = _as_date(date_from or (date_to - timedelta(days=30)))

    bills = (session.query(SupplierBill)
             .filter(SupplierBill.restaurant_id == restaurant_id)
             .filter(SupplierBill.bill_date.between(date_from, date_to))
             .all())
    payments = (session.query(SupplierPayment)
                .filter(SupplierPayment.restaurant_id == restaurant_id)
                .filter(SupplierPayment.payment_date.between(date_from, date_to))
                .all())

    overdue = [bill for bill in bills if is_overdue(bill, today)]
    completed = [p for p in payments if p.status == PAYMENT_COMPLETED]

    methods = {}
    for payment in completed:
        entry = methods.setdefault(payment.payment_method, {'count': 0, 'total': 0.0})
        entry['count'] += 1
        entry['total'] = money(entry['total'] + payment.payment_amount)

    suppliers = {}
    for bill in bills:
        name = bill.supplier.name if bill.supplier is not None else bill.purchase_order.supplier_display_name
        entry = suppliers.setdefault(name, {'bills_count': 0, 'total_amount': 0.0,
                                            'outstanding_amount': 0.0, 'paid_amount': 0.0})
        entry['bills_count'] += 1
        entry['total_amount'] = money(entry['total_amount'] + bill.total_amount)
        entry['outstanding_amount'] = money(entry['outstanding_amount'] + bill.outstanding_amount)
        entry['paid_amount'] = money(entry['paid_amount'] + bill.paid_amount)
    for entry in suppliers.values():
        paid = entry.pop('paid_amount')
        entry['payment_rate'] = paid / entry['total_amount'] * 100 if entry['total_amount'] > 0 else 0

    return {
        'period': {'from': date_from, 'to': date_to},
        'bills_summary': {
            'total_bills': len(bills),
            'total_amount': money(sum(b.total_amount for b in bills)),
            'total_outstanding': money(sum(b.outstanding_amount for b in bills)),
            'total_paid': money(sum(b.paid_amount for b in bills)),
            'overdue_count': len(overdue),
            'overdue_amount': money(sum(b.outstanding_amount for b in overdue)),
        },
        'payments_summary': {
            'total_payments': len(payments),
            'total_amount_paid': money(sum(p.payment_amount for p in completed)),
            'payment_methods': methods,
        },
        'supplier_breakdown': suppliers,
    }
