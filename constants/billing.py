"""
Billing Constants

Bill and payment statuses, supplier payment terms, and purchase order
states that gate bill generation.
"""

# Supplier bill statuses
BILL_PENDING = 'pending'
BILL_PARTIALLY_PAID = 'partially_paid'
BILL_PAID = 'paid'
BILL_OVERDUE = 'overdue'
BILL_CANCELLED = 'cancelled'

BILL_STATUSES = {BILL_PENDING, BILL_PARTIALLY_PAID, BILL_PAID, BILL_OVERDUE, BILL_CANCELLED}

# Supplier payment statuses
PAYMENT_COMPLETED = 'completed'
PAYMENT_PENDING = 'pending'
PAYMENT_CANCELLED = 'cancelled'
PAYMENT_REFUNDED = 'refunded'

# Payment method -> display label
PAYMENT_METHODS = {
    'cash': 'Cash',
    'bank_transfer': 'Bank Transfer',
    'check': 'Check',
    'credit_card': 'Credit Card',
    'paypal': 'PayPal',
    'online': 'Online Payment',
    'other': 'Other',
}

# Payment terms -> days until the bill is due
PAYMENT_TERM_DAYS = {
    'COD': 0,
    'NET_0': 0,
    'NET_7': 7,
    'NET_15': 15,
    'NET_30': 30,
    'NET_60': 60,
    'NET_90': 90,
}

# Used when a supplier's terms are missing or unrecognized
DEFAULT_TERM_DAYS = 30

# VAT percentage applied when the caller does not pass one
DEFAULT_TAX_RATE = 12

# Terms used when a purchase order has no supplier record
DEFAULT_PAYMENT_TERMS = 'NET_30'

# Late fee, percent of the outstanding amount per 30 days overdue
LATE_FEE_PERCENTAGE = 2

# Purchase order statuses that allow a bill to be generated
BILLABLE_PO_STATUSES = {'delivered', 'partially_delivered'}

# Monetary columns are stored with two decimal places
MONEY_PLACES = 2
