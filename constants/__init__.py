"""
Constants Package

Unit tables, billing constants and validation whitelists.
"""

from .units import (
    WEIGHT_BASE_UNIT,
    VOLUME_BASE_UNIT,
    COUNT_BASE_UNIT,
    WEIGHT_TO_G,
    VOLUME_TO_ML,
    COUNT_TO_PCS,
    UNIT_FAMILIES,
    BASE_UNITS,
    SUGGESTED_UNITS,
    STOCK_PLACES,
)

from .billing import (
    BILL_PENDING,
    BILL_PARTIALLY_PAID,
    BILL_PAID,
    BILL_OVERDUE,
    BILL_CANCELLED,
    BILL_STATUSES,
    PAYMENT_COMPLETED,
    PAYMENT_PENDING,
    PAYMENT_CANCELLED,
    PAYMENT_REFUNDED,
    PAYMENT_TERM_DAYS,
    DEFAULT_TERM_DAYS,
    DEFAULT_TAX_RATE,
    DEFAULT_PAYMENT_TERMS,
    LATE_FEE_PERCENTAGE,
    BILLABLE_PO_STATUSES,
    MONEY_PLACES,
)

from .validation import (
    VALID_BASE_UNITS,
    VALID_PAYMENT_METHODS,
    VALID_PO_STATUSES,
    WASTE_DAMAGE,
    WASTE_SPOILAGE,
    VALID_WASTE_TYPES,
    REQUEST_EXCLUDE,
)
