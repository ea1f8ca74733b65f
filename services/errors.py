"""
Ledger Errors

Domain errors raised by the inventory and billing services. Each carries a
machine-readable code plus the structured values of the failure, so callers
can render their own message.
"""


class LedgerError(Exception):
    """Base class for all inventory and billing domain errors."""
    code = 'ledger_error'

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        return {'error': self.code, 'message': self.message, **self.details}


class UnknownUnitError(LedgerError, ValueError):
    """Raised when a unit is not in any conversion table."""
    code = 'unknown_unit'

    def __init__(self, unit):
        super().__init__(f"Unknown unit: {unit}", unit=unit)
        self.unit = unit


class IncompatibleUnitsError(LedgerError, ValueError):
    """Raised when converting between units of different families."""
    code = 'incompatible_units'

    def __init__(self, from_unit, to_unit):
        super().__init__(
            f"Cannot convert from {from_unit} to {to_unit}: incompatible unit types",
            from_unit=from_unit, to_unit=to_unit,
        )
        self.from_unit = from_unit
        self.to_unit = to_unit


class InvalidQuantityError(LedgerError, ValueError):
    """Raised for zero or negative stock, package or sale quantities."""
    code = 'invalid_quantity'


class InsufficientStockError(LedgerError):
    """
    Raised when a deduction would take stock below zero.

    shortages lists every short ingredient as dicts with ingredient_id,
    ingredient_name, required, available and shortage.
    """
    code = 'insufficient_stock'

    def __init__(self, message, shortages=None):
        shortages = list(shortages or [])
        super().__init__(message, shortages=shortages)
        self.shortages = shortages


class InsufficientPackagesError(LedgerError):
    """Raised when removing more packages than an ingredient holds."""
    code = 'insufficient_packages'


class MissingPackageQuantityError(LedgerError):
    """Raised when no supplier offer defines the contents of one package."""
    code = 'missing_package_quantity'


class RecordNotFoundError(LedgerError, LookupError):
    """Raised when a referenced row does not exist."""
    code = 'not_found'

    def __init__(self, model_name, record_id):
        super().__init__(f"{model_name} {record_id} not found", model=model_name, id=record_id)


class PurchaseOrderNotReceivedError(LedgerError):
    """Raised when billing a purchase order that has not been delivered."""
    code = 'purchase_order_not_received'


class PurchaseOrderAlreadyProcessedError(LedgerError):
    """Raised when a purchase order's stock has already been received."""
    code = 'purchase_order_already_processed'


class BillAlreadyExistsError(LedgerError):
    """Raised when a purchase order already has a bill."""
    code = 'bill_already_exists'


class InvalidPaymentAmountError(LedgerError, ValueError):
    """Raised for non-positive payment amounts."""
    code = 'invalid_payment_amount'


class OverpaymentError(LedgerError):
    """Raised when a payment exceeds the bill's outstanding amount."""
    code = 'overpayment'


class BillNotPayableError(LedgerError):
    """Raised when paying a cancelled or fully paid bill."""
    code = 'bill_not_payable'


class BillNotCancellableError(LedgerError):
    """Raised when cancelling a bill that is already paid or cancelled."""
    code = 'bill_not_cancellable'


class InvalidDiscountError(LedgerError, ValueError):
    """Raised for a negative discount or one larger than the bill subtotal."""
    code = 'invalid_discount'


class InvalidPaymentMethodError(LedgerError, ValueError):
    """Raised when a payment method is not one of the accepted methods."""
    code = 'invalid_payment_method'


class InvalidWasteTypeError(LedgerError, ValueError):
    """Raised when a write-off is neither damage nor spoilage."""
    code = 'invalid_waste_type'
