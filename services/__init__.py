"""
Services Package

Business logic for the inventory ledger: unit conversion, stock movements,
purchase order receiving, dish sales and supplier billing.
"""

from .errors import (
    LedgerError,
    UnknownUnitError,
    IncompatibleUnitsError,
    InvalidQuantityError,
    InsufficientStockError,
    InsufficientPackagesError,
    MissingPackageQuantityError,
    RecordNotFoundError,
    PurchaseOrderNotReceivedError,
    PurchaseOrderAlreadyProcessedError,
    BillAlreadyExistsError,
    InvalidPaymentAmountError,
    OverpaymentError,
    BillNotPayableError,
    BillNotCancellableError,
    InvalidDiscountError,
    InvalidPaymentMethodError,
    InvalidWasteTypeError,
)

from .transactions import atomic, get_or_raise, lock_rows

from .events import (
    InventoryEvent,
    inventory_updated,
    stock_low,
)

from .units import (
    get_unit_type,
    get_base_unit,
    get_all_units,
    get_suggested_units,
    are_units_compatible,
    convert,
    convert_to_base_unit,
    convert_from_base_unit,
    format_quantity,
)

from .ledger import (
    increase_stock,
    decrease_stock,
    add_packages,
    remove_packages,
    get_stock_in_unit,
    has_sufficient_stock,
    record_waste,
)

from .receiving import (
    save_ingredient_offer,
    resolve_contents_per_package,
    add_stock_from_purchase_order,
)

from .dish_sales import (
    calculate_required_quantities,
    check_stock_availability,
    has_available_stock,
    subtract_stock_from_dish_sale,
    get_low_stock_ingredients,
    calculate_ingredient_cost,
    deduct_ingredients_from_inventory,
    create_order_item,
    update_order_item_quantity,
)

from .billing import (
    calculate_due_date,
    calculate_bill_amounts,
    apply_payment,
    is_overdue,
    calculate_late_fee,
    generate_bill_from_purchase_order,
    process_received_purchase_order,
    generate_bulk_bills,
    record_payment,
    cancel_bill,
    mark_overdue_bills,
    fix_overpaid_bills,
    get_billing_summary,
)

__all__ = [
    # Errors
    'LedgerError',
    'UnknownUnitError',
    'IncompatibleUnitsError',
    'InvalidQuantityError',
    'InsufficientStockError',
    'InsufficientPackagesError',
    'MissingPackageQuantityError',
    'RecordNotFoundError',
    'PurchaseOrderNotReceivedError',
    'PurchaseOrderAlreadyProcessedError',
    'BillAlreadyExistsError',
    'InvalidPaymentAmountError',
    'OverpaymentError',
    'BillNotPayableError',
    'BillNotCancellableError',
    'InvalidDiscountError',
    'InvalidPaymentMethodError',
    'InvalidWasteTypeError',
    # Transactions
    'atomic',
    'get_or_raise',
    'lock_rows',
    # Events
    'InventoryEvent',
    'inventory_updated',
    'stock_low',
    # Units
    'get_unit_type',
    'get_base_unit',
    'get_all_units',
    'get_suggested_units',
    'are_units_compatible',
    'convert',
    'convert_to_base_unit',
    'convert_from_base_unit',
    'format_quantity',
    # Ledger
    'increase_stock',
    'decrease_stock',
    'add_packages',
    'remove_packages',
    'get_stock_in_unit',
    'has_sufficient_stock',
    'record_waste',
    # Receiving
    'save_ingredient_offer',
    'resolve_contents_per_package',
    'add_stock_from_purchase_order',
    # Dish sales
    'calculate_required_quantities',
    'check_stock_availability',
    'has_available_stock',
    'subtract_stock_from_dish_sale',
    'get_low_stock_ingredients',
    'calculate_ingredient_cost',
    'deduct_ingredients_from_inventory',
    'create_order_item',
    'update_order_item_quantity',
    # Billing
    'calculate_due_date',
    'calculate_bill_amounts',
    'apply_payment',
    'is_overdue',
    'calculate_late_fee',
    'generate_bill_from_purchase_order',
    'process_received_purchase_order',
    'generate_bulk_bills',
    'record_payment',
    'cancel_bill',
    'mark_overdue_bills',
    'fix_overpaid_bills',
    'get_billing_summary',
]
