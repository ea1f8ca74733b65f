"""
Validation Constants

Contains whitelist values for validating caller input before it reaches
the ledger.
"""

from .billing import PAYMENT_METHODS
from .units import BASE_UNITS

# Valid values for Ingredient.base_unit (whitelist)
VALID_BASE_UNITS = set(BASE_UNITS)

# Valid values for SupplierPayment.payment_method
VALID_PAYMENT_METHODS = set(PAYMENT_METHODS)

# Valid purchase order statuses
VALID_PO_STATUSES = {
    'draft', 'pending', 'approved', 'sent', 'confirmed',
    'partially_delivered', 'delivered', 'cancelled'
}

# Waste log types
WASTE_DAMAGE = 'damage'
WASTE_SPOILAGE = 'spoilage'
VALID_WASTE_TYPES = {WASTE_DAMAGE, WASTE_SPOILAGE}

# Customer request type that removes an ingredient from a dish
REQUEST_EXCLUDE = 'exclude'
