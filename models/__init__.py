"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .ingredient import Ingredient, IngredientSupplier
from .supplier import Supplier
from .dish import Dish, DishIngredient, DishVariant
from .order import CustomerOrder, CustomerOrderItem, CustomerRequest
from .purchasing import PurchaseOrder, PurchaseOrderItem
from .billing import SupplierBill, SupplierPayment
from .waste import WasteLog

__all__ = [
    'db',
    'Ingredient',
    'IngredientSupplier',
    'Supplier',
    'Dish',
    'DishIngredient',
    'DishVariant',
    'CustomerOrder',
    'CustomerOrderItem',
    'CustomerRequest',
    'PurchaseOrder',
    'PurchaseOrderItem',
    'SupplierBill',
    'SupplierPayment',
    'WasteLog',
]
