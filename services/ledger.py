"""
Ingredient Stock Ledger

The only code that writes Ingredient.current_stock and Ingredient.packages.
Callers load the ingredient with lock_ingredient() (SELECT ... FOR UPDATE)
inside a transaction, so concurrent sales and receipts serialize on the row.
"""

import logging

from models import Ingredient, WasteLog
from models.base import utcnow
from constants import STOCK_PLACES, VALID_WASTE_TYPES
from .errors import (
    InvalidQuantityError,
    InvalidWasteTypeError,
    InsufficientStockError,
    InsufficientPackagesError,
)
from .events import emit_for, ACTION_INCREASED, ACTION_DECREASED
from .transactions import atomic, get_or_raise, lock_rows
from .units import convert

logger = logging.getLogger(__name__)


def lock_ingredient(session, ingredient_id):
    """Load one ingredient row with a write lock."""
    return get_or_raise(session, Ingredient, ingredient_id, lock=True)


def lock_ingredients(session, ingredient_ids):
    """Lock several ingredient rows in ascending id order; returns {id: Ingredient}."""
    return lock_rows(session, Ingredient, ingredient_ids)


def _require_positive(value, what):
    if value is None or value <= 0:
        raise InvalidQuantityError(f"{what} must be greater than zero", value=value)


def stock_quantity(value):
    """Round a base-unit quantity to the precision current_stock is kept at."""
    return round(value or 0, STOCK_PLACES)


def to_base_quantity(ingredient, quantity, unit=None):
    """Express quantity (given in unit, default base_unit) in the ingredient's base unit."""
    if not unit:
        return quantity
    return stock_quantity(convert(quantity, unit, ingredient.base_unit))


def increase_stock(ingredient, amount):
    """Add amount (in base_unit) to current_stock."""
    _require_positive(amount, 'Stock increase')

    previous_stock = ingredient.current_stock or 0
    ingredient.current_stock = stock_quantity(previous_stock + amount)

    logger.info("Stock increased for ingredient %s: %s + %s = %s %s",
                ingredient.name, previous_stock, amount, ingredient.current_stock, ingredient.base_unit)
    return emit_for(ingredient, ACTION_INCREASED, previous_stock)


def decrease_stock(ingredient, amount, unit=None):
    """
    Take amount out of current_stock.

    amount may be given in any unit of the ingredient's family; it is
    converted to base_unit first. Never lets stock go negative.

    Raises:
        InsufficientStockError: if the converted amount exceeds current_stock.
            Stock is left unchanged.
    """
    _require_positive(amount, 'Stock decrease')

    base_amount = stock_quantity(to_base_quantity(ingredient, amount, unit))
    if unit and base_amount != amount:
        logger.info("Unit conversion in decrease_stock for %s: %s %s -> %s %s",
                    ingredient.name, amount, unit, base_amount, ingredient.base_unit)

    previous_stock = ingredient.current_stock or 0
    if base_amount > previous_stock:
        shortage = {
            'ingredient_id': ingredient.id,
            'ingredient_name': ingredient.name,
            'required': base_amount,
            'available': previous_stock,
            'shortage': base_amount - previous_stock,
            'base_unit': ingredient.base_unit,
        }
        logger.warning("Insufficient stock for ingredient %s: current %s %s, required %s %s",
                       ingredient.name, previous_stock, ingredient.base_unit, base_amount, ingredient.base_unit)
        raise InsufficientStockError(
            f"Insufficient stock for ingredient: {ingredient.name}. "
            f"Current: {previous_stock} {ingredient.base_unit}, Required: {base_amount} {ingredient.base_unit}",
            shortages=[shortage],
        )

    ingredient.current_stock = stock_quantity(previous_stock - base_amount)

    logger.info("Stock decreased for ingredient %s: %s - %s = %s %s",
                ingredient.name, previous_stock, base_amount, ingredient.current_stock, ingredient.base_unit)
    return emit_for(ingredient, ACTION_DECREASED, previous_stock)


def add_packages(ingredient, package_count, contents_per_package):
    """Receive package_count packages holding contents_per_package base units each."""
    _require_positive(package_count, 'Package count')
    _require_positive(contents_per_package, 'Package contents')

    previous_stock = ingredient.current_stock or 0
    previous_packages = ingredient.packages or 0
    added = stock_quantity(package_count * contents_per_package)

    ingredient.packages = previous_packages + package_count
    ingredient.current_stock = stock_quantity(previous_stock + added)

    logger.info("Packages added for ingredient %s: packages %s + %s = %s, stock %s + %s = %s %s",
                ingredient.name, previous_packages, package_count, ingredient.packages,
                previous_stock, added, ingredient.current_stock, ingredient.base_unit)
    return emit_for(ingredient, ACTION_INCREASED, previous_stock)


def remove_packages(ingredient, package_count, contents_per_package):
    """
    Remove whole packages, the mirror of add_packages().

    Raises:
        InsufficientPackagesError: if package_count exceeds packages
        InsufficientStockError: if the packages' contents exceed current_stock
    """
    _require_positive(package_count, 'Package count')
    _require_positive(contents_per_package, 'Package contents')

    previous_stock = ingredient.current_stock or 0
    previous_packages = ingredient.packages or 0
    if package_count > previous_packages:
        raise InsufficientPackagesError(
            f"Insufficient packages for ingredient: {ingredient.name}. "
            f"Current: {previous_packages}, Required: {package_count}",
            ingredient_id=ingredient.id, required=package_count, available=previous_packages,
        )

    removed = stock_quantity(package_count * contents_per_package)
    if removed > previous_stock:
        raise InsufficientStockError(
            f"Insufficient stock for ingredient: {ingredient.name}. "
            f"Current: {previous_stock} {ingredient.base_unit}, Required: {removed} {ingredient.base_unit}",
            shortages=[{
                'ingredient_id': ingredient.id,
                'ingredient_name': ingredient.name,
                'required': removed,
                'available': previous_stock,
                'shortage': removed - previous_stock,
                'base_unit': ingredient.base_unit,
            }],
        )

    ingredient.packages = previous_packages - package_count
    ingredient.current_stock = stock_quantity(previous_stock - removed)

    logger.info("Packages removed for ingredient %s: packages %s - %s = %s, stock %s - %s = %s %s",
                ingredient.name, previous_packages, package_count, ingredient.packages,
                previous_stock, removed, ingredient.current_stock, ingredient.base_unit)
    return emit_for(ingredient, ACTION_DECREASED, previous_stock)


def get_stock_in_unit(ingredient, unit):
    """current_stock expressed in another unit of the same family."""
    return convert(ingredient.current_stock or 0, ingredient.base_unit, unit)


def has_sufficient_stock(ingredient, quantity, unit=None):
    return (ingredient.current_stock or 0) >= to_base_quantity(ingredient, quantity, unit)


def record_waste(session, ingredient_id, quantity, unit, waste_type, reason='', notes='',
                 user_id=None, incident_date=None):
    """
    Write off damaged or spoiled stock.

    Logs a WasteLog row and deducts the converted quantity in one transaction.
    Estimated cost uses the ingredient's cost_per_unit.
    """
    if waste_type not in VALID_WASTE_TYPES:
        raise InvalidWasteTypeError(f"Invalid waste type: {waste_type}", waste_type=waste_type)

    with atomic(session):
        ingredient = lock_ingredient(session, ingredient_id)
        base_quantity = to_base_quantity(ingredient, quantity, unit)
        decrease_stock(ingredient, base_quantity)

        waste = WasteLog(
            restaurant_id=ingredient.restaurant_id,
            ingredient_id=ingredient.id,
            user_id=user_id,
            type=waste_type,
            quantity=quantity,
            unit=unit,
            base_quantity=base_quantity,
            reason=reason,
            notes=notes,
            incident_date=incident_date or utcnow().date(),
            estimated_cost=round(base_quantity * (ingredient.cost_per_unit or 0), 2),
        )
        session.add(waste)

    logger.info("Recorded %s of %s %s for ingredient %s", waste_type, quantity, unit, ingredient.name)
    return waste
