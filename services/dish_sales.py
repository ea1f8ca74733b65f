"""
Dish Sale Stock Deduction Service

Expands a dish's recipe into base-unit requirements and takes them out of
inventory all at once or not at all. Also hosts the order-item use cases
that trigger deductions, and stock reporting built on the same recipe math.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import object_session

from models import (
    CustomerOrder,
    CustomerOrderItem,
    CustomerRequest,
    Dish,
    DishVariant,
    Ingredient,
)
from models.base import utcnow
from constants import REQUEST_EXCLUDE
from .errors import (
    LedgerError,
    InvalidQuantityError,
    InsufficientStockError,
    RecordNotFoundError,
)
from .events import InventoryEvent, emit, stock_low, ACTION_DECREASED
from .ledger import decrease_stock, lock_ingredients, stock_quantity
from .transactions import atomic, get_or_raise
from .units import convert

logger = logging.getLogger(__name__)


@dataclass
class RequiredIngredient:
    """One recipe line scaled to a sale, in the ingredient's base unit."""
    ingredient: Ingredient
    recipe_unit: str
    quantity_per_dish: Optional[float]
    required: Optional[float]
    is_optional: bool = False
    conversion_error: Optional[LedgerError] = None


def _require_quantity(quantity):
    if quantity is None or quantity <= 0:
        raise InvalidQuantityError("Quantity sold must be greater than 0", value=quantity)


def _load_variant(session, dish, variant_id):
    if variant_id is None:
        return None
    variant = session.get(DishVariant, variant_id)
    if variant is None or variant.dish_id != dish.id:
        raise RecordNotFoundError('DishVariant', variant_id)
    return variant


def calculate_required_quantities(dish, quantity, variant=None, excluded_ingredient_ids=()):
    """
    Scale every recipe line of dish to quantity servings.

    required = quantity_needed (converted to base_unit) * variant multiplier
    * quantity. Lines for excluded ingredients are left out. A line whose
    unit cannot be converted is kept with conversion_error set and no
    required amount, so the remaining lines are still assessed.
    """
    multiplier = variant.quantity_multiplier if variant is not None and variant.quantity_multiplier else 1.0
    excluded = set(excluded_ingredient_ids or ())

    lines = []
    for recipe_line in dish.recipe:
        if recipe_line.ingredient_id in excluded:
            continue
        ingredient = recipe_line.ingredient
        if ingredient is None:
            logger.warning("Ingredient not found for recipe line %s of dish %s", recipe_line.id, dish.name)
            continue

        recipe_unit = recipe_line.unit_of_measure or ingredient.base_unit
        try:
            per_dish = convert(recipe_line.quantity_needed, recipe_unit, ingredient.base_unit) * multiplier
        except LedgerError as e:
            logger.warning("Cannot convert %s to %s for ingredient %s in dish %s: %s",
                           recipe_unit, ingredient.base_unit, ingredient.name, dish.name, e.message)
            lines.append(RequiredIngredient(ingredient, recipe_unit, None, None,
                                            recipe_line.is_optional, conversion_error=e))
            continue

        lines.append(RequiredIngredient(ingredient, recipe_unit, per_dish, per_dish * quantity,
                                        recipe_line.is_optional))
    return lines


def _assess(lines):
    """
    Compare requirements with current stock.

    Requirements of recipe lines sharing an ingredient are summed before the
    comparison. Optional lines never block a sale.
    """
    totals = {}
    for line in lines:
        if line.required is not None and not line.is_optional:
            totals[line.ingredient.id] = totals.get(line.ingredient.id, 0) + line.required

    can_fulfill = True
    report = []
    for line in lines:
        ingredient = line.ingredient
        current_stock = ingredient.current_stock or 0
        if line.conversion_error is not None:
            is_available = line.is_optional
            shortage = None
        elif line.is_optional:
            is_available = current_stock >= line.required
            shortage = 0 if is_available else line.required - current_stock
        else:
            total = stock_quantity(totals[ingredient.id])
            is_available = current_stock >= total
            shortage = 0 if is_available else total - current_stock

        if not is_available and not line.is_optional:
            can_fulfill = False

        report.append({
            'ingredient_id': ingredient.id,
            'ingredient_name': ingredient.name,
            'base_unit': ingredient.base_unit,
            'recipe_unit': line.recipe_unit,
            'required_quantity': line.required,
            'current_stock': current_stock,
            'is_available': is_available,
            'is_optional': line.is_optional,
            'shortage': shortage,
            'conversion_error': line.conversion_error.code if line.conversion_error else None,
        })
    return can_fulfill, report


def check_stock_availability(session, dish_id, quantity, variant_id=None, excluded_ingredient_ids=()):
    """
    Report whether quantity servings of a dish can be made from current stock.

    Read only. Returns dict with dish_id, dish_name, quantity_requested,
    can_fulfill and one entry per recipe line under ingredients.
    """
    _require_quantity(quantity)
    dish = get_or_raise(session, Dish, dish_id)
    variant = _load_variant(session, dish, variant_id)

    lines = calculate_required_quantities(dish, quantity, variant, excluded_ingredient_ids)
    can_fulfill, report = _assess(lines)
    return {
        'dish_id': dish.id,
        'dish_name': dish.name,
        'quantity_requested': quantity,
        'can_fulfill': can_fulfill,
        'ingredients': report,
    }


def has_available_stock(session, dish_id, quantity=1, variant_id=None, excluded_ingredient_ids=()):
    return check_stock_availability(session, dish_id, quantity, variant_id, excluded_ingredient_ids)['can_fulfill']


def _deduct(session, dish, quantity, variant=None, excluded_ingredient_ids=()):
    """
    Take quantity servings of dish out of stock. Must run inside atomic().

    Ingredient rows are locked before the pre-flight check, so the check and
    the deductions see the same stock.
    """
    lines = calculate_required_quantities(dish, quantity, variant, excluded_ingredient_ids)
    if not lines:
        return {
            'dish_id': dish.id,
            'dish_name': dish.name,
            'quantity_sold': quantity,
            'ingredients_processed': 0,
            'ingredients_updated': [],
            'low_stock': [],
        }

    lock_ingredients(session, [line.ingredient.id for line in lines])

    errors = [line.conversion_error for line in lines if line.conversion_error and not line.is_optional]
    if errors:
        raise errors[0]

    can_fulfill, report = _assess(lines)
    if not can_fulfill:
        shortages = [
            {
                'ingredient_id': entry['ingredient_id'],
                'ingredient_name': entry['ingredient_name'],
                'required': entry['required_quantity'],
                'available': entry['current_stock'],
                'shortage': entry['shortage'],
                'base_unit': entry['base_unit'],
            }
            for entry in report if not entry['is_available'] and not entry['is_optional']
        ]
        logger.warning("Insufficient stock for dish %s x%s: %s", dish.name, quantity, shortages)
        raise InsufficientStockError(f"Insufficient stock for dish: {dish.name}", shortages=shortages)

    # Required lines first, so an optional line only takes what they leave
    ordered = [line for line in lines if not line.is_optional] + [line for line in lines if line.is_optional]

    updated = []
    low_stock = []
    for line in ordered:
        ingredient = line.ingredient
        if line.is_optional and (line.conversion_error or ingredient.current_stock < stock_quantity(line.required)):
            logger.warning("Skipping optional ingredient %s for dish %s: not enough stock left",
                           ingredient.name, dish.name)
            continue

        old_stock = ingredient.current_stock
        decrease_stock(ingredient, line.required)
        updated.append({
            'ingredient_id': ingredient.id,
            'ingredient_name': ingredient.name,
            'success': True,
            'quantity_per_dish': line.quantity_per_dish,
            'total_quantity_used': line.required,
            'old_stock': old_stock,
            'new_stock': ingredient.current_stock,
            'base_unit': ingredient.base_unit,
        })

        if ingredient.is_low_stock and ingredient.id not in low_stock:
            logger.warning("Ingredient %s is at or below reorder level. Current: %s, Reorder Level: %s",
                           ingredient.name, ingredient.current_stock, ingredient.reorder_level)
            low_stock.append(ingredient.id)
            emit(stock_low, InventoryEvent.from_ingredient(ingredient, ACTION_DECREASED, old_stock),
                 object_session(ingredient))

    return {
        'dish_id': dish.id,
        'dish_name': dish.name,
        'quantity_sold': quantity,
        'ingredients_processed': len(updated),
        'ingredients_updated': updated,
        'low_stock': low_stock,
    }


def subtract_stock_from_dish_sale(session, dish_id, quantity, variant_id=None, excluded_ingredient_ids=()):
    """
    Deduct the ingredients of quantity servings of a dish.

    Either every ingredient is deducted or none is.

    Returns:
        dict with dish_id, dish_name, quantity_sold, ingredients_processed,
        ingredients_updated and the ids of ingredients now at or below their
        reorder level under low_stock

    Raises:
        InsufficientStockError: with the shortage report, before any change
        UnknownUnitError / IncompatibleUnitsError: for a recipe line whose
            unit cannot be converted
    """
    _require_quantity(quantity)
    with atomic(session):
        dish = get_or_raise(session, Dish, dish_id)
        variant = _load_variant(session, dish, variant_id)
        result = _deduct(session, dish, quantity, variant, excluded_ingredient_ids)

    logger.info("Stock subtracted for dish sale %s x%s: %s ingredients processed",
                result['dish_name'], quantity, result['ingredients_processed'])
    return result


def get_low_stock_ingredients(session, restaurant_id=None):
    """Ingredients at or below their reorder level, lowest stock first."""
    query = session.query(Ingredient).filter(Ingredient.current_stock <= Ingredient.reorder_level)
    if restaurant_id is not None:
        query = query.filter(Ingredient.restaurant_id == restaurant_id)
    return query.order_by(Ingredient.current_stock.asc(), Ingredient.id.asc()).all()


def _cost_per_base_unit(ingredient, offer):
    contents_unit = offer.package_contents_unit or ingredient.base_unit
    contents = convert(offer.package_contents_quantity, contents_unit, ingredient.base_unit)
    base_units = (offer.package_quantity or 1) * contents
    if base_units <= 0:
        return None
    return offer.package_price / base_units


def _cheapest_cost(ingredient):
    best = None
    for offer in ingredient.offers:
        if not offer.is_active or not offer.package_contents_quantity:
            continue
        try:
            cost = _cost_per_base_unit(ingredient, offer)
        except LedgerError:
            continue
        if cost is not None and (best is None or cost < best[0]):
            best = (cost, offer)
    return best


def calculate_ingredient_cost(session, dish_id, quantity=1):
    """
    Ingredient cost of quantity servings, priced at each ingredient's
    cheapest active supplier offer (falling back to cost_per_unit).
    """
    _require_quantity(quantity)
    dish = get_or_raise(session, Dish, dish_id)

    total_cost = 0.0
    ingredients = []
    for line in calculate_required_quantities(dish, quantity):
        ingredient = line.ingredient
        cheapest = _cheapest_cost(ingredient)
        if cheapest is not None:
            cost_per_unit, offer = cheapest
            supplier_name = offer.supplier.name if offer.supplier else None
        else:
            cost_per_unit = ingredient.cost_per_unit or None
            supplier_name = None

        cost = 0.0
        if cost_per_unit is not None and line.required is not None:
            cost = line.required * cost_per_unit
            total_cost += cost

        ingredients.append({
            'ingredient_id': ingredient.id,
            'ingredient_name': ingredient.name,
            'quantity_needed': line.required,
            'base_unit': ingredient.base_unit,
            'cost_per_unit': cost_per_unit,
            'total_cost': round(cost, 2),
            'supplier_name': supplier_name or 'No active supplier',
        })

    return {
        'dish_id': dish.id,
        'dish_name': dish.name,
        'quantity': quantity,
        'total_ingredient_cost': round(total_cost, 2),
        'ingredients': ingredients,
    }


# =========== ORDER ITEMS ===========

def get_excluded_ingredient_ids(session, order_id, dish_id):
    """Ingredients the customer asked to leave out of dish on this order."""
    rows = (session.query(CustomerRequest.ingredient_id)
            .filter_by(order_id=order_id, dish_id=dish_id, request_type=REQUEST_EXCLUDE)
            .filter(CustomerRequest.ingredient_id.isnot(None))
            .all())
    return {row[0] for row in rows}


def _recalculate_order_total(order):
    order.total_amount = round(sum(item.total_price or 0 for item in order.items), 2)


def deduct_ingredients_for_quantity(session, item, additional_quantity):
    """
    Deduct additional_quantity more servings of an order item.

    Shares the recipe expansion of subtract_stock_from_dish_sale(), and
    honours the customer's exclusions and the item's variant. Must run
    inside atomic().
    """
    _require_quantity(additional_quantity)
    excluded = get_excluded_ingredient_ids(session, item.order_id, item.dish_id)
    result = _deduct(session, item.dish, additional_quantity, item.variant, excluded)

    item.deducted_quantity = (item.deducted_quantity or 0) + additional_quantity
    item.inventory_deducted = True
    item.inventory_deducted_at = utcnow()
    return result


def deduct_ingredients_from_inventory(session, item_id):
    """
    Deduct whatever part of an order item has not been deducted yet.

    Returns None when the item is already fully deducted.
    """
    with atomic(session):
        item = get_or_raise(session, CustomerOrderItem, item_id, lock=True)
        remaining = item.quantity - (item.deducted_quantity or 0)
        if remaining <= 0:
            return None
        return deduct_ingredients_for_quantity(session, item, remaining)


def create_order_item(session, order_id, dish_id, quantity, variant_id=None,
                      excluded_ingredient_ids=(), unit_price=None):
    """
    Add a dish to an order and deduct its ingredients in the same transaction.

    If the stock is short, nothing is created.

    Returns:
        (CustomerOrderItem, deduction result)
    """
    _require_quantity(quantity)
    with atomic(session):
        order = get_or_raise(session, CustomerOrder, order_id)
        dish = get_or_raise(session, Dish, dish_id)
        variant = _load_variant(session, dish, variant_id)

        if unit_price is None:
            price_modifier = (variant.price_modifier or 0) if variant is not None else 0
            unit_price = (dish.price or 0) + price_modifier

        item = CustomerOrderItem(
            order=order,
            dish=dish,
            variant=variant,
            quantity=quantity,
            unit_price=unit_price,
            total_price=round(unit_price * quantity, 2),
        )
        session.add(item)
        for ingredient_id in set(excluded_ingredient_ids or ()):
            session.add(CustomerRequest(order_id=order.id, dish_id=dish.id,
                                        ingredient_id=ingredient_id, request_type=REQUEST_EXCLUDE))
        session.flush()

        result = deduct_ingredients_for_quantity(session, item, quantity)
        _recalculate_order_total(order)

    logger.info("Order item %s created for order %s: %s x%s", item.id, order_id, result['dish_name'], quantity)
    return item, result


def update_order_item_quantity(session, item_id, new_quantity):
    """
    Change an order item's quantity.

    An increase deducts only the servings beyond what was already deducted.
    A decrease does not return stock: prepared food is not restocked.

    Returns:
        the deduction result, or None when nothing had to be deducted
    """
    _require_quantity(new_quantity)
    with atomic(session):
        item = get_or_raise(session, CustomerOrderItem, item_id, lock=True)
        additional = new_quantity - (item.deducted_quantity or 0)

        result = None
        if additional > 0:
            result = deduct_ingredients_for_quantity(session, item, additional)

        item.quantity = new_quantity
        item.total_price = round((item.unit_price or 0) * new_quantity, 2)
        _recalculate_order_total(item.order)

    logger.info("Order item %s quantity set to %s (%s more deducted)",
                item_id, new_quantity, max(additional, 0))
    return result
