"""
Purchase Order Receiving Service

Turns the received packages of a purchase order into ingredient stock.
Each line item succeeds or fails on its own; the purchase order as a whole
is received at most once.
"""

import logging

from models import Ingredient, IngredientSupplier, PurchaseOrder
from models.base import utcnow
from .errors import (
    LedgerError,
    MissingPackageQuantityError,
    PurchaseOrderAlreadyProcessedError,
    IncompatibleUnitsError,
    UnknownUnitError,
)
from .ledger import add_packages
from .transactions import atomic, get_or_raise, lock_rows
from .units import are_units_compatible, convert, get_unit_type

logger = logging.getLogger(__name__)


def save_ingredient_offer(session, ingredient, supplier_id, package_contents_quantity,
                          package_contents_unit=None, **fields):
    """
    Create or update the offer of supplier_id for ingredient.

    package_contents_unit must belong to the ingredient's unit family.

    Raises:
        UnknownUnitError: if the contents unit is not recognized
        IncompatibleUnitsError: if the contents unit cannot become base_unit
    """
    contents_unit = package_contents_unit or ingredient.base_unit
    if get_unit_type(contents_unit) is None:
        raise UnknownUnitError(contents_unit)
    if not are_units_compatible(contents_unit, ingredient.base_unit):
        raise IncompatibleUnitsError(contents_unit, ingredient.base_unit)

    offer = ingredient.offer_for_supplier(supplier_id)
    if offer is None:
        offer = IngredientSupplier(ingredient=ingredient, supplier_id=supplier_id)
        session.add(offer)

    offer.package_contents_quantity = package_contents_quantity
    offer.package_contents_unit = contents_unit
    for name, value in fields.items():
        setattr(offer, name, value)
    return offer


def resolve_contents_per_package(ingredient, supplier_id):
    """
    Base units held by one package of ingredient from supplier_id.

    Raises:
        MissingPackageQuantityError: no offer, or offer without contents
    """
    offer = ingredient.offer_for_supplier(supplier_id) if supplier_id else None
    if offer is None or not offer.package_contents_quantity:
        raise MissingPackageQuantityError(
            f"Package quantity not found for ingredient {ingredient.name} from supplier {supplier_id}",
            ingredient_id=ingredient.id, supplier_id=supplier_id,
        )
    contents_unit = offer.package_contents_unit or ingredient.base_unit
    return convert(offer.package_contents_quantity, contents_unit, ingredient.base_unit)


def _skipped(item, message):
    return {
        'item_id': item.id,
        'success': False,
        'skipped': True,
        'message': message,
    }


def _receive_item(item, ingredient, supplier_id):
    contents_per_package = resolve_contents_per_package(ingredient, supplier_id)
    packages_received = item.received_quantity

    old_stock = ingredient.current_stock
    old_packages = ingredient.packages
    add_packages(ingredient, packages_received, contents_per_package)

    return {
        'item_id': item.id,
        'ingredient_id': ingredient.id,
        'ingredient_name': ingredient.name,
        'success': True,
        'packages_received': packages_received,
        'contents_per_package': contents_per_package,
        'base_units_added': packages_received * contents_per_package,
        'old_stock': old_stock,
        'new_stock': ingredient.current_stock,
        'old_packages': old_packages,
        'new_packages': ingredient.packages,
        'base_unit': ingredient.base_unit,
    }


def add_stock_from_purchase_order(session, purchase_order_id):
    """
    Add the received packages of a purchase order to inventory.

    Items without an ingredient or without a received quantity are skipped;
    items whose package contents cannot be resolved fail. Neither stops the
    other items. Every received item is stamped with stock_received_at and
    skipped on later calls; once no item failed, the purchase order itself
    is stamped and further calls are refused.

    Returns:
        dict with purchase_order_id, po_number, supplier, items_processed,
        total_items and per-item results

    Raises:
        PurchaseOrderAlreadyProcessedError: stock was already received
    """
    with atomic(session):
        purchase_order = get_or_raise(session, PurchaseOrder, purchase_order_id, lock=True)
        if purchase_order.stock_received_at is not None:
            raise PurchaseOrderAlreadyProcessedError(
                f"Stock for purchase order {purchase_order.po_number} was already received "
                f"at {purchase_order.stock_received_at}",
                purchase_order_id=purchase_order_id,
            )

        items = list(purchase_order.items)
        ingredients = lock_rows(
            session, Ingredient,
            [item.ingredient_id for item in items if item.ingredient_id is not None],
            skip_missing=True,
        )

        results = []
        items_processed = 0
        outstanding = 0
        for item in items:
            ingredient = ingredients.get(item.ingredient_id)
            if ingredient is None:
                results.append(_skipped(item, 'Ingredient not found'))
                continue
            if not item.received_quantity or item.received_quantity <= 0:
                results.append(_skipped(item, 'No received quantity to process'))
                continue
            if item.stock_received_at is not None:
                results.append(_skipped(item, 'Stock already received for this item'))
                continue

            try:
                results.append(_receive_item(item, ingredient, purchase_order.supplier_id))
                item.stock_received_at = utcnow()
                items_processed += 1
            except LedgerError as e:
                outstanding += 1
                logger.error("Failed to update stock for purchase order item %s: %s", item.id, e.message)
                results.append({
                    'item_id': item.id,
                    'ingredient_id': ingredient.id,
                    'success': False,
                    'error': e.code,
                    'message': f"Error updating stock: {e.message}",
                })

        if outstanding == 0:
            purchase_order.stock_received_at = utcnow()

        summary = {
            'purchase_order_id': purchase_order.id,
            'po_number': purchase_order.po_number,
            'supplier': purchase_order.supplier_display_name,
            'items_processed': items_processed,
            'total_items': len(items),
            'results': results,
        }

    logger.info("Stock added from purchase order %s (%s): %s of %s items processed",
                summary['po_number'], summary['supplier'], items_processed, summary['total_items'])
    return summary
