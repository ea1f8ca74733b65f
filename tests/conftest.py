"""
Shared fixtures: a testing app on in-memory SQLite and factories for the
rows the ledger works on.
"""

from datetime import date

import pytest

from app import create_app
from models import (
    db,
    CustomerOrder,
    Dish,
    DishIngredient,
    DishVariant,
    Ingredient,
    IngredientSupplier,
    PurchaseOrder,
    PurchaseOrderItem,
    Supplier,
)


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def session(app):
    return db.session


@pytest.fixture
def make_supplier(session):
    def make(name='Metro Foods', payment_terms='NET_30', restaurant_id=1):
        supplier = Supplier(name=name, payment_terms=payment_terms, restaurant_id=restaurant_id)
        session.add(supplier)
        session.commit()
        return supplier
    return make


@pytest.fixture
def make_ingredient(session):
    def make(name='Rice', base_unit='g', current_stock=0.0, packages=0, reorder_level=0.0,
             cost_per_unit=0.0, restaurant_id=1):
        ingredient = Ingredient(
            name=name,
            base_unit=base_unit,
            current_stock=current_stock,
            packages=packages,
            reorder_level=reorder_level,
            cost_per_unit=cost_per_unit,
            restaurant_id=restaurant_id,
        )
        session.add(ingredient)
        session.commit()
        return ingredient
    return make


@pytest.fixture
def make_offer(session):
    def make(ingredient, supplier, package_contents_quantity, package_contents_unit=None,
             package_price=0.0, package_quantity=1.0, is_active=True):
        offer = IngredientSupplier(
            ingredient=ingredient,
            supplier=supplier,
            package_contents_quantity=package_contents_quantity,
            package_contents_unit=package_contents_unit,
            package_price=package_price,
            package_quantity=package_quantity,
            is_active=is_active,
        )
        session.add(offer)
        session.commit()
        return offer
    return make


@pytest.fixture
def make_dish(session):
    """
    make(name, [(ingredient, quantity, unit), ...], price=..., optional=set_of_ingredient_ids)

    A recipe line may carry a fourth is_optional element of its own.
    """
    def make(name, recipe, price=100.0, optional=(), restaurant_id=1):
        dish = Dish(name=name, price=price, restaurant_id=restaurant_id, status='active')
        for line in recipe:
            ingredient, quantity, unit = line[:3]
            is_optional = line[3] if len(line) > 3 else ingredient.id in optional
            dish.recipe.append(DishIngredient(
                ingredient=ingredient,
                quantity_needed=quantity,
                unit_of_measure=unit,
                is_optional=is_optional,
            ))
        session.add(dish)
        session.commit()
        return dish
    return make


@pytest.fixture
def make_variant(session):
    def make(dish, size_name='Large', quantity_multiplier=1.5, price_modifier=0.0):
        variant = DishVariant(dish=dish, size_name=size_name,
                              quantity_multiplier=quantity_multiplier, price_modifier=price_modifier)
        session.add(variant)
        session.commit()
        return variant
    return make


@pytest.fixture
def make_order(session):
    def make(restaurant_id=1):
        order = CustomerOrder(restaurant_id=restaurant_id)
        session.add(order)
        session.commit()
        return order
    return make


@pytest.fixture
def make_purchase_order(session):
    """make(supplier, [(ingredient, received_quantity, unit_price), ...], status=...)"""
    counter = {'n': 0}

    def make(supplier, lines, status='delivered', delivered_on=date(2026, 1, 10),
             supplier_name=None, restaurant_id=1):
        counter['n'] += 1
        purchase_order = PurchaseOrder(
            po_number=f'PO-2026-{counter["n"]:04d}',
            restaurant_id=restaurant_id,
            supplier=supplier,
            supplier_name=supplier_name,
            status=status,
            actual_delivery_date=delivered_on,
        )
        for ingredient, received_quantity, unit_price in lines:
            purchase_order.items.append(PurchaseOrderItem(
                ingredient=ingredient,
                ordered_quantity=received_quantity,
                received_quantity=received_quantity,
                unit_price=unit_price,
                total_price=received_quantity * unit_price,
            ))
        session.add(purchase_order)
        session.commit()
        return purchase_order
    return make
