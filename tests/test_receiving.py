import pytest

from models import Ingredient, PurchaseOrder
from services import (
    IncompatibleUnitsError,
    MissingPackageQuantityError,
    UnknownUnitError,
    add_stock_from_purchase_order,
    resolve_contents_per_package,
    save_ingredient_offer,
)
from services.errors import PurchaseOrderAlreadyProcessedError, RecordNotFoundError


def test_received_packages_become_stock(session, make_supplier, make_ingredient, make_offer,
                                        make_purchase_order):
    supplier = make_supplier()
    rice = make_ingredient('Rice', 'g', current_stock=50000, packages=2)
    make_offer(rice, supplier, 25, 'kg', package_price=1250)
    purchase_order = make_purchase_order(supplier, [(rice, 5, 1250)])

    summary = add_stock_from_purchase_order(session, purchase_order.id)

    rice = session.get(Ingredient, rice.id)
    assert rice.current_stock == 175000
    assert rice.packages == 7
    assert summary['items_processed'] == 1
    assert summary['total_items'] == 1
    assert summary['supplier'] == 'Metro Foods'
    result = summary['results'][0]
    assert result['success'] is True
    assert result['contents_per_package'] == 25000
    assert result['base_units_added'] == 125000


def test_contents_in_base_unit_when_unit_missing(session, make_supplier, make_ingredient, make_offer,
                                                 make_purchase_order):
    supplier = make_supplier()
    eggs = make_ingredient('Eggs', 'pcs')
    make_offer(eggs, supplier, 30)
    purchase_order = make_purchase_order(supplier, [(eggs, 2, 180)])

    add_stock_from_purchase_order(session, purchase_order.id)

    assert session.get(Ingredient, eggs.id).current_stock == 60


def test_items_are_processed_independently(session, make_supplier, make_ingredient, make_offer,
                                           make_purchase_order):
    supplier = make_supplier()
    oil = make_ingredient('Oil', 'ml')
    make_offer(oil, supplier, 1, 'l')
    salt = make_ingredient('Salt', 'g')  # no offer from this supplier
    purchase_order = make_purchase_order(supplier, [(oil, 3, 200), (salt, 4, 20), (None, 1, 10)])

    summary = add_stock_from_purchase_order(session, purchase_order.id)

    assert session.get(Ingredient, oil.id).current_stock == 3000
    assert session.get(Ingredient, salt.id).current_stock == 0
    assert summary['items_processed'] == 1
    assert summary['total_items'] == 3

    oil_result, salt_result, orphan_result = summary['results']
    assert oil_result['success'] is True
    assert salt_result['success'] is False
    assert salt_result['error'] == 'missing_package_quantity'
    assert orphan_result['skipped'] is True


def test_zero_received_quantity_is_skipped(session, make_supplier, make_ingredient, make_offer,
                                           make_purchase_order):
    supplier = make_supplier()
    flour = make_ingredient('Flour', 'g', current_stock=100)
    make_offer(flour, supplier, 1, 'kg')
    purchase_order = make_purchase_order(supplier, [(flour, 0, 50)])

    summary = add_stock_from_purchase_order(session, purchase_order.id)

    assert summary['items_processed'] == 0
    assert summary['results'][0]['message'] == 'No received quantity to process'
    assert session.get(Ingredient, flour.id).current_stock == 100


def test_purchase_order_is_received_once(session, make_supplier, make_ingredient, make_offer,
                                         make_purchase_order):
    supplier = make_supplier()
    rice = make_ingredient('Rice', 'g')
    make_offer(rice, supplier, 25, 'kg')
    purchase_order = make_purchase_order(supplier, [(rice, 2, 1250)])

    add_stock_from_purchase_order(session, purchase_order.id)
    with pytest.raises(PurchaseOrderAlreadyProcessedError):
        add_stock_from_purchase_order(session, purchase_order.id)

    assert session.get(Ingredient, rice.id).current_stock == 50000
    assert session.get(PurchaseOrder, purchase_order.id).stock_received_at is not None


def test_retry_only_receives_failed_items(session, make_supplier, make_ingredient, make_offer,
                                          make_purchase_order):
    supplier = make_supplier()
    oil = make_ingredient('Oil', 'ml')
    make_offer(oil, supplier, 1, 'l')
    salt = make_ingredient('Salt', 'g')
    purchase_order = make_purchase_order(supplier, [(oil, 3, 200), (salt, 4, 20)])

    first = add_stock_from_purchase_order(session, purchase_order.id)
    assert first['items_processed'] == 1
    assert session.get(PurchaseOrder, purchase_order.id).stock_received_at is None

    make_offer(salt, supplier, 500, 'g')
    second = add_stock_from_purchase_order(session, purchase_order.id)

    assert second['items_processed'] == 1
    assert second['results'][0]['message'] == 'Stock already received for this item'
    assert session.get(Ingredient, oil.id).current_stock == 3000
    assert session.get(Ingredient, salt.id).current_stock == 2000
    assert session.get(PurchaseOrder, purchase_order.id).stock_received_at is not None


def test_manual_receive_without_supplier_fails_items(session, make_ingredient, make_purchase_order):
    rice = make_ingredient('Rice', 'g')
    purchase_order = make_purchase_order(None, [(rice, 1, 100)], supplier_name='Corner Market')

    summary = add_stock_from_purchase_order(session, purchase_order.id)

    assert summary['supplier'] == 'Corner Market'
    assert summary['results'][0]['error'] == 'missing_package_quantity'


def test_unknown_purchase_order(session):
    with pytest.raises(RecordNotFoundError):
        add_stock_from_purchase_order(session, 999)


class TestOffers:

    def test_save_offer_validates_unit_family(self, session, make_supplier, make_ingredient):
        supplier = make_supplier()
        milk = make_ingredient('Milk', 'ml')
        with pytest.raises(IncompatibleUnitsError):
            save_ingredient_offer(session, milk, supplier.id, 1, 'kg')
        with pytest.raises(UnknownUnitError):
            save_ingredient_offer(session, milk, supplier.id, 1, 'crate')

    def test_save_offer_creates_then_updates(self, session, make_supplier, make_ingredient):
        supplier = make_supplier()
        milk = make_ingredient('Milk', 'ml')

        offer = save_ingredient_offer(session, milk, supplier.id, 1, 'l', package_price=95)
        session.commit()
        same = save_ingredient_offer(session, milk, supplier.id, 2, 'l', package_price=180)
        session.commit()

        assert same.id == offer.id
        assert len(milk.offers) == 1
        assert resolve_contents_per_package(milk, supplier.id) == 2000

    def test_missing_offer(self, make_supplier, make_ingredient):
        supplier = make_supplier()
        milk = make_ingredient('Milk', 'ml')
        with pytest.raises(MissingPackageQuantityError):
            resolve_contents_per_package(milk, supplier.id)


def test_purchase_order_status_is_validated():
    with pytest.raises(ValueError):
        PurchaseOrder(restaurant_id=1, status='lost')
