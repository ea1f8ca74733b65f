from datetime import date

import pytest

from models import Ingredient, WasteLog
from services import (
    InsufficientPackagesError,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidWasteTypeError,
    add_packages,
    decrease_stock,
    get_stock_in_unit,
    has_sufficient_stock,
    increase_stock,
    inventory_updated,
    record_waste,
    remove_packages,
)
from services.events import pending_events


def detached(current_stock=0.0, packages=0, base_unit='g', reorder_level=0.0):
    return Ingredient(id=1, restaurant_id=1, name='Flour', base_unit=base_unit,
                      current_stock=current_stock, packages=packages, reorder_level=reorder_level)


class TestStockMovements:

    def test_increase_stock(self):
        ingredient = detached(100)
        event = increase_stock(ingredient, 50)
        assert ingredient.current_stock == 150
        assert event.previous_stock == 100
        assert event.new_stock == 150
        assert event.action == 'increased'

    def test_decrease_stock(self):
        ingredient = detached(100)
        decrease_stock(ingredient, 40)
        assert ingredient.current_stock == 60

    def test_decrease_stock_converts_units(self):
        ingredient = detached(2000)
        decrease_stock(ingredient, 1.5, 'kg')
        assert ingredient.current_stock == 500

    def test_decrease_to_exactly_zero(self):
        ingredient = detached(100)
        decrease_stock(ingredient, 100)
        assert ingredient.current_stock == 0

    def test_decrease_below_zero_is_refused(self):
        ingredient = detached(100)
        with pytest.raises(InsufficientStockError) as excinfo:
            decrease_stock(ingredient, 150)
        assert ingredient.current_stock == 100
        shortage = excinfo.value.shortages[0]
        assert shortage['required'] == 150
        assert shortage['available'] == 100
        assert shortage['shortage'] == 50

    @pytest.mark.parametrize('amount', [0, -5, None])
    def test_non_positive_amounts_are_refused(self, amount):
        ingredient = detached(100)
        with pytest.raises(InvalidQuantityError):
            increase_stock(ingredient, amount)
        with pytest.raises(InvalidQuantityError):
            decrease_stock(ingredient, amount)
        assert ingredient.current_stock == 100

    def test_stock_queries(self):
        ingredient = detached(2500)
        assert get_stock_in_unit(ingredient, 'kg') == pytest.approx(2.5)
        assert has_sufficient_stock(ingredient, 2.5, 'kg')
        assert not has_sufficient_stock(ingredient, 2501)


class TestPackages:

    def test_add_packages(self):
        ingredient = detached(50000, packages=2)
        add_packages(ingredient, 5, 25000)
        assert ingredient.packages == 7
        assert ingredient.current_stock == 175000

    def test_add_then_remove_restores_state(self):
        ingredient = detached(1234.5, packages=3)
        add_packages(ingredient, 4, 500)
        remove_packages(ingredient, 4, 500)
        assert ingredient.packages == 3
        assert ingredient.current_stock == 1234.5

    @pytest.mark.parametrize('start,count,contents', [
        (0.1, 3, 0.1),
        (1000.3, 7, 0.7),
        (0.0, 3, 333.3),
    ])
    def test_add_then_remove_is_exact_for_decimal_sizes(self, start, count, contents):
        ingredient = detached(start, packages=1)
        add_packages(ingredient, count, contents)
        remove_packages(ingredient, count, contents)
        assert ingredient.packages == 1
        assert ingredient.current_stock == start

    def test_increase_then_decrease_is_exact(self):
        ingredient = detached(0.3)
        increase_stock(ingredient, 0.1)
        assert ingredient.current_stock == 0.4
        decrease_stock(ingredient, 0.1)
        assert ingredient.current_stock == 0.3

    def test_remove_more_packages_than_held(self):
        ingredient = detached(10000, packages=1)
        with pytest.raises(InsufficientPackagesError):
            remove_packages(ingredient, 2, 1000)
        assert ingredient.packages == 1
        assert ingredient.current_stock == 10000

    def test_remove_packages_whose_contents_exceed_stock(self):
        ingredient = detached(500, packages=2)
        with pytest.raises(InsufficientStockError):
            remove_packages(ingredient, 1, 1000)
        assert ingredient.packages == 2
        assert ingredient.current_stock == 500


class TestInventoryEvents:

    def test_detached_ingredient_sends_immediately(self):
        received = []

        def receiver(sender, **kwargs):
            received.append(sender)

        with inventory_updated.connected_to(receiver):
            increase_stock(detached(10), 5)
        assert len(received) == 1
        assert received[0].new_stock == 15
        assert received[0].channel == 'restaurant.1.inventory'

    def test_events_wait_for_commit(self, session, make_ingredient):
        ingredient = make_ingredient(current_stock=100)
        received = []

        def receiver(sender, **kwargs):
            received.append(sender)

        with inventory_updated.connected_to(receiver):
            increase_stock(ingredient, 25)
            assert received == []
            assert len(pending_events(session)) == 1
            session.commit()

        assert [event.new_stock for event in received] == [125]
        assert pending_events(session) == []

    def test_rollback_drops_events(self, session, make_ingredient):
        ingredient = make_ingredient(current_stock=100)
        received = []

        def receiver(sender, **kwargs):
            received.append(sender)

        with inventory_updated.connected_to(receiver):
            decrease_stock(ingredient, 25)
            session.rollback()
            session.commit()

        assert received == []
        assert session.get(Ingredient, ingredient.id).current_stock == 100

    def test_event_payload(self):
        event = decrease_stock(detached(100), 30)
        data = event.to_dict()
        assert data['action'] == 'decreased'
        assert data['previous_stock'] == 100
        assert data['new_stock'] == 70
        assert data['message'] == 'Flour stock decreased by 30 g'
        assert 'timestamp' in data


class TestWaste:

    def test_record_waste(self, session, make_ingredient):
        ingredient = make_ingredient(current_stock=5000, cost_per_unit=0.01)
        waste = record_waste(session, ingredient.id, 1.2, 'kg', 'spoilage',
                             reason='Mould', incident_date=date(2026, 3, 1))

        assert session.get(Ingredient, ingredient.id).current_stock == pytest.approx(3800)
        stored = session.get(WasteLog, waste.id)
        assert stored.base_quantity == pytest.approx(1200)
        assert stored.quantity == 1.2
        assert stored.unit == 'kg'
        assert stored.estimated_cost == 12.0
        assert stored.incident_date == date(2026, 3, 1)

    def test_waste_beyond_stock_writes_nothing(self, session, make_ingredient):
        ingredient = make_ingredient(current_stock=500)
        with pytest.raises(InsufficientStockError):
            record_waste(session, ingredient.id, 1, 'kg', 'damage')
        assert session.get(Ingredient, ingredient.id).current_stock == 500
        assert session.query(WasteLog).count() == 0

    def test_unknown_waste_type(self, session, make_ingredient):
        ingredient = make_ingredient(current_stock=500)
        with pytest.raises(InvalidWasteTypeError) as excinfo:
            record_waste(session, ingredient.id, 1, 'g', 'theft')
        assert excinfo.value.to_dict()['error'] == 'invalid_waste_type'
        assert session.get(Ingredient, ingredient.id).current_stock == 500


def test_ingredient_base_unit_must_be_canonical():
    with pytest.raises(ValueError):
        Ingredient(restaurant_id=1, name='Flour', base_unit='kg')
