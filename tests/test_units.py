from itertools import permutations

import pytest

from constants import UNIT_FAMILIES
from services import (
    IncompatibleUnitsError,
    UnknownUnitError,
    are_units_compatible,
    convert,
    convert_from_base_unit,
    convert_to_base_unit,
    format_quantity,
    get_all_units,
    get_base_unit,
    get_suggested_units,
    get_unit_type,
)


def test_kilograms_to_grams():
    assert convert(1, 'kg', 'g') == 1000


def test_cups_to_milliliters():
    assert convert(2, 'cup', 'ml') == pytest.approx(473.176)


def test_pounds_to_ounces_goes_through_grams():
    assert convert(1, 'lb', 'oz') == pytest.approx(453.592 / 28.3495)


def test_unit_names_are_case_insensitive():
    assert convert(1, 'KG', 'G') == 1000
    assert convert(3, ' Tbsp ', 'tsp') == pytest.approx(3 * 14.7868 / 4.92892)


def test_same_unit_returns_quantity_untouched():
    assert convert(12.345, 'g', 'g') == 12.345
    assert convert(7, 'PCS', 'pcs') == 7


def test_same_unknown_unit_is_returned_untouched():
    # Identical units short-circuit before lookup
    assert convert(5, 'bunch', 'bunch') == 5


SAME_FAMILY_PAIRS = [
    pair
    for _, table in UNIT_FAMILIES.values()
    for pair in permutations(table, 2)
]


@pytest.mark.parametrize('unit_a,unit_b', SAME_FAMILY_PAIRS)
@pytest.mark.parametrize('quantity', [0.001, 1.5, 250, 98765.4321])
def test_round_trip_is_lossless(quantity, unit_a, unit_b):
    there = convert(quantity, unit_a, unit_b)
    assert convert(there, unit_b, unit_a) == pytest.approx(quantity, rel=1e-9)


def test_unknown_unit_raises():
    with pytest.raises(UnknownUnitError) as excinfo:
        convert(1, 'bushel', 'g')
    assert excinfo.value.unit == 'bushel'
    assert excinfo.value.code == 'unknown_unit'


def test_unknown_target_unit_raises():
    with pytest.raises(UnknownUnitError):
        convert(1, 'g', 'stone')


def test_incompatible_families_raise():
    with pytest.raises(IncompatibleUnitsError) as excinfo:
        convert(1, 'kg', 'ml')
    assert excinfo.value.to_dict()['from_unit'] == 'kg'
    assert excinfo.value.to_dict()['to_unit'] == 'ml'


def test_conversion_errors_are_value_errors():
    with pytest.raises(ValueError):
        convert(1, 'cup', 'pcs')


def test_get_unit_type():
    assert get_unit_type('oz') == 'weight'
    assert get_unit_type('Liters') == 'volume'
    assert get_unit_type('item') == 'count'
    assert get_unit_type('handful') is None


def test_get_base_unit():
    assert get_base_unit('lb') == 'g'
    assert get_base_unit('tsp') == 'ml'
    assert get_base_unit('units') == 'pcs'
    with pytest.raises(UnknownUnitError):
        get_base_unit('pinch')


def test_are_units_compatible():
    assert are_units_compatible('kg', 'oz')
    assert not are_units_compatible('kg', 'ml')
    assert not are_units_compatible('pinch', 'pinch')


def test_convert_to_base_unit_keeps_original():
    result = convert_to_base_unit(2, 'KG')
    assert result == {
        'quantity': 2000,
        'unit': 'g',
        'original_quantity': 2,
        'original_unit': 'kg',
    }


def test_convert_from_base_unit():
    assert convert_from_base_unit(1500, 'ml', 'l') == pytest.approx(1.5)


def test_get_all_units_groups_by_family():
    units = get_all_units()
    assert set(units) == {'weight', 'volume', 'count'}
    assert 'kg' in units['weight']
    assert 'cup' in units['volume']
    assert 'pcs' in units['count']


def test_get_suggested_units():
    assert 'kg' in get_suggested_units('weight')
    assert get_suggested_units('temperature') == []


def test_format_quantity():
    assert format_quantity(3, 'pcs') == '3'
    assert format_quantity(1500.5, 'g') == '1500.50'
    assert format_quantity(12.3456, 'ml') == '12.346'
    assert format_quantity(1.234, 'bunch') == '1.23'
