"""
Unit Conversion Service

Converts quantities between units of the same family (weight, volume,
count) through the family's base unit. Pure functions, no database access.
"""

from constants import UNIT_FAMILIES, SUGGESTED_UNITS
from .errors import UnknownUnitError, IncompatibleUnitsError


def _normalize(unit):
    return (unit or '').strip().lower()


def get_unit_type(unit):
    """Return 'weight', 'volume' or 'count' for a unit, or None if unknown."""
    unit = _normalize(unit)
    for unit_type, (_, factors) in UNIT_FAMILIES.items():
        if unit in factors:
            return unit_type
    return None


def get_base_unit(unit):
    """Return the canonical base unit (g, ml or pcs) of a unit's family."""
    unit_type = get_unit_type(unit)
    if unit_type is None:
        raise UnknownUnitError(unit)
    return UNIT_FAMILIES[unit_type][0]


def get_all_units():
    """All known units grouped by family."""
    return {unit_type: list(factors) for unit_type, (_, factors) in UNIT_FAMILIES.items()}


def get_suggested_units(unit_type):
    return list(SUGGESTED_UNITS.get(_normalize(unit_type), []))


def are_units_compatible(unit1, unit2):
    """True when both units are known and belong to the same family."""
    type1 = get_unit_type(unit1)
    return type1 is not None and type1 == get_unit_type(unit2)


def convert(quantity, from_unit, to_unit):
    """
    Convert quantity from from_unit to to_unit.

    Identical units (ignoring case) return quantity untouched. Otherwise the
    result is quantity * factor(from_unit) / factor(to_unit), unrounded.

    Raises:
        UnknownUnitError: if either unit is not recognized
        IncompatibleUnitsError: if the units belong to different families
    """
    from_key = _normalize(from_unit)
    to_key = _normalize(to_unit)

    if from_key == to_key:
        return quantity

    from_type = get_unit_type(from_key)
    if from_type is None:
        raise UnknownUnitError(from_unit)
    to_type = get_unit_type(to_key)
    if to_type is None:
        raise UnknownUnitError(to_unit)
    if from_type != to_type:
        raise IncompatibleUnitsError(from_unit, to_unit)

    factors = UNIT_FAMILIES[from_type][1]
    return quantity * factors[from_key] / factors[to_key]


def convert_to_base_unit(quantity, from_unit):
    """
    Convert to the family's base unit and keep the original for provenance.

    Returns:
        dict with quantity, unit, original_quantity, original_unit
    """
    from_key = _normalize(from_unit)
    base_unit = get_base_unit(from_key)
    return {
        'quantity': convert(quantity, from_key, base_unit),
        'unit': base_unit,
        'original_quantity': quantity,
        'original_unit': from_key,
    }


def convert_from_base_unit(base_quantity, base_unit, to_unit):
    """Convert a stored base-unit quantity into a display unit."""
    return convert(base_quantity, base_unit, to_unit)


def format_quantity(quantity, unit):
    """Format a quantity with precision suited to its unit family."""
    unit_type = get_unit_type(unit)
    if unit_type == 'count':
        decimals = 0
    elif unit_type in ('weight', 'volume'):
        decimals = 2 if quantity >= 1000 else 3
    else:
        decimals = 2
    return f"{quantity:.{decimals}f}"
