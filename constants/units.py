"""
Unit Constants and Conversion Tables

Contains the unit families, their canonical base units, and the fixed
conversion factors used by the inventory ledger.
"""

# Canonical base unit of each family
WEIGHT_BASE_UNIT = 'g'
VOLUME_BASE_UNIT = 'ml'
COUNT_BASE_UNIT = 'pcs'

# Weight conversions to grams
WEIGHT_TO_G = {
    'g': 1,
    'gram': 1,
    'grams': 1,
    'kg': 1000,
    'kilogram': 1000,
    'kilograms': 1000,
    'lb': 453.592,
    'pound': 453.592,
    'pounds': 453.592,
    'oz': 28.3495,
    'ounce': 28.3495,
    'ounces': 28.3495,
}

# Volume conversions to milliliters
VOLUME_TO_ML = {
    'ml': 1,
    'milliliter': 1,
    'milliliters': 1,
    'l': 1000,
    'liter': 1000,
    'liters': 1000,
    'cup': 236.588,
    'cups': 236.588,
    'tbsp': 14.7868,
    'tablespoon': 14.7868,
    'tablespoons': 14.7868,
    'tsp': 4.92892,
    'teaspoon': 4.92892,
    'teaspoons': 4.92892,
}

# Count units, all equal to one piece
COUNT_TO_PCS = {
    'pcs': 1,
    'piece': 1,
    'pieces': 1,
    'item': 1,
    'items': 1,
    'unit': 1,
    'units': 1,
}

# Unit family -> (base unit, conversion table)
UNIT_FAMILIES = {
    'weight': (WEIGHT_BASE_UNIT, WEIGHT_TO_G),
    'volume': (VOLUME_BASE_UNIT, VOLUME_TO_ML),
    'count': (COUNT_BASE_UNIT, COUNT_TO_PCS),
}

BASE_UNITS = {WEIGHT_BASE_UNIT, VOLUME_BASE_UNIT, COUNT_BASE_UNIT}

# Units offered in pickers for each family
SUGGESTED_UNITS = {
    'weight': ['g', 'kg', 'lb', 'oz'],
    'volume': ['ml', 'l', 'cup', 'tbsp', 'tsp'],
    'count': ['pcs', 'piece', 'item'],
}

# Stock quantities are kept to this many decimal places of the base unit
STOCK_PLACES = 6
