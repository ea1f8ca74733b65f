"""
Ingredient Models

Contains the Ingredient stock row and the IngredientSupplier offer that
describes how a supplier packages an ingredient.
"""

from sqlalchemy.orm import validates

from constants import VALID_BASE_UNITS
from .base import db


class Ingredient(db.Model):
    """
    Stocked ingredient of one restaurant.

    current_stock is always held in base_unit (g, ml or pcs). packages counts
    the tracked package units received from suppliers. Both are mutated only
    through services.ledger.
    """
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False, index=True)

    # Fixed at creation: 'g', 'ml' or 'pcs'
    base_unit = db.Column(db.String(10), nullable=False, default='g')

    cost_per_unit = db.Column(db.Float, default=0.0)
    current_stock = db.Column(db.Float, nullable=False, default=0.0)
    packages = db.Column(db.Integer, nullable=False, default=0)
    reorder_level = db.Column(db.Float, nullable=False, default=0.0)

    offers = db.relationship('IngredientSupplier', backref='ingredient', lazy=True, cascade='all, delete-orphan')

    __table_args__ = (
        db.CheckConstraint('current_stock >= 0', name='ck_ingredient_stock_non_negative'),
        db.CheckConstraint('packages >= 0', name='ck_ingredient_packages_non_negative'),
    )

    @validates('base_unit')
    def validate_base_unit(self, key, base_unit):
        if base_unit not in VALID_BASE_UNITS:
            raise ValueError(f"Invalid base unit: {base_unit}")
        return base_unit

    @property
    def is_low_stock(self):
        return (self.current_stock or 0) <= (self.reorder_level or 0)

    def offer_for_supplier(self, supplier_id):
        """Return this ingredient's offer from the given supplier, or None."""
        for offer in self.offers:
            if offer.supplier_id == supplier_id:
                return offer
        return None

    def __repr__(self):
        return f'<Ingredient {self.id} {self.name!r} {self.current_stock}{self.base_unit}>'


class IngredientSupplier(db.Model):
    """
    Supplier offer for an ingredient.

    One package holds package_contents_quantity of package_contents_unit,
    which must belong to the same unit family as the ingredient's base_unit.
    package_quantity is how many packages make up one purchase unit.
    """
    id = db.Column(db.Integer, primary_key=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('supplier.id', ondelete='CASCADE'), nullable=False, index=True)
    package_unit = db.Column(db.String(30), default='pack')  # Display label, e.g. 'sack'
    package_quantity = db.Column(db.Float, nullable=False, default=1.0)
    package_contents_quantity = db.Column(db.Float, nullable=True)
    package_contents_unit = db.Column(db.String(20), nullable=True)
    package_price = db.Column(db.Float, nullable=False, default=0.0)
    lead_time_days = db.Column(db.Float, nullable=True)
    minimum_order_quantity = db.Column(db.Float, default=1.0)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    supplier = db.relationship('Supplier', backref=db.backref('offers', lazy=True))

    __table_args__ = (
        db.UniqueConstraint('ingredient_id', 'supplier_id', name='uq_ingredient_supplier'),
    )
