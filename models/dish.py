"""
Dish Models

Contains the Dish, its recipe lines (DishIngredient) and its size
variants (DishVariant).
"""

from .base import db


class Dish(db.Model):
    """Menu dish with its recipe."""
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    price = db.Column(db.Float, default=0.0)
    status = db.Column(db.String(20), default='draft')
    is_available = db.Column(db.Boolean, default=True)
    recipe = db.relationship('DishIngredient', backref='dish', lazy=True, cascade='all, delete-orphan',
                             order_by='DishIngredient.id')
    variants = db.relationship('DishVariant', backref='dish', lazy=True, cascade='all, delete-orphan')


class DishIngredient(db.Model):
    """Recipe line: how much of an ingredient one serving uses, in the recipe's own unit."""
    id = db.Column(db.Integer, primary_key=True)
    dish_id = db.Column(db.Integer, db.ForeignKey('dish.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=False, index=True)
    quantity_needed = db.Column(db.Float, nullable=False)
    unit_of_measure = db.Column(db.String(20), nullable=True)  # Falls back to the ingredient's base_unit
    is_optional = db.Column(db.Boolean, default=False, nullable=False)
    ingredient = db.relationship('Ingredient')

    @property
    def unit(self):
        if self.unit_of_measure:
            return self.unit_of_measure
        return self.ingredient.base_unit if self.ingredient else None


class DishVariant(db.Model):
    """Size variant of a dish; quantity_multiplier scales every recipe line."""
    id = db.Column(db.Integer, primary_key=True)
    dish_id = db.Column(db.Integer, db.ForeignKey('dish.id', ondelete='CASCADE'), nullable=False, index=True)
    size_name = db.Column(db.String(50), nullable=False)
    price_modifier = db.Column(db.Float, default=0.0)
    quantity_multiplier = db.Column(db.Float, nullable=False, default=1.0)
    is_default = db.Column(db.Boolean, default=False)
    is_available = db.Column(db.Boolean, default=True)
