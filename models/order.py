"""
Customer Order Models

Contains CustomerOrder, its items, and per-order customer requests such
as removing an ingredient from a dish.
"""

from .base import db


class CustomerOrder(db.Model):
    """Dine-in or takeout order."""
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    status = db.Column(db.String(20), default='pending')
    total_amount = db.Column(db.Float, default=0.0)
    items = db.relationship('CustomerOrderItem', backref='order', lazy=True, cascade='all, delete-orphan')


class CustomerOrderItem(db.Model):
    """
    Ordered dish.

    deducted_quantity tracks how many servings have already been taken out
    of inventory, so a later quantity increase only deducts the difference.
    """
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('customer_order.id', ondelete='CASCADE'), nullable=False, index=True)
    dish_id = db.Column(db.Integer, db.ForeignKey('dish.id'), nullable=False, index=True)
    variant_id = db.Column(db.Integer, db.ForeignKey('dish_variant.id', ondelete='SET NULL'), nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    unit_price = db.Column(db.Float, default=0.0)
    total_price = db.Column(db.Float, default=0.0)
    status = db.Column(db.String(20), default='pending')
    inventory_deducted = db.Column(db.Boolean, default=False, nullable=False)
    inventory_deducted_at = db.Column(db.DateTime, nullable=True)
    deducted_quantity = db.Column(db.Integer, default=0, nullable=False)
    dish = db.relationship('Dish')
    variant = db.relationship('DishVariant')


class CustomerRequest(db.Model):
    """Customer request on an ordered dish (e.g. 'exclude' an ingredient)."""
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('customer_order.id', ondelete='CASCADE'), nullable=False, index=True)
    dish_id = db.Column(db.Integer, db.ForeignKey('dish.id', ondelete='CASCADE'), nullable=False)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=True)
    request_type = db.Column(db.String(20), nullable=False, default='exclude')
    notes = db.Column(db.String(255), default='')
