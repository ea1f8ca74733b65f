"""
Supplier Model
"""

from .base import db


class Supplier(db.Model):
    """Supplier of ingredients to a restaurant, with its payment terms."""
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    payment_terms = db.Column(db.String(20), default='NET_30')  # COD, NET_0 ... NET_90
    is_active = db.Column(db.Boolean, default=True, nullable=False)
