"""
Waste Log Model

Contains WasteLog, the record of stock written off as damaged or spoiled.
"""

from .base import db


class WasteLog(db.Model):
    """Damage or spoilage write-off, in the unit the staff reported."""
    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.Integer, nullable=True)
    type = db.Column(db.String(20), nullable=False)  # 'damage' or 'spoilage'
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(20), nullable=False)
    base_quantity = db.Column(db.Float, nullable=False)  # quantity in the ingredient's base_unit
    reason = db.Column(db.String(255), default='')
    notes = db.Column(db.Text, default='')
    incident_date = db.Column(db.Date, nullable=False)
    estimated_cost = db.Column(db.Float, nullable=True)
    ingredient = db.relationship('Ingredient')
