"""
Purchase Order Models

Contains PurchaseOrder and PurchaseOrderItem. Item quantities are counted
in supplier packages, not in base units.
"""

from sqlalchemy.orm import validates

from constants import VALID_PO_STATUSES
from .base import db, utcnow


class PurchaseOrder(db.Model):
    """
    Purchase order sent to a supplier.

    supplier_id is null for manual receives, where supplier_name holds the
    free-text supplier. stock_received_at is set once the received items have
    been added to inventory; each item carries its own stamp as well, so a
    retry only receives the items that failed before.
    """
    id = db.Column(db.Integer, primary_key=True)
    po_number = db.Column(db.String(30), unique=True, nullable=True, index=True)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('supplier.id', ondelete='SET NULL'), nullable=True, index=True)
    supplier_name = db.Column(db.String(150), nullable=True)
    status = db.Column(db.String(30), default='draft', index=True)
    order_date = db.Column(db.Date, nullable=True)
    expected_delivery_date = db.Column(db.Date, nullable=True)
    actual_delivery_date = db.Column(db.Date, nullable=True)
    notes = db.Column(db.Text, default='')
    stock_received_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    supplier = db.relationship('Supplier')
    items = db.relationship('PurchaseOrderItem', backref='purchase_order', lazy=True,
                            cascade='all, delete-orphan', order_by='PurchaseOrderItem.id')
    bill = db.relationship('SupplierBill', backref='purchase_order', uselist=False)

    @validates('status')
    def validate_status(self, key, status):
        if status not in VALID_PO_STATUSES:
            raise ValueError(f"Invalid purchase order status: {status}")
        return status

    @property
    def supplier_display_name(self):
        if self.supplier is not None:
            return self.supplier.name
        return self.supplier_name or 'Unknown'


class PurchaseOrderItem(db.Model):
    """Line of a purchase order, in packages."""
    id = db.Column(db.Integer, primary_key=True)
    purchase_order_id = db.Column(db.Integer, db.ForeignKey('purchase_order.id', ondelete='CASCADE'),
                                  nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='SET NULL'), nullable=True, index=True)
    ordered_quantity = db.Column(db.Float, nullable=False, default=0.0)
    received_quantity = db.Column(db.Float, nullable=False, default=0.0)
    unit_price = db.Column(db.Float, nullable=False, default=0.0)
    total_price = db.Column(db.Float, default=0.0)
    unit_of_measure = db.Column(db.String(30), nullable=True)
    stock_received_at = db.Column(db.DateTime, nullable=True)  # Set once its packages are in stock
    ingredient = db.relationship('Ingredient')
