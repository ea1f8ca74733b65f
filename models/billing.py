"""
Billing Models

Contains SupplierBill and SupplierPayment. Monetary columns are written
only through services.billing, which keeps
outstanding_amount == max(0, total_amount - paid_amount).
"""

from .base import db, utcnow


class SupplierBill(db.Model):
    """Bill owed to a supplier for one received purchase order."""
    id = db.Column(db.Integer, primary_key=True)
    bill_number = db.Column(db.String(30), unique=True, nullable=True, index=True)
    purchase_order_id = db.Column(db.Integer, db.ForeignKey('purchase_order.id'), unique=True, nullable=False)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('supplier.id', ondelete='SET NULL'), nullable=True, index=True)
    supplier_invoice_number = db.Column(db.String(60), nullable=True)
    bill_date = db.Column(db.Date, nullable=False)
    due_date = db.Column(db.Date, nullable=False, index=True)
    subtotal = db.Column(db.Float, nullable=False, default=0.0)
    tax_amount = db.Column(db.Float, nullable=False, default=0.0)
    discount_amount = db.Column(db.Float, nullable=False, default=0.0)
    total_amount = db.Column(db.Float, nullable=False, default=0.0)
    paid_amount = db.Column(db.Float, nullable=False, default=0.0)
    outstanding_amount = db.Column(db.Float, nullable=False, default=0.0)
    status = db.Column(db.String(20), nullable=False, default='pending', index=True)
    notes = db.Column(db.Text, default='')
    created_at = db.Column(db.DateTime, default=utcnow)

    supplier = db.relationship('Supplier')
    payments = db.relationship('SupplierPayment', backref='bill', lazy=True, order_by='SupplierPayment.id')


class SupplierPayment(db.Model):
    """Payment against a bill. Never edited after creation."""
    id = db.Column(db.Integer, primary_key=True)
    payment_reference = db.Column(db.String(30), unique=True, nullable=True, index=True)
    bill_id = db.Column(db.Integer, db.ForeignKey('supplier_bill.id'), nullable=False, index=True)
    restaurant_id = db.Column(db.Integer, nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey('supplier.id', ondelete='SET NULL'), nullable=True)
    payment_date = db.Column(db.Date, nullable=False)
    payment_amount = db.Column(db.Float, nullable=False)
    payment_method = db.Column(db.String(30), nullable=False)
    transaction_reference = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, default='')
    created_by_user_id = db.Column(db.Integer, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='completed')
    created_at = db.Column(db.DateTime, default=utcnow)
