"""Initial ledger schema

Revision ID: 3b9d2e7a41c0
Revises:
Create Date: 2026-10-17 09:12:44.118305

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b9d2e7a41c0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'supplier',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('payment_terms', sa.String(length=20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('supplier', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_supplier_restaurant_id'), ['restaurant_id'], unique=False)

    op.create_table(
        'ingredient',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('base_unit', sa.String(length=10), nullable=False),
        sa.Column('cost_per_unit', sa.Float(), nullable=True),
        sa.Column('current_stock', sa.Float(), nullable=False),
        sa.Column('packages', sa.Integer(), nullable=False),
        sa.Column('reorder_level', sa.Float(), nullable=False),
        sa.CheckConstraint('current_stock >= 0', name='ck_ingredient_stock_non_negative'),
        sa.CheckConstraint('packages >= 0', name='ck_ingredient_packages_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('ingredient', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_ingredient_name'), ['name'], unique=False)
        batch_op.create_index(batch_op.f('ix_ingredient_restaurant_id'), ['restaurant_id'], unique=False)

    op.create_table(
        'ingredient_supplier',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.Integer(), nullable=False),
        sa.Column('package_unit', sa.String(length=30), nullable=True),
        sa.Column('package_quantity', sa.Float(), nullable=False),
        sa.Column('package_contents_quantity', sa.Float(), nullable=True),
        sa.Column('package_contents_unit', sa.String(length=20), nullable=True),
        sa.Column('package_price', sa.Float(), nullable=False),
        sa.Column('lead_time_days', sa.Float(), nullable=True),
        sa.Column('minimum_order_quantity', sa.Float(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredient.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['supplier_id'], ['supplier.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ingredient_id', 'supplier_id', name='uq_ingredient_supplier')
    )
    with op.batch_alter_table('ingredient_supplier', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_ingredient_supplier_ingredient_id'), ['ingredient_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_ingredient_supplier_supplier_id'), ['supplier_id'], unique=False)

    op.create_table(
        'dish',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('dish', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_dish_restaurant_id'), ['restaurant_id'], unique=False)

    op.create_table(
        'dish_ingredient',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dish_id', sa.Integer(), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), nullable=False),
        sa.Column('quantity_needed', sa.Float(), nullable=False),
        sa.Column('unit_of_measure', sa.String(length=20), nullable=True),
        sa.Column('is_optional', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['dish_id'], ['dish.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredient.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('dish_ingredient', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_dish_ingredient_dish_id'), ['dish_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_dish_ingredient_ingredient_id'), ['ingredient_id'], unique=False)

    op.create_table(
        'dish_variant',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('dish_id', sa.Integer(), nullable=False),
        sa.Column('size_name', sa.String(length=50), nullable=False),
        sa.Column('price_modifier', sa.Float(), nullable=True),
        sa.Column('quantity_multiplier', sa.Float(), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=True),
        sa.ForeignKeyConstraint(['dish_id'], ['dish.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('dish_variant', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_dish_variant_dish_id'), ['dish_id'], unique=False)

    op.create_table(
        'customer_order',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('customer_order', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_customer_order_restaurant_id'), ['restaurant_id'], unique=False)

    op.create_table(
        'customer_order_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('dish_id', sa.Integer(), nullable=False),
        sa.Column('variant_id', sa.Integer(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=True),
        sa.Column('total_price', sa.Float(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('inventory_deducted', sa.Boolean(), nullable=False),
        sa.Column('inventory_deducted_at', sa.DateTime(), nullable=True),
        sa.Column('deducted_quantity', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['dish_id'], ['dish.id']),
        sa.ForeignKeyConstraint(['order_id'], ['customer_order.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['variant_id'], ['dish_variant.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('customer_order_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_customer_order_item_dish_id'), ['dish_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_customer_order_item_order_id'), ['order_id'], unique=False)

    op.create_table(
        'customer_request',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.Integer(), nullable=False),
        sa.Column('dish_id', sa.Integer(), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), nullable=True),
        sa.Column('request_type', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(['dish_id'], ['dish.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredient.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['order_id'], ['customer_order.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('customer_request', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_customer_request_order_id'), ['order_id'], unique=False)

    op.create_table(
        'purchase_order',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('po_number', sa.String(length=30), nullable=True),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.Integer(), nullable=True),
        sa.Column('supplier_name', sa.String(length=150), nullable=True),
        sa.Column('status', sa.String(length=30), nullable=True),
        sa.Column('order_date', sa.Date(), nullable=True),
        sa.Column('expected_delivery_date', sa.Date(), nullable=True),
        sa.Column('actual_delivery_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('stock_received_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['supplier_id'], ['supplier.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('purchase_order', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_purchase_order_po_number'), ['po_number'], unique=True)
        batch_op.create_index(batch_op.f('ix_purchase_order_restaurant_id'), ['restaurant_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_purchase_order_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_purchase_order_supplier_id'), ['supplier_id'], unique=False)

    op.create_table(
        'purchase_order_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('purchase_order_id', sa.Integer(), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), nullable=True),
        sa.Column('ordered_quantity', sa.Float(), nullable=False),
        sa.Column('received_quantity', sa.Float(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=True),
        sa.Column('unit_of_measure', sa.String(length=30), nullable=True),
        sa.Column('stock_received_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredient.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['purchase_order_id'], ['purchase_order.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('purchase_order_item', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_purchase_order_item_ingredient_id'), ['ingredient_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_purchase_order_item_purchase_order_id'), ['purchase_order_id'], unique=False)

    op.create_table(
        'supplier_bill',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('bill_number', sa.String(length=30), nullable=True),
        sa.Column('purchase_order_id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.Integer(), nullable=True),
        sa.Column('supplier_invoice_number', sa.String(length=60), nullable=True),
        sa.Column('bill_date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('tax_amount', sa.Float(), nullable=False),
        sa.Column('discount_amount', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('paid_amount', sa.Float(), nullable=False),
        sa.Column('outstanding_amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['purchase_order_id'], ['purchase_order.id']),
        sa.ForeignKeyConstraint(['supplier_id'], ['supplier.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('purchase_order_id')
    )
    with op.batch_alter_table('supplier_bill', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_supplier_bill_bill_number'), ['bill_number'], unique=True)
        batch_op.create_index(batch_op.f('ix_supplier_bill_due_date'), ['due_date'], unique=False)
        batch_op.create_index(batch_op.f('ix_supplier_bill_restaurant_id'), ['restaurant_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_supplier_bill_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_supplier_bill_supplier_id'), ['supplier_id'], unique=False)

    op.create_table(
        'supplier_payment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('payment_reference', sa.String(length=30), nullable=True),
        sa.Column('bill_id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.Integer(), nullable=True),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('payment_amount', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=False),
        sa.Column('transaction_reference', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['bill_id'], ['supplier_bill.id']),
        sa.ForeignKeyConstraint(['supplier_id'], ['supplier.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('supplier_payment', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_supplier_payment_bill_id'), ['bill_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_supplier_payment_payment_reference'), ['payment_reference'], unique=True)
        batch_op.create_index(batch_op.f('ix_supplier_payment_restaurant_id'), ['restaurant_id'], unique=False)

    op.create_table(
        'waste_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('ingredient_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('base_quantity', sa.Float(), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('incident_date', sa.Date(), nullable=False),
        sa.Column('estimated_cost', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['ingredient_id'], ['ingredient.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('waste_log', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_waste_log_ingredient_id'), ['ingredient_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_waste_log_restaurant_id'), ['restaurant_id'], unique=False)


def downgrade():
    op.drop_table('waste_log')
    op.drop_table('supplier_payment')
    op.drop_table('supplier_bill')
    op.drop_table('purchase_order_item')
    op.drop_table('purchase_order')
    op.drop_table('customer_request')
    op.drop_table('customer_order_item')
    op.drop_table('customer_order')
    op.drop_table('dish_variant')
    op.drop_table('dish_ingredient')
    op.drop_table('dish')
    op.drop_table('ingredient_supplier')
    op.drop_table('ingredient')
    op.drop_table('supplier')
