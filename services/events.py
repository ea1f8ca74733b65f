"""
Inventory Notifications

Signals raised by the ledger. Subscribers (a websocket broadcaster, a
reorder mailer, ...) connect with inventory_updated.connect(fn).

Events raised inside a session are held on the session and only sent once
that session commits; a rollback drops them.
"""

import logging
from dataclasses import asdict, dataclass, field

from blinker import Namespace
from sqlalchemy import event
from sqlalchemy.orm import Session, object_session

from models.base import utcnow

logger = logging.getLogger(__name__)

_signals = Namespace()

# sender: InventoryEvent
inventory_updated = _signals.signal('inventory-updated')
# sender: InventoryEvent for an ingredient at or below its reorder level
stock_low = _signals.signal('stock-low')

PENDING_EVENTS_KEY = 'pending_inventory_events'

ACTION_INCREASED = 'increased'
ACTION_DECREASED = 'decreased'
ACTION_UPDATED = 'updated'


@dataclass(frozen=True)
class InventoryEvent:
    """Snapshot of an ingredient's stock right after a mutation."""
    ingredient_id: int
    restaurant_id: int
    ingredient_name: str
    action: str
    previous_stock: float
    new_stock: float
    packages: int
    base_unit: str
    reorder_level: float
    timestamp: object = field(default_factory=utcnow)

    @classmethod
    def from_ingredient(cls, ingredient, action, previous_stock):
        return cls(
            ingredient_id=ingredient.id,
            restaurant_id=ingredient.restaurant_id,
            ingredient_name=ingredient.name,
            action=action,
            previous_stock=previous_stock,
            new_stock=ingredient.current_stock,
            packages=ingredient.packages,
            base_unit=ingredient.base_unit,
            reorder_level=ingredient.reorder_level,
        )

    @property
    def channel(self):
        return f'restaurant.{self.restaurant_id}.inventory'

    @property
    def message(self):
        change = self.new_stock - self.previous_stock
        change_text = f'+{change:g}' if change > 0 else f'{change:g}'
        if self.action == ACTION_INCREASED:
            return f'{self.ingredient_name} stock increased by {change_text} {self.base_unit}'
        if self.action == ACTION_DECREASED:
            return f'{self.ingredient_name} stock decreased by {abs(change):g} {self.base_unit}'
        if self.action == ACTION_UPDATED:
            return f'{self.ingredient_name} stock updated'
        return 'Inventory updated'

    def to_dict(self):
        data = asdict(self)
        data['timestamp'] = self.timestamp.isoformat()
        data['message'] = self.message
        return data


def emit(signal, inventory_event, session=None):
    """
    Send inventory_event on signal once session commits.

    Without a session (a detached ingredient) the signal is sent at once.
    """
    if session is None:
        signal.send(inventory_event)
        return
    session.info.setdefault(PENDING_EVENTS_KEY, []).append((signal, inventory_event))


def emit_for(ingredient, action, previous_stock):
    """Queue an inventory_updated event for a mutated ingredient."""
    inventory_event = InventoryEvent.from_ingredient(ingredient, action, previous_stock)
    emit(inventory_updated, inventory_event, object_session(ingredient))
    return inventory_event


def pending_events(session):
    return [inventory_event for _, inventory_event in session.info.get(PENDING_EVENTS_KEY, [])]


@event.listens_for(Session, 'after_commit')
def _publish_pending(session):
    pending = session.info.pop(PENDING_EVENTS_KEY, [])
    for signal, inventory_event in pending:
        try:
            signal.send(inventory_event)
        except Exception:
            # Already committed; keep delivering to the other subscribers.
            logger.exception('Inventory subscriber failed for ingredient %s', inventory_event.ingredient_id)


@event.listens_for(Session, 'after_soft_rollback')
def _discard_pending(session, previous_transaction):
    dropped = session.info.pop(PENDING_EVENTS_KEY, [])
    if dropped:
        logger.debug('Dropped %d inventory events after rollback', len(dropped))
