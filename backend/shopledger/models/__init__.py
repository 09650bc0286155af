from .inventory import Item
from .customers import Customer
from .ledger import CreditTransaction, BottleRecord

__all__ = [
    'Item',
    'Customer',
    'CreditTransaction', 'BottleRecord',
]
