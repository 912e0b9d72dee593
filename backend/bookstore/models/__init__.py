from .books import Book
from .users import User
from .purchases import Purchase

__all__ = [
    'Book',
    'User',
    'Purchase',
]
