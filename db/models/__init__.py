from .user import User, UserRole
from .client import Client
from .supplier import Supplier
from .category import Category
from .product import Product
from .order import Order, OrderLine, OrderStatus
from .quote import Quote, QuoteLine, QuoteKind, QuoteStatus
from .delivery import Delivery
from .favorite import Favorite
from .session import UserSession

__all__ = [n for n in dir() if n[:1].isupper()]
