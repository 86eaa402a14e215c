
from .base import Base
from .account import Account, OAuthAccount, AccountRole, AuthProvider
from .profiles import RestaurantProfile, RiderProfile
from .menu.menu_item import MenuItem
from .customer.cart_entry import CartEntry
from .customer.wishlist import Wishlist, WishlistItem
from .orders import Order, OrderItem
