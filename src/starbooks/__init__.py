"""StarBooks: a personal book tracker with a Wishlist, Archives and Hangar."""

__version__ = "0.1.0"
