"""
                La Bella Restaurant Backend

Ordering backend for a single restaurant: menu, orders, table
reservations, payment records and customer feedback, with best-effort
SMS and email confirmations.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
