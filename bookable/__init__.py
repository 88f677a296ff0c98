"""
bookable - compute bookable dates and time slots from availability,
bookings and external busy times.
"""

__version__ = "0.1.0"
