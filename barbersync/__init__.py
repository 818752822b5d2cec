"""
barbersync - bookable time slots for barbershop professionals.
"""

__version__ = "0.3.0"
