"""
Domain layer - persistent entities for presentation sessions and their slots.
"""
