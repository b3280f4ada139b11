"""
Core models, exceptions and naming helpers
"""
