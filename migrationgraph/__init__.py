"""
MigrationGraph - dependency resolution for organization component migrations
"""

__version__ = "1.0.0"
