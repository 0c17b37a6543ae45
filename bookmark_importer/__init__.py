"""
Bookmark Importer

Imports a browser bookmark tree into a paged, quota-limited link store with
optional concurrent link validation.
"""

__version__ = "1.0.0"
