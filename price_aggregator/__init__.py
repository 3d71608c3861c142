"""
Crypto Price Aggregator Service
Queries several cryptocurrency exchanges concurrently and reports each source's price.
"""

__version__ = "1.0.0"
__author__ = "Crypto Price Aggregator Team"
__description__ = "Concurrent multi-exchange cryptocurrency price aggregation service"
