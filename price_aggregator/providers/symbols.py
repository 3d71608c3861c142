"""
Symbol translation tables for exchanges that do not key prices by ticker.
Built once at import and read-only afterwards.
"""

from types import MappingProxyType
from typing import Mapping

# CoinGecko coin ids
COINGECKO_IDS: Mapping[str, str] = MappingProxyType({
    'BTC': 'bitcoin',
    'ETH': 'ethereum',
    'SOL': 'solana',
    'DOGE': 'dogecoin',
    'SHIB': 'shiba-inu',
})

# Kraken USD pair names
KRAKEN_PAIRS: Mapping[str, str] = MappingProxyType({
    'BTC': 'XXBTZUSD',
    'ETH': 'XETHZUSD',
    'SOL': 'SOLUSD',
    'DOGE': 'XDGUSD',
    'SHIB': 'SHIBUSD',
})
