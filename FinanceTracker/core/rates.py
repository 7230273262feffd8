"""Exchange rate and asset price lookups.

Both fetchers always return a usable mapping: network or payload failures are
logged and replaced with fixed fallback values.
"""
import logging
from typing import Dict

import requests

REQUEST_TIMEOUT: float = 10.0

EXCHANGE_RATES_URL = 'https://api.exchangerate-api.com/v4/latest/EUR'
CRYPTO_PRICES_URL = 'https://api.coingecko.com/api/v3/simple/price'

FALLBACK_RATES: Dict[str, float] = {'EUR': 1, 'USD': 1.09, 'PKR': 305}

#: Gold price per gram in EUR; there is no free feed for it
GOLD_PRICE: float = 60
FALLBACK_ETHEREUM: float = 3300


def _get_json(url: str, **params) -> dict:
    response = requests.get(url, params=params or None, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.json()


def fetch_exchange_rates() -> Dict[str, float]:
    """Return EUR-based exchange rates for the currencies the tracker uses.

    Returns:
        dict: ``{'EUR': 1, 'USD': ..., 'PKR': ...}``
    """
    try:
        data = _get_json(EXCHANGE_RATES_URL)
        rates = data['rates']
        return {
            'EUR': 1,
            'USD': rates.get('USD') or FALLBACK_RATES['USD'],
            'PKR': rates.get('PKR') or FALLBACK_RATES['PKR'],
        }
    except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as ex:
        logging.error(f'Error fetching exchange rates: {ex}')
        return dict(FALLBACK_RATES)


def fetch_crypto_prices() -> Dict[str, float]:
    """Return asset prices in EUR.

    Returns:
        dict: ``{'gold': ..., 'ethereum': ...}``
    """
    try:
        data = _get_json(CRYPTO_PRICES_URL, ids='ethereum', vs_currencies='eur')
        ethereum = (data.get('ethereum') or {}).get('eur') or FALLBACK_ETHEREUM
        return {'gold': GOLD_PRICE, 'ethereum': ethereum}
    except (requests.RequestException, ValueError, TypeError, AttributeError) as ex:
        logging.error(f'Error fetching crypto prices: {ex}')
        return {'gold': GOLD_PRICE, 'ethereum': FALLBACK_ETHEREUM}
