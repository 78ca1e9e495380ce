"""Shared helpers for HTTP sessions and amount formatting."""

import aiohttp


def create_session(timeout: int = 15) -> aiohttp.ClientSession:
    """Create configured aiohttp session for provider API calls.

    Args:
        timeout: Total request timeout in seconds.

    Returns:
        aiohttp.ClientSession: Session with JSON headers and connection limits.
    """
    connector = aiohttp.TCPConnector(limit=20, limit_per_host=10)
    client_timeout = aiohttp.ClientTimeout(total=timeout)

    headers = {
        "Accept": "application/json",
        "User-Agent": "Storefront-Shipping/1.0",
    }

    return aiohttp.ClientSession(connector=connector, timeout=client_timeout, headers=headers)


def format_xaf(amount: int, currency_label: str = "FCFA") -> str:
    """Format an amount in CFA francs with space-grouped thousands.

    Examples:
        >>> format_xaf(5000)
        '5 000 FCFA'
        >>> format_xaf(-1250)
        '-1 250 FCFA'
    """
    grouped = f"{abs(int(amount)):,}".replace(",", " ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{grouped} {currency_label}"
