"""Command-line entry point.

Looks up a location with the configured geocoding provider and prints each
candidate with its delivery fee quote. Useful for checking the rate table and
provider credentials without running the storefront.

Usage:
    python -m storefront.main "Molyko, Buea"
"""

import argparse
import asyncio
import logging
import sys

from .core.container import Container
from .errors import InvalidQuoteInputError
from .utils import format_xaf

# Logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


async def quote_location(container: Container, query: str) -> int:
    """Print quotes for every candidate of a query.

    Returns:
        Process exit code.
    """
    geocoder = container.geocoding_service()
    estimator = container.shipping_estimator()

    lookup = await geocoder.lookup(query)
    if lookup.notice:
        print(lookup.notice)

    if not lookup.results:
        fallback = estimator.fallback_quote(query)
        print(f"No match for '{query}'. Standard fee: {format_xaf(fallback.fee)}")
        return 1

    for index, result in enumerate(lookup.results, start=1):
        try:
            quote = estimator.quote(result)
        except InvalidQuoteInputError as e:
            logger.warning(f"Skipping candidate: {e}")
            continue
        print(f"{index}. {quote.address}")
        print(f"   city: {quote.city or '-'}  fee: {format_xaf(quote.fee)}  ({quote.description})")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments, defaults to sys.argv.

    Returns:
        Process exit code.
    """
    parser = argparse.ArgumentParser(description="Quote delivery fees for a location.")
    parser.add_argument("query", help="Town or neighborhood to look up")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    container = Container()
    return asyncio.run(quote_location(container, args.query))


if __name__ == "__main__":
    sys.exit(main())
