# vehicle_registry/cli.py
import argparse
import json
import logging
import sys
from typing import Dict, List, Optional

from vehicle_registry.config import RegistryConfig
from vehicle_registry.domain.search import FilterValue, SearchSpecification
from vehicle_registry.services.gateway import SearchGateway


def _parse_filters(items: List[str]) -> Dict[str, FilterValue]:
    out: Dict[str, FilterValue] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"filter must be FIELD=VALUE, got {item!r}")
        # שנה / קודים נשלחים כמספר
        out[key] = int(value) if value.isdigit() else value
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search the data.gov.il vehicle registry")
    parser.add_argument("plate", nargs="?", default=None, help="license plate, dashes allowed")
    parser.add_argument("--filter", dest="filters", action="append", default=[],
                        metavar="FIELD=VALUE", help="exact registry filter, e.g. tozeret_nm=טויוטה")
    parser.add_argument("-q", "--query", type=str, default=None, help="free-text query")
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--offset", type=int, default=0)
    parser.add_argument("--extended", action="store_true", help="fetch extended details for the plate")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        filters = _parse_filters(args.filters)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    gateway = SearchGateway(RegistryConfig.from_env())

    if args.extended:
        if not args.plate:
            parser.error("--extended requires a plate")
        result = gateway.get_extended_details(args.plate)
    else:
        result = gateway.search(SearchSpecification(
            license_plate=args.plate,
            exact_filters=filters,
            free_text_query=args.query,
            limit=args.limit,
            offset=args.offset,
        ))

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
