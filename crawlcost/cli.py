"""crawlcost - Command line interface"""

import argparse
import json
import logging
import math
import sys

from rich.console import Console
from rich.logging import RichHandler

from .analyzer import TrafficAnalyzer
from .config import default_config, load_config
from .errors import ConfigError, StorageError
from .output import print_report
from .patterns import HOSTING_PROVIDERS, VERSION

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crawlcost",
        description="crawlcost - Bot traffic classification and bandwidth cost analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="built-in providers: " + ", ".join(p.key for p in HOSTING_PROVIDERS),
    )

    parser.add_argument("logfile", help="Access log to analyze (combined format or JSON lines)")
    parser.add_argument("-p", "--provider", default=None,
                        help="Hosting provider used for pricing; "
                             "unknown keys fall back to the default provider")
    parser.add_argument("--pricing", help="JSON file with extra providers and multipliers")
    parser.add_argument("--site", default="default", help="Site identifier for the records")
    parser.add_argument("--implementation-cost", type=float, default=0.0,
                        help="One-off cost of blocking, used for ROI (USD)")
    parser.add_argument("--robots", help="Write the generated robots.txt to this file")
    parser.add_argument("-o", "--output", help="Output file (JSON)")
    parser.add_argument("-j", "--json", action="store_true", help="JSON output only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"crawlcost v{VERSION}")
    return parser


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config(args.pricing) if args.pricing else default_config()

        analyzer = TrafficAnalyzer(config, provider=args.provider,
                                   console=None if args.json else console)
        result = analyzer.analyze_file(args.logfile, site_id=args.site)
        report = analyzer.report(result, implementation_cost=args.implementation_cost)
    except (FileNotFoundError, ConfigError, StorageError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    if args.json:
        print(json.dumps(_jsonable(report), indent=2))
    else:
        print_report(report, console)

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(_jsonable(report), f, indent=2)
        if not args.json:
            console.print(f"\n[green]Report saved to:[/] {args.output}")

    if args.robots:
        with open(args.robots, 'w') as f:
            f.write(report['robots_txt'])
        if not args.json:
            console.print(f"[green]robots.txt saved to:[/] {args.robots}")


def _jsonable(value):
    """Replace infinities, which JSON cannot represent, with null"""
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    if isinstance(value, float) and math.isinf(value):
        return None
    return value
