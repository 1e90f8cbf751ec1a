import argparse
import asyncio
import logging
import signal
import sys

from .config import MAX_CONCURRENCY, MAX_TIMEOUT_MS, RangeSpec, ScanConfig
from .errors import ConfigurationError
from .log import setup_logging
from .scanner import PingSweeper
from .scheduler import CancelToken
from .ui import ScannerUI

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REPORT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sonar - IPv4 ping sweep")
    parser.add_argument("--cidr", help="Range in CIDR notation (e.g. 74.115.234.0/24)")
    parser.add_argument("--base", help="First three octets (e.g. 192.168.1)")
    parser.add_argument("--start", type=int, default=1, help="First host octet for --base (Default: 1)")
    parser.add_argument("--end", type=int, default=255, help="Last host octet for --base (Default: 255)")
    parser.add_argument("-t", "--timeout", type=int, default=500,
                        help=f"Per-probe timeout in ms, 1-{MAX_TIMEOUT_MS} (Default: 500)")
    parser.add_argument("-c", "--concurrency", type=int, default=64,
                        help=f"Probes in flight, 1-{MAX_CONCURRENCY}; 1 = sequential (Default: 64)")
    parser.add_argument("--include-unreachable", action="store_true", help="List hosts that did not answer")
    parser.add_argument("--progress", action="store_true", help="Show progress (sequential mode only)")
    parser.add_argument("--strategy", choices=["auto", "thread", "process"], default="auto",
                        help="Worker backend (Default: auto, threads with process fallback)")
    parser.add_argument("-o", "--csv", help="Write results to this CSV file")
    parser.add_argument("--json", help="Write results to this JSON file")
    parser.add_argument("-q", "--quiet", action="store_true", help="Do not print the results table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def load_config(args: argparse.Namespace):
    """Validates CLI input into (RangeSpec, ScanConfig). Raises ConfigurationError."""
    spec = RangeSpec.parse(cidr=args.cidr, base=args.base, start=args.start, end=args.end)
    config = ScanConfig.parse(
        timeout_ms=args.timeout,
        concurrency=args.concurrency,
        include_unreachable=args.include_unreachable,
        show_progress=args.progress,
        strategy=args.strategy,
        csv_path=args.csv,
        json_path=args.json,
    )
    return spec, config


async def _run(sweeper: PingSweeper):
    loop = asyncio.get_running_loop()
    try:
        # First Ctrl-C stops new submissions; in-flight probes drain
        loop.add_signal_handler(signal.SIGINT, sweeper.cancel_token.cancel)
    except (NotImplementedError, RuntimeError):
        pass
    try:
        return await sweeper.run()
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    ui = ScannerUI()

    try:
        spec, config = load_config(args)
    except ConfigurationError as e:
        ui.show_message(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR

    # Only touch the log file once the input is known to be good
    setup_logging(args.verbose, args.log_file)

    if not args.quiet:
        ui.display_welcome()

    sweeper = PingSweeper(spec, config, cancel_token=CancelToken(), ui=None if args.quiet else ui)
    try:
        result = asyncio.run(_run(sweeper))
    except KeyboardInterrupt:
        ui.console.print("\n[yellow]Sweep interrupted by user.[/yellow]")
        return EXIT_INTERRUPTED

    if not args.quiet:
        ui.display_results(spec.label, result)

    try:
        sweeper.save_results(result)
    except OSError as e:
        logger.error("Could not write report: %s", e)
        ui.show_message(f"Could not write report: {e}")
        return EXIT_REPORT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
