import argparse
import json
import os
import logging
from .api import align_request
from .models import InvalidInputError
from .output.formatter import OutputFormatter
from .request import AlignmentRequest, sample_request
from .utils import build_config_from_args


def build_parser():
    parser = argparse.ArgumentParser(
        description="Joint Length Sequencing Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  joint-sequencer --request request.json --output results/matches.json
  joint-sequencer --request request.json --sequential --search linear
  joint-sequencer --sample > request.json
  joint-sequencer --demo --level verbose
        """,
    )

    parser.add_argument(
        "-r",
        "--request",
        required=False,
        help="Path to a JSON alignment request (baseData, targetData, tolerance, ...)",
    )
    parser.add_argument(
        "-o", "--output", required=False, help="Path of the JSON result file"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the JSON result payload to stdout instead of a report",
    )

    # Sample request utilities
    parser.add_argument(
        "--sample",
        action="store_true",
        help="Print the bundled sample request as JSON and exit",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Align the bundled sample request",
    )

    # Execution configuration
    parser.add_argument(
        "--search",
        choices=["binary", "linear"],
        default=None,
        help="Lookup strategy for pivots and segments (default: binary)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Align intervals one after another instead of on a worker pool",
    )
    parser.add_argument(
        "--executor",
        choices=["thread", "process"],
        default=None,
        help="Worker pool type for interval alignment (default: process)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Maximum number of pool workers (default: CPU count)",
    )

    parser.add_argument(
        "--level",
        choices=sorted(OutputFormatter.OUTPUT_LEVELS),
        default=OutputFormatter.DEFAULT_LEVEL,
        help="Console report level (default: normal)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output (show debug information)",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    if args.sample:
        print(sample_request().to_json())
        return 0

    if args.demo:
        request = sample_request()
    else:
        if not args.request or not os.path.exists(args.request):
            logging.error(
                f"Error: Request file '{args.request}' does not exist or not provided"
            )
            return 1
        try:
            with open(args.request, "r", encoding="utf-8") as f:
                request = AlignmentRequest.from_dict(json.load(f))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Error: Cannot read request '{args.request}': {e}")
            return 1

    config = build_config_from_args(args)

    try:
        result = align_request(request, **config)
    except InvalidInputError as e:
        logging.error(f"Error: {e}")
        return 1

    payload = OutputFormatter.build_payload(result)
    if args.output:
        path = OutputFormatter.save(payload, args.output)
        logging.info(f"Matches written: {path}")

    if args.json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(OutputFormatter.format_console(payload, level=args.level))
    return 0


if __name__ == "__main__":
    exit(main())
