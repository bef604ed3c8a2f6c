#!/usr/bin/env python3
"""
Find the majority element of an integer sequence from a file or the command line.
"""

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analysis import (  # noqa: E402
    VoteContext,
    find_and_verify,
    find_candidate,
    find_candidate_from_chunks,
    verify,
)
from data.sequence_loader import SequenceLoader  # noqa: E402
from metrics.collector import MetricsCollector  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_context(args, metrics: MetricsCollector) -> VoteContext:
    builder = VoteContext.builder().with_metrics(metrics)
    if args.stream:
        builder.enable_stream_processing()
    if args.early_termination:
        builder.enable_early_termination()
    return builder.build()


def main():
    parser = argparse.ArgumentParser(description="Find the majority element")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="CSV or text file holding the sequence")
    source.add_argument(
        "--values", type=int, nargs="+", help="Sequence given inline"
    )
    parser.add_argument("--column", help="Column name (file has a header row)")
    parser.add_argument(
        "--chunksize",
        type=int,
        help="Read the file in batches of this many rows (candidate only)",
    )
    parser.add_argument(
        "--stream", action="store_true", help="Process elements one at a time"
    )
    parser.add_argument(
        "--early-termination",
        action="store_true",
        help="Stop verification once a majority is certain",
    )
    parser.add_argument(
        "--candidate-only",
        action="store_true",
        help="Skip verification and report the raw candidate",
    )
    parser.add_argument("--export", help="Append the result and metrics to a CSV file")

    args = parser.parse_args()

    if args.input and not Path(args.input).exists():
        logger.error(f"Input file not found: {args.input}")
        sys.exit(1)

    metrics = MetricsCollector()
    context = build_context(args, metrics)

    try:
        if args.input and args.chunksize:
            loader = SequenceLoader(args.input, column=args.column)
            logger.info("=== Chunked candidate selection ===")
            result = find_candidate_from_chunks(
                loader.iter_chunks(args.chunksize), context
            )
            verified = None
            if not args.candidate_only and result is not None:
                # Verification needs the whole sequence
                sequence = loader.load()
                verified = verify(sequence, result, context)
                if not verified:
                    result = None
        else:
            if args.input:
                sequence = SequenceLoader(args.input, column=args.column).load()
            else:
                sequence = args.values

            if args.candidate_only:
                result = find_candidate(sequence, context)
                verified = None
            else:
                result = find_and_verify(sequence, context)
                verified = result is not None

        print("\n=== Result ===")
        if result is None:
            print("No majority element")
        elif args.candidate_only:
            print(f"Candidate (unverified): {result}")
        else:
            print(f"Majority element: {result}")

        print()
        print(metrics)

        if args.export:
            export_path = Path(args.export)
            row = {
                "source": args.input or "inline",
                "result": result,
                "verified": verified,
                "stream_processing": context.stream_processing,
                "early_termination": context.early_termination,
                **metrics.to_dict(),
            }
            pd.DataFrame([row]).to_csv(
                export_path,
                mode="a",
                header=not export_path.exists(),
                index=False,
            )
            print(f"\n✓ Result exported to: {export_path}")

    except Exception as e:
        logger.error(f"Error finding majority element: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
