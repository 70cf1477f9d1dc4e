#!/usr/bin/env python3
"""
Command-line interface for the Statement Normalizer.

Usage:
    python examples/cli.py --help
    python examples/cli.py statement.pdf
    python examples/cli.py --output-dir ./output *.csv
    python examples/cli.py --today 2024-03-31 statement.txt
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from statement_normalizer import ParseOptions, StatementNormalizer, StatementParseError


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='statement-normalizer',
        description='Normalize bank statements (CSV, Excel, text, PDF) to JSON transactions'
    )

    parser.add_argument(
        'files',
        nargs='+',
        help='Statement files to parse (PDF, text, CSV or XLSX)'
    )

    parser.add_argument(
        '-o', '--output-dir',
        default=None,
        help='Write <name>_normalized.json files here instead of printing'
    )

    parser.add_argument(
        '--today',
        type=date.fromisoformat,
        default=None,
        help='Processing date (YYYY-MM-DD) used for date checks'
    )

    parser.add_argument(
        '--password',
        default=None,
        help='Password for encrypted PDFs'
    )

    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress output messages'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show verbose output'
    )

    return parser.parse_args(argv)


def process_file(filepath: Path, normalizer: StatementNormalizer, output_dir) -> tuple:
    """
    Process a single file.

    Returns:
        Tuple of (success, result_or_error)
    """
    try:
        result = normalizer.parse_file(filepath)
    except (StatementParseError, OSError) as e:
        return False, str(e)

    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if output_dir is None:
        print(payload)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{filepath.stem}_normalized.json"
        output_path.write_text(payload, encoding='utf-8')

    return True, result


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    options = ParseOptions(today=args.today, pdf_password=args.password)
    normalizer = StatementNormalizer(options)
    output_dir = Path(args.output_dir) if args.output_dir else None

    success_count = 0
    error_count = 0

    for name in args.files:
        filepath = Path(name)
        if not filepath.exists():
            if not args.quiet:
                print(f"Error: File not found: {filepath}", file=sys.stderr)
            error_count += 1
            continue

        success, result = process_file(filepath, normalizer, output_dir)

        if success:
            success_count += 1
            if not args.quiet:
                summary = result.get_summary()
                review = len(result.low_confidence())
                print(f"✓ {filepath.name}: {summary['total_transactions']} transactions, "
                      f"{review} to review", file=sys.stderr)
                print(f"  Bank: {summary['bank']} (account {result.bank.account_number}), "
                      f"Credits: {summary['total_credits']:,.2f}, "
                      f"Debits: {summary['total_debits']:,.2f}", file=sys.stderr)
        else:
            error_count += 1
            if not args.quiet:
                print(f"✗ {filepath.name}: {result}", file=sys.stderr)

    if not args.quiet and success_count + error_count > 1:
        print(f"\nProcessed {success_count} file(s) successfully", file=sys.stderr)
        if error_count > 0:
            print(f"Encountered {error_count} error(s)", file=sys.stderr)

    return 0 if error_count == 0 else 1


if __name__ == '__main__':
    sys.exit(main())
