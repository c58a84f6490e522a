#!/usr/bin/env python3
"""
Export vouchers (or ledger masters) to the accounting product's XML import format.

Reads accounts and vouchers from the operational store (--db-url with a date
range) or from JSON/JSONL export files (--accounts / --vouchers), applies the
alias tables and writes one XML document.

Usage:
    python3 scripts/run_export.py --db-url <url> --from-date 2024-04-01 --to-date 2024-04-30 \\
        --output vouchers.xml [options]

Examples:
    # From export files, with a profile naming the alias tables
    python3 scripts/run_export.py --accounts accounts.json --vouchers vouchers.jsonl \\
        --config export.yaml --output out.xml

    # Ledger masters for every typed account in the store
    python3 scripts/run_export.py --db-url sqlite:///store.db --ledgers --output ledgers.xml

Exit codes:
    0  every voucher exported
    2  document written, but some vouchers failed (listed on stderr)
    1  nothing written (bad arguments, malformed alias table or source file)
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import yaml
from sqlalchemy.exc import SQLAlchemyError

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export vouchers or ledger masters as an XML import document.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None, help="Export profile YAML.")
    parser.add_argument("--db-url", default=None, help="Store database URL.")
    parser.add_argument(
        "--from-date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="First voucher date (YYYY-MM-DD), with --db-url.",
    )
    parser.add_argument(
        "--to-date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Last voucher date (YYYY-MM-DD), with --db-url.",
    )
    parser.add_argument("--vouchers", type=Path, default=None, help="Voucher export file (JSON or JSONL).")
    parser.add_argument("--accounts", type=Path, default=None, help="Account export file (JSON or JSONL).")
    parser.add_argument("--account-map", type=Path, default=None, help="Account name alias table (CSV or XLSX).")
    parser.add_argument("--voucher-type-map", type=Path, default=None, help="Voucher type alias table.")
    parser.add_argument("--account-type-map", type=Path, default=None, help="Account type (ledger group) alias table.")
    parser.add_argument("--output", type=Path, default=None, help="Output XML path (default: stdout).")
    parser.add_argument("--workers", type=int, default=None, help="Parallel workers (default: 1).")
    parser.add_argument("--ledgers", action="store_true", help="Export ledger masters instead of vouchers.")
    parser.add_argument("--company", default=None, help="Target company name for the import header.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for the JSON logs on stderr (default: WARNING).",
    )
    args = parser.parse_args(argv)

    if args.db_url is None and args.accounts is None:
        parser.error("either --db-url or --accounts is required")
    if args.db_url is None and not args.ledgers and args.vouchers is None:
        parser.error("--vouchers is required without --db-url")
    if args.db_url is not None and not args.ledgers and (args.from_date is None or args.to_date is None):
        parser.error("--from-date and --to-date are required with --db-url")
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    # Lazy imports so we fail fast on args first
    from finance_export.config import ExportProfile, load_export_profile
    from finance_export.exceptions import SourceDataError
    from finance_export.logging_config import configure_logging
    from finance_export.mapping import load_accounts, load_vouchers
    from finance_export.serialization import to_xml, write_xml
    from finance_export.services import ExportService

    configure_logging(level=getattr(logging, args.log_level))

    try:
        profile = load_export_profile(args.config) if args.config else ExportProfile()
        profile = profile.with_overrides(
            account_aliases=args.account_map,
            voucher_type_aliases=args.voucher_type_map,
            account_type_aliases=args.account_type_map,
            workers=args.workers,
            company_name=args.company,
        )
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: Failed to load export profile: {e}", file=sys.stderr)
        return EXIT_FATAL

    try:
        if args.db_url is not None:
            from finance_export.db import make_engine, read_session
            from finance_export.selectors import VoucherSelector

            engine = make_engine(args.db_url)
            try:
                with read_session(engine) as session:
                    selector = VoucherSelector(session)
                    accounts = selector.list_accounts()
                    raw_vouchers = [] if args.ledgers else selector.list_vouchers(
                        args.from_date,
                        args.to_date,
                        date_format=profile.date_format,
                        reference_date_format=profile.reference_date_format,
                    )
            finally:
                engine.dispose()
        else:
            accounts = load_accounts(args.accounts)
            raw_vouchers = [] if args.ledgers else load_vouchers(args.vouchers)

        service = ExportService.from_profile(profile, accounts)
        result = service.export_ledgers() if args.ledgers else service.export_vouchers(raw_vouchers)
    except (OSError, ValueError, SQLAlchemyError, SourceDataError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FATAL

    if args.output is not None:
        try:
            write_xml(result.document, args.output, company_name=profile.company_name)
        except OSError as e:
            print(f"ERROR: Failed to write {args.output}: {e}", file=sys.stderr)
            return EXIT_FATAL
    else:
        sys.stdout.write(to_xml(result.document, company_name=profile.company_name) + "\n")

    for line in result.summary.as_lines():
        print(line, file=sys.stderr)
    return EXIT_PARTIAL if result.has_failures else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
