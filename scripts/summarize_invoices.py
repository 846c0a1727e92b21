#!/usr/bin/env python3
"""Summarize IVA per rate for a folder of electronic-invoice XML files."""
import json
import sys
from datetime import date
from pathlib import Path

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from invoice_tax.config import Settings
from invoice_tax.errors import InvoiceDirectoryError
from invoice_tax.pipeline import InvoiceProcessor
from invoice_tax.utils.logging import setup_logging


def main(argv: list[str]) -> int:
    settings = Settings()
    setup_logging(settings.log_level, json_output=settings.log_json)

    directory = Path(argv[0] if argv else settings.input_dir)
    try:
        start_date = date.fromisoformat(argv[1]) if len(argv) > 1 else None
        end_date = date.fromisoformat(argv[2]) if len(argv) > 2 else None
    except ValueError as e:
        print(f"Error: invalid date ({e}); use YYYY-MM-DD")
        return 1
    if start_date and end_date and end_date < start_date:
        print("Error: end date must be on or after start date")
        return 1

    processor = InvoiceProcessor(settings)
    try:
        result = processor.process_directory(directory, start_date, end_date)
    except InvoiceDirectoryError as e:
        print(f"Error: {e}")
        return 1

    if not result.invoices:
        print("No invoices matched the given criteria.")
        return 0

    totals = result.aggregates
    print(f"Invoices: {totals.invoice_count} ({totals.exempt_count} exempt)")
    if result.skipped:
        print(f"Skipped: {len(result.skipped)}")
    print(f"Taxable total: {totals.taxable_total:,.2f}")
    print(f"IVA total: {totals.tax_total:,.2f}")
    for rate in sorted(totals.tax_by_rate):
        print(f"  IVA {rate:g}%: {totals.tax_by_rate[rate]:,.2f}")
    print(f"Grand total: {totals.grand_total:,.2f}")

    output_path = directory / settings.output_filename
    with open(output_path, "w") as f:
        json.dump(result.model_dump(mode="json"), f, indent=2, default=str)
    print(f"\nFull result saved to: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
