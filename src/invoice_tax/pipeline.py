"""Invoice tax summary orchestrator: tree -> breakdown -> reconciliation -> record."""
from __future__ import annotations
from collections.abc import Callable, Iterable
from datetime import date, datetime
from functools import partial
from pathlib import Path
from typing import Any

import structlog

from .config import Settings
from .errors import InvoiceDirectoryError
from .extraction.breakdown import aggregate_by_rate
from .extraction.document import (
    extract_identifiers, extract_issue_date, extract_line_items, extract_summary,
)
from .extraction.reconciliation import reconcile_breakdown
from .models.invoice import (
    BatchResult, BreakdownSource, CrossDocumentAggregate, InvoiceRecord, ReconciliationInfo,
)
from .parsing.xml_tree import document_root, read_document
from .utils.dates import is_within_range
from .utils.numbers import round2

logger = structlog.get_logger(__name__)


def _format_rate(rate: float) -> str:
    return f"{rate:g}%"


def build_observations(
    source: BreakdownSource, info: ReconciliationInfo, tax_total: float, threshold: float = 0.01,
) -> str:
    """Human-readable notes on how the per-rate breakdown was obtained."""
    notes: list[str] = []
    if source == BreakdownSource.LINE_ITEMS:
        notes.append("No VAT breakdown in summary; breakdown derived from line items.")
    if info.adjusted and abs(info.diff_applied) >= threshold:
        rate = _format_rate(info.adjusted_rate) if info.adjusted_rate is not None else ""
        notes.append(f"VAT adjusted at rate {rate} by {round2(info.diff_applied)} to match TotalImpuesto.")
    elif not info.adjusted and info.diff_applied:
        notes.append(f"Unresolved VAT difference of {round2(info.diff_applied)} against TotalImpuesto.")
    if info.no_breakdown and tax_total:
        notes.append("Tax total declared without a per-rate breakdown.")
    return " ".join(notes)


def filter_by_date(
    records: list[InvoiceRecord],
    start_date: date | datetime | None = None,
    end_date: date | datetime | None = None,
) -> list[InvoiceRecord]:
    """Keep records issued within [start_date, end_date].

    With no bounds everything is kept; with any bound, undated records are
    dropped.
    """
    if start_date is None and end_date is None:
        return list(records)
    return [
        r for r in records
        if r.issue_date is not None and is_within_range(r.issue_date, start_date, end_date)
    ]


def aggregate_records(records: Iterable[InvoiceRecord]) -> CrossDocumentAggregate:
    aggregates = CrossDocumentAggregate()
    for record in records:
        aggregates.add(record)
    return aggregates


class InvoiceProcessor:
    """Summarizes IVA per rate across a batch of electronic invoices."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()

    def summarize_document(self, tree: dict, file_path: str | Path) -> InvoiceRecord:
        """Build the tax record for one parsed document.

        Raises whatever extraction raises; batch callers catch per document.
        """
        path = Path(file_path)
        root = document_root(tree)

        issue_date = extract_issue_date(root)
        summary = extract_summary(root)
        line_items = extract_line_items(root)

        aggregated = aggregate_by_rate(line_items, summary.raw)
        tax_by_rate, info = reconcile_breakdown(aggregated.breakdown, summary.tax_total)
        tax_total = summary.tax_total or sum(tax_by_rate.values())

        key, sequence_number = extract_identifiers(root)

        return InvoiceRecord(
            file_path=str(path),
            file_name=path.name,
            key=key,
            sequence_number=sequence_number,
            issue_date=issue_date,
            taxable_total=summary.taxable_total,
            discount_total=summary.discount_total,
            subtotal=summary.subtotal,
            tax_total=tax_total,
            grand_total=summary.grand_total,
            exempt_total=summary.exempt_total,
            tax_by_rate=tax_by_rate,
            taxable_base_by_rate=aggregated.taxable_base_by_rate,
            is_exempt=tax_total == 0 and summary.exempt_total > 0,
            observations=build_observations(
                aggregated.source, info, tax_total, self.settings.adjustment_threshold,
            ),
            breakdown_source=aggregated.source,
            reconciliation=info,
        )

    def process_trees(
        self,
        items: Iterable[tuple[str | Path, Any]],
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
    ) -> BatchResult:
        """Summarize already-parsed (path, tree) pairs, in the given order."""
        loaders = ((path, lambda tree=tree: tree) for path, tree in items)
        records, skipped = self._summarize_each(loaders)
        return self._finish(records, skipped, start_date, end_date)

    def process_directory(
        self,
        directory: str | Path,
        start_date: date | datetime | None = None,
        end_date: date | datetime | None = None,
    ) -> BatchResult:
        """Read, summarize and aggregate every invoice file in *directory*.

        Files are taken in name order. A file that cannot be read, parsed or
        extracted is skipped with a warning; the batch carries on.
        """
        folder = Path(directory)
        if not folder.is_dir():
            raise InvoiceDirectoryError(f"Not a directory: {folder}")

        extension = self.settings.file_extension.lower()
        files = sorted(
            (p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == extension),
            key=lambda p: p.name,
        )
        logger.info("batch_start", directory=str(folder), files=len(files))

        records, skipped = self._summarize_each((path, partial(read_document, path)) for path in files)
        return self._finish(records, skipped, start_date, end_date)

    def _summarize_each(
        self, items: Iterable[tuple[str | Path, Callable[[], Any]]],
    ) -> tuple[list[InvoiceRecord], list[str]]:
        records: list[InvoiceRecord] = []
        skipped: list[str] = []
        for path, load in items:
            try:
                record = self.summarize_document(load(), path)
            except Exception as e:
                logger.warning("invoice_skipped", file_path=str(path), error=str(e))
                skipped.append(str(path))
                continue
            logger.debug("invoice_processed", file_path=str(path), tax_total=record.tax_total)
            records.append(record)
        return records, skipped

    def _finish(
        self,
        records: list[InvoiceRecord],
        skipped: list[str],
        start_date: date | datetime | None,
        end_date: date | datetime | None,
    ) -> BatchResult:
        if start_date is None and end_date is None:
            start_date, end_date = self.settings.start_date, self.settings.end_date
        retained = filter_by_date(records, start_date, end_date)
        aggregates = aggregate_records(retained)
        logger.info(
            "batch_complete",
            processed=len(records),
            retained=len(retained),
            skipped=len(skipped),
            tax_total=round2(aggregates.tax_total),
        )
        return BatchResult(invoices=retained, aggregates=aggregates, skipped=skipped)
