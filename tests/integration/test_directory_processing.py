"""End-to-end batch processing over a folder of invoice XML files."""
from datetime import date

import pytest
from invoice_tax.errors import InvoiceDirectoryError
from tests.factories import make_invoice_xml


class TestProcessDirectory:
    def test_processes_xml_files_only(self, processor, invoice_dir):
        result = processor.process_directory(invoice_dir)
        assert [r.file_name for r in result.invoices] == ["a.xml", "b.XML"]
        assert len(result.skipped) == 1
        assert result.skipped[0].endswith("broken.xml")

    def test_records_and_aggregates(self, processor, invoice_dir):
        result = processor.process_directory(invoice_dir)
        first, second = result.invoices
        assert first.tax_by_rate == {13.0: 130.0}
        assert not first.reconciliation.adjusted
        assert second.tax_by_rate == {13.0: 130.0}
        assert second.reconciliation.adjusted
        assert second.reconciliation.diff_applied == 0.03
        assert result.aggregates.invoice_count == 2
        assert result.aggregates.tax_by_rate == {13.0: 260.0}
        assert result.aggregates.tax_total == 260.0
        assert result.aggregates.grand_total == 2260.0
        assert result.aggregates.taxable_base_by_rate[13.0] == pytest.approx(1000.0 + 129.97 / 0.13)

    def test_date_filter(self, processor, invoice_dir):
        result = processor.process_directory(invoice_dir, start_date=date(2024, 6, 1), end_date=date(2024, 6, 30))
        assert [r.sequence_number for r in result.invoices] == ["00100001010000000002"]
        assert result.aggregates.invoice_count == 1

    def test_filter_excludes_everything(self, processor, invoice_dir):
        result = processor.process_directory(invoice_dir, start_date=date(2030, 1, 1))
        assert result.invoices == []
        assert result.aggregates.tax_total == 0.0

    def test_empty_directory(self, processor, tmp_path):
        result = processor.process_directory(tmp_path)
        assert result.invoices == []
        assert result.skipped == []

    def test_missing_directory(self, processor, tmp_path):
        with pytest.raises(InvoiceDirectoryError):
            processor.process_directory(tmp_path / "nope")

    def test_undated_invoice_dropped_only_when_filtering(self, processor, tmp_path):
        (tmp_path / "undated.xml").write_text(make_invoice_xml(fecha="sin fecha"), encoding="utf-8")
        assert len(processor.process_directory(tmp_path).invoices) == 1
        assert processor.process_directory(tmp_path, end_date=date(2030, 1, 1)).invoices == []
