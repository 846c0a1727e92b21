"""Shared test fixtures."""
import pytest
from invoice_tax.config import Settings
from invoice_tax.pipeline import InvoiceProcessor
from tests.factories import make_invoice_xml


@pytest.fixture
def mock_settings():
    """Create test settings with no date filter."""
    return Settings(input_dir=".", start_date=None, end_date=None, log_json=False)


@pytest.fixture
def processor(mock_settings):
    return InvoiceProcessor(mock_settings)


@pytest.fixture
def invoice_dir(tmp_path):
    """A folder with two valid invoices, one broken file and one non-XML file."""
    (tmp_path / "a.xml").write_text(make_invoice_xml(consecutivo="00100001010000000001"), encoding="utf-8")
    (tmp_path / "b.XML").write_text(
        make_invoice_xml(
            consecutivo="00100001010000000002",
            fecha="2024-06-15T09:00:00-06:00",
            iva="129.97",
            total_iva="130.00",
        ),
        encoding="utf-8",
    )
    (tmp_path / "broken.xml").write_text("<FacturaElectronica><Clave>1</Clave>", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("not an invoice", encoding="utf-8")
    return tmp_path
