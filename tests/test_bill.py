"""Tests for the PDF bill"""
from decimal import Decimal

from scancart.config import settings
from scancart.services.bill_pdf import CLOSING, EMPTY_NOTICE, TITLE, build_bill, render_bill_pdf
from scancart.services.catalog import Catalog, ProductDescriptor
from scancart.store.cart import CartStore


def _filled(store):
    store.add_by_tag("T1")
    store.add_by_tag("T2")
    store.add_by_tag("T2")
    return store.snapshot()


class TestBuildBill:
    def test_rows_follow_snapshot_order(self, store):
        bill = build_bill(_filled(store))

        assert [row.name for row in bill.rows] == ["A", "B"]
        assert bill.rows[1].quantity == 2
        assert bill.rows[1].subtotal == Decimal("5.00")

    def test_totals_match_cart(self, store):
        snap = _filled(store)
        bill = build_bill(snap)

        assert bill.total_quantity == 3
        assert bill.total_amount == sum(line.price * line.quantity for line in snap)
        assert bill.total_amount == store.total_amount()
        assert not bill.is_empty

    def test_empty(self):
        bill = build_bill(())

        assert bill.is_empty
        assert bill.total_quantity == 0
        assert bill.total_amount == 0


class TestRenderBillPdf:
    def test_pdf_with_items(self, store):
        pdf = render_bill_pdf(_filled(store))
        suffix = settings.currency_suffix

        assert pdf.startswith(b"%PDF")
        assert TITLE.encode() in pdf
        assert "Total Qty: 3".encode() in pdf
        assert f"Total Amt: 15.00 {suffix}".encode() in pdf
        assert f"5.00 {suffix}".encode() in pdf
        assert CLOSING.encode() in pdf
        assert EMPTY_NOTICE.encode() not in pdf

    def test_empty_pdf_has_only_notice(self):
        pdf = render_bill_pdf(())

        assert pdf.startswith(b"%PDF")
        assert EMPTY_NOTICE.encode() in pdf
        assert b"Total Amt" not in pdf
        assert TITLE.encode() not in pdf

    def test_same_snapshot_same_document(self, store):
        snap = _filled(store)

        assert render_bill_pdf(snap) == render_bill_pdf(snap)

    def test_long_cart_spans_pages(self):
        catalog = Catalog({f"T{i}": ProductDescriptor(f"P{i}", Decimal("1")) for i in range(80)})
        cart = CartStore(catalog)
        for tag in catalog:
            cart.add_by_tag(tag)

        pdf = render_bill_pdf(cart.snapshot())

        assert b"Total Qty: 80" in pdf
        assert b"/Count 2" in pdf
