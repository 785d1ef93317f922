from __future__ import annotations

import io
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from scancart.store.cart import CartLine
from scancart.utils.formatters import money

TITLE = "Your Bill"
EMPTY_NOTICE = "Your cart is empty"
CLOSING = "Thank you for visiting us!"


@dataclass(frozen=True)
class BillRow:
    name: str
    price: Decimal
    quantity: int
    subtotal: Decimal


@dataclass(frozen=True)
class Bill:
    rows: Tuple[BillRow, ...]
    total_quantity: int
    total_amount: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.rows


def build_bill(lines: Iterable[CartLine]) -> Bill:
    rows: List[BillRow] = []
    total_qty = 0
    total = Decimal("0")
    for line in lines:
        subtotal = line.subtotal
        rows.append(BillRow(line.name, line.price, line.quantity, subtotal))
        total_qty += line.quantity
        total += subtotal
    return Bill(rows=tuple(rows), total_quantity=total_qty, total_amount=total)


def render_bill_pdf(lines: Iterable[CartLine]) -> bytes:
    bill = build_bill(lines)

    buf = io.BytesIO()
    # invariant: no timestamps or random ids, same cart -> same bytes
    c = canvas.Canvas(buf, pagesize=A4, invariant=1, pageCompression=0)
    c.setTitle("bill")
    w, h = A4

    y = h - 50
    if bill.is_empty:
        c.setFont("Helvetica-Bold", 14)
        c.drawString(40, y, EMPTY_NOTICE)
        c.showPage()
        c.save()
        return buf.getvalue()

    c.setFont("Helvetica-Bold", 16)
    c.drawCentredString(w / 2, y, TITLE)
    y -= 34

    # header
    c.setFont("Helvetica-Bold", 10)
    c.drawString(40, y, "Product")
    c.drawRightString(380, y, "Price")
    c.drawRightString(450, y, "Quantity")
    c.drawRightString(550, y, "Subtotal")
    y -= 10
    c.line(40, y, 550, y)
    y -= 16

    c.setFont("Helvetica", 10)
    for row in bill.rows:
        c.drawString(40, y, row.name[:45])
        c.drawRightString(380, y, money(row.price))
        c.drawRightString(450, y, str(row.quantity))
        c.drawRightString(550, y, money(row.subtotal))
        y -= 14
        if y < 120:
            c.showPage()
            y = h - 50
            c.setFont("Helvetica", 10)

    y -= 10
    c.line(40, y, 550, y)
    y -= 18
    c.setFont("Helvetica-Bold", 12)
    c.drawString(40, y, f"Total Qty: {bill.total_quantity}")
    y -= 16
    c.drawString(40, y, f"Total Amt: {money(bill.total_amount)}")
    y -= 34

    c.setFont("Helvetica-Oblique", 14)
    c.drawCentredString(w / 2, y, CLOSING)

    c.showPage()
    c.save()
    return buf.getvalue()
