"""POS-style PDF receipts for an 80 mm thermal printer (about 226 points wide).

Layout is built in two steps: ``receipt_lines`` produces the receipt as a
list of drawing instructions, ``render_receipt`` feeds them to a reportlab
canvas and breaks pages when the cursor reaches the bottom margin.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from io import BytesIO

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from reportlab.pdfgen import canvas

from .money import fmt_money

FONT = "Helvetica"
LEADING = 1.2  # line height as a multiple of font size


@dataclass(frozen=True)
class ReceiptOptions:
    business_name: str = "AQUABLISS"
    subtitle: str = "Water POS Receipt"
    currency: str = "KES"
    # the transaction code line only appears for this payment method
    mobile_money_method: str = "Mpesa"
    # fallbacks for missing order fields
    walk_in_customer: str = "Walk-in"
    missing_phone: str = "N/A"
    missing_code: str = "---"
    footer: tuple[str, ...] = (
        " Thank you for choosing  AquaBliss!",
        "For enquiries: 0743970594 / 0708045934",
        "Email: aquabliss217@gmail.com",
    )
    name_width: int = 12
    page_width: float = 226
    page_height: float = 600
    margin: float = 10

    @classmethod
    def from_settings(cls) -> "ReceiptOptions":
        overrides = dict(getattr(settings, "POS_RECEIPT", {}) or {})
        if "footer" in overrides:
            overrides["footer"] = tuple(overrides["footer"])
        return replace(cls(), **overrides)


@dataclass(frozen=True)
class ReceiptLine:
    kind: str  # "text" | "rule" | "gap"
    text: str = ""
    size: float = 9
    align: str = "left"


@dataclass
class _Cursor:
    pdf: canvas.Canvas
    options: ReceiptOptions
    y: float = field(init=False)
    pages: int = field(init=False, default=1)

    def __post_init__(self):
        self.y = self.options.page_height - self.options.margin

    def reserve(self, height: float) -> None:
        if self.y - height < self.options.margin:
            self.pdf.showPage()
            self.pages += 1
            self.y = self.options.page_height - self.options.margin


def _format_timestamp(value, now: datetime | None) -> str:
    if isinstance(value, str):
        value = parse_datetime(value)
    if value is None:
        value = now or timezone.now()
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime("%d/%m/%Y, %H:%M:%S")


def item_row(item: dict, name_width: int = 12) -> str:
    name = (item.get("product_name") or "")[:name_width].ljust(name_width)
    return f"{name}  {item['quantity']}   {fmt_money(item['unit_price'])}   {fmt_money(item['subtotal'])}"


def receipt_lines(
    order: dict,
    items: list[dict],
    options: ReceiptOptions | None = None,
    now: datetime | None = None,
) -> list[ReceiptLine]:
    opts = options or ReceiptOptions.from_settings()
    lines = [
        ReceiptLine("text", opts.business_name, 14, "center"),
        ReceiptLine("text", opts.subtitle, 10, "center"),
        ReceiptLine("gap", size=10),
        ReceiptLine("text", f"Order ID: {order['order_id']}"),
        ReceiptLine("text", f"Customer: {order.get('customer_name') or opts.walk_in_customer}"),
        ReceiptLine("text", f"Phone: {order.get('customer_phone') or opts.missing_phone}"),
        ReceiptLine("text", f"Payment: {order.get('payment_method')}"),
    ]
    if order.get("payment_method") == opts.mobile_money_method:
        lines.append(ReceiptLine("text", f"Code: {order.get('transaction_code') or opts.missing_code}"))
    lines += [
        ReceiptLine("text", f"Date: {_format_timestamp(order.get('created_at'), now)}"),
        ReceiptLine("gap"),
        ReceiptLine("text", "Item       Qty   Price   Subtotal"),
        ReceiptLine("rule"),
        ReceiptLine("gap", size=9 * 0.3),
    ]
    lines += [ReceiptLine("text", item_row(it, opts.name_width)) for it in items]
    lines += [
        ReceiptLine("gap"),
        ReceiptLine("rule"),
        ReceiptLine("text", f"TOTAL: {opts.currency} {fmt_money(order['total_amount'])}", 10, "right"),
        ReceiptLine("gap", size=10),
    ]
    lines += [ReceiptLine("text", text, 8, "center") for text in opts.footer]
    return lines


def render_receipt(
    order: dict,
    items: list[dict],
    options: ReceiptOptions | None = None,
    now: datetime | None = None,
) -> bytes:
    """Render an order and its items as PDF bytes."""
    opts = options or ReceiptOptions.from_settings()
    buf = BytesIO()
    pdf = canvas.Canvas(buf, pagesize=(opts.page_width, opts.page_height))
    pdf.setTitle(f"Receipt {order['order_id']}")
    cur = _Cursor(pdf, opts)
    left, right = opts.margin, opts.page_width - opts.margin

    for line in receipt_lines(order, items, opts, now):
        height = line.size * LEADING
        if line.kind == "gap":
            cur.y -= height
            continue
        if line.kind == "rule":
            cur.reserve(1)
            pdf.line(left, cur.y, right, cur.y)
            continue
        cur.reserve(height)
        baseline = cur.y - line.size
        pdf.setFont(FONT, line.size)
        if line.align == "center":
            pdf.drawCentredString(opts.page_width / 2, baseline, line.text)
        elif line.align == "right":
            pdf.drawRightString(right, baseline, line.text)
        else:
            pdf.drawString(left, baseline, line.text)
        cur.y -= height

    pdf.showPage()
    pdf.save()
    return buf.getvalue()
