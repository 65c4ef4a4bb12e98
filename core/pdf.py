from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from io import BytesIO
from urllib.parse import quote

from django.conf import settings
from django.http import HttpResponse
from django.utils.html import escape

from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, A5
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.templatetags.formatting import money as money_filter
from core.templatetags.formatting import rupees_in_words


ZERO = Decimal("0.00")
_ACCENT = colors.HexColor("#b45309")
_MUTED = colors.HexColor("#475569")


def money(val) -> str:
	"""Format monetary amounts consistently across PDFs/exports."""
	return money_filter(val)


def _company():
	from core.models import CompanySettings

	return CompanySettings.load()


def _p(text, style) -> Paragraph:
	return Paragraph(escape(str(text or "")).replace("\n", "<br/>"), style)


def draw_header_footer(canvas, doc, *, title: str, company=None) -> None:
	"""Draw the company header bar and a contact footer on each PDF page."""
	company = company or _company()
	page_width, page_height = doc.pagesize
	left = doc.leftMargin
	right = page_width - doc.rightMargin

	# Responsive sizing for A4 vs A5 pages.
	large = page_height >= 750
	bar_h = 54 if large else 42
	name_font = 14 if large else 11
	title_font = 11 if large else 9
	footer_line_y = 40 if large else 30

	canvas.saveState()

	canvas.setFillColor(_ACCENT)
	canvas.rect(0, page_height - bar_h, page_width, bar_h, fill=1, stroke=0)

	canvas.setFillColor(colors.white)
	canvas.setFont("Helvetica-Bold", name_font)
	canvas.drawString(left, page_height - bar_h / 2 - name_font / 3, company.company_name or settings.DEFAULT_COMPANY_NAME)
	canvas.setFont("Helvetica-Bold", title_font)
	canvas.drawRightString(right, page_height - bar_h / 2 - title_font / 3, title)

	canvas.setStrokeColor(colors.HexColor("#cbd5e1"))
	canvas.setLineWidth(0.6)
	canvas.line(left, footer_line_y, right, footer_line_y)

	footer_bits = [bit for bit in (company.address.replace("\n", ", ") if company.address else "", company.phone) if bit]
	if company.gst_number:
		footer_bits.append(f"GSTIN: {company.gst_number}")
	canvas.setFillColor(_MUTED)
	canvas.setFont("Helvetica", 7 if large else 6)
	canvas.drawCentredString(page_width / 2, footer_line_y - 11, "  |  ".join(footer_bits))
	canvas.drawRightString(right, footer_line_y - 22, f"Page {doc.page}")

	canvas.restoreState()


def kv_table(*, styles, left_rows: list[tuple[str, str]], right_rows: list[tuple[str, str]]):
	"""Two-column key/value table for PDFs."""
	value_style = ParagraphStyle(
		"pdf_kv_value",
		parent=styles["Normal"],
		fontSize=9.5,
		leading=12,
		textColor=colors.HexColor("#0f172a"),
	)

	max_rows = max(len(left_rows), len(right_rows))
	rows = []
	for i in range(max_rows):
		lk, lv = left_rows[i] if i < len(left_rows) else ("", "")
		rk, rv = right_rows[i] if i < len(right_rows) else ("", "")
		rows.append(
			[
				Paragraph(f"<b>{escape(lk)}</b><br/>{escape(str(lv))}", value_style) if lk else "",
				Paragraph(f"<b>{escape(rk)}</b><br/>{escape(str(rv))}", value_style) if rk else "",
			]
		)

	table = Table(rows, colWidths=["50%", "50%"])
	table.setStyle(
		TableStyle(
			[
				("BACKGROUND", (0, 0), (-1, -1), colors.whitesmoke),
				("VALIGN", (0, 0), (-1, -1), "TOP"),
				("LEFTPADDING", (0, 0), (-1, -1), 6),
				("RIGHTPADDING", (0, 0), (-1, -1), 6),
				("TOPPADDING", (0, 0), (-1, -1), 4),
				("BOTTOMPADDING", (0, 0), (-1, -1), 4),
				("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#e2e8f0")),
			]
		)
	)
	return table


def _build(elements, *, title: str, pagesize=A4) -> bytes:
	buffer = BytesIO()
	small = pagesize == A5
	doc = SimpleDocTemplate(
		buffer,
		pagesize=pagesize,
		title=title,
		topMargin=70 if small else 80,
		bottomMargin=50 if small else 60,
		leftMargin=28 if small else 36,
		rightMargin=28 if small else 36,
	)
	company = _company()
	doc.build(
		elements,
		onFirstPage=lambda c, d: draw_header_footer(c, d, title=title, company=company),
		onLaterPages=lambda c, d: draw_header_footer(c, d, title=title, company=company),
	)
	pdf_bytes = buffer.getvalue()
	buffer.close()
	return pdf_bytes


def pdf_bytes_response(pdf_bytes: bytes, filename: str, *, inline: bool = False) -> HttpResponse:
	response = HttpResponse(pdf_bytes, content_type="application/pdf")
	disposition = "inline" if inline else "attachment"
	response["Content-Disposition"] = f'{disposition}; filename="{filename}"'
	return response


def _header_table(data, col_widths, *, numeric_cols=()):
	table = Table(data, repeatRows=1, colWidths=col_widths)
	style = [
		("BACKGROUND", (0, 0), (-1, 0), _ACCENT),
		("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
		("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
		("FONTSIZE", (0, 0), (-1, -1), 9),
		("LEFTPADDING", (0, 0), (-1, -1), 5),
		("RIGHTPADDING", (0, 0), (-1, -1), 5),
		("TOPPADDING", (0, 0), (-1, -1), 3),
		("BOTTOMPADDING", (0, 0), (-1, -1), 3),
		("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
		("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
	]
	for idx in numeric_cols:
		style.append(("ALIGN", (idx, 1), (idx, -1), "RIGHT"))
	table.setStyle(TableStyle(style))
	return table


def pdf_response(title: str, header: list[str], rows: list[list], filename: str, *, inline: bool = False) -> HttpResponse:
	"""Render a report table as a PDF download."""
	styles = getSampleStyleSheet()
	hint = ParagraphStyle("pdf_export_hint", parent=styles["Normal"], fontSize=9, leading=11, textColor=_MUTED)

	elements = [
		Paragraph(escape(title), styles["Title"]),
		Spacer(1, 4),
		Paragraph(f"Amounts in {getattr(settings, 'DEFAULT_CURRENCY', 'INR')}, weights in {settings.MATERIAL_UNIT}", hint),
		Spacer(1, 10),
	]

	def _cell(value) -> str:
		if value is None:
			return ""
		if isinstance(value, Decimal):
			return money(value)
		return str(value)

	body = [[_cell(v) for v in row] for row in rows]
	numeric_cols = [
		idx for idx in range(len(header))
		if body and all(isinstance(row[idx], (int, float, Decimal)) for row in rows if idx < len(row))
	]
	if not body:
		elements.append(Paragraph("No records for the selected filters.", hint))
	else:
		elements.append(_header_table([header] + body, None, numeric_cols=numeric_cols))

	return pdf_bytes_response(_build(elements, title=title), filename, inline=inline)


def order_receipt_pdf_bytes(order) -> bytes:
	"""Delivery slip for a single order."""
	styles = getSampleStyleSheet()
	client = order.client
	unit = settings.MATERIAL_UNIT
	elements = [
		kv_table(
			styles=styles,
			left_rows=[
				("Order No.", order.order_number or str(order.pk)),
				("Date", f"{order.order_date:%d-%m-%Y}" + (f" {order.order_time:%H:%M}" if order.order_time else "")),
				("Client", client.name),
				("City", client.city),
				("Delivery location", order.location or "-"),
			],
			right_rows=[
				("Material", order.material),
				("Weight", f"{order.weight} {unit}"),
				("Rate", f"{money(order.rate)} / {unit}"),
				("Truck No.", order.truck_number or "-"),
				("Delivered by", " ".join(filter(None, [order.delivery_boy_name, order.delivery_boy_mobile])) or "-"),
			],
		),
		Spacer(1, 12),
		_header_table(
			[["Material", "Quantity", "Rate", "Amount"], [order.material, str(order.billed_quantity), money(order.rate), money(order.total)]],
			["40%", "20%", "20%", "20%"],
			numeric_cols=(1, 2, 3),
		),
	]
	if order.notes:
		elements += [Spacer(1, 10), _p(f"Notes: {order.notes}", styles["Normal"])]
	elements += [Spacer(1, 28), Paragraph("Receiver's signature: ____________________", styles["Normal"])]
	return _build(elements, title="DELIVERY SLIP", pagesize=A5)


def payment_receipt_pdf_bytes(payment) -> bytes:
	styles = getSampleStyleSheet()
	client = payment.client
	elements = [
		kv_table(
			styles=styles,
			left_rows=[
				("Receipt No.", payment.receipt_number or str(payment.pk)),
				("Date", f"{payment.payment_date:%d-%m-%Y}"),
				("Received from", client.name),
			],
			right_rows=[
				("Amount", f"Rs. {money(payment.amount)}"),
				("Mode", payment.get_mode_display()),
				("Balance due after payment", f"Rs. {money(client.amount_due())}"),
			],
		),
		Spacer(1, 12),
		Paragraph(f"<b>Amount in words:</b> {escape(rupees_in_words(payment.amount))}", styles["Normal"]),
	]
	if payment.notes:
		elements += [Spacer(1, 8), _p(f"Notes: {payment.notes}", styles["Normal"])]
	elements += [Spacer(1, 28), Paragraph("Authorised signatory: ____________________", styles["Normal"])]
	return _build(elements, title="PAYMENT RECEIPT", pagesize=A5)


def round_off(amount: Decimal) -> tuple[Decimal, Decimal]:
	"""Return (rounded whole-rupee total, round-off adjustment)."""
	amount = amount or ZERO
	rounded = amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
	return rounded, (rounded - amount).quantize(Decimal("0.01"))


def upi_payment_uri(company, amount, invoice_number: str) -> str:
	"""UPI deep link for the invoice total, as understood by payment apps."""
	return (
		f"upi://pay?pa={quote(company.upi_id, safe='@.')}"
		f"&pn={quote(company.company_name or '')}"
		f"&am={amount}&cu={getattr(settings, 'DEFAULT_CURRENCY', 'INR')}"
		f"&tn={quote(f'Invoice {invoice_number}')}"
	)


def upi_qr_drawing(uri: str, size: float = 90) -> Drawing:
	widget = QrCodeWidget(uri)
	x1, y1, x2, y2 = widget.getBounds()
	drawing = Drawing(size, size, transform=[size / (x2 - x1), 0, 0, size / (y2 - y1), 0, 0])
	drawing.add(widget)
	return drawing


def invoice_item_rows(items):
	"""Item table rows ending in sub total, round off and a total row with the summed quantity.

	Returns the rows and the rounded total.
	"""
	unit = settings.MATERIAL_UNIT
	rows = [["S.No", "Description of goods", "Location", "Quantity", "Rate", "per", "Amount"]]
	for idx, item in enumerate(items, start=1):
		rows.append(
			[
				str(idx),
				item.description,
				item.location or "",
				f"{item.quantity} {unit}",
				money(item.rate),
				unit,
				money(item.amount),
			]
		)

	subtotal = sum((item.amount for item in items), ZERO)
	rounded, adjustment = round_off(subtotal)
	total_quantity = sum((item.quantity or ZERO for item in items), ZERO)
	rows.append(["", "Sub total", "", "", "", "", money(subtotal)])
	rows.append(["", "Round off", "", "", "", "", money(adjustment)])
	rows.append(["", "Total", "", f"{total_quantity} {unit}", "", "", f"Rs. {money(rounded)}"])
	return rows, rounded


def invoice_pdf_bytes(invoice) -> bytes:
	"""Tax invoice for a monthly bill."""
	company = _company()
	client = invoice.client
	styles = getSampleStyleSheet()
	small = ParagraphStyle("pdf_small", parent=styles["Normal"], fontSize=8.5, leading=11)
	bold = ParagraphStyle("pdf_bold", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=9.5, leading=12)

	seller = [f"<b>{escape(company.company_name)}</b>"]
	if company.address:
		seller.append(escape(company.address).replace("\n", "<br/>"))
	if company.phone:
		seller.append(f"Phone: {escape(company.phone)}")
	if company.gst_number:
		seller.append(f"GSTIN/UIN: {escape(company.gst_number)}")

	buyer = ["<b>Buyer (Bill to)</b>", f"<b>{escape(client.name)}</b>"]
	for line in (client.address, ", ".join(filter(None, [client.city, client.state, client.pincode]))):
		if line:
			buyer.append(escape(line))
	if client.phone:
		buyer.append(f"Phone: {escape(client.phone)}")
	if client.gst_number:
		buyer.append(f"GSTIN/UIN: {escape(client.gst_number)}")

	meta = [
		f"<b>Invoice No.</b><br/>{escape(invoice.invoice_number)}",
		f"<b>Dated</b><br/>{invoice.created_at:%d-%b-%Y}" if invoice.created_at else "",
		f"<b>Bill month</b><br/>{invoice.bill_month:%B %Y}",
	]

	parties = Table(
		[
			[Paragraph("<br/>".join(seller), small), Paragraph("<br/>".join(meta), small)],
			[Paragraph("<br/>".join(buyer), small), ""],
		],
		colWidths=["62%", "38%"],
	)
	parties.setStyle(
		TableStyle(
			[
				("GRID", (0, 0), (-1, -1), 0.4, colors.grey),
				("VALIGN", (0, 0), (-1, -1), "TOP"),
				("SPAN", (1, 0), (1, 1)),
			]
		)
	)

	rows, rounded = invoice_item_rows(list(invoice.items.all()))
	item_table = _header_table(rows, ["7%", "27%", "20%", "14%", "11%", "7%", "14%"], numeric_cols=(3, 4, 6))
	item_table.setStyle(TableStyle([("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold")]))

	summary = Table(
		[
			["Current month orders", money(invoice.orders_total)],
			["Previous balance", money(invoice.previous_balance)],
			["Less: paid this month", money(invoice.paid_amount)],
			["Total payable", f"Rs. {money(invoice.total_payable)}"],
		],
		colWidths=["70%", "30%"],
	)
	summary.setStyle(
		TableStyle(
			[
				("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
				("ALIGN", (1, 0), (1, -1), "RIGHT"),
				("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
				("BACKGROUND", (0, -1), (-1, -1), colors.whitesmoke),
				("FONTSIZE", (0, 0), (-1, -1), 9),
			]
		)
	)

	bank_lines = []
	for label, value in (
		("Bank", company.bank_name),
		("A/c No.", company.account_number),
		("IFSC", company.ifsc_code),
		("UPI", company.upi_id),
	):
		if value:
			bank_lines.append(f"{label}: {escape(value)}")

	elements = [
		parties,
		Spacer(1, 10),
		item_table,
		Spacer(1, 6),
		Paragraph(f"<b>Amount chargeable (in words):</b> {escape(rupees_in_words(rounded))}", small),
		Spacer(1, 10),
		summary,
		Paragraph(f"Total payable in words: {escape(rupees_in_words(invoice.total_payable))}", small),
	]
	if invoice.notes:
		elements += [Spacer(1, 8), _p(f"Notes: {invoice.notes}", small)]
	if bank_lines:
		bank_block = [Paragraph("<b>Company's bank details</b>", bold), Paragraph("<br/>".join(bank_lines), small)]
		if company.upi_id:
			qr = upi_qr_drawing(upi_payment_uri(company, rounded, invoice.invoice_number))
			pay_table = Table(
				[[bank_block, [qr, Paragraph("Scan to pay via UPI", small)]]],
				colWidths=["70%", "30%"],
			)
			pay_table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP"), ("ALIGN", (1, 0), (1, 0), "CENTER")]))
			elements += [Spacer(1, 10), pay_table]
		else:
			elements += [Spacer(1, 10)] + bank_block
	elements += [
		Spacer(1, 24),
		Paragraph(f"for {escape(company.company_name)}<br/><br/><br/>Authorised signatory", ParagraphStyle("pdf_sign", parent=small, alignment=2)),
	]
	return _build(elements, title="TAX INVOICE")
