"""Render proposals and work orders to PDF bytes with reportlab."""

from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.formatting import format_currency, format_date, slugify_filename
from export.documents import EMPTY_CATEGORY, Proposal, WorkOrder

__all__ = [
    "PDFExportError",
    "decode_logo",
    "encode_logo",
    "proposal_filename",
    "render_proposal",
    "render_work_order",
    "work_order_filename",
]

logger = logging.getLogger(__name__)

PAGE_MARGIN = 48
CONTENT_WIDTH = A4[0] - 2 * PAGE_MARGIN
LOGO_MAX_WIDTH = 140
LOGO_MAX_HEIGHT = 56
HEADER_FILL = colors.HexColor("#F3F4F6")
BRAND_COLOR = colors.HexColor("#1E40AF")


class PDFExportError(RuntimeError):
    """Raised when a PDF document cannot be produced."""


def proposal_filename(project_name: str) -> str:
    return f"Budget-{slugify_filename(project_name)}.pdf"


def work_order_filename(project_name: str) -> str:
    return f"WorkOrder-{slugify_filename(project_name)}.pdf"


def encode_logo(raw: bytes, mime_type: str = "image/png") -> str:
    """Store an uploaded logo as a ``data:`` URL string."""

    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


def _styles() -> Any:
    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="DocLeft", parent=styles["Normal"], alignment=TA_LEFT))
    styles.add(
        ParagraphStyle(name="DocTitle", parent=styles["Title"], alignment=TA_LEFT, textColor=BRAND_COLOR)
    )
    styles.add(ParagraphStyle(name="DocSmall", parent=styles["Normal"], fontSize=8, textColor=colors.grey))
    return styles


def decode_logo(logo: str | None) -> bytes | None:
    """Return the image bytes of a ``data:image/...;base64,`` URL, or ``None``."""

    if not logo:
        return None
    _, _, encoded = logo.partition(",")
    try:
        return base64.b64decode(encoded or logo, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Ignoring company logo that could not be decoded")
        return None


def _logo_flowable(logo: str | None) -> Image | None:
    raw = decode_logo(logo)
    if raw is None:
        return None
    try:
        width, height = ImageReader(io.BytesIO(raw)).getSize()
    except (OSError, ValueError):
        logger.warning("Ignoring company logo that is not a readable image")
        return None

    scale = min(LOGO_MAX_WIDTH / width, LOGO_MAX_HEIGHT / height, 1.0)
    return Image(io.BytesIO(raw), width=width * scale, height=height * scale)


def _header(title: str, lines: list[str], logo: str | None, styles: Any) -> Table:
    left = [Paragraph(escape(title), styles["DocTitle"])]
    left.extend(Paragraph(line, styles["DocLeft"]) for line in lines)
    right = _logo_flowable(logo) or ""
    table = Table([[left, right]], colWidths=[CONTENT_WIDTH - LOGO_MAX_WIDTH, LOGO_MAX_WIDTH])
    table.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("ALIGN", (1, 0), (1, 0), "RIGHT"),
                ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ("LINEBELOW", (0, 0), (-1, 0), 1, colors.lightgrey),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
            ]
        )
    )
    return table


def _grid_style(numeric_from: int) -> TableStyle:
    return TableStyle(
        [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("ALIGN", (0, 0), (-1, -1), "LEFT"),
            ("ALIGN", (numeric_from, 0), (-1, -1), "RIGHT"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
        ]
    )


def _build(story: list[Any], title: str) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=PAGE_MARGIN,
        leftMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN,
        bottomMargin=PAGE_MARGIN,
        title=title,
    )
    try:
        doc.build(story)
    except Exception as exc:
        logger.exception("Failed to render PDF %r", title)
        raise PDFExportError("An error occurred while generating the PDF.") from exc
    return buffer.getvalue()


def render_proposal(proposal: Proposal, logo: str | None = None) -> bytes:
    styles = _styles()
    story: list[Any] = [
        _header(
            "Budget Proposal",
            [
                f"<b>Project:</b> {escape(proposal.project_name)}",
                f"<b>Client:</b> {escape(proposal.client_name)}",
                f"<b>Date:</b> {format_date(proposal.issued_on)}",
            ],
            logo,
            styles,
        ),
        Spacer(1, 16),
    ]

    widths = [CONTENT_WIDTH * 0.46, CONTENT_WIDTH * 0.12, CONTENT_WIDTH * 0.21, CONTENT_WIDTH * 0.21]
    for section in proposal.sections:
        rows: list[list[Any]] = [["Item", "Qty.", "Unit price", "Total"]]
        for line in section.lines:
            rows.append(
                [
                    Paragraph(escape(line.name), styles["DocLeft"]),
                    str(line.quantity),
                    format_currency(line.unit_cost),
                    format_currency(line.total),
                ]
            )
        if not section.lines:
            rows.append([EMPTY_CATEGORY, "", "", ""])
        rows.append(["Subtotal", "", "", format_currency(section.subtotal)])

        table = Table(rows, colWidths=widths, repeatRows=1)
        style = _grid_style(numeric_from=1)
        style.add("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold")
        table.setStyle(style)
        story.append(KeepTogether([Paragraph(escape(section.name), styles["Heading2"]), table]))
        story.append(Spacer(1, 12))

    totals = Table(
        [
            ["Subtotal", format_currency(proposal.subtotal)],
            ["Grand total", format_currency(proposal.grand_total)],
        ],
        colWidths=[120, 120],
        hAlign="RIGHT",
    )
    totals.setStyle(
        TableStyle(
            [
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
            ]
        )
    )
    story.extend(
        [
            totals,
            Spacer(1, 24),
            Paragraph(escape(proposal.validity_note), styles["DocSmall"]),
            Paragraph(escape(proposal.closing_note), styles["DocSmall"]),
        ]
    )
    return _build(story, f"Budget proposal - {proposal.project_name}")


def render_work_order(order: WorkOrder, logo: str | None = None) -> bytes:
    styles = _styles()
    story: list[Any] = [
        _header("Work Order", [escape(order.subtitle)], logo, styles),
        Spacer(1, 12),
    ]

    fields = [
        ("Project", order.project_name),
        ("Location", order.location),
        ("Client", order.client_name),
        ("Issue date", format_date(order.issued_on)),
        *order.client_details,
    ]
    info = Table(
        [
            [Paragraph(f"<b>{escape(label.upper())}:</b> {escape(value)}", styles["DocLeft"])]
            for label, value in fields
        ],
        colWidths=[CONTENT_WIDTH],
    )
    info.setStyle(TableStyle([("LEFTPADDING", (0, 0), (-1, -1), 0)]))
    story.extend([info, Spacer(1, 16), Paragraph("Scope of services and materials", styles["Heading2"])])

    widths = [CONTENT_WIDTH * 0.8, CONTENT_WIDTH * 0.2]
    for section in order.sections:
        rows: list[list[Any]] = [["Item / Service", "Quantity"]]
        rows.extend([Paragraph(escape(line.name), styles["DocLeft"]), str(line.quantity)] for line in section.lines)
        if not section.lines:
            rows.append([EMPTY_CATEGORY, ""])
        table = Table(rows, colWidths=widths, repeatRows=1)
        table.setStyle(_grid_style(numeric_from=1))
        story.append(KeepTogether([Paragraph(escape(section.name), styles["Heading3"]), table]))
        story.append(Spacer(1, 10))

    signature = Table([[""], [order.signature_label]], colWidths=[CONTENT_WIDTH * 0.6], hAlign="CENTER")
    signature.setStyle(
        TableStyle(
            [
                ("LINEABOVE", (0, 1), (0, 1), 1, colors.black),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("TOPPADDING", (0, 0), (0, 0), 36),
            ]
        )
    )
    story.extend(
        [
            Spacer(1, 24),
            KeepTogether([signature, Spacer(1, 8), Paragraph(escape(order.declaration), styles["DocSmall"])]),
        ]
    )
    return _build(story, f"Work order - {order.project_name}")
