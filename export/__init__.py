"""Client-facing PDF documents for SiteLedger projects."""

from .documents import Proposal, WorkOrder, build_proposal, build_work_order
from .pdf import (
    PDFExportError,
    decode_logo,
    encode_logo,
    proposal_filename,
    render_proposal,
    render_work_order,
    work_order_filename,
)

__all__ = [
    "PDFExportError",
    "Proposal",
    "WorkOrder",
    "build_proposal",
    "build_work_order",
    "decode_logo",
    "encode_logo",
    "proposal_filename",
    "render_proposal",
    "render_work_order",
    "work_order_filename",
]
