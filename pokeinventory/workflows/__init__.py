"""
Workflow layer for pokeinventory.
Operations that span more than one table.
"""

from pokeinventory.workflows.sale_recording import SaleReceipt, SaleRecordingWorkflow

__all__ = [
    "SaleReceipt",
    "SaleRecordingWorkflow",
]
