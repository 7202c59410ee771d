"""Actions package - read-only output actions."""

from magento_doctor.actions.report import ReportAction

__all__ = ["ReportAction"]
