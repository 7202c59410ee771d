"""Output formats for review reports."""

from magento_doctor.actions.reporters.base import BaseReporter
from magento_doctor.actions.reporters.json_reporter import JsonReporter
from magento_doctor.actions.reporters.plain_reporter import PlainReporter
from magento_doctor.actions.reporters.rich_reporter import RichReporter

__all__ = ["BaseReporter", "JsonReporter", "PlainReporter", "RichReporter"]
