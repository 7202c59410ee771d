"""magento-doctor: rule-based performance and health review for Magento 2."""

__version__ = "0.1.0"
