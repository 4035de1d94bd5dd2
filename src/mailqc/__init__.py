"""MailQC - rule-based quality control for customer-service emails."""

__version__ = "1.0.0"
