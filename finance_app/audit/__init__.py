"""Audit logging package."""

from finance_app.audit.logger import AuditLogger, create_correlation_id

__all__ = ["AuditLogger", "create_correlation_id"]
