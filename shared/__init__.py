"""
Shared infrastructure for the portfolio admin audit trail.

This package is intentionally small and focused. It provides:

- `shared.config` for environment-based configuration
- `shared.logging` for structlog-based structured logging
- `shared.db` for the audit_log table, engine and session management
- `shared.repository` for audit log data access

Both the `audit_trail` package and the API service build on it; keep
service-specific logic out of here.
"""
