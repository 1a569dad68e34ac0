"""
Application Layer for the HypertroQ client.

This package contains:
- ports/: Protocols for credential storage and user notifications
- session_context: the injected authenticated-session state
- query_cache / queries: cached reads and invalidating mutations
- use_cases/: authentication and program editing workflows
"""
