"""Internal modules for the delivery gateway.

WARNING: This package contains system-level modules used by the gateway.
These are not intended for direct use in application code.

Modules:
    dispatch - Outbound dispatch engine (retry, error classification)
    lalamove - Signed Lalamove adapter
    signing - HMAC request signing
    http - Shared HTTP client configuration
"""
