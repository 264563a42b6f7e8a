"""Internal modules for Formlet SDK.

WARNING: This package contains the request pipeline behind FormletClient.
These are not intended for direct use in application code.

Modules:
    dispatch - Request envelope dispatch and error normalization
    entries - Entry operations, payload normalization and scoping
    http - Shared HTTP client configuration
"""
