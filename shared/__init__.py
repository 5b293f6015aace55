"""
Shared utilities for the storage STS identity layer.

This package aggregates common building blocks consumed by the service
packages:

- config: Configuration via pydantic-settings and the JWKS URL override
- logging: Structured logging with correlation context
- metrics: Prometheus metrics for validations and key refreshes
- errors: Canonical error types and responses
- test_helpers: Signing keys and token factories for tests

Do not import from service packages into shared/.
"""
