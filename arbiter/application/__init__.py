"""
Application layer - use cases and orchestration for the dispute arbiter.

This layer contains:
- Port definitions (abstract interfaces for infrastructure)
- Application services (entitlements, judgment, narration, lifecycle)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: api
"""
