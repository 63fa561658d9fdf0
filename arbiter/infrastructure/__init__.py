"""
Infrastructure layer - external adapters for the dispute arbiter.

This layer contains:
- PostgreSQL repositories (SQLAlchemy async)
- OpenAI, ElevenLabs, Supabase Storage and Tavily adapters
- In-memory stubs of every port
- Observability (structlog, correlation ids)

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""
