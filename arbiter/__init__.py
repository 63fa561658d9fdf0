"""
Dispute Arbiter - automated adjudication of two-party disputes.

Two named parties record or type their statements; the arbiter asks a
generative model for a verdict, narrates it with a persona voice, and keeps
the dispute lifecycle consistent when any remote step fails.

Operating rules:
- A failed adjudication leaves the dispute exactly as it was
- Narration is best-effort and never blocks a verdict
- Usage limits are checked before any side effect
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
