"""Verdict parsing from free-text model replies.

The model is asked to end its reply with a line ``VERDICT: <label>``. The
label is classified heuristically:

1. The text after the LAST ``VERDICT:`` marker (case-insensitive) up to the
   end of that line is trimmed and lowercased.
2. A label containing "tie" or "draw" is a tie.
3. A label containing party A's name, "person a" or "first person" is a win
   for party A.
4. Otherwise a label containing party B's name, "person b" or
   "second person" is a win for party B.
5. Anything else (including a reply with no marker) is a tie.

Party A is checked before party B, so a label naming both goes to A.

The rationale is the reply with the marker and everything after it removed.
This module has no I/O so the heuristic can be replaced by a stricter
structured-output contract without touching the orchestration.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from arbiter.domain.models.verdict import TIE_LABEL, Winner

VERDICT_MARKER = re.compile(r"VERDICT:[ \t]*(.*)", re.IGNORECASE)

_TIE_TOKENS = ("tie", "draw")
_PARTY_A_TOKENS = ("person a", "first person")
_PARTY_B_TOKENS = ("person b", "second person")


@dataclass(frozen=True)
class ParsedVerdict:
    """Structured reading of a verdict reply.

    Attributes:
        winner: Winning role, or TIE.
        winner_name: Display name of the winner, or "Tie".
        rationale: Reply text before the verdict marker.
    """

    winner: Winner
    winner_name: str
    rationale: str


def _mentions(label: str, name: str, tokens: tuple[str, ...]) -> bool:
    return name.lower() in label or any(token in label for token in tokens)


def parse_verdict(raw_text: str, party_a_name: str, party_b_name: str) -> ParsedVerdict:
    """Parse a model reply into a structured verdict.

    Args:
        raw_text: Full model reply.
        party_a_name: Display name of person_a.
        party_b_name: Display name of person_b.

    Returns:
        ParsedVerdict. Never raises for any input text.

    Example:
        >>> parse_verdict("Fair points all round.\\nVERDICT: Alex", "Alex", "Sam").winner
        <Winner.PERSON_A: 'person_a'>
    """
    matches = list(VERDICT_MARKER.finditer(raw_text))
    if not matches:
        return ParsedVerdict(Winner.TIE, TIE_LABEL, raw_text.strip())

    last = matches[-1]
    label = last.group(1).strip().lower()
    rationale = raw_text[: last.start()].strip()

    if any(token in label for token in _TIE_TOKENS):
        return ParsedVerdict(Winner.TIE, TIE_LABEL, rationale)
    if _mentions(label, party_a_name, _PARTY_A_TOKENS):
        return ParsedVerdict(Winner.PERSON_A, party_a_name, rationale)
    if _mentions(label, party_b_name, _PARTY_B_TOKENS):
        return ParsedVerdict(Winner.PERSON_B, party_b_name, rationale)
    return ParsedVerdict(Winner.TIE, TIE_LABEL, rationale)
