"""Verdict generator.

Builds the transcript and the persona-conditioned instruction, makes one
generative-text call, and parses the reply into a structured verdict.

Prompt Contract:
    The system instruction always names both participants and always ends
    with the ``VERDICT:`` format rule the parser depends on. Each persona
    caps the length of the per-speaker assessment lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from structlog import get_logger

from arbiter.application.ports.text_generator import CompletionRequest
from arbiter.application.services.verdict_parser import parse_verdict
from arbiter.domain.errors.pipeline import GenerationFailureError
from arbiter.domain.models.dispute import DEFAULT_PERSONA, Persona
from arbiter.domain.models.turn import Speaker
from arbiter.domain.models.verdict import Winner

if TYPE_CHECKING:
    from arbiter.application.ports.text_generator import TextGeneratorProtocol
    from arbiter.application.services.fact_check_service import ResearchFindings

logger = get_logger(__name__)

PERSONA_PROMPTS: dict[Persona, str] = {
    Persona.MEDIATOR: (
        "You are a fair and balanced mediator helping settle a disagreement "
        "between two people.\n"
        "Your approach is empathetic, understanding, and focused on finding "
        "common ground.\n"
        "While you must declare a winner, do so gently and with compassion for "
        "both sides.\n"
        "Focus on the merits of each argument rather than personal attacks."
    ),
    Persona.AUTHORITATIVE: (
        "You are a stern courtroom judge - direct, no-nonsense, and brutally "
        "honest.\n"
        "You have zero tolerance for excuses, circular logic, or weak "
        "arguments.\n"
        "Call out faulty reasoning and manipulation when you see it.\n"
        "Your verdicts are swift and definitive. Don't sugarcoat your ruling."
    ),
    Persona.COMEDIC: (
        "You are a comedic judge who finds humor in everyday arguments.\n"
        "While you must give a fair ruling, do so with wit and playful "
        "observations.\n"
        "Poke fun at both parties equally and keep it light.\n"
        "Your judgment should be entertaining while still being fair and "
        "reasoned."
    ),
}

# Max words per speaker assessment line
PERSONA_LINE_WORD_LIMITS: dict[Persona, int] = {
    Persona.MEDIATOR: 40,
    Persona.AUTHORITATIVE: 25,
    Persona.COMEDIC: 35,
}


@dataclass(frozen=True)
class TranscriptLine:
    """One turn as seen by the generator.

    Attributes:
        speaker: Role of the speaker.
        speaker_name: Display name of the speaker.
        text: What was said.
    """

    speaker: Speaker
    speaker_name: str
    text: str


@dataclass(frozen=True)
class GenerationRequest:
    """Input of a verdict generation.

    Attributes:
        party_a_name: Display name of person_a.
        party_b_name: Display name of person_b.
        persona: Persona to judge with.
        turns: Turns in order.
        research: Fact-check findings to include, if research ran.
    """

    party_a_name: str
    party_b_name: str
    persona: Persona
    turns: tuple[TranscriptLine, ...]
    research: ResearchFindings | None = None


@dataclass(frozen=True)
class GeneratedVerdict:
    """Structured verdict produced by the generator.

    Attributes:
        winner: Winning role, or TIE.
        winner_name: Display name of the winner, or "Tie".
        rationale: Reply with the verdict line stripped.
        raw_text: Full reply.
        research_performed: Whether research findings were supplied.
        sources: Source URLs of the research findings.
        research_summary: Digest of the research findings.
    """

    winner: Winner
    winner_name: str
    rationale: str
    raw_text: str
    research_performed: bool = False
    sources: tuple[str, ...] = field(default_factory=tuple)
    research_summary: str | None = None


def build_transcript(turns: tuple[TranscriptLine, ...] | list[TranscriptLine]) -> str:
    """Render turns as ``Name: "text"`` blocks separated by blank lines."""
    return "\n\n".join(f'{turn.speaker_name}: "{turn.text}"' for turn in turns)


def build_system_instruction(
    persona: Persona,
    party_a_name: str,
    party_b_name: str,
) -> str:
    """Build the persona-conditioned system instruction.

    Args:
        persona: Persona to judge with. Unknown personas fall back to the
            default persona.
        party_a_name: Display name of person_a.
        party_b_name: Display name of person_b.

    Returns:
        The instruction text, containing both names and the VERDICT rule.
    """
    prompt = PERSONA_PROMPTS.get(persona, PERSONA_PROMPTS[DEFAULT_PERSONA])
    word_limit = PERSONA_LINE_WORD_LIMITS.get(
        persona, PERSONA_LINE_WORD_LIMITS[DEFAULT_PERSONA]
    )
    return (
        f"{prompt}\n\n"
        f"You are settling an argument between {party_a_name} and {party_b_name}.\n\n"
        "IMPORTANT RULES:\n"
        "1. You MUST declare a winner (or a tie if truly equal). Never refuse to judge.\n"
        "2. Base your judgment on:\n"
        "   - Logic and reasoning quality\n"
        "   - How well they addressed the other person's points\n"
        "   - Overall persuasiveness\n"
        "3. Give one assessment line per person in the form "
        f'"<Name>: <assessment>", at most {word_limit} words each.\n'
        "4. At the end of your response, include a clear verdict line in this format:\n"
        "   VERDICT: [WINNER_NAME] (or VERDICT: TIE)"
    )


def build_user_message(transcript: str, research: ResearchFindings | None = None) -> str:
    """Build the user message carrying the transcript and optional research."""
    parts = [f"Here is the argument transcript:\n\n{transcript}"]
    if research is not None and research.summary:
        parts.append(
            "Fact-check research on claims made in the argument "
            f"(use it to weigh factual accuracy):\n\n{research.summary}"
        )
    parts.append("Please analyze this argument and render your judgment with clear reasoning.")
    return "\n\n".join(parts)


class VerdictGeneratorService:
    """Produces a structured verdict from a dispute transcript."""

    def __init__(
        self,
        text_generator: TextGeneratorProtocol,
        max_output_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> None:
        """Initialize the generator.

        Args:
            text_generator: Generative-text provider.
            max_output_tokens: Upper bound on the reply length.
            temperature: Sampling temperature.
        """
        self._generator = text_generator
        self._max_output_tokens = max_output_tokens
        self._temperature = temperature

    async def generate_verdict(self, request: GenerationRequest) -> GeneratedVerdict:
        """Generate and parse a verdict.

        Args:
            request: Names, persona, ordered turns and optional research.

        Returns:
            The parsed verdict.

        Raises:
            GenerationFailureError: If the provider call fails or the reply
                is empty.
        """
        log = logger.bind(persona=request.persona.value, turns=len(request.turns))

        completion = CompletionRequest(
            system_instruction=build_system_instruction(
                request.persona, request.party_a_name, request.party_b_name
            ),
            user_content=build_user_message(
                build_transcript(request.turns), request.research
            ),
            max_output_tokens=self._max_output_tokens,
            temperature=self._temperature,
        )

        raw_text = await self._generator.complete(completion)
        if not raw_text or not raw_text.strip():
            log.error("verdict_generation_empty_reply")
            raise GenerationFailureError("Generative-text service returned an empty reply")

        parsed = parse_verdict(raw_text, request.party_a_name, request.party_b_name)
        log.info(
            "verdict_generated",
            winner=parsed.winner.value,
            reply_chars=len(raw_text),
        )

        research = request.research
        research_performed = research is not None
        return GeneratedVerdict(
            winner=parsed.winner,
            winner_name=parsed.winner_name,
            rationale=parsed.rationale,
            raw_text=raw_text,
            research_performed=research_performed,
            sources=research.sources if research is not None else (),
            research_summary=(
                research.summary if research is not None and research.summary else None
            ),
        )
