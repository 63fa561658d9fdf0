"""Unit tests for the Turn and Verdict models."""

from uuid import uuid4

import pytest

from arbiter.domain.models.turn import Speaker, Turn
from arbiter.domain.models.verdict import TIE_LABEL, Verdict, Winner


def _verdict(**overrides: object) -> Verdict:
    fields: dict[str, object] = {
        "id": uuid4(),
        "dispute_id": uuid4(),
        "winner": Winner.PERSON_A,
        "winner_name": "Alex",
        "rationale": "Alex argued better.",
        "raw_text": "Alex argued better.\nVERDICT: Alex",
    }
    fields.update(overrides)
    return Verdict(**fields)  # type: ignore[arg-type]


class TestTurn:
    """Tests for Turn validation."""

    def test_empty_text_rejected(self) -> None:
        """Test that a turn needs text."""
        with pytest.raises(ValueError, match="empty"):
            Turn(id=uuid4(), dispute_id=uuid4(), speaker=Speaker.PERSON_A, text="  ", order=1)

    def test_order_starts_at_one(self) -> None:
        """Test that order 0 is rejected."""
        with pytest.raises(ValueError, match="order"):
            Turn(id=uuid4(), dispute_id=uuid4(), speaker=Speaker.PERSON_B, text="hi", order=0)

    def test_negative_duration_rejected(self) -> None:
        """Test duration must be non-negative."""
        with pytest.raises(ValueError, match="duration"):
            Turn(
                id=uuid4(),
                dispute_id=uuid4(),
                speaker=Speaker.PERSON_A,
                text="hello",
                order=1,
                duration_seconds=-1,
            )


class TestVerdict:
    """Tests for the tie label invariant."""

    def test_tie_requires_tie_label(self) -> None:
        """Test winner=tie with a party name is rejected."""
        with pytest.raises(ValueError, match="inconsistent"):
            _verdict(winner=Winner.TIE, winner_name="Alex")

    def test_tie_label_requires_tie(self) -> None:
        """Test a party win labelled Tie is rejected."""
        with pytest.raises(ValueError, match="inconsistent"):
            _verdict(winner=Winner.PERSON_B, winner_name=TIE_LABEL)

    def test_sources_require_research(self) -> None:
        """Test sources are only allowed when research ran."""
        with pytest.raises(ValueError, match="research_performed"):
            _verdict(sources=("https://example.org",))

    def test_has_audio(self) -> None:
        """Test has_audio follows the audio key."""
        assert not _verdict().has_audio
        assert _verdict(audio_key="audio/p/d/judgment.mp3").has_audio
