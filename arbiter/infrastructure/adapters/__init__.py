"""Infrastructure adapters implementing application ports.

Adapters:
- persistence: PostgreSQL repositories (SQLAlchemy async)
- llm: OpenAI verdict generation
- speech: OpenAI transcription and ElevenLabs narration
- storage: Supabase Storage for audio objects
- research: Tavily web search for fact checking
"""
