"""
AI answer engine taxonomy.

``Engine`` names the engines tracked out of the box. The engine set actually
in play comes from ``AppConfig.engines.names``; aggregation treats an engine
as an opaque label and never branches on a specific member.

Usage example::

    from aeo_tracker.taxonomy.engine_taxonomy import Engine, DEFAULT_ENGINES

    engine = Engine.CHATGPT
    assert engine == "ChatGPT"

This module has NO imports from any other ``aeo_tracker`` package.
"""

from enum import StrEnum


class Engine(StrEnum):
    """Default AI search/chat engines checked for brand presence."""

    CHATGPT = "ChatGPT"
    """OpenAI ChatGPT answers."""

    GEMINI = "Gemini"
    """Google Gemini answers."""

    CLAUDE = "Claude"
    """Anthropic Claude answers."""

    PERPLEXITY = "Perplexity"
    """Perplexity answer engine."""


DEFAULT_ENGINES: tuple[Engine, ...] = (
    Engine.CHATGPT,
    Engine.GEMINI,
    Engine.CLAUDE,
    Engine.PERPLEXITY,
)
"""Default engine order; also the column order of per-engine breakdowns."""
