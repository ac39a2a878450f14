"""code2context: compact a project tree into a single LLM context document."""

__version__ = "0.1.0"
