"""Speaking practice: record answers to prompts and get transcript-based feedback."""

__version__ = "0.1.0"
