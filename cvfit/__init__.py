"""CV fit analyzer: job posting URL + résumé file → LLM fit analysis."""

__version__ = "1.0.0"
