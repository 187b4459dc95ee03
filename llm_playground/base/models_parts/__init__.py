"""Domain model parts (see ``llm_playground.base.models``)."""
