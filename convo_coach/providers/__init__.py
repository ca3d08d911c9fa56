"""Language-model providers. Each exposes ``async generate(messages, *, transport=None) -> str``."""
