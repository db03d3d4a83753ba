"""SQL text generation."""
