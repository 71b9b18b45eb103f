"""Self-hosted image host."""
