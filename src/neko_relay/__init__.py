"""Neko relay: an in-memory real-time chat relay with a capped reward ledger."""
