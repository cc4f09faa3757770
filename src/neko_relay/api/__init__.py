"""HTTP API for the Neko relay."""
