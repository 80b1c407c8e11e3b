"""HTTP API for GEO Strategist."""
