"""Host integrations for the grid engine."""
