"""Per-currency scoring, modifiers, directions and history."""
