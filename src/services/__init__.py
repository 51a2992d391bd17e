"""Oracle sources: clock, random and remote JSON feeds."""
