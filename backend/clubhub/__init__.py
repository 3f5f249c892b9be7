"""College club management backend."""
