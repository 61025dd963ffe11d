"""Internal joseutils modules, not part of the public API."""
