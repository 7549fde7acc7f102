"""Network switcher for WordPress multi-network installations."""
