"""Error taxonomy for the gateway."""
