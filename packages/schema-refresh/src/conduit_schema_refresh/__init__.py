"""Schema Refresh: decides when a source's schema is due for re-discovery and
drives discovery and auto-propagation through the control-plane API."""
