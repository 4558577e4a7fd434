"""Version Engine: resolves the connector version an actor runs and reports
the breaking changes it still has to go through."""
