"""Config Access: the Redis-backed store of actors, connector definitions,
versions, and breaking-change announcements."""
