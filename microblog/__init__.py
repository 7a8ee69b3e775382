"""User, micropost and follow-relationship persistence for a small social app."""
