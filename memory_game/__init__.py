"""Emoji memory game server."""
