"""Inbox note model: blocks, parsing, serialization and derived stats."""
