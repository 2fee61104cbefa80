"""Shared logging, configuration and format constants."""
