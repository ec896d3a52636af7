"""Shared helpers for parsing LLM output and handling URLs."""
