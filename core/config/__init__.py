"""Configuration package for the fishing encounter engine.

Literal tuning values live in the themed modules (encounter, qte, fish,
display, server); session_config groups them into validated dataclasses.
"""
