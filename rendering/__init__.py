"""Pygame rendering and input translation for the game window."""
