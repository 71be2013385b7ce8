"""Translate pygame events into session commands.

Kept separate from the window loop so the mapping can be tested with
synthetic events and no display.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import pygame

from core.session import GameSession, Overlay


class CommandKind(Enum):
    CAST = "cast"
    KEY = "key"
    TAP = "tap"
    TOGGLE_INVENTORY = "toggle_inventory"
    QUIT = "quit"


@dataclass(frozen=True)
class InputCommand:
    kind: CommandKind
    key: str = ""
    position: Tuple[float, float] = (0.0, 0.0)


def translate_event(event: pygame.event.Event) -> Optional[InputCommand]:
    """Map one pygame event to a command, or None if it means nothing here."""
    if event.type == pygame.QUIT:
        return InputCommand(CommandKind.QUIT)
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return InputCommand(CommandKind.QUIT)
        if event.key == pygame.K_SPACE:
            return InputCommand(CommandKind.CAST)
        if event.key == pygame.K_TAB:
            return InputCommand(CommandKind.TOGGLE_INVENTORY)
        text = getattr(event, "unicode", "") or ""
        if len(text) == 1 and text.isalpha():
            return InputCommand(CommandKind.KEY, key=text.upper())
        return None
    if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 1) == 1:
        x, y = event.pos
        return InputCommand(CommandKind.TAP, position=(float(x), float(y)))
    if event.type == pygame.FINGERDOWN:
        surface = pygame.display.get_surface()
        if surface is None:
            return None
        return InputCommand(
            CommandKind.TAP,
            position=(event.x * surface.get_width(), event.y * surface.get_height()),
        )
    return None


def apply_command(session: GameSession, command: InputCommand) -> bool:
    """Forward a command to the session. Returns False when the game should quit."""
    if command.kind is CommandKind.QUIT:
        return False
    if command.kind is CommandKind.CAST:
        session.cast()
    elif command.kind is CommandKind.KEY:
        session.on_key_press(command.key)
    elif command.kind is CommandKind.TAP:
        session.on_tap(*command.position)
    elif command.kind is CommandKind.TOGGLE_INVENTORY:
        session.toggle_overlay(Overlay.INVENTORY)
    return True
