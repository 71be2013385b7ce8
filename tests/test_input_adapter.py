"""Tests for translating pygame events into session commands (no display needed)."""

import pygame
import pytest

from core.session import Overlay
from core.state_machine import EncounterPhase
from rendering.input_adapter import CommandKind, InputCommand, apply_command, translate_event


def key_event(key: int, unicode: str = "") -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode=unicode, mod=0)


class TestTranslate:
    def test_quit_and_escape(self) -> None:
        assert translate_event(pygame.event.Event(pygame.QUIT)).kind is CommandKind.QUIT
        assert translate_event(key_event(pygame.K_ESCAPE)).kind is CommandKind.QUIT

    def test_space_casts_and_tab_toggles(self) -> None:
        assert translate_event(key_event(pygame.K_SPACE, " ")).kind is CommandKind.CAST
        assert translate_event(key_event(pygame.K_TAB, "\t")).kind is CommandKind.TOGGLE_INVENTORY

    def test_letters_become_upper_case_keys(self) -> None:
        assert translate_event(key_event(pygame.K_a, "a")) == InputCommand(CommandKind.KEY, key="A")

    @pytest.mark.parametrize("key,text", [(pygame.K_1, "1"), (pygame.K_LSHIFT, "")])
    def test_other_keys_are_ignored(self, key: int, text: str) -> None:
        assert translate_event(key_event(key, text)) is None

    def test_left_click_is_a_tap(self) -> None:
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(120, 45), button=1)
        assert translate_event(event) == InputCommand(CommandKind.TAP, position=(120.0, 45.0))

    def test_right_click_is_ignored(self) -> None:
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(120, 45), button=3)
        assert translate_event(event) is None


class TestApply:
    def test_quit_stops_the_loop(self, session) -> None:
        assert apply_command(session, InputCommand(CommandKind.QUIT)) is False

    def test_cast_and_toggle(self, session) -> None:
        assert apply_command(session, InputCommand(CommandKind.CAST))
        assert session.phase is EncounterPhase.THROWING

        apply_command(session, InputCommand(CommandKind.TOGGLE_INVENTORY))
        assert session.is_open(Overlay.INVENTORY)
        apply_command(session, InputCommand(CommandKind.TOGGLE_INVENTORY))
        assert not session.is_blocked()

    def test_key_and_tap_without_qte_are_harmless(self, session) -> None:
        assert apply_command(session, InputCommand(CommandKind.KEY, key="A"))
        assert apply_command(session, InputCommand(CommandKind.TAP, position=(10.0, 10.0)))
        assert session.phase is EncounterPhase.IDLE
