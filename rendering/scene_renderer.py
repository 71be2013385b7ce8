"""Scene rendering for the fishing game window.

Draws one frame from an EncounterSnapshot: sky, water, shore, rod, line and
bobber, the hooked fish, a depth gauge, the HUD and the QTE overlay. The
renderer only reads snapshots; it never touches the encounter itself.
"""

import math
from typing import Any, Dict, Optional, Tuple

import pygame

from core.config.display import (
    BOBBER_COLOR,
    DEEP_WATER_COLOR,
    DEPTH_PIXELS,
    HORIZON_RATIO,
    HUD_TEXT_COLOR,
    LINE_COLOR,
    OVERLAY_COLOR,
    SAND_COLOR,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SHORE_WIDTH,
    SKY_COLOR,
    THROW_ARC_HEIGHT,
    TIMER_DANGER_COLOR,
    TIMER_OK_COLOR,
    TIMER_WARNING_COLOR,
    WATER_COLOR,
)
from core.config.qte import QTE_DANGER_FRACTION, QTE_WARNING_FRACTION, TAP_TARGET_SIZE
from core.encounter import EncounterSnapshot
from core.qte.challenges import KeyPressChallenge, TapTargetChallenge
from core.state_machine import EncounterPhase

PHASE_HINTS = {
    EncounterPhase.IDLE: "Press SPACE to cast",
    EncounterPhase.THROWING: "Casting...",
    EncounterPhase.SINKING: "Line sinking...",
    EncounterPhase.AWAITING_BITE: "Waiting for a bite...",
    EncounterPhase.REELING: "Reeling in!",
    EncounterPhase.COMPLETE: "It got away...",
}


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def timer_color(fraction: float) -> Tuple[int, int, int]:
    """Color for the QTE timer bar at ``fraction`` of the time remaining."""
    if fraction < QTE_DANGER_FRACTION:
        return TIMER_DANGER_COLOR
    if fraction < QTE_WARNING_FRACTION:
        return TIMER_WARNING_COLOR
    return TIMER_OK_COLOR


class SceneRenderer:
    """Renders the fishing scene.

    Attributes:
        screen: Pygame surface to render to
        font: Font for HUD text
        big_font: Font for QTE key prompts
    """

    def __init__(self, screen: pygame.Surface, font: pygame.font.Font, big_font: pygame.font.Font) -> None:
        self.screen = screen
        self.font = font
        self.big_font = big_font
        self.width = screen.get_width() if screen is not None else SCREEN_WIDTH
        self.height = screen.get_height() if screen is not None else SCREEN_HEIGHT
        self.horizon = int(self.height * HORIZON_RATIO)

    @property
    def rod_tip(self) -> Tuple[int, int]:
        return SHORE_WIDTH - 30, self.horizon - 90

    @property
    def splash_point(self) -> Tuple[int, int]:
        return int(self.width * 0.62), self.horizon + 20

    def bobber_position(self, snapshot: EncounterSnapshot) -> Optional[Tuple[int, int]]:
        """Where the bobber is drawn, or None when the line is not out."""
        if snapshot.phase is EncounterPhase.IDLE:
            return None
        tip_x, tip_y = self.rod_tip
        splash_x, splash_y = self.splash_point
        if snapshot.phase is EncounterPhase.THROWING:
            p = snapshot.bobber_throw_progress
            x = tip_x + (splash_x - tip_x) * p
            y = tip_y + (splash_y - tip_y) * p - THROW_ARC_HEIGHT * snapshot.bobber_height
            return int(x), int(y)
        return splash_x, splash_y + int(DEPTH_PIXELS * snapshot.depth_fraction)

    def draw(self, snapshot: EncounterSnapshot, hud: Dict[str, Any]) -> None:
        self.draw_background()
        self.draw_line(snapshot)
        self.draw_depth_gauge(snapshot)
        self.draw_hud(snapshot, hud)
        if snapshot.qte is not None:
            self.draw_qte(snapshot)

    def draw_background(self) -> None:
        self.screen.fill(SKY_COLOR)
        water_rect = pygame.Rect(0, self.horizon, self.width, self.height - self.horizon)
        pygame.draw.rect(self.screen, DEEP_WATER_COLOR, water_rect)
        pygame.draw.rect(self.screen, WATER_COLOR, (0, self.horizon, self.width, 40))
        pygame.draw.polygon(
            self.screen,
            SAND_COLOR,
            [(0, self.horizon - 40), (SHORE_WIDTH, self.horizon - 10), (SHORE_WIDTH + 60, self.height), (0, self.height)],
        )
        # Rod
        pygame.draw.line(self.screen, (110, 70, 30), (SHORE_WIDTH - 110, self.horizon - 20), self.rod_tip, 5)

    def draw_line(self, snapshot: EncounterSnapshot) -> None:
        bobber = self.bobber_position(snapshot)
        if bobber is None:
            return
        pygame.draw.line(self.screen, LINE_COLOR, self.rod_tip, bobber, 1)
        pygame.draw.circle(self.screen, BOBBER_COLOR, bobber, 6)

        fish = snapshot.current_fish
        if fish is not None and snapshot.phase is EncounterPhase.REELING:
            wobble = math.sin(snapshot.struggle_phase) * 6
            body = pygame.Rect(0, 0, 34, 16)
            body.center = (bobber[0] + int(wobble), bobber[1] + 16)
            pygame.draw.ellipse(self.screen, hex_to_rgb(fish.color), body)
            pygame.draw.ellipse(self.screen, hex_to_rgb(fish.rarity_color), body, 2)

    def draw_depth_gauge(self, snapshot: EncounterSnapshot) -> None:
        x, y, h = self.width - 40, self.horizon + 20, DEPTH_PIXELS
        pygame.draw.rect(self.screen, (20, 20, 40), (x, y, 14, h))
        filled = int(h * snapshot.depth_fraction)
        if filled > 0:
            pygame.draw.rect(self.screen, LINE_COLOR, (x, y, 14, filled))

    def draw_hud(self, snapshot: EncounterSnapshot, hud: Dict[str, Any]) -> None:
        lines = [
            f"Gold: {hud.get('gold', 0)}G",
            f"Fish caught: {hud.get('fish_count', 0)}",
            f"Backpack: {hud.get('inventory', 0)}",
        ]
        event_name = hud.get("event")
        if event_name:
            lines.append(f"Event: {event_name}")
        y_offset = 12
        for line in lines:
            surface = self.font.render(line, True, HUD_TEXT_COLOR)
            self.screen.blit(surface, (12, y_offset))
            y_offset += 22

        hint = self.font.render(PHASE_HINTS.get(snapshot.phase, ""), True, HUD_TEXT_COLOR)
        self.screen.blit(hint, (self.width // 2 - hint.get_width() // 2, self.height - 34))

        if hud.get("blocked"):
            notice = self.font.render("Backpack open (TAB to close)", True, (255, 200, 100))
            self.screen.blit(notice, (self.width // 2 - notice.get_width() // 2, 12))

    def draw_qte(self, snapshot: EncounterSnapshot) -> None:
        qte = snapshot.qte
        shade = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        shade.fill(OVERLAY_COLOR)
        self.screen.blit(shade, (0, 0))

        fish = snapshot.current_fish
        if fish is not None:
            title = self.font.render(f"{fish.rarity} {fish.type}!", True, hex_to_rgb(fish.rarity_color))
            self.screen.blit(title, (self.width // 2 - title.get_width() // 2, 40))

        challenge = qte.challenge
        if isinstance(challenge, KeyPressChallenge):
            box = pygame.Rect(0, 0, 96, 96)
            box.center = (self.width // 2, self.height // 2)
            pygame.draw.rect(self.screen, (240, 240, 240), box, border_radius=8)
            label = self.big_font.render(challenge.key, True, (20, 20, 20))
            self.screen.blit(label, label.get_rect(center=box.center))
        elif isinstance(challenge, TapTargetChallenge):
            left, top, right, bottom = challenge.bounds(self.width, self.height, TAP_TARGET_SIZE)
            target = pygame.Rect(int(left), int(top), int(right - left), int(bottom - top))
            pygame.draw.ellipse(self.screen, (240, 80, 80), target)
            pygame.draw.ellipse(self.screen, (255, 255, 255), target, 3)

        progress = self.font.render(f"{qte.success_count}/{qte.required_successes}", True, HUD_TEXT_COLOR)
        self.screen.blit(progress, (self.width // 2 - progress.get_width() // 2, self.height // 2 + 64))

        bar_width = 300
        bar_x = self.width // 2 - bar_width // 2
        bar_y = self.height // 2 + 92
        pygame.draw.rect(self.screen, (60, 60, 60), (bar_x, bar_y, bar_width, 12))
        filled = int(bar_width * qte.time_fraction)
        if filled > 0:
            pygame.draw.rect(self.screen, timer_color(qte.time_fraction), (bar_x, bar_y, filled, 12))
