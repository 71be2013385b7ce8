import logging
import random
from typing import Optional

import pygame

from core.config.display import FRAME_RATE, SCREEN_HEIGHT, SCREEN_WIDTH
from core.fish.events import current_event
from core.notifiers import LoggingCatchNotifier
from core.qte.challenges import InputModality
from core.session import GameSession
from rendering.input_adapter import apply_command, translate_event
from rendering.scene_renderer import SceneRenderer

logger = logging.getLogger(__name__)


class FishingGame:
    """The pygame window around one GameSession.

    Attributes:
        session: The session being played
        screen: Pygame display surface
        clock: Pygame clock for frame rate
        renderer: Draws each frame from the session snapshot
        frame_count: Total frames rendered
    """

    def __init__(self, modality: InputModality = InputModality.KEYBOARD, seed: Optional[int] = None) -> None:
        self.session = GameSession(
            modality=modality,
            rng=random.Random(seed),
            notifiers=[LoggingCatchNotifier()],
        )
        self.clock: pygame.time.Clock = pygame.time.Clock()
        self.screen: Optional[pygame.Surface] = None
        self.renderer: Optional[SceneRenderer] = None
        self.frame_count: int = 0

    def setup_game(self) -> bool:
        """Open the window. Returns False if no display is available."""
        try:
            self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
            pygame.display.set_caption("Tidecaster")
        except pygame.error as e:
            logger.error("Couldn't set the display mode: %s", e)
            return False

        self.renderer = SceneRenderer(self.screen, pygame.font.Font(None, 24), pygame.font.Font(None, 72))
        self.session.set_viewport(SCREEN_WIDTH, SCREEN_HEIGHT)
        return True

    def handle_events(self) -> bool:
        """Handle user input. Returns False when the player quits."""
        for event in pygame.event.get():
            command = translate_event(event)
            if command is not None and not apply_command(self.session, command):
                return False
        return True

    def update(self) -> None:
        # One tick per rendered frame, never from a secondary timer
        self.session.tick(float(pygame.time.get_ticks()))
        self.frame_count += 1

    def hud(self) -> dict:
        event = current_event()
        return {
            "gold": self.session.gold,
            "fish_count": self.session.fish_count,
            "inventory": len(self.session.inventory),
            "event": event.name if event is not None else None,
            "blocked": self.session.is_blocked(),
        }

    def render(self) -> None:
        if self.renderer is None:
            return
        self.renderer.draw(self.session.get_snapshot(), self.hud())
        pygame.display.flip()

    def run(self) -> None:
        if not self.setup_game():
            return

        logger.info("Controls: SPACE cast, letter keys answer prompts, TAB backpack, ESC quit")

        while self.handle_events():
            self.update()
            self.render()
            self.clock.tick(FRAME_RATE)

        session = self.session
        logger.info(
            "Session ended: %d fish caught, %dG on hand, %d in backpack",
            session.fish_count,
            session.gold,
            len(session.inventory),
        )


def main(modality: InputModality = InputModality.KEYBOARD, seed: Optional[int] = None) -> None:
    """Entry point for the game window."""
    pygame.init()
    game = FishingGame(modality=modality, seed=seed)
    try:
        game.run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
