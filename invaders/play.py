"""
Playable arcade front-end

Controls: arrows move, SPACE shoots, P pauses, M toggles music,
ENTER starts / continues / restarts.

Run:
    python -m invaders.play --name Ace
"""

from __future__ import annotations

import argparse

import arcade

from .collaborators import Bounds, InputState
from .render import ArcadeRenderer, BG, HUD_C
from .simulation import GameState, Simulation, level_message

TITLE_C = (255, 215, 0)


class InvadersWindow(arcade.Window):
    """Frame driver and input collaborator for a human player"""

    def __init__(self, player_name: str = "", width: int = 800, height: int = 600,
                 verbose: int = 0):
        # on_resize may fire during window creation
        self.renderer = ArcadeRenderer(width, height)
        super().__init__(width, height, "Space Invaders", resizable=True)
        self.background_color = BG
        self.player_name = player_name
        self.inputs = InputState()
        self.sim = Simulation(
            bounds_provider=lambda: Bounds(self.width, self.height),
            renderer=self.renderer,
            verbose=verbose,
        )

    def on_resize(self, width: int, height: int):
        super().on_resize(width, height)
        self.renderer.height = height

    def on_draw(self):
        self.clear()
        self.sim.frame(self.inputs)
        # One-shot requests are consumed by the frame that saw them
        self.inputs.shoot = False
        self.inputs.pause_toggle = False
        self._draw_overlay()

    def _draw_overlay(self):
        sim = self.sim
        cx, cy = self.width / 2, self.height / 2
        if sim.state is GameState.PLAYING:
            self.renderer.draw_hud(sim)
        if sim.status is GameState.PAUSED:
            arcade.draw_text("PAUSED - press P", cx, cy, TITLE_C, 28, anchor_x="center")
        elif sim.state is GameState.START:
            arcade.draw_text("SPACE INVADERS", cx, cy + 40, TITLE_C, 36, anchor_x="center")
            arcade.draw_text("Press ENTER to start", cx, cy - 10, HUD_C, 16, anchor_x="center")
        elif sim.state is GameState.LEVEL_COMPLETE:
            arcade.draw_text(f"Level {sim.level} complete! Bonus {sim.last_bonus}",
                             cx, cy + 30, TITLE_C, 24, anchor_x="center")
            arcade.draw_text(level_message(sim.level), cx, cy - 10, HUD_C, 14, anchor_x="center")
            arcade.draw_text("Press ENTER for the next level", cx, cy - 40, HUD_C, 14,
                             anchor_x="center")
        elif sim.state is GameState.GAME_OVER:
            arcade.draw_text("GAME OVER", cx, cy + 40, TITLE_C, 36, anchor_x="center")
            arcade.draw_text(f"{sim.player_name} - Score {sim.score} - Level {sim.level}",
                             cx, cy, HUD_C, 16, anchor_x="center")
            arcade.draw_text("Press ENTER to play again", cx, cy - 30, HUD_C, 14,
                             anchor_x="center")

    def on_key_press(self, key, modifiers):
        if key == arcade.key.LEFT:
            self.inputs.move_left = True
        elif key == arcade.key.RIGHT:
            self.inputs.move_right = True
        elif key == arcade.key.SPACE:
            if self.sim.state is GameState.LEVEL_COMPLETE:
                self.sim.start_next_level()
            else:
                self.inputs.shoot = True
        elif key == arcade.key.P:
            self.inputs.pause_toggle = True
        elif key == arcade.key.M:
            self.sim.toggle_music()
        elif key == arcade.key.ENTER:
            if self.sim.state in (GameState.START, GameState.GAME_OVER):
                self.sim.new_game(self.player_name)
            elif self.sim.state is GameState.LEVEL_COMPLETE:
                self.sim.start_next_level()
        elif key == arcade.key.ESCAPE:
            self.close()

    def on_key_release(self, key, modifiers):
        if key == arcade.key.LEFT:
            self.inputs.move_left = False
        elif key == arcade.key.RIGHT:
            self.inputs.move_right = False


class AgentWindow(arcade.Window):
    """Arcade window that shows what an agent in InvadersEnv is doing"""

    def __init__(self, env, width: int, height: int):
        super().__init__(width, height, "InvadersEnv - Arcade")
        self.background_color = BG
        self.env = env
        self.renderer = ArcadeRenderer(width, height)
        env.sim.renderer = self.renderer

    def on_draw(self):
        self.clear()
        self.env.sim.draw()
        self.renderer.draw_hud(self.env.sim)


def main():
    parser = argparse.ArgumentParser(description="Play Space Invaders")
    parser.add_argument(
        "--name",
        type=str,
        default="",
        help="Pilot name (default: Guest)",
    )
    parser.add_argument(
        "--verbose",
        type=int,
        default=1,
        help="Print state transitions (default: 1)",
    )
    args = parser.parse_args()

    InvadersWindow(player_name=args.name, verbose=args.verbose)
    arcade.run()


if __name__ == "__main__":
    main()
