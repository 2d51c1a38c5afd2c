"""
Arcade rendering collaborator

The simulation works in canvas space (y down); arcade draws with y up,
so every shape is flipped against the window height.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import List, Tuple

import arcade

from .entities import Enemy, Player, Projectile

BG = (10, 10, 26)
PLAYER_C = (135, 206, 235)
ENEMY_C = (255, 68, 68)
EYE_C = (255, 255, 255)
HUD_C = (220, 220, 220)


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip("#")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))


@dataclass
class Star:
    x: float
    y: float
    size: float
    brightness: float
    twinkle_speed: float


class StarField:
    """Twinkling background stars; purely visual"""

    def __init__(self, width: float, height: float, count: int = 100):
        self.stars: List[Star] = [
            Star(
                x=random.random() * width,
                y=random.random() * height,
                size=random.random() * 2 + 0.5,
                brightness=random.random(),
                twinkle_speed=random.random() * 0.02 + 0.01,
            )
            for _ in range(count)
        ]

    def advance(self):
        for star in self.stars:
            star.brightness += star.twinkle_speed
            if star.brightness > 1:
                star.brightness = 0.0

    @staticmethod
    def alpha(star: Star) -> int:
        return int(255 * (0.5 + math.sin(star.brightness * math.pi * 2) * 0.5))


class ArcadeRenderer:
    """Draws simulation entities into the current arcade window"""

    def __init__(self, width: float, height: float):
        self.height = height
        self.stars = StarField(width, height)

    def _flip(self, y: float, h: float = 0.0) -> float:
        return self.height - y - h

    def draw_background(self):
        self.stars.advance()
        for star in self.stars.stars:
            arcade.draw_circle_filled(
                star.x, self._flip(star.y), star.size,
                (255, 255, 255, StarField.alpha(star)),
            )

    def draw(self, entity):
        if isinstance(entity, Player):
            self._draw_player(entity)
        elif isinstance(entity, Enemy):
            self._draw_enemy(entity)
        elif isinstance(entity, Projectile):
            self._draw_projectile(entity)

    def _draw_player(self, p: Player):
        # Triangle ship pointing up
        top = self._flip(p.y)
        bottom = self._flip(p.y, p.height)
        arcade.draw_polygon_filled(
            [(p.x + p.width / 2, top), (p.x, bottom), (p.x + p.width, bottom)],
            PLAYER_C,
        )

    def _draw_enemy(self, e: Enemy):
        bottom = self._flip(e.y, e.height)
        arcade.draw_lrbt_rectangle_filled(e.x, e.x + e.width, bottom, bottom + e.height, ENEMY_C)
        eye_y = self._flip(e.y + 8, 8)
        for eye_x in (e.x + 8, e.x + e.width - 16):
            arcade.draw_lrbt_rectangle_filled(eye_x, eye_x + 8, eye_y, eye_y + 8, EYE_C)

    def _draw_projectile(self, b: Projectile):
        bottom = self._flip(b.y, b.height)
        arcade.draw_lrbt_rectangle_filled(
            b.x, b.x + b.width, bottom, bottom + b.height, hex_to_rgb(b.color)
        )

    def draw_hud(self, sim):
        txt = (f"Pilot: {sim.player_name}  Score: {sim.score}  "
               f"Lives: {sim.lives}  Level: {sim.level}")
        arcade.draw_text(txt, 12, self.height - 24, HUD_C, 14)
