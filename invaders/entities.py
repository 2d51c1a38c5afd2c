"""
Game entity dataclasses

Coordinates are in canvas space: origin top-left, y grows downward.
"""

import random
from dataclasses import dataclass
from typing import Optional

from .utils import center_x

PLAYER_WIDTH = 50
PLAYER_HEIGHT = 30
PLAYER_SPEED = 5.0
PLAYER_BULLET_SPEED = -5.0

ENEMY_SPEED = 1.0
ENEMY_SHOOT_CHANCE = 0.001
ENEMY_DROP = 20

BULLET_WIDTH = 3
BULLET_HEIGHT = 10

PLAYER_BULLET_COLOR = "#87ceeb"
ENEMY_BULLET_COLOR = "#ff0000"


@dataclass
class Projectile:
    """Vertical projectile; negative speed moves up"""
    x: float
    y: float
    speed: float
    width: float = BULLET_WIDTH
    height: float = BULLET_HEIGHT
    color: str = PLAYER_BULLET_COLOR  # render-only tag

    def update(self):
        self.y += self.speed

    def is_off_screen(self, height: float) -> bool:
        return self.y < 0 or self.y > height


@dataclass
class Player:
    """Player ship"""
    x: float
    y: float
    width: float = PLAYER_WIDTH
    height: float = PLAYER_HEIGHT
    speed: float = PLAYER_SPEED

    @classmethod
    def spawn(cls, canvas_width: float, canvas_height: float) -> "Player":
        """Create a player centered at the bottom of the canvas"""
        return cls(x=canvas_width / 2 - PLAYER_WIDTH / 2, y=canvas_height - 50)

    def update(self, move_left: bool, move_right: bool, canvas_width: float):
        # Two independent checks: holding both keys cancels out
        if move_left and self.x > 0:
            self.x -= self.speed
        if move_right and self.x < canvas_width - self.width:
            self.x += self.speed

    def shoot(self) -> Projectile:
        """Spawn a projectile at the top center of the ship"""
        return Projectile(
            x=center_x(self),
            y=self.y,
            speed=PLAYER_BULLET_SPEED,
            color=PLAYER_BULLET_COLOR,
        )


@dataclass
class Enemy:
    """Formation enemy that sweeps sideways and fires at random"""
    x: float
    y: float
    width: float
    height: float
    bullet_speed: float = 3.0
    speed: float = ENEMY_SPEED
    direction: int = 1
    shoot_chance: float = ENEMY_SHOOT_CHANCE

    def update(self) -> Optional[Projectile]:
        """Move one frame; returns a new projectile if the enemy fired"""
        self.x += self.speed * self.direction

        if random.random() < self.shoot_chance:
            return Projectile(
                x=center_x(self),
                y=self.y + self.height,
                speed=self.bullet_speed,
                color=ENEMY_BULLET_COLOR,
            )
        return None

    def change_direction(self):
        self.direction *= -1
        self.y += ENEMY_DROP
