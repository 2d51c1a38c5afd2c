"""
Enemy formation layouts

Each layout is a pure function of the level number and canvas width.
Layouts cycle every five levels; enemy projectile speed grows by 0.5 per level.
"""

from typing import Callable, List, Tuple

from .entities import Enemy

ENEMY_WIDTH = 40
ENEMY_HEIGHT = 30
SPACING = 10
START_Y = 50

PITCH_X = ENEMY_WIDTH + SPACING
PITCH_Y = ENEMY_HEIGHT + SPACING


def enemy_bullet_speed(level: int) -> float:
    return 3 + level * 0.5


def _enemy(x: float, row: int, bullet_speed: float) -> Enemy:
    return Enemy(
        x=x,
        y=START_Y + row * PITCH_Y,
        width=ENEMY_WIDTH,
        height=ENEMY_HEIGHT,
        bullet_speed=bullet_speed,
    )


def _centered_rows(counts: List[int], canvas_width: float, bullet_speed: float) -> List[Enemy]:
    """Rows centered on the canvas, one entry per row giving its enemy count"""
    center = canvas_width / 2
    enemies = []
    for row, count in enumerate(counts):
        left = center - (count - 1) * PITCH_X / 2 - ENEMY_WIDTH / 2
        for i in range(count):
            enemies.append(_enemy(left + i * PITCH_X, row, bullet_speed))
    return enemies


def grid_formation(canvas_width: float, bullet_speed: float) -> List[Enemy]:
    """5 x 10 grid anchored at the top-left"""
    start_x = 50
    return [
        _enemy(start_x + col * PITCH_X, row, bullet_speed)
        for row in range(5)
        for col in range(10)
    ]


def v_formation(canvas_width: float, bullet_speed: float) -> List[Enemy]:
    """5 rows, row i holding i + 1 enemies"""
    center = canvas_width / 2
    enemies = []
    for row in range(5):
        count = row + 1
        row_width = count * PITCH_X - SPACING
        start_x = center - row_width / 2
        for i in range(count):
            enemies.append(_enemy(start_x + i * PITCH_X, row, bullet_speed))
    return enemies


def diamond_formation(canvas_width: float, bullet_speed: float) -> List[Enemy]:
    return _centered_rows([1, 3, 5, 3, 1], canvas_width, bullet_speed)


def columns_formation(canvas_width: float, bullet_speed: float) -> List[Enemy]:
    """Two 8-high columns at one and three quarters of the width"""
    left_x = canvas_width / 4 - ENEMY_WIDTH / 2
    right_x = 3 * canvas_width / 4 - ENEMY_WIDTH / 2
    enemies = []
    for row in range(8):
        enemies.append(_enemy(left_x, row, bullet_speed))
        enemies.append(_enemy(right_x, row, bullet_speed))
    return enemies


def pyramid_formation(canvas_width: float, bullet_speed: float) -> List[Enemy]:
    return _centered_rows([6 - row for row in range(6)], canvas_width, bullet_speed)


FORMATIONS: Tuple[Tuple[str, Callable[[float, float], List[Enemy]]], ...] = (
    ("grid", grid_formation),
    ("v", v_formation),
    ("diamond", diamond_formation),
    ("columns", columns_formation),
    ("pyramid", pyramid_formation),
)


def formation_index(level: int) -> int:
    if level < 1:
        raise ValueError(f"Level must be >= 1, got {level}")
    return (level - 1) % len(FORMATIONS)


def formation_name(level: int) -> str:
    return FORMATIONS[formation_index(level)][0]


def generate_formation(level: int, canvas_width: float = 800) -> List[Enemy]:
    """
    Build the enemy roster for a level.

    Args:
        level: 1-based level number
        canvas_width: Width used to center the layout

    Returns:
        Fresh list of enemies, all moving right
    """
    _, layout = FORMATIONS[formation_index(level)]
    return layout(canvas_width, enemy_bullet_speed(level))
