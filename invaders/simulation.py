"""
Simulation core - game state machine and the per-frame update
-------------------------------------------------------------
- One Simulation owns score, lives, level, the player and every entity list
- frame() is called once per display refresh by an outside driver
- step() advances entities, resolves collisions and evaluates win/lose
- Rendering, audio and UI are collaborators; their failures never touch state
"""

from __future__ import annotations

import warnings
from enum import Enum
from typing import Callable, Dict, Any, List, Optional

from .collaborators import Bounds, InputState, NullAudio, NullDisplay, NullRenderer
from .entities import Enemy, Player, Projectile
from .formations import generate_formation
from .utils import overlaps

KILL_SCORE = 10
LEVEL_BONUS = 100
STARTING_LIVES = 3
DEFAULT_PLAYER_NAME = "Guest"

LEVEL_MESSAGES = [
    # Levels 1-10
    "You survived your first space battle! The aliens are NOT impressed.",
    "Two levels down! Your ship is still in one piece... mostly.",
    "Level 3 complete! The space invaders are starting to take you seriously.",
    "You're still alive! The aliens are calling their friends now.",
    "Halfway to legend! Your piloting skills are... adequate.",
    "Level 6 conquered! The aliens are writing angry space letters.",
    "Seven levels of survival! You're like a space cockroach - unkillable!",
    "Level 8 done! The aliens are considering early retirement.",
    "Nine levels of glory! You're making space look easy.",
    "Double digits! The aliens have formed a support group.",
    # Level 11 onward, cycled
    "Another level down! You're basically a space legend now.",
    "Still going! The aliens are questioning their life choices.",
    "Unstoppable! The space invaders are filing complaints.",
    "Level after level! You're the reason aliens have nightmares.",
    "Incredible! The aliens are updating their resumes.",
    "Amazing! You're single-handedly solving the alien problem.",
    "Outstanding! The space invaders are considering a career change.",
    "Phenomenal! You're making space look like a walk in the park.",
    "Legendary! The aliens are starting to respect you... and fear you.",
    "Unbelievable! You're the stuff of space legends!",
]


def level_message(level: int) -> str:
    """Flavor text shown when a level is cleared"""
    if level <= len(LEVEL_MESSAGES):
        return LEVEL_MESSAGES[max(level, 1) - 1]
    return LEVEL_MESSAGES[10 + (level - 11) % 10]


class GameState(str, Enum):
    START = "start"
    PLAYING = "playing"
    PAUSED = "paused"  # reported by Simulation.status only; state stays PLAYING
    LEVEL_COMPLETE = "levelComplete"
    GAME_OVER = "gameOver"


class Simulation:
    """Game context: counters, entity collections and lifecycle transitions"""

    def __init__(
        self,
        width: float = 800,
        height: float = 600,
        bounds_provider: Optional[Callable[[], Bounds]] = None,
        renderer=None,
        audio=None,
        display=None,
        starting_lives: int = STARTING_LIVES,
        verbose: int = 0,
    ):
        self._fixed_bounds = Bounds(width, height)
        self.bounds_provider = bounds_provider or (lambda: self._fixed_bounds)

        # Collaborators
        self.renderer = renderer or NullRenderer()
        self.audio = audio or NullAudio()
        self.display = display or NullDisplay()
        self.verbose = verbose

        self.starting_lives = starting_lives
        self.state = GameState.START
        self.is_paused = False
        self.music_enabled = True

        # Counters
        self.score = 0
        self.lives = starting_lives
        self.level = 1
        self.player_name = DEFAULT_PLAYER_NAME
        self.last_bonus = 0
        self.kills = 0

        # World state
        self.player: Optional[Player] = None
        self.enemies: List[Enemy] = []
        self.player_projectiles: List[Projectile] = []
        self.enemy_projectiles: List[Projectile] = []

        self._reported_failures = set()

    # ----------------------------
    # Queries
    # ----------------------------

    @property
    def bounds(self) -> Bounds:
        return self.bounds_provider()

    @property
    def status(self) -> GameState:
        if self.state is GameState.PLAYING and self.is_paused:
            return GameState.PAUSED
        return self.state

    @property
    def active(self) -> bool:
        return self.state is GameState.PLAYING and not self.is_paused

    def stats(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "lives": self.lives,
            "level": self.level,
            "player_name": self.player_name,
            "state": self.status.value,
            "num_enemies": len(self.enemies),
            "num_player_projectiles": len(self.player_projectiles),
            "num_enemy_projectiles": len(self.enemy_projectiles),
        }

    # ----------------------------
    # Transitions
    # ----------------------------

    def new_game(self, player_name: str = "") -> None:
        """Reset every counter and start level 1 (begin and restart)"""
        self.player_name = (player_name or "").strip() or DEFAULT_PLAYER_NAME
        self.score = 0
        self.lives = self.starting_lives
        self.level = 1
        self.last_bonus = 0
        self.kills = 0
        self._enter_playing()

        if self.verbose > 0:
            print(f"[Simulation] New game for {self.player_name}")

    def start_next_level(self) -> bool:
        """Advance from level-complete to the next level; score and lives persist"""
        if self.state is not GameState.LEVEL_COMPLETE:
            return False
        self.level += 1
        self._enter_playing()

        if self.verbose > 0:
            print(f"[Simulation] Starting level {self.level}")
        return True

    def pause(self) -> bool:
        if self.state is not GameState.PLAYING or self.is_paused:
            return False
        self.is_paused = True
        self._call(self.audio, "stop_music")
        self._call(self.display, "show_state", self.status, self)
        return True

    def resume(self) -> bool:
        if self.state is not GameState.PLAYING or not self.is_paused:
            return False
        self.is_paused = False
        if self.music_enabled:
            self._call(self.audio, "start_music")
        self._call(self.display, "show_state", self.status, self)
        return True

    def toggle_pause(self) -> bool:
        if self.is_paused:
            return self.resume()
        return self.pause()

    def toggle_music(self) -> bool:
        """Flip the persistent music switch; returns the new setting"""
        self.music_enabled = not self.music_enabled
        if self.music_enabled and self.active:
            self._call(self.audio, "start_music")
        else:
            self._call(self.audio, "stop_music")
        return self.music_enabled

    def _enter_playing(self):
        self.state = GameState.PLAYING
        self.is_paused = False
        self._init_level()
        self._call(self.display, "show_state", self.status, self)
        if self.music_enabled:
            self._call(self.audio, "start_music")

    def _init_level(self):
        bounds = self.bounds
        self.player = Player.spawn(bounds.width, bounds.height)
        self.enemies = generate_formation(self.level, bounds.width)
        for enemy in self.enemies:
            enemy.direction = 1
        self.player_projectiles = []
        self.enemy_projectiles = []
        self._stats_changed()

    def _level_complete(self):
        self.state = GameState.LEVEL_COMPLETE
        self.is_paused = False

        self.last_bonus = LEVEL_BONUS * self.level
        self.score += self.last_bonus
        self._stats_changed()

        self._call(self.display, "show_state", self.status, self)
        self._call(self.audio, "stop_music")

        if self.verbose > 0:
            print(f"[Simulation] Level {self.level} complete! Bonus: {self.last_bonus}")

    def _game_over(self):
        if self.state is GameState.GAME_OVER:
            return
        self.state = GameState.GAME_OVER
        self.is_paused = False

        self._call(self.display, "show_state", self.status, self)
        self._call(self.audio, "stop_music")

        if self.verbose > 0:
            print(f"[Simulation] Game over for {self.player_name}: "
                  f"score {self.score}, level {self.level}")

    # ----------------------------
    # Per-frame driving
    # ----------------------------

    def shoot(self) -> bool:
        """Fire a player projectile; only while actively playing"""
        if not self.active:
            return False
        self.player_projectiles.append(self.player.shoot())
        return True

    def frame(self, inputs: InputState) -> None:
        """One display refresh: apply one-shot requests, step, then draw"""
        if inputs.pause_toggle and self.state is GameState.PLAYING:
            self.toggle_pause()
        if inputs.shoot:
            self.shoot()

        if self.active:
            self.step(inputs.move_left, inputs.move_right)

        self.draw()

    def step(self, move_left: bool = False, move_right: bool = False) -> None:
        """Advance the world by one frame"""
        if not self.active:
            return

        bounds = self.bounds

        self.player.update(move_left, move_right, bounds.width)

        # Enemies: move, fire, detect edge and breach
        hit_edge = False
        for enemy in self.enemies:
            projectile = enemy.update()
            if projectile is not None:
                self.enemy_projectiles.append(projectile)

            if enemy.x <= 0 or enemy.x + enemy.width >= bounds.width:
                hit_edge = True

            if enemy.y + enemy.height >= self.player.y:
                self._game_over()
                return

        if hit_edge:
            for enemy in self.enemies:
                enemy.change_direction()

        # Player projectiles vs enemies
        survivors = []
        for projectile in self.player_projectiles:
            projectile.update()
            if self._hit_enemy(projectile):
                continue
            if not projectile.is_off_screen(bounds.height):
                survivors.append(projectile)
        self.player_projectiles = survivors

        # Enemy projectiles vs player
        survivors = []
        for projectile in self.enemy_projectiles:
            if self.state is not GameState.PLAYING:
                survivors.append(projectile)
                continue
            projectile.update()
            if overlaps(projectile, self.player):
                self.lives -= 1
                self._stats_changed()
                if self.lives <= 0:
                    self._game_over()
                continue
            if not projectile.is_off_screen(bounds.height):
                survivors.append(projectile)
        self.enemy_projectiles = survivors

        if self.state is GameState.PLAYING and not self.enemies:
            self._level_complete()

    def _hit_enemy(self, projectile: Projectile) -> bool:
        # Scan from the back so removal does not shift unvisited indices
        for i in range(len(self.enemies) - 1, -1, -1):
            if overlaps(projectile, self.enemies[i]):
                del self.enemies[i]
                self.score += KILL_SCORE
                self.kills += 1
                self._stats_changed()
                return True
        return False

    def draw(self) -> None:
        """Draw background, player, enemies, player then enemy projectiles"""
        self._call(self.renderer, "draw_background")
        if self.state is not GameState.PLAYING:
            return

        entities = [self.player]
        entities.extend(self.enemies)
        entities.extend(self.player_projectiles)
        entities.extend(self.enemy_projectiles)
        for entity in entities:
            self._call(self.renderer, "draw", entity)

    # ----------------------------
    # Collaborators
    # ----------------------------

    def _stats_changed(self):
        self._call(self.display, "show_stats",
                   self.score, self.lives, self.level, self.player_name)

    def _call(self, collaborator, method: str, *args) -> bool:
        """Invoke a collaborator; failures are reported once and never raised"""
        try:
            getattr(collaborator, method)(*args)
            return True
        except Exception as exc:
            key = (type(collaborator).__name__, method)
            if key not in self._reported_failures:
                self._reported_failures.add(key)
                warnings.warn(f"{key[0]}.{method} failed: {exc}", RuntimeWarning)
            return False
