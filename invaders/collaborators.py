"""
Interfaces between the simulation core and its outside collaborators
(rendering, audio, UI display, input, canvas bounds).
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Bounds:
    """Current canvas size"""
    width: float = 800
    height: float = 600


@dataclass
class InputState:
    """
    Input sampled once per frame.

    move_left/move_right are held flags; shoot/pause_toggle are one-shot
    requests that the input collaborator clears after each frame.
    """
    move_left: bool = False
    move_right: bool = False
    shoot: bool = False
    pause_toggle: bool = False


class Renderer(Protocol):
    def draw_background(self) -> None: ...

    def draw(self, entity) -> None: ...


class AudioPlayer(Protocol):
    def start_music(self) -> None: ...

    def stop_music(self) -> None: ...


class Display(Protocol):
    def show_stats(self, score: int, lives: int, level: int, player_name: str) -> None: ...

    def show_state(self, state, sim) -> None: ...


class NullRenderer:
    def draw_background(self):
        pass

    def draw(self, entity):
        pass


class NullAudio:
    def start_music(self):
        pass

    def stop_music(self):
        pass


class NullDisplay:
    def show_stats(self, score, lives, level, player_name):
        pass

    def show_state(self, state, sim):
        pass
