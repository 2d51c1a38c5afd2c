import pytest

from invaders.simulation import GameState, Simulation


class RecordingAudio:
    def __init__(self):
        self.calls = []

    def start_music(self):
        self.calls.append("start")

    def stop_music(self):
        self.calls.append("stop")


class RecordingDisplay:
    def __init__(self):
        self.stats = []
        self.states = []

    def show_stats(self, score, lives, level, player_name):
        self.stats.append((score, lives, level, player_name))

    def show_state(self, state, sim):
        self.states.append(state)


class RecordingRenderer:
    def __init__(self):
        self.drawn = []

    def draw_background(self):
        self.drawn.append("background")

    def draw(self, entity):
        self.drawn.append(entity)


def silence(enemies):
    for enemy in enemies:
        enemy.shoot_chance = 0.0


def advance_to_level(sim: Simulation, level: int):
    """Clear rosters until the requested level is being played"""
    while sim.level < level:
        sim.enemies = []
        sim.step()
        assert sim.state is GameState.LEVEL_COMPLETE
        sim.start_next_level()
    silence(sim.enemies)


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def sim(audio, display, renderer):
    """A fresh game on an 800x600 canvas with enemies that never fire"""
    s = Simulation(width=800, height=600, renderer=renderer, audio=audio, display=display)
    s.new_game("Tester")
    silence(s.enemies)
    return s
