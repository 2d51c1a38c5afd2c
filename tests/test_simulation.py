import pytest

from invaders.collaborators import Bounds, InputState
from invaders.entities import Enemy, Player, Projectile
from invaders.simulation import GameState, Simulation, level_message, LEVEL_MESSAGES

from conftest import advance_to_level, silence


def enemy_at(x, y, direction=1):
    return Enemy(x=x, y=y, width=40, height=30, direction=direction, shoot_chance=0.0)


def shot_on(target, speed=0.0):
    return Projectile(x=target.x, y=target.y, speed=speed,
                      width=target.width, height=target.height)


def positions(sim):
    return (
        (sim.player.x, sim.player.y),
        [(e.x, e.y) for e in sim.enemies],
        [(b.x, b.y) for b in sim.player_projectiles],
        [(b.x, b.y) for b in sim.enemy_projectiles],
    )


# ----------------------------
# Lifecycle
# ----------------------------

def test_initial_state():
    sim = Simulation()
    assert sim.state is GameState.START
    assert sim.player is None
    assert not sim.active


def test_new_game_resets_counters(sim):
    sim.score, sim.lives, sim.level = 990, 1, 4
    sim.new_game("  Ace  ")
    assert sim.state is GameState.PLAYING
    assert (sim.score, sim.lives, sim.level) == (0, 3, 1)
    assert sim.player_name == "Ace"
    assert len(sim.enemies) == 50
    assert sim.player_projectiles == [] and sim.enemy_projectiles == []


def test_blank_name_becomes_guest(sim):
    sim.new_game("   ")
    assert sim.player_name == "Guest"


def test_restart_after_game_over(sim):
    sim._game_over()
    sim.new_game("Again")
    assert sim.state is GameState.PLAYING
    assert sim.player_name == "Again"
    assert sim.lives == 3


def test_start_next_level_only_from_level_complete(sim):
    assert sim.start_next_level() is False
    assert sim.level == 1


# ----------------------------
# Step: player and enemies
# ----------------------------

def test_step_moves_player_and_enemies(sim):
    x0 = sim.enemies[0].x
    sim.step(move_left=True)
    assert sim.player.x == 370
    assert sim.enemies[0].x == x0 + 1


def test_enemy_fire_lands_in_enemy_projectiles(sim):
    sim.enemies[0].shoot_chance = 1.0
    sim.step()
    assert len(sim.enemy_projectiles) == 1
    assert sim.enemy_projectiles[0].speed == 3.5


def test_edge_bounce_reverses_whole_roster(sim):
    sim.enemies = [enemy_at(0, 100, direction=-1), enemy_at(300, 150, direction=-1)]
    sim.step()
    assert sim.enemies[0].x < 0
    assert [e.direction for e in sim.enemies] == [1, 1]
    assert [e.y for e in sim.enemies] == [120, 170]


def test_enemy_still_at_edge_bounces_again(sim):
    sim.enemies = [enemy_at(0, 100, direction=-1)]
    sim.step()
    assert (sim.enemies[0].direction, sim.enemies[0].y) == (1, 120)
    sim.step()
    assert sim.enemies[0].x == 0
    assert (sim.enemies[0].direction, sim.enemies[0].y) == (-1, 140)


def test_enemy_past_left_edge_bounces_whatever_its_direction(sim):
    sim.enemies = [enemy_at(-3, 100, direction=1)]
    sim.step()
    assert sim.enemies[0].x == -2
    assert (sim.enemies[0].direction, sim.enemies[0].y) == (-1, 120)


def test_shrunk_canvas_bounces_enemy_moving_away_from_edge():
    bounds = {"width": 800}
    sim = Simulation(bounds_provider=lambda: Bounds(bounds["width"], 600))
    sim.new_game()
    sim.enemies = [enemy_at(700, 100, direction=-1)]
    bounds["width"] = 600
    sim.step()
    assert sim.enemies[0].x == 699
    assert (sim.enemies[0].direction, sim.enemies[0].y) == (1, 120)


def test_right_edge_bounce(sim):
    sim.enemies = [enemy_at(759, 100), enemy_at(100, 100)]
    sim.step()
    assert [e.direction for e in sim.enemies] == [-1, -1]
    assert [e.y for e in sim.enemies] == [120, 120]


def test_shared_bounce_is_a_single_event(sim):
    # Two enemies at the edge in one frame still drop the roster only once
    sim.enemies = [enemy_at(759, 100), enemy_at(759, 140)]
    sim.step()
    assert [e.y for e in sim.enemies] == [120, 160]


def test_breach_ends_game_immediately(sim):
    sim.enemies = [enemy_at(100, sim.player.y - 30), enemy_at(200, 100)]
    x_before = sim.enemies[1].x
    sim.step()
    assert sim.state is GameState.GAME_OVER
    # Nothing after the breaching enemy moved
    assert sim.enemies[1].x == x_before


def test_bounds_are_read_every_frame():
    bounds = {"width": 800}
    sim = Simulation(bounds_provider=lambda: Bounds(bounds["width"], 600))
    sim.new_game()
    sim.enemies = [enemy_at(500, 100)]
    sim.step()
    assert sim.enemies[0].direction == 1

    bounds["width"] = 520
    sim.step()
    assert sim.enemies[0].direction == -1


# ----------------------------
# Step: collisions and scoring
# ----------------------------

def test_player_projectile_kills_one_enemy(sim):
    target = sim.enemies[0]
    sim.player_projectiles.append(shot_on(target))
    sim.step()
    assert len(sim.enemies) == 49
    assert target not in sim.enemies
    assert sim.score == 10
    assert sim.player_projectiles == []


def test_projectile_overlapping_two_enemies_removes_only_last(sim):
    a, b = enemy_at(100, 100), enemy_at(130, 100)
    sim.enemies = [a, b, enemy_at(400, 100)]
    sim.player_projectiles.append(Projectile(x=125, y=100, speed=0, width=20, height=10))
    sim.step()
    assert sim.enemies[0] is a
    assert b not in sim.enemies
    assert sim.score == 10


def test_several_projectiles_resolve_independently(sim):
    targets = sim.enemies[:3]
    sim.player_projectiles.extend(shot_on(t) for t in targets)
    sim.step()
    assert len(sim.enemies) == 47
    assert sim.score == 30


def test_missed_projectile_kept_until_off_screen(sim):
    sim.player_projectiles.append(Projectile(x=700, y=400, speed=-5))
    sim.step()
    assert len(sim.player_projectiles) == 1
    sim.player_projectiles[0].y = 2
    sim.step()
    assert sim.player_projectiles == []


def test_diamond_apex_scenario(sim):
    advance_to_level(sim, 3)
    sim.score = 0
    assert len(sim.enemies) == 13
    apex = sim.enemies[0]
    assert apex.bullet_speed == 4.5
    sim.player_projectiles.append(shot_on(apex))
    sim.step()
    assert len(sim.enemies) == 12
    assert sim.score == 10


def test_enemy_projectile_costs_a_life(sim):
    sim.enemy_projectiles.append(shot_on(sim.player))
    sim.step()
    assert sim.lives == 2
    assert sim.enemy_projectiles == []
    assert sim.state is GameState.PLAYING


def test_last_life_lost_ends_game_same_step(sim):
    sim.lives = 1
    sim.enemy_projectiles.append(shot_on(sim.player))
    sim.step()
    assert sim.lives == 0
    assert sim.state is GameState.GAME_OVER


def test_lives_never_go_negative(sim):
    sim.lives = 1
    sim.enemy_projectiles.extend([shot_on(sim.player), shot_on(sim.player)])
    sim.step()
    assert sim.lives == 0
    assert sim.state is GameState.GAME_OVER
    assert len(sim.enemy_projectiles) == 1


def test_enemy_projectiles_leave_the_screen(sim):
    sim.enemy_projectiles.append(Projectile(x=10, y=598, speed=5))
    sim.step()
    assert sim.enemy_projectiles == []


# ----------------------------
# Level complete
# ----------------------------

def test_empty_roster_completes_level(sim, display):
    sim.enemies = [enemy_at(100, 100)]
    sim.player_projectiles.append(shot_on(sim.enemies[0]))
    sim.step()
    assert sim.state is GameState.LEVEL_COMPLETE
    assert sim.last_bonus == 100
    assert sim.score == 110
    assert display.states[-1] is GameState.LEVEL_COMPLETE


def test_bonus_uses_current_level(sim):
    advance_to_level(sim, 4)
    sim.score = 0
    sim.enemies = []
    sim.step()
    assert sim.score == 400


def test_next_level_keeps_score_and_lives(sim):
    sim.lives = 2
    sim.enemies = []
    sim.step()
    score = sim.score
    assert sim.start_next_level()
    assert sim.level == 2
    assert sim.state is GameState.PLAYING
    assert (sim.score, sim.lives) == (score, 2)
    assert len(sim.enemies) == 15


def test_step_is_noop_outside_playing(sim):
    sim.enemies = []
    sim.step()
    score = sim.score
    sim.step()
    assert sim.score == score
    assert sim.state is GameState.LEVEL_COMPLETE


# ----------------------------
# Pause, shooting and frames
# ----------------------------

def test_pause_freezes_entities(sim):
    sim.player_projectiles.append(Projectile(x=700, y=400, speed=-5))
    sim.enemy_projectiles.append(Projectile(x=10, y=300, speed=4))
    assert sim.pause()
    assert sim.status is GameState.PAUSED
    frozen = positions(sim)
    for _ in range(10):
        sim.frame(InputState(move_left=True, shoot=True))
        sim.step(move_right=True)
    assert positions(sim) == frozen


def test_pause_toggle_through_frame_input(sim):
    sim.frame(InputState(pause_toggle=True))
    assert sim.is_paused
    sim.frame(InputState(pause_toggle=True))
    assert not sim.is_paused


def test_pause_ignored_unless_playing():
    sim = Simulation()
    assert sim.pause() is False
    assert not sim.is_paused


def test_shoot_only_while_active(sim):
    assert sim.shoot()
    sim.pause()
    assert not sim.shoot()
    assert len(sim.player_projectiles) == 1


def test_frame_shoots_before_stepping(sim):
    sim.frame(InputState(shoot=True))
    assert len(sim.player_projectiles) == 1
    assert sim.player_projectiles[0].y == sim.player.y - 5


def test_game_over_is_idempotent(sim, audio, display):
    sim._game_over()
    sim._game_over()
    assert display.states.count(GameState.GAME_OVER) == 1
    assert audio.calls.count("stop") == 1


def test_game_over_preserves_final_values(sim):
    sim.score = 120
    sim.lives = 1
    sim.enemy_projectiles.append(shot_on(sim.player))
    sim.step()
    assert sim.stats()["state"] == "gameOver"
    assert (sim.score, sim.level, sim.player_name) == (120, 1, "Tester")


# ----------------------------
# Collaborators
# ----------------------------

def test_music_follows_transitions(sim, audio):
    assert audio.calls == ["start"]
    sim.pause()
    sim.resume()
    sim.enemies = []
    sim.step()
    assert audio.calls == ["start", "stop", "start", "stop"]


def test_music_toggle(sim, audio):
    assert sim.toggle_music() is False
    assert sim.toggle_music() is True
    assert audio.calls[-2:] == ["stop", "start"]

    sim.toggle_music()
    audio.calls.clear()
    sim.new_game()
    assert "start" not in audio.calls


def test_display_sees_score_changes(sim, display):
    sim.player_projectiles.append(shot_on(sim.enemies[0]))
    sim.step()
    assert display.stats[-1] == (10, 3, 1, "Tester")


def test_draw_order(sim, renderer):
    sim.player_projectiles.append(Projectile(x=700, y=400, speed=-5))
    sim.enemy_projectiles.append(Projectile(x=10, y=300, speed=4))
    renderer.drawn.clear()
    sim.frame(InputState())
    kinds = [type(d).__name__ if not isinstance(d, str) else d for d in renderer.drawn]
    assert kinds[0] == "background"
    assert kinds[1] == "Player"
    assert kinds[2:52] == ["Enemy"] * 50
    assert renderer.drawn[52].speed < 0
    assert renderer.drawn[53].speed > 0


def test_paused_frames_still_draw(sim, renderer):
    sim.pause()
    renderer.drawn.clear()
    sim.frame(InputState())
    assert len(renderer.drawn) == 52


def test_only_background_outside_play(renderer):
    sim = Simulation(renderer=renderer)
    sim.frame(InputState())
    assert renderer.drawn == ["background"]


class BrokenAudio:
    def start_music(self):
        raise RuntimeError("no audio device")

    def stop_music(self):
        raise RuntimeError("no audio device")


def test_collaborator_failure_does_not_touch_state():
    sim = Simulation(audio=BrokenAudio())
    with pytest.warns(RuntimeWarning, match="start_music"):
        sim.new_game()
    assert sim.state is GameState.PLAYING
    silence(sim.enemies)
    sim.step()
    assert sim.state is GameState.PLAYING


# ----------------------------
# Level messages
# ----------------------------

@pytest.mark.parametrize("level, index", [
    (1, 0), (10, 9), (11, 10), (20, 19), (21, 10), (25, 14), (31, 10),
])
def test_level_message(level, index):
    assert level_message(level) == LEVEL_MESSAGES[index]


class PlayerOnlyRenderer:
    """Fails on anything but the player"""

    def __init__(self):
        self.drawn = []

    def draw_background(self):
        pass

    def draw(self, entity):
        if not isinstance(entity, Player):
            raise RuntimeError("unsupported entity")
        self.drawn.append(entity)


def test_render_failure_does_not_skip_later_entities():
    renderer = PlayerOnlyRenderer()
    sim = Simulation(renderer=renderer)
    sim.new_game()
    silence(sim.enemies)
    # Player drawn after a failing enemy still reaches the renderer
    sim.enemies.append(Player(x=10, y=10))
    with pytest.warns(RuntimeWarning, match="draw"):
        sim.draw()
    assert renderer.drawn == [sim.player, sim.enemies[-1]]
