"""Tests for GameEngine: lifecycle, control guards, drivers, tick pipeline."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from game.garaxy.engine import GameEngine, GameSnapshot, GameState
from game.garaxy.entities import Bullet, EnemyType, MediumEnemy

TICK = 1 / 60


def run_ticks(engine: GameEngine, n: int) -> None:
    for _ in range(n):
        engine.tick()


# --------------------------------------------------------------------------
# Construction and lifecycle
# --------------------------------------------------------------------------

@pytest.mark.unit
class TestLifecycle:
    def test_initial_state(self):
        eng = GameEngine()
        assert eng.state is GameState.MENU
        assert (eng.player.x, eng.player.y) == (30.0, 112.0)
        assert eng.drivers_active is False

    def test_rejects_non_positive_periods(self):
        with pytest.raises(ValueError, match="tick_interval"):
            GameEngine(tick_interval=0)
        with pytest.raises(ValueError, match="auto_fire_interval"):
            GameEngine(auto_fire_interval=-1.0)

    def test_start(self, engine):
        assert engine.state is GameState.PLAYING
        assert engine.drivers_active is True
        assert engine.score == 0
        assert engine.player.health == 1
        assert engine.enemies == [] and engine.player_bullets == [] and engine.enemy_bullets == []

    def test_pause_and_resume(self, engine):
        engine.pause()
        assert engine.state is GameState.PAUSED
        assert engine.drivers_active is False

        engine.resume()
        assert engine.state is GameState.PLAYING
        assert engine.drivers_active is True

    def test_pause_ignored_outside_playing(self):
        eng = GameEngine()
        eng.pause()
        assert eng.state is GameState.MENU
        eng.resume()
        assert eng.state is GameState.MENU

    def test_resume_ignored_while_playing(self, engine):
        engine.advance(0.25)
        engine.resume()
        # accumulators untouched: auto-fire still fires at 0.3s
        engine.advance(0.05)
        assert len(engine.player_bullets) == 1

    def test_stop_halts_drivers_only(self, engine):
        engine.stop()
        assert engine.state is GameState.PLAYING
        assert engine.advance(1.0) == 0
        engine.tick()
        assert engine.tick_count == 1

    def test_restart_after_game_over_resets_world(self, engine):
        engine.score = 120
        engine.spawn_enemy(EnemyType.SMALL, y=112.0)
        engine.enemy_bullets.append(Bullet.enemy(33.0, 112.0))
        engine.fire_bullet()
        engine.tick()
        assert engine.state is GameState.GAME_OVER

        engine.start()
        assert engine.state is GameState.PLAYING
        assert engine.score == 0
        assert engine.enemies == []
        assert engine.player_bullets == []
        assert engine.enemy_bullets == []
        assert engine.now == 0.0
        assert (engine.player.x, engine.player.y) == (30.0, 112.0)


# --------------------------------------------------------------------------
# Control operations
# --------------------------------------------------------------------------

@pytest.mark.unit
class TestControls:
    def test_set_vertical_position_clamps(self, engine):
        engine.set_vertical_position(-50.0)
        assert engine.player.y == 6.0
        engine.set_vertical_position(1000.0)
        assert engine.player.y == 218.0
        engine.set_vertical_position(80.0)
        assert engine.player.y == 80.0

    def test_move_vertical_scales_delta(self, engine):
        engine.move_vertical(5.0)
        assert engine.player.y == 122.0
        engine.move_vertical(-500.0)
        assert engine.player.y == 6.0

    def test_controls_ignored_when_not_playing(self):
        eng = GameEngine()
        eng.set_vertical_position(40.0)
        eng.move_vertical(10.0)
        assert eng.player.y == 112.0
        assert eng.fire_bullet() is None
        assert eng.player_bullets == []

    def test_fire_ignored_while_paused(self, engine):
        engine.pause()
        assert engine.fire_bullet() is None
        assert engine.spawn_enemy() is None
        assert engine.player_bullets == [] and engine.enemies == []

    def test_fire_from_player_nose(self, engine):
        engine.set_vertical_position(60.0)
        bullet = engine.fire_bullet()
        assert (bullet.x, bullet.y) == (36.0, 60.0)
        assert engine.player_bullets == [bullet]

    def test_update_screen_size_recenters_offscreen_player(self, engine):
        engine.set_vertical_position(150.0)
        engine.update_screen_size(200, 100)
        assert (engine.width, engine.height) == (200.0, 100.0)
        assert engine.player.x == 30.0
        assert engine.player.y == 50.0

    def test_update_screen_size_keeps_visible_player(self, engine):
        engine.set_vertical_position(80.0)
        engine.update_screen_size(300, 300)
        assert engine.player.y == 80.0

    def test_update_screen_size_reclamps(self, engine):
        engine.set_vertical_position(95.0)
        engine.update_screen_size(184, 96)
        assert engine.player.y == 90.0

    def test_degenerate_screen_clamped(self, engine, caplog):
        with caplog.at_level(logging.WARNING, logger="garaxy.engine"):
            engine.update_screen_size(0, -10)
        assert (engine.width, engine.height) == (64.0, 64.0)
        assert "clamped" in caplog.text
        assert 6.0 <= engine.player.y <= 58.0


# --------------------------------------------------------------------------
# Periodic drivers
# --------------------------------------------------------------------------

@pytest.mark.unit
class TestDrivers:
    def test_one_tick_per_period(self, engine):
        assert engine.advance(TICK) == 1
        assert engine.tick_count == 1
        assert engine.now == pytest.approx(TICK)

    def test_half_second_is_thirty_ticks(self, engine):
        assert engine.advance(0.5) == 30

    def test_partial_tick_carried(self, engine):
        assert engine.advance(TICK / 2) == 0
        assert engine.advance(TICK / 2) == 1

    def test_negative_elapsed_rejected(self, engine):
        with pytest.raises(ValueError):
            engine.advance(-0.1)

    def test_auto_fire_period(self, engine):
        for _ in range(17):
            engine.advance(TICK)
        assert engine.player_bullets == []
        engine.advance(TICK)
        assert len(engine.player_bullets) == 1

    def test_spawn_period(self, engine):
        engine.advance(1.5 - TICK)
        assert engine.enemies == []
        engine.advance(TICK)
        assert len(engine.enemies) == 1
        assert engine.enemies[0].kind in (EnemyType.SMALL, EnemyType.CIRCLE)

    def test_paused_engine_does_not_advance(self, engine):
        engine.advance(0.5)
        engine.pause()
        before = engine.snapshot()
        assert engine.advance(3.0) == 0
        after = engine.snapshot()
        assert after.now == before.now
        assert len(after.player_bullets) == len(before.player_bullets)

    def test_resume_restarts_phases_from_zero(self, engine):
        engine.advance(0.25)
        engine.pause()
        engine.resume()
        engine.advance(0.1)
        # 0.35s of play but the auto-fire phase restarted at resume
        assert engine.player_bullets == []

    def test_tick_is_noop_outside_playing(self):
        eng = GameEngine()
        eng.tick()
        assert eng.now == 0.0 and eng.tick_count == 0


# --------------------------------------------------------------------------
# Spawning through the engine
# --------------------------------------------------------------------------

@pytest.mark.unit
class TestEngineSpawn:
    def test_specific_archetype(self, engine):
        enemy = engine.spawn_enemy(EnemyType.BOSS, y=100.0)
        assert enemy.kind is EnemyType.BOSS
        assert (enemy.x, enemy.y) == (204.0, 100.0)
        assert engine.enemies == [enemy]

    def test_circle_center_set(self, engine):
        enemy = engine.spawn_enemy(EnemyType.CIRCLE, y=70.0)
        assert enemy.circle_center_y == 70.0

    def test_pentagon_refused(self, engine):
        with pytest.raises(ValueError, match="pentagon"):
            engine.spawn_enemy(EnemyType.PENTAGON)

    def test_policy_respects_score(self, engine):
        engine.score = 500
        kinds = {engine.spawn_enemy().kind for _ in range(400)}
        assert EnemyType.BOSS in kinds
        assert EnemyType.PENTAGON not in kinds

    def test_same_seed_same_spawns(self):
        a, b = GameEngine(seed=99), GameEngine(seed=99)
        a.start()
        b.start()
        ea = [(e.kind, e.y, e.speed) for e in (a.spawn_enemy() for _ in range(20))]
        eb = [(e.kind, e.y, e.speed) for e in (b.spawn_enemy() for _ in range(20))]
        assert ea == eb


# --------------------------------------------------------------------------
# Tick pipeline
# --------------------------------------------------------------------------

@pytest.mark.unit
class TestTickPipeline:
    def test_small_enemy_moves_by_speed(self, engine):
        enemy = engine.spawn_enemy(EnemyType.SMALL, y=50.0)
        enemy.x, enemy.speed = 100.0, 2.0
        engine.tick()
        assert engine.enemies[0].x == pytest.approx(98.0)

    def test_player_bullet_kinematics_and_cull(self, engine):
        engine.player_bullets.append(Bullet.player(100.0, 40.0))
        engine.player_bullets.append(Bullet.player(191.0, 40.0))
        engine.tick()
        # 191 + 4 = 195 > 184 + 10
        assert [b.x for b in engine.player_bullets] == [104.0]

    def test_enemy_bullet_kinematics_and_cull(self, engine):
        engine.enemy_bullets.append(Bullet.enemy(100.0, 40.0, vx=-2.5, vy=1.75))
        engine.enemy_bullets.append(Bullet.enemy(100.0, 60.0))
        engine.enemy_bullets.append(Bullet.enemy(-8.0, 60.0))
        engine.enemy_bullets.append(Bullet.enemy(100.0, 233.0, vx=-2.5, vy=1.75))
        engine.tick()
        positions = [(b.x, b.y) for b in engine.enemy_bullets]
        assert positions == pytest.approx([(97.5, 41.75), (97.5, 60.0)])

    def test_enemies_culled_off_left_edge(self, engine):
        enemy = engine.spawn_enemy(EnemyType.SMALL, y=40.0)
        enemy.x, enemy.speed = -18.5, 2.0
        engine.tick()
        assert engine.enemies == []

    def test_enemy_fire_lands_in_enemy_bullets(self, engine):
        enemy = engine.spawn_enemy(EnemyType.LARGE, y=40.0)
        enemy.x = 120.0
        enemy.last_fire_time = -5.0
        engine.tick()
        assert len(engine.enemy_bullets) == 3


# --------------------------------------------------------------------------
# End to end
# --------------------------------------------------------------------------

@pytest.mark.integration
class TestEndToEnd:
    def test_player_bullet_kills_enemy(self, engine):
        enemy = engine.spawn_enemy(EnemyType.SMALL, y=112.0)
        enemy.x = 100.0
        engine.player_bullets.append(Bullet.player(96.0, 112.0))
        engine.tick()

        snap = engine.snapshot()
        assert snap.score == 10
        assert snap.enemies == ()
        assert snap.player_bullets == ()
        assert engine.kills == 1

    def test_kill_resolved_before_contact(self, engine):
        # enemy about to touch the player dies to a fresh shot first
        enemy = engine.spawn_enemy(EnemyType.SMALL, y=112.0)
        enemy.x = 40.0
        engine.fire_bullet()
        engine.tick()
        assert engine.state is GameState.PLAYING
        assert engine.score == 10

    def test_boss_needs_three_hits(self, engine):
        boss = engine.spawn_enemy(EnemyType.BOSS, y=112.0)
        boss.x = 150.0
        scores = []
        for _ in range(3):
            engine.player_bullets.append(Bullet.player(boss.x, boss.y))
            engine.tick()
            scores.append(engine.score)
        assert scores == [0, 0, 50]
        assert engine.enemies == []

    def test_score_changes_only_on_kill_tick(self, engine):
        large = engine.spawn_enemy(EnemyType.LARGE, y=112.0)
        large.x = 150.0
        history = []
        for _ in range(3):
            engine.player_bullets.append(Bullet.player(large.x, large.y))
            engine.tick()
            history.append((large.health, engine.score))
        assert history == [(2, 0), (1, 0), (0, 30)]

    def test_enemy_contact_is_instant_death(self, engine):
        engine.player.health = 99
        enemy = engine.spawn_enemy(EnemyType.SMALL, y=112.0)
        enemy.x = 40.0
        engine.tick()
        assert engine.state is GameState.GAME_OVER
        assert engine.drivers_active is False
        assert engine.player.health == 99

    def test_enemy_bullet_is_instant_death(self, engine):
        engine.enemy_bullets.append(Bullet.enemy(42.0, 112.0))
        engine.tick()
        assert engine.state is GameState.GAME_OVER
        assert engine.enemy_bullets == []

    def test_nothing_moves_after_game_over(self, engine):
        engine.enemy_bullets.append(Bullet.enemy(42.0, 112.0))
        engine.tick()
        frozen = engine.snapshot()
        engine.tick()
        assert engine.advance(1.0) == 0
        assert engine.snapshot() == frozen

    def test_advance_stops_at_game_over(self, engine):
        engine.enemy_bullets.append(Bullet.enemy(50.0, 112.0))
        ticks = engine.advance(1.0)
        assert engine.state is GameState.GAME_OVER
        assert ticks < 60

    def test_medium_freeze_cycle(self, engine):
        medium = engine.spawn_enemy(EnemyType.MEDIUM, y=112.0)
        assert isinstance(medium, MediumEnemy)
        medium.x, medium.speed = 100.0, 1.0
        medium.last_fire_time = -10.0

        run_ticks(engine, 3)
        assert medium.x == pytest.approx(97.0)
        assert engine.enemy_bullets == []

        engine.tick()
        assert medium.stopped_at_center is True
        assert medium.x == 92.0
        assert len(engine.enemy_bullets) == 2
        assert [b.vy for b in engine.enemy_bullets] == pytest.approx([-1.75, 1.75])
        fired_at = medium.last_fire_time

        run_ticks(engine, 55)
        assert medium.x == 92.0
        assert medium.last_fire_time == fired_at

        run_ticks(engine, 7)
        assert medium.x < 92.0

        xs = []
        for _ in range(30):
            engine.tick()
            xs.append(medium.x)
        assert all(b < a for a, b in zip(xs, xs[1:]))
        assert engine.state is GameState.PLAYING

    def test_score_never_decreases(self):
        eng = GameEngine(seed=2024)
        eng.start()
        scores = [0]
        direction = 1.0
        for frame in range(60 * 45):
            if frame % 90 == 0:
                direction = -direction
            eng.move_vertical(direction)
            eng.advance(TICK)
            scores.append(eng.score)
            if eng.state is GameState.GAME_OVER:
                break
        assert all(b >= a for a, b in zip(scores, scores[1:]))


# --------------------------------------------------------------------------
# Simulated clock
# --------------------------------------------------------------------------

def fire_ticks(engine: GameEngine, enemy, n: int) -> list:
    """Tick numbers at which `enemy` fired over the next `n` ticks."""
    fired = []
    last = enemy.last_fire_time
    for _ in range(n):
        engine.tick()
        engine.enemy_bullets.clear()
        if enemy.last_fire_time != last:
            fired.append(engine.tick_count)
            last = enemy.last_fire_time
    return fired


@pytest.mark.unit
class TestSimulatedClock:
    def test_now_tracks_tick_count(self, engine):
        run_ticks(engine, 600)
        assert engine.now == 600 * TICK

    @pytest.mark.parametrize("start_tick", [0, 1, 13, 29, 58, 97, 311])
    def test_medium_holds_exactly_sixty_ticks(self, engine, start_tick):
        run_ticks(engine, start_tick)
        medium = engine.spawn_enemy(EnemyType.MEDIUM, y=112.0)
        medium.x, medium.speed = 93.0, 1.0

        engine.tick()
        engine.enemy_bullets.clear()
        assert medium.stopped_at_center is True

        held = 1
        while held < 200:
            engine.tick()
            engine.enemy_bullets.clear()
            if medium.x != 92.0:
                break
            held += 1
        assert held == 60

    @pytest.mark.parametrize("start_tick", [0, 7, 45, 128])
    def test_large_fires_every_sixty_ticks(self, engine, start_tick):
        run_ticks(engine, start_tick)
        large = engine.spawn_enemy(EnemyType.LARGE, y=40.0)
        large.x, large.speed = 100.0, 0.0

        fired = fire_ticks(engine, large, 600)
        assert fired[0] == start_tick + 60
        assert {b - a for a, b in zip(fired, fired[1:])} == {60}
        assert len(fired) == 10

    @pytest.mark.parametrize("start_tick", [0, 11, 73])
    def test_boss_fires_every_thirty_ticks(self, engine, start_tick):
        run_ticks(engine, start_tick)
        boss = engine.spawn_enemy(EnemyType.BOSS, y=40.0)
        boss.x, boss.speed = 100.0, 0.0

        fired = fire_ticks(engine, boss, 300)
        assert fired[0] == start_tick + 30
        assert {b - a for a, b in zip(fired, fired[1:])} == {30}


# --------------------------------------------------------------------------
# Snapshot
# --------------------------------------------------------------------------

@pytest.mark.unit
class TestSnapshot:
    def test_snapshot_is_a_copy(self, engine):
        engine.spawn_enemy(EnemyType.SMALL, y=50.0)
        engine.fire_bullet()
        snap = engine.snapshot()

        snap.enemies[0].x = -500.0
        snap.player_bullets[0].x = -500.0
        snap.player.y = -500.0
        assert engine.enemies[0].x == 204.0
        assert engine.player_bullets[0].x == 36.0
        assert engine.player.y == 112.0

    def test_snapshot_frozen(self, engine):
        snap = engine.snapshot()
        assert isinstance(snap, GameSnapshot)
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.score = 5

    def test_info(self, engine):
        engine.advance(0.3)
        info = engine.get_info()
        assert info["state"] == "playing"
        assert info["ticks"] == 18
        assert info["num_player_bullets"] == 1
        assert info["score"] == 0
