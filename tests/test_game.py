"""Scenario tests for the game core: joins, deaths, resets and disconnects."""

import random

from helpers import assert_invariants, clear_path, join, kinds, received, states
from snake_server.config import GameSettings
from snake_server.game import Game
from snake_server.protocol import ChangeDirection, GameOver, Join, PlaceBlock, Reset, RoleAssignment
from snake_server.registry import Role
from snake_server.utils import Cell, DOWN, UP


def test_first_join_gets_player_and_everyone_gets_state(game):
    alice = game.connect("alice")
    watcher = game.connect("watcher")
    deliveries = game.handle(alice, Join())

    assert received(deliveries, alice) == [RoleAssignment(Role.PLAYER), game.snapshot()]
    assert kinds(received(deliveries, watcher)) == ["updateGameState"]
    assert states(deliveries)[0].roster == [
        {"name": "alice", "role": "player"},
        {"name": "watcher", "role": "unassigned"},
    ]


def test_second_join_becomes_spectator(game):
    join(game, "alice")
    bob = game.connect("bob")
    deliveries = game.handle(bob, Join(name="ignored"))
    assert received(deliveries, bob)[0] == RoleAssignment(Role.SPECTATOR)
    assert bob.identity == "bob"
    assert list(game.roles.queue) == [bob]


def test_duplicate_join_produces_nothing(game):
    alice = join(game, "alice")
    assert game.handle(alice, Join()) == []


def test_tick_is_idle_without_player(game):
    game.connect("lurker")
    head = game.world.snake.head
    assert game.tick() == []
    assert game.world.snake.head == head


def test_wall_death_resets_world(game):
    alice = join(game, "alice")
    clear_path(game)
    game.world.place_obstacle(Cell(3, 3))

    for _ in range(9):
        deliveries = game.tick()
        assert kinds(received(deliveries, alice)) == ["updateGameState"]
    assert game.world.snake.head == Cell(19, 10)

    deliveries = game.tick()
    assert game.world.snake.body == [Cell(10, 10)]
    assert game.world.snake.direction == Cell(1, 0)
    assert game.world.obstacles == set()
    assert GameOver() in received(deliveries, alice)


def test_death_hands_the_snake_to_the_waiting_spectator(game):
    alice = join(game, "alice")
    bob = join(game, "bob")
    clear_path(game)
    game.world.obstacles.add(Cell(11, 10))

    deliveries = game.tick()

    assert kinds(received(deliveries, alice)) == ["gameOver", "roleAssignment", "updateGameState"]
    assert received(deliveries, alice)[1] == RoleAssignment(Role.SPECTATOR)
    assert kinds(received(deliveries, bob)) == ["roleAssignment", "updateGameState"]
    assert received(deliveries, bob)[0] == RoleAssignment(Role.PLAYER)
    assert game.roles.player is bob
    assert list(game.roles.queue) == [alice]

    (state,) = states(deliveries)
    assert state.snake == [{"x": 10, "y": 10}]
    assert state.obstacles == []
    assert {"name": "alice", "role": "spectator"} in state.roster
    assert {"name": "bob", "role": "player"} in state.roster
    assert_invariants(game)


def test_solo_death_keeps_the_player(game):
    alice = join(game, "alice")
    clear_path(game)
    game.world.obstacles.add(Cell(11, 10))

    deliveries = game.tick()

    assert [d.message for d in deliveries] == [
        GameOver(),
        RoleAssignment(Role.PLAYER),
        game.snapshot(),
    ]
    assert deliveries[0].recipient is alice
    assert deliveries[1].recipient is alice
    assert deliveries[2].recipient is None
    assert game.roles.player is alice
    assert alice.role is Role.PLAYER


def test_game_over_goes_only_to_the_player(game):
    join(game, "alice")
    bob = join(game, "bob")
    clear_path(game)
    game.world.obstacles.add(Cell(11, 10))
    deliveries = game.tick()
    assert GameOver() not in received(deliveries, bob)


def test_only_the_player_can_steer(game):
    alice = join(game, "alice")
    bob = join(game, "bob")
    assert game.handle(bob, ChangeDirection(UP)) == []
    assert game.world.snake.direction == Cell(1, 0)
    assert game.handle(alice, ChangeDirection(DOWN)) == []
    assert game.world.snake.direction == DOWN


def test_direction_change_applies_on_next_tick(game):
    alice = join(game, "alice")
    clear_path(game)
    game.handle(alice, ChangeDirection(DOWN))
    game.tick()
    assert game.world.snake.head == Cell(10, 11)


def test_eating_scores_for_the_player(game, store):
    alice = join(game, "alice")
    game.world.food = Cell(11, 10)
    deliveries = game.tick()

    assert alice.session_score == 1
    assert game.ledger.best("alice") == 1
    assert states(deliveries)[0].leaderboard == [{"name": "alice", "score": 1}]
    assert store.entries == [{"name": "alice", "score": 1}]
    assert len(game.world.snake.body) == 2


def test_session_score_survives_a_death(game):
    alice = join(game, "alice")
    game.world.food = Cell(11, 10)
    game.tick()
    game.world.obstacles.add(Cell(13, 10))
    game.world.food = Cell(0, 0)
    game.tick()
    game.tick()
    assert alice.session_score == 1
    game.world.food = Cell(11, 10)
    game.tick()
    assert alice.session_score == 2
    assert game.ledger.best("alice") == 2


def test_spectator_block_is_broadcast(game):
    join(game, "alice")
    bob = join(game, "bob")
    clear_path(game)
    deliveries = game.handle(bob, PlaceBlock(Cell(15, 10)))
    assert {"x": 15, "y": 10} in states(deliveries)[0].obstacles


def test_player_cannot_place_blocks(game):
    alice = join(game, "alice")
    assert game.handle(alice, PlaceBlock(Cell(15, 10))) == []
    assert game.world.obstacles == set()


def test_unjoined_connection_cannot_place_blocks(game):
    join(game, "alice")
    lurker = game.connect("lurker")
    assert game.handle(lurker, PlaceBlock(Cell(15, 10))) == []


def test_block_takes_effect_on_the_next_tick(game):
    alice = join(game, "alice")
    bob = join(game, "bob")
    clear_path(game)
    game.handle(bob, PlaceBlock(Cell(12, 10)))
    game.tick()
    assert game.roles.player is alice
    deliveries = game.tick()
    assert GameOver() in received(deliveries, alice)
    assert game.roles.player is bob


def test_player_reset_rotates_and_resets_without_game_over(game):
    alice = join(game, "alice")
    bob = join(game, "bob")
    clear_path(game)
    game.world.place_obstacle(Cell(4, 4))
    game.tick()

    deliveries = game.handle(alice, Reset())

    assert kinds(received(deliveries, alice)) == ["roleAssignment", "updateGameState"]
    assert game.roles.player is bob
    assert game.world.snake.body == [Cell(10, 10)]
    assert game.world.obstacles == set()


def test_reset_from_spectator_is_ignored(game):
    alice = join(game, "alice")
    bob = join(game, "bob")
    clear_path(game)
    game.tick()
    assert game.handle(bob, Reset()) == []
    assert game.roles.player is alice
    assert game.world.snake.head == Cell(11, 10)


def test_player_disconnect_promotes_next(game):
    alice = join(game, "alice")
    bob = join(game, "bob")
    carol = join(game, "carol")

    deliveries = game.disconnect(alice)

    assert received(deliveries, bob)[0] == RoleAssignment(Role.PLAYER)
    assert game.roles.player is bob
    assert list(game.roles.queue) == [carol]
    assert {"name": "alice", "role": "player"} not in states(deliveries)[0].roster


def test_solo_player_disconnect_leaves_slot_empty_until_next_join(game):
    alice = join(game, "alice")
    game.disconnect(alice)
    assert game.roles.player is None
    assert game.tick() == []
    dave = join(game, "dave")
    assert game.roles.player is dave


def test_spectator_disconnect_does_not_promote(game):
    alice = join(game, "alice")
    bob = join(game, "bob")
    deliveries = game.disconnect(bob)
    assert [d for d in deliveries if isinstance(d.message, RoleAssignment)] == []
    assert game.roles.player is alice
    assert list(game.roles.queue) == []


def test_disconnect_is_idempotent(game):
    alice = join(game, "alice")
    assert game.disconnect(alice)
    assert game.disconnect(alice) == []
    assert game.handle(alice, Join()) == []


def test_invariants_hold_through_random_play():
    rng = random.Random(99)
    game = Game(GameSettings(grid_width=8, grid_height=8, start_cell=(4, 4), sabotage_cooldown=0), rng=random.Random(1))
    connections = []
    directions = [Cell(1, 0), Cell(-1, 0), Cell(0, 1), Cell(0, -1)]
    for step in range(600):
        action = rng.random()
        if action < 0.08 or not connections:
            connections.append(join(game, f"user{step}"))
        elif action < 0.12:
            game.disconnect(connections.pop(rng.randrange(len(connections))))
        elif action < 0.35:
            game.handle(rng.choice(connections), ChangeDirection(rng.choice(directions)))
        elif action < 0.50:
            game.handle(rng.choice(connections), PlaceBlock(Cell(rng.randrange(-1, 9), rng.randrange(-1, 9))))
        elif action < 0.52:
            game.handle(rng.choice(connections), Reset())
        else:
            game.tick()
        assert_invariants(game)
