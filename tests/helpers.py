"""Small assertions shared by the game tests."""

from snake_server.game import Delivery, Game
from snake_server.protocol import GameState, Join
from snake_server.registry import Connection, Role
from snake_server.utils import Cell


def join(game: Game, identity: str) -> Connection:
    conn = game.connect(identity)
    game.handle(conn, Join())
    return conn


def received(deliveries: list[Delivery], conn: Connection) -> list:
    """Messages ``conn`` would receive, in order."""

    return [d.message for d in deliveries if d.recipient is None or d.recipient is conn]


def kinds(messages: list) -> list[str]:
    return [message.to_dict()["type"] for message in messages]


def states(deliveries: list[Delivery]) -> list[GameState]:
    return [d.message for d in deliveries if isinstance(d.message, GameState)]


def clear_path(game: Game, food: Cell = Cell(0, 0)) -> None:
    """Park the food somewhere the snake will not reach."""

    game.world.food = food


def assert_invariants(game: Game) -> None:
    connections = game.registry.connections()
    players = [conn for conn in connections if conn.role is Role.PLAYER]
    assert len(players) <= 1
    if players:
        assert game.roles.player is players[0]
    assert all(conn.role is Role.SPECTATOR for conn in game.roles.queue)
    assert game.roles.player not in game.roles.queue
    body = game.world.snake.body
    assert len(body) == len(set(body))
    if game.world.food is not None:
        assert game.world.food not in body
        assert game.world.food not in game.world.obstacles
