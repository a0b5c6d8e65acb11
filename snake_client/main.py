"""Entry point for the pygame based client."""

from __future__ import annotations

import argparse
import asyncio

import pygame

from .entities import GameView
from .input import AbilityCooldown, cell_at, direction_for_key
from .network import NetworkClient, build_uri
from .render import Renderer

SIDEBAR_WIDTH = 240


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the snake sabotage client")
    parser.add_argument("--host", default="127.0.0.1", help="Server host")
    parser.add_argument("--port", type=int, default=8080, help="Server port")
    parser.add_argument("--token", help="Signed token issued by the server operator")
    parser.add_argument("--grid", type=int, nargs=2, default=(20, 20), metavar=("W", "H"), help="Board size")
    parser.add_argument("--cell-size", type=int, default=24, help="Pixels per board cell")
    parser.add_argument("--cooldown", type=float, default=60.0, help="Seconds between blocks")
    return parser.parse_args()


async def run_client(args: argparse.Namespace) -> None:
    pygame.init()
    grid = tuple(args.grid)
    size = (grid[0] * args.cell_size + SIDEBAR_WIDTH, grid[1] * args.cell_size)
    screen = pygame.display.set_mode(size)
    pygame.display.set_caption("Snake Sabotage")
    renderer = Renderer(screen, grid, args.cell_size)
    clock = pygame.time.Clock()

    network = NetworkClient(build_uri(args.host, args.port, token=args.token, guest=args.token is None))
    await network.connect()

    view = GameView()
    cooldown = AbilityCooldown(args.cooldown)
    running = True

    while running:
        clock.tick(60)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                key_name = pygame.key.name(event.key)
                direction = direction_for_key(key_name)
                if direction and view.role == "player":
                    await network.send_direction(*direction)
                elif key_name == "r" and view.role == "player":
                    await network.send_reset()
                view.acknowledge_game_over()
            elif event.type == pygame.MOUSEBUTTONDOWN and view.role == "spectator":
                cell = cell_at(event.pos, args.cell_size, grid)
                if cell is not None and cooldown.trigger():
                    await network.send_block(*cell)

        while network.pending():
            message = await network.next_message()
            if message.get("type") == "disconnect":
                running = False
                break
            view.apply(message)

        renderer.clear()
        renderer.draw_view(view)
        renderer.draw_sidebar(view, cooldown.remaining() if view.role == "spectator" else None)
        renderer.present()
        await asyncio.sleep(0)

    await network.close()
    pygame.quit()


def main() -> None:
    args = parse_args()
    asyncio.run(run_client(args))


if __name__ == "__main__":
    main()
