"""Pygame based renderer for the game client."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

import pygame

from .entities import GameView


class Renderer:
    """Responsible for all drawing tasks."""

    def __init__(self, screen: pygame.Surface, grid: Tuple[int, int], cell_size: int) -> None:
        self.screen = screen
        self.grid = grid
        self.cell_size = cell_size
        self.font = pygame.font.SysFont("arial", 18)
        self.sidebar_font = pygame.font.SysFont("arial", 16)
        self.background_color = (20, 24, 28)
        self.board_color = (34, 40, 46)
        self.snake_color = (0, 220, 90)
        self.obstacle_color = (220, 50, 50)
        self.food_color = (250, 210, 60)

    def clear(self) -> None:
        self.screen.fill(self.background_color)

    def _cell_rect(self, cell: Tuple[int, int]) -> pygame.Rect:
        size = self.cell_size
        return pygame.Rect(cell[0] * size, cell[1] * size, size, size)

    def draw_board(self) -> None:
        width, height = self.grid
        pygame.draw.rect(
            self.screen, self.board_color, pygame.Rect(0, 0, width * self.cell_size, height * self.cell_size)
        )

    def draw_cells(self, cells: Iterable[Tuple[int, int]], color: Tuple[int, int, int]) -> None:
        for cell in cells:
            pygame.draw.rect(self.screen, color, self._cell_rect(cell))

    def draw_view(self, view: GameView) -> None:
        self.draw_board()
        self.draw_cells(view.obstacles, self.obstacle_color)
        if view.food is not None:
            self.draw_cells([view.food], self.food_color)
        self.draw_cells(view.snake, self.snake_color)

    def draw_sidebar(self, view: GameView, cooldown_remaining: Optional[float]) -> None:
        x = self.grid[0] * self.cell_size + 16
        y = 16
        banner = f"You are a {view.role}"
        self.screen.blit(self.font.render(banner, True, (255, 255, 255)), (x, y))
        y += 26
        if cooldown_remaining is not None:
            text = "Block ready (click)" if cooldown_remaining <= 0 else f"Block in {cooldown_remaining:.0f}s"
            self.screen.blit(self.sidebar_font.render(text, True, (200, 200, 200)), (x, y))
            y += 22
        if view.game_over:
            self.screen.blit(self.font.render("Game over!", True, (255, 90, 90)), (x, y))
            y += 26

        y += 10
        self.screen.blit(self.sidebar_font.render("Players", True, (255, 255, 255)), (x, y))
        y += 20
        for entry in view.roster:
            surface = self.sidebar_font.render(f"{entry.name} ({entry.role})", True, (220, 220, 220))
            self.screen.blit(surface, (x, y))
            y += 18

        y += 10
        self.screen.blit(self.sidebar_font.render("High scores", True, (255, 255, 255)), (x, y))
        y += 20
        for index, entry in enumerate(view.leaderboard):
            surface = self.sidebar_font.render(f"{index + 1}. {entry.name} - {entry.score}", True, (220, 220, 220))
            self.screen.blit(surface, (x, y))
            y += 18

    def present(self) -> None:
        pygame.display.flip()
