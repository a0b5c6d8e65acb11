"""Reference pygame client for the snake sabotage game."""
