#!/usr/bin/env python3
"""
Example usage of the lifeterm package.
"""

from lifeterm import Dimensions, GameOfLife, Grid


def main():
    """Demonstrate programmatic usage of the lifeterm engine."""
    # Place a blinker in the middle of a small board
    grid = Grid(5, 5)
    for col in (1, 2, 3):
        grid.set_cell(2, col, True)

    game = GameOfLife(grid)
    print("Initial state:")
    print(game.grid)
    print(f"Population: {game.population}")
    print()

    for _ in range(4):
        game.step()
        print(f"Generation {game.generation}:")
        print(game.grid)
        print()

    # A random board with a live wall
    walled = GameOfLife.random(Dimensions(rows=8, cols=20), live_probability=0.3, border=True)
    print("Walled random board:")
    print(walled.grid)


if __name__ == "__main__":
    main()
