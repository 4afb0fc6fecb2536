"""Tests for the Snake module."""

import pytest

from crate_snake.snake import Direction, Snake


class TestDirection:
    def test_opposites(self):
        assert Direction.UP.opposite == Direction.DOWN
        assert Direction.LEFT.opposite == Direction.RIGHT

    def test_perpendiculars(self):
        assert Direction.UP.perpendiculars == (Direction.LEFT, Direction.RIGHT)
        assert Direction.RIGHT.perpendiculars == (Direction.UP, Direction.DOWN)

    def test_from_name(self):
        assert Direction.from_name("up") == Direction.UP
        assert Direction.from_name(" Left ") == Direction.LEFT
        assert Direction.from_name("sideways") is None
        assert Direction.from_name(None) is None


class TestSnakeInit:
    def test_default_creation(self):
        snake = Snake(5, 5)
        assert snake.head == (5, 5)
        assert len(snake) == 3
        assert snake.direction == Direction.RIGHT

    def test_body_extends_opposite_to_direction(self):
        snake = Snake(5, 5, Direction.RIGHT, length=3)
        assert list(snake.body) == [(5, 5), (5, 4), (5, 3)]

    def test_body_extends_up(self):
        snake = Snake(5, 5, Direction.UP, length=3)
        assert list(snake.body) == [(5, 5), (6, 5), (7, 5)]

    def test_minimum_length(self):
        with pytest.raises(ValueError, match="at least 1"):
            Snake(0, 0, length=0)


class TestSnakeMovement:
    def test_next_head(self):
        snake = Snake(5, 5, Direction.RIGHT)
        assert snake.next_head() == (5, 6)

    def test_next_head_with_override(self):
        snake = Snake(5, 5, Direction.RIGHT)
        assert snake.next_head(Direction.UP) == (4, 5)
        assert snake.direction == Direction.RIGHT


class TestSnakeResize:
    def test_grow_tail_reattaches_removed_cell(self):
        snake = Snake(5, 5, Direction.RIGHT, length=2)
        snake.grow_tail((5, 3))
        assert list(snake.body) == [(5, 5), (5, 4), (5, 3)]

    def test_grow_tail_duplicates_tail(self):
        snake = Snake(5, 5, Direction.RIGHT, length=2)
        snake.grow_tail()
        assert list(snake.body) == [(5, 5), (5, 4), (5, 4)]

    def test_shrink_keeps_head(self):
        snake = Snake(5, 5, Direction.RIGHT, length=4)
        assert snake.shrink(2) == 2
        assert list(snake.body) == [(5, 5), (5, 4)]
        assert snake.shrink(10) == 1
        assert list(snake.body) == [(5, 5)]


class TestSnakeCells:
    def test_len_counts_segments(self):
        assert len(Snake(5, 5, Direction.RIGHT, length=4)) == 4

    def test_cells_is_a_copy(self):
        snake = Snake(5, 5, Direction.RIGHT, length=2)
        cells = snake.cells()
        snake.body.appendleft((5, 6))
        assert cells == ((5, 5), (5, 4))
