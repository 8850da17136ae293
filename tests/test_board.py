"""Unit tests for the board model and validation."""

import pytest
import numpy as np
from sudoku_csp.core.board import Board, Tile
from sudoku_csp.core.errors import ConstraintViolationError
from sudoku_csp.core.validator import (
    is_valid_placement, is_valid_board, find_conflicts, validate_solution
)
from sudoku_csp.solvers.trace import ValueChangeRecorder


TEST_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

TEST_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


class TestBoardConstruction:
    """Tests for building boards."""

    def test_create_9x9(self):
        """Test geometry and variables of a 9x9 puzzle."""
        board = Board.from_string(TEST_PUZZLE)
        assert board.size == 9
        assert board.box_size == 3
        assert board.var_count == 51
        assert board.count_empty() == 51
        assert board.count_filled() == 30
        assert board.variables[0] == (0, 2)
        assert board.variables == sorted(board.variables)

    def test_create_16x16_from_letters(self):
        """Test a 16x16 string with letters for values above 9."""
        puzzle = "G" + "0" * 254 + "A"
        board = Board.from_string(puzzle)
        assert board.size == 16
        assert board.box_size == 4
        assert board.get(0, 0) == 16
        assert board.get(15, 15) == 10
        assert board.to_string() == puzzle

    def test_dots_are_empty(self):
        """Test that '.' reads as an empty tile."""
        board = Board.from_string("." * 80 + "9")
        assert board.is_empty(0, 0)
        assert board.get(8, 8) == 9

    def test_from_2d_list(self):
        """Test building from nested lists."""
        board = Board.from_2d_list([[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]])
        assert board.size == 4
        assert board.box_size == 2
        assert board.is_given((0, 0))
        assert not board.is_given((0, 1))

    @pytest.mark.parametrize("grid", [
        np.zeros((3, 4), dtype=int),
        np.zeros((5, 5), dtype=int),
        np.zeros((0, 0), dtype=int),
        np.zeros(9, dtype=int),
    ])
    def test_rejects_bad_shape(self, grid):
        """Test that non-square or non-perfect-square grids are rejected."""
        with pytest.raises(ValueError):
            Board(grid)

    def test_rejects_out_of_range_values(self):
        """Test that values above N are rejected."""
        grid = np.zeros((4, 4), dtype=int)
        grid[0, 0] = 5
        with pytest.raises(ValueError):
            Board(grid)

    def test_rejects_bad_string(self):
        """Test wrong length and unexpected characters."""
        with pytest.raises(ValueError):
            Board.from_string("123")
        with pytest.raises(ValueError):
            Board.from_string("?" * 81)

    def test_duplicate_givens_accepted(self):
        """Test that inconsistent givens are left for the search to find."""
        board = Board.from_string("55" + "0" * 79)
        assert board.rows[0] == {5}
        assert not board.is_valid()


class TestBoardMutation:
    """Tests for assign and unassign."""

    def test_assign_updates_used_sets(self):
        """Test that a value lands in its row, column and block sets."""
        board = Board.from_string(TEST_PUZZLE)
        board.assign((0, 2), 4)
        assert board.get(0, 2) == 4
        assert 4 in board.rows[0]
        assert 4 in board.cols[2]
        assert 4 in board.blocks[0]
        assert board.is_used((1, 1), 4)

    def test_unassign_is_exact_inverse(self):
        """Test that undoing an assignment restores every used set."""
        board = Board.from_string(TEST_PUZZLE)
        before = ([set(s) for s in board.rows], [set(s) for s in board.cols],
                  [set(s) for s in board.blocks])

        board.assign((0, 2), 4)
        board.assign((4, 4), 5)
        assert board.unassign((4, 4)) == 5
        assert board.unassign((0, 2)) == 4

        assert (board.rows, board.cols, board.blocks) == before
        assert board.to_string() == TEST_PUZZLE

    def test_assign_given_fails(self):
        """Test that givens cannot be overwritten."""
        board = Board.from_string(TEST_PUZZLE)
        with pytest.raises(ConstraintViolationError):
            board.assign((0, 0), 1)

    def test_assign_used_value_fails(self):
        """Test that a value already in the row is refused."""
        board = Board.from_string(TEST_PUZZLE)
        with pytest.raises(ConstraintViolationError):
            board.assign((0, 2), 5)

    def test_assign_twice_fails(self):
        """Test that an assigned tile must be cleared first."""
        board = Board.from_string(TEST_PUZZLE)
        board.assign((0, 2), 4)
        with pytest.raises(ConstraintViolationError):
            board.assign((0, 2), 1)

    def test_assign_out_of_range_fails(self):
        board = Board.from_string(TEST_PUZZLE)
        with pytest.raises(ConstraintViolationError):
            board.assign((0, 2), 10)

    def test_unassign_errors(self):
        """Test that givens and empty tiles cannot be cleared."""
        board = Board.from_string(TEST_PUZZLE)
        with pytest.raises(ConstraintViolationError):
            board.unassign((0, 0))
        with pytest.raises(ConstraintViolationError):
            board.unassign((0, 2))

    def test_observer_sees_every_change(self):
        """Test that assign and unassign are both reported."""
        recorder = ValueChangeRecorder()
        board = Board.from_string(TEST_PUZZLE, observer=recorder)
        board.assign((0, 2), 4)
        board.unassign((0, 2))
        assert recorder.changes == [((0, 2), 4), ((0, 2), 0)]


class TestDomains:
    """Tests for the recompute-from-scratch domain queries."""

    def test_domain_of(self):
        """Test candidates of a tile in ascending order."""
        board = Board.from_string(TEST_PUZZLE)
        # Row 0 has 5 3 7, column 2 has 8, block 0 has 6 9 8.
        assert board.domain_of((0, 2)) == [1, 2, 4]

    def test_domain_of_given_is_empty(self):
        board = Board.from_string(TEST_PUZZLE)
        assert board.domain_of((0, 0)) == []

    def test_has_empty_domain_in_peers(self):
        """Test the local dead-end check."""
        board = Board.from_string("123456780" + "0" * 72)
        assert not board.has_empty_domain_in_peers((0, 0))

        grid = np.zeros((9, 9), dtype=int)
        grid[0, :8] = [1, 2, 3, 4, 5, 6, 7, 8]
        grid[1, 8] = 9
        board = Board(grid)
        assert board.domain_of((0, 8)) == []
        assert board.has_empty_domain_in_peers((0, 0))
        assert not board.has_empty_domain_in_peers((8, 0))

    def test_smallest_domain_variable(self):
        """Test that the first variable with the fewest candidates is chosen."""
        board = Board.from_string("123456780" + "0" * 72)
        assert board.smallest_domain_variable() == (0, 8)

    def test_smallest_domain_prefers_empty(self):
        grid = np.zeros((9, 9), dtype=int)
        grid[0, :8] = [1, 2, 3, 4, 5, 6, 7, 8]
        grid[1, 8] = 9
        board = Board(grid)
        assert board.smallest_domain_variable() == (0, 8)

    def test_smallest_domain_variable_none_when_complete(self):
        board = Board.from_string(TEST_SOLUTION)
        assert board.smallest_domain_variable() is None


class TestBoardQueries:
    """Tests for whole-board helpers and conversions."""

    def test_peers(self):
        """Test that every tile has 20 peers on a 9x9 board."""
        board = Board.from_string(TEST_PUZZLE)
        peers = board.peers((4, 4))
        assert len(peers) == 20
        assert (4, 4) not in peers
        assert (3, 3) in peers and (4, 0) in peers and (0, 4) in peers

    def test_tile(self):
        board = Board.from_string(TEST_PUZZLE)
        assert board.tile((4, 5)) == Tile((4, 5), (1, 1), 3, True)
        assert board.tile((8, 0)) == Tile((8, 0), (2, 0), 0, False)

    def test_block_index(self):
        board = Board.from_string("0" * 256)
        assert board.block_index(0, 0) == 0
        assert board.block_index(5, 9) == 6
        assert board.block_index(15, 15) == 15

    def test_is_solved(self):
        assert Board.from_string(TEST_SOLUTION).is_solved()
        assert not Board.from_string(TEST_PUZZLE).is_solved()

    def test_copy_keeps_givens_and_assignments(self):
        """Test that a copy is independent and keeps both kinds of tiles."""
        board = Board.from_string(TEST_PUZZLE)
        board.assign((0, 2), 4)
        copy = board.copy()

        assert copy == board
        assert copy.is_given((0, 0))
        assert not copy.is_given((0, 2))
        assert copy.variables == board.variables

        copy.unassign((0, 2))
        assert board.get(0, 2) == 4

    def test_copy_does_not_replay_to_observer(self):
        recorder = ValueChangeRecorder()
        board = Board.from_string(TEST_PUZZLE)
        board.assign((0, 2), 4)
        copy = board.copy(observer=recorder)
        assert len(recorder) == 0
        copy.unassign((0, 2))
        assert recorder.changes == [((0, 2), 0)]

    def test_givens_grid(self):
        board = Board.from_string(TEST_PUZZLE)
        board.assign((0, 2), 4)
        assert Board(board.givens_grid()).to_string() == TEST_PUZZLE

    def test_str(self):
        text = str(Board.from_string(TEST_PUZZLE))
        assert "5" in text and "." in text


class TestValidator:
    """Tests for the validation helpers."""

    def test_is_valid_placement(self):
        board = Board.from_string(TEST_PUZZLE)
        assert is_valid_placement(board, 0, 2, 4)
        assert not is_valid_placement(board, 0, 2, 5)
        assert not is_valid_placement(board, 0, 0, 1)
        assert not is_valid_placement(board, 0, 2, 0)

    def test_is_valid_board(self):
        assert is_valid_board(Board.from_string(TEST_PUZZLE))
        assert not is_valid_board(Board.from_string("11" + "0" * 79))

    def test_find_conflicts(self):
        """Test that every repeated value is named."""
        board = Board.from_string("11" + "0" * 79)
        conflicts = find_conflicts(board)
        assert "row 0 repeats 1" in conflicts
        assert "block 0 repeats 1" in conflicts
        assert not any(c.startswith("column") for c in conflicts)
        assert find_conflicts(Board.from_string(TEST_SOLUTION)) == []

    def test_validate_solution(self):
        puzzle = Board.from_string(TEST_PUZZLE)
        assert validate_solution(puzzle, Board.from_string(TEST_SOLUTION))
        assert not validate_solution(puzzle, Board.from_string(TEST_PUZZLE))

        # A valid grid that changes a given.
        swapped = TEST_SOLUTION.translate(str.maketrans("12", "21"))
        assert not validate_solution(puzzle, Board.from_string(swapped))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
