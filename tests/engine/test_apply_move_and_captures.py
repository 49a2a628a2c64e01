import unittest

from ludo_rules.board import SAFE_CELLS, occupancy_grid
from ludo_rules.engine import apply_move, compute_legal_moves
from ludo_rules.exceptions import (
    GameOverError,
    IllegalMoveError,
    InvalidDieValue,
    UnknownTokenError,
)
from ludo_rules.types import Color, GameState, Token, TokenRegion


def make_token(color: Color, position: int, index: int = 1) -> Token:
    pid = f"{color.value}-player"
    return Token(
        token_id=f"{pid}-{index}",
        player_id=pid,
        color=color,
        token_index=index,
        position=position,
        is_home=position == 0,
        is_finished=position == 59,
    )


class TestApplyMove(unittest.TestCase):
    def test_leaving_home(self):
        red = make_token(Color.RED, 0)
        result = apply_move(red, 1, [red], 6)
        self.assertEqual(result.token.position, 1)
        self.assertFalse(result.token.is_home)
        self.assertFalse(result.token.is_finished)
        self.assertTrue(result.exited_home)
        self.assertEqual(result.token.region, TokenRegion.PATH)

    def test_input_roster_is_not_mutated(self):
        red = make_token(Color.RED, 5)
        blue = make_token(Color.BLUE, 8)
        roster = [red, blue]
        result = apply_move(red, 8, roster, 3)
        self.assertEqual(roster, [red, blue])
        self.assertEqual(red.position, 5)
        self.assertEqual(blue.position, 8)
        self.assertEqual([t.token_id for t in result.roster], [red.token_id, blue.token_id])

    def test_reaching_finish(self):
        green = make_token(Color.GREEN, 56)
        result = apply_move(green, 59, [green], 3)
        self.assertTrue(result.finished)
        self.assertTrue(result.token.is_finished)
        self.assertEqual(result.token.region, TokenRegion.FINISHED)

    def test_entering_final_stretch_never_captures(self):
        red = make_token(Color.RED, 50)
        blue = make_token(Color.BLUE, 54)
        result = apply_move(red, 54, [red, blue], 4)
        self.assertEqual(result.token.region, TokenRegion.FINAL_STRETCH)
        self.assertEqual(result.captured, [])
        self.assertEqual(result.roster[1].position, 54)

    def test_target_outside_legal_moves_rejected(self):
        red = make_token(Color.RED, 10)
        with self.assertRaises(IllegalMoveError):
            apply_move(red, 12, [red], 3)

    def test_string_color_token_rejected_with_illegal_move(self):
        red = Token("t", "p", "red", 1, position=10, is_home=False)
        self.assertIs(red.color, Color.RED)
        with self.assertRaises(IllegalMoveError):
            apply_move(red, 30, [red], 3)

    def test_home_token_without_six_rejected(self):
        red = make_token(Color.RED, 0)
        with self.assertRaises(IllegalMoveError):
            apply_move(red, 1, [red], 5)

    def test_finished_token_rejected(self):
        red = make_token(Color.RED, 59)
        with self.assertRaises(IllegalMoveError):
            apply_move(red, 59, [red], 1)

    def test_overshoot_rejected(self):
        red = make_token(Color.RED, 57)
        with self.assertRaises(IllegalMoveError):
            apply_move(red, 59, [red], 5)

    def test_unknown_token_rejected(self):
        red = make_token(Color.RED, 10)
        blue = make_token(Color.BLUE, 20)
        with self.assertRaises(UnknownTokenError):
            apply_move(red, 13, [blue], 3)

    def test_stale_token_rejected(self):
        stale = make_token(Color.RED, 10)
        current = make_token(Color.RED, 20)
        with self.assertRaises(IllegalMoveError):
            apply_move(stale, 13, [current], 3)

    def test_invalid_die_rejected(self):
        red = make_token(Color.RED, 10)
        with self.assertRaises(InvalidDieValue):
            apply_move(red, 17, [red], 7)

    def test_move_after_win_rejected(self):
        red = make_token(Color.RED, 10)
        with self.assertRaises(GameOverError):
            apply_move(red, 13, [red], 3, state=GameState(winner="red-player"))


class TestCaptures(unittest.TestCase):
    def test_capture_on_plain_cell(self):
        red = make_token(Color.RED, 2)
        blue = make_token(Color.BLUE, 5)
        result = apply_move(red, 5, [red, blue], 3)
        self.assertEqual([t.token_id for t in result.captured], [blue.token_id])
        sent_home = result.roster[1]
        self.assertEqual(sent_home.position, 0)
        self.assertTrue(sent_home.is_home)
        self.assertFalse(sent_home.is_finished)
        self.assertEqual(result.roster[0].position, 5)

    def test_multiple_opponents_captured_together(self):
        red = make_token(Color.RED, 20)
        blue1 = make_token(Color.BLUE, 24, index=1)
        blue2 = make_token(Color.BLUE, 24, index=2)
        green = make_token(Color.GREEN, 24)
        yellow = make_token(Color.YELLOW, 30)
        result = apply_move(red, 24, [red, blue1, blue2, green, yellow], 4)
        self.assertEqual(len(result.captured), 3)
        self.assertEqual([t.position for t in result.roster], [24, 0, 0, 0, 30])

    def test_only_mover_remains_on_non_safe_cell(self):
        red = make_token(Color.RED, 40)
        others = [make_token(Color.BLUE, 44, index=i) for i in (1, 2)]
        others.append(make_token(Color.YELLOW, 44))
        result = apply_move(red, 44, [red, *others], 4)
        grid = occupancy_grid(result.roster)
        self.assertEqual(int(grid[:, 44].sum()), 1)
        self.assertEqual(int(grid[list(Color).index(Color.RED), 44]), 1)

    def test_same_color_tokens_stack(self):
        red1 = make_token(Color.RED, 3, index=1)
        red2 = make_token(Color.RED, 6, index=2)
        result = apply_move(red1, 6, [red1, red2], 3)
        self.assertEqual(result.captured, [])
        self.assertEqual([t.position for t in result.roster], [6, 6])

    def test_safe_cell_protects_occupant(self):
        # 9 is a safe cell for every colour
        red = make_token(Color.RED, 5)
        blue = make_token(Color.BLUE, 9)
        self.assertIn(9, SAFE_CELLS[Color.BLUE])
        result = apply_move(red, 9, [red, blue], 4)
        self.assertEqual(result.captured, [])
        self.assertEqual([t.position for t in result.roster], [9, 9])

    def test_entry_cell_protects_occupant(self):
        blue = make_token(Color.BLUE, 10)
        red = make_token(Color.RED, 14)
        result = apply_move(blue, 14, [blue, red], 4)
        self.assertEqual(result.captured, [])
        self.assertEqual(result.roster[1].position, 14)

    def test_entering_board_onto_occupied_entry_is_safe(self):
        red_home = make_token(Color.RED, 0)
        green = make_token(Color.GREEN, 1)
        moves = compute_legal_moves(red_home, 6)
        result = apply_move(red_home, moves[0], [red_home, green], 6)
        self.assertEqual(result.captured, [])
        self.assertEqual([t.position for t in result.roster], [1, 1])

    def test_safe_cells_never_evict_any_color(self):
        for cell in SAFE_CELLS[Color.RED]:
            if cell <= 1:
                continue
            for victim_color in (Color.BLUE, Color.GREEN, Color.YELLOW):
                red = make_token(Color.RED, cell - 1)
                victim = make_token(victim_color, cell)
                result = apply_move(red, cell, [red, victim], 1)
                self.assertEqual(result.captured, [], f"{victim_color} at {cell}")


if __name__ == "__main__":
    unittest.main()
