import threading
import unittest
from unittest import mock

from ludo_rules.engine import advance_turn
from ludo_rules.exceptions import RoomNotFoundError
from ludo_rules.roster import new_game_state, seat_players
from ludo_rules.store import RoomStore


class TestRoomStore(unittest.TestCase):
    def setUp(self):
        self.store = RoomStore()
        players = seat_players(["ann", "bo", "cy"], room_id="r1", player_ids=["a", "b", "c"])
        self.store.create(new_game_state(players, room_id="r1"))

    def test_create_requires_room_id(self):
        players = seat_players(["ann", "bo"])
        with self.assertRaises(ValueError):
            self.store.create(new_game_state(players))

    def test_duplicate_room_rejected(self):
        players = seat_players(["ann", "bo"])
        with self.assertRaises(ValueError):
            self.store.create(new_game_state(players, room_id="r1"))

    def test_get_returns_snapshot(self):
        snap = self.store.get("r1")
        snap.current_turn = 2
        self.assertEqual(self.store.get("r1").current_turn, 0)

    def test_transaction_commits(self):
        with self.store.transaction("r1") as state:
            state.dice_value = 4
            state.current_turn = advance_turn(state, 3, 4)
        stored = self.store.get("r1")
        self.assertEqual(stored.current_turn, 1)
        self.assertEqual(stored.dice_value, 4)

    def test_transaction_rolls_back_on_error(self):
        with self.assertRaises(RuntimeError):
            with self.store.transaction("r1") as state:
                state.current_turn = 2
                raise RuntimeError("boom")
        self.assertEqual(self.store.get("r1").current_turn, 0)

    def test_unknown_room(self):
        with self.assertRaises(RoomNotFoundError):
            self.store.get("nope")
        with self.assertRaises(RoomNotFoundError):
            with self.store.transaction("nope"):
                pass

    def test_delete(self):
        self.assertIn("r1", self.store)
        self.store.delete("r1")
        self.assertNotIn("r1", self.store)
        self.assertEqual(len(self.store), 0)
        with self.assertRaises(RoomNotFoundError):
            self.store.delete("r1")

    def test_stale_lock_after_recreate_rejected(self):
        stale = self.store._lock_for("r1")
        self.store.delete("r1")
        players = seat_players(["ann", "bo"], room_id="r1", player_ids=["a", "b"])
        self.store.create(new_game_state(players, room_id="r1"))
        with mock.patch.object(self.store, "_lock_for", return_value=stale):
            with self.assertRaises(RoomNotFoundError):
                with self.store.transaction("r1") as state:
                    state.current_turn = 1
            with self.assertRaises(RoomNotFoundError):
                self.store.get("r1")
        self.assertEqual(self.store.get("r1").current_turn, 0)
        self.assertIn("r1", self.store)

    def test_serialized_read_compute_write(self):
        def bump():
            for _ in range(50):
                with self.store.transaction("r1") as state:
                    state.current_turn = advance_turn(state, 3, 1)

        threads = [threading.Thread(target=bump) for _ in range(6)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        # 300 single-step advances over 3 seats land back on seat 0
        self.assertEqual(self.store.get("r1").current_turn, 300 % 3)

    def test_rooms_are_independent(self):
        players = seat_players(["x", "y"], room_id="r2")
        self.store.create(new_game_state(players, room_id="r2"))
        with self.store.transaction("r2") as state:
            state.current_turn = 1
        self.assertEqual(self.store.get("r1").current_turn, 0)
        self.assertEqual(sorted(self.store.room_ids()), ["r1", "r2"])


if __name__ == "__main__":
    unittest.main()
