import unittest

from courtside.models import (
    GameFormat, MatchPlanRecord, PlayerTime, Position, assign_player, benched_player_ids,
    credit_occupants, empty_occupancy, on_court_player_ids, position_of, unassign_player,
    zero_time_table
)


class OccupancyTests(unittest.TestCase):
    def test_move_to_empty_slot_leaves_previous_slot_empty(self) -> None:
        result = assign_player({"GS": "A", "GA": None}, "GA", "A")
        self.assertEqual(result, {"GS": None, "GA": "A"})

    def test_assign_onto_occupied_slot_swaps(self) -> None:
        result = assign_player({"GS": "A", "GA": "B"}, "GS", "B")
        self.assertEqual(result, {"GS": "B", "GA": "A"})

    def test_bench_player_displaces_occupant(self) -> None:
        result = assign_player({"GS": "A", "GA": None}, "GS", "C")
        self.assertEqual(result, {"GS": "C", "GA": None})

    def test_unknown_position_is_ignored(self) -> None:
        occupancy = {"GS": "A"}
        self.assertEqual(assign_player(occupancy, "XX", "B"), {"GS": "A"})

    def test_inputs_are_not_mutated(self) -> None:
        occupancy = {"GS": "A", "GA": None}
        assign_player(occupancy, "GA", "A")
        unassign_player(occupancy, "A")
        self.assertEqual(occupancy, {"GS": "A", "GA": None})

    def test_unassign(self) -> None:
        self.assertEqual(unassign_player({"GS": "A"}, "A"), {"GS": None})
        self.assertEqual(unassign_player({"GS": "A"}, "Z"), {"GS": "A"})

    def test_exclusivity_over_operation_sequence(self) -> None:
        occupancy = empty_occupancy(["GS", "GA", "WA", "C"])
        operations = [
            ("assign", "GS", "A"), ("assign", "GA", "B"), ("assign", "GA", "A"),
            ("assign", "C", "B"), ("unassign", None, "A"), ("assign", "WA", "C"),
            ("assign", "C", "C"), ("assign", "GS", "B"), ("assign", "GS", "D"),
        ]
        for op, position, player in operations:
            if op == "assign":
                occupancy = assign_player(occupancy, position, player)
            else:
                occupancy = unassign_player(occupancy, player)
            on_court = on_court_player_ids(occupancy)
            self.assertEqual(len(on_court), len(set(on_court)))

    def test_bench_and_lookup_helpers(self) -> None:
        occupancy = {"GS": "A", "GA": None}
        self.assertEqual(position_of(occupancy, "A"), "GS")
        self.assertIsNone(position_of(occupancy, "B"))
        self.assertEqual(benched_player_ids(occupancy, ["A", "B", "C"]), ["B", "C"])


class PlayerTimeTests(unittest.TestCase):
    def test_credit_updates_total_and_bucket_together(self) -> None:
        time_info = PlayerTime().credit("GS", 30).credit("GA", 15).credit("GS", 5)
        self.assertEqual(time_info.total_seconds, 50)
        self.assertEqual(time_info.positions, {"GS": 35, "GA": 15})
        self.assertEqual(time_info.total_seconds, sum(time_info.positions.values()))

    def test_non_positive_credit_is_ignored(self) -> None:
        time_info = PlayerTime().credit("GS", 0).credit("GS", -4)
        self.assertEqual(time_info.total_seconds, 0)

    def test_merge(self) -> None:
        merged = PlayerTime().credit("GS", 10).merge(PlayerTime().credit("GS", 5).credit("C", 7))
        self.assertEqual(merged.to_dict(), {"total": 22, "positions": {"GS": 15, "C": 7}})

    def test_credit_occupants_only_credits_known_players(self) -> None:
        table = zero_time_table(["A", "B"], ["GS", "GA"])
        table = credit_occupants(table, {"GS": "A", "GA": "Z"}, 12)
        self.assertEqual(table["A"].seconds_in("GS"), 12)
        self.assertEqual(table["B"].total_seconds, 0)
        self.assertNotIn("Z", table)


class GameFormatTests(unittest.TestCase):
    def setUp(self) -> None:
        self.game_format = GameFormat(
            id="f1", name="Standard", team_size=2, number_of_periods=4, period_duration=15,
            positions=[Position("p1", "Goal Shooter", "GS"), Position("p2", "Goal Attack", "GA")],
        )

    def test_clone_temporary(self) -> None:
        clone = self.game_format.clone_temporary(2, 20)
        self.assertNotEqual(clone.id, "f1")
        self.assertEqual(clone.name, "Standard (Custom)")
        self.assertTrue(clone.is_temporary)
        self.assertEqual(clone.period_duration_seconds, 1200)
        self.assertEqual(clone.abbreviations, ["GS", "GA"])
        self.assertEqual(self.game_format.number_of_periods, 4)

    def test_record_round_trip_clamps_timing(self) -> None:
        record = self.game_format.to_record()
        self.assertEqual(record["numberOfPeriods"], 4)
        record["periodDuration"] = 0
        loaded = GameFormat.from_record(record, self.game_format.positions)
        self.assertEqual(loaded.period_duration, 1)
        self.assertEqual(loaded.abbreviations, ["GS", "GA"])

    def test_null_stored_fields_use_defaults(self) -> None:
        loaded = GameFormat.from_record(
            {"id": "f2", "teamSize": None, "numberOfPeriods": None, "periodDuration": "x"}
        )
        self.assertEqual(loaded.team_size, 0)
        self.assertEqual(loaded.number_of_periods, 4)
        self.assertEqual(loaded.period_duration, 15)

    def test_plan_record_with_null_quarter(self) -> None:
        record = MatchPlanRecord.from_record({"id": "p1", "quarter": None, "playerPositions": None})
        self.assertEqual(record.quarter, 0)
        self.assertEqual(record.player_positions, [])


if __name__ == "__main__":
    unittest.main()
