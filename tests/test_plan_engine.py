import unittest
from unittest.mock import MagicMock

from courtside.models import GameFormat, MatchPlanRecord, Player, PlayerPosition, Position
from courtside.services import (
    CollectingNotifier, DocumentStoreError, PlanPersistenceService, SubstitutionPlanEngine,
    build_plan, derive_period_times
)


def make_format(periods: int = 2, minutes: int = 15) -> GameFormat:
    return GameFormat(
        id="f1",
        name="Test",
        number_of_periods=periods,
        period_duration=minutes,
        positions=[Position("p1", "Goal Shooter", "GS"), Position("p2", "Goal Attack", "GA")],
    )


PLAYERS = [Player("A", "Ana"), Player("B", "Bea"), Player("C", "Cal")]


def records():
    return [
        MatchPlanRecord(id="plan-1", quarter=1, match_id="m1"),
        MatchPlanRecord(id="plan-2", quarter=2, match_id="m1"),
    ]


class PlanDerivationTests(unittest.TestCase):
    def test_prefix_sum_across_periods(self) -> None:
        plan = {1: {"GS": "A", "GA": None}, 2: {"GS": "B", "GA": None}}
        tables = derive_period_times(plan, 2, 900)

        self.assertEqual(tables[1]["A"].total_seconds, 900)
        self.assertNotIn("B", tables[1])
        self.assertEqual(tables[2]["A"].to_dict(), {"total": 900, "positions": {"GS": 900}})
        self.assertEqual(tables[2]["B"].to_dict(), {"total": 900, "positions": {"GS": 900}})

    def test_derivation_is_repeatable(self) -> None:
        plan = {1: {"GS": "A", "GA": "B"}, 2: {"GS": "B", "GA": "C"}}
        first = derive_period_times(plan, 2, 600, ["A", "B", "C"])
        second = derive_period_times(plan, 2, 600, ["A", "B", "C"])
        self.assertEqual(first, second)
        self.assertEqual(plan, {1: {"GS": "A", "GA": "B"}, 2: {"GS": "B", "GA": "C"}})

    def test_known_players_get_rows_and_strangers_are_skipped(self) -> None:
        plan = {1: {"GS": "A", "GA": "ghost"}}
        tables = derive_period_times(plan, 1, 60, ["A", "B"])
        self.assertEqual(set(tables[1]), {"A", "B"})
        self.assertEqual(tables[1]["B"].total_seconds, 0)

    def test_build_plan_skips_bad_records(self) -> None:
        stored = [
            MatchPlanRecord("p1", 1, "m1", [PlayerPosition("GS", "A"), PlayerPosition("XX", "B")]),
            MatchPlanRecord("p9", 9, "m1", [PlayerPosition("GS", "C")]),
        ]
        plan = build_plan(2, ["GS", "GA"], stored)
        self.assertEqual(plan, {1: {"GS": "A", "GA": None}, 2: {"GS": None, "GA": None}})


class SubstitutionPlanEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = SubstitutionPlanEngine(make_format(), PLAYERS, records())

    def test_assign_returns_command_for_that_period(self) -> None:
        command = self.engine.assign(2, "GS", "A")
        self.assertEqual(command.period, 2)
        self.assertEqual(command.plan_id, "plan-2")
        self.assertEqual(command.player_positions, (PlayerPosition("GS", "A"),))
        self.assertEqual(self.engine.plan[1], {"GS": None, "GA": None})

    def test_swap_within_period(self) -> None:
        self.engine.assign(1, "GS", "A")
        self.engine.assign(1, "GA", "B")
        command = self.engine.assign(1, "GS", "B")
        self.assertEqual(self.engine.plan[1], {"GS": "B", "GA": "A"})
        self.assertEqual(
            command.player_positions, (PlayerPosition("GS", "B"), PlayerPosition("GA", "A"))
        )

    def test_unknown_inputs_return_none(self) -> None:
        self.assertIsNone(self.engine.assign(3, "GS", "A"))
        self.assertIsNone(self.engine.assign(1, "XX", "A"))
        self.assertIsNone(self.engine.assign(1, "GS", "nobody"))
        self.assertIsNone(self.engine.unassign(1, "nobody"))

    def test_unassign_emits_command(self) -> None:
        self.engine.assign(1, "GS", "A")
        command = self.engine.unassign(1, "A")
        self.assertEqual(command.player_positions, ())
        self.assertEqual(self.engine.plan[1]["GS"], None)

    def test_missing_record_gives_command_without_plan_id(self) -> None:
        engine = SubstitutionPlanEngine(make_format(), PLAYERS, records()[:1])
        command = engine.assign(2, "GS", "A")
        self.assertIsNone(command.plan_id)
        self.assertEqual(engine.plan_id_for(1), "plan-1")
        self.assertIsNone(engine.plan_id_for(2))

    def test_final_totals_and_snapshot(self) -> None:
        self.engine.assign(1, "GS", "A")
        self.engine.assign(2, "GS", "B")
        self.engine.assign(2, "GA", "A")
        totals = self.engine.final_totals()
        self.assertEqual(totals["A"].positions, {"GS": 900, "GA": 900})
        self.assertEqual(totals["C"].total_seconds, 0)

        snapshot = self.engine.snapshot()
        period_two = snapshot["periods"][1]
        self.assertEqual(period_two["plan_id"], "plan-2")
        self.assertEqual(period_two["on_court_count"], 2)
        self.assertEqual(period_two["bench"], ["C"])
        self.assertEqual(period_two["players"]["A"]["total_display"], "30m")

    def test_reload_period_replaces_working_copy(self) -> None:
        self.engine.assign(1, "GS", "A")
        self.engine.reload_period(MatchPlanRecord("plan-1", 1, "m1", [PlayerPosition("GA", "C")]))
        self.assertEqual(self.engine.plan[1], {"GS": None, "GA": "C"})


class PlanPersistenceServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = MagicMock()
        self.notifier = CollectingNotifier()
        self.service = PlanPersistenceService(self.repository, self.notifier)
        self.engine = SubstitutionPlanEngine(make_format(), PLAYERS, records())

    def test_success_writes_period_record(self) -> None:
        command = self.engine.assign(2, "GA", "C")
        self.assertTrue(self.service.execute("m1", command, self.engine))

        self.repository.update_match_plan_positions.assert_called_once_with(
            "m1", "plan-2", (PlayerPosition("GA", "C"),)
        )
        notes = self.notifier.drain()
        self.assertEqual(notes[0].title, "Period 2 plan updated.")
        self.assertFalse(notes[0].is_error)

    def test_missing_plan_id_notifies_error(self) -> None:
        engine = SubstitutionPlanEngine(make_format(), PLAYERS, [])
        command = engine.assign(1, "GS", "A")
        self.assertFalse(self.service.execute("m1", command, engine))

        self.repository.update_match_plan_positions.assert_not_called()
        notes = self.notifier.drain()
        self.assertTrue(notes[0].is_error)
        self.assertEqual(notes[0].description, "Could not find plan for period 1.")

    def test_failed_write_reconciles_from_storage(self) -> None:
        self.repository.update_match_plan_positions.side_effect = DocumentStoreError("offline")
        self.repository.get_match_plan.return_value = MatchPlanRecord(
            "plan-1", 1, "m1", [PlayerPosition("GS", "B")]
        )
        command = self.engine.assign(1, "GS", "A")

        self.assertFalse(self.service.execute("m1", command, self.engine))
        self.repository.get_match_plan.assert_called_once_with("m1", "plan-1")
        self.assertEqual(self.engine.plan[1], {"GS": "B", "GA": None})
        self.assertEqual(self.notifier.drain()[0].title, "Uh oh! Something went wrong.")

    def test_failed_reread_keeps_local_copy(self) -> None:
        self.repository.update_match_plan_positions.side_effect = DocumentStoreError("offline")
        self.repository.get_match_plan.side_effect = DocumentStoreError("still offline")
        command = self.engine.assign(1, "GS", "A")

        self.assertFalse(self.service.execute("m1", command, self.engine))
        self.assertEqual(self.engine.plan[1], {"GS": "A", "GA": None})


def test_plan_edits_round_trip_through_repository(repository, seeded):
    roster, game_format, players = seeded
    match = repository.create_planned_match(roster.id, game_format.id)
    engine = SubstitutionPlanEngine(game_format, players, repository.get_match_plans(match.id))
    service = PlanPersistenceService(repository, CollectingNotifier())

    service.execute(match.id, engine.assign(1, "GS", players[0].id), engine)
    service.execute(match.id, engine.assign(2, "GA", players[1].id), engine)

    reloaded = SubstitutionPlanEngine(game_format, players, repository.get_match_plans(match.id))
    assert reloaded.plan == engine.plan
    assert reloaded.final_totals()[players[0].id].total_seconds == 600


if __name__ == "__main__":
    unittest.main()
