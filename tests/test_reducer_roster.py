import itertools
import unittest

from drawwheel.store import EMPTY_STATE, RouletteReducer
from drawwheel.store import actions as act


class RosterActionTests(unittest.TestCase):
    def setUp(self) -> None:
        counter = itertools.count(1)
        self.reducer = RouletteReducer(
            id_factory=lambda: f"id{next(counter)}", color_picker=lambda: "#4ECDC4"
        )
        self.state = self.reducer.apply(EMPTY_STATE, act.CreateProject(name="Sprint"))

    def apply(self, *actions):
        state = self.state
        for action in actions:
            state = self.reducer.apply(state, action)
        return state

    # participants

    def test_add_participant_resolves_duplicates(self):
        state = self.apply(
            act.AddParticipant(name="X"),
            act.AddParticipant(name="X"),
            act.AddParticipant(name=" x "),
        )
        self.assertEqual([p.name for p in state.participants], ["X", "X (2)", "x (3)"])
        self.assertEqual(len({p.id for p in state.participants}), 3)
        self.assertTrue(all(p.color == "#4ECDC4" for p in state.participants))

    def test_add_blank_participant_is_noop(self):
        self.assertIs(self.apply(act.AddParticipant(name="  ")), self.state)

    def test_bulk_add(self):
        state = self.apply(
            act.AddParticipant(name="Ana"),
            act.AddParticipantsBulk(names=["Ana", "Bruno", "", "bruno"]),
        )
        self.assertEqual(
            [p.name for p in state.participants], ["Ana", "Ana (2)", "Bruno", "bruno (2)"]
        )

    def test_remove_and_clear_participants(self):
        state = self.apply(act.AddParticipantsBulk(names=["Ana", "Bruno"]))
        ana = state.participants[0]
        removed = self.reducer.apply(state, act.RemoveParticipant(participant_id=ana.id))
        self.assertEqual([p.name for p in removed.participants], ["Bruno"])
        self.assertIs(
            self.reducer.apply(removed, act.RemoveParticipant(participant_id=ana.id)), removed
        )
        cleared = self.reducer.apply(removed, act.ClearParticipants())
        self.assertEqual(cleared.participants, ())

    # tasks

    def test_add_task_clamps_and_trims(self):
        state = self.apply(
            act.AddTask(name=" Deploy ", description="  ", required_participants=0),
            act.AddTask(name="Demo", description="Show it", required_participants=99),
            act.AddTask(name="Deploy", required_participants="3"),
        )
        deploy, demo, deploy2 = state.tasks
        self.assertEqual((deploy.name, deploy.description, deploy.required_participants), ("Deploy", None, 1))
        self.assertEqual((demo.description, demo.required_participants), ("Show it", 10))
        self.assertEqual((deploy2.name, deploy2.required_participants), ("Deploy (2)", 3))

    def test_bulk_add_tasks_from_lines(self):
        state = self.apply(
            act.AddTasksBulk(
                task_lines=["Revisar PR|Review|2", "", "Deploy", "Revisar PR||abc", "|x|3"]
            )
        )
        self.assertEqual(
            [(t.name, t.description, t.required_participants) for t in state.tasks],
            [("Revisar PR", "Review", 2), ("Deploy", None, 1), ("Revisar PR (2)", None, 1)],
        )

    def test_remove_and_clear_tasks(self):
        state = self.apply(act.AddTask(name="A"), act.AddTask(name="B"))
        state = self.reducer.apply(state, act.RemoveTask(task_id=state.tasks[0].id))
        self.assertEqual([t.name for t in state.tasks], ["B"])
        self.assertEqual(self.reducer.apply(state, act.ClearTasks()).tasks, ())

    # prizes

    def test_prizes(self):
        state = self.apply(
            act.AddPrize(name="Mug", description="Coffee mug"),
            act.AddPrizesBulk(names=["Mug", "Sticker"]),
        )
        self.assertEqual([p.name for p in state.prizes], ["Mug", "Mug (2)", "Sticker"])
        self.assertEqual(state.prizes[0].description, "Coffee mug")
        state = self.reducer.apply(state, act.RemovePrize(prize_id=state.prizes[0].id))
        self.assertEqual(len(state.prizes), 2)
        self.assertEqual(self.reducer.apply(state, act.ClearPrizes()).prizes, ())

    def test_clear_on_empty_collection_is_noop(self):
        for action in (act.ClearParticipants(), act.ClearTasks(), act.ClearPrizes()):
            self.assertIs(self.apply(action), self.state)

    def test_changes_only_touch_active_project(self):
        state = self.apply(act.AddParticipant(name="Ana"), act.CreateProject(name="Other"))
        state = self.reducer.apply(state, act.AddParticipant(name="Bruno"))
        first, second = state.projects
        self.assertEqual([p.name for p in first.participants], ["Ana"])
        self.assertEqual([p.name for p in second.participants], ["Bruno"])


if __name__ == "__main__":
    unittest.main()
