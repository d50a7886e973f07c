import itertools
import random
import unittest

from drawwheel.draw import DrawEngine
from drawwheel.store import EMPTY_STATE, RouletteReducer
from drawwheel.store import actions as act


class DrawActionTests(unittest.TestCase):
    def setUp(self) -> None:
        counter = itertools.count(1)
        self.reducer = RouletteReducer(
            id_factory=lambda: f"id{next(counter)}", color_picker=lambda: "#45B7D1"
        )
        self.engine = DrawEngine(random.Random(11))
        state = EMPTY_STATE
        for action in (
            act.CreateProject(name="Sprint"),
            act.AddParticipantsBulk(names=["Ana", "Bruno"]),
            act.AddTask(name="Revisar PR", required_participants=2),
        ):
            state = self.reducer.apply(state, action)
        self.state = state

    def apply(self, state, *actions):
        for action in actions:
            state = self.reducer.apply(state, action)
        return state

    def test_spin_request_requires_participants(self):
        empty = self.apply(self.state, act.ClearParticipants())
        self.assertIs(self.apply(empty, act.SpinRequest()), empty)

    def test_spin_request_rejected_while_spinning(self):
        spinning = self.apply(self.state, act.SpinRequest())
        self.assertTrue(spinning.is_spinning)
        self.assertIs(self.apply(spinning, act.SpinRequest()), spinning)
        self.assertIs(self.apply(spinning, act.TaskSpinRequest()), spinning)

    def test_finish_spin_records_history(self):
        ana = self.state.participants[0]
        state = self.apply(self.state, act.SpinRequest(), act.FinishSpin(participant=ana))
        self.assertFalse(state.is_spinning)
        self.assertEqual(state.last_winner, ana)
        self.assertEqual(state.selected_participant, ana)
        self.assertEqual(len(state.history), 1)
        entry = state.history[0]
        self.assertEqual((entry.participant_id, entry.participant_name), (ana.id, "Ana"))
        self.assertFalse(entry.removed)
        # Single draws never remove participants by themselves.
        self.assertEqual(len(state.participants), 2)

    def test_second_finish_for_one_draw_is_ignored(self):
        ana = self.state.participants[0]
        state = self.apply(self.state, act.SpinRequest(), act.FinishSpin(participant=ana))
        self.assertIs(self.apply(state, act.FinishSpin(participant=ana)), state)
        self.assertEqual(len(state.history), 1)

    def test_finish_without_request_is_ignored(self):
        ana = self.state.participants[0]
        task = self.state.current_task()
        state = self.apply(self.state, act.AddPrize(name="Mug"))
        prize = state.prizes[0]
        for action in (
            act.FinishSpin(participant=ana),
            act.FinishSpin(),
            act.FinishTaskSpin(participants=(ana,), task=task),
            act.FinishPrizeSpin(participant=ana, prize=prize),
        ):
            self.assertIs(self.apply(state, action), state)

    def test_finish_after_project_switch_is_ignored(self):
        ana = self.state.participants[0]
        first_id = self.state.active_project_id
        state = self.apply(
            self.state,
            act.CreateProject(name="Other"),
            act.AddParticipant(name="Zed"),
            act.SwitchProject(project_id=first_id),
            act.SpinRequest(),
        )
        other_id = state.projects[1].id
        state = self.apply(state, act.SwitchProject(project_id=other_id))
        self.assertFalse(state.is_spinning)

        after = self.apply(state, act.FinishSpin(participant=ana))
        self.assertIs(after, state)
        self.assertEqual(after.get_project(other_id).history, ())
        self.assertEqual(after.get_project(first_id).history, ())

    def test_finish_spin_without_participant_cancels(self):
        state = self.apply(self.state, act.SpinRequest(), act.FinishSpin())
        self.assertFalse(state.is_spinning)
        self.assertEqual(state.history, ())

    def test_task_draw_for_two_participants(self):
        task = self.state.current_task()
        self.assertEqual(task.name, "Revisar PR")

        state = self.apply(self.state, act.TaskSpinRequest())
        self.assertTrue(state.is_spinning)
        result = self.engine.draw_for_task(state.participants, task)
        self.assertEqual({p.name for p in result.participants}, {"Ana", "Bruno"})

        state = self.apply(
            state, act.FinishTaskSpin(participants=result.participants, task=result.task)
        )
        self.assertFalse(state.is_spinning)
        entry = state.task_history[0]
        self.assertEqual(entry.task_name, "Revisar PR")
        self.assertEqual({p.name for p in entry.participants}, {"Ana", "Bruno"})
        self.assertEqual(state.selected_participants, result.participants)
        self.assertEqual(state.selected_task, task)
        self.assertIsNone(state.current_task())
        self.assertFalse(state.can_spin_task())

    def test_completed_task_stays_completed_after_roster_clear(self):
        task = self.state.current_task()
        people = self.state.participants
        state = self.apply(
            self.state,
            act.TaskSpinRequest(),
            act.FinishTaskSpin(participants=people, task=task),
            act.ClearParticipants(),
            act.AddParticipant(name="Carla"),
        )
        self.assertEqual(state.pending_tasks(), ())
        self.assertIs(self.apply(state, act.TaskSpinRequest()), state)

    def test_clear_task_history_makes_tasks_pending_again(self):
        task = self.state.current_task()
        state = self.apply(
            self.state,
            act.TaskSpinRequest(),
            act.FinishTaskSpin(participants=self.state.participants, task=task),
            act.ClearTaskHistory(),
        )
        self.assertEqual(state.current_task(), task)

    def test_task_auto_remove(self):
        state = self.apply(self.state, act.SetAutoRemoveParticipants(enabled=True))
        ana = state.participants[0]
        state = self.apply(
            state,
            act.TaskSpinRequest(),
            act.FinishTaskSpin(participants=(ana,), task=state.current_task()),
        )
        self.assertEqual([p.name for p in state.participants], ["Bruno"])

    def test_remove_after_spin_marks_history(self):
        ana = self.state.participants[0]
        state = self.apply(
            self.state,
            act.SpinRequest(),
            act.FinishSpin(participant=ana),
            act.RemoveFromRouletteAfterSpin(participant_id=ana.id),
        )
        self.assertEqual([p.name for p in state.participants], ["Bruno"])
        self.assertTrue(state.history[0].removed)

    def test_restore_participant(self):
        ana = self.state.participants[0]
        state = self.apply(
            self.state,
            act.SpinRequest(),
            act.FinishSpin(participant=ana),
            act.RemoveFromRouletteAfterSpin(participant_id=ana.id),
            act.RestoreParticipant(participant_name="Ana"),
        )
        names = [p.name for p in state.participants]
        self.assertEqual(sorted(names), ["Ana", "Bruno"])
        restored = [p for p in state.participants if p.name == "Ana"][0]
        self.assertNotEqual(restored.id, ana.id)
        self.assertFalse(state.history[0].removed)
        self.assertEqual(len(state.history), 1)
        self.assertIs(self.apply(state, act.RestoreParticipant(participant_name=" ")), state)
        self.assertIs(self.apply(state, act.RestoreParticipant(participant_name=None)), state)

    def test_restore_participant_keeps_roster_names_unique(self):
        ana = self.state.participants[0]
        state = self.apply(
            self.state,
            act.SpinRequest(),
            act.FinishSpin(participant=ana),
            act.RemoveFromRouletteAfterSpin(participant_id=ana.id),
            act.AddParticipant(name="Ana"),
            act.RestoreParticipant(participant_name=" Ana "),
        )
        self.assertEqual([p.name for p in state.participants], ["Bruno", "Ana", "Ana (2)"])
        self.assertEqual(len(state.history), 1)
        # The history entry is matched by the exact recorded name only.
        self.assertTrue(state.history[0].removed)

        state = self.apply(state, act.RestoreParticipant(participant_name="Ana"))
        self.assertEqual(
            [p.name for p in state.participants], ["Bruno", "Ana", "Ana (2)", "Ana (3)"]
        )
        self.assertFalse(state.history[0].removed)
        self.assertEqual(len(state.history), 1)

    def test_clear_history(self):
        ana = self.state.participants[0]
        state = self.apply(
            self.state, act.SpinRequest(), act.FinishSpin(participant=ana), act.ClearHistory()
        )
        self.assertEqual(state.history, ())

    def test_prize_draw_consumes_prize(self):
        state = self.apply(self.state, act.AddPrizesBulk(names=["Mug", "Sticker"]))
        self.assertTrue(state.can_spin_prize())
        state = self.apply(state, act.PrizeSpinRequest())
        result = self.engine.draw_prize(state.participants, state.prizes)
        state = self.apply(
            state, act.FinishPrizeSpin(participant=result.participant, prize=result.prize)
        )
        self.assertEqual(len(state.prizes), 1)
        self.assertNotIn(result.prize.id, {p.id for p in state.prizes})
        self.assertEqual(state.prize_history[0].prize_name, result.prize.name)
        self.assertEqual(state.selected_prize, result.prize)
        self.assertEqual(self.apply(state, act.ClearPrizeHistory()).prize_history, ())

    def test_prize_request_needs_prizes(self):
        self.assertIs(self.apply(self.state, act.PrizeSpinRequest()), self.state)


class TaskSpinSequenceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.reducer = RouletteReducer()
        state = EMPTY_STATE
        for action in (
            act.CreateProject(name="Sprint"),
            act.AddParticipantsBulk(names=["Ana", "Bruno", "Carla"]),
            act.AddTask(name="Demo", required_participants=2),
        ):
            state = self.reducer.apply(state, action)
        self.state = state

    def test_sequence_collects_picks_then_commits(self):
        task = self.state.current_task()
        ana, bruno, _ = self.state.participants
        state = self.reducer.apply(self.state, act.StartTaskSpinSequence(task=task))
        self.assertTrue(state.is_spinning)
        self.assertEqual(state.task_spin.required_participants, 2)

        state = self.reducer.apply(state, act.RecordTaskSpinPick(participant=ana))
        # Repeated pick is rejected without duplicates allowed.
        self.assertIs(self.reducer.apply(state, act.RecordTaskSpinPick(participant=ana)), state)
        state = self.reducer.apply(state, act.RecordTaskSpinPick(participant=bruno))
        self.assertTrue(state.task_spin.is_complete)
        self.assertEqual(state.task_spin.current_spin_index, 2)

        state = self.reducer.apply(state, act.CompleteTaskSpinSequence())
        self.assertIsNone(state.task_spin)
        self.assertFalse(state.is_spinning)
        self.assertEqual([p.name for p in state.task_history[0].participants], ["Ana", "Bruno"])

    def test_cancel_sequence(self):
        task = self.state.current_task()
        state = self.reducer.apply(self.state, act.StartTaskSpinSequence(task=task))
        state = self.reducer.apply(state, act.CancelTaskSpinSequence())
        self.assertIsNone(state.task_spin)
        self.assertFalse(state.is_spinning)
        self.assertEqual(state.task_history, ())

    def test_cannot_start_for_completed_task(self):
        task = self.state.current_task()
        state = self.reducer.apply(self.state, act.TaskSpinRequest())
        state = self.reducer.apply(
            state, act.FinishTaskSpin(participants=self.state.participants[:2], task=task)
        )
        self.assertEqual(len(state.task_history), 1)
        self.assertIs(self.reducer.apply(state, act.StartTaskSpinSequence(task=task)), state)


if __name__ == "__main__":
    unittest.main()
