import unittest
from datetime import datetime, timezone

from drawwheel.models import (
    Participant,
    ParticipantRef,
    Prize,
    PrizeHistory,
    Project,
    ProjectSettings,
    RouletteHistory,
    Task,
    TaskHistory,
    Team,
)

WHEN = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


class RosterRecordTests(unittest.TestCase):
    def test_participant_json_uses_camel_case(self):
        person = Participant(id="p1", name="Ana", color="#FF6B6B", created_at=WHEN)
        self.assertEqual(
            person.to_json(),
            {
                "id": "p1",
                "name": "Ana",
                "color": "#FF6B6B",
                "createdAt": "2024-05-06T07:08:09+00:00",
            },
        )
        self.assertEqual(Participant.from_json(person.to_json()), person)

    def test_task_clamps_required_participants(self):
        self.assertEqual(Task(id="t", name="x", required_participants=0).required_participants, 1)
        self.assertEqual(Task(id="t", name="x", required_participants=42).required_participants, 10)

    def test_task_from_json_defaults_missing_count(self):
        task = Task.from_json({"id": "t1", "name": "Deploy", "createdAt": "2024-05-06T07:08:09Z"})
        self.assertEqual(task.required_participants, 1)
        self.assertIsNone(task.description)
        self.assertEqual(task.created_at, WHEN)

    def test_from_json_rejects_bad_timestamp(self):
        with self.assertRaises(ValueError):
            Prize.from_json({"id": "z", "name": "Mug", "createdAt": "not a date"})
        with self.assertRaises(KeyError):
            Participant.from_json({"id": "p"})

    def test_team_members_round_trip(self):
        team = Team(
            id="team1",
            name="Platform",
            members=(Participant(id="m1", name="Eva", created_at=WHEN),),
            created_at=WHEN,
        )
        data = team.to_json()
        self.assertEqual(data["members"][0]["name"], "Eva")
        self.assertEqual(Team.from_json(data), team)


class HistoryRecordTests(unittest.TestCase):
    def test_roulette_history_defaults_removed(self):
        entry = RouletteHistory.from_json(
            {
                "id": "h1",
                "participantId": "p1",
                "participantName": "Ana",
                "selectedAt": WHEN,
            }
        )
        self.assertFalse(entry.removed)
        self.assertEqual(entry.selected_at, WHEN)

    def test_task_history_reads_single_participant_shape(self):
        entry = TaskHistory.from_json(
            {
                "id": "th1",
                "participantId": "p1",
                "participantName": "Ana",
                "taskId": "t1",
                "taskName": "Deploy",
                "selectedAt": "2024-05-06T07:08:09.000Z",
            }
        )
        self.assertEqual(entry.participants, (ParticipantRef(id="p1", name="Ana"),))
        self.assertIn("participants", entry.to_json())
        self.assertNotIn("participantId", entry.to_json())

    def test_prize_history_json_keys(self):
        entry = PrizeHistory(
            id="ph1",
            participant_id="p1",
            participant_name="Ana",
            prize_id="z1",
            prize_name="Mug",
            selected_at=WHEN,
        )
        self.assertEqual(
            sorted(entry.to_json()),
            ["id", "participantId", "participantName", "prizeId", "prizeName", "selectedAt"],
        )


class ProjectTests(unittest.TestCase):
    def test_settings_defaults(self):
        settings = ProjectSettings.from_json(None)
        self.assertFalse(settings.auto_remove_participants)
        self.assertEqual(settings.animation_duration, 3000)
        self.assertFalse(settings.allow_duplicate_participants_in_task)

    def test_touch_bumps_last_modified(self):
        project = Project(id="pr1", name="Sprint", created_at=WHEN, last_modified=WHEN)
        touched = project.touch(name="Sprint 2")
        self.assertEqual(touched.name, "Sprint 2")
        self.assertGreater(touched.last_modified, WHEN)
        self.assertEqual(touched.created_at, WHEN)
        self.assertEqual(project.name, "Sprint")

    def test_project_json_round_trip(self):
        project = Project(
            id="pr1",
            name="Sprint",
            participants=(Participant(id="p1", name="Ana", created_at=WHEN),),
            tasks=(Task(id="t1", name="Deploy", required_participants=2, created_at=WHEN),),
            prizes=(Prize(id="z1", name="Mug", created_at=WHEN),),
            history=(
                RouletteHistory(
                    id="h1", participant_id="p1", participant_name="Ana", selected_at=WHEN
                ),
            ),
            settings=ProjectSettings(auto_remove_participants=True, animation_duration=1500),
            created_at=WHEN,
            last_modified=WHEN,
        )
        data = project.to_json()
        self.assertEqual(data["lastModified"], "2024-05-06T07:08:09+00:00")
        self.assertEqual(data["settings"]["animationDuration"], 1500)
        self.assertEqual(Project.from_json(data), project)

    def test_project_from_json_fills_missing_collections(self):
        project = Project.from_json({"id": "pr1", "name": "Old", "createdAt": WHEN})
        self.assertEqual(project.prizes, ())
        self.assertEqual(project.prize_history, ())
        self.assertEqual(project.last_modified, WHEN)
        self.assertEqual(project.settings, ProjectSettings())


if __name__ == "__main__":
    unittest.main()
