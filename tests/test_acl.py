import unittest
from datetime import datetime, timezone

from src.infrastructure.acl import ProjectTranslator


class TestProjectTranslator(unittest.TestCase):
    def test_to_domain_parses_issues_and_last_activity(self) -> None:
        raw_project = {
            "name": "example",
            "description": "An example project",
            "stars": 123,
            "lastActivity": "2024-01-02T03:04:05Z",
            "languages": {"Python": 2048, "Shell": 12},
            "issues_count": 42,
            "issues": [
                {
                    "url": "https://github.com/octocat/example/issues/7",
                    "number": 7,
                    "title": "Crash on startup",
                    "labels": ["bug", "good first issue"],
                    "commentCount": 3,
                }
            ],
        }

        project = ProjectTranslator.to_domain(raw_project)

        self.assertEqual(project.stars, 123)
        self.assertEqual(project.issues_count, 42)
        self.assertEqual(
            project.last_activity,
            datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )
        self.assertEqual(len(project.issues), 1)
        self.assertEqual(project.issues[0].labels, frozenset({"bug", "good first issue"}))
        self.assertEqual(project.issues[0].comment_count, 3)

    def test_sparse_record_degrades_gracefully(self) -> None:
        project = ProjectTranslator.to_domain({"name": "bare"})

        self.assertIsNone(project.stars)
        self.assertIsNone(project.last_activity)
        self.assertEqual(project.languages, {})
        self.assertEqual(project.issues, ())
        self.assertEqual(project.issues_count, 0)

    def test_unparsable_last_activity_is_unknown(self) -> None:
        project = ProjectTranslator.to_domain({"name": "bad-date", "lastActivity": "yesterday"})

        self.assertIsNone(project.last_activity)

    def test_label_objects_are_flattened(self) -> None:
        project = ProjectTranslator.to_domain({
            "name": "labels",
            "issues": [{"url": "u", "number": 1, "title": "t", "labels": [{"name": "docs"}, "bug", None]}],
        })

        self.assertEqual(project.issues[0].labels, frozenset({"docs", "bug"}))

    def test_missing_name_raises(self) -> None:
        with self.assertRaises(ValueError):
            ProjectTranslator.to_domain({"stars": 5})

    def test_non_object_issue_raises(self) -> None:
        with self.assertRaises(ValueError):
            ProjectTranslator.to_domain({"name": "bad", "issues": ["not-an-object"]})
        with self.assertRaises(ValueError):
            ProjectTranslator.to_domain({"name": "bad", "issues": "not-a-list"})


if __name__ == "__main__":
    unittest.main()
