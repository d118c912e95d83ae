import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.schemas.resume import ResumeCreate, ResumeUpdate  # noqa: E402
from app.storage.db import SqliteResumeStore, utc_now_iso  # noqa: E402


def _resume(**overrides) -> ResumeCreate:
    values = {
        "job_role": "backend",
        "file_name": "jane.pdf",
        "original_text": "Jane Doe\nBackend Developer",
        "analysis": '{"score": 70}',
        "created_at": utc_now_iso(),
    }
    values.update(overrides)
    return ResumeCreate(**values)


class SqliteResumeStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.store = SqliteResumeStore(str(Path(self.tmp_dir.name) / "nested" / "resumes.db"))

    def tearDown(self):
        self.store.close()
        self.tmp_dir.cleanup()

    def test_create_and_get(self):
        created = self.store.create_resume(_resume())
        self.assertGreater(created.id, 0)

        fetched = self.store.get_resume(created.id)
        self.assertEqual(fetched, created)
        self.assertEqual(fetched.file_name, "jane.pdf")

    def test_get_missing_returns_none(self):
        self.assertIsNone(self.store.get_resume(999))

    def test_list_newest_first(self):
        first = self.store.create_resume(_resume(file_name="a.pdf"))
        second = self.store.create_resume(_resume(file_name="b.pdf"))
        records = self.store.list_resumes()
        self.assertEqual([r.id for r in records], [second.id, first.id])

    def test_update(self):
        created = self.store.create_resume(_resume())
        updated = self.store.update_resume(created.id, ResumeUpdate(job_role="data"))
        self.assertEqual(updated.job_role, "data")
        self.assertEqual(updated.file_name, created.file_name)
        self.assertIsNone(self.store.update_resume(999, ResumeUpdate(job_role="data")))

    def test_delete(self):
        created = self.store.create_resume(_resume())
        self.assertTrue(self.store.delete_resume(created.id))
        self.assertFalse(self.store.delete_resume(created.id))
        self.assertIsNone(self.store.get_resume(created.id))

    def test_analysis_run_log_and_purge(self):
        self.store.log_analysis_run(
            run_id="run-1",
            job_role="general",
            model="heuristic",
            status="fallback",
            using_fallback=True,
            error_code="llm_disabled",
            latency_ms=3,
        )
        runs = self.store.list_analysis_runs()
        self.assertEqual(len(runs), 1)
        self.assertEqual(runs[0]["status"], "fallback")
        self.assertEqual(runs[0]["using_fallback"], 1)
        self.assertEqual(self.store.purge_old_runs(retention_days=1), 0)


if __name__ == "__main__":
    unittest.main()
