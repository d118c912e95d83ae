import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analysis.scoring import FALLBACK_SUMMARY  # noqa: E402
from app.services.analysis_service import (  # noqa: E402
    ExtractionFailure,
    GenerationState,
    extract_resume_text,
    generate_analysis,
)
from tests.pdf_samples import build_pdf  # noqa: E402

RESUME_TEXT = "Jane Doe\n- Built React apps used by 10,000 customers"

MODEL_REPLY = {
    "score": 72,
    "scoreLabel": "Good",
    "strengths": ["Clear structure"],
    "contentImprovements": ["Add metrics"],
    "formatImprovements": ["Consistent dates"],
    "keywordsFound": ["React"],
    "keywordsMissing": ["TypeScript"],
    "summary": "Good resume.",
}


class FakeGenerator:
    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    @property
    def model(self) -> str:
        return "fake-model"

    async def generate(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


class GenerateAnalysisTests(unittest.IsolatedAsyncioTestCase):
    async def test_successful_reply_is_used(self):
        generator = FakeGenerator(reply=json.dumps(MODEL_REPLY))
        outcome = await generate_analysis(RESUME_TEXT, "frontend", generator)

        self.assertFalse(outcome.using_fallback)
        self.assertEqual(outcome.state, GenerationState.SUCCESS)
        self.assertEqual(outcome.payload, MODEL_REPLY)
        self.assertEqual(outcome.model, "fake-model")
        self.assertEqual(len(generator.calls), 1)
        system, user = generator.calls[0]
        self.assertEqual(system.role, "system")
        self.assertIn(RESUME_TEXT, user.content)

    async def test_network_error_falls_back_without_retry(self):
        generator = FakeGenerator(error=ConnectionError("network down"))
        outcome = await generate_analysis(RESUME_TEXT, "frontend", generator)

        self.assertTrue(outcome.using_fallback)
        self.assertEqual(outcome.state, GenerationState.FALLBACK)
        self.assertEqual(outcome.error_code, "llm_exception")
        self.assertEqual(outcome.payload["summary"], FALLBACK_SUMMARY)
        self.assertIn("React", outcome.payload["keywordsFound"])
        self.assertEqual(len(generator.calls), 1)

    async def test_empty_content_falls_back(self):
        outcome = await generate_analysis(RESUME_TEXT, "", FakeGenerator(reply="  "))
        self.assertTrue(outcome.using_fallback)
        self.assertEqual(outcome.error_code, "empty_response")

    async def test_invalid_json_falls_back(self):
        outcome = await generate_analysis(RESUME_TEXT, "", FakeGenerator(reply="Here is your analysis: {"))
        self.assertTrue(outcome.using_fallback)
        self.assertEqual(outcome.error_code, "invalid_json")

    async def test_json_array_falls_back(self):
        outcome = await generate_analysis(RESUME_TEXT, "", FakeGenerator(reply="[1, 2, 3]"))
        self.assertTrue(outcome.using_fallback)

    async def test_missing_generator_falls_back(self):
        outcome = await generate_analysis(RESUME_TEXT, "sales", None)
        self.assertTrue(outcome.using_fallback)
        self.assertEqual(outcome.error_code, "llm_disabled")
        self.assertEqual(outcome.model, "heuristic")

    async def test_model_echoing_fallback_summary_is_not_flagged(self):
        reply = dict(MODEL_REPLY, summary=FALLBACK_SUMMARY)
        outcome = await generate_analysis(RESUME_TEXT, "", FakeGenerator(reply=json.dumps(reply)))
        self.assertFalse(outcome.using_fallback)

    async def test_malformed_object_is_passed_on_for_validation(self):
        reply = dict(MODEL_REPLY)
        reply.pop("keywordsMissing")
        outcome = await generate_analysis(RESUME_TEXT, "", FakeGenerator(reply=json.dumps(reply)))
        self.assertFalse(outcome.using_fallback)
        self.assertNotIn("keywordsMissing", outcome.payload)


class ExtractResumeTextTests(unittest.IsolatedAsyncioTestCase):
    async def test_text_free_pdf_raises_extraction_failure(self):
        with self.assertRaises(ExtractionFailure) as ctx:
            await extract_resume_text(build_pdf([[]]))
        self.assertEqual(ctx.exception.status_code, 400)

    async def test_corrupt_pdf_raises_extraction_failure(self):
        with self.assertRaises(ExtractionFailure):
            await extract_resume_text(b"not a pdf")

    async def test_text_pdf_returns_text(self):
        text = await extract_resume_text(build_pdf([["Jane Doe"]]))
        self.assertIn("Jane Doe", text)


if __name__ == "__main__":
    unittest.main()
