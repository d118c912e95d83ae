import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.parsing.parse import ExtractionError, extract_pdf_text  # noqa: E402
from tests.pdf_samples import SAMPLE_RESUME_LINES, build_pdf, build_pdf_from_streams  # noqa: E402


class PdfExtractionTests(unittest.TestCase):
    def test_extracts_text_with_line_break_per_baseline(self):
        parsed = extract_pdf_text(build_pdf([SAMPLE_RESUME_LINES]))

        self.assertTrue(parsed.has_text)
        self.assertEqual(parsed.page_count, 1)
        self.assertIn("Jane Doe\nPython Engineer", parsed.text)
        self.assertIn("Skills: Python, SQL, Docker", parsed.text)
        self.assertEqual(parsed.parsing_warnings, [])

    def test_separate_text_objects_on_one_baseline_share_a_line(self):
        stream = (
            b"BT /F1 12 Tf 72 700 Td (Left) Tj ET\n"
            b"BT /F1 12 Tf 300 700 Td (Right) Tj ET\n"
            b"BT /F1 12 Tf 72 680 Td (Next) Tj ET"
        )
        parsed = extract_pdf_text(build_pdf_from_streams([stream]))

        lines = parsed.text.splitlines()
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[0].split(), ["Left", "Right"])
        self.assertEqual(lines[1], "Next")

    def test_show_operators_on_one_baseline_share_a_line(self):
        stream = (
            b"BT /F1 12 Tf 72 700 Td (Jane) Tj 40 0 Td (Doe) Tj ET\n"
            b"BT /F1 12 Tf 72 684 Td (Python Engineer) Tj ET"
        )
        parsed = extract_pdf_text(build_pdf_from_streams([stream]))

        lines = parsed.text.splitlines()
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[0].split(), ["Jane", "Doe"])
        self.assertEqual(lines[1], "Python Engineer")

    def test_pages_are_concatenated_in_order(self):
        parsed = extract_pdf_text(build_pdf([["First page text"], ["Second page text"]]))

        self.assertEqual(parsed.page_count, 2)
        self.assertEqual([block.page for block in parsed.blocks], [1, 2])
        self.assertLess(parsed.text.index("First page text"), parsed.text.index("Second page text"))

    def test_text_free_pdf_returns_empty_text_with_warning(self):
        parsed = extract_pdf_text(build_pdf([[]]))

        self.assertFalse(parsed.has_text)
        self.assertEqual(parsed.text, "")
        self.assertEqual(parsed.page_count, 1)
        self.assertTrue(parsed.parsing_warnings)

    def test_corrupt_bytes_raise_extraction_error(self):
        with self.assertRaises(ExtractionError):
            extract_pdf_text(b"this is not a pdf at all")


if __name__ == "__main__":
    unittest.main()
