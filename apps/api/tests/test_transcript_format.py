"""Utterance-to-segment formatting tests."""

from __future__ import annotations

import unittest

from speakerline.domain.transcript_format import format_utterances
from speakerline.schemas.provider import ProviderUtterance


class TranscriptFormatTests(unittest.TestCase):
    def test_two_speaker_utterances_format_to_labelled_segments(self) -> None:
        utterances = [
            ProviderUtterance(speaker="A", text="hi", start=0, end=5000),
            ProviderUtterance(speaker="B", text="yo", start=5000, end=9000),
        ]

        segments = format_utterances(utterances)

        self.assertEqual(
            [segment.model_dump(by_alias=True) for segment in segments],
            [
                {"speakerLabel": "Speaker A", "text": "hi", "startSeconds": 0, "endSeconds": 5},
                {"speakerLabel": "Speaker B", "text": "yo", "startSeconds": 5, "endSeconds": 9},
            ],
        )

    def test_millisecond_offsets_are_divided_without_rounding(self) -> None:
        segments = format_utterances([ProviderUtterance(speaker="A", text="x", start=1500, end=1501)])

        self.assertEqual(segments[0].start_seconds, 1.5)
        self.assertEqual(segments[0].end_seconds, 1.501)

    def test_order_is_preserved_and_same_speaker_runs_are_not_merged(self) -> None:
        utterances = [
            ProviderUtterance(speaker="B", text="second", start=4000, end=6000),
            ProviderUtterance(speaker="A", text="one", start=0, end=1000),
            ProviderUtterance(speaker="A", text="two", start=1000, end=2000),
        ]

        segments = format_utterances(utterances)

        self.assertEqual([s.text for s in segments], ["second", "one", "two"])
        self.assertEqual([s.speaker_label for s in segments], ["Speaker B", "Speaker A", "Speaker A"])

    def test_text_passes_through_verbatim(self) -> None:
        text = "  Well, um... <laughs>  "
        segments = format_utterances([ProviderUtterance(speaker="C", text=text, start=0, end=10)])

        self.assertEqual(segments[0].text, text)

    def test_empty_input_yields_empty_list(self) -> None:
        self.assertEqual(format_utterances([]), [])


if __name__ == "__main__":
    unittest.main()
