"""Mapping of provider utterances to display-ready transcript segments."""

from collections.abc import Iterable

from speakerline.schemas.job import TranscriptSegment
from speakerline.schemas.provider import ProviderUtterance


def format_utterances(utterances: Iterable[ProviderUtterance]) -> list[TranscriptSegment]:
    """Return one segment per utterance, in input order.

    Offsets arrive in milliseconds and are converted to seconds without
    rounding. Adjacent utterances from the same speaker are kept separate.
    """
    return [
        TranscriptSegment(
            speaker_label=f"Speaker {utterance.speaker}",
            text=utterance.text,
            start_seconds=utterance.start / 1000,
            end_seconds=utterance.end / 1000,
        )
        for utterance in utterances
    ]
