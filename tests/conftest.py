"""Shared test fixtures for the caption engine and transcription service.

WHY: Most test modules need the same small transcripts: the two-word
"Hello, world." example, a longer sentence with realistic Whisper timings,
and a helper that builds evenly spaced words from a list of texts.

HOW: Plain pytest fixtures plus a module-level helper (make_words) that
tests import directly when they need custom word lists.

RULES:
- Timings are realistic Whisper-style float seconds.
- Fixtures return fresh objects; tests may not rely on shared mutation.
"""

from typing import List, Sequence

import pytest

from caption_engine.models import Transcript, Word


def make_words(texts: Sequence[str], start: float = 0.0, duration: float = 0.3,
               gap: float = 0.05) -> List[Word]:
    """Build words with sequential, non-overlapping timing."""
    words = []  # type: List[Word]
    t = start
    for text in texts:
        words.append(Word(text=text, start=round(t, 3), end=round(t + duration, 3)))
        t += duration + gap
    return words


HELLO_WORLD_WORDS = (
    Word(text="Hello,", start=0.0, end=0.5),
    Word(text="world.", start=0.5, end=1.2),
)

SENTENCE_WORDS = (
    Word(text="The", start=0.00, end=0.24),
    Word(text="quick", start=0.24, end=0.52),
    Word(text="brown", start=0.52, end=0.80),
    Word(text="fox", start=0.80, end=1.10),
    Word(text="jumps", start=1.10, end=1.46),
    Word(text="over", start=1.46, end=1.70),
    Word(text="the", start=1.70, end=1.82),
    Word(text="lazy", start=1.82, end=2.18),
    Word(text="dog.", start=2.18, end=2.60),
    Word(text="Isn't", start=3.10, end=3.40),
    Word(text="it", start=3.40, end=3.52),
    Word(text="great?", start=3.52, end=4.05),
)


@pytest.fixture
def hello_world_transcript():
    """The two-word example: "Hello," 0.0-0.5 and "world." 0.5-1.2."""
    return Transcript(words=HELLO_WORLD_WORDS, language="en")


@pytest.fixture
def sentence_transcript():
    """Twelve words across two sentences with a pause between them."""
    return Transcript(words=SENTENCE_WORDS, language="en")


@pytest.fixture
def empty_transcript():
    return Transcript(words=(), language="auto")


@pytest.fixture
def whisper_response():
    """A verbose_json response from the Whisper API with word timestamps."""
    return {
        "task": "transcribe",
        "language": "english",
        "duration": 1.25,
        "text": "Hello, world.",
        "words": [
            {"word": "Hello,", "start": 0.0, "end": 0.5},
            {"word": " world.", "start": 0.5, "end": 1.2},
        ],
    }
