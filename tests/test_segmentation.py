"""Tests for caption segmentation and timing resolution.

Covers word-count chunking, greedy character filling (including the
exact-limit tie-break and over-long words), and the timing pass that
keeps captions ordered and non-overlapping.
"""

import pytest

from caption_engine.core import (
    MIN_CAPTION_MS,
    group_by_char_count,
    group_by_word_count,
    resolve_timings,
    seconds_to_ms,
    segment_words,
)
from caption_engine.models import CaptionMode, CaseTransform, FormattingConfig, Word

from conftest import SENTENCE_WORDS, make_words


def _texts(groups):
    return [[w.text for w in group] for group in groups]


def _word_config(max_words, **kwargs):
    return FormattingConfig(caption_mode=CaptionMode.WORD_COUNT,
                            max_words_per_caption=max_words, **kwargs)


def _char_config(max_chars, **kwargs):
    return FormattingConfig(caption_mode=CaptionMode.CHAR_COUNT,
                            max_chars_per_caption=max_chars, **kwargs)


class TestGroupByWordCount:

    def test_one_word_per_caption(self):
        words = make_words(["a", "b", "c"])
        assert _texts(group_by_word_count(words, 1)) == [["a"], ["b"], ["c"]]

    def test_last_chunk_holds_remainder(self):
        words = make_words(["a", "b", "c", "d", "e"])
        assert _texts(group_by_word_count(words, 2)) == [["a", "b"], ["c", "d"], ["e"]]

    def test_limit_larger_than_input(self):
        words = make_words(["a", "b"])
        assert _texts(group_by_word_count(words, 10)) == [["a", "b"]]

    def test_empty(self):
        assert group_by_word_count([], 3) == []


class TestGroupByCharCount:

    def test_exact_limit_stays_in_current_caption(self):
        # "aa bb" is exactly 5 characters
        words = make_words(["aa", "bb", "cc"])
        assert _texts(group_by_char_count(words, 5)) == [["aa", "bb"], ["cc"]]

    def test_one_over_limit_starts_new_caption(self):
        words = make_words(["aa", "bbb"])
        assert _texts(group_by_char_count(words, 5)) == [["aa"], ["bbb"]]

    def test_long_word_is_never_split(self):
        words = make_words(["hi", "extraordinarily", "ok"])
        groups = group_by_char_count(words, 5)
        assert _texts(groups) == [["hi"], ["extraordinarily"], ["ok"]]

    def test_long_first_word_stands_alone(self):
        words = make_words(["supercalifragilistic", "a", "b"])
        assert _texts(group_by_char_count(words, 4)) == [["supercalifragilistic"], ["a", "b"]]

    def test_sentence_fill(self):
        groups = group_by_char_count(SENTENCE_WORDS, 15)
        assert _texts(groups) == [
            ["The", "quick", "brown"],
            ["fox", "jumps", "over"],
            ["the", "lazy", "dog."],
            ["Isn't", "it", "great?"],
        ]

    def test_every_multiword_caption_within_limit(self):
        for limit in range(1, 40):
            for group in group_by_char_count(SENTENCE_WORDS, limit):
                joined = " ".join(w.text for w in group)
                assert len(group) == 1 or len(joined) <= limit

    def test_length_measured_before_normalization(self):
        # "a, b." is 5 chars raw, 3 after stripping; the raw length decides
        words = [Word("a,", 0.0, 0.1), Word("b.", 0.1, 0.2), Word("c", 0.2, 0.3)]
        assert _texts(group_by_char_count(words, 5)) == [["a,", "b."], ["c"]]


class TestResolveTimings:

    def test_clean_spans_unchanged(self):
        spans = [(0, 500), (500, 1200), (1500, 2000)]
        assert resolve_timings(spans) == spans

    def test_overlap_clamped_to_next_start(self):
        assert resolve_timings([(0, 500), (300, 800)]) == [(0, 300), (300, 800)]

    def test_zero_duration_extended(self):
        assert resolve_timings([(1000, 1000)]) == [(1000, 1000 + MIN_CAPTION_MS)]

    def test_equal_starts_stay_ordered(self):
        resolved = resolve_timings([(1000, 1000), (1000, 1200)])
        assert resolved == [(1000, 1001), (1001, 1200)]

    def test_invariants_hold_for_messy_input(self):
        spans = [(0, 0), (0, 0), (0, 50), (10, 20), (10, 10), (400, 300 + 200)]
        resolved = resolve_timings(spans)
        assert len(resolved) == len(spans)
        prev_end = 0
        for start, end in resolved:
            assert start < end
            assert start >= prev_end
            prev_end = end


class TestSecondsToMs:

    @pytest.mark.parametrize("seconds,expected", [
        (0.0, 0),
        (0.5, 500),
        (1.2, 1200),
        (1.7, 1700),
        (3.1, 3100),
        (4.05, 4050),
        (0.0004, 0),
        (0.0006, 1),
    ])
    def test_rounding(self, seconds, expected):
        assert seconds_to_ms(seconds) == expected


class TestSegmentWords:

    def test_empty_gives_no_captions(self):
        assert segment_words([], _word_config(1)) == []

    def test_single_word_spans_its_own_timing(self):
        captions = segment_words([Word("Hi", 0.25, 0.75)], _word_config(3))
        assert len(captions) == 1
        assert (captions[0].start_ms, captions[0].end_ms) == (250, 750)
        assert captions[0].text == "Hi"

    def test_indices_are_contiguous_from_one(self):
        captions = segment_words(SENTENCE_WORDS, _word_config(1))
        assert [c.index for c in captions] == list(range(1, len(SENTENCE_WORDS) + 1))

    def test_word_count_timing(self):
        captions = segment_words(SENTENCE_WORDS, _word_config(3))
        assert [(c.start_ms, c.end_ms) for c in captions] == [
            (0, 800), (800, 1700), (1700, 2600), (3100, 4050),
        ]
        assert captions[0].text == "The quick brown"
        assert captions[3].text == "Isn't it great?"

    def test_captions_never_overlap(self):
        overlapping = [
            Word("one", 0.0, 0.6),
            Word("two", 0.4, 0.4),
            Word("three", 0.4, 1.0),
            Word("four", 0.9, 1.3),
        ]
        captions = segment_words(overlapping, _word_config(1))
        for prev, cur in zip(captions, captions[1:]):
            assert prev.end_ms <= cur.start_ms
        for caption in captions:
            assert caption.start_ms < caption.end_ms

    def test_words_reconstruct_input(self):
        for config in (_word_config(1), _word_config(4), _char_config(12), _char_config(1)):
            captions = segment_words(SENTENCE_WORDS, config)
            rebuilt = tuple(w for c in captions for w in c.words)
            assert rebuilt == SENTENCE_WORDS

    def test_normalization_per_caption(self):
        config = _word_config(2, case_transform=CaseTransform.UPPERCASE,
                              strip_punctuation=True)
        captions = segment_words(SENTENCE_WORDS, config)
        assert captions[4].text == "DOG ISNT"
        assert captions[5].text == "IT GREAT"

    def test_word_text_not_modified(self):
        config = _char_config(20, case_transform=CaseTransform.LOWERCASE,
                              strip_punctuation=True)
        captions = segment_words(SENTENCE_WORDS, config)
        assert captions[-1].words[-1].text == "great?"

    def test_inactive_threshold_ignored(self):
        config = FormattingConfig(caption_mode=CaptionMode.CHAR_COUNT,
                                  max_words_per_caption=1, max_chars_per_caption=100)
        captions = segment_words(SENTENCE_WORDS, config)
        assert len(captions) == 1
