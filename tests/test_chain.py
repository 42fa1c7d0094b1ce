"""
Tests for the Chain Builder
===========================
Tests for ChainBuilder, ChainModel and StyleFlags in storykit/chain.py.
"""

import io
import pytest
import sys
from collections import Counter
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storykit.chain import (
    ChainBuilder,
    ChainModel,
    StyleFlags,
    build_chain,
    clean_token,
    last_word,
    starts_with_capital,
)
from storykit.errors import EmptyInputError
from storykit.sources import StreamSource


CAT_TEXT = "the cat sat on the mat. the cat ran."

PROSE = (
    "It was the best of times, it was the worst of times, it was the age of "
    "wisdom, it was the age of foolishness. It was the epoch of belief, it was "
    "the epoch of incredulity. It was the season of Light, it was the season "
    "of Darkness."
)


class TestHelpers:
    """Tests for token and phrase helpers."""

    def test_clean_token_strips_underscores(self):
        """Emphasis markers are removed."""
        assert clean_token("_very_") == "very"
        assert clean_token("plain") == "plain"

    def test_starts_with_capital(self):
        """Only ASCII uppercase counts as a capital."""
        assert starts_with_capital("The cat")
        assert not starts_with_capital("the Cat")
        assert not starts_with_capital('"The cat')
        assert not starts_with_capital("")

    def test_last_word(self):
        """Last space-delimited word of a phrase."""
        assert last_word("the cat ran.") == "ran."
        assert last_word("single") == "single"


class TestScenario:
    """The two-sentence cat example."""

    def test_cat_successors(self):
        """Key 'the cat' maps to both observed continuations, in order."""
        model = build_chain(CAT_TEXT.split(), 2)
        assert model.successors("the cat") == ["cat sat", "cat ran."]

    def test_full_mapping(self):
        """Every window becomes a key except the final one."""
        model = build_chain(CAT_TEXT.split(), 2)
        assert model.mapping == {
            "the cat": ["cat sat", "cat ran."],
            "cat sat": ["sat on"],
            "sat on": ["on the"],
            "on the": ["the mat."],
            "the mat.": ["mat. the"],
            "mat. the": ["the cat"],
        }
        assert "cat ran." not in model
        assert model.successors("cat ran.") is None

    def test_flags(self):
        """Lowercase text with periods."""
        model = build_chain(CAT_TEXT.split(), 2)
        assert model.flags.contains_capitals is False
        assert model.flags.contains_punctuation is True


class TestInvariants:
    """Structural properties of built chains."""

    @pytest.mark.parametrize("chain_length", [1, 2, 3, 4])
    def test_chain_overlap(self, chain_length):
        """A successor starts with the key's last N-1 words."""
        model = build_chain(PROSE.split(), chain_length)
        assert len(model) > 0
        for key, successors in model.mapping.items():
            key_words = key.split(" ")
            assert len(key_words) == chain_length
            for successor in successors:
                succ_words = successor.split(" ")
                assert len(succ_words) == chain_length
                assert succ_words[:-1] == key_words[1:]

    @pytest.mark.parametrize("chain_length", [1, 2, 3])
    def test_frequency_fidelity(self, chain_length):
        """Successor counts equal how often B directly follows A in the text."""
        tokens = PROSE.split()
        windows = [
            " ".join(tokens[i:i + chain_length])
            for i in range(len(tokens) - chain_length + 1)
        ]
        expected = Counter(zip(windows, windows[1:]))

        model = build_chain(tokens, chain_length)
        actual = Counter(
            (key, successor)
            for key, successors in model.mapping.items()
            for successor in successors
        )
        assert actual == expected
        assert model.transition_count() == len(windows) - 1

    def test_duplicates_retained(self):
        """A repeated continuation is stored once per occurrence."""
        model = build_chain("a b a b a b a c".split(), 1)
        assert model.successors("a") == ["b", "b", "b", "c"]
        assert model.successors("b") == ["a", "a", "a"]

    def test_case_sensitive_keys(self):
        """'The' and 'the' are different phrases."""
        model = build_chain("The cat the cat".split(), 1)
        assert "The" in model
        assert "the" in model
        assert model.successors("The") == ["cat"]


class TestEmptyInput:
    """Inputs too short to form a chain."""

    def test_no_tokens(self):
        """Nothing at all."""
        with pytest.raises(EmptyInputError):
            build_chain([], 2)

    def test_fewer_tokens_than_chain_length(self):
        """One word cannot fill a two-word window."""
        with pytest.raises(EmptyInputError) as exc_info:
            build_chain(["lonely"], 2)
        assert exc_info.value.chain_length == 2
        assert exc_info.value.token_count == 1

    def test_exactly_chain_length_tokens(self):
        """A full window with nothing after it builds an empty chain."""
        model = build_chain(["just", "two"], 2)
        assert len(model) == 0
        assert model.keys == []

    def test_invalid_chain_length(self):
        """Chain length must be positive."""
        with pytest.raises(ValueError):
            ChainBuilder(0)


class TestEmphasisMarkers:
    """Underscore emphasis in source texts."""

    def test_markers_stripped(self):
        """_cat_ and cat are the same word."""
        model = build_chain("the _cat_ sat the cat ran".split(), 2)
        assert model.successors("the cat") == ["cat sat", "cat ran"]

    def test_marker_only_tokens_dropped(self):
        """A bare underscore run does not become an empty word."""
        model = build_chain("a __ b c".split(), 2)
        assert model.mapping == {"a b": ["b c"]}


class TestSentinel:
    """End-of-input marker handling."""

    def test_sentinel_stops_interactive_build(self):
        """Nothing after the marker is read."""
        tokens = ["a", "b", "c", "\\end", "d", "e"]
        model = build_chain(tokens, 2, sentinel="\\end")
        assert model.mapping == {"a b": ["b c"]}

    def test_sentinel_is_a_word_without_sentinel(self):
        """Bounded sources treat the marker as ordinary text."""
        tokens = ["a", "b", "c", "\\end", "d"]
        model = build_chain(tokens, 2)
        assert model.successors("b c") == ["c \\end"]
        assert model.successors("c \\end") == ["\\end d"]

    def test_sentinel_before_window_fills(self):
        """Ending input before a full phrase is an empty input."""
        with pytest.raises(EmptyInputError):
            build_chain(["a", "\\end", "b", "c"], 2, sentinel="\\end")

    def test_phrase_before_sentinel_sets_flags(self):
        """The last phrase before the marker still counts for style."""
        model = build_chain("a b C d. \\end".split(), 2, sentinel="\\end")
        assert model.flags.contains_capitals is True
        assert model.flags.contains_punctuation is True
        assert model.mapping == {"a b": ["b C"], "b C": ["C d."]}

    def test_console_sentence_end_sets_punctuation(self):
        """Typed input ending in a full stop keeps the sentence-end flag."""
        source = StreamSource(io.StringIO("the dog ran. \\end\n"))
        model = build_chain(source, 2, sentinel=source.sentinel)
        assert model.mapping == {"the dog": ["dog ran."]}
        assert model.flags.contains_punctuation is True
        assert model.flags.contains_capitals is False

    def test_bounded_source_skips_last_phrase(self):
        """Without a marker the final phrase has no successor and is not observed."""
        model = build_chain("the dog ran.".split(), 2)
        assert model.flags.contains_punctuation is False

    def test_builder_accepts_lazy_iterables(self):
        """Token streams are consumed once, in order."""
        model = ChainBuilder(2).build(iter(CAT_TEXT.split()))
        assert model.successors("the cat") == ["cat sat", "cat ran."]


class TestStyleFlags:
    """Capital and punctuation detection."""

    def test_capitals_detected(self):
        """A key starting with an uppercase letter sets the flag."""
        model = build_chain("The cat sat on the mat".split(), 2)
        assert model.flags.contains_capitals is True
        assert model.flags.contains_punctuation is False

    def test_flags_only_from_keys(self):
        """The final phrase has no successor and does not count."""
        model = build_chain("the cat sat. Then".split(), 2)
        assert model.flags.contains_punctuation is True
        assert model.flags.contains_capitals is False

    def test_flags_monotonic(self):
        """Once set, a flag stays set."""
        flags = StyleFlags()
        flags.observe("The end.")
        flags.observe("lowercase words")
        assert flags.contains_capitals is True
        assert flags.contains_punctuation is True

    def test_capitalized_key_exists_when_flag_set(self):
        """contains_capitals always has a capitalized key to start from."""
        model = build_chain(PROSE.split(), 3)
        assert model.flags.contains_capitals
        assert any(starts_with_capital(k) for k in model.keys)


class TestChainModel:
    """Tests for ChainModel accessors."""

    def test_to_dict(self):
        """Serialized form carries order, flags and mapping."""
        model = build_chain(CAT_TEXT.split(), 2)
        data = model.to_dict()
        assert data["chain_length"] == 2
        assert data["contains_capitals"] is False
        assert data["contains_punctuation"] is True
        assert data["mapping"]["the cat"] == ["cat sat", "cat ran."]

    def test_empty_model(self):
        """A fresh model has no phrases."""
        model = ChainModel(chain_length=3)
        assert len(model) == 0
        assert model.transition_count() == 0
