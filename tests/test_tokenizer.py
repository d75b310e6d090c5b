"""Tests for text normalization and fixed-length encoding."""

import pytest

from spamgate.ai.tokenizer import Tokenizer, normalize_text


class TestNormalizeText:

    def test_lowercases_and_splits(self):
        assert normalize_text("Great Post Thanks") == ["great", "post", "thanks"]

    def test_punctuation_becomes_word_boundary(self):
        assert normalize_text("check-out my channel") == ["check", "out", "my", "channel"]

    def test_punctuation_before_space_leaves_empty_word(self):
        assert normalize_text("Great post, thanks!") == ["great", "post", "", "thanks", ""]

    def test_keeps_digits_and_underscores(self):
        assert normalize_text("win_big 100 times") == ["win_big", "100", "times"]

    def test_splits_on_single_spaces_only(self):
        assert normalize_text("great  post") == ["great", "", "post"]
        assert normalize_text("great\tpost") == ["great\tpost"]

    def test_non_ascii_letters_are_blanked_without_folding(self):
        assert normalize_text("STRAßE") == ["stra", "e"]

    def test_empty_and_punctuation_only(self):
        assert normalize_text("") == [""]
        assert normalize_text("?!") == ["", "", ""]


class TestTokenizer:

    def test_short_input_is_padded_to_length(self, vocabulary):
        tokenizer = Tokenizer(vocabulary, encoding_length=20)
        encoded = tokenizer.encode(["great", "post", "thanks"])

        assert len(encoded) == 20
        assert encoded[:4] == [1, 4, 5, 6]
        assert encoded[4:] == [0] * 16

    def test_unknown_words_map_to_unknown(self, vocabulary):
        tokenizer = Tokenizer(vocabulary, encoding_length=8)
        encoded = tokenizer.encode(["buy", "cheap", "meds", "now"])

        assert encoded == [1, 2, 2, 2, 2, 0, 0, 0]

    def test_lookup_is_case_sensitive(self, vocabulary):
        tokenizer = Tokenizer(vocabulary, encoding_length=4)
        assert tokenizer.encode(["Great"]) == [1, 2, 0, 0]

    def test_empty_input_is_start_then_pad(self, vocabulary):
        tokenizer = Tokenizer(vocabulary, encoding_length=5)
        assert tokenizer.encode([]) == [1, 0, 0, 0, 0]

    def test_exactly_length_minus_one_words_has_no_pad(self, vocabulary):
        tokenizer = Tokenizer(vocabulary, encoding_length=5)
        encoded = tokenizer.encode(["great", "post", "my", "channel"])

        assert encoded == [1, 4, 5, 8, 9]
        assert 0 not in encoded

    def test_long_input_is_not_truncated(self, vocabulary):
        tokenizer = Tokenizer(vocabulary, encoding_length=5)
        words = ["great"] * 9
        encoded = tokenizer.encode(words)

        assert len(encoded) == 10
        assert encoded[0] == 1
        assert 0 not in encoded

    @pytest.mark.parametrize("count", [0, 1, 7, 18])
    def test_inputs_shorter_than_length_minus_one_end_in_pad(self, vocabulary, count):
        tokenizer = Tokenizer(vocabulary, encoding_length=20)
        encoded = tokenizer.encode(["post"] * count)

        assert len(encoded) == 20
        assert encoded[0] == vocabulary.start
        assert encoded[count + 1:] == [vocabulary.pad] * (19 - count)

    def test_encode_is_deterministic(self, vocabulary):
        tokenizer = Tokenizer(vocabulary)
        words = ["check", "my", "channel", "now"]
        assert tokenizer.encode(words) == tokenizer.encode(list(words))

    def test_rejects_non_positive_length(self, vocabulary):
        with pytest.raises(ValueError):
            Tokenizer(vocabulary, encoding_length=0)
