from reading_scorer.tokenization import display_words, normalize, tokenize_words


def test_normalize_strips_sentence_punctuation_only():
    text = "Hello,  World! It's   a well-known fact: 42."
    assert normalize(text) == [
        "hello",
        "world",
        "it's",
        "a",
        "well-known",
        "fact",
        "42",
    ]


def test_normalize_drops_empty_tokens():
    assert normalize("   ") == []
    assert normalize(" ... ;; \n\t ") == []
    assert normalize("\tone \n\n two ") == ["one", "two"]


def test_normalize_is_idempotent():
    samples = [
        "The cat sat on the mat.",
        "  Wait... what?!  Really; truly: yes  ",
        "Don't stop-believing, 2 times!",
        "",
    ]
    for sample in samples:
        once = normalize(sample)
        assert normalize(" ".join(once)) == once


def test_tokenize_words_keeps_display_form():
    tokens = tokenize_words("The cat ... sat.")

    assert [token.text for token in tokens] == ["The", "cat", "sat."]
    assert [token.normalized for token in tokens] == ["the", "cat", "sat"]
    assert [token.index for token in tokens] == [0, 1, 2]


def test_tokens_line_up_with_normalize():
    text = "  Wait... what?!  Really ; truly: yes  "
    assert [t.normalized for t in tokenize_words(text)] == normalize(text)


def test_display_words_splits_raw_whitespace():
    assert display_words("  One,  two!\nthree ") == ["One,", "two!", "three"]
