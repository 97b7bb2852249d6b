from scribe_backends.domain.transcript import join_segments, normalize_transcript


def test_repeated_spaces_collapse_to_one():
    assert normalize_transcript("hello   world") == "hello world"


def test_ends_are_trimmed():
    assert normalize_transcript("  \n hello world \t ") == "hello world"


def test_repeated_newlines_collapse_to_one():
    assert normalize_transcript("first\n\n\nsecond") == "first\nsecond"


def test_segments_join_with_single_space_in_order():
    assert join_segments([" one ", "two", "  three"]) == "one two three"


def test_single_segment_is_trimmed_once():
    assert join_segments(["  only  "]) == "only"
