from lrc import TimedLine
from normalizer import normalize_lines, timing_offset_for


def lines(*pairs):
    return [TimedLine(t, text) for t, text in pairs]


def as_pairs(lyrics):
    return [(line.time_tag, line.text) for line in lyrics]


def test_short_blank_gap_is_dropped():
    result = normalize_lines(lines((10000, ""), (12500, "Hello")))
    assert as_pairs(result) == [(12500, "Hello")]


def test_long_blank_gap_is_kept():
    result = normalize_lines(lines((10000, ""), (15000, "Hello")))
    assert as_pairs(result) == [(10000, ""), (15000, "Hello")]


def test_gap_of_exactly_three_seconds_is_dropped():
    result = normalize_lines(lines((0, ""), (3000, "Hello")))
    assert as_pairs(result) == [(3000, "Hello")]


def test_last_blank_line_is_always_kept():
    result = normalize_lines(lines((1000, "Bye"), (1500, "")))
    assert as_pairs(result) == [(1000, "Bye"), (1500, "")]


def test_whitespace_only_line_counts_as_blank():
    result = normalize_lines(lines((0, "   \t"), (1000, "x")))
    assert as_pairs(result) == [(1000, "x")]


def test_decodes_entities_and_trims():
    result = normalize_lines(lines((0, "  Rock &amp; Roll &#39;n&#39; more  ")))
    assert as_pairs(result) == [(0, "Rock & Roll 'n' more")]


def test_entity_decoding_to_whitespace_makes_line_blank():
    result = normalize_lines(lines((0, "&nbsp;"), (500, "x")))
    assert as_pairs(result) == [(500, "x")]


def test_non_blank_lines_are_never_dropped():
    result = normalize_lines(lines((0, "a"), (10, "b"), (20, "c")))
    assert len(result) == 3


def test_gap_uses_next_parsed_line_even_if_it_is_dropped():
    # second blank is dropped (gap 1000) but still measures the first gap
    result = normalize_lines(lines((0, ""), (4000, ""), (5000, "x")))
    assert as_pairs(result) == [(0, ""), (5000, "x")]


def test_offset_is_applied_and_clamped():
    result = normalize_lines(lines((3000, "a"), (8000, "b")), offset_ms=-5000)
    assert as_pairs(result) == [(0, "a"), (3000, "b")]


def test_gaps_are_measured_before_offset():
    result = normalize_lines(lines((1000, ""), (5000, "a")), offset_ms=-5000)
    assert as_pairs(result) == [(0, ""), (0, "a")]


def test_input_is_not_modified():
    source = lines((0, " a "), (100, ""))
    normalize_lines(source, offset_ms=-50)
    assert source == lines((0, " a "), (100, ""))


def test_empty_input():
    assert len(normalize_lines([])) == 0


def test_timing_offset_for_known_title_any_case():
    assert timing_offset_for("Shanghai Breezes") == -5000
    assert timing_offset_for("SHANGHAI BREEZES") == -5000


def test_timing_offset_for_other_titles():
    assert timing_offset_for("Shanghai Breezes ") == 0
    assert timing_offset_for("Other Song") == 0


def test_timing_offset_for_custom_table():
    assert timing_offset_for("Song", {"song": 250}) == 250
    assert timing_offset_for("Shanghai Breezes", {}) == 0
