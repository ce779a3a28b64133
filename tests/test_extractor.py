from vntranslate.extractor import classify_line, extract_pending, split_script
from vntranslate.memory import TranslationMemory
from vntranslate.structures import MatchKind, ScriptLine


def _lines(*texts):
    return [ScriptLine(index=idx, text=text) for idx, text in enumerate(texts)]


def test_dialogue_line_with_speaker_is_translatable():
    result = classify_line(ScriptLine(0, '    e "Hello there."'))

    assert result.kind is MatchKind.TRANSLATABLE
    assert result.extracted.prefix == "    e "
    assert result.extracted.literal == "Hello there."


def test_new_keyword_prefix_is_captured():
    result = classify_line(ScriptLine(0, '    new "Start"'))

    assert result.extracted.prefix == "    new "
    assert result.extracted.literal == "Start"


def test_narration_without_speaker_matches():
    result = classify_line(ScriptLine(0, '"It was raining."'))

    assert result.translatable
    assert result.extracted.prefix == ""


def test_literal_is_greedy_to_last_quote():
    result = classify_line(ScriptLine(0, 'e "He said "hi" twice"'))

    assert result.extracted.literal == 'He said "hi" twice'


def test_old_lines_are_excluded():
    result = classify_line(ScriptLine(0, '    old "foo"'))

    assert result.kind is MatchKind.EXCLUDED
    assert not result.translatable


def test_comment_lines_are_never_translatable():
    result = classify_line(ScriptLine(0, '    # "foo"'))

    assert not result.translatable


def test_non_matching_line():
    assert classify_line(ScriptLine(0, "label start:")).kind is MatchKind.NO_MATCH


def test_blank_literal_falls_back_to_preceding_comment():
    lines = _lines('# "Hello"', '    "" ')

    result = classify_line(lines[1], lines[0])

    assert result.translatable
    assert result.extracted.literal == "Hello"
    assert result.extracted.prefix == "    "


def test_blank_literal_without_comment_stays_blank():
    lines = _lines("label start:", '    e ""')

    result = classify_line(lines[1], lines[0])

    assert result.kind is MatchKind.TRANSLATABLE
    assert not result.translatable


def test_extract_pending_deduplicates_in_first_seen_order():
    lines = _lines('a "One"', 'b "Two"', 'c "One"', 'd "Three"')

    assert extract_pending(lines, TranslationMemory()) == ["One", "Two", "Three"]


def test_extract_pending_skips_cached_strings():
    lines = _lines('a "One"', 'b "Two"')
    memory = TranslationMemory({"One": "หนึ่ง"})

    assert extract_pending(lines, memory) == ["Two"]


def test_extract_pending_keeps_literal_untrimmed():
    lines = _lines('e " spaced "')

    assert extract_pending(lines, TranslationMemory()) == [" spaced "]


def test_split_script_handles_crlf():
    lines = split_script('a "x"\r\nb "y"\n')

    assert [line.text for line in lines] == ['a "x"', 'b "y"', ""]
    assert [line.index for line in lines] == [0, 1, 2]


def test_byte_order_mark_on_first_line_is_treated_as_whitespace():
    lines = split_script('\ufeffe "Hello"\ne "World"')

    result = classify_line(lines[0])

    assert result.extracted.prefix == "\ufeffe "
    assert extract_pending(lines, TranslationMemory()) == ["Hello", "World"]


def test_comment_fallback_after_byte_order_mark():
    lines = split_script('\ufeff# "Hello"\nnew ""')

    assert extract_pending(lines, TranslationMemory()) == ["Hello"]


def test_byte_order_mark_before_old_keeps_line_excluded():
    result = classify_line(ScriptLine(0, '\ufeffold "foo"'))

    assert result.kind is MatchKind.EXCLUDED
