from vntranslate.extractor import split_script
from vntranslate.memory import TranslationMemory
from vntranslate.rewriter import render_script, rewrite_lines


def test_rewrites_cached_lines_and_preserves_prefix():
    lines = split_script('label start:\n    e "Hello"\n    "Bye"')
    memory = TranslationMemory({"Hello": "สวัสดี", "Bye": "ลาก่อน"})

    assert rewrite_lines(lines, memory) == [
        "label start:",
        '    e "สวัสดี"',
        '    "ลาก่อน"',
    ]


def test_uncached_and_excluded_lines_pass_through():
    source = '    old "Hello"\n    # "Hello"\n    e "Unknown"'
    lines = split_script(source)
    memory = TranslationMemory({"Hello": "HELLO"})

    assert render_script(rewrite_lines(lines, memory)) == source


def test_comment_fallback_rewrites_blank_line():
    lines = split_script('    # "Press start"\n    e ""')
    memory = TranslationMemory({"Press start": "PRESS START"})

    assert rewrite_lines(lines, memory) == [
        '    # "Press start"',
        '    e "PRESS START"',
    ]


def test_output_uses_lf_line_endings():
    lines = split_script('a "x"\r\nb "y"')

    assert render_script(rewrite_lines(lines, TranslationMemory())) == 'a "x"\nb "y"'


def test_comment_with_speaker_is_not_used_as_fallback():
    lines = split_script('    # e "Press start"\n    e ""')
    memory = TranslationMemory({"Press start": "PRESS START"})

    assert rewrite_lines(lines, memory) == ['    # e "Press start"', '    e ""']
