from vntranslate.masking import mask, unmask


def test_mask_replaces_brackets_and_braces_in_order():
    masked = mask("Hello [player], you have {b}[gold]{/b} coins")

    assert masked.masked_text == "Hello __0__, you have __1____2____3__ coins"
    assert masked.variables == ["[player]", "{b}", "[gold]", "{/b}"]


def test_mask_without_placeholders_is_identity():
    masked = mask("Plain line")

    assert masked.masked_text == "Plain line"
    assert masked.variables == []


def test_round_trip_when_translation_keeps_tokens():
    original = "[name] said {i}hello{/i} to [target]"
    masked = mask(original)

    assert unmask(masked.masked_text, masked.variables) == original


def test_unmask_accepts_whitespace_inside_tokens():
    assert unmask("สวัสดี __ 0 __!", ["[player]"]) == "สวัสดี [player]!"


def test_unmask_keeps_out_of_range_tokens():
    assert unmask("__0__ and __5__", ["[a]"]) == "[a] and __5__"


def test_unmask_empty_translation_returns_empty_string():
    assert unmask("", ["[a]"]) == ""
    assert unmask(None, ["[a]"]) == ""
