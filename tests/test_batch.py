from typing import List, Sequence

from conftest import FailingProvider, RecordingSink, UppercaseProvider

from vntranslate.batch import BatchTranslator
from vntranslate.batching import BatchBuilder
from vntranslate.errors import ErrorCategory
from vntranslate.events import Severity
from vntranslate.memory import TranslationMemory
from vntranslate.policy import ErrorPolicy
from vntranslate.providers import TranslationProvider


def _translator(provider, memory, batch_size=10, sink=None):
    return BatchTranslator(
        provider=provider,
        memory=memory,
        target_language="th",
        batch_size=batch_size,
        error_policy=ErrorPolicy(sink or RecordingSink()),
    )


def test_batch_builder_partitions_in_order():
    batches = BatchBuilder(2).build(["a", "b", "c", "d", "e"])

    assert [batch.strings for batch in batches] == [["a", "b"], ["c", "d"], ["e"]]
    assert [batch.batch_id for batch in batches] == [1, 2, 3]


def test_batch_builder_empty_input():
    assert BatchBuilder(3).build([]) == []


def test_five_strings_with_batch_size_two_make_three_calls():
    provider = UppercaseProvider()
    memory = TranslationMemory()

    outcome = _translator(provider, memory, batch_size=2).translate(
        ["a", "b", "c", "d", "e"], file_label="script.rpy"
    )

    assert [len(call) for call in provider.calls] == [2, 2, 1]
    assert outcome.batches == 3
    assert outcome.translated == 5
    assert memory.lookup("e") == "E"


def test_placeholders_are_masked_before_sending_and_restored():
    provider = UppercaseProvider()
    memory = TranslationMemory()

    _translator(provider, memory).translate(["hi [player] {b}ok{/b}"], file_label="x.rpy")

    assert provider.calls == [["hi __0__ __1__ok__2__"]]
    assert memory.lookup("hi [player] {b}ok{/b}") == "HI [player] {b}OK{/b}"


def test_failed_chunk_is_logged_and_later_chunks_continue():
    provider = FailingProvider(fail_on=[1])
    memory = TranslationMemory()
    sink = RecordingSink()
    policy = ErrorPolicy(sink)
    translator = BatchTranslator(
        provider=provider,
        memory=memory,
        target_language="th",
        batch_size=2,
        error_policy=policy,
    )

    outcome = translator.translate(["a", "b", "c"], file_label="day1.rpy")

    assert outcome.failed_batches == 1
    assert not memory.has("a") and not memory.has("b")
    assert memory.lookup("c") == "C"
    assert policy.count(ErrorCategory.TRANSLATION) == 1
    assert "day1.rpy" in sink.messages(Severity.ERROR)[0]


class ShortProvider(TranslationProvider):
    name = "short"

    def translate(self, texts: Sequence[str], *, target_language: str) -> List[str]:
        return ["only one"]


def test_result_count_mismatch_fails_whole_chunk():
    memory = TranslationMemory()

    outcome = _translator(ShortProvider(), memory).translate(["a", "b"], file_label="x.rpy")

    assert outcome.failed_batches == 1
    assert len(memory) == 0


class BareStringProvider(TranslationProvider):
    name = "bare"

    def translate(self, texts: Sequence[str], *, target_language: str):
        return texts[0][::-1]


def test_single_result_is_normalised_to_list():
    memory = TranslationMemory()

    _translator(BareStringProvider(), memory).translate(["abc"], file_label="x.rpy")

    assert memory.lookup("abc") == "cba"


class ExplodingProvider(TranslationProvider):
    name = "exploding"

    def translate(self, texts: Sequence[str], *, target_language: str) -> List[str]:
        raise ConnectionError("connection reset")


def test_unexpected_provider_exception_is_caught_per_chunk():
    memory = TranslationMemory()
    sink = RecordingSink()

    outcome = _translator(ExplodingProvider(), memory, sink=sink).translate(
        ["a"], file_label="x.rpy"
    )

    assert outcome.failed_batches == 1
    assert "connection reset" in sink.messages(Severity.ERROR)[0]
