import pytest

from data_model import ErrorCode, HeadingFound, NoHeadingFound
from splitter import CorpusSplitter, SentinelSplitter, split_payloads, split_sources


def test_splits_in_source_order(sentinel, join_corpus):
    text = join_corpus(["# A\nalfa", "# B\nbeta", "# C\ngamma"])
    payloads = list(SentinelSplitter(text, sentinel))

    assert [p.sequence_index for p in payloads] == [0, 1, 2]
    assert [p.extracted_title for p in payloads] == ["A", "B", "C"]
    assert payloads[1].raw_text == "# B\nbeta"


def test_sentinel_never_in_payload(sentinel):
    text = f"# A\nx{sentinel}# B\ny{sentinel}{sentinel}# C\nz"
    payloads = list(split_payloads(text, sentinel))

    assert len(payloads) == 3
    assert all(sentinel not in p.raw_text for p in payloads)


def test_text_without_sentinel_is_single_payload(sentinel):
    payloads = list(SentinelSplitter("# Only\n\nbody\n", sentinel))

    assert len(payloads) == 1
    assert payloads[0].raw_text == "# Only\n\nbody"
    assert SentinelSplitter("# Only", sentinel).structural_issues() == []


def test_empty_and_whitespace_text_produce_nothing(sentinel):
    assert list(SentinelSplitter("", sentinel)) == []
    assert list(SentinelSplitter("  \n\t\n", sentinel)) == []


def test_leading_sentinel_is_discarded_and_reported(sentinel):
    splitter = SentinelSplitter(f"{sentinel}\n# A\nalfa", sentinel, source="qa.md")
    payloads = list(splitter)
    issues = splitter.structural_issues()

    assert len(payloads) == 1
    assert payloads[0].sequence_index == 0
    assert len(issues) == 1
    assert issues[0].code is ErrorCode.EMPTY_SLICE
    assert issues[0].details["position"] == "leading"
    assert issues[0].location == "qa.md#slice0"


def test_trailing_sentinel_is_discarded_and_reported(sentinel):
    splitter = SentinelSplitter(f"# A\nalfa\n{sentinel}\n", sentinel)
    payloads = list(splitter)
    issues = splitter.structural_issues()

    assert [p.extracted_title for p in payloads] == ["A"]
    assert [i.details["position"] for i in issues] == ["trailing"]


def test_adjacent_sentinels_leave_no_hole_in_indices(sentinel):
    text = f"# A\n{sentinel}\n   \n{sentinel}\n# B"
    splitter = SentinelSplitter(text, sentinel)
    payloads = list(splitter)

    assert [p.sequence_index for p in payloads] == [0, 1]
    assert [i.details["position"] for i in splitter.structural_issues()] == ["inner"]


def test_splitter_is_restartable(sentinel, join_corpus):
    splitter = SentinelSplitter(join_corpus(["# A", "# B"]), sentinel)

    assert list(splitter) == list(splitter)


def test_inner_indentation_is_kept(sentinel):
    text = f"# A\n\n    code()\n\n{sentinel}\n# B"
    payloads = list(SentinelSplitter(text, sentinel))

    assert payloads[0].raw_text == "# A\n\n    code()"


@pytest.mark.parametrize("n", [1, 2, 5, 12])
def test_round_trip_recovers_joined_payloads(sentinel, join_corpus, n):
    blocks = [f"# Temat {i}\n\nQ: pytanie {i}?\nA: odpowiedź {i}." for i in range(n)]
    payloads = list(SentinelSplitter(join_corpus(blocks), sentinel))

    assert [p.raw_text for p in payloads] == blocks
    assert [p.sequence_index for p in payloads] == list(range(n))


def test_custom_sentinel(join_corpus):
    text = "# A\nalfa\n---NEXT---\n# B\nbeta"
    payloads = list(SentinelSplitter(text, "---NEXT---"))

    assert [p.extracted_title for p in payloads] == ["A", "B"]


def test_heading_variant_on_payload(sentinel):
    text = f"# Z nagłówkiem\n{sentinel}\nbez nagłówka"
    first, second = SentinelSplitter(text, sentinel)

    assert isinstance(first.heading, HeadingFound)
    assert isinstance(second.heading, NoHeadingFound)
    assert second.extracted_title is None


def test_declared_id_is_picked_up(sentinel):
    text = "<!-- id: change-detection -->\n# Angular CD\nbody"
    (payload,) = SentinelSplitter(text, sentinel)

    assert payload.declared_id == "change-detection"
    assert payload.extracted_title == "Angular CD"


def test_invalid_arguments_raise():
    with pytest.raises(ValueError):
        SentinelSplitter("x", "")
    with pytest.raises(ValueError):
        SentinelSplitter("x", "S", lookahead=0)
    with pytest.raises(ValueError):
        CorpusSplitter([("a.md", "x")], "")


def test_corpus_splitter_numbers_across_files(sentinel, join_corpus):
    sources = [
        ("qa-1.md", join_corpus(["# A", "# B"])),
        ("qa-2.md", f"{sentinel}\n# C"),
        ("qa-3.md", "# D"),
    ]
    splitter = CorpusSplitter(sources, sentinel)
    payloads = list(splitter)

    assert [p.sequence_index for p in payloads] == [0, 1, 2, 3]
    assert [p.source for p in payloads] == ["qa-1.md", "qa-1.md", "qa-2.md", "qa-3.md"]
    assert [i.location for i in splitter.structural_issues()] == ["qa-2.md#slice0"]


def test_split_sources_matches_corpus_splitter(sentinel, join_corpus):
    sources = [("a.md", join_corpus(["# A", "# B"])), ("b.md", "# C")]

    assert list(split_sources(sources, sentinel)) == list(CorpusSplitter(sources, sentinel))
