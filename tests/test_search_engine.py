import pytest

from knowledge_base.search.engine import (
    MAX_RESULTS,
    SearchResult,
    normalize_query,
    score_page,
    search_pages,
)

CATS = "<title>Cats</title><p>cats are great</p>"
DOGS = "<title>Dogs</title><p>dogs rule</p>"


@pytest.fixture
def corpus(page_factory):
    return [
        page_factory("https://a.com/1", CATS, content_size=45),
        page_factory("https://a.com/2", DOGS, content_size=40),
    ]


def test_single_term_matches_one_page(corpus):
    results = search_pages("cats", corpus)

    assert [(r.url, r.relevance) for r in results] == [("https://a.com/1", 1.0)]
    assert isinstance(results[0], SearchResult)
    assert results[0].content == CATS


def test_two_terms_tie_keeps_corpus_order(corpus):
    results = search_pages("cats dogs", corpus)

    assert [(r.url, r.relevance) for r in results] == [
        ("https://a.com/1", 0.5),
        ("https://a.com/2", 0.5),
    ]


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_empty_query_returns_nothing(query, corpus):
    assert search_pages(query, corpus) == []


def test_empty_query_does_not_read_corpus():
    def exploding_corpus():
        raise AssertionError("corpus should not be iterated")
        yield

    assert search_pages("  ", exploding_corpus()) == []


def test_query_normalization_is_lowercase_and_distinct():
    assert normalize_query("Cats  DOGS cats") == ["cats", "dogs"]


def test_repeated_terms_count_once(page_factory):
    page = page_factory("https://a.com/1", "cats")

    assert search_pages("cats cats dogs", [page])[0].relevance == 0.5


def test_term_frequency_does_not_change_score():
    assert score_page("cat", ["cat"]) == score_page("cat cat cat cat", ["cat"]) == 1.0


def test_matching_is_case_insensitive_substring(page_factory):
    page = page_factory("https://a.com/1", "<h1>CATALOGUE</h1>")

    assert search_pages("Cat", [page])[0].relevance == 1.0


def test_relevance_bounds_and_full_match(page_factory):
    pages = [
        page_factory("https://a.com/1", "alpha beta gamma"),
        page_factory("https://a.com/2", "alpha"),
        page_factory("https://a.com/3", "nothing here"),
    ]

    results = search_pages("alpha beta gamma", pages)

    assert all(0 < r.relevance <= 1 for r in results)
    assert [r.url for r in results if r.relevance == 1] == ["https://a.com/1"]
    assert "https://a.com/3" not in [r.url for r in results]


def test_ranking_is_deterministic(page_factory):
    pages = [
        page_factory(f"https://a.com/{i}", "alpha" + (" beta" if i % 3 == 0 else ""))
        for i in range(30)
    ]

    assert search_pages("alpha beta", pages) == search_pages("alpha beta", pages)


def test_results_capped_to_highest_scoring(page_factory):
    partial = [page_factory(f"https://a.com/p{i}", "alpha") for i in range(60)]
    full = [page_factory(f"https://a.com/f{i}", "alpha beta") for i in range(10)]

    results = search_pages("alpha beta", partial + full)

    assert len(results) == MAX_RESULTS
    assert [r.url for r in results[:10]] == [p.url for p in full]
    assert all(r.relevance == 0.5 for r in results[10:])
    assert [r.url for r in results[10:]] == [p.url for p in partial[:40]]


def test_search_has_no_caller_supplied_limit(page_factory):
    pages = [page_factory(f"https://a.com/{i}", "alpha") for i in range(80)]

    with pytest.raises(TypeError):
        search_pages("alpha", pages, limit=80)
    assert len(search_pages("alpha", pages)) == MAX_RESULTS
