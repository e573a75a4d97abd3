from app.client.view import (
    ERROR_MESSAGE,
    LOADING_MESSAGE,
    build_bookmark_view,
    matches_filter,
)
from app.models import MergedVideo


def _merged(video_id, title, category, bookmarked):
    return MergedVideo(
        id=video_id,
        title=title,
        category=category,
        year=2020,
        rating="PG",
        is_bookmarked=bookmarked,
    )


VIDEOS = (
    _merged("1", "Beyond Earth", "Movie", True),
    _merged("2", "Undiscovered Cities", "TV Series", False),
    _merged("3", "Earth's Untouched", "Movie", True),
    _merged("4", "The Diary", "TV Series", True),
    _merged("5", "Bottom Gear", "Movie", False),
)


def test_matches_filter_is_case_insensitive_substring():
    assert matches_filter(VIDEOS[0], "earth")
    assert matches_filter(VIDEOS[0], "  BEYOND ")
    assert matches_filter(VIDEOS[0], "")
    assert not matches_filter(VIDEOS[0], "diary")


def test_partitions_only_bookmarked_entries():
    state = build_bookmark_view(VIDEOS)

    assert state.status == "ready"
    assert [video.id for video in state.movies.videos] == ["1", "3"]
    assert [video.id for video in state.series.videos] == ["4"]
    assert state.total_count == 3
    assert state.movies.heading == "Bookmarked Movies"
    assert state.series.heading == "Bookmarked TV Series"
    assert state.movies.empty_message is None


def test_filter_headings_report_counts():
    state = build_bookmark_view(VIDEOS, "earth")

    assert state.movies.count == 2
    assert state.movies.heading == "Found 2 results for 'earth' in Bookmarked Movies"
    assert state.series.count == 0
    assert state.series.heading == "Found 0 results for 'earth' in Bookmarked TV Series"

    single = build_bookmark_view(VIDEOS, "diary")
    assert single.series.heading == "Found 1 result for 'diary' in Bookmarked TV Series"


def test_no_match_message_differs_from_no_bookmarks_message():
    filtered = build_bookmark_view(VIDEOS, "xyz")
    assert filtered.movies.count == 0
    assert filtered.movies.empty_message == "No results for 'xyz' in Bookmarked Movies."

    nothing = build_bookmark_view(
        tuple(video.with_bookmark(False) for video in VIDEOS), "xyz"
    )
    assert nothing.movies.empty_message == "There are no bookmarked Movies."
    assert nothing.series.empty_message == "There are no bookmarked TV Series."
    assert filtered.movies.empty_message != nothing.movies.empty_message


def test_loading_and_error_states_are_distinct_from_empty():
    loading = build_bookmark_view((), status="loading")
    idle = build_bookmark_view((), status="idle")
    failed = build_bookmark_view((), status="error")
    empty = build_bookmark_view(())

    assert loading.status == idle.status == "loading"
    assert loading.message == LOADING_MESSAGE
    assert failed.status == "error"
    assert failed.message == ERROR_MESSAGE
    assert empty.status == "ready"
    assert empty.message is None
    assert empty.movies.empty_message == "There are no bookmarked Movies."


def test_derivation_is_deterministic():
    assert build_bookmark_view(VIDEOS, "e") == build_bookmark_view(VIDEOS, "e")
