from informarr.media.request import MediaIdentifiers, MediaType
from informarr.media.store import PendingRequestStore


def test_upsert_same_identity_twice_keeps_one(tv_request, make_tv_request):
    store = PendingRequestStore()

    assert store.upsert(tv_request) is True
    assert store.upsert(make_tv_request(seasons=(1, 2))) is False

    assert len(store) == 1
    assert store.snapshot()[0].requested_seasons == (1,)


def test_upsert_matches_on_secondary_id(make_tv_request):
    store = PendingRequestStore()
    store.upsert(make_tv_request(primary_id=None, secondary_id=5))

    assert store.upsert(make_tv_request(primary_id=1, secondary_id=5)) is False
    assert len(store) == 1


def test_movie_and_show_with_same_tmdb_id_are_distinct(make_tv_request, make_movie_request):
    store = PendingRequestStore()

    assert store.upsert(make_tv_request(primary_id=42, secondary_id=None))
    assert store.upsert(make_movie_request(primary_id=42))
    assert len(store) == 2

    assert store.find_movie(42).media_type == MediaType.Movie
    assert store.find_tv(42).media_type == MediaType.TV


def test_find_tv_falls_back_to_secondary_id(make_tv_request):
    store = PendingRequestStore()
    request = make_tv_request(primary_id=None, secondary_id=5)
    store.upsert(request)

    assert store.find_tv(None, 5) == request
    assert store.find_tv(None, None) is None
    assert store.find_tv(0, 0) is None
    assert store.find_tv(1399, 6) is None


def test_find_movie(movie_request):
    store = PendingRequestStore()
    store.upsert(movie_request)

    assert store.find_movie(603) == movie_request
    assert store.find_movie(604) is None
    assert store.find_tv(603) is None


def test_remove(tv_request, movie_request):
    store = PendingRequestStore()
    store.upsert(tv_request)
    store.upsert(movie_request)

    assert store.remove(tv_request) is True
    assert store.remove(tv_request) is False
    assert tv_request not in store
    assert movie_request in store


def test_snapshot_is_a_copy(tv_request, movie_request):
    store = PendingRequestStore()
    store.upsert(tv_request)

    snapshot = store.snapshot()
    snapshot.append(movie_request)

    assert len(store) == 1
    assert movie_request not in store


def test_replace_swaps_content_and_dedupes(tv_request, movie_request, make_tv_request):
    store = PendingRequestStore()
    store.upsert(movie_request)

    store.replace([tv_request, make_tv_request(seasons=(3,))])

    assert len(store) == 1
    assert movie_request not in store
    assert store.find_tv(1399).requested_seasons == (1,)


def test_clear(tv_request):
    store = PendingRequestStore()
    store.upsert(tv_request)
    store.clear()

    assert len(store) == 0
    assert list(store) == []


def test_requested_seasons_are_sorted_and_unique(make_tv_request):
    request = make_tv_request(seasons=(3, 1, 3, 2))

    assert request.requested_seasons == (1, 2, 3)
    assert request.ids == MediaIdentifiers(1399, 121361)
