"""Unit tests for the session store."""

from viavo.catalog import get_product
from viavo.models import AppStep, BodyAnalysis, GarmentOptions
from viavo.recommender import recommend
from viavo.session import Session, SessionStore

M_BLACK = GarmentOptions(size="M", color="Matte Black")


def test_new_store_is_empty() -> None:
    store = SessionStore()

    assert store.session == Session()
    assert store.step is AppStep.LANDING
    assert store.error is None


def test_select_garment_is_idempotent() -> None:
    once, twice = SessionStore(), SessionStore()
    henley = get_product("p1")

    once.select_garment(henley, M_BLACK)
    twice.select_garment(henley, M_BLACK)
    twice.select_garment(henley, M_BLACK)

    assert once.session == twice.session
    assert len(twice.session.selected_products) == 1


def test_reselecting_updates_options_without_reordering() -> None:
    store = SessionStore()
    store.select_garment(get_product("p1"), M_BLACK)
    store.select_garment(get_product("p3"), GarmentOptions(size="32", color="Jet Black"))

    store.select_garment(get_product("p1"), GarmentOptions(size="L", color="Matte Black"))

    assert [p.id for p in store.session.selected_products] == ["p1", "p3"]
    assert store.session.selected_options["p1"].size == "L"


def test_remove_after_select_restores_previous_state() -> None:
    store = SessionStore()
    store.select_garment(get_product("p2"), GarmentOptions(size="S", color="Cream / Green"))
    before = store.session

    store.select_garment(get_product("p1"), M_BLACK)
    store.remove_garment("p1")

    assert store.session.selected_products == before.selected_products
    assert store.session.selected_options == before.selected_options


def test_two_garments_stay_in_sync() -> None:
    store = SessionStore()
    store.select_garment(get_product("p1"), M_BLACK)
    store.select_garment(get_product("p4"), GarmentOptions(size="L", color="Heather Grey"))

    session = store.session
    assert len(session.selected_products) == 2
    assert set(session.selected_options) == {"p1", "p4"}


def test_removing_unknown_garment_is_a_no_op() -> None:
    store = SessionStore()
    store.select_garment(get_product("p1"), M_BLACK)
    before = store.session

    store.remove_garment("nope")

    assert store.session is before


def test_set_result_and_reset(analysis: BodyAnalysis) -> None:
    store = SessionStore()
    store.set_face_photo("data:image/jpeg;base64,AAAA")
    store.select_garment(get_product("p1"), M_BLACK)
    recs = recommend(analysis, [get_product("p1")])

    store.set_result("data:image/png;base64,BBBB", analysis, recs)
    store.set_step(AppStep.RESULTS)

    assert store.session.result_image == "data:image/png;base64,BBBB"
    assert store.session.analysis == analysis
    assert list(store.session.recommendations) == recs

    store.reset()

    assert store.session == Session()
    assert store.step is AppStep.LANDING


def test_recommendations_follow_selection_once_analysed(analysis: BodyAnalysis) -> None:
    store = SessionStore()
    store.select_garment(get_product("p1"), M_BLACK)
    store.set_result("data:image/png;base64,BBBB", analysis, recommend(analysis, [get_product("p1")]))

    store.select_garment(get_product("p3"), GarmentOptions(size="30", color="Jet Black"))
    assert [r.product_id for r in store.session.recommendations] == ["p1", "p3"]

    store.remove_garment("p1")
    assert [r.product_id for r in store.session.recommendations] == ["p3"]


def test_stale_upload_is_discarded() -> None:
    store = SessionStore()
    first = store.begin_photo_upload("face")
    second = store.begin_photo_upload("face")

    assert store.commit_photo("face", "data:image/jpeg;base64,NEW", second)
    assert not store.commit_photo("face", "data:image/jpeg;base64,OLD", first)
    assert store.session.face_photo == "data:image/jpeg;base64,NEW"


def test_abandoned_newer_upload_does_not_block_older_one() -> None:
    store = SessionStore()
    older = store.begin_photo_upload("face")
    store.begin_photo_upload("face")

    assert store.commit_photo("face", "data:image/jpeg;base64,OLD", older)
    assert store.session.face_photo == "data:image/jpeg;base64,OLD"


def test_clearing_a_slot_supersedes_pending_upload() -> None:
    store = SessionStore()
    token = store.begin_photo_upload("body")

    store.set_body_photo(None)

    assert not store.commit_photo("body", "data:image/jpeg;base64,LATE", token)
    assert store.session.body_photo is None


def test_slots_are_independent() -> None:
    store = SessionStore()
    face = store.begin_photo_upload("face")
    body = store.begin_photo_upload("body")

    assert store.commit_photo("body", "data:image/jpeg;base64,BODY", body)
    assert store.commit_photo("face", "data:image/jpeg;base64,FACE", face)


def test_listeners_see_every_change() -> None:
    store = SessionStore()
    seen: list[Session] = []
    unsubscribe = store.subscribe(seen.append)

    store.set_face_photo("data:image/jpeg;base64,AAAA")
    store.select_garment(get_product("p1"), M_BLACK)
    unsubscribe()
    store.remove_garment("p1")

    assert len(seen) == 2
    assert seen[-1].is_selected("p1")


def test_successful_change_clears_error() -> None:
    store = SessionStore()
    store.report_error("File size exceeds 10MB limit")
    assert store.error == "File size exceeds 10MB limit"

    store.set_face_photo("data:image/jpeg;base64,AAAA")

    assert store.error is None
