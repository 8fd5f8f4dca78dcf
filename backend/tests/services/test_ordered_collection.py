"""Ordered Collection — append, reorder, list and remove over all four collections.

Tests cover:
    - Append monotonicity: k appends on an empty parent land on 0..k-1
    - Explicit positions honoured; gaps after removal are not renumbered
    - Reorder atomicity: a foreign or unknown id rejects the whole batch
    - Products report a foreign id as Forbidden, the others as NotFound
    - List ordering: ascending position, deterministic ties, one parent only
"""

from uuid import uuid4

import pytest

from app.core.errors import ForbiddenError, ResourceNotFoundError
from app.core.ordering import PositionUpdate
from app.models.creator_profile import CreatorProfile
from app.models.store import Store
from app.models.store_page import StorePage
from app.services.ordered_collection import (
    BLOCKS, PAGES, PRODUCTS, SECTIONS, OrderedCollection,
)


async def _store(db, slug: str) -> Store:
    profile = CreatorProfile(account_id=uuid4(), full_name=slug)
    db.add(profile)
    await db.flush()
    store = Store(creator_id=profile.id, slug=slug, name=slug)
    db.add(store)
    await db.commit()
    return store


async def _sections(db, store, count: int) -> list:
    collection = OrderedCollection(db, SECTIONS)
    return [
        await collection.append(store.id, type="title", data={"n": n})
        for n in range(count)
    ]


async def test_append_positions_are_monotonic(test_db):
    store = await _store(test_db, "acme")
    sections = await _sections(test_db, store, 4)
    assert [s.position for s in sections] == [0, 1, 2, 3]


async def test_append_is_per_parent(test_db):
    acme, rival = await _store(test_db, "acme"), await _store(test_db, "rival")
    await _sections(test_db, acme, 3)
    first_rival = (await _sections(test_db, rival, 1))[0]
    assert first_rival.position == 0


async def test_explicit_position_is_honoured(test_db):
    store = await _store(test_db, "acme")
    section = await OrderedCollection(test_db, SECTIONS).append(
        store.id, position=10, type="divider", data={},
    )
    assert section.position == 10
    nxt = await OrderedCollection(test_db, SECTIONS).append(
        store.id, type="divider", data={},
    )
    assert nxt.position == 11


async def test_remove_leaves_gap(test_db):
    store = await _store(test_db, "acme")
    a, b, c = await _sections(test_db, store, 3)
    collection = OrderedCollection(test_db, SECTIONS)
    await collection.remove(b.id)
    remaining = await collection.list(store.id)
    assert [s.position for s in remaining] == [0, 2]
    appended = await collection.append(store.id, type="title", data={})
    assert appended.position == 3


async def test_reorder_swaps_positions(test_db):
    store = await _store(test_db, "acme")
    a, b, c = await _sections(test_db, store, 3)
    ordered = await OrderedCollection(test_db, SECTIONS).reorder(store.id, [
        PositionUpdate(a.id, 2), PositionUpdate(c.id, 0),
    ])
    assert [s.id for s in ordered] == [c.id, b.id, a.id]


async def test_partial_reorder_keeps_untouched_siblings(test_db):
    store = await _store(test_db, "acme")
    a, b, c = await _sections(test_db, store, 3)
    ordered = await OrderedCollection(test_db, SECTIONS).reorder(
        store.id, [PositionUpdate(a.id, 5)],
    )
    assert [(s.id, s.position) for s in ordered] == [(b.id, 1), (c.id, 2), (a.id, 5)]


async def test_reorder_with_foreign_id_changes_nothing(test_db):
    acme, rival = await _store(test_db, "acme"), await _store(test_db, "rival")
    a, b = await _sections(test_db, acme, 2)
    (foreign,) = await _sections(test_db, rival, 1)
    # a failed batch rolls the session back and expires loaded rows
    acme_id, a_id, b_id, foreign_id = acme.id, a.id, b.id, foreign.id
    collection = OrderedCollection(test_db, SECTIONS)

    with pytest.raises(ResourceNotFoundError) as exc:
        await collection.reorder(acme_id, [
            PositionUpdate(a_id, 1), PositionUpdate(foreign_id, 0),
        ])

    assert exc.value.resource_id == str(foreign_id)
    assert [(s.id, s.position) for s in await collection.list(acme_id)] == [
        (a_id, 0), (b_id, 1),
    ]
    assert (await collection.get(foreign_id)).position == 0


async def test_reorder_with_unknown_id_changes_nothing(test_db):
    store = await _store(test_db, "acme")
    a, b = await _sections(test_db, store, 2)
    store_id, a_id, ghost = store.id, a.id, uuid4()
    collection = OrderedCollection(test_db, SECTIONS)
    with pytest.raises(ResourceNotFoundError) as exc:
        await collection.reorder(store_id, [
            PositionUpdate(a_id, 1), PositionUpdate(ghost, 0),
        ])
    assert exc.value.resource_id == str(ghost)
    assert [s.position for s in await collection.list(store_id)] == [0, 1]
    assert (await collection.get(a_id)).position == 0


async def test_product_reorder_reports_foreign_product_as_forbidden(test_db):
    acme, rival = await _store(test_db, "acme"), await _store(test_db, "rival")
    products = OrderedCollection(test_db, PRODUCTS)
    mine = await products.append(
        acme.creator_id, type="DIGITAL", title="Mine", price=5.0, status="DRAFT",
    )
    theirs = await products.append(
        rival.creator_id, type="DIGITAL", title="Theirs", price=5.0, status="DRAFT",
    )
    creator_id, mine_id, theirs_id = acme.creator_id, mine.id, theirs.id
    with pytest.raises(ForbiddenError):
        await products.reorder(creator_id, [
            PositionUpdate(mine_id, 3), PositionUpdate(theirs_id, 0),
        ])
    assert (await products.get(mine_id)).position == 0

    with pytest.raises(ResourceNotFoundError):
        await products.reorder(creator_id, [PositionUpdate(uuid4(), 0)])


async def test_list_orders_ties_deterministically(test_db):
    store = await _store(test_db, "acme")
    collection = OrderedCollection(test_db, SECTIONS)
    first = await collection.append(store.id, position=1, type="title", data={})
    second = await collection.append(store.id, position=1, type="title", data={})
    zero = await collection.append(store.id, position=0, type="title", data={})
    listed = await collection.list(store.id)
    assert listed[0].id == zero.id
    assert {s.id for s in listed[1:]} == {first.id, second.id}
    assert [s.id for s in await collection.list(store.id)] == [s.id for s in listed]


async def test_list_is_scoped_to_parent(test_db):
    acme, rival = await _store(test_db, "acme"), await _store(test_db, "rival")
    mine = await _sections(test_db, acme, 2)
    await _sections(test_db, rival, 3)
    listed = await OrderedCollection(test_db, SECTIONS).list(acme.id)
    assert [s.id for s in listed] == [s.id for s in mine]


async def test_list_filters_statuses(test_db):
    store = await _store(test_db, "acme")
    collection = OrderedCollection(test_db, SECTIONS)
    visible = await collection.append(store.id, type="title", data={}, status=1)
    await collection.append(store.id, type="title", data={}, status=2)
    listed = await collection.list(store.id, visible_statuses=[1])
    assert [s.id for s in listed] == [visible.id]


async def test_blocks_order_within_their_page(test_db):
    store = await _store(test_db, "acme")
    pages = OrderedCollection(test_db, PAGES)
    blocks = OrderedCollection(test_db, BLOCKS)
    page = await pages.append(store.id, slug="ebook", type="digital-download", data={})
    other = await pages.append(store.id, slug="course", type="course", data={})
    hero = await blocks.append(page.id, type="hero", data={})
    faq = await blocks.append(page.id, type="faq", data={})
    await blocks.append(other.id, type="hero", data={})

    ordered = await blocks.reorder(page.id, [
        PositionUpdate(hero.id, 1), PositionUpdate(faq.id, 0),
    ])
    assert [b.id for b in ordered] == [faq.id, hero.id]
    assert isinstance(page, StorePage)


async def test_get_unknown_raises_not_found(test_db):
    with pytest.raises(ResourceNotFoundError):
        await OrderedCollection(test_db, PAGES).get(uuid4())
