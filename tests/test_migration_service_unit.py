import pytest

from conftest import FakeShopify, FakeStore, RecordingPacer, make_record
from app.models.product import RecordStatus
from app.services.migration_service import MigrationService


def _service(docs, events, **shopify_kwargs):
    store = FakeStore(docs)
    shopify = FakeShopify(events=events, **shopify_kwargs)
    return MigrationService(store, shopify, pacer=RecordingPacer(events), batch_size=10), store, shopify


@pytest.mark.anyio
async def test_metafields_follow_product_creation(events):
    svc, _store, _shopify = _service([("doc1", make_record(1))], events)
    await svc.run()

    assert events[0] == ("product", "Product 1")
    metafield_events = [e for e in events if e[0] == "metafield"]
    assert [e[2] for e in metafield_events] == ["brand", "suppdate", "suppinvo", "value"]
    assert all(e[1] == 1001 for e in metafield_events)
    # every metafield call is followed by a pause
    for idx, e in enumerate(events):
        if e[0] == "metafield":
            assert events[idx + 1] == ("pause", "metafield")
    assert events[-1] == ("pause", "record")


@pytest.mark.anyio
async def test_falsy_metafield_values_are_not_created(events):
    record = make_record(1, brand="", suppinvo=None, value=0)
    del record["suppdate"]
    svc, _store, shopify = _service([("doc1", record)], events)
    report = await svc.run()

    assert report.migrated == 1
    assert shopify.created_metafields == []
    assert ("pause", "metafield") not in events


@pytest.mark.anyio
async def test_metafield_failure_marks_record_partial(events):
    svc, store, _shopify = _service([("doc1", make_record(1))], events, fail_metafield_keys={"brand"})
    report = await svc.run()

    assert report.migrated == 1
    result = report.results[0]
    assert result.status == RecordStatus.PARTIAL
    assert result.metafield_errors and result.metafield_errors[0].startswith("brand")
    assert store.updates[0][0] == "doc1"
    # the remaining metafields were still attempted
    assert [e[2] for e in events if e[0] == "metafield"] == ["brand", "suppdate", "suppinvo", "value"]


@pytest.mark.anyio
async def test_skipped_records_do_not_pause(events):
    docs = [("doc1", make_record(1, shopifyId="gid://shopify/Product/9"))]
    svc, store, shopify = _service(docs, events)
    report = await svc.run()

    assert report.skipped == 1
    assert report.migrated == 0
    assert report.results[0].shopify_id is None
    assert events == []
    assert store.updates == []


@pytest.mark.anyio
async def test_batches_preserve_order(events):
    docs = [(f"doc{i:02d}", make_record(i)) for i in range(23)]
    svc, store, _shopify = _service(docs, events)
    report = await svc.run()

    assert report.batches == 3
    assert [r.record_id for r in report.results] == [d[0] for d in docs]
    assert events.count(("pause", "batch")) == 2
    assert [u[0] for u in store.updates] == [d[0] for d in docs]


@pytest.mark.anyio
async def test_malformed_document_is_a_record_failure(events):
    docs = [("bad", make_record(1, rate="not-a-number")), ("good", make_record(2))]
    svc, _store, _shopify = _service(docs, events)
    report = await svc.run()

    assert report.failed == 1
    assert report.migrated == 1
    assert report.results[0].status == RecordStatus.FAILED


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        MigrationService(FakeStore(), FakeShopify(), batch_size=0)


@pytest.mark.anyio
async def test_unusual_optional_values_still_migrate(events):
    docs = [("doc1", make_record(1, stock="n/a", value="N/A", brand=["Acme", "Tools"]))]
    svc, store, shopify = _service(docs, events)
    report = await svc.run()

    assert report.migrated == 1
    assert store.updates[0][0] == "doc1"
    variant = shopify.created_products[0][1].product.variants[0]
    assert variant.inventory_quantity is None
