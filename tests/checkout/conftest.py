import pytest
from protean.integrations.pytest import DomainFixture

from checkout.cart.fake_adapter import FakeCartStore
from checkout.identity.port import Principal
from checkout.order.ledger import OrderLedger
from checkout.orchestration.guard import CheckoutGuard
from checkout.orchestration.orchestrator import CheckoutOrchestrator
from checkout.pricing.fake_adapter import FakeCatalog


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def principal():
    return Principal(subject_id="user-001", authorization="Bearer token-001")


@pytest.fixture()
def cart_store():
    return FakeCartStore()


@pytest.fixture()
def catalog():
    return FakeCatalog({"1": "19.99", "7": "5.00", "8": "0.10"})


@pytest.fixture()
def ledger():
    return OrderLedger()


@pytest.fixture()
def orchestrator(cart_store, catalog, ledger):
    return CheckoutOrchestrator(
        carts=cart_store,
        pricing=catalog,
        ledger=ledger,
        guard=CheckoutGuard(mode="wait", wait_timeout=5.0),
    )


@pytest.fixture()
def second_item_write_fails(monkeypatch):
    """Fail the second OrderItem write of a unit of work, after the Order row is written.

    Yields the OrderItems whose writes were attempted.
    """
    from protean import current_domain

    from checkout.order.order import OrderItem

    dao_cls = type(current_domain.repository_for(OrderItem)._dao)
    original_save = dao_cls.save
    item_writes = []

    def save(self, entity, *args, **kwargs):
        if isinstance(entity, OrderItem):
            item_writes.append(entity)
            if len(item_writes) == 2:
                raise ConnectionError("connection dropped while writing order items")
        return original_save(self, entity, *args, **kwargs)

    monkeypatch.setattr(dao_cls, "save", save)
    yield item_writes
