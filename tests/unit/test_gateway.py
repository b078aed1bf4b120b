"""Test CatalogGateway construction and lifecycle."""

import pytest

from digital_catalog.catalog.products import ProductCatalog
from digital_catalog.core.config import Settings
from digital_catalog.core.errors import ConfigError
from digital_catalog.gateway import CatalogGateway


@pytest.fixture
def make_gateway(
    product_store, unit_store, vcs_factory, payment_gateway, ledger, ownership,
    email_transport, mailing_list, clock,
):
    def _make(settings: Settings) -> CatalogGateway:
        return CatalogGateway.from_config(
            settings,
            products=product_store,
            content_units=unit_store,
            vcs_factory=vcs_factory,
            payment_gateway=payment_gateway,
            ledger=ledger,
            ownership=ownership,
            email_transport=email_transport,
            mailing_list=mailing_list,
            clock=clock,
        )

    return _make


class TestCatalogGatewayFactory:
    def test_from_config(self, make_gateway, settings):
        gateway = make_gateway(settings)
        assert isinstance(gateway.catalog, ProductCatalog)
        assert gateway.background.pending == 0

    def test_requires_sender_address(self, make_gateway):
        with pytest.raises(ConfigError):
            make_gateway(Settings())


class TestCatalogGatewayLifecycle:
    async def test_stop_drains_side_effects(self, make_gateway, settings, user, email_transport):
        gateway = make_gateway(settings)
        await gateway.start()
        await gateway.purchase("prod-1", user, "tok_visa")
        await gateway.stop()

        assert gateway.background.pending == 0
        assert len(email_transport.sent) == 1

    async def test_operations_do_not_require_start(self, make_gateway, settings, user, ledger):
        gateway = make_gateway(settings)
        record = await gateway.purchase("prod-1", user, "tok_visa")
        assert await ledger.find_one(user.id, "prod-1") == record
        await gateway.stop()
