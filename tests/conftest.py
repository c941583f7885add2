import asyncio

import pytest

from scriptorium.config import StorageConfig
from scriptorium.service.storage_service import StorageGateway


@pytest.fixture
def config(tmp_path):
    return StorageConfig.for_path(tmp_path / "scriptorium.sqlite", op_timeout=5.0)


@pytest.fixture
def run_with_gateway(config):
    """Run ``scenario(gateway)`` on a fresh event loop and close the gateway after.

    Each call opens its own gateway, so two calls against the same config
    behave like two launches of the application.
    """

    def runner(scenario, gateway_factory=None):
        async def main():
            gateway = gateway_factory() if gateway_factory else StorageGateway(config)
            try:
                return await scenario(gateway)
            finally:
                await gateway.close()

        return asyncio.run(main())

    return runner
