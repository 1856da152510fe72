"""Main entry point for the NMBS departures companion."""

import asyncio
import logging
import sys

import aiohttp

from nmbs_departures.adapters.config import AppConfig
from nmbs_departures.adapters.irail_api import (
    IRailConnectionGateway,
    IRailHttpClient,
    IRailStationRepository,
)
from nmbs_departures.adapters.storage import JsonFileStore
from nmbs_departures.adapters.transport import WebSocketDeviceTransport
from nmbs_departures.adapters.web import ConfigServer
from nmbs_departures.application.services import (
    CompanionService,
    CompanionServices,
    CompanionSettings,
    CompanionStorage,
    CorrelationStore,
    Debouncer,
    RecordFormatter,
    SequentialTransmitter,
    StationDirectory,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def build_service(
    config: AppConfig,
    storage: CompanionStorage,
    client: IRailHttpClient,
    transport: WebSocketDeviceTransport,
) -> CompanionService:
    """Wire the companion service from its adapters."""
    services = CompanionServices(
        gateway=IRailConnectionGateway(client, config.irail_connections_url, config.timezone),
        transmitter=SequentialTransmitter(transport),
        formatter=RecordFormatter(config.timezone),
        correlation=CorrelationStore(storage),
        storage=storage,
        stations=StationDirectory(
            storage, IRailStationRepository(client, config.irail_stations_url)
        ),
        debouncer=Debouncer("search"),
    )
    settings = CompanionSettings(
        debounce_delay_ms=config.debounce_delay_ms,
        timezone=config.timezone,
        schedule_evaluation_interval_seconds=config.schedule_evaluation_interval_seconds,
    )
    return CompanionService(services, settings)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    logging.getLogger().setLevel(config.log_level)

    storage = CompanionStorage(JsonFileStore(config.storage_path))

    # Create aiohttp session shared by the iRail client and the device transport
    async with aiohttp.ClientSession() as session:
        client = IRailHttpClient(
            session,
            user_agent=config.irail_user_agent,
            timeout_seconds=config.irail_timeout_seconds,
            language=lambda: storage.load_language() or config.language,
        )
        transport = WebSocketDeviceTransport(session, config.device_url)
        service = build_service(config, storage, client, transport)
        transport.set_handler(service.handle_inbound)

        try:
            await transport.connect()
        except aiohttp.ClientError as e:
            logger.error(f"Could not connect to device bridge at {config.device_url}: {e}")
            sys.exit(1)

        await service.start()

        config_server = ConfigServer(config, service.apply_configuration)
        server_task = asyncio.create_task(config_server.serve())
        bridge_task = asyncio.create_task(transport.wait_closed())
        try:
            await asyncio.wait({server_task, bridge_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            logger.info("Shutting down...")
            config_server.stop()
            await asyncio.gather(server_task, return_exceptions=True)
            bridge_task.cancel()
            await service.stop()
            await transport.close()


def cli_main() -> None:
    """Synchronous entry point for the companion command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
