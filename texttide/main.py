# texttide/main.py

import asyncio
import signal

import texttide.config as config
from texttide.bootstrap import build_service
from texttide.observability.logger import configure_logging
from texttide.observability.tracing import init_tracing
from texttide.routes.api_routes import make_app
from texttide.utils.logger import log_info

# A global list to hold shutdown tasks
shutdown_tasks = []


async def shutdown():
    """ Gracefully run all registered shutdown tasks. """
    log_info("Starting graceful shutdown...")
    await asyncio.gather(*[task() for task in shutdown_tasks])
    log_info("Shutdown complete.")
    asyncio.get_running_loop().stop()


def handle_signal(sig):
    """ Signal handler to initiate graceful shutdown. """
    sig_name = getattr(sig, "name", str(sig))  # handle int signum
    log_info(f"Received exit signal {sig_name}...")
    asyncio.ensure_future(shutdown())


async def main():
    """ Main entry point for the application startup. """
    # 0. Configure structured JSON logging as early as possible
    configure_logging(config)

    # 0.1 Initialize OpenTelemetry tracing (no-op unless TRACING_ENABLED)
    init_tracing(config)

    # 1. Build the clipboard service on the configured storage backend.
    service = build_service(config)

    if config.STORAGE_BACKEND == "sql":
        async def close_engine():
            from texttide.db.base import async_engine
            log_info("Disposing database engine...")
            await async_engine.dispose()
            log_info("Database engine disposed.")
        shutdown_tasks.append(close_engine)

    # 2. Create and start the Tornado application.
    app = make_app(service)
    app.listen(config.PORT, address=config.HOST)
    log_info(f"Server started at http://{config.HOST}:{config.PORT}")
    print(f"Server started at http://{config.HOST}:{config.PORT}")


if __name__ == "__main__":
    loop = asyncio.new_event_loop()  # avoid deprecated get_event_loop
    asyncio.set_event_loop(loop)

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal, sig)

    loop.run_until_complete(main())

    loop.run_forever()
