import asyncio
import signal
import sys

from fanout.config import (
    load_config,
    resolve_address,
    resolve_config_path,
    resolve_targets,
)
from fanout.env import Env, load_env
from fanout.logging import Logger, LoggingConfig
from fanout.logging.fanout_logging_models import (
    RelayStartup,
    StartupFailed,
)
from fanout.relay import Destination, ReceiveError, UDPForwarder


def startup_entries(
    config_path: str,
    listen_address: str,
    listen_port: int,
    destinations: list[Destination],
    stats_interval: int,
) -> list[RelayStartup]:
    targets = [
        f"{destination.label} -> {destination.endpoint_key}"
        for destination in destinations
    ]

    lines = [
        f"Config: {config_path}",
        f"Listening on {listen_address}:{listen_port}",
        "Forwarding to:",
        *[f"- {target}" for target in targets],
        f"Stats interval: {stats_interval}s" if stats_interval > 0 else "Stats interval: disabled",
        "Press Ctrl+C to stop.",
    ]

    return [
        RelayStartup(
            message=line,
            config_path=config_path,
            listen_host=listen_address,
            listen_port=listen_port,
            targets=targets,
            stats_interval=stats_interval,
        ) for line in lines
    ]


def install_signal_handlers(forwarder: UDPForwarder):
    loop = asyncio.get_event_loop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, forwarder.stop)

        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support; Ctrl+C
            # surfaces as KeyboardInterrupt in run() instead.
            pass


async def create_forwarder(
    env: Env,
    logger: Logger,
) -> UDPForwarder:
    config_path = resolve_config_path(env.FANOUT_CONFIG_PATH)
    config = await load_config(config_path, logger=logger)

    listen_address = await resolve_address(config.listen_host, prefer_ipv4=True)
    destinations = await resolve_targets(config.targets, logger=logger)

    forwarder = UDPForwarder(
        listen_address,
        config.listen_port,
        destinations,
        stats_interval=config.stats_interval_seconds,
        error_log_interval=env.error_log_interval,
        receive_buffer_size=env.FANOUT_RECEIVE_BUFFER_SIZE,
        logger=logger,
    )

    try:
        forwarder.bind()

        await logger.batch(
            *startup_entries(
                config_path,
                listen_address,
                config.listen_port,
                destinations,
                config.stats_interval_seconds,
            )
        )

    except Exception:
        forwarder.close()
        raise

    return forwarder


async def main(env: Env | None = None) -> int:
    logger = Logger()

    if env is None:
        try:
            env = load_env(Env)

        except ValueError as err:
            await logger.log(
                StartupFailed(
                    message=f"Startup failed: {err}",
                    error=str(err),
                )
            )

            await logger.close()

            return 1

    logging_config = LoggingConfig()
    logging_config.update(**env.get_logging_config())

    forwarder: UDPForwarder | None = None

    try:
        try:
            forwarder = await create_forwarder(env, logger)

        except Exception as err:
            await logger.log(
                StartupFailed(
                    message=f"Startup failed: {err}",
                    error=str(err),
                )
            )

            return 1

        install_signal_handlers(forwarder)

        try:
            await forwarder.run()

        except ReceiveError:
            return 1

        return 0

    finally:
        if forwarder is not None:
            forwarder.close()

        await logger.close()


def run():
    try:
        exit_code = asyncio.run(main())

    except (
        KeyboardInterrupt,
        asyncio.CancelledError,
    ):
        exit_code = 0

    sys.exit(exit_code)
