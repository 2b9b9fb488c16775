import asyncio
import os
import pathlib

import orjson
from pydantic import ValidationError

from fanout.logging import Logger
from fanout.logging.fanout_logging_models import RelayNotice

from .errors import ConfigError
from .forwarder_config import ForwarderConfig, create_default_config


def resolve_config_path(config_path: str) -> str:
    return str(pathlib.Path(config_path).expanduser().absolute())


async def load_config(
    config_path: str,
    logger: Logger | None = None,
) -> ForwarderConfig:
    """
    Read and validate the relay config file, writing the default config
    first if no file exists at ``config_path``.
    """
    if logger is None:
        logger = Logger()

    loop = asyncio.get_event_loop()

    exists = await loop.run_in_executor(
        None,
        os.path.exists,
        config_path,
    )

    if not exists:
        await loop.run_in_executor(
            None,
            write_config,
            config_path,
            create_default_config(),
        )

        await logger.log(
            RelayNotice(message=f"Created default config: {config_path}")
        )

    try:
        config_data = await loop.run_in_executor(
            None,
            read_config_bytes,
            config_path,
        )

    except OSError as err:
        raise ConfigError(f"Could not read config file '{config_path}': {err}") from err

    return parse_config(config_data)


def parse_config(config_data: bytes) -> ForwarderConfig:
    try:
        raw_config = orjson.loads(config_data)

    except orjson.JSONDecodeError as err:
        raise ConfigError("Config file is empty or invalid JSON.") from err

    if not isinstance(raw_config, dict):
        raise ConfigError("Config file is empty or invalid JSON.")

    try:
        return ForwarderConfig.model_validate(raw_config)

    except ValidationError as err:
        raise ConfigError(format_validation_error(err)) from err


def format_validation_error(err: ValidationError) -> str:
    messages: list[str] = []

    for error in err.errors():
        message = error["msg"].removeprefix("Value error, ")
        location = ".".join(str(part) for part in error["loc"])

        if error["type"] == "value_error" or not location:
            messages.append(message)

        else:
            messages.append(f"{location}: {message}")

    return " ".join(messages)


def read_config_bytes(config_path: str) -> bytes:
    with open(config_path, "rb") as config_file:
        return config_file.read()


def write_config(
    config_path: str,
    config: ForwarderConfig,
) -> None:
    path = pathlib.Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    config_json = orjson.dumps(
        config.model_dump(by_alias=True),
        option=orjson.OPT_INDENT_2,
    )

    with open(path, "wb") as config_file:
        config_file.write(config_json + b"\n")
