from __future__ import annotations

from typing import Any, Dict

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)


DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_TARGET_HOST = "127.0.0.1"


def normalize_keys(
    values: Any,
    model: type[BaseModel],
) -> Any:
    """Map property names onto the model's aliases, ignoring case."""
    if not isinstance(values, dict):
        return values

    aliases: Dict[str, str] = {}
    for name, field in model.model_fields.items():
        alias = field.alias or name
        aliases[alias.lower()] = alias
        aliases[name.lower()] = alias

    return {
        aliases.get(key.lower(), key) if isinstance(key, str) else key: value
        for key, value in values.items()
    }


def is_valid_port(port: int) -> bool:
    return 1 <= port <= 65535


class ForwardTarget(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: StrictStr | None = None
    host: StrictStr = DEFAULT_TARGET_HOST
    port: StrictInt = 0
    enabled: StrictBool = True

    @model_validator(mode="before")
    @classmethod
    def normalize_property_names(cls, values: Any) -> Any:
        return normalize_keys(values, cls)

    @field_validator("host", mode="before")
    @classmethod
    def default_host(cls, host: Any) -> Any:
        if host is None or (isinstance(host, str) and host.strip() == ""):
            return DEFAULT_TARGET_HOST

        if isinstance(host, str):
            return host.strip()

        return host

    @property
    def label(self) -> str:
        if self.name and self.name.strip():
            return self.name.strip()

        return f"{self.host}:{self.port}"


class ForwarderConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    listen_host: StrictStr = Field(DEFAULT_LISTEN_HOST, alias="listenHost")
    listen_port: StrictInt = Field(0, alias="listenPort", validate_default=True)
    stats_interval_seconds: StrictInt = Field(5, alias="statsIntervalSeconds")
    targets: list[ForwardTarget] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_property_names(cls, values: Any) -> Any:
        return normalize_keys(values, cls)

    @field_validator("listen_host", mode="before")
    @classmethod
    def default_listen_host(cls, listen_host: Any) -> Any:
        if listen_host is None or (isinstance(listen_host, str) and listen_host.strip() == ""):
            return DEFAULT_LISTEN_HOST

        if isinstance(listen_host, str):
            return listen_host.strip()

        return listen_host

    @field_validator("listen_port")
    @classmethod
    def check_listen_port(cls, listen_port: int) -> int:
        if not is_valid_port(listen_port):
            raise ValueError("listenPort must be between 1 and 65535.")

        return listen_port

    @field_validator("stats_interval_seconds")
    @classmethod
    def check_stats_interval(cls, stats_interval_seconds: int) -> int:
        if stats_interval_seconds < 0:
            raise ValueError("statsIntervalSeconds cannot be negative.")

        return stats_interval_seconds

    @field_validator("targets", mode="before")
    @classmethod
    def default_targets(cls, targets: Any) -> Any:
        if targets is None:
            return []

        return targets

    @model_validator(mode="after")
    def check_targets(self) -> ForwarderConfig:
        self.targets = [
            target for target in self.targets if target.enabled
        ]

        if len(self.targets) == 0:
            raise ValueError(
                "At least one enabled target is required in the targets list."
            )

        for target in self.targets:
            if not is_valid_port(target.port):
                raise ValueError(
                    f"Target '{target.label}' has invalid port '{target.port}'."
                )

        return self


def create_default_config() -> ForwarderConfig:
    return ForwarderConfig(
        listen_host=DEFAULT_LISTEN_HOST,
        listen_port=30000,
        stats_interval_seconds=5,
        targets=[
            ForwardTarget(
                name="Dash app",
                host=DEFAULT_TARGET_HOST,
                port=31001,
                enabled=True,
            ),
            ForwardTarget(
                name="Telemetry app",
                host=DEFAULT_TARGET_HOST,
                port=31002,
                enabled=True,
            ),
        ],
    )
