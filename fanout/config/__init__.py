from .errors import ConfigError as ConfigError
from .forwarder_config import (
    ForwardTarget as ForwardTarget,
    ForwarderConfig as ForwarderConfig,
    create_default_config as create_default_config,
)
from .loader import (
    load_config as load_config,
    parse_config as parse_config,
    resolve_config_path as resolve_config_path,
    write_config as write_config,
)
from .resolver import (
    resolve_address as resolve_address,
    resolve_targets as resolve_targets,
)
