import os
from typing import Dict, TypeVar

from dotenv import dotenv_values
from pydantic import BaseModel

from .env import Env, PrimaryType

T = TypeVar("T", bound=BaseModel)


def read_env_values(
    envar_names: list[str],
    env_file: str | None,
) -> Dict[str, str]:
    """
    Raw values for the named variables. Values from ``env_file`` win over
    the process environment and empty values count as unset.
    """
    raw_values: Dict[str, str] = {}

    for envar_name in envar_names:
        if envar_value := os.getenv(envar_name):
            raw_values[envar_name] = envar_value

    if env_file and os.path.exists(env_file):
        for envar_name, envar_value in dotenv_values(dotenv_path=env_file).items():
            if envar_name in envar_names and envar_value:
                raw_values[envar_name] = envar_value

    return raw_values


def load_env(
    default: type[Env] = Env,
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    envars = default.types_map()

    if env_file is None:
        env_file = ".env"

    values: Dict[str, PrimaryType] = {
        envar_name: envars[envar_name](envar_value)
        for envar_name, envar_value in read_env_values(
            list(envars),
            env_file,
        ).items()
    }

    if override:
        values.update(
            override.model_dump(exclude_unset=True, exclude_none=True)
        )

        return type(override)(**values)

    return default(**values)
