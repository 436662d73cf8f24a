from __future__ import annotations

import os
import warnings
from enum import StrEnum
from functools import cache


class Env(StrEnum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


SYNONYMS: dict[str, Env] = {
    "development": Env.DEV,
    "local": Env.LOCAL,
    "testing": Env.TEST,
    "ci": Env.TEST,
    "staging": Env.TEST,
    "production": Env.PROD,
}


def _normalize(raw: str | None) -> Env | None:
    if not raw:
        return None
    val = raw.strip().lower()
    if val in (e.value for e in Env):
        return Env(val)
    return SYNONYMS.get(val)


@cache
def get_env() -> Env:
    """
    Resolve the running environment once.

    Reads OPEN_REGISTER_ENV, then APP_ENV; defaults to "local". An
    unrecognised value warns and falls back to "local".
    """
    raw = os.getenv("OPEN_REGISTER_ENV") or os.getenv("APP_ENV")
    env = _normalize(raw)
    if env is None:
        if raw:
            warnings.warn(
                f"Unrecognized environment '{raw}', defaulting to 'local'.",
                RuntimeWarning,
                stacklevel=2,
            )
        env = Env.LOCAL
    return env


def pick(*, prod, nonprod, env: Env | None = None):
    """Return `prod` in production and `nonprod` everywhere else."""
    return prod if (env or get_env()) is Env.PROD else nonprod
