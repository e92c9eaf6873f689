"""Runtime configuration.

Values come from an optional YAML file, overridden by ``PROCORE_*``
environment variables::

    # procore.yaml
    environment: sandbox
    company_id: 12345
    client_id: abc
    client_secret: def
    refresh_token: ghi

Secrets are normally left out of the file and supplied through the
environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from procore_sdk.auth import ProcoreCredentials
from procore_sdk.models import Environment
from procore_sdk.transport import API_VERSION

ENV_PREFIX = "PROCORE_"


@dataclass
class Settings:
    environment: Environment = Environment.PRODUCTION
    access_token: str | None = None
    refresh_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    company_id: int | None = None
    timeout: float = 60.0
    api_version: str = API_VERSION

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from plain values; unknown keys are ignored."""
        settings = cls()
        for f in fields(cls):
            value = data.get(f.name)
            if value is None or value == "":
                continue
            setattr(settings, f.name, _coerce(f.name, value))
        return settings

    @classmethod
    def load(
        cls,
        path: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Settings":
        """YAML file at *path* (if any), then ``PROCORE_*`` variables on top."""
        data: dict[str, Any] = {}
        if path is not None:
            data.update(_read_yaml(Path(path)))

        environ = os.environ if environ is None else environ
        for f in fields(cls):
            value = environ.get(ENV_PREFIX + f.name.upper())
            if value:
                data[f.name] = value
        return cls.from_mapping(data)

    def to_credentials(self) -> ProcoreCredentials:
        return ProcoreCredentials(
            environment=self.environment,
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            client_id=self.client_id,
            client_secret=self.client_secret,
        )


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return data


def _coerce(name: str, value: Any) -> Any:
    try:
        if name == "environment":
            return Environment.parse(str(value))
        if name == "company_id":
            return int(value)
        if name == "timeout":
            return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {name}: {value!r}") from None
    return str(value)
