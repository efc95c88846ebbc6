"""Export job configuration: which account, which object types, where to write."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

try:
    import yaml
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "PyYAML is required for job config loading. Run: poetry install"
    ) from e
from pydantic import BaseModel, Field, field_validator

from pipedrive_export.models.connection import Connection
from pipedrive_export.models.object_type import ObjectType

DOMAIN_ENV = "PIPEDRIVE_COMPANY_DOMAIN"
TOKEN_ENV = "PIPEDRIVE_API_TOKEN"
DEFAULT_EXPORT_DIR = Path("export_data")


class ExportJob(BaseModel):
    """A connection plus the list of object types to export."""

    connection: Connection
    object_types: list[ObjectType] = Field(default_factory=lambda: list(ObjectType))
    export_dir: Path = DEFAULT_EXPORT_DIR

    @field_validator("object_types", mode="before")
    @classmethod
    def _parse_object_types(cls, value: Any) -> list[ObjectType]:
        if value is None:
            return list(ObjectType)
        if isinstance(value, (str, ObjectType)):
            value = [value]
        parsed: list[ObjectType] = []
        for item in value:
            object_type = ObjectType.parse(item)
            if object_type not in parsed:
                parsed.append(object_type)
        return parsed

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "ExportJob":
        """
        Build a job from PIPEDRIVE_COMPANY_DOMAIN / PIPEDRIVE_API_TOKEN.
        Keyword overrides (company_domain, api_token, object_types, export_dir) win.
        """
        env = os.environ if env is None else env
        data = {k: v for k, v in overrides.items() if v is not None}
        return cls._from_flat(data, env)

    @classmethod
    def from_yaml(
        cls,
        path: str | Path,
        env: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "ExportJob":
        """
        Load a job from YAML. Credentials missing from the file come from the environment.
        Keyword overrides (company_domain, api_token, object_types, export_dir) win over both.
        """
        data = yaml.safe_load(Path(path).read_text()) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Job config must be a mapping: {path}")
        if "object_types" not in data and "exports" in data:
            data["object_types"] = data.pop("exports")
        data.update({k: v for k, v in overrides.items() if v is not None})
        env = os.environ if env is None else env
        return cls._from_flat(data, env)

    @classmethod
    def _from_flat(cls, data: dict, env: Mapping[str, str]) -> "ExportJob":
        domain = data.get("company_domain") or env.get(DOMAIN_ENV)
        token = data.get("api_token") or env.get(TOKEN_ENV)
        missing = []
        if not domain:
            missing.append(f"company_domain ({DOMAIN_ENV})")
        if not token:
            missing.append(f"api_token ({TOKEN_ENV})")
        if missing:
            raise ValueError(f"Missing Pipedrive credentials: {', '.join(missing)}")

        flat: dict = {"connection": Connection(company_domain=domain, api_token=token)}
        if data.get("object_types") is not None:
            flat["object_types"] = data["object_types"]
        if data.get("export_dir"):
            flat["export_dir"] = Path(data["export_dir"])
        return cls.model_validate(flat)
