"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que el adaptador del store, el bootstrap y la CLI lean config de
  forma consistente.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "nps-bot"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "nps-bot"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "nps-bot"
    return Path.home() / ".config" / "nps-bot"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# NPS bot user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/store/bootstrap.

    Nota: Slack también acepta `SLACK_TOKEN`/`SLACK_URL` sin prefijo y la URL
    del store puede venir del servicio Cloudant enlazado en `VCAP_SERVICES`.
    """

    model_config = SettingsConfigDict(
        env_prefix="NPS_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    slack_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("slack_token", "NPS_SLACK_TOKEN", "SLACK_TOKEN"),
        description="Token de verificación del slash-command emitido por Slack.",
    )
    slack_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("slack_url", "NPS_SLACK_URL", "SLACK_URL"),
        description="URL base del equipo de Slack al que responde el bot.",
    )

    couchdb_url: str | None = Field(
        default=None,
        description="URL de CouchDB/Cloudant (puede incluir credenciales).",
    )
    couchdb_username: str | None = Field(default=None, description="Usuario del store.")
    couchdb_password: str | None = Field(default=None, description="Contraseña del store.")
    vcap_services: str | None = Field(
        default=None,
        validation_alias=AliasChoices("vcap_services", "NPS_VCAP_SERVICES", "VCAP_SERVICES"),
        description="Servicios enlazados de Cloud Foundry (JSON).",
    )
    cloudant_service_name: str = Field(
        default="nps-cloudant",
        min_length=1,
        description="Nombre de la instancia Cloudant enlazada.",
    )

    data_database: str = Field(
        default="nps-data",
        min_length=1,
        description="Base de datos con las valoraciones.",
    )
    meta_database: str = Field(
        default="nps-meta",
        min_length=1,
        description="Base de datos con tokens y documentos de specs.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request al store (segundos).",
    )
    user_agent: str = Field(
        default="nps-bot/0.1",
        min_length=1,
        description="User-Agent para peticiones al store.",
    )

    default_specs_dir: Path | None = Field(
        default=None,
        description="Directorio con default_*_spec.json que reemplaza a los incluidos.",
    )

    log_level: str = Field(default="INFO", description="DEBUG | INFO | WARNING | ERROR")
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Formato de salida de logs.",
    )

    def _cloudant_credentials(self) -> dict[str, Any] | None:
        if not self.vcap_services:
            return None
        try:
            services = json.loads(self.vcap_services)
        except ValueError:
            return None
        if not isinstance(services, dict):
            return None

        for label, instances in services.items():
            if not isinstance(instances, list):
                continue
            for instance in instances:
                if not isinstance(instance, dict):
                    continue
                if instance.get("name") == self.cloudant_service_name or label == self.cloudant_service_name:
                    credentials = instance.get("credentials")
                    if isinstance(credentials, dict):
                        return credentials
        return None

    def resolve_store_url(self) -> str | None:
        """Primero la URL explícita, luego el servicio Cloudant enlazado."""

        if self.couchdb_url:
            return self.couchdb_url
        credentials = self._cloudant_credentials()
        if credentials and isinstance(credentials.get("url"), str):
            return credentials["url"]
        return None

    def missing_bootstrap_settings(self) -> list[str]:
        """Settings requeridos que faltan, en el orden en que se comprueban."""

        missing: list[str] = []
        if not self.slack_token:
            missing.append("SLACK_TOKEN")
        if not self.slack_url:
            missing.append("SLACK_URL")
        if not self.resolve_store_url():
            missing.append(f"store URL (NPS_COUCHDB_URL or the '{self.cloudant_service_name}' service)")
        return missing
