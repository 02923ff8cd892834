"""Settings loading and validation utilities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ai_dispatch.core.types import ProviderConfig

PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Keys of a provider block that are not forwarded as extra_params.
RESERVED_PROVIDER_KEYS = frozenset({
    "model",
    "base_url",
    "api_key",
    "endpoint",
    "deployment_name",
    "api_version",
    "default",
    "defalut",
    "visible",
    "handler",
    "additional_parameters",
})


@dataclass(slots=True)
class Settings:
    """Application settings structure.

    Attributes:
        provider: Pinned provider id (may be empty).
        provider_settings: Provider blocks keyed by provider id, in
            declaration order.
        transport: Transport strategy configuration dictionary.
        features: Host-application feature dictionary (prompts, language).
        observability: Logging configuration dictionary.
        raw: Original full settings dictionary.
    """

    provider: str
    provider_settings: dict[str, dict[str, Any]]
    transport: dict[str, Any]
    features: dict[str, Any]
    observability: dict[str, Any]
    raw: dict[str, Any]


def resolve_path(path: str | Path) -> Path:
    """Resolve a relative path against the project root."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return PROJECT_ROOT / candidate


def _require_path(data: dict[str, Any], dotted_path: str) -> None:
    current: Any = data
    for key in dotted_path.split("."):
        if not isinstance(current, dict) or key not in current:
            raise ValueError(f"Missing required settings field: {dotted_path}")
        current = current[key]


def validate_settings(settings: Settings) -> None:
    """Validate required settings fields.

    Args:
        settings: Parsed settings object.

    Raises:
        ValueError: If any required field is missing or malformed.
    """

    _require_path(settings.raw, "provider_settings")

    if not isinstance(settings.provider_settings, dict) or not settings.provider_settings:
        raise ValueError("Settings field provider_settings must be a non-empty mapping")

    for provider_id, block in settings.provider_settings.items():
        if not isinstance(block, dict):
            raise ValueError(f"Settings field provider_settings.{provider_id} must be a mapping")
        additional = block.get("additional_parameters")
        if additional is not None and not isinstance(additional, dict):
            raise ValueError(
                f"Settings field provider_settings.{provider_id}.additional_parameters "
                "must be a mapping"
            )

    for section in ("transport", "features", "observability"):
        if not isinstance(getattr(settings, section), dict):
            raise ValueError(f"Settings field {section} must be a mapping")


def load_settings(path: str | Path) -> Settings:
    """Load YAML settings from a file and validate required fields.

    Args:
        path: Path to the YAML settings file.

    Returns:
        Parsed and validated settings object.

    Raises:
        FileNotFoundError: If the path does not exist.
        ValueError: If YAML is invalid or required fields are missing.
    """

    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as fp:
        try:
            parsed = yaml.safe_load(fp)
        except yaml.YAMLError as exc:
            raise ValueError(f"Settings file is not valid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ValueError("Settings file must contain a YAML mapping at top level")

    return settings_from_dict(parsed)


def settings_from_dict(parsed: dict[str, Any]) -> Settings:
    """Build and validate ``Settings`` from an already-parsed mapping."""
    settings = Settings(
        provider=str(parsed.get("provider") or "").strip(),
        provider_settings=parsed.get("provider_settings") or {},
        transport=parsed.get("transport") or {},
        features=parsed.get("features") or {},
        observability=parsed.get("observability") or {},
        raw=parsed,
    )
    validate_settings(settings)
    return settings


def provider_config_from_block(block: dict[str, Any]) -> ProviderConfig:
    """Turn one ``provider_settings`` block into a ``ProviderConfig``.

    ``additional_parameters`` and any other non-reserved top-level keys
    become ``extra_params``; ``None`` values are dropped.
    """

    extra_params: dict[str, Any] = {}
    for key, value in block.items():
        if key not in RESERVED_PROVIDER_KEYS and value is not None:
            extra_params[key] = value
    for key, value in (block.get("additional_parameters") or {}).items():
        if value is not None:
            extra_params[key] = value

    return ProviderConfig(
        model=_as_text(block.get("model")),
        base_url=_as_text(block.get("base_url")),
        api_key=_as_text(block.get("api_key")),
        extra_params=extra_params,
        endpoint=_as_text(block.get("endpoint")),
        deployment_name=_as_text(block.get("deployment_name")),
        api_version=_as_text(block.get("api_version")),
    )


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
