"""
Configuration for the entity hydrator.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HydratorConfig:
    """
    Configuration for an EntityHydrator.

    Attributes:
        default_language_code: Language used when the request language has
            no translation
        join_translations: Load ``translations`` for every translatable
            entity along the requested paths, as part of the same fetch
        enable_tracing: Emit OpenTelemetry spans when OpenTelemetry is
            installed

    Example:
        >>> config = HydratorConfig(default_language_code="de")
    """

    default_language_code: str = "en"
    join_translations: bool = True
    enable_tracing: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.default_language_code or not self.default_language_code.strip():
            raise ValueError(
                "default_language_code must be a non-empty language code, "
                f"got {self.default_language_code!r}."
            )
