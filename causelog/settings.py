# causelog/settings.py
from __future__ import annotations

import logging
import pathlib
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from causelog.core.message import TASK_LEVEL_FIELD, TASK_UUID_FIELD, TIMESTAMP_FIELD
from causelog.output.console import CONSOLE_LOGGER_NAME, to_console
from causelog.output.destinations import Destinations, get_destinations

__all__: Sequence[str] = ("CauselogSettings", "configure")

logger = logging.getLogger(__name__)

_IDENTITY_FIELDS = (TASK_LEVEL_FIELD, TASK_UUID_FIELD, TIMESTAMP_FIELD)


class CauselogSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    global_fields: Dict[str, Any] = Field(
        default_factory=dict,
        description="Fields merged into every message sent to the destinations (e.g. hostname, service).",
    )
    console: bool = Field(
        default=False,
        description="Add a destination writing every message to a standard-library logger.",
    )
    console_logger_name: str = Field(
        default=CONSOLE_LOGGER_NAME,
        min_length=1,
        description="Name of the standard-library logger used by the console destination.",
    )

    @field_validator("global_fields")
    @classmethod
    def _no_identity_fields(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        clashes = sorted(k for k in v if k in _IDENTITY_FIELDS or k.startswith("_"))
        if clashes:
            raise ValueError(f"global_fields may not override reserved fields: {', '.join(clashes)}")
        return v

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CauselogSettings":
        return cls(**dict(data or {}))

    @classmethod
    def from_yaml(cls, path: str | pathlib.Path) -> "CauselogSettings":
        """Load settings from a YAML file; a ``causelog`` top-level key is optional."""
        import yaml
        with pathlib.Path(path).expanduser().open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if isinstance(data, dict) and "causelog" in data:
            data = data["causelog"] or {}
        return cls.from_dict(data)


def configure(settings: Optional[CauselogSettings] = None,
              destinations: Optional[Destinations] = None) -> List[Callable[[], None]]:
    """
    Apply ``settings`` to ``destinations`` (the global registry by default).

    Returns the removers of any destinations that were added.
    """
    settings = settings or CauselogSettings()
    destinations = destinations if destinations is not None else get_destinations()
    removers: List[Callable[[], None]] = []
    if settings.global_fields:
        destinations.add_global_fields(settings.global_fields)
    if settings.console:
        removers.append(destinations.add(to_console(logging.getLogger(settings.console_logger_name))))
    logger.debug(
        "Applied settings: global_fields=%s console=%s",
        sorted(settings.global_fields), settings.console,
    )
    return removers
