"""Stage formats and the factory selecting one from a configuration."""

from typing import Dict, Type

from chaveamento.constants import (
    FORMAT_FIXED_PAIR,
    FORMAT_ROTATING_PARTNER,
    FORMAT_SUPER_X,
    FORMAT_TEAMS,
)
from chaveamento.exceptions import InvalidConfiguration
from chaveamento.formats.base import FormatSpec
from chaveamento.formats.fixed_pair import FixedPairFormat
from chaveamento.formats.rotating_partner import RotatingPartnerFormat
from chaveamento.formats.super_x import SuperXFormat
from chaveamento.formats.teams import TeamFormat
from chaveamento.models.stage_config import StageConfig

FORMATS: Dict[str, Type[FormatSpec]] = {
    FORMAT_FIXED_PAIR: FixedPairFormat,
    FORMAT_ROTATING_PARTNER: RotatingPartnerFormat,
    FORMAT_SUPER_X: SuperXFormat,
    FORMAT_TEAMS: TeamFormat,
}


def create_format(config: StageConfig) -> FormatSpec:
    """Validate ``config`` and return the format it selects."""
    config.validate()
    try:
        format_class = FORMATS[config.format_tag]
    except KeyError:
        raise InvalidConfiguration(f"Unknown stage format '{config.format_tag}'")
    return format_class(config)


__all__ = [
    "FORMATS",
    "FormatSpec",
    "FixedPairFormat",
    "RotatingPartnerFormat",
    "SuperXFormat",
    "TeamFormat",
    "create_format",
]
