"""Shared helpers for the chaveamento package."""

# Chaveamento
# Copyright (C) 2025  Chaveamento developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import logging
import os
import uuid

from chaveamento.constants import LOG_FORMAT, LOG_LEVEL_ENV_VAR

_PACKAGE_LOGGER = "chaveamento"


def _configure_package_logger() -> logging.Logger:
    """Attach a single stream handler to the package logger."""
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
        level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
        package_logger.setLevel(getattr(logging, level_name, logging.WARNING))
    return package_logger


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger that propagates to the package logger.

    Parameters
    ----------
    name : str
        Usually ``__name__`` of the calling module.
    """
    _configure_package_logger()
    return logging.getLogger(name)


def generate_id() -> str:
    """Short random identifier for stages created without an explicit id."""
    return uuid.uuid4().hex[:12]


__all__ = ["setup_logger", "generate_id"]
