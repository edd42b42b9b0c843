"""Exceptions for use in Chaveamento"""

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


# ========== Base Application Exception ==========


class ChaveamentoException(Exception):
    """Base exception for all Chaveamento errors.

    Every error raised by the engine inherits from this class, so a hosting
    service can catch engine failures with a single except clause.
    """

    pass


# ========== Validation Exceptions ==========


class ValidationException(ChaveamentoException):
    """Base exception for precondition failures raised before any mutation."""

    pass


class InvalidEntrantCount(ValidationException):
    """Raised when the number of entrants does not fit the stage format."""

    pass


class InvalidVariantSize(ValidationException):
    """Raised when a single-group variant is unsupported or not matched."""

    pass


class DuplicateAssignment(ValidationException):
    """Raised when a player or entrant is referenced twice, or omitted."""

    pass


class InvalidConfiguration(ValidationException):
    """Raised when a stage configuration holds impossible values."""

    pass


class ReservedEntrantId(ValidationException):
    """Raised when an entrant id collides with a reserved bracket marker."""

    pass


# ========== Stage Exceptions ==========


class StageException(ChaveamentoException):
    """Base exception for stage progression errors."""

    pass


class StageStateException(StageException):
    """Raised when a stage is in an invalid state for the requested operation."""

    pass


class GroupsIncomplete(StageException):
    """Raised when elimination is requested while group matches are pending."""

    pass


class InsufficientGroups(StageException):
    """Raised when fewer than two groups contribute qualifiers."""

    pass


class HasResults(StageException):
    """Raised when a phase is cancelled after results were recorded."""

    pass


# ========== Bracket Exceptions ==========


class BracketException(ChaveamentoException):
    """Base exception for elimination bracket errors."""

    pass


class BracketStateException(BracketException):
    """Raised when an advancement would overwrite a started slot."""

    pass


# ========== Result Exceptions ==========


class ResultException(ChaveamentoException):
    """Base exception for result recording errors."""

    pass


class InvalidResultException(ResultException):
    """Raised when a result is invalid (e.g., tied set count)."""

    pass


class ResultAlreadyRecorded(ResultException):
    """Raised when a different result is submitted for a finished match."""

    pass


class MatchNotFoundException(ResultException):
    """Raised when a requested match does not exist in the stage."""

    pass
