from __future__ import annotations

"""
Criterion Registry Service.

Name-to-criterion catalog consulted by search. User-defined entries use
two-letter names; the built-in 'IsDocument' entry is installed on
construction and on every reset, and is otherwise an ordinary entry.
"""

import logging
from typing import Dict, List, Tuple

from cvfs.domain.constants import IS_DOCUMENT_NAME, is_valid_criterion_name
from cvfs.domain.criteria import Criterion, IsDocument
from cvfs.domain.errors import DuplicateError, InvalidNameError, NotFoundError

logger = logging.getLogger(__name__)


class CriterionRegistry:
    """
    Insertion-ordered mapping of criterion names to immutable criteria.
    """

    def __init__(self) -> None:
        self._criteria: Dict[str, Criterion] = {}
        self.reset()

    def reset(self) -> None:
        """Drop every entry and reinstall the built-in IsDocument criterion."""
        self._criteria = {IS_DOCUMENT_NAME: IsDocument()}

    def __contains__(self, name: object) -> bool:
        return name in self._criteria

    def __len__(self) -> int:
        return len(self._criteria)

    def ensure_available(self, name: str) -> None:
        """
        Check that `name` could be registered right now.

        Raises:
            InvalidNameError: If `name` is not exactly two letters.
            DuplicateError: If `name` is already registered.
        """
        if not is_valid_criterion_name(name):
            raise InvalidNameError(str(name), kind="criterion")
        if name in self._criteria:
            raise DuplicateError(name, where="registry")

    def register(self, name: str, criterion: Criterion) -> None:
        """Add a new named criterion (see `ensure_available` for failures)."""
        self.ensure_available(name)
        self._criteria[name] = criterion
        logger.debug(f"Registry: '{name}' -> {criterion.describe()}")

    def unregister(self, name: str) -> Criterion:
        """Remove and return a registered criterion."""
        try:
            return self._criteria.pop(name)
        except KeyError:
            raise NotFoundError(name, kind="Criterion") from None

    def restore_entry(self, name: str, criterion: Criterion) -> None:
        """
        Reinsert an entry without re-validating its name.

        Used by redo and by snapshot restore, where the entry was valid when it
        was first registered.
        """
        if name in self._criteria:
            raise DuplicateError(name, where="registry")
        self._criteria[name] = criterion

    def resolve(self, name: str) -> Criterion:
        """
        Raises:
            NotFoundError: If no criterion is registered under `name`.
        """
        criterion = self._criteria.get(name)
        if criterion is None:
            raise NotFoundError(name, kind="Criterion")
        return criterion

    def items(self) -> List[Tuple[str, Criterion]]:
        return list(self._criteria.items())

    def list(self) -> List[Tuple[str, str]]:
        """(name, description) pairs in registration order."""
        return [(name, criterion.describe()) for name, criterion in self._criteria.items()]
