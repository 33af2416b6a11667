"""Jump dependency graphs.

A dependency graph maps a jump index to the set of jump indices whose
intensity may be stale after that jump fires. Every jump depends on
itself; ``build_dependency_graph`` enforces this on construction.
"""

from __future__ import annotations

import logging
import operator
from collections import abc
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DependencyGraph = List[frozenset]
DependencyInput = Union[Sequence[Iterable[int]], Mapping[int, Iterable[int]]]


def _check_index(index, num_jumps: int, where: str) -> int:
    try:
        if isinstance(index, bool):
            raise TypeError
        index = operator.index(index)
    except TypeError:
        raise ConfigurationError(
            f"Dependency graph {where} must be an integer jump index, got {index!r}"
        ) from None
    if not 0 <= index < num_jumps:
        raise ConfigurationError(
            f"Dependency graph {where} {index} is outside [0, {num_jumps})"
        )
    return index


def add_self_dependencies(graph: Sequence[Iterable[int]]) -> DependencyGraph:
    """Return a copy of ``graph`` in which every jump depends on itself.

    Idempotent: applying it to an already normalized graph changes nothing.
    """
    normalized = []
    for index, deps in enumerate(graph):
        deps = frozenset(deps)
        if index not in deps:
            deps = deps | {index}
        normalized.append(deps)
    return normalized


def build_dependency_graph(
    num_jumps: int,
    dep_graph: Optional[DependencyInput],
    has_conditional: bool,
) -> Optional[DependencyGraph]:
    """Validate and normalize a user-supplied dependency graph.

    Args:
        num_jumps: Number of jump types
        dep_graph: None, a sequence with one iterable of dependents per jump,
            or a mapping from jump index to its dependents (missing keys
            mean the jump only affects itself)
        has_conditional: Whether any jump has a non-constant rate

    Returns:
        List of frozensets indexed by jump, or None when no graph is needed

    Raises:
        ConfigurationError: If a graph is required but missing, or malformed
    """
    if dep_graph is None:
        if has_conditional:
            raise ConfigurationError(
                "To use conditional rate jumps with the Queue Method a "
                "dependency graph must be supplied."
            )
        return None

    if isinstance(dep_graph, abc.Mapping):
        entries: List[Iterable[int]] = [() for _ in range(num_jumps)]
        for key, deps in dep_graph.items():
            entries[_check_index(key, num_jumps, "key")] = deps
    else:
        entries = list(dep_graph)
        if len(entries) != num_jumps:
            raise ConfigurationError(
                f"Dependency graph has {len(entries)} entries but there are "
                f"{num_jumps} jumps"
            )

    checked = [
        [_check_index(dep, num_jumps, f"entry for jump {index}") for dep in deps]
        for index, deps in enumerate(entries)
    ]

    graph = add_self_dependencies(checked)
    logger.debug("Built dependency graph over %d jumps", num_jumps)
    return graph
