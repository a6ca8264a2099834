from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Set, Tuple

from .model import Project


logger = logging.getLogger(__name__)

UNVISITED, IN_PROGRESS, FINISHED = 0, 1, 2


def canonical_cycle(cycle: List[str]) -> Tuple[str, ...]:
	"""Rotate a cycle so it starts at its smallest id.

	Rotations of the same loop share a canonical form, the reversed loop does not.
	"""
	if not cycle:
		return ()
	start = min(range(len(cycle)), key=lambda i: cycle[i])
	return tuple(cycle[start:] + cycle[:start])


def dependency_adjacency(project: Project) -> Dict[str, List[str]]:
	"""Outgoing edges per application id, dangling targets dropped."""
	index = project.application_index()
	adjacency: Dict[str, List[str]] = {}
	for app_id, app in index.items():
		adjacency[app_id] = [d.target for d in app.dependencies if d.target in index]
	return adjacency


def find_cycles(project: Project) -> List[List[str]]:
	"""All dependency loops found by one three-colour depth-first pass.

	Each cycle is the active DFS path from the re-entered node to the current node,
	so ``[a, b, c]`` stands for ``a -> b -> c -> a``. Traversal restarts from every
	unvisited application in declaration order.
	"""
	adjacency = dependency_adjacency(project)
	color: Dict[str, int] = {app_id: UNVISITED for app_id in adjacency}
	cycles: List[List[str]] = []
	seen: Set[Tuple[str, ...]] = set()

	for root in adjacency:
		if color[root] != UNVISITED:
			continue
		path: List[str] = [root]
		position: Dict[str, int] = {root: 0}
		stack: List[Iterator[str]] = [iter(adjacency[root])]
		color[root] = IN_PROGRESS

		while stack:
			target = next(stack[-1], None)
			if target is None:
				finished = path.pop()
				del position[finished]
				color[finished] = FINISHED
				stack.pop()
				continue
			if color[target] == UNVISITED:
				color[target] = IN_PROGRESS
				position[target] = len(path)
				path.append(target)
				stack.append(iter(adjacency[target]))
			elif color[target] == IN_PROGRESS:
				cycle = path[position[target]:]
				key = canonical_cycle(cycle)
				if key not in seen:
					seen.add(key)
					cycles.append(cycle)

	logger.info("Found %d cycles in dependency graph", len(cycles))
	return cycles


def format_cycle(cycle: List[str]) -> str:
	return " -> ".join(cycle + cycle[:1])
