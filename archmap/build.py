from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set

from .loader import normalize_group_path, split_group_path, subview_from_definition
from .model import (
	Application,
	ApplicationDefinition,
	DependencyRef,
	Group,
	GroupDefinition,
	Project,
	ProjectDefinition,
	SubView,
	Team,
)


logger = logging.getLogger(__name__)


def _path_parent(path: str) -> Optional[str]:
	if "/" in path:
		return path.rsplit("/", 1)[0]
	return None


class _GroupTreeBuilder:
	"""Creates Group nodes on demand, synthesizing undeclared ones."""

	def __init__(self, declarations: List[GroupDefinition]):
		self.declared: Dict[str, GroupDefinition] = {}
		for decl in declarations:
			path = normalize_group_path(decl.path)
			if not path:
				logger.warning("Ignoring group declaration with empty path")
				continue
			if path in self.declared:
				logger.warning("Group %r declared more than once, keeping the first", path)
				continue
			self.declared[path] = decl
		self.groups: Dict[str, Group] = {}
		self._pending: Set[str] = set()

	def _parent_of(self, path: str) -> Optional[str]:
		decl = self.declared.get(path)
		if decl is not None and decl.parent is not None:
			return normalize_group_path(decl.parent) or None
		return _path_parent(path)

	def ensure(self, path: str) -> None:
		# pending guards against parent cycles, which the validator reports
		if not path or path in self.groups or path in self._pending:
			return
		self._pending.add(path)
		parent = self._parent_of(path)
		if parent:
			self.ensure(parent)
		decl = self.declared.get(path)
		self.groups[path] = Group(
			path=path,
			name=split_group_path(path)[-1],
			title=decl.title if decl else "",
			description=decl.description if decl else "",
			parent=parent,
			implicit=decl is None,
		)
		self._pending.discard(path)


def build_application(definition: ApplicationDefinition) -> Application:
	return Application(
		id=definition.id,
		name=definition.name or definition.id,
		group=normalize_group_path(definition.group),
		team=definition.team or None,
		status=definition.status,
		technology=definition.technology,
		summary=definition.summary,
		description=definition.description,
		properties=dict(definition.properties),
		dependencies=tuple(
			DependencyRef(target=dep.target, relation=dep.relation or None, description=dep.description)
			for dep in definition.dependencies
		),
	)


def _build_teams(definition: ProjectDefinition, applications: List[Application]) -> List[Team]:
	descriptions: Dict[str, str] = {}
	order: List[str] = []
	for decl in definition.teams:
		if decl.name in descriptions:
			logger.warning("Team %r declared more than once, keeping the first", decl.name)
			continue
		descriptions[decl.name] = decl.description
		order.append(decl.name)

	members: Dict[str, List[str]] = {}
	for app in applications:
		if app.team is None:
			continue
		if app.team not in members and app.team not in descriptions:
			order.append(app.team)
		members.setdefault(app.team, []).append(app.id)

	return [
		Team(
			name=name,
			description=descriptions.get(name, ""),
			applications=tuple(members.get(name, [])),
			implicit=name not in descriptions,
		)
		for name in order
	]


def _build_subviews(definition: ProjectDefinition) -> List[SubView]:
	subviews: List[SubView] = []
	names: Set[str] = set()
	for decl in definition.subviews:
		if decl.name in names:
			logger.warning("Subview %r declared more than once, keeping the first", decl.name)
			continue
		names.add(decl.name)
		subviews.append(subview_from_definition(decl))
	return subviews


def build_project(definition: ProjectDefinition) -> Project:
	"""Turn the merged definition tree into typed, immutable entities.

	Duplicate application ids and dangling dependency targets are carried over as-is.
	"""
	applications = [build_application(d) for d in definition.applications]

	tree = _GroupTreeBuilder(definition.groups)
	for path in tree.declared:
		tree.ensure(path)
	for app in applications:
		tree.ensure(app.group)

	return Project(
		name=definition.name,
		applications=tuple(applications),
		groups=tuple(tree.groups.values()),
		teams=tuple(_build_teams(definition, applications)),
		subviews=tuple(_build_subviews(definition)),
	)
