from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from .model import (
	Application,
	ApplicationView,
	DependencyBucket,
	GroupNode,
	Project,
	ResolvedDependency,
)


class DependencyGrouping(str, Enum):
	GROUP = "group"
	RELATION = "relation"


def applications_by_group(project: Project) -> GroupNode:
	"""The group hierarchy with every application attached to exactly one node.

	Applications whose group is unknown to the project land on the root node.
	"""
	groups = project.group_index()
	children: Dict[str, List[str]] = {"": []}
	for group in project.groups:
		parent = group.parent if group.parent in groups else ""
		children.setdefault(parent, []).append(group.path)

	members: Dict[str, List[Application]] = {}
	for app in project.applications:
		key = app.group if app.group in groups else ""
		members.setdefault(key, []).append(app)

	def node(path: str) -> GroupNode:
		group = groups.get(path)
		return GroupNode(
			path=path,
			name=group.name if group else "",
			title=group.label if group else project.name,
			applications=members.get(path, []),
			sub_groups=[node(child) for child in children.get(path, [])],
		)

	return node("")


def _resolve(project_index: Dict[str, Application], source: Application) -> List[ResolvedDependency]:
	resolved: List[ResolvedDependency] = []
	for dep in source.dependencies:
		target = project_index.get(dep.target)
		resolved.append(ResolvedDependency(
			source=source.id,
			target=dep.target,
			target_name=target.name if target else dep.target,
			target_group=target.group if target else None,
			relation=dep.relation,
			description=dep.description,
			resolved=target is not None,
		))
	return resolved


def _order_key(dep: ResolvedDependency):
	return (dep.target_name.lower(), dep.target)


def group_dependencies(
	project: Project,
	application: Application,
	by: DependencyGrouping = DependencyGrouping.GROUP,
	index: Optional[Dict[str, Application]] = None,
) -> List[DependencyBucket]:
	"""Partition the direct dependencies of ``application`` into buckets.

	Buckets are keyed by the target's group (``None`` for unresolved targets) or by
	relation label, and sorted by target application name.

	Pass ``index`` to reuse one id lookup across many applications.
	"""
	buckets: Dict[Optional[str], List[ResolvedDependency]] = {}
	if index is None:
		index = project.application_index()
	for dep in _resolve(index, application):
		key = dep.relation if by == DependencyGrouping.RELATION else dep.target_group
		buckets.setdefault(key, []).append(dep)

	result = [
		DependencyBucket(key=key, dependencies=sorted(deps, key=_order_key))
		for key, deps in buckets.items()
	]
	result.sort(key=lambda bucket: _order_key(bucket.dependencies[0]))
	return result


def to_application_view(application: Application, buckets: List[DependencyBucket]) -> ApplicationView:
	return ApplicationView(
		id=application.id,
		name=application.name,
		group=application.group,
		team=application.team,
		status=application.status,
		technology=application.technology,
		summary=application.summary,
		description=application.description,
		properties=dict(application.properties),
		dependencies=list(application.dependencies),
		dependencies_grouped=buckets,
	)


def application_views(
	project: Project,
	by: DependencyGrouping = DependencyGrouping.GROUP,
) -> List[ApplicationView]:
	index = project.application_index()
	return [to_application_view(app, group_dependencies(project, app, by, index)) for app in project.applications]
