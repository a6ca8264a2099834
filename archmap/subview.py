from __future__ import annotations

import logging
from typing import List, Set

from .model import Application, Project, SubView, Team


logger = logging.getLogger(__name__)


def apply_subview(project: Project, subview: SubView) -> Project:
	"""A new project holding only the applications the subview selects.

	Dependencies pointing outside the selection are kept as dangling references.
	"""
	selected: List[Application] = []
	used_groups: Set[str] = set()
	for app in project.applications:
		ancestry = project.group_ancestry(app.group)
		if subview.matches(app, ancestry):
			selected.append(app)
			used_groups.update(ancestry)

	teams: List[Team] = []
	for team in project.teams:
		members = tuple(app.id for app in selected if app.team == team.name)
		if members:
			teams.append(team.model_copy(update={"applications": members}))

	logger.info(
		"Subview %r selects %d of %d applications",
		subview.name,
		len(selected),
		len(project.applications),
	)
	return project.model_copy(update={
		"applications": tuple(selected),
		"groups": tuple(g for g in project.groups if g.path in used_groups),
		"teams": tuple(teams),
	})
