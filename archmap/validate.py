from __future__ import annotations

import logging
from typing import Dict, List, Set

from pydantic import BaseModel

from .errors import ReferentialIntegrityError
from .model import Application, Group, IssueKind, Project, Team, ValidationIssue


logger = logging.getLogger(__name__)


class ValidationResult(BaseModel):
	project: Project
	issues: List[ValidationIssue] = []

	@property
	def warnings(self) -> List[str]:
		return [issue.message for issue in self.issues]


def find_group_cycles(groups: Dict[str, Group]) -> List[List[str]]:
	"""Each cycle in the parent links, listed in parent-walk order.

	The last path of a cycle is the one whose parent link closes it.
	"""
	cycles: List[List[str]] = []
	done: Set[str] = set()
	for start in groups:
		chain: List[str] = []
		cursor = start
		while cursor and cursor not in done and cursor not in chain:
			chain.append(cursor)
			group = groups.get(cursor)
			cursor = group.parent if group else None
		if cursor and cursor in chain:
			cycles.append(chain[chain.index(cursor):])
		done.update(chain)
	return cycles


def _rebuild_teams(teams: List[Team], applications: List[Application]) -> List[Team]:
	rebuilt: List[Team] = []
	for team in teams:
		members = tuple(app.id for app in applications if app.team == team.name)
		if team.implicit and not members:
			continue
		rebuilt.append(team.model_copy(update={"applications": members}))
	return rebuilt


def validate_project(project: Project, strict: bool = True) -> ValidationResult:
	"""Check id uniqueness, dependency targets and group acyclicity.

	Both modes run the same checks. Strict mode raises ReferentialIntegrityError on the
	first offending entity (all issues attached); lenient mode returns a best-effort
	project where the first declaration of an id wins and group cycles are cut.
	"""
	issues: List[ValidationIssue] = []
	known_ids = {app.id for app in project.applications}
	seen: Set[str] = set()
	kept: List[Application] = []

	for app in project.applications:
		if app.id in seen:
			issues.append(ValidationIssue(
				kind=IssueKind.DUPLICATE_ID,
				entity=app.id,
				message=f"application id {app.id!r} is declared more than once",
			))
			continue
		seen.add(app.id)
		kept.append(app)
		for dep in app.dependencies:
			if dep.target not in known_ids:
				issues.append(ValidationIssue(
					kind=IssueKind.UNRESOLVED_DEPENDENCY,
					entity=app.id,
					message=f"application {app.id!r} depends on unknown application {dep.target!r}",
				))

	groups = project.group_index()
	cycles = find_group_cycles(groups)
	for cycle in cycles:
		issues.append(ValidationIssue(
			kind=IssueKind.GROUP_CYCLE,
			entity=cycle[-1],
			message=f"group {cycle[-1]!r} is its own ancestor ({' -> '.join(cycle + [cycle[0]])})",
		))

	if not issues:
		return ValidationResult(project=project)

	if strict:
		raise ReferentialIntegrityError(issues[0].entity, issues)

	for issue in issues:
		logger.warning("%s", issue.message)

	for cycle in cycles:
		closing = cycle[-1]
		groups[closing] = groups[closing].model_copy(update={"parent": None})

	repaired = project.model_copy(update={
		"applications": tuple(kept),
		"groups": tuple(groups.values()),
		"teams": tuple(_rebuild_teams(list(project.teams), kept)),
	})
	return ValidationResult(project=repaired, issues=issues)
