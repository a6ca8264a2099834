from __future__ import annotations

from typing import Dict, List

from .cycles import find_cycles, format_cycle
from .model import AnalysisReport, Project, Status


def analyze_project(project: Project) -> AnalysisReport:
	known = {app.id for app in project.applications}
	status_counts: Dict[str, int] = {status.value: 0 for status in Status}
	dangling = []
	dependency_count = 0
	for app in project.applications:
		status_counts[app.status.value] += 1
		dependency_count += len(app.dependencies)
		for dep in app.dependencies:
			if dep.target not in known:
				dangling.append((app.id, dep.target))

	return AnalysisReport(
		project=project.name,
		application_count=len(project.applications),
		dependency_count=dependency_count,
		group_count=len(project.groups),
		team_count=len(project.teams),
		status_counts=status_counts,
		dangling=dangling,
		cycles=find_cycles(project),
	)


def format_report(report: AnalysisReport) -> str:
	parts: List[str] = []
	parts.append(
		f"Project {report.project or '(unnamed)'}: {report.application_count} applications, "
		f"{report.dependency_count} dependencies, {report.group_count} groups, {report.team_count} teams"
	)
	parts.append("  Status: " + ", ".join(f"{k} {v}" for k, v in report.status_counts.items()))
	if report.dangling:
		parts.append(f"  Dangling references: {len(report.dangling)}")
		for source, target in report.dangling:
			parts.append(f"    {source} -> {target}")
	if report.cycles:
		parts.append(f"  Cyclic dependencies: {len(report.cycles)}")
		for cycle in report.cycles:
			parts.append(f"    {format_cycle(cycle)}")
	else:
		parts.append("  No cyclic dependencies")
	return "\n".join(parts)


def list_applications(project: Project) -> List[str]:
	return [f"Name: {app.name} Id: {app.id}" for app in project.applications]
