from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from archmap.documentation import render_documentation
from archmap.errors import ArchmapError
from archmap.grouping import DependencyGrouping
from archmap.pipeline import LoadResult, load_project
from archmap.render import RenderOptions, TeamGraphOptions, render_graph, render_team_graph
from archmap.summarize import analyze_project, format_report, list_applications


logger = logging.getLogger("archmap")

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"", "0", "false", "no", "off"}


def parse_flag(value: str) -> bool:
	"""Turn a free-text flag value into a bool, rejecting anything ambiguous."""
	normalized = value.strip().lower()
	if normalized in TRUE_VALUES:
		return True
	if normalized in FALSE_VALUES:
		return False
	raise argparse.ArgumentTypeError(f"expected one of {sorted(TRUE_VALUES | FALSE_VALUES)}, got {value!r}")


def _load(args: argparse.Namespace) -> LoadResult:
	return load_project(args.config or [], args.subview, strict=not args.skip_validation)


def _write(args: argparse.Namespace, text: str) -> None:
	if getattr(args, "output", None):
		with open(args.output, "w", encoding="utf-8") as fh:
			fh.write(text)
	else:
		sys.stdout.write(text)


def cmd_validate(args: argparse.Namespace) -> int:
	result = _load(args)
	for warning in result.warnings:
		print(f"warning: {warning}")
	print("valid")
	return 0


def cmd_list(args: argparse.Namespace) -> int:
	for line in list_applications(_load(args).project):
		print(line)
	return 0


def cmd_analyze(args: argparse.Namespace) -> int:
	report = analyze_project(_load(args).project)
	if args.json:
		print(report.model_dump_json(by_alias=True, indent=2))
	else:
		print(format_report(report))
	if report.cycles and args.fail_on_cycle:
		return 1
	return 0


def cmd_documentation(args: argparse.Namespace) -> int:
	project = _load(args).project
	_write(args, render_documentation(project, args.template_path, args.icon_path))
	return 0


def cmd_graph(args: argparse.Namespace) -> int:
	options = RenderOptions(
		application=args.application or None,
		icon_path=args.icon_path,
		hide_planned=args.hide_planned,
	)
	_write(args, render_graph(_load(args).project, options))
	return 0


def cmd_team_graph(args: argparse.Namespace) -> int:
	options = TeamGraphOptions(summarize_relations=args.summary_relation, hide_planned=args.hide_planned)
	_write(args, render_team_graph(_load(args).project, options))
	return 0


def cmd_serve(args: argparse.Namespace) -> int:
	from web.app import create_app

	# fail before binding the port if the definitions cannot be read at all
	_load(args)
	app = create_app(
		config_paths=args.config or [],
		strict=not args.skip_validation,
		template_folder=args.local_template_folder or None,
		documents_folder=args.static_documents_folder or None,
		grouping=DependencyGrouping(args.group_dependencies_by),
	)
	logger.info("Starting server on %s:%d", args.host, args.port)
	uvicorn.run(app, host=args.host, port=args.port)
	return 0


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="archmap",
		description="Describe and analyse distributed or microservice-style architectures and their dependencies.",
	)
	parser.add_argument("--config", action="append", help="Path to a project definition file (repeatable)")
	parser.add_argument("--subview", default="", help="Limit the action to the named subview")
	parser.add_argument("--skipValidation", dest="skip_validation", action="store_true",
		help="Report integrity problems as warnings instead of failing")
	parser.add_argument("--verbose", action="store_true", help="Debug logging")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pv = sub.add_parser("validate", help="Validate the project definition")
	pv.set_defaults(func=cmd_validate)

	pl = sub.add_parser("list", help="List the applications")
	pl.set_defaults(func=cmd_list)

	pa = sub.add_parser("analyze", help="Analyse project structure, detect cyclic dependencies")
	pa.add_argument("--json", action="store_true", help="Print the report as JSON")
	pa.add_argument("--failOnCycle", dest="fail_on_cycle", action="store_true",
		help="Exit with status 1 when cycles are found")
	pa.set_defaults(func=cmd_analyze)

	pd = sub.add_parser("documentation", help="Create (living) HTML documentation")
	pd.add_argument("--templatePath", dest="template_path", default=None, help="Jinja2 template to use")
	pd.add_argument("--iconPath", dest="icon_path", default=None, help="Folder with <technology>.png icons")
	pd.add_argument("--output", default=None, help="Write to this file instead of stdout")
	pd.set_defaults(func=cmd_documentation)

	pg = sub.add_parser("graph", help="Graphviz description, e.g. archmap --config p.yml graph | dot -Tpng -o graph.png")
	pg.add_argument("--application", default="", help="Only draw this application and its neighbours")
	pg.add_argument("--iconPath", dest="icon_path", default=None, help="Folder with <technology>.png icons")
	pg.add_argument("--hidePlanned", dest="hide_planned", type=parse_flag, default=False,
		help="Leave out planned applications (true/false)")
	pg.add_argument("--output", default=None, help="Write to this file instead of stdout")
	pg.set_defaults(func=cmd_graph)

	pt = sub.add_parser("teamGraph", help="Teams and their relations derived from the architecture")
	pt.add_argument("--summaryRelation", dest="summary_relation", type=parse_flag, default=False,
		help="Draw one arrow per pair of teams (true/false)")
	pt.add_argument("--hidePlanned", dest="hide_planned", type=parse_flag, default=False,
		help="Leave out planned applications (true/false)")
	pt.add_argument("--output", default=None, help="Write to this file instead of stdout")
	pt.set_defaults(func=cmd_team_graph)

	ps = sub.add_parser("serve", help="Run the web server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8080)
	ps.add_argument("--localTemplateFolder", dest="local_template_folder", default="",
		help="Serve the front end from this folder instead of the bundled one")
	ps.add_argument("--staticDocumentsFolder", dest="static_documents_folder", default="",
		help="Folder whose files are listed and served under /documents/")
	ps.add_argument("--groupDependenciesBy", dest="group_dependencies_by", default="group",
		choices=[g.value for g in DependencyGrouping])
	ps.set_defaults(func=cmd_serve)

	return parser


def main(argv: Optional[List[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format="%(levelname)s %(message)s",
	)
	try:
		return args.func(args)
	except ArchmapError as e:
		logger.error("%s", e)
		return 1


if __name__ == "__main__":
	sys.exit(main())
