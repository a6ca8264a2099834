"""Architecture model package: load declarative architecture definitions and analyse them.

Modules:
- loader.py: YAML definition sources, includes and subview lookup.
- build.py: Typed graph entities (applications, groups, teams) from the raw definitions.
- validate.py: Referential integrity checks, strict or lenient.
- subview.py: Filtered views of a project.
- pipeline.py: load -> build -> validate -> filter in one call.
- cycles.py: Dependency cycle detection.
- grouping.py: Applications-by-group tree and grouped dependencies.
- render.py: Graphviz descriptions (whole system, one application, teams).
- summarize.py: Analysis report.
- documentation.py: HTML documentation through Jinja2.
- model.py: Data structures for definitions, entities and derived views.
"""

__all__ = [
	"build",
	"cycles",
	"documentation",
	"errors",
	"fs_scan",
	"grouping",
	"loader",
	"model",
	"pipeline",
	"render",
	"subview",
	"summarize",
	"validate",
]
