"""Render markdown reference documentation for resources and data sources."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Template

from .provider import Provider
from .tf import Attribute, Block, Resource

RESOURCE_TEMPLATE = Template('''---
page_title: "{{ type_name }} {{ kind }} - squadcast"
---

# {{ type_name }} ({{ kind | capitalize }})

{{ resource.description }}

## Schema
{% for title, attrs in sections %}{% if attrs %}
### {{ title }}

{% for name, attr in attrs %}- `{{ name }}` ({{ attr.type.value | capitalize }}{% if attr.sensitive %}, Sensitive{% endif %}{% if attr.force_new %}, Forces new resource{% endif %}) {{ attr.description }}{% if attr.default is not none %} Defaults to `{{ attr.default }}`.{% endif %}
{% endfor %}{% endif %}{% endfor %}
{% for name, block in nested %}
<a id="nestedblock--{{ name }}"></a>
### Nested Schema for `{{ name }}`

{% for child, attr in block.schema.items() %}- `{{ child }}` ({{ attr.type.value | capitalize }}{% if attr.required %}, Required{% elif attr.optional %}, Optional{% else %}, Read-only{% endif %}) {{ attr.description }}
{% endfor %}{% endfor %}
{% if importable %}
## Import

Import is supported using the following syntax:

```shell
squadcast-provider import {{ type_name }}.example {{ import_hint }}
```
{% endif %}''')

IMPORT_HINTS = {
    "squadcast_schedule_rotation": "teamID:scheduleName:rotationName",
    "squadcast_webform": "teamID:webformID",
    "squadcast_schedule": "teamID:scheduleName",
    "squadcast_schedule_v2": "teamID:scheduleName",
    "squadcast_runbook": "teamID:runbookName",
    "squadcast_squad": "teamID:squadName",
}


def _sections(resource: Resource) -> list[tuple[str, list[tuple[str, Attribute]]]]:
    required, optional, read_only = [], [], []
    for name, attr in sorted(resource.schema.items()):
        if attr.required:
            required.append((name, attr))
        elif attr.optional:
            optional.append((name, attr))
        else:
            read_only.append((name, attr))
    return [("Required", required), ("Optional", optional), ("Read-Only", read_only)]


def _nested(resource: Resource) -> list[tuple[str, Block]]:
    return [
        (name, attr.elem)
        for name, attr in sorted(resource.schema.items())
        if isinstance(attr.elem, Block)
    ]


def render_resource(type_name: str, resource: Resource, kind: str = "resource") -> str:
    return RESOURCE_TEMPLATE.render(
        type_name=type_name,
        kind=kind,
        resource=resource,
        sections=_sections(resource),
        nested=_nested(resource),
        importable=kind == "resource" and resource.importer is not None,
        import_hint=IMPORT_HINTS.get(type_name, "ID"),
    )


def generate_docs(provider: Provider, output_dir: Path) -> list[Path]:
    """Write ``resources/<name>.md`` and ``data-sources/<name>.md`` files."""
    written = []
    for kind, subdir, registry in (
        ("resource", "resources", provider.resources),
        ("data source", "data-sources", provider.data_sources),
    ):
        target = output_dir / subdir
        target.mkdir(parents=True, exist_ok=True)
        for type_name, resource in sorted(registry.items()):
            short = type_name.removeprefix("squadcast_")
            path = target / f"{short}.md"
            path.write_text(render_resource(type_name, resource, kind))
            written.append(path)
    return written
