"""Template consistency checks.

Identifies which known template an email was written from, checks that the
template's required components are present and flags prohibited phrases.

The catalog is static data: ``mailqc/data/templates.yaml`` is bundled with
the package and a project can replace it with ``.mailqc/templates.yaml``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..models.analysis import TemplateAnalysisResult
from ..utils.log import get_logger

logger = get_logger(__name__)

COMPONENT_WEIGHT = 8
NO_PROHIBITED_BONUS = 2


@dataclass(frozen=True)
class TemplateComponent:
    name: str
    required: bool
    patterns: tuple[re.Pattern, ...]

    def matches(self, content: str) -> bool:
        return any(p.search(content) for p in self.patterns)

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ")


@dataclass(frozen=True)
class EmailTemplate:
    id: str
    name: str
    identifiers: tuple[re.Pattern, ...]
    components: tuple[TemplateComponent, ...]

    def identifies(self, content: str) -> bool:
        return any(p.search(content) for p in self.identifiers)


@dataclass(frozen=True)
class TemplateCatalog:
    version: str
    templates: tuple[EmailTemplate, ...]
    prohibited_phrases: tuple[str, ...]

    def get(self, template_id: str) -> Optional[EmailTemplate]:
        return next((t for t in self.templates if t.id == template_id), None)


def _compile(patterns: list[str]) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


class _ComponentSpec(BaseModel):
    name: str = Field(min_length=1)
    required: bool = True
    patterns: list[str] = Field(default_factory=list)

    @field_validator("patterns", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class _TemplateSpec(BaseModel):
    id: str = Field(min_length=1)
    name: Optional[str] = None
    identifiers: list[str] = Field(default_factory=list)
    components: list[_ComponentSpec] = Field(default_factory=list)

    @field_validator("identifiers", "components", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class _CatalogSpec(BaseModel):
    version: Union[str, int, float] = ""
    templates: list[_TemplateSpec] = Field(default_factory=list)
    prohibited_phrases: list[str] = Field(default_factory=list)

    @field_validator("templates", "prohibited_phrases", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


def parse_catalog(data: dict) -> TemplateCatalog:
    """Build a catalog from its YAML/dict form. Raises ValueError on bad data."""
    if not isinstance(data, dict):
        raise ValueError("Template catalog must be a mapping")
    try:
        spec = _CatalogSpec.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid template catalog: {e}") from e

    templates: list[EmailTemplate] = []
    for entry in spec.templates:
        try:
            components = tuple(
                TemplateComponent(name=c.name, required=c.required, patterns=_compile(c.patterns))
                for c in entry.components
            )
            identifiers = _compile(entry.identifiers)
        except re.error as e:
            raise ValueError(f"Invalid template '{entry.id}': {e}") from e
        templates.append(
            EmailTemplate(
                id=entry.id,
                name=entry.name or entry.id.replace("_", " "),
                identifiers=identifiers,
                components=components,
            )
        )

    return TemplateCatalog(
        version=str(spec.version),
        templates=tuple(templates),
        prohibited_phrases=tuple(spec.prohibited_phrases),
    )


@lru_cache(maxsize=1)
def default_catalog() -> TemplateCatalog:
    """The catalog bundled with the package."""
    text = (resources.files("mailqc.data") / "templates.yaml").read_text(encoding="utf-8")
    return parse_catalog(yaml.safe_load(text) or {})


def load_template_catalog(project_path: Optional[Path] = None) -> TemplateCatalog:
    """Load the project's catalog override, falling back to the bundled one."""
    if project_path:
        override = project_path / ".mailqc" / "templates.yaml"
        if override.exists():
            try:
                data = yaml.safe_load(override.read_text(encoding="utf-8-sig")) or {}
                return parse_catalog(data)
            except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError) as e:
                logger.warning("Ignoring invalid template catalog %s: %s", override, e)
    return default_catalog()


def identify_template(content: str, catalog: Optional[TemplateCatalog] = None) -> Optional[str]:
    """Return the id of the first template whose identifier matches."""
    catalog = catalog or default_catalog()
    for template in catalog.templates:
        if template.identifies(content or ""):
            return template.id
    return None


def find_prohibited_phrases(content: str, catalog: Optional[TemplateCatalog] = None) -> list[str]:
    catalog = catalog or default_catalog()
    lowered = (content or "").lower()
    return [p for p in catalog.prohibited_phrases if p.lower() in lowered]


def check_components(content: str, template: EmailTemplate) -> tuple[list[str], dict[str, int]]:
    """Check a template's required components.

    Returns the display names of missing components and a per-component
    score (1 found, 0 missing). Optional components are ignored.
    """
    missing: list[str] = []
    component_scores: dict[str, int] = {}
    for component in template.components:
        if not component.required:
            continue
        found = component.matches(content)
        component_scores[component.name] = 1 if found else 0
        if not found:
            missing.append(component.display_name)
    return missing, component_scores


def analyze_template_consistency(
    content: str, catalog: Optional[TemplateCatalog] = None
) -> TemplateAnalysisResult:
    catalog = catalog or default_catalog()
    content = content or ""
    prohibited = find_prohibited_phrases(content, catalog)

    template_id = identify_template(content, catalog)
    template = catalog.get(template_id) if template_id else None
    if template is None:
        return TemplateAnalysisResult(prohibited_phrases=prohibited)

    missing, component_scores = check_components(content, template)
    required = len(component_scores)
    found = sum(component_scores.values())

    score = (found / required) * COMPONENT_WEIGHT if required else COMPONENT_WEIGHT
    if not prohibited:
        score += NO_PROHIBITED_BONUS

    return TemplateAnalysisResult(
        detected_template=template.id,
        template_name=template.name,
        score=round(score, 1),
        missing_components=missing,
        prohibited_phrases=prohibited,
        component_scores=component_scores,
    )
