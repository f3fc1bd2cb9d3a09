"""Load and parse field registry YAML files."""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Tuple

import yaml

from jobsheet_extraction.schemas.extraction_result import NormalizerKind, Severity

logger = logging.getLogger(__name__)

# Repo default specs directory
SPECS_DIR = Path(__file__).parent / "specs"

# Directory checked before the repo default
SPECS_DIR_ENV_VAR = "JOBSHEET_SPECS_DIR"


class FieldSpecError(ValueError):
    """Raised when a field registry file is malformed."""


@dataclass(frozen=True)
class FieldDefinition:
    """How to locate and validate one document field."""

    name: str
    display_name: str
    required: bool
    severity: Severity
    patterns: Tuple[Pattern[str], ...]
    fuzzy_labels: Tuple[str, ...]
    llm_prompt: str
    normalizer: NormalizerKind = NormalizerKind.NONE
    # Labels whose literal presence counts as a value ("Present")
    presence_labels: Tuple[str, ...] = ()

    @property
    def is_presence_only(self) -> bool:
        return bool(self.presence_labels)


@dataclass(frozen=True)
class FieldSpec:
    """An ordered field registry for one document family."""

    doc_type: str
    version: str
    fields: Tuple[FieldDefinition, ...] = field(default_factory=tuple)

    @property
    def required_fields(self) -> List[FieldDefinition]:
        return [f for f in self.fields if f.required]

    @property
    def optional_fields(self) -> List[FieldDefinition]:
        return [f for f in self.fields if not f.required]

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        """Get a field definition by name."""
        return next((f for f in self.fields if f.name == name), None)


def _user_specs_dir() -> Optional[Path]:
    value = os.getenv(SPECS_DIR_ENV_VAR)
    return Path(value) if value else None


def _resolve_spec_path(name: str) -> Optional[Path]:
    """Resolve spec file path, preferring the user specs directory."""
    user_dir = _user_specs_dir()
    if user_dir is not None:
        user_spec = user_dir / f"{name}.yaml"
        if user_spec.exists():
            logger.debug(f"Using spec override: {user_spec}")
            return user_spec

    repo_spec = SPECS_DIR / f"{name}.yaml"
    if repo_spec.exists():
        logger.debug(f"Using repo default spec: {repo_spec}")
        return repo_spec

    return None


def load_spec(name: str) -> FieldSpec:
    """
    Load a FieldSpec from YAML file.

    Args:
        name: Spec name (file stem, e.g. 'job_sheet')

    Returns:
        FieldSpec with compiled patterns

    Raises:
        FileNotFoundError: If spec file doesn't exist
        FieldSpecError: If spec file is invalid
    """
    spec_file = _resolve_spec_path(name)

    if spec_file is None:
        raise FileNotFoundError(
            f"Spec file not found for: {name}. "
            f"Checked ${SPECS_DIR_ENV_VAR} and repo default at: {SPECS_DIR}"
        )

    try:
        with open(spec_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise FieldSpecError(f"Invalid YAML in spec {spec_file}: {e}")

    if not isinstance(data, dict):
        raise FieldSpecError(f"Spec {spec_file} must be a mapping")

    return parse_spec(data)


def _parse_field(raw: Dict[str, Any]) -> FieldDefinition:
    """Parse one raw field entry, compiling its patterns."""
    name = raw.get("name")
    if not name:
        raise FieldSpecError(f"Field entry without a name: {raw}")

    patterns = []
    for source in raw.get("patterns", []):
        try:
            patterns.append(re.compile(source, re.IGNORECASE))
        except re.error as e:
            raise FieldSpecError(f"Invalid pattern for field '{name}': {source!r} ({e})")

    try:
        severity = Severity(raw.get("severity", "S2"))
        normalizer = NormalizerKind(raw.get("normalizer") or "none")
    except ValueError as e:
        raise FieldSpecError(f"Invalid field '{name}': {e}")

    return FieldDefinition(
        name=name,
        display_name=raw.get("display_name", name),
        required=bool(raw.get("required", False)),
        severity=severity,
        patterns=tuple(patterns),
        fuzzy_labels=tuple(raw.get("fuzzy_labels", [])),
        llm_prompt=raw.get("llm_prompt", ""),
        normalizer=normalizer,
        presence_labels=tuple(raw.get("presence_labels", [])),
    )


def parse_spec(data: Dict[str, Any]) -> FieldSpec:
    """Parse raw YAML data into FieldSpec."""
    fields = tuple(_parse_field(raw) for raw in data.get("fields", []))

    names = [f.name for f in fields]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise FieldSpecError(f"Duplicate field names: {duplicates}")

    return FieldSpec(
        doc_type=data.get("doc_type", "unknown"),
        version=str(data.get("version", "v0")),
        fields=fields,
    )


def _collect_specs_from_dir(specs_dir: Path) -> set:
    """Collect spec names from a directory."""
    specs = set()
    if not specs_dir.exists():
        return specs

    for spec_file in specs_dir.glob("*.yaml"):
        try:
            with open(spec_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Skipping unreadable spec {spec_file}: {e}")
            continue
        if isinstance(data, dict) and "fields" in data:
            specs.add(spec_file.stem)

    return specs


def list_available_specs() -> List[str]:
    """List spec names from the repo default and the user specs directory."""
    specs = _collect_specs_from_dir(SPECS_DIR)

    user_dir = _user_specs_dir()
    if user_dir is not None:
        specs.update(_collect_specs_from_dir(user_dir))

    return sorted(specs)


# Cache loaded specs for performance
_spec_cache: Dict[str, FieldSpec] = {}


def get_spec(name: str = "job_sheet", use_cache: bool = True) -> FieldSpec:
    """
    Get a FieldSpec, using cache by default.

    Args:
        name: Spec name
        use_cache: Whether to use cached specs

    Returns:
        FieldSpec instance
    """
    if use_cache and name in _spec_cache:
        return _spec_cache[name]

    spec = load_spec(name)

    if use_cache:
        _spec_cache[name] = spec

    return spec


def clear_spec_cache():
    """Clear the spec cache."""
    _spec_cache.clear()
