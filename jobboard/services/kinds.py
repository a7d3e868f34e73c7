"""
Kind descriptors - one row per embedded array.

A "kind" names an array of subdocuments inside a parent document. The
embedded service is generic; everything kind-specific (which array field,
which parent collection, which fields are allowed) lives in KINDS.

    kind              field            parent
    employments       employments      users
    educations        educations       users
    skills            it_skills        users
    projects          projects         users
    accomplishments   accomplishments  users
    certifications    certifications   users
    applications      applications     jobs
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from jobboard.core.errors import InvalidArgumentError, NotFoundError
from jobboard.schemas.schemas import (
    EmploymentCreate, EmploymentUpdate, EducationCreate, EducationUpdate,
    SkillCreate, SkillUpdate, ProjectCreate, ProjectUpdate,
    AccomplishmentCreate, AccomplishmentUpdate, CertificationCreate, CertificationUpdate,
    ApplicationCreate, ApplicationUpdate,
)

USERS = "users"
JOBS = "jobs"


@dataclass(frozen=True)
class KindDescriptor:
    kind: str
    field: str
    parent: str
    label: str
    create_schema: Type[BaseModel]
    update_schema: Type[BaseModel]

    def validate_new(self, fields: Any) -> Dict[str, Any]:
        """Full item: required fields enforced, defaults applied."""
        model = _validate(self.create_schema, fields, self.label)
        return model.model_dump(mode="json")

    def validate_patch(self, fields: Any) -> Dict[str, Any]:
        """Partial item: only the keys the caller actually sent."""
        model = _validate(self.update_schema, fields, self.label)
        patch = model.model_dump(mode="json", exclude_unset=True)
        if not patch:
            raise InvalidArgumentError("No fields to update")
        return patch

    def validate_merged(self, item: Dict[str, Any], patch: Dict[str, Any]) -> None:
        """The stored item with the patch applied must still be a valid new item."""
        current = {key: item[key] for key in self.create_schema.model_fields if key in item}
        _validate(self.create_schema, {**current, **patch}, self.label)


def _validate(schema: Type[BaseModel], fields: Any, label: str) -> BaseModel:
    if not isinstance(fields, dict):
        raise InvalidArgumentError(f"{label} must be a JSON object")
    try:
        return schema.model_validate(fields)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidArgumentError(f"Invalid {label.lower()}: {problems}") from e


KINDS: Dict[str, KindDescriptor] = {
    d.kind: d for d in (
        KindDescriptor("employments", "employments", USERS, "Employment",
                       EmploymentCreate, EmploymentUpdate),
        KindDescriptor("educations", "educations", USERS, "Education",
                       EducationCreate, EducationUpdate),
        KindDescriptor("skills", "it_skills", USERS, "Skill",
                       SkillCreate, SkillUpdate),
        KindDescriptor("projects", "projects", USERS, "Project",
                       ProjectCreate, ProjectUpdate),
        KindDescriptor("accomplishments", "accomplishments", USERS, "Accomplishment",
                       AccomplishmentCreate, AccomplishmentUpdate),
        KindDescriptor("certifications", "certifications", USERS, "Certification",
                       CertificationCreate, CertificationUpdate),
        KindDescriptor("applications", "applications", JOBS, "Application",
                       ApplicationCreate, ApplicationUpdate),
    )
}

ALIASES = {
    "itSkills": "skills",
    "it_skills": "skills",
}

# Array fields present on every freshly registered user
USER_SECTION_FIELDS = [d.field for d in KINDS.values() if d.parent == USERS]


def get_kind(name: str, parent: Optional[str] = None) -> KindDescriptor:
    """
    Resolve a kind by route name or alias.

    Raises NotFoundError for unknown kinds and for kinds that belong to a
    different parent collection than `parent`.
    """
    descriptor = KINDS.get(ALIASES.get(name, name))
    if descriptor is None or (parent is not None and descriptor.parent != parent):
        raise NotFoundError(f"Unknown section '{name}'")
    return descriptor
