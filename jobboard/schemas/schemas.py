"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Embedded profile sections and applications each get a Create schema
(required fields enforced) and an Update schema (everything optional).
Both forbid unknown keys, so a typo in a field name is a 400 instead of
silently landing in the database.
"""

from datetime import date
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    jobseeker = "jobseeker"
    employer = "employer"
    admin = "admin"


class JobType(str, Enum):
    full_time = "Full-time"
    part_time = "Part-time"
    contract = "Contract"
    internship = "Internship"
    remote = "Remote"


class ExperienceLevel(str, Enum):
    entry = "Entry Level"
    mid = "Mid Level"
    senior = "Senior Level"


class ApplicationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class CourseType(str, Enum):
    full_time = "Full-time"
    part_time = "Part-time"
    correspondence = "Correspondence"


class ProjectStatus(str, Enum):
    in_progress = "In progress"
    finished = "Finished"


class AccomplishmentType(str, Enum):
    online_profile = "online-profile"
    work_sample = "work-sample"
    publication = "publication"
    presentation = "presentation"
    patent = "patent"
    other = "other"


class StrictModel(BaseModel):
    """Rejects keys the schema does not declare."""
    model_config = ConfigDict(extra="forbid")


# ============================================================
# AUTH SCHEMAS
# ============================================================

class ProfileInfo(StrictModel):
    phone: str = ""
    address: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""
    company: str = ""
    company_description: str = ""


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole = UserRole.jobseeker
    profile: Optional[ProfileInfo] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class TokenResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    token_type: str = "bearer"
    redirect_to: Optional[str] = None
    user: Dict[str, Any]


# ============================================================
# USER PROFILE SCHEMAS
# ============================================================

class UserUpdate(StrictModel):
    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    designation: Optional[str] = None
    company: Optional[str] = None
    experience: Optional[str] = None
    salary: Optional[str] = None
    location: Optional[str] = None
    mobile: Optional[str] = None
    notice_period: Optional[str] = None
    headline: Optional[str] = None
    skills: Optional[List[str]] = None
    profile_summary: Optional[str] = None
    career_profile: Optional[Dict[str, Any]] = None
    personal_details: Optional[Dict[str, Any]] = None
    profile: Optional[ProfileInfo] = None


# ============================================================
# EMBEDDED PROFILE SECTIONS
# ============================================================

class EmploymentCreate(StrictModel):
    job_title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    employment_type: Optional[JobType] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: bool = False
    description: Optional[str] = None


class EmploymentUpdate(StrictModel):
    job_title: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1)
    employment_type: Optional[JobType] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: Optional[bool] = None
    description: Optional[str] = None


class EducationCreate(StrictModel):
    degree: str = Field(..., min_length=1)
    institution: str = Field(..., min_length=1)
    field_of_study: Optional[str] = None
    course_type: Optional[CourseType] = None
    start_year: Optional[int] = Field(None, ge=1900, le=2100)
    end_year: Optional[int] = Field(None, ge=1900, le=2100)
    grade: Optional[str] = None


class EducationUpdate(StrictModel):
    degree: Optional[str] = Field(None, min_length=1)
    institution: Optional[str] = Field(None, min_length=1)
    field_of_study: Optional[str] = None
    course_type: Optional[CourseType] = None
    start_year: Optional[int] = Field(None, ge=1900, le=2100)
    end_year: Optional[int] = Field(None, ge=1900, le=2100)
    grade: Optional[str] = None


class SkillCreate(StrictModel):
    name: str = Field(..., min_length=1)
    version: Optional[str] = None
    last_used: Optional[int] = Field(None, ge=1950, le=2100)
    experience_years: int = Field(0, ge=0)
    experience_months: int = Field(0, ge=0, le=11)


class SkillUpdate(StrictModel):
    name: Optional[str] = Field(None, min_length=1)
    version: Optional[str] = None
    last_used: Optional[int] = Field(None, ge=1950, le=2100)
    experience_years: Optional[int] = Field(None, ge=0)
    experience_months: Optional[int] = Field(None, ge=0, le=11)


class ProjectCreate(StrictModel):
    title: str = Field(..., min_length=1)
    client: Optional[str] = None
    status: ProjectStatus = ProjectStatus.finished
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    url: Optional[str] = None
    skills_used: List[str] = []


class ProjectUpdate(StrictModel):
    title: Optional[str] = Field(None, min_length=1)
    client: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: Optional[str] = None
    url: Optional[str] = None
    skills_used: Optional[List[str]] = None


class AccomplishmentCreate(StrictModel):
    title: str = Field(..., min_length=1)
    type: AccomplishmentType = AccomplishmentType.other
    url: Optional[str] = None
    awarded_on: Optional[date] = None
    description: Optional[str] = None


class AccomplishmentUpdate(StrictModel):
    title: Optional[str] = Field(None, min_length=1)
    type: Optional[AccomplishmentType] = None
    url: Optional[str] = None
    awarded_on: Optional[date] = None
    description: Optional[str] = None


class CertificationCreate(StrictModel):
    name: str = Field(..., min_length=1)
    issuer: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None


class CertificationUpdate(StrictModel):
    name: Optional[str] = Field(None, min_length=1)
    issuer: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class Salary(StrictModel):
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)
    currency: str = "USD"

    @model_validator(mode="after")
    def check_range(self):
        if self.max < self.min:
            raise ValueError("Maximum salary must not be below minimum salary")
        return self


class JobCreate(StrictModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    salary: Salary
    job_type: JobType = JobType.full_time
    experience: ExperienceLevel = ExperienceLevel.entry
    skills: List[str] = []


class JobUpdate(StrictModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    salary: Optional[Salary] = None
    job_type: Optional[JobType] = None
    experience: Optional[ExperienceLevel] = None
    skills: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def check_no_nulls(self):
        # Omitting a field leaves it alone; null would erase it
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(StrictModel):
    resume: str = Field(..., min_length=1)
    cover_letter: str = ""


class ApplicationUpdate(StrictModel):
    resume: Optional[str] = Field(None, min_length=1)
    cover_letter: Optional[str] = None


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
