from pydantic import Field
from typing import List, Optional

from leave_portal.schemas.base import CamelModel


class DepartmentForm(CamelModel):
    department_name: str = Field(..., min_length=1)


class ClassForm(CamelModel):
    class_name: str = Field(..., min_length=1)
    department_id: str = Field(..., min_length=1)


class PersonForm(CamelModel):
    """Teacher / student profile edits."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")


class ClassTeacherForm(CamelModel):
    teacher_id: str = Field(..., min_length=1)
    class_id: str = Field(..., min_length=1)


class HierarchyNode(CamelModel):
    id: Optional[str] = None
    name: str
    type: str  # DEPARTMENT, CLASS, TEACHER, STUDENT
    children: List["HierarchyNode"] = []


# Resolve forward references for Pydantic V2
HierarchyNode.model_rebuild()
