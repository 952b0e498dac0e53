import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from leave_portal.core.exceptions import FormValidationError
from leave_portal.schemas.admin import ClassForm, ClassTeacherForm, DepartmentForm, PersonForm
from leave_portal.services import search_filter as sf
from leave_portal.services.api_client import LeaveApiClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MasterDataResource:
    name: str                    # path segment under /api/admin
    label: str
    id_field: str
    search_fields: Sequence[sf.FieldGetter]
    form: Optional[Type[BaseModel]] = None


RESOURCES: Dict[str, MasterDataResource] = {
    r.name: r
    for r in (
        MasterDataResource("departments", "Department", "departmentId", sf.DEPARTMENT_FIELDS, DepartmentForm),
        MasterDataResource("classes", "Class", "classId", sf.CLASS_FIELDS, ClassForm),
        MasterDataResource("teachers", "Teacher", "teacherId", sf.PERSON_FIELDS, PersonForm),
        MasterDataResource("students", "Student", "studentId", sf.PERSON_FIELDS, PersonForm),
        MasterDataResource("class-teachers", "Class teacher", "classTeacherId", sf.CLASS_TEACHER_FIELDS, ClassTeacherForm),
    )
}


def get_resource(name: str) -> MasterDataResource:
    try:
        return RESOURCES[name]
    except KeyError:
        raise FormValidationError(f"Unknown admin resource: {name}", field="resource")


class AdminService:
    """CRUD over the admin master-data collections. Every write is followed by a fresh list."""

    def __init__(self, client: LeaveApiClient):
        self.client = client

    @staticmethod
    def validate(resource: MasterDataResource, payload: Dict[str, Any]) -> Dict[str, Any]:
        if resource.form is None:
            return payload
        try:
            form = resource.form.model_validate(payload)
        except ValidationError as e:
            first = e.errors()[0]
            field = str(first["loc"][-1]) if first.get("loc") else None
            raise FormValidationError(f"{resource.label}: {field or 'form'} is required or invalid", field=field)
        # Keep fields the form does not know about (e.g. optional profile data)
        return {**payload, **form.model_dump(mode="json", by_alias=True, exclude_none=True)}

    async def list(self, name: str, query: Optional[str] = None) -> List[Dict[str, Any]]:
        resource = get_resource(name)
        records = await self.client.list_records(resource.name)
        return sf.search_filter(records, query, resource.search_fields)

    async def create(self, name: str, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        resource = get_resource(name)
        body = self.validate(resource, payload)
        await self.client.create_record(resource.name, body)
        logger.info(f"{resource.label} created")
        return await self.client.list_records(resource.name)

    async def update(self, name: str, record_id: str, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        resource = get_resource(name)
        body = self.validate(resource, payload)
        await self.client.update_record(resource.name, record_id, body)
        logger.info(f"{resource.label} {record_id} updated")
        return await self.client.list_records(resource.name)

    async def delete(self, name: str, record_id: str) -> List[Dict[str, Any]]:
        resource = get_resource(name)
        await self.client.delete_record(resource.name, record_id)
        logger.info(f"{resource.label} {record_id} deleted")
        return await self.client.list_records(resource.name)
