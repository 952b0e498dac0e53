import asyncio

import pytest

from leave_portal.core.exceptions import FormValidationError
from leave_portal.services.admin_service import AdminService
from conftest import token_for

ADMIN = "admin@college.edu"


def _run(make_client, scenario):
    async def _main():
        async with make_client(token_provider=lambda: token_for(ADMIN)) as api:
            return await scenario(AdminService(api))
    return asyncio.run(_main())


def test_create_refetches_the_list(make_client, backend):
    async def scenario(service):
        return await service.create("departments", {"departmentName": "Civil"})

    records = _run(make_client, scenario)
    assert [r["departmentName"] for r in records] == ["Computer Science", "Mechanical", "Civil"]
    assert backend.calls[-1][:2] == ("GET", "/api/admin/departments")


def test_invalid_form_is_not_sent(make_client, backend):
    async def scenario(service):
        return await service.create("teachers", {"name": "Ms. Iyer", "email": "not-an-email"})

    with pytest.raises(FormValidationError) as exc:
        _run(make_client, scenario)
    assert exc.value.message == "Teacher: email is required or invalid"
    assert backend.calls == []


def test_unknown_resource(make_client, backend):
    async def scenario(service):
        return await service.list("parents")

    with pytest.raises(FormValidationError):
        _run(make_client, scenario)
    assert backend.calls == []


def test_update_keeps_extra_fields(make_client, backend):
    async def scenario(service):
        return await service.update("students", "2", {"name": "Ben Ong", "email": "ben.ong@college.edu", "phone": "555-0101"})

    records = _run(make_client, scenario)
    ben = next(r for r in records if r["studentId"] == 2)
    assert ben["email"] == "ben.ong@college.edu"
    assert ben["phone"] == "555-0101"


def test_delete_and_search(make_client, backend):
    async def scenario(service):
        await service.delete("students", "1")
        return await service.list("students", "ben")

    records = _run(make_client, scenario)
    assert [r["name"] for r in records] == ["Ben Ong"]
    assert backend.calls_to("DELETE", "/api/admin/students/1")
