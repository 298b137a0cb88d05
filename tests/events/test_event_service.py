from __future__ import annotations

from datetime import date, time

import pytest

from src.governance_system.governance_system.core.exceptions import NotFoundError, ValidationError


def _event_kwargs(org_id: int, **overrides):
    data = {
        "title": "Leadership Summit",
        "description": "Annual summit",
        "event_date": date(2026, 4, 1),
        "start_time": time(9, 0),
        "end_time": time(16, 0),
        "location": "Auditorium",
        "organization_id": org_id,
        "mandatory": True,
        "sanction": "Community service",
    }
    data.update(overrides)
    return data


def test_create_update_delete(container, make_org):
    service = container.event_service
    org_id = make_org()

    event_id = service.create_event(**_event_kwargs(org_id))
    service.update_event(event_id=event_id, **_event_kwargs(org_id, title="Leadership Summit 2026"))

    event = service.get_event(event_id)
    assert event.title == "Leadership Summit 2026"
    assert event.mandatory is True

    service.delete_event(event_id)
    with pytest.raises(NotFoundError):
        service.get_event(event_id)


def test_end_must_follow_start(container, make_org):
    with pytest.raises(ValidationError):
        container.event_service.create_event(**_event_kwargs(make_org(), end_time=time(8, 0)))


def test_organization_must_exist(container):
    with pytest.raises(NotFoundError):
        container.event_service.create_event(**_event_kwargs(404))


def test_assign_officers(container, make_org, make_user):
    service = container.event_service
    event_id = service.create_event(**_event_kwargs(make_org()))
    a, b = make_user(), make_user()

    service.assign_officers(event_id=event_id, officer_ids=[b, a, b])
    assert service.get_event(event_id).officer_ids == tuple(sorted({a, b}))

    with pytest.raises(NotFoundError):
        service.assign_officers(event_id=event_id, officer_ids=[999])
