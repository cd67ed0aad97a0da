from __future__ import annotations

from dataclasses import replace

import pytest

from bidmarket.core.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from bidmarket.services.project_service import ProjectService


def test_publish_derives_budget_and_defaults(project_service, make_client, project_payload):
    make_client(user_id=100)

    project = project_service.create_and_publish_project(100, project_payload(budget={"min": 100000}))

    assert project.status == "OPEN"
    assert project.budget_max == 120000
    assert project.currency == "INR"
    assert project.sub_type == "villa"
    assert project.city == "12 MG Road"
    assert [(entry.status, entry.reason) for entry in project.status_history] == [("OPEN", "Project published")]


def test_publish_requires_client_profile(project_service, project_payload):
    with pytest.raises(NotFoundError, match="Client profile not found"):
        project_service.create_and_publish_project(100, project_payload())


def test_publish_validates_payload(project_service, make_client, project_payload):
    make_client(user_id=100)
    with pytest.raises(ValidationError) as exc:
        project_service.create_and_publish_project(100, project_payload(budget={"min": 100, "max": 50}))
    assert exc.value.details


def test_update_ignores_immutable_fields(project_service, open_project):
    updated = project_service.update_project(
        open_project.id,
        100,
        {"client_id": 999, "views": 50, "title": "Villa build in Pune", "min_experience": 3},
    )

    assert updated.client_id == open_project.client_id
    assert updated.views == 0
    assert updated.title == "Villa build in Pune"
    assert updated.min_experience == 3


def test_update_requires_owner(project_service, make_client, open_project):
    make_client(user_id=101, name="Other Client")
    with pytest.raises(ForbiddenError):
        project_service.update_project(open_project.id, 101, {"title": "Hijacked title"})


def test_status_change_is_recorded_once(project_service, open_project):
    on_hold = project_service.update_project_status(open_project.id, 100, "ON_HOLD", reason="Waiting on permits")
    assert on_hold.status == "ON_HOLD"
    assert on_hold.status_history[-1].reason == "Waiting on permits"

    again = project_service.update_project_status(open_project.id, 100, "ON_HOLD")
    assert len(again.status_history) == len(on_hold.status_history)


def test_permissive_mode_allows_reopening(project_service, open_project):
    project_service.update_project_status(open_project.id, 100, "COMPLETED")
    reopened = project_service.update_project_status(open_project.id, 100, "OPEN")
    assert reopened.status == "OPEN"


def test_strict_mode_enforces_transition_table(session_factory, cache, config, open_project):
    strict = ProjectService(
        session_factory=session_factory,
        cache=cache,
        config=replace(config, STRICT_PROJECT_TRANSITIONS=True),
    )
    strict.update_project_status(open_project.id, 100, "CANCELLED")

    with pytest.raises(InvalidTransitionError):
        strict.update_project_status(open_project.id, 100, "OPEN")


def test_unknown_status_is_rejected(project_service, open_project):
    with pytest.raises(ValidationError):
        project_service.update_project_status(open_project.id, 100, "ARCHIVED")


def test_get_project_counts_views_when_asked(project_service, open_project):
    project_service.get_project(open_project.id, count_view=True)
    project_service.get_project(open_project.id, count_view=True)

    assert project_service.get_project(open_project.id).views == 2
    with pytest.raises(NotFoundError):
        project_service.get_project(9999)


def test_delete_project_removes_its_bids(project_service, bid_service, open_project, make_vendor, bid_payload):
    bid_ids = []
    for user_id, cost in ((201, 100000), (202, 110000), (203, 120000)):
        make_vendor(user_id=user_id)
        bid_ids.append(bid_service.submit_bid(open_project.id, user_id, bid_payload(cost)).id)

    result = project_service.delete_project(open_project.id, 100)

    assert result.success is True
    assert result.deleted_bids == 3
    with pytest.raises(NotFoundError):
        bid_service.get_project_bids(open_project.id)
    with pytest.raises(NotFoundError):
        bid_service.get_bid_details(bid_ids[0], 201, "vendor_supplier")
    assert bid_service.get_vendor_bids(202).pagination.total == 0


def test_delete_requires_owner(project_service, make_client, open_project):
    make_client(user_id=101, name="Other Client")
    with pytest.raises(ForbiddenError):
        project_service.delete_project(open_project.id, 101)


def test_vendor_search_sees_open_public_projects(project_service, make_client, make_vendor, open_project, project_payload):
    private = project_service.create_and_publish_project(100, project_payload(title="Private bungalow", visibility="private"))
    cancelled = project_service.create_and_publish_project(100, project_payload(title="Cancelled warehouse"))
    project_service.update_project_status(cancelled.id, 100, "CANCELLED")
    make_vendor(user_id=201)

    page = project_service.search_projects({}, 201, "vendor_supplier")

    assert [item.id for item in page.items] == [open_project.id]
    assert private.id not in {item.id for item in page.items}


def test_client_search_sees_only_own_projects(project_service, make_client, open_project, project_payload):
    make_client(user_id=101, name="Other Client")
    theirs = project_service.create_and_publish_project(101, project_payload(title="Office tower fit-out"))

    mine = project_service.search_projects(None, 100, "client_owner")
    assert [item.id for item in mine.items] == [open_project.id]

    filtered = project_service.search_projects({"status": "CANCELLED"}, 101, "client_owner")
    assert filtered.pagination.total == 0

    assert project_service.search_projects({}, 101, "client_owner").items[0].id == theirs.id
    assert project_service.search_projects({}, 555, "client_owner").pagination.total == 0


def test_search_filters_by_city_and_budget(project_service, make_client, project_payload):
    make_client(user_id=100)
    pune = project_service.create_and_publish_project(
        100,
        project_payload(location={"address": "12 MG Road, Pune", "city": "Pune", "pincode": "411001"}),
    )
    project_service.create_and_publish_project(
        100,
        project_payload(
            title="Shop renovation in Mumbai",
            budget={"min": 300000, "max": 400000},
            location={"address": "4 Hill Road, Mumbai", "city": "Mumbai"},
        ),
    )

    def ids(criteria):
        return [item.id for item in project_service.search_projects(criteria, 100, "client_owner").items]

    assert ids({"city": "pun"}) == [pune.id]
    assert ids({"budget_min": 100000}) == [pune.id]
    assert ids({"budget_min": 200000}) == []
    assert ids({"budget_max": 140000, "city": "PUNE"}) == [pune.id]
    assert ids({"budget_max": 160000, "city": "pune"}) == []


def test_search_paginates_and_checks_role(project_service, make_client, make_vendor, project_payload):
    make_client(user_id=100)
    for index in range(3):
        project_service.create_and_publish_project(100, project_payload(title=f"Villa phase {index + 1}"))
    make_vendor(user_id=201)

    page = project_service.search_projects({}, 201, "vendor_supplier", page=2, limit=2)
    assert len(page.items) == 1
    assert page.pagination.pages == 2

    with pytest.raises(ValidationError):
        project_service.search_projects({}, 201, "inspector")


def test_find_matching_vendors_ranks_eligible_vendors(project_service, make_vendor, open_project):
    make_vendor(user_id=201, rating_average=4.5)
    make_vendor(user_id=202, status="suspended")
    make_vendor(user_id=203, services=["commercial"])
    make_vendor(user_id=204, rating_average=4.8)
    make_vendor(user_id=205, max_budget=100000)

    matches = project_service.find_matching_vendors(open_project.id)

    assert [match.company_name for match in matches] == ["Vendor 204", "Vendor 201"]
    with pytest.raises(NotFoundError):
        project_service.find_matching_vendors(9999)
