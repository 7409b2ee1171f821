"""
Tests for the approval flow policy.
"""
import pytest
from app.core.exceptions import ValidationError
from app.models import FlowConfig
from app.schemas.approval import FlowConfigUpdate
from app.services import flow_service


def test_default_flow_created_once(db):
    flow = flow_service.get_or_create_default(db)
    assert flow.key == "default"
    assert flow.is_manager_first is True
    assert flow.sequence_enabled is False
    assert flow.approvers == []
    assert flow.percent_threshold is None
    assert flow.specific_approver_id is None

    flow_service.get_or_create_default(db)
    assert db.query(FlowConfig).count() == 1


def test_update_replaces_policy(db, team):
    admin, manager, _ = team
    flow = flow_service.update_flow(
        FlowConfigUpdate(
            is_manager_first=False,
            sequence_enabled=True,
            approvers=[{"user_id": manager.id, "required": True}, {"user_id": admin.id, "required": False}],
            percent_threshold=100,
            specific_approver_id=admin.id,
        ),
        db
    )
    assert flow.is_manager_first is False
    assert flow.approvers == [
        {"user_id": manager.id, "required": True},
        {"user_id": admin.id, "required": False},
    ]

    flow = flow_service.update_flow(
        FlowConfigUpdate(is_manager_first=True, sequence_enabled=False, approvers=[]), db
    )
    assert flow.approvers == []
    assert flow.percent_threshold is None
    assert flow.specific_approver_id is None
    assert db.query(FlowConfig).count() == 1


@pytest.mark.parametrize("threshold", [0, 101, -3])
def test_threshold_out_of_range(db, threshold):
    with pytest.raises(ValidationError):
        flow_service.update_flow(
            FlowConfigUpdate(
                is_manager_first=True, sequence_enabled=False, approvers=[], percent_threshold=threshold
            ),
            db
        )


def test_unknown_approver_rejected(db):
    with pytest.raises(ValidationError):
        flow_service.update_flow(
            FlowConfigUpdate(
                is_manager_first=True, sequence_enabled=False, approvers=[], specific_approver_id=77
            ),
            db
        )


def test_duplicate_approver_rejected(db, team):
    admin, _, _ = team
    with pytest.raises(ValidationError):
        flow_service.update_flow(
            FlowConfigUpdate(
                is_manager_first=True,
                sequence_enabled=False,
                approvers=[{"user_id": admin.id}, {"user_id": admin.id}],
            ),
            db
        )


def test_flow_endpoints(client, team, auth_headers):
    admin, _, employee = team
    assert client.get("/api/flows", headers=auth_headers(employee)).status_code == 403

    response = client.get("/api/flows", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["is_manager_first"] is True

    response = client.put(
        "/api/flows",
        json={
            "is_manager_first": True,
            "sequence_enabled": False,
            "approvers": [{"user_id": admin.id, "required": True}],
            "percent_threshold": 60,
            "specific_approver_id": admin.id
        },
        headers=auth_headers(admin)
    )
    assert response.status_code == 200
    assert response.json()["percent_threshold"] == 60

    response = client.put(
        "/api/flows",
        json={"is_manager_first": True, "sequence_enabled": False, "approvers": [], "percent_threshold": 150},
        headers=auth_headers(admin)
    )
    assert response.status_code == 400
