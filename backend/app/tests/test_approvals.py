"""
Tests for approval routing, the approval queue and decisions.
"""
from datetime import date
from decimal import Decimal
import pytest
from app.core.exceptions import ForbiddenError, NotFoundError
from app.models import ApprovalTask, Expense, ExpenseStatus, ExpenseTimelineEvent, UserRole
from app.schemas.approval import FlowConfigUpdate
from app.schemas.user import CurrentUser
from app.services import approval_service, expense_service, flow_service
from app.services.approval_router import route_expense


def _actor(user):
    return CurrentUser.model_validate(user)


def _submit(db, employee, amount="450", currency="EUR"):
    return expense_service.submit_expense(
        employee_id=employee.id,
        spend_date=date(2024, 1, 15),
        category="Travel",
        description="Conference travel",
        amount=Decimal(amount),
        currency=currency,
        db=db
    )


def _task_for(db, expense):
    return db.query(ApprovalTask).filter(ApprovalTask.expense_id == expense.id).first()


def test_decision_approves_expense_and_retires_task(db, team):
    _, manager, employee = team
    expense = _submit(db, employee)
    task = _task_for(db, expense)

    result = approval_service.decide(_actor(manager), task.id, "approved", "ok", db)

    assert result.status == ExpenseStatus.APPROVED
    assert len(result.timeline) == 2
    assert result.timeline[1].decision == "approved"
    assert result.timeline[1].comment == "ok"
    assert result.timeline[1].by_user_id == manager.id
    assert db.query(ApprovalTask).count() == 0


def test_replayed_decision_is_not_found(db, team):
    _, manager, employee = team
    expense = _submit(db, employee)
    task_id = _task_for(db, expense).id
    approval_service.decide(_actor(manager), task_id, "approved", "ok", db)

    with pytest.raises(NotFoundError):
        approval_service.decide(_actor(manager), task_id, "rejected", "changed my mind", db)

    db.expire_all()
    expense = db.get(Expense, expense.id)
    assert expense.status == ExpenseStatus.APPROVED
    assert len(expense.timeline) == 2


def test_concurrent_deciders_only_first_wins(db, team, session_factory, monkeypatch):
    """Both deciders see the task; the one that loses the DELETE changes nothing."""
    admin, manager, employee = team
    expense = _submit(db, employee)
    task_id = _task_for(db, expense).id

    first, second = session_factory(), session_factory()
    try:
        assert first.get(ApprovalTask, task_id) is not None
        assert second.get(ApprovalTask, task_id) is not None

        claim = approval_service._claim_task

        def claim_after_rival(claimed_id, session):
            # The rival commits between the second decider's lookup and its DELETE
            if session is second:
                approval_service.decide(_actor(manager), claimed_id, "approved", "first", first)
            return claim(claimed_id, session)

        monkeypatch.setattr(approval_service, "_claim_task", claim_after_rival)
        with pytest.raises(NotFoundError):
            approval_service.decide(_actor(admin), task_id, "rejected", "second", second)
    finally:
        first.close()
        second.close()

    db.expire_all()
    stored = db.get(Expense, expense.id)
    assert stored.status == ExpenseStatus.APPROVED
    assert [(e.decision, e.comment) for e in stored.timeline] == [("submitted", ""), ("approved", "first")]
    assert db.query(ApprovalTask).count() == 0


def test_reject_with_no_comment(db, team):
    admin, _, employee = team
    expense = _submit(db, employee)
    result = approval_service.decide(_actor(admin), _task_for(db, expense).id, "rejected", None, db)
    assert result.status == ExpenseStatus.REJECTED
    assert result.timeline[-1].comment == ""


def test_employee_without_manager_gets_no_task(db, make_user):
    loner = make_user("Loner", UserRole.EMPLOYEE, manager_id=None)
    expense = _submit(db, loner)

    assert expense.status == ExpenseStatus.WAITING
    assert db.query(ApprovalTask).count() == 0


def test_manager_first_disabled_gets_no_task(db, team):
    _, _, employee = team
    flow_service.update_flow(
        FlowConfigUpdate(is_manager_first=False, sequence_enabled=False, approvers=[]), db
    )
    expense = _submit(db, employee)
    assert _task_for(db, expense) is None


def test_specific_approver_rule_creates_task(db, team, make_user):
    admin, _, _ = team
    loner = make_user("Loner", UserRole.EMPLOYEE, manager_id=None)
    flow_service.update_flow(
        FlowConfigUpdate(
            is_manager_first=True,
            sequence_enabled=False,
            approvers=[{"user_id": admin.id, "required": True}],
            percent_threshold=60,
            specific_approver_id=admin.id,
        ),
        db
    )
    expense = _submit(db, loner)
    assert _task_for(db, expense) is not None


def test_threshold_without_specific_approver_is_not_a_condition(db, make_user):
    loner = make_user("Loner", UserRole.EMPLOYEE, manager_id=None)
    flow_service.update_flow(
        FlowConfigUpdate(is_manager_first=True, sequence_enabled=False, approvers=[], percent_threshold=50),
        db
    )
    expense = _submit(db, loner)
    assert _task_for(db, expense) is None


def test_routing_twice_keeps_one_task(db, team):
    _, _, employee = team
    expense = _submit(db, employee)
    flow = flow_service.get_or_create_default(db)

    again = route_expense(expense, employee, flow, db)
    db.commit()

    assert again.id == _task_for(db, expense).id
    assert db.query(ApprovalTask).filter(ApprovalTask.expense_id == expense.id).count() == 1


def test_queue_is_ordered_for_approvers_and_empty_for_employees(db, team, make_user):
    admin, manager, employee = team
    colleague = make_user("Colleague", UserRole.EMPLOYEE, manager_id=manager.id)
    _submit(db, employee)
    _submit(db, colleague)

    queue = approval_service.list_queue(_actor(manager), db)
    assert [t.id for t in queue] == sorted(t.id for t in queue)
    assert len(queue) == 2
    assert len(approval_service.list_queue(_actor(admin), db)) == 2
    assert approval_service.list_queue(_actor(employee), db) == []


def test_employee_cannot_decide(db, team):
    _, _, employee = team
    expense = _submit(db, employee)
    task = _task_for(db, expense)

    with pytest.raises(ForbiddenError):
        approval_service.decide(_actor(employee), task.id, "approved", None, db)
    assert _task_for(db, expense) is not None


def test_unknown_task_is_not_found(db, team):
    _, manager, _ = team
    with pytest.raises(NotFoundError):
        approval_service.decide(_actor(manager), 12345, "approved", None, db)


def test_task_with_vanished_expense_is_not_found(db, team):
    _, manager, employee = team
    expense = _submit(db, employee)
    task_id = _task_for(db, expense).id

    db.query(ExpenseTimelineEvent).filter(ExpenseTimelineEvent.expense_id == expense.id).delete()
    db.query(Expense).filter(Expense.id == expense.id).delete()
    db.commit()

    with pytest.raises(NotFoundError):
        approval_service.decide(_actor(manager), task_id, "approved", None, db)
    assert db.get(ApprovalTask, task_id) is not None


def test_queue_and_decide_endpoints(client, db, team, auth_headers):
    _, manager, employee = team
    expense = _submit(db, employee)
    task_id = _task_for(db, expense).id

    response = client.get("/api/approvals/queue", headers=auth_headers(employee))
    assert response.status_code == 200
    assert response.json() == []

    response = client.get("/api/approvals/queue", headers=auth_headers(manager))
    assert [t["id"] for t in response.json()] == [task_id]
    assert response.json()[0]["owner_name"] == "Sarah Employee"

    response = client.post(
        f"/api/approvals/{task_id}/decide",
        json={"decision": "approved", "comment": "ok"},
        headers=auth_headers(employee)
    )
    assert response.status_code == 403

    response = client.post(
        f"/api/approvals/{task_id}/decide",
        json={"decision": "approved", "comment": "ok"},
        headers=auth_headers(manager)
    )
    assert response.status_code == 200
    assert response.json() == {"ok": True, "expense_id": expense.id, "status": "approved"}

    response = client.post(
        f"/api/approvals/{task_id}/decide",
        json={"decision": "rejected"},
        headers=auth_headers(manager)
    )
    assert response.status_code == 404

    detail = client.get(f"/api/expenses/{expense.id}", headers=auth_headers(employee)).json()
    assert detail["status"] == "approved"
    assert [e["decision"] for e in detail["timeline"]] == ["submitted", "approved"]


def test_decide_endpoint_rejects_unknown_decision(client, db, team, auth_headers):
    _, manager, employee = team
    expense = _submit(db, employee)
    response = client.post(
        f"/api/approvals/{_task_for(db, expense).id}/decide",
        json={"decision": "maybe"},
        headers=auth_headers(manager)
    )
    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Invalid request"
    assert body["details"][0]["loc"] == ["body", "decision"]
