"""
erp/store.py

Entity store: the persistence boundary for users, projects, tasks, attendance,
budget items, milestones and reports.

Rules:
- Every write is one transaction: add -> commit, rollback on SQLAlchemyError,
  surfaced as StoreFailure (never retried).
- Domain invariants are checked here before anything is added to the session,
  so a ValidationFailure/NotFound leaves no side effects.
- Lookups by id return None for benign absence; updates by id raise NotFound.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .budget import BudgetSummary, money, summarize, to_decimal
from .errors import NotFound, StoreFailure, ValidationFailure
from .extensions import db
from .models import (
    ATTENDANCE_STATUSES,
    BUDGET_CATEGORIES,
    BUDGET_ITEM_TYPES,
    MILESTONE_STATUSES,
    PROJECT_STATUSES,
    REPORT_TYPES,
    ROLES,
    SQL_INT_MAX,
    TASK_PRIORITIES,
    TASK_STATUSES,
    Attendance,
    BudgetItem,
    Milestone,
    Project,
    Report,
    Role,
    Task,
    User,
)

logger = logging.getLogger(__name__)


def _require_choice(field: str, value: str, allowed: Iterable[str]) -> None:
    if value not in allowed:
        raise ValidationFailure(errors={field: ["Not a valid choice."]})


def _require_non_negative(field: str, value: Decimal) -> Decimal:
    value = to_decimal(value)
    if not value.is_finite() or value < 0:
        raise ValidationFailure(errors={field: ["Must be zero or greater."]})
    return money(value)


def _check_date_range(start: Optional[date], end: Optional[date]) -> None:
    if start and end and start > end:
        raise ValidationFailure(errors={"startDate": ["Must not be after endDate."]})


class EntityStore:
    """CRUD over the seven entity types against one SQLAlchemy session."""

    def __init__(self, session):
        self.session = session

    # -----------------------------------------------------------------
    # Transaction helpers
    # -----------------------------------------------------------------
    def _save(self, instance, conflict: Optional[ValidationFailure] = None):
        self.session.add(instance)
        self._commit(conflict)
        return instance

    def _commit(self, conflict: Optional[ValidationFailure] = None) -> None:
        """
        Commit or roll back.

        A unique-constraint violation raises `conflict` when one is given
        (the row exists, a client error); every other failure is StoreFailure.
        """
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            if conflict is not None and isinstance(exc, IntegrityError):
                logger.info("Commit rejected: %s", conflict.message)
                raise conflict from exc
            logger.exception("Store commit failed")
            raise StoreFailure() from exc

    def _get(self, model, ident: int):
        """Row by primary key; ids no INTEGER column can hold are simply absent."""
        if ident is None or abs(ident) > SQL_INT_MAX:
            return None
        return self.session.get(model, ident)

    def _require_project(self, project_id: int) -> Project:
        project = self.get_project(project_id)
        if project is None:
            raise NotFound("Project not found")
        return project

    def _require_user_ref(self, field: str, user_id: Optional[int]) -> None:
        """Body-referenced user ids must exist (None is allowed)."""
        if user_id is not None and self.get_user(user_id) is None:
            raise ValidationFailure(errors={field: ["Unknown user."]})

    # -----------------------------------------------------------------
    # Users
    # -----------------------------------------------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(User, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return User.query.filter_by(username=username).first()

    def list_users(self) -> List[User]:
        return User.query.order_by(User.id.asc()).all()

    def create_user(self, *, username: str, password: str, name: str, role: str = Role.EMPLOYEE.value) -> User:
        _require_choice("role", role, ROLES)
        if self.get_user_by_username(username) is not None:
            raise ValidationFailure("Username already exists", errors={"username": ["Username already exists."]})

        user = User(username=username, name=name, role=role)
        user.set_password(password)
        self._save(user)
        logger.info("Created user %s (%s)", user.username, user.role)
        return user

    # -----------------------------------------------------------------
    # Projects
    # -----------------------------------------------------------------
    def list_projects(self) -> List[Project]:
        return Project.query.all()

    def get_project(self, project_id: int) -> Optional[Project]:
        return self._get(Project, project_id)

    def create_project(
        self,
        *,
        name: str,
        description: str,
        budget: Decimal = Decimal("0.00"),
        status: str = "planned",
        manager_id: Optional[int] = None,
    ) -> Project:
        budget = _require_non_negative("budget", budget)
        _require_choice("status", status, PROJECT_STATUSES)
        self._require_user_ref("managerId", manager_id)

        project = Project(
            name=name,
            description=description,
            budget=budget,
            status=status,
            manager_id=manager_id,
        )
        self._save(project)
        logger.info("Created project %s (%s)", project.id, project.name)
        return project

    # -----------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------
    def list_tasks(self, project_id: int) -> List[Task]:
        return Task.query.filter_by(project_id=project_id).order_by(Task.id.asc()).all()

    def create_task(
        self,
        *,
        project_id: int,
        title: str,
        description: str,
        assignee_id: Optional[int] = None,
        status: str = "todo",
        due_date: Optional[date] = None,
        priority: str = "medium",
    ) -> Task:
        self._require_project(project_id)
        _require_choice("status", status, TASK_STATUSES)
        _require_choice("priority", priority, TASK_PRIORITIES)
        self._require_user_ref("assigneeId", assignee_id)

        task = Task(
            project_id=project_id,
            title=title,
            description=description,
            assignee_id=assignee_id,
            status=status,
            due_date=due_date,
            priority=priority,
        )
        return self._save(task)

    def update_task_status(self, task_id: int, status: str) -> Task:
        """Unconditional overwrite; any status may follow any other."""
        _require_choice("status", status, TASK_STATUSES)
        task = self._get(Task, task_id)
        if task is None:
            raise NotFound("Task not found")

        task.status = status
        self._commit()
        return task

    # -----------------------------------------------------------------
    # Attendance
    # -----------------------------------------------------------------
    def get_attendance(self, user_id: int, day: date) -> Optional[Attendance]:
        return Attendance.query.filter_by(user_id=user_id, date=day).first()

    def mark_attendance(self, *, user_id: int, day: date, status: str) -> Attendance:
        """Insert today's mark. A second mark for the same day is rejected."""
        _require_choice("status", status, ATTENDANCE_STATUSES)
        already_marked = ValidationFailure(
            "Attendance already marked for this day",
            errors={"date": ["Attendance already marked for this day."]},
        )
        if self.get_attendance(user_id, day) is not None:
            raise already_marked

        # a concurrent first mark can still win the race; uq_attendance_user_date decides
        return self._save(Attendance(user_id=user_id, date=day, status=status), conflict=already_marked)

    # -----------------------------------------------------------------
    # Budget
    # -----------------------------------------------------------------
    def create_budget_item(
        self,
        *,
        project_id: int,
        created_by: Optional[int],
        description: str,
        amount: Decimal,
        type: str,
        category: str,
        date: date,
    ) -> BudgetItem:
        self._require_project(project_id)
        amount = _require_non_negative("amount", amount)
        _require_choice("type", type, BUDGET_ITEM_TYPES)
        _require_choice("category", category, BUDGET_CATEGORIES)

        item = BudgetItem(
            project_id=project_id,
            created_by=created_by,
            description=description,
            amount=amount,
            type=type,
            category=category,
            date=date,
        )
        self._save(item)
        logger.info("Project %s: %s %s (%s)", project_id, item.type, item.amount, item.category)
        return item

    def list_budget_items(
        self,
        project_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[BudgetItem]:
        """
        Budget items of a project, optionally within [start, end] (inclusive).

        A single bound is applied on its own.
        """
        _check_date_range(start, end)

        q = BudgetItem.query.filter(BudgetItem.project_id == project_id)
        if start is not None:
            q = q.filter(BudgetItem.date >= start)
        if end is not None:
            q = q.filter(BudgetItem.date <= end)

        return q.order_by(BudgetItem.date.asc(), BudgetItem.id.asc()).all()

    def budget_summary(
        self,
        project_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> BudgetSummary:
        return summarize(self.list_budget_items(project_id, start, end))

    # -----------------------------------------------------------------
    # Milestones
    # -----------------------------------------------------------------
    @staticmethod
    def _completion_date_for(status: str, completion_date: Optional[date]) -> Optional[date]:
        """completion_date is kept only for completed milestones."""
        if status == "completed":
            return completion_date or date.today()
        if completion_date is not None:
            raise ValidationFailure(
                errors={"completionDate": ["Only completed milestones have a completion date."]}
            )
        return None

    def list_milestones(self, project_id: int) -> List[Milestone]:
        return (
            Milestone.query.filter_by(project_id=project_id)
            .order_by(Milestone.due_date.asc(), Milestone.id.asc())
            .all()
        )

    def create_milestone(
        self,
        *,
        project_id: int,
        title: str,
        description: str,
        due_date: date,
        status: str = "pending",
        completion_date: Optional[date] = None,
    ) -> Milestone:
        self._require_project(project_id)
        _require_choice("status", status, MILESTONE_STATUSES)

        milestone = Milestone(
            project_id=project_id,
            title=title,
            description=description,
            due_date=due_date,
            status=status,
            completion_date=self._completion_date_for(status, completion_date),
        )
        return self._save(milestone)

    def update_milestone_status(
        self,
        milestone_id: int,
        status: str,
        completion_date: Optional[date] = None,
    ) -> Milestone:
        _require_choice("status", status, MILESTONE_STATUSES)
        completion_date = self._completion_date_for(status, completion_date)

        milestone = self._get(Milestone, milestone_id)
        if milestone is None:
            raise NotFound("Milestone not found")

        milestone.status = status
        milestone.completion_date = completion_date
        self._commit()
        return milestone

    # -----------------------------------------------------------------
    # Reports
    # -----------------------------------------------------------------
    def list_reports(self, project_id: int) -> List[Report]:
        return (
            Report.query.filter_by(project_id=project_id)
            .order_by(Report.created_at.desc(), Report.id.desc())
            .all()
        )

    def get_report(self, report_id: int) -> Optional[Report]:
        return self._get(Report, report_id)

    def create_report(
        self,
        *,
        project_id: int,
        created_by: Optional[int],
        title: str,
        content: str,
        type: str,
        attachments: Optional[List[str]] = None,
    ) -> Report:
        self._require_project(project_id)
        _require_choice("type", type, REPORT_TYPES)

        report = Report(
            project_id=project_id,
            created_by=created_by,
            title=title,
            content=content,
            type=type,
            attachments=list(attachments or []),
        )
        self._save(report)
        logger.info("Project %s: report %s (%s)", project_id, report.id, report.type)
        return report


def entity_store() -> EntityStore:
    """Store bound to the request-scoped Flask-SQLAlchemy session."""
    return EntityStore(db.session)
