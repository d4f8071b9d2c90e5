"""
erp/forms.py

WTForms definitions for every JSON body the API accepts.

Flask-WTF forms are bound to the parsed JSON object (not request.form), with
CSRF disabled: the API authenticates with the session cookie and is consumed
by a same-site client. Field names are the camelCase wire names.

validated(FormClass) is the one entry point used by the blueprints: it parses
the body, validates it and raises ValidationFailure with WTForms' error dict.
"""

from __future__ import annotations

from decimal import Decimal

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import DateField, DecimalField, Field, IntegerField, PasswordField, SelectField, StringField
from wtforms.validators import DataRequired, EqualTo, InputRequired, Length, Optional, ValidationError

from .errors import ValidationFailure
from .models import (
    ATTENDANCE_STATUSES,
    BUDGET_CATEGORIES,
    BUDGET_ITEM_TYPES,
    MILESTONE_STATUSES,
    PROJECT_STATUSES,
    REPORT_TYPES,
    ROLES,
    TASK_PRIORITIES,
    TASK_STATUSES,
    Role,
)
from .utils import parse_iso_date

# Numeric(10, 2)
MAX_MONEY = Decimal("99999999.99")


def _choices(values):
    return [(v, v) for v in values]


# ---------------------------------------------------------------------
# Fields & validators
# ---------------------------------------------------------------------
class IsoDateField(DateField):
    """Accepts YYYY-MM-DD or a full ISO timestamp (only the date part is kept)."""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        raw = str(valuelist[0]).strip()
        if not raw:
            self.data = None
            return
        try:
            self.data = parse_iso_date(raw)
        except ValueError:
            self.data = None
            raise ValueError(self.gettext("Not a valid date value."))


class StringListField(Field):
    """A JSON array of strings."""

    def __init__(self, label=None, validators=None, **kwargs):
        kwargs.setdefault("default", list)
        super().__init__(label, validators, **kwargs)

    def process_formdata(self, valuelist):
        if valuelist:
            self.data = [str(v) for v in valuelist]


class Money:
    """Non-negative, finite, at most two decimal places, fits Numeric(10, 2)."""

    def __call__(self, form, field):
        value = field.data
        if value is None:
            return
        if not value.is_finite():
            raise ValidationError("Not a valid decimal value.")
        if value < 0:
            raise ValidationError("Must be zero or greater.")
        if value > MAX_MONEY:
            raise ValidationError(f"Must not exceed {MAX_MONEY}.")
        if value != value.quantize(Decimal("0.01")):
            raise ValidationError("At most two decimal places.")


# ---------------------------------------------------------------------
# Binding
# ---------------------------------------------------------------------
class ApiForm(FlaskForm):
    class Meta:
        csrf = False


def _formdata(payload: dict) -> MultiDict:
    """JSON object -> MultiDict of strings. null values count as missing."""
    data = MultiDict()
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for item in value:
                if item is not None:
                    data.add(key, str(item))
            continue
        data.add(key, str(value))
    return data


def validated(form_cls):
    """Bind form_cls to the JSON body and validate it, or raise ValidationFailure."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailure("Request body must be a JSON object")

    form = form_cls(formdata=_formdata(payload))
    if not form.validate():
        raise ValidationFailure(errors=form.errors)
    return form


# ---------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------
class RegisterForm(ApiForm):
    username = StringField(validators=[DataRequired(), Length(max=80)])
    password = PasswordField(validators=[DataRequired()])
    confirmPassword = PasswordField(
        validators=[DataRequired(), EqualTo("password", message="Passwords don't match")]
    )
    name = StringField(validators=[DataRequired(), Length(max=120)])
    role = SelectField(choices=_choices(ROLES), default=Role.EMPLOYEE.value)


class LoginForm(ApiForm):
    username = StringField(validators=[DataRequired()])
    password = PasswordField(validators=[DataRequired()])


# ---------------------------------------------------------------------
# Projects & tasks
# ---------------------------------------------------------------------
class ProjectForm(ApiForm):
    name = StringField(validators=[DataRequired(), Length(max=255)])
    description = StringField(validators=[DataRequired()])
    budget = DecimalField(default=Decimal("0.00"), validators=[Optional(), Money()])
    status = SelectField(choices=_choices(PROJECT_STATUSES), default="planned")
    managerId = IntegerField(validators=[Optional()])


class TaskForm(ApiForm):
    title = StringField(validators=[DataRequired(), Length(max=255)])
    description = StringField(validators=[DataRequired()])
    assigneeId = IntegerField(validators=[Optional()])
    status = SelectField(choices=_choices(TASK_STATUSES), default="todo")
    dueDate = IsoDateField(validators=[Optional()])
    priority = SelectField(choices=_choices(TASK_PRIORITIES), default="medium")


class TaskStatusForm(ApiForm):
    status = SelectField(choices=_choices(TASK_STATUSES), validators=[InputRequired()])


# ---------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------
class AttendanceForm(ApiForm):
    status = SelectField(choices=_choices(ATTENDANCE_STATUSES), validators=[InputRequired()])


# ---------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------
class BudgetItemForm(ApiForm):
    description = StringField(validators=[DataRequired()])
    amount = DecimalField(validators=[InputRequired(), Money()])
    type = SelectField(choices=_choices(BUDGET_ITEM_TYPES), validators=[InputRequired()])
    category = SelectField(choices=_choices(BUDGET_CATEGORIES), validators=[InputRequired()])
    date = IsoDateField(validators=[InputRequired()])


# ---------------------------------------------------------------------
# Milestones & reports
# ---------------------------------------------------------------------
class MilestoneForm(ApiForm):
    title = StringField(validators=[DataRequired(), Length(max=255)])
    description = StringField(validators=[DataRequired()])
    dueDate = IsoDateField(validators=[InputRequired()])
    status = SelectField(choices=_choices(MILESTONE_STATUSES), default="pending")
    completionDate = IsoDateField(validators=[Optional()])


class MilestoneStatusForm(ApiForm):
    status = SelectField(choices=_choices(MILESTONE_STATUSES), validators=[InputRequired()])
    completionDate = IsoDateField(validators=[Optional()])


class ReportForm(ApiForm):
    title = StringField(validators=[DataRequired(), Length(max=255)])
    content = StringField(validators=[DataRequired()])
    type = SelectField(choices=_choices(REPORT_TYPES), validators=[InputRequired()])
    attachments = StringListField()
