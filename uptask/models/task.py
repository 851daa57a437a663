"""
UpTask API
Task domain models.

Models:
    - Task: unit of work inside a Project, with status and note references
    - TaskStatusChange: one append-only audit row per status update

Architecture chain: Project → Task → Note
"""

from datetime import datetime, timezone

from uptask.models import db


# ── Constants ────────────────────────────────────────────────────────────────

STATUS_PENDING = "pending"
STATUS_ON_HOLD = "onHold"
STATUS_IN_PROGRESS = "inProgress"
STATUS_UNDER_REVIEW = "underReview"
STATUS_COMPLETED = "completed"

TASK_STATUSES = (
    STATUS_PENDING,
    STATUS_ON_HOLD,
    STATUS_IN_PROGRESS,
    STATUS_UNDER_REVIEW,
    STATUS_COMPLETED,
)


# ═══════════════════════════════════════════════════════════════════════════
#  TASK
# ═══════════════════════════════════════════════════════════════════════════

class Task(db.Model):
    """A task belonging to exactly one project.

    ``completed_by`` is the status history and is only ever appended to.
    ``note_ids`` mirrors ``Note.task_id`` in creation order.
    """

    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    project_id = db.Column(db.Integer, db.ForeignKey("projects.id"), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    note_ids = db.Column(db.JSON, nullable=False, default=list)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    project = db.relationship("Project", foreign_keys=[project_id])
    completed_by = db.relationship(
        "TaskStatusChange",
        order_by="TaskStatusChange.id",
        cascade="all, delete-orphan",
        lazy="select",
    )

    def to_dict(self, *, notes=None, include_project=False) -> dict:
        """Serialize task fields for API responses.

        Args:
            notes: Optional list of serialized notes replacing the id list.
            include_project: Embed a project summary instead of the bare id.
        """
        project = self.project_id
        if include_project and self.project is not None:
            project = {
                "id": self.project.id,
                "projectName": self.project.project_name,
                "clientName": self.project.client_name,
                "description": self.project.description,
                "manager": self.project.manager_id,
            }
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "project": project,
            "status": self.status,
            "completedBy": [entry.to_dict() for entry in self.completed_by],
            "notes": notes if notes is not None else list(self.note_ids or []),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.name} [{self.status}]>"


class TaskStatusChange(db.Model):
    """Who moved a task to which status. Rows are never updated."""

    __tablename__ = "task_status_changes"

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(
        db.Integer, db.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user = db.relationship("User", foreign_keys=[user_id])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user": self.user.to_summary() if self.user else None,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
