"""Project domain model: manager, team and the ordered task list."""

from datetime import datetime, timezone

from uptask.models import db
from uptask.models.auth import User


project_team = db.Table(
    "project_team",
    db.Column("project_id", db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Project(db.Model):
    """A client project owned by a single manager.

    ``task_ids`` is the project's ordered list of task references. It is kept
    in step with ``Task.project_id`` by the service layer; the database does
    not enforce it.
    """

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    project_name = db.Column(db.String(200), nullable=False)
    client_name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    manager_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    task_ids = db.Column(db.JSON, nullable=False, default=list)

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

    manager = db.relationship("User", foreign_keys=[manager_id])
    team = db.relationship("User", secondary=project_team, order_by=User.id, lazy="select")

    @property
    def team_ids(self) -> list[int]:
        return [member.id for member in self.team]

    def to_dict(self, tasks=None) -> dict:
        """Serialize project fields for API responses.

        Args:
            tasks: Optional list of already-serialized tasks. When given it
                   replaces the raw ``tasks`` id list (populated view).
        """
        return {
            "id": self.id,
            "projectName": self.project_name,
            "clientName": self.client_name,
            "description": self.description,
            "manager": self.manager_id,
            "team": self.team_ids,
            "tasks": tasks if tasks is not None else list(self.task_ids or []),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Project {self.id}: {self.project_name}>"
