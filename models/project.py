"""Project model and its append-only change ledger."""

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from models.base import Base, ModifyModel


class Project(ModifyModel, Base):
    """A project moving through the stage pipeline.

    Sprint, UAT release and go-live dates are derived by the schedule
    automaton; callers never write them directly.
    """

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(500), nullable=False)
    description = Column(Text)
    manager_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), index=True)
    priority = Column(String(32))
    stage = Column(String(64), nullable=False, default="BRS_Discussion")
    start_date = Column(Date)
    planned_end_date = Column(Date)
    sprint_start_date = Column(Date)
    sprint_end_date = Column(Date)
    uat_release_date = Column(Date)
    go_live_date = Column(Date)
    on_track_status = Column(String(32), nullable=False, default="On Track")
    man_days = Column(Integer)
    project_cost = Column(Float)
    remarks = Column(Text)

    change_logs = relationship(
        "ProjectChangeLog",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectChangeLog.id",
    )


class ProjectChangeLog(Base):
    """One changed field of one project edit. Rows are never updated."""

    __tablename__ = "project_change_logs"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    changed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    actor_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"))
    field = Column(String(64), nullable=False)
    old_value = Column(Text)
    new_value = Column(Text)

    project = relationship("Project", back_populates="change_logs")
