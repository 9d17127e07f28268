# hrms/db/models/team.py
from sqlalchemy import Column, String, Text, ForeignKey, Index, UniqueConstraint

from hrms.db.models.base import Base, TimestampMixin, UUIDMixin


class Team(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "teams"

    organisation_id = Column(String(36), ForeignKey("organisations.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("name", "organisation_id", name="unique_team_name_org"),
        Index("idx_teams_org", "organisation_id"),
    )

    def __repr__(self):
        return f"<Team name={self.name} org_id={self.organisation_id}>"
