"""Survey model for the tenant-owned survey definitions.

Only the columns the statistics engine and CSV export read are mapped here;
question content and theming live elsewhere in the platform.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    String,
    Text,
    Integer,
    DateTime,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_insights.models.database import Base


class Survey(Base):
    """A survey belonging to a company (tenant).

    Attributes:
        id: Primary key
        company_id: Owning tenant
        title: Survey title shown in exports
        description: Optional survey description
        industry: Industry label, used as a business-context fallback
        created_at: When the survey was created
        responses: Relationship to collected SurveyResponse rows
    """

    __tablename__ = "surveys"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    company_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Owning company (tenant)"
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Survey title"
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Survey description"
    )
    industry: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Industry label for business-context breakdowns"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the survey was created"
    )

    responses: Mapped[list["SurveyResponse"]] = relationship(
        "SurveyResponse",
        back_populates="survey",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the survey as a camelCase dict, the shape aggregators consume."""
        return {
            "id": self.id,
            "companyId": self.company_id,
            "title": self.title,
            "description": self.description,
            "industry": self.industry,
            "createdAt": self.created_at,
        }

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Survey(id={self.id}, "
            f"company_id={self.company_id}, "
            f"title={self.title!r})>"
        )
