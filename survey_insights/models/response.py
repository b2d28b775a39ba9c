"""SurveyResponse model for storing one respondent's submission.

Each row carries the raw answer set plus the derived signal (traits,
demographics, stereotypes, product recommendations, market segment) that the
statistics engine aggregates. The JSON columns are written by several
generations of the survey wizard and are not guaranteed to share a shape.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    Index,
    String,
    Text,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from survey_insights.models.database import Base


class SurveyResponse(Base):
    """Model for storing survey responses.

    Attributes:
        id: Primary key
        survey_id: Foreign key to surveys table
        company_id: Owning tenant (denormalized for company-wide queries)
        respondent_id: Opaque respondent identifier
        respondent_email: Optional respondent email
        responses: Answer set (list of {questionId, answer} or an object)
        ip_address: Client IP at submission time
        user_agent: Client user agent string
        source: Where the response came from (direct, email, social)
        start_time: When the respondent opened the survey
        complete_time: When the respondent finished
        traits: Trait list, or legacy {personality: "..."} object
        demographics: Demographic and business-context attributes
        gender_stereotypes: Optional stereotype association lists
        product_recommendations: Optional product recommendation object
        market_segment: Optional market segment label
        completed: Whether the response was completed
        satisfaction_score: Optional satisfaction rating
        completion_time_seconds: Time taken to complete in seconds
        is_anonymized: Whether PII has been stripped from the row
        created_at: When the response was stored
    """

    __tablename__ = "survey_responses"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    survey_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to surveys table"
    )
    company_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Owning company (tenant)"
    )

    # Respondent
    respondent_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Opaque respondent identifier"
    )
    respondent_email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Respondent email, if collected"
    )
    ip_address: Mapped[Optional[str]] = mapped_column(
        String(45),
        nullable=True,
        comment="Client IP address"
    )
    user_agent: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Client user agent"
    )
    source: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        comment="Traffic source (direct, email, social)"
    )

    # Answers and derived signal
    responses: Mapped[Any] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Raw answer set"
    )
    traits: Mapped[Any] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Trait scores or legacy personality description"
    )
    demographics: Mapped[Any] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Demographic and business-context attributes"
    )
    gender_stereotypes: Mapped[Optional[Any]] = mapped_column(
        JSON,
        nullable=True,
        comment="Stereotype association lists"
    )
    product_recommendations: Mapped[Optional[Any]] = mapped_column(
        JSON,
        nullable=True,
        comment="Product recommendation categories and ranking"
    )
    market_segment: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="Market segment label"
    )

    # Outcome
    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether the respondent finished the survey"
    )
    satisfaction_score: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Satisfaction rating"
    )
    completion_time_seconds: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Time taken to complete in seconds"
    )
    is_anonymized: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Whether PII has been stripped"
    )

    # Timestamps
    start_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the respondent opened the survey"
    )
    complete_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the respondent finished"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the response was stored"
    )

    survey: Mapped["Survey"] = relationship(
        "Survey",
        back_populates="responses",
    )

    __table_args__ = (
        # Company dashboards scan all responses for a tenant by date
        Index("idx_company_created", "company_id", "created_at"),
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the row as a camelCase dict.

        This is the row shape handed to the statistics engine, the CSV
        exporter and the anonymizer.
        """
        return {
            "id": self.id,
            "surveyId": self.survey_id,
            "companyId": self.company_id,
            "respondentId": self.respondent_id,
            "respondentEmail": self.respondent_email,
            "responses": self.responses,
            "ipAddress": self.ip_address,
            "userAgent": self.user_agent,
            "source": self.source,
            "startTime": self.start_time,
            "completeTime": self.complete_time,
            "traits": self.traits,
            "demographics": self.demographics,
            "genderStereotypes": self.gender_stereotypes,
            "productRecommendations": self.product_recommendations,
            "marketSegment": self.market_segment,
            "completed": self.completed,
            "satisfactionScore": self.satisfaction_score,
            "completionTimeSeconds": self.completion_time_seconds,
            "isAnonymized": self.is_anonymized,
            "createdAt": self.created_at,
        }

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<SurveyResponse(id={self.id}, "
            f"survey_id={self.survey_id}, "
            f"completed={self.completed})>"
        )
