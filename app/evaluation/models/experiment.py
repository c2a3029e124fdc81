from sqlalchemy import Column, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from app.database import Base, UTCDateTime, utcnow


class ExperimentRow(Base):
    """SQLAlchemy model for one prompt submission."""

    __tablename__ = "experiments"

    id = Column(String, primary_key=True)
    prompt = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False, index=True)

    responses = relationship(
        "ResponseRow",
        back_populates="experiment",
        cascade="all, delete-orphan",
        order_by="ResponseRow.position",
    )


class ResponseRow(Base):
    """SQLAlchemy model for a single generated variation and its quality metrics."""

    __tablename__ = "responses"

    id = Column(String, primary_key=True)
    experiment_id = Column(String, ForeignKey("experiments.id", ondelete="CASCADE"), nullable=False, index=True)
    # Grid index, keeps responses in generation order
    position = Column(Integer, nullable=False, default=0)
    temperature = Column(Float, nullable=False, index=True)
    top_p = Column(Float, nullable=False, index=True)
    content = Column(Text, nullable=False)

    # QualityMetrics in its camelCase JSON shape
    metrics = Column(JSON, nullable=False)

    created_at = Column(UTCDateTime, default=utcnow, nullable=False)

    experiment = relationship("ExperimentRow", back_populates="responses")
