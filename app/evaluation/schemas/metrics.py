from pydantic import BaseModel, Field


GENERATION_FAILED = "Generation failed"


class MetricDetail(BaseModel):
    """Score for a single quality dimension plus a human readable explanation."""
    score: int = Field(ge=0, le=100)
    explanation: str

    class Config:
        frozen = True


class QualityMetrics(BaseModel):
    """Full quality report for one completion; overall_score is derived by the aggregator."""
    coherence: MetricDetail
    lexical_diversity: MetricDetail = Field(alias="lexicalDiversity")
    completeness: MetricDetail
    readability: MetricDetail
    length_appropriate: MetricDetail = Field(alias="lengthAppropriate")
    overall_score: int = Field(alias="overallScore", ge=0, le=100)

    class Config:
        frozen = True
        populate_by_name = True

    @classmethod
    def failed(cls) -> "QualityMetrics":
        """All-zero report used when a completion could not be generated."""
        detail = MetricDetail(score=0, explanation=GENERATION_FAILED)
        return cls(
            coherence=detail,
            lexical_diversity=detail,
            completeness=detail,
            readability=detail,
            length_appropriate=detail,
            overall_score=0,
        )

    @property
    def generation_failed(self) -> bool:
        return self.coherence.explanation == GENERATION_FAILED and self.overall_score == 0
