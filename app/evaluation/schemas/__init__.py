from .experiment import (
	Experiment,
	ExperimentPage,
	ExperimentWithResponses,
	GenerateResponse,
	ResponseRecord,
	ResponseRecordCreate,
)
from .metrics import GENERATION_FAILED, MetricDetail, QualityMetrics
from .prompt import GenerateRequest, ParameterPoint

__all__ = [
	"Experiment",
	"ExperimentPage",
	"ExperimentWithResponses",
	"GenerateResponse",
	"ResponseRecord",
	"ResponseRecordCreate",
	"GENERATION_FAILED",
	"MetricDetail",
	"QualityMetrics",
	"GenerateRequest",
	"ParameterPoint",
]
