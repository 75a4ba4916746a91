"""Pipeline orchestration: concurrent analyzers and verdict aggregation.

- VerificationPipeline: runs the analyzer branches and the feedback hooks
- ResultAggregator: merges issues into confidence, risk and recommendations
"""

from verity_system.pipeline.result_aggregator import ResultAggregator
from verity_system.pipeline.verification_pipeline import VerificationPipeline

__all__ = ["ResultAggregator", "VerificationPipeline"]
