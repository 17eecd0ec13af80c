"""POST /v1/assessment and /v1/strategy - financial health assessment endpoints"""

import logging
import time

from fastapi import APIRouter, Depends, HTTPException

from cashpilot_insights.api.dependencies import get_request_id
from cashpilot_insights.api.v1.schemas import AssessmentRequest, AssessmentResponse, StrategyResponse
from cashpilot_insights.domain.assessment import assess_financial_health, check_snapshot_size
from cashpilot_insights.domain.exceptions import SnapshotTooLargeError
from cashpilot_insights.domain.kpis import build_prompt_context
from cashpilot_insights.domain.profiler import profile_data_sources
from cashpilot_insights.domain.strategy import select_insight_strategy
from cashpilot_insights.infrastructure.observability.logging import log_assessment
from cashpilot_insights.infrastructure.observability.metrics import (
    record_assessment,
    record_strategy,
    rejected_snapshot_counter,
)

router = APIRouter()


@router.post("/assessment", response_model=AssessmentResponse)
def create_assessment(
    request_body: AssessmentRequest,
    request_id: str = Depends(get_request_id),
):
    """
    Assess financial health for a transaction snapshot.

    Flow:
    1. Map request rows to domain transactions/orders
    2. Run the assessment pipeline (profiles, adapter, score, trends, risk, strategy)
    3. Record metrics and logs
    4. Return the bundle plus the numeric prompt context
    """
    start_time = time.time()

    try:
        transactions = request_body.domain_transactions()
        check_snapshot_size(transactions)

        assessment = assess_financial_health(
            transactions,
            request_body.domain_orders(),
            as_of=request_body.as_of,
        )
        prompt_context = build_prompt_context(transactions)

        duration_ms = (time.time() - start_time) * 1000
        record_assessment(
            assessment.health_score.grade,
            assessment.risk.level,
            assessment.strategy.confidence_level,
            len(transactions),
        )
        log_assessment(
            request_id,
            len(transactions),
            assessment.data_source,
            assessment.health_score.overall,
            assessment.health_score.grade,
            assessment.risk.level,
            assessment.strategy.confidence_level,
            duration_ms,
        )

        return AssessmentResponse(request_id=request_id, assessment=assessment, prompt_context=prompt_context)

    except SnapshotTooLargeError as e:
        rejected_snapshot_counter.labels(reason="too_large").inc()
        logging.warning(f"Snapshot rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=413, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/strategy", response_model=StrategyResponse)
def create_strategy(
    request_body: AssessmentRequest,
    request_id: str = Depends(get_request_id),
):
    """Profile the snapshot's sources and select the insight strategy only"""
    try:
        transactions = request_body.domain_transactions()
        check_snapshot_size(transactions)

        profiles = profile_data_sources(transactions, as_of=request_body.as_of)
        strategy = select_insight_strategy(profiles)
        record_strategy(strategy.confidence_level)

        return StrategyResponse(request_id=request_id, profiles=profiles, strategy=strategy)

    except SnapshotTooLargeError as e:
        rejected_snapshot_counter.labels(reason="too_large").inc()
        logging.warning(f"Snapshot rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=413, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
