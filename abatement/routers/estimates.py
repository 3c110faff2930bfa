from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from .. import schemas
from ..database import get_db
from ..estimate_calculator import EstimateCalculator, InvalidSurveyError
from ..rate_tables import SqlAlchemyRateTableProvider

router = APIRouter(prefix="/estimates", tags=["estimates"])


@router.post("/calculate", response_model=schemas.EstimateResult)
def calculate_estimate(request: schemas.CalculateEstimateRequest, db: Session = Depends(get_db)):
    """
    Price a site survey with the survey's organization rate tables.
    Nothing is stored — the caller decides what to do with the estimate.
    """
    calculator = EstimateCalculator(
        request.survey.organization_id,
        SqlAlchemyRateTableProvider(db),
    )
    try:
        return calculator.calculate_from_survey(request.survey, request.options)
    except InvalidSurveyError as e:
        raise HTTPException(status_code=400, detail=str(e))
