from typing import List

from fastapi import APIRouter, Depends, Query, status

from tourbook.api import get_current_principal, get_review_service, require_admin
from tourbook.core.security import Principal
from tourbook.models.domain import ReviewKind
from tourbook.models.schemas import MessageResponse, ReviewCreateRequest, ReviewEnvelope, ReviewSchema
from tourbook.services.review_service import ReviewService, ReviewView

router = APIRouter()


def _schema(view: ReviewView) -> ReviewSchema:
    return ReviewSchema.from_domain(
        view.review, reviewer_name=view.reviewer_name, target_name=view.target_name
    )


@router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
def submit_review(
    request: ReviewCreateRequest,
    principal: Principal = Depends(get_current_principal),
    service: ReviewService = Depends(get_review_service),
) -> ReviewEnvelope:
    review = service.submit(principal, request)
    message = "Review submitted" if review.approved else "Review submitted, pending approval"
    return ReviewEnvelope(message=message, review=_schema(service.view(review)))


@router.get("/all", response_model=List[ReviewSchema])
def latest_reviews(
    limit: int = Query(default=6, ge=1, le=100),
    service: ReviewService = Depends(get_review_service),
) -> List[ReviewSchema]:
    return [_schema(v) for v in service.list_public(kind=ReviewKind.service, limit=limit)]


@router.get("/service/{provider_id}", response_model=List[ReviewSchema])
def provider_reviews(
    provider_id: str, service: ReviewService = Depends(get_review_service)
) -> List[ReviewSchema]:
    return [_schema(v) for v in service.list_for_provider(provider_id)]


@router.get("/tourist/{tourist_id}", response_model=List[ReviewSchema])
def tourist_reviews(
    tourist_id: str, service: ReviewService = Depends(get_review_service)
) -> List[ReviewSchema]:
    return [_schema(v) for v in service.list_for_tourist(tourist_id)]


@router.get("/product/{name}", response_model=List[ReviewSchema])
def product_reviews(name: str, service: ReviewService = Depends(get_review_service)) -> List[ReviewSchema]:
    return [_schema(v) for v in service.list_for_product(name)]


@router.get("/admin", response_model=List[ReviewSchema], dependencies=[Depends(require_admin)])
def all_reviews(service: ReviewService = Depends(get_review_service)) -> List[ReviewSchema]:
    return [_schema(v) for v in service.list_admin()]


@router.put("/admin/{review_id}/approve", response_model=ReviewEnvelope, dependencies=[Depends(require_admin)])
def approve_review(
    review_id: str, service: ReviewService = Depends(get_review_service)
) -> ReviewEnvelope:
    review = service.approve(review_id)
    return ReviewEnvelope(message="Review approved", review=_schema(service.view(review)))


@router.delete("/admin/{review_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_review(
    review_id: str, service: ReviewService = Depends(get_review_service)
) -> MessageResponse:
    service.delete(review_id)
    return MessageResponse(message="Review deleted")
