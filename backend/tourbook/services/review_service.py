from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from tourbook.core.errors import AuthorizationError, NotFoundError, ValidationError
from tourbook.core.security import Principal
from tourbook.models.domain import Review, ReviewKind, Role, TargetKind, TargetRef
from tourbook.models.schemas import ReviewCreateRequest
from tourbook.services.catalog import ProductCatalog
from tourbook.services.ids import require_id
from tourbook.storage.repository import Repository, new_id

logger = logging.getLogger(__name__)

# which role may write each kind of review
REVIEWER_ROLES = {
    ReviewKind.service: Role.tourist,
    ReviewKind.product: Role.tourist,
    ReviewKind.tourist: Role.provider,
}


@dataclass
class ReviewView:
    review: Review
    reviewer_name: Optional[str] = None
    target_name: Optional[str] = None


class ReviewService:
    def __init__(self, repository: Repository, catalog: Optional[ProductCatalog] = None):
        self.repository = repository
        self.catalog = catalog or ProductCatalog()

    def submit(self, principal: Principal, request: ReviewCreateRequest) -> Review:
        try:
            kind = ReviewKind(request.review_type)
        except ValueError:
            raise ValidationError('Review type must be "service", "product" or "tourist"')
        if isinstance(request.rating, bool) or not 1 <= request.rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        comment = (request.comment or "").strip()
        if not comment:
            raise ValidationError("Comment is required")

        target = TargetRef(kind.target_kind, request.target_id)
        if target.kind != TargetKind.product:
            require_id(request.target_id, "Service or Tourist")
        if principal.role != REVIEWER_ROLES[kind]:
            raise AuthorizationError("Access denied: Invalid role or review type")
        if self._target_name(target) is None:
            raise NotFoundError(f"Review target not found: {request.target_id}")

        if kind == ReviewKind.tourist:
            booking = self.repository.find_confirmed_booking(
                target.reference, TargetRef(TargetKind.provider, principal.id)
            )
        else:
            booking = self.repository.find_confirmed_booking(principal.id, target)
        if booking is None:
            raise AuthorizationError(f"No confirmed booking found for {request.target_id}")

        review = Review(
            id=new_id(),
            target=target,
            reviewer_id=principal.id,
            rating=request.rating,
            comment=comment,
            kind=kind,
            approved=kind.auto_approved,
            created_at=datetime.now(timezone.utc),
        )
        self.repository.add_review(review)
        logger.info(
            "Review %s submitted for %s %s (approved=%s)",
            review.id,
            kind.value,
            target.reference,
            review.approved,
        )
        return review

    # public listings

    def list_public(
        self,
        kind: Optional[ReviewKind] = None,
        target: Optional[TargetRef] = None,
        limit: int = 0,
    ) -> List[ReviewView]:
        views: List[ReviewView] = []
        for review in self.repository.list_reviews(kind=kind, target=target, approved=True):
            view = self._resolve(review)
            if view.reviewer_name is None or view.target_name is None:
                logger.warning(
                    "Skipping review %s: reviewer %s or target %s no longer exists",
                    review.id,
                    review.reviewer_id,
                    review.target.reference,
                )
                continue
            views.append(view)
            if limit and len(views) >= limit:
                break
        return views

    def list_for_provider(self, provider_id: str) -> List[ReviewView]:
        require_id(provider_id, "Service")
        if self.repository.get_provider(provider_id) is None:
            raise NotFoundError(f"Service not found for ID: {provider_id}")
        return self.list_public(
            ReviewKind.service, TargetRef(TargetKind.provider, provider_id)
        )

    def list_for_tourist(self, tourist_id: str) -> List[ReviewView]:
        require_id(tourist_id, "Tourist")
        if self.repository.get_tourist(tourist_id) is None:
            raise NotFoundError(f"Tourist not found for ID: {tourist_id}")
        return self.list_public(
            ReviewKind.tourist, TargetRef(TargetKind.tourist, tourist_id)
        )

    def list_for_product(self, name: str) -> List[ReviewView]:
        if not self.catalog.has_product(name):
            raise NotFoundError(f"Product not found: {name}")
        return self.list_public(ReviewKind.product, TargetRef(TargetKind.product, name))

    # moderation

    def list_admin(self) -> List[ReviewView]:
        return [self._resolve(r) for r in self.repository.list_reviews()]

    def approve(self, review_id: str) -> Review:
        require_id(review_id, "Review")
        review = self.repository.set_review_approved(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        logger.info("Review approved: %s", review_id)
        return review

    def delete(self, review_id: str) -> None:
        require_id(review_id, "Review")
        if not self.repository.delete_review(review_id):
            raise NotFoundError("Review not found")
        logger.info("Review deleted: %s", review_id)

    def view(self, review: Review) -> ReviewView:
        return self._resolve(review)

    def _resolve(self, review: Review) -> ReviewView:
        if review.kind == ReviewKind.tourist:
            reviewer = self.repository.get_provider(review.reviewer_id)
            reviewer_name = reviewer.service_name if reviewer else None
        else:
            reviewer = self.repository.get_tourist(review.reviewer_id)
            reviewer_name = reviewer.full_name if reviewer else None
        return ReviewView(
            review=review,
            reviewer_name=reviewer_name,
            target_name=self._target_name(review.target),
        )

    def _target_name(self, target: TargetRef) -> Optional[str]:
        if target.kind == TargetKind.product:
            return target.reference if self.catalog.has_product(target.reference) else None
        if target.kind == TargetKind.provider:
            provider = self.repository.get_provider(target.reference)
            return provider.service_name if provider else None
        tourist = self.repository.get_tourist(target.reference)
        return tourist.full_name if tourist else None
