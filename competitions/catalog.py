"""
Competition catalog: admin CRUD and public filtered listing.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from django.db.models import Q
from django.utils import timezone

from .exceptions import InvalidTransition, NotFound, ValidationError
from .forms import CompetitionForm
from .models import Competition, CompetitionStatus

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    "newest": ["-created_at", "-id"],
    "oldest": ["created_at", "id"],
    "deadline": ["deadline", "id"],
}


@dataclass
class CompetitionFilter:
    """Listing filters. Empty lists place no constraint."""

    search: str = ""
    categories: List[str] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    requirements: List[str] = field(default_factory=list)
    statuses: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CompetitionFilter":
        def as_list(key: str) -> List[str]:
            value = payload.get(key) or []
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list):
                raise ValidationError(f"'{key}' must be a list")
            return [str(v) for v in value]

        return cls(
            search=str(payload.get("search") or ""),
            categories=as_list("categories"),
            types=as_list("types"),
            requirements=as_list("requirements"),
            statuses=as_list("statuses"),
        )


def _raise_form_errors(form: CompetitionForm) -> None:
    errors = {name: [e["message"] for e in errs] for name, errs in form.errors.get_json_data().items()}
    first = next(iter(errors.values()))[0]
    raise ValidationError(first, errors=errors)


def get(competition_id: Any) -> Competition:
    try:
        return Competition.objects.get(id=competition_id)
    except (Competition.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Competition {competition_id} not found")


def create(data: Dict[str, Any]) -> Competition:
    """Validate and persist a new competition."""
    form = CompetitionForm(data)
    if not form.is_valid():
        _raise_form_errors(form)
    competition = form.save()
    logger.info("Created competition %s (%s)", competition.id, competition.title)
    return competition


def _form_data(competition: Competition) -> Dict[str, Any]:
    data = {name: getattr(competition, name) for name in CompetitionForm.Meta.fields}
    data["deadline"] = timezone.localtime(competition.deadline).date().isoformat()
    return data


def update(competition_id: Any, data: Dict[str, Any]) -> Competition:
    """Merge `data` over the stored fields, then validate and save."""
    competition = get(competition_id)
    merged = {**_form_data(competition), **data}
    form = CompetitionForm(merged, instance=competition)
    if not form.is_valid():
        _raise_form_errors(form)
    competition = form.save()
    logger.info("Updated competition %s", competition.id)
    return competition


def archive(competition_id: Any) -> Competition:
    competition = get(competition_id)
    if competition.status != CompetitionStatus.ACTIVE:
        raise InvalidTransition(
            f"Cannot archive a competition that is already {competition.status}"
        )
    competition.status = CompetitionStatus.ARCHIVED
    competition.save(update_fields=["status", "updated_at"])
    logger.info("Archived competition %s", competition.id)
    return competition


def delete(competition_id: Any) -> None:
    competition = get(competition_id)
    competition.delete()
    logger.info("Deleted competition %s", competition_id)


def list_competitions(
    filters: Optional[CompetitionFilter] = None, sort: str = "newest"
) -> List[Competition]:
    """
    List competitions matching every active filter.

    Args:
        filters: Search text plus category, type, requirement and status
            membership lists.
        sort: One of "newest", "oldest" or "deadline".

    Returns:
        Matching competitions in the requested order.
    """
    filters = filters or CompetitionFilter()
    if sort not in SORT_ORDERS:
        raise ValidationError(f"Unknown sort order: {sort}")

    qs = Competition.objects.all()
    search = filters.search.strip()
    if search:
        qs = qs.filter(
            Q(title__icontains=search)
            | Q(description__icontains=search)
            | Q(short_description__icontains=search)
        )
    if filters.categories:
        qs = qs.filter(category__in=filters.categories)
    if filters.types:
        qs = qs.filter(type__in=filters.types)
    if filters.statuses:
        qs = qs.filter(status__in=filters.statuses)

    competitions = list(qs.order_by(*SORT_ORDERS[sort]))

    # Token membership is not expressible as a plain column lookup
    if filters.requirements:
        wanted = set(filters.requirements)
        competitions = [c for c in competitions if wanted & set(c.requirement_tokens())]

    return competitions
