"""
JSON endpoints for the competitions app.

Every endpoint:
- answers CORS preflight (OPTIONS) with an empty 200
- authenticates with a bearer token or the session
- returns 200 with a JSON body, or 400 with {"error": message}
"""

import json
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple

from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from . import catalog, dashboard, moderation, participation, seed, winners
from .auth import resolve_user
from .exceptions import AlreadyParticipating, CompetitionError, Unauthorized, ValidationError
from .models import Participation

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def _with_cors(response: HttpResponse) -> HttpResponse:
    for header, value in CORS_HEADERS.items():
        response[header] = value
    return response


def _json(data: Dict[str, Any], status: int = 200) -> HttpResponse:
    return _with_cors(JsonResponse(data, status=status, encoder=DjangoJSONEncoder))


def _parse_body(request: HttpRequest) -> Dict[str, Any]:
    if request.method == "GET":
        # Repeated query keys become lists, matching a JSON array body
        return {k: vs if len(vs) > 1 else vs[0] for k, vs in request.GET.lists()}
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def api_endpoint(
    auth: str = "user", methods: Tuple[str, ...] = ("POST",)
) -> Callable:
    """
    Wrap a handler `(user, payload) -> dict` as a JSON endpoint.

    Args:
        auth: "none", "user" or "staff".
        methods: Accepted HTTP methods besides OPTIONS.
    """

    def decorator(handler: Callable[[Any, Dict[str, Any]], Dict[str, Any]]):
        @csrf_exempt
        @wraps(handler)
        def view(request: HttpRequest) -> HttpResponse:
            if request.method == "OPTIONS":
                return _with_cors(HttpResponse(status=200))

            try:
                if request.method not in methods:
                    raise ValidationError(f"Method {request.method} not allowed")
                user = resolve_user(request)
                if auth != "none" and user is None:
                    raise Unauthorized()
                if auth == "staff" and not user.is_staff:
                    raise Unauthorized("Admin access required")
                payload = _parse_body(request)
                return _json(handler(user, payload))
            except CompetitionError as e:
                logger.info("%s rejected: %s", handler.__name__, e.message)
                body: Dict[str, Any] = {"error": e.message}
                if e.errors:
                    body["errors"] = e.errors
                return _json(body, status=400)
            except DatabaseError as e:
                logger.exception("%s failed with a storage error", handler.__name__)
                return _json({"error": str(e)}, status=400)

        return view

    return decorator


def _require(payload: Dict[str, Any], *keys: str, message: Optional[str] = None) -> None:
    if any(payload.get(k) in (None, "") for k in keys):
        raise ValidationError(message or f"Missing required fields: {', '.join(keys)}")


# Moderation and winner selection


@api_endpoint(auth="staff")
def approve_submission(user, payload):
    _require(payload, "submission_id", "status", message="Submission ID and status are required")
    status = payload["status"]
    moderation.set_status(payload["submission_id"], status)
    return {"success": True, "message": f"Submission {status} successfully"}


@api_endpoint(auth="staff")
def get_submissions(user, payload):
    _require(payload, "competition_id", message="Competition ID is required")
    return {"submissions": winners.list_candidates(payload["competition_id"])}


@api_endpoint(auth="staff", methods=("GET", "POST"))
def list_eligible_competitions(user, payload):
    return {"competitions": [c.to_dict() for c in winners.list_eligible_competitions()]}


@api_endpoint(auth="staff")
def select_winner(user, payload):
    _require(
        payload,
        "competition_id",
        "submission_id",
        message="Competition ID and submission ID are required",
    )
    competition = winners.select_winner(payload["competition_id"], payload["submission_id"])
    return {
        "success": True,
        "message": "Winner selected successfully",
        "competition": competition.to_dict(),
    }


# Participation


@api_endpoint(auth="user")
def enter_competition(user, payload):
    _require(payload, "competitionId", message="Missing competition ID")
    try:
        entry = participation.enter(user, payload["competitionId"])
    except AlreadyParticipating as e:
        existing = Participation.objects.get(user=user, competition_id=payload["competitionId"])
        return {"message": e.message, "status": existing.status}
    return {"message": "Successfully entered competition", "data": entry.to_dict()}


@api_endpoint(auth="user")
def toggle_saved_competition(user, payload):
    _require(payload, "competitionId", "action", message="Missing required fields")
    return participation.toggle_saved(user, payload["competitionId"], payload["action"])


@api_endpoint(auth="user")
def update_progress(user, payload):
    _require(payload, "participation_id", "progress")
    entry = participation.update_progress(user, payload["participation_id"], payload["progress"])
    return {"success": True, "participation": entry.to_dict()}


@api_endpoint(auth="user")
def submit_entry(user, payload):
    _require(payload, "competition_id", message="Competition ID is required")
    submission = moderation.submit(user, payload["competition_id"], payload.get("content", ""))
    return {"success": True, "submission": submission.to_dict()}


@api_endpoint(auth="user", methods=("GET", "POST"))
def get_user_dashboard(user, payload):
    return dashboard.get_dashboard(user)


# Catalog


@api_endpoint(auth="none", methods=("GET", "POST"))
def list_competitions(user, payload):
    filters = catalog.CompetitionFilter.from_payload(payload)
    competitions = catalog.list_competitions(filters, sort=payload.get("sort") or "newest")
    return {"competitions": [c.to_dict() for c in competitions]}


@api_endpoint(auth="none", methods=("GET", "POST"))
def get_competition(user, payload):
    _require(payload, "competition_id", message="Competition ID is required")
    return {"competition": catalog.get(payload["competition_id"]).to_dict()}


@api_endpoint(auth="staff")
def create_competition(user, payload):
    competition = catalog.create(payload)
    return {"success": True, "competition": competition.to_dict()}


@api_endpoint(auth="staff")
def update_competition(user, payload):
    _require(payload, "competition_id", message="Competition ID is required")
    data = {k: v for k, v in payload.items() if k != "competition_id"}
    competition = catalog.update(payload["competition_id"], data)
    return {"success": True, "competition": competition.to_dict()}


@api_endpoint(auth="staff")
def archive_competition(user, payload):
    _require(payload, "competition_id", message="Competition ID is required")
    catalog.archive(payload["competition_id"])
    return {"success": True, "message": "Competition archived successfully"}


@api_endpoint(auth="staff")
def delete_competition(user, payload):
    _require(payload, "competition_id", message="Competition ID is required")
    catalog.delete(payload["competition_id"])
    return {"success": True, "message": "Competition deleted successfully"}


@api_endpoint(auth="staff")
def seed_competitions(user, payload):
    return seed.seed_competitions()
