"""Administrative endpoints: account management and ledger maintenance."""

from __future__ import annotations

from flask import Blueprint, request

from chirp.api.deps import json_response, parse_pagination, require_admin, service_context, timing
from chirp.core.security import get_auth_service
from chirp.schemas import UserAdminUpdateSchema, UserPrivateSchema, build_meta
from chirp.schemas.user import UserFilterSchema
from chirp.services._shared.errors import ServiceError
from chirp.services.identity.dto import UserAdminUpdateIn
from chirp.services.identity.service import IdentityService

bp = Blueprint("admin", __name__, url_prefix="/admin")

user_schema = UserPrivateSchema()
user_list_schema = UserPrivateSchema(many=True)
user_filter_schema = UserFilterSchema()
admin_update_schema = UserAdminUpdateSchema()


@bp.get("/users")
@require_admin
@timing
def list_users():
    """Return paginated accounts, filterable by exact username or email."""

    filters = user_filter_schema.load(request.args)
    pagination = parse_pagination()
    service = IdentityService(ctx=service_context())
    try:
        items, meta = service.list_users(pagination, filters=filters)
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    body = {
        "data": user_list_schema.dump(items),
        "meta": build_meta(total=meta.total, page=meta.page, limit=meta.limit),
    }
    return json_response(body)


@bp.patch("/users/<int:user_id>")
@require_admin
@timing
def update_user(user_id: int):
    """Toggle ``is_active``/``is_verified`` or change the role of an account."""

    payload = admin_update_schema.load(request.get_json(silent=True) or {})
    service = IdentityService(ctx=service_context())
    try:
        user = service.admin_update(user_id, UserAdminUpdateIn(**payload))
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"data": user_schema.dump(user)})


@bp.post("/revocations/sweep")
@require_admin
@timing
def sweep_revocations():
    """Drop expired entries from the revocation ledger."""

    service = get_auth_service()
    try:
        removed = service.sweep_expired()
    except ServiceError as exc:
        raise service.translate_exceptions(exc) from exc
    return json_response({"removed": removed})
