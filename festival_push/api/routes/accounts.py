"""Route letting a signed-in user delete their own Firebase Auth account."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from festival_push.api.deps import get_account_admin
from festival_push.core.exceptions import error_payload
from festival_push.core.firebase import FirebaseAccountAdmin

logger = logging.getLogger(__name__)

router = APIRouter()

_BEARER_PREFIX = "Bearer "


@router.api_route("/deleteAuthAccount", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def delete_auth_account(request: Request, authorization: str | None = Header(default=None), admin: FirebaseAccountAdmin = Depends(get_account_admin)) -> JSONResponse:  # noqa: B008
  """Verify the caller's ID token and delete the Firebase Auth user it belongs to."""
  if request.method != "POST":
    return JSONResponse(status_code=status.HTTP_405_METHOD_NOT_ALLOWED, content=error_payload("Method Not Allowed"))

  if not authorization or not authorization.startswith(_BEARER_PREFIX):
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=error_payload("Missing or invalid Authorization header"))

  id_token = authorization[len(_BEARER_PREFIX) :].strip()

  try:
    decoded_token = await run_in_threadpool(admin.verify_id_token, id_token)
    uid = decoded_token["uid"]
    logger.info("Deleting Firebase Auth user uid=%s", uid)
    await run_in_threadpool(admin.delete_user, uid)
  except Exception as exc:  # noqa: BLE001
    # Every failure, including a token without a uid, is reported as unauthorized.
    logger.error("deleteAuthAccount failed error_type=%s error=%s", type(exc).__name__, exc)
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=error_payload(str(exc) or "Unauthorized"))

  return JSONResponse(status_code=status.HTTP_200_OK, content={"success": True, "message": "User deleted successfully"})
