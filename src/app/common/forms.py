"""Request body helpers shared by the feature routers.

HTML forms post repeated fields (checkbox groups, repeated table rows) as
several values under one name. ``form_to_raw`` keeps single fields as plain
strings and turns repeated ones into lists, so downstream code sees the same
"maybe array" shape whether the body was a form or JSON."""
from typing import Any, Dict

from fastapi import HTTPException, Request, status
from starlette.datastructures import FormData, UploadFile


def form_to_raw(form: FormData) -> Dict[str, Any]:
    raw: Dict[str, Any] = {}
    for key in form.keys():
        values = [v for v in form.getlist(key) if not isinstance(v, UploadFile)]
        if not values:
            continue
        raw[key] = values[0] if len(values) == 1 else values
    return raw


async def read_body(request: Request) -> Dict[str, Any]:
    """Reads a JSON object or a url-encoded/multipart form into a plain dict."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")
        if not isinstance(body, dict):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Expected a JSON object")
        return body
    return form_to_raw(await request.form())
