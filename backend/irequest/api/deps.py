"""API Dependencies - Common dependencies for routes"""
import json
from typing import Any, Dict, List, Optional, Set, Type, TypeVar, Union, get_args, get_origin

from fastapi import Header, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config.settings import settings
from ..domain.errors import AuthenticationError, UserNotFoundError, ValidationError
from ..domain.models import AuthContext
from ..repositories.user_repo import UserRepository
from ..utils.jwt import get_jwt_validator

ModelT = TypeVar("ModelT", bound=BaseModel)


def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    """Bearer header first, then the login cookie"""
    if authorization:
        if authorization.startswith("Bearer "):
            return authorization[7:]
        return authorization
    return request.cookies.get(settings.auth_cookie_name)


async def get_current_user_dep(
    request: Request,
    authorization: Optional[str] = Header(None)
) -> AuthContext:
    """
    Dependency resolving the caller's AuthContext

    Validates the JWT, then loads the user and roles.

    Raises:
        AuthenticationError: Token missing/invalid or user gone
    """
    token = _extract_token(request, authorization)
    if not token:
        raise AuthenticationError("Token không tồn tại")

    user_id = get_jwt_validator().get_user_id(token)
    try:
        return UserRepository().get_auth_context(user_id)
    except UserNotFoundError:
        raise AuthenticationError("User không tồn tại", details={"user_id": user_id})


def _is_list_annotation(annotation: Any) -> bool:
    if get_origin(annotation) is Union:
        return any(_is_list_annotation(arg) for arg in get_args(annotation) if arg is not type(None))
    return annotation is list or get_origin(annotation) is list


def _list_fields(model: Type[BaseModel]) -> Set[str]:
    """Names and aliases of the schema fields that hold lists"""
    keys = set()
    for name, info in model.model_fields.items():
        if _is_list_annotation(info.annotation):
            keys.add(name)
            if info.alias:
                keys.add(info.alias)
    return keys


def _form_data(form: Any, list_keys: Set[str]) -> Dict[str, Any]:
    """
    Flatten a submitted form

    Repeated keys (checkbox groups, multi-selects) are kept whole for list
    fields; other fields take the last non-empty value.
    """
    data: Dict[str, Any] = {}
    for key in dict.fromkeys(form.keys()):
        values: List[Any] = [value for value in form.getlist(key) if value != ""]
        field = key[:-2] if key.endswith("[]") else key
        if field in list_keys:
            data[field] = values
        elif values:
            data[field] = values[-1]
    return data


async def read_payload(request: Request, model: Type[ModelT]) -> ModelT:
    """
    Parse a JSON or form-encoded body into a schema

    Missing bodies validate as {}. Schema failures become a 400 ValidationError.
    """
    content_type = request.headers.get("content-type", "").lower()
    data: Dict[str, Any] = {}
    if "application/json" in content_type:
        raw = await request.body()
        if raw.strip():
            try:
                data = json.loads(raw)
            except ValueError:
                raise ValidationError("Dữ liệu JSON không hợp lệ")
            if not isinstance(data, dict):
                raise ValidationError("Dữ liệu JSON không hợp lệ")
    elif "form" in content_type:
        form = await request.form()
        data = _form_data(form, _list_fields(model))

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(
            f"Dữ liệu không hợp lệ: {field}" if field else "Dữ liệu không hợp lệ",
            details={"errors": errors}
        )
