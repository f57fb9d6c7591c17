from fastapi import APIRouter, Depends, status

from tourbook.api import get_auth_service
from tourbook.models.schemas import (
    LoginRequest,
    ProviderSignupRequest,
    TokenResponse,
    TouristSignupRequest,
)
from tourbook.services.auth_service import AuthService

router = APIRouter()


@router.post("/login", response_model=TokenResponse, response_model_exclude_none=True)
def login(request: LoginRequest, auth: AuthService = Depends(get_auth_service)) -> TokenResponse:
    return auth.login(request)


@router.post(
    "/tourist/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
def tourist_signup(
    request: TouristSignupRequest, auth: AuthService = Depends(get_auth_service)
) -> TokenResponse:
    return auth.signup_tourist(request)


@router.post(
    "/provider/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
)
def provider_signup(
    request: ProviderSignupRequest, auth: AuthService = Depends(get_auth_service)
) -> TokenResponse:
    return auth.signup_provider(request)
