# eteeap/services/google_oauth.py
import logging
from urllib.parse import urlencode

import httpx
from fastapi import HTTPException, status

from eteeap.config import settings
from eteeap.schemas.auth import GoogleProfile
from eteeap.utils.jwt_handler import create_state_token

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"


def authorization_url(signup: bool = False) -> str:
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": settings.GOOGLE_CALLBACK_URL,
        "response_type": "code",
        "scope": "openid profile email",
        "prompt": "select_account",
        "state": create_state_token({"signup": signup}),
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


async def fetch_profile(code: str) -> GoogleProfile:
    """Exchange the authorization code and read the account's userinfo."""
    try:
        async with httpx.AsyncClient(timeout=15.0) as client:
            token_response = await client.post(TOKEN_URL, data={
                "code": code,
                "client_id": settings.GOOGLE_CLIENT_ID,
                "client_secret": settings.GOOGLE_CLIENT_SECRET,
                "redirect_uri": settings.GOOGLE_CALLBACK_URL,
                "grant_type": "authorization_code",
            })
            token_response.raise_for_status()
            access_token = token_response.json().get("access_token")

            info_response = await client.get(
                USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            info_response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error(f"Google OAuth exchange failed: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Google authentication failed")

    data = info_response.json()
    return GoogleProfile(id=str(data.get("id", "")), email=data.get("email"), name=data.get("name"))
