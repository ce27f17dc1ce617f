from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from lyricsnap.config import settings
from lyricsnap.services.auth_service import build_authorize_url

router = APIRouter()


@router.get("/login")
async def login() -> RedirectResponse:
    """Send the browser to Spotify's implicit-grant authorize page."""
    return RedirectResponse(build_authorize_url(settings), status_code=302)
