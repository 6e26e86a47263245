from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])

HEALTH_MESSAGE = "Lesson Plan Generator Backend is running and healthy."


@router.get("/", response_class=PlainTextResponse)
async def health_check():
    return HEALTH_MESSAGE
