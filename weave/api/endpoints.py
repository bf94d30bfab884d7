from fastapi import APIRouter

from weave.api.routes import chat, health, linear, memory


router = APIRouter()

router.include_router(memory.router)
router.include_router(chat.router)
router.include_router(linear.router)
router.include_router(health.router)
