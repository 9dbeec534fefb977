import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from src.db.session import init_db
from src.routes import analytics, auth, flashcards, generation, smart
from src.routes.errors import register_error_handlers
from src.utils.config import settings
from src.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

# Evento para configurar logging e criar tabelas ao iniciar
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    init_db()
    logger.info("Flashcards API started")
    yield

app = FastAPI(title="Flashcards API", lifespan=lifespan)
register_error_handlers(app)

app.include_router(auth.router)
# generation antes de flashcards: /flashcards/generate não pode cair em /flashcards/{card_id}
app.include_router(generation.router)
app.include_router(flashcards.router)
app.include_router(smart.router)
app.include_router(analytics.router)

@app.get("/")
def read_root():
    return {"status": "Flashcards API is running 🚀"}
