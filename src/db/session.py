from sqlmodel import SQLModel, Session, create_engine
from src.utils.config import settings

# IMPORTANTE: Importe os modelos aqui para registrá-los no SQLModel
from src.models.flashcard import Flashcard
from src.models.generation import GenerationSession, GenerationCard
from src.models.analytics_event import AnalyticsEvent

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    connect_args=connect_args,
    echo=False
)

def init_db():
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session
