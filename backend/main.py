from dotenv import load_dotenv
load_dotenv()  # Load environment variables before importing config classes

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from models.base import Base
from db.session import engine
from api.v1.api_router import api_router
from core.config import CorsConfigs, HostingConfigs
from core.logging_config import setup_logging
from core.rate_limit import setup_rate_limiting

# Initialize database
Base.metadata.create_all(bind=engine)

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(title="reqguard backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CorsConfigs.ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_rate_limiting(app)

# Include API router
app.include_router(api_router)


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting reqguard backend on %s", HostingConfigs.URL)
    uvicorn.run("main:app", host=HostingConfigs.HOST, port=HostingConfigs.PORT, reload=False)
