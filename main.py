from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI  # noqa: E402

from apis.assets_api import router as assets_router  # noqa: E402
from apis.meta_ads_api import router as meta_ads_router  # noqa: E402
from config.logging_config import setup_logging  # noqa: E402
from core.infrastructure.lifecycle import lifespan  # noqa: E402
from core.infrastructure.request_logging_middleware import RequestLoggingMiddleware  # noqa: E402
from core.metadata import APP_TITLE, VERSION  # noqa: E402
from exceptions.handlers import setup_exception_handlers  # noqa: E402

setup_logging()

app = FastAPI(title=APP_TITLE, version=VERSION, lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(meta_ads_router)
app.include_router(assets_router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}


setup_exception_handlers(app)
