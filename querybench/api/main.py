from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from querybench.core.constants import API_VERSION, CORS_ORIGINS
from querybench.session.routes import router as session_router
from querybench.utils.log_utils import get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="QueryBench API", version=API_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"status": "QueryBench API is running", "version": API_VERSION}

    app.include_router(session_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
