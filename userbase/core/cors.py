from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from userbase.core.settings import Settings


def add_cors_middleware(app: FastAPI, settings: Settings) -> None:
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed requests against a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )
