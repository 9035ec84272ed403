import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse

from fitmeal.api.routes import admin, auth, customer, notifications, pdf, profile, progress, protocols, recipes, trainer
from fitmeal.events.web_observers import start as start_event_observers
from fitmeal.infra import paths

# Logging
logger = logging.getLogger("fitmeal_app")

APP_VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(title="FitMeal Planner API", version=APP_VERSION)

# Include routers
for module in (auth, trainer, admin, recipes, customer, progress, profile, pdf, protocols, notifications):
    app.include_router(module.router)

start_event_observers()
logger.info("Event observers started")


@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "version": APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# Uploaded files (profile images); the folder is looked up per request
@app.get("/uploads/profile-images/{filename}", include_in_schema=False)
def profile_image(filename: str):
    path = paths.profile_images_dir() / filename
    if path.name != filename or not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path)
