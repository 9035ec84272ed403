import uvicorn

from fitmeal.api.api_run import app
from fitmeal.utilities.config import APP_HOST, APP_PORT, configure_logging


if __name__ == "__main__":
    configure_logging()
    local_url = f"http://localhost:{APP_PORT}"
    # Print a friendly message that points to the URL you can open in a browser
    print(f"FitMeal API running on {local_url} (Press CTRL+C to quit)")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
