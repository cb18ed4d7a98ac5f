import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root before the app reads its config
load_dotenv(Path(__file__).resolve().parent / ".env")

from tagfield import create_app  # noqa: E402

app = create_app(os.environ.get("FLASK_ENV"))

if __name__ == "__main__":
    app.run(debug=app.debug, port=int(os.environ.get("PORT", "8080")))
