"""
Entry point to run the web app with uvicorn.
"""
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv(override=True)


if __name__ == "__main__":
    uvicorn.run(
        "app.api:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3001")),
    )
