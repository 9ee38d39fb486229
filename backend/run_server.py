# run_server.py
import uvicorn
from app.main import app

if __name__ == "__main__":
    # The map client expects the API on port 3000
    uvicorn.run(
        app,
        host="127.0.0.1",
        port=3000,
        log_level="info",
    )
