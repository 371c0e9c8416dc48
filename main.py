#!/usr/bin/env python3
"""
Main entry point for the Bringo Edu backend
This file allows Render to run the FastAPI app from the root directory
"""

# Import the FastAPI app from backend
from bringo_edu.main import app

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=app.state.settings.port, reload=True)
