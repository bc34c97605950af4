#!/usr/bin/env python3
"""
Start the RPC API server with uvicorn

Log level and sinks are configured by api.main.create_app from LOG_LEVEL.
"""
import uvicorn


if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True  # auto reload during development
    )
