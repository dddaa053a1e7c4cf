#!/usr/bin/env python3
"""Run the development task store for taskboard."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "taskboard.api.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
