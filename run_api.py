#!/usr/bin/env python3
"""
Script to run the Natural Remedy Bridge API.
"""

import uvicorn
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.settings import settings

if __name__ == "__main__":
    print("Starting Natural Remedy Bridge API...")
    print(f"API will be available at: http://localhost:{settings.api_port}")
    print(f"API Documentation: http://localhost:{settings.api_port}/docs")
    print("\nPress Ctrl+C to stop the server")

    uvicorn.run(
        "natural_remedy_bridge.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        access_log=True,
        reload=settings.debug
    )
