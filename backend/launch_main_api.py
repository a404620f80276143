#!/usr/bin/env python3
"""Launch the HandLog API server."""
import os

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))

    print("=" * 60)
    print(f"Starting HandLog API on http://{host}:{port}")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "handlog.main:app",
        app_dir="src",
        host=host,
        port=port,
        reload=True,
    )
