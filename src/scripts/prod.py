#!/usr/bin/env python3
"""Production server startup script."""

import os


def main():
    import uvicorn

    port = int(os.environ.get("PORT", "8080"))

    print(f"Starting venue enrichment server on port {port}...")
    print(f"Health check: http://0.0.0.0:{port}/health")
    print("-" * 50)

    # Single worker: the job-status store lives in process memory
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        workers=1,
        log_level="info",
    )


if __name__ == "__main__":
    main()
