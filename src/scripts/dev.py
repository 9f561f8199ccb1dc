#!/usr/bin/env python3
"""Development server startup script."""

import subprocess


def main():
    cmd = ["uvicorn", "main:app", "--app-dir", "src", "--reload", "--host", "0.0.0.0", "--port", "8080", "--log-level", "debug"]

    print("Starting venue enrichment dev server...")
    print(f"Command: {' '.join(cmd)}")
    print("Server at: http://localhost:8080")
    print("API docs at: http://localhost:8080/docs")
    print("-" * 50)

    subprocess.run(cmd)


if __name__ == "__main__":
    main()
