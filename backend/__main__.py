"""
Entry point for running the upload proxy with `python -m backend`.

Part of HQ-18: Upload proxy
"""
import uvicorn

if __name__ == "__main__":
    uvicorn.run("backend.main:app", host="0.0.0.0", port=3001, reload=True)
