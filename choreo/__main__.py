from choreo.main import app  # pragma: no cover

# Allows `python -m choreo` to serve the choreography API directly.
if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
