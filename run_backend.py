import uvicorn

from dealership.core.config import settings

if __name__ == "__main__":
    print(f"Starting {settings.APP_NAME} ({settings.STORE_BACKEND} store)...")
    uvicorn.run("dealership.main:app", host="127.0.0.1", port=8000, reload=settings.DEBUG)
