from fastapi import APIRouter
from datetime import datetime

router = APIRouter()


@router.get("/")
def root():
    return {"message": "RIFT'26 venue API is running"}


@router.get("/health")
def health_check():
    return {"status": "healthy"}


@router.get("/routes")
def list_routes():
    return {
        "generated_at": datetime.utcnow().isoformat() + "Z",
        "routes": [
            {"method": "GET", "path": "/"},
            {"method": "GET", "path": "/health"},
            {"method": "GET", "path": "/routes"},
            {"method": "GET", "path": "/public/viewroom/{city}"},
            {"method": "GET", "path": "/public/viewroom/{city}/{room_name}"},
            {"method": "GET", "path": "/public/viewroom/{city}/{room_name}/render"},
        ],
    }
