"""
Driver endpoints.

Thin HTTP adapter over DriverService; the service owns caching.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from caching_api.schemas import DriverCreate, DriverRead
from caching_api.services import DriverService

from ..dependencies import get_driver_service

router = APIRouter(prefix="/drivers", tags=["drivers"])


@router.get("", response_model=list[DriverRead])
def list_drivers(service: DriverService = Depends(get_driver_service)):
    """List all drivers."""
    return service.list_drivers()


@router.get("/{driver_id}", response_model=DriverRead)
def get_driver(driver_id: int, service: DriverService = Depends(get_driver_service)):
    """Get a single driver."""
    driver = service.get_driver(driver_id)
    if driver is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Driver not found")
    return driver


@router.post("", response_model=DriverRead, status_code=status.HTTP_201_CREATED)
def add_driver(payload: DriverCreate, service: DriverService = Depends(get_driver_service)):
    """Create a driver and return it with its assigned ID."""
    return service.add_driver(payload)


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_driver(driver_id: int, service: DriverService = Depends(get_driver_service)):
    """Delete a driver."""
    if not service.remove_driver(driver_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Driver not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
